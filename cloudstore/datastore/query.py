"""Composable Datastore queries.

A QueryBuilder records named clauses in the order they were added.  Nothing
touches the backend until build() turns the clauses into a native
google.cloud.datastore Query plus the arguments for Query.fetch().
"""

import collections
import logging

from google.cloud.datastore.query import PropertyFilter

from cloudstore.datastore import models


Clause = collections.namedtuple('Clause', ['name', 'args'])


def _check_count(name, value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError("%s must be a non-negative integer, got %r"
                         % (name, value))


def _apply_limit(query, fetch_kwargs, limit):
    fetch_kwargs['limit'] = limit


def _apply_offset(query, fetch_kwargs, offset):
    fetch_kwargs['offset'] = offset


def _apply_filter(query, fetch_kwargs, prop, operator, value):
    query.add_filter(filter=PropertyFilter(prop, operator.value, value))


def _apply_order(query, fetch_kwargs, prop, direction):
    if direction is models.Direction.DESCENDING:
        prop = '-' + prop
    query.order = list(query.order) + [prop]


def _apply_start(query, fetch_kwargs, cursor):
    fetch_kwargs['start_cursor'] = cursor


def _apply_group_by(query, fetch_kwargs, fields):
    query.distinct_on = list(fields)


def _apply_select(query, fetch_kwargs, fields):
    query.projection = list(fields)


_APPLIERS = {
    'limit': _apply_limit,
    'offset': _apply_offset,
    'filter': _apply_filter,
    'order': _apply_order,
    'start': _apply_start,
    'group_by': _apply_group_by,
    'select': _apply_select,
}


class QueryBuilder(object):
    """Chainable query description for one kind.

    Example:
        builder = (QueryBuilder('User')
                   .filter('age', '>=', 18)
                   .order('age', 'desc')
                   .limit(10))
        query, fetch_kwargs = builder.build(client)
    """

    def __init__(self, kind):
        self.kind = models.kind_name(kind)
        self._clauses = []

    def __repr__(self):
        return 'QueryBuilder(%r, %r)' % (self.kind, self._clauses)

    @property
    def clauses(self):
        """The clauses added so far, in order."""
        return list(self._clauses)

    def _add(self, name, *args):
        self._clauses.append(Clause(name, args))
        return self

    def limit(self, limit):
        _check_count('limit', limit)
        return self._add('limit', limit)

    def offset(self, offset):
        _check_count('offset', offset)
        return self._add('offset', offset)

    def filter(self, prop, operator, value):
        return self._add('filter', prop, models.Operator.coerce(operator),
                         value)

    def order(self, prop, direction=models.Direction.ASCENDING):
        return self._add('order', prop, models.Direction.coerce(direction))

    def start(self, cursor):
        """Resume the query at an opaque cursor from an earlier run."""
        return self._add('start', cursor)

    def group_by(self, fields):
        if isinstance(fields, str):
            fields = [fields]
        return self._add('group_by', tuple(fields))

    def select(self, fields):
        """Turn this into a projection query returning only fields."""
        return self._add('select', tuple(fields))

    def build(self, client):
        """Returns (query, fetch_kwargs) for the given client."""
        query = client.query(kind=self.kind)
        fetch_kwargs = {}
        for clause in self._clauses:
            _APPLIERS[clause.name](query, fetch_kwargs, *clause.args)
        return query, fetch_kwargs


def builder_from_queryable(queryable):
    """Apply the fields set on a Queryable, in a fixed order."""
    builder = QueryBuilder(queryable.kind)
    if queryable.limit:
        builder.limit(queryable.limit)
    if queryable.offset:
        builder.offset(queryable.offset)
    for f in queryable.filters:
        builder.filter(f.property, f.operator, f.value)
    if queryable.order:
        builder.order(*queryable.order)
    if queryable.cursor:
        builder.start(queryable.cursor)
    if queryable.group_by:
        builder.group_by(queryable.group_by)
    if queryable.projection:
        builder.select(queryable.projection)
    return builder


def run_query(client, builder, options=None):
    """Run a built query once and drain its results.

    Args:
        client: Datastore client to run the query with.
        builder: QueryBuilder describing the query.
        options: Extra keyword arguments for Query.fetch(), e.g.
            {'eventual': True} or {'timeout': 30}.

    Returns:
        An (entities, info) pair.  info holds "more_results", a
        ResultsStatus, and "end_cursor", the cursor to resume from or None
        once the backend reports there is nothing left.
    """
    query, fetch_kwargs = builder.build(client)
    fetch_kwargs.update(options or {})
    iterator = query.fetch(client=client, **fetch_kwargs)
    entities = list(iterator)
    cursor = iterator.next_page_token
    if isinstance(cursor, bytes):
        cursor = cursor.decode('ascii')
    if cursor:
        status = models.ResultsStatus.MORE_RESULTS
    else:
        cursor = None
        status = models.ResultsStatus.NO_MORE_RESULTS
    logging.debug("Query on %s returned %d entities (%s)",
                  builder.kind, len(entities), status.value)
    return entities, {'more_results': status, 'end_cursor': cursor}
