"""High level access to Google Cloud Datastore.

DatastoreService ties together key/entity building, the retrying executor,
the query builder and pagination.

Example:
    service = DatastoreService()
    service.save_full(EntityBuilder('User', 'u1', {'name': 'Ann'}))
    user = service.get_single(service.create_key('User', 'u1'))

    page = service.invoke_paginated_query(Queryable('User', limit=50))
    while page.entities:
        handle(page.entities)
        page = page.next_page()
"""

from typing import Any, Callable, List, Optional, Sequence, Union

from google.cloud import datastore

from cloudstore.datastore import models
from cloudstore.datastore import pagination
from cloudstore.datastore.connection import ConnectionManager
from cloudstore.datastore.executor import ResilientExecutor
from cloudstore.datastore.query import QueryBuilder
from cloudstore.datastore.query import builder_from_queryable
from cloudstore.datastore.query import run_query


class DatastoreService:
    """Typed, retrying access to one Datastore project."""

    def __init__(self, connections: Optional[ConnectionManager] = None,
                 executor: Optional[ResilientExecutor] = None):
        """Initialize the service.

        Args:
            connections: ConnectionManager to use.  A default one, reading
                the settings, is created when omitted.
            executor: Executor wrapping remote calls.  Defaults to a
                ResilientExecutor over connections.
        """
        self.connections = connections or ConnectionManager()
        self.executor = executor or ResilientExecutor(self.connections)

    # Keys and entities

    def create_key(self, kind, id) -> datastore.Key:
        return models.create_key(self.connections.current(), kind, id)

    def build_entity(self, key: datastore.Key, data,
                     exclude_from_indexes: Optional[Sequence[str]] = None
                     ) -> datastore.Entity:
        return models.build_entity(key, data, exclude_from_indexes)

    # Writes

    def save_full(self, builder: models.EntityBuilder) -> None:
        """Build the key and entity described by builder, then save it."""
        entity = models.entity_from_builder(self.connections.current(),
                                            builder)
        return self.save(entity)

    def save(self, entities: Union[datastore.Entity,
                                   Sequence[datastore.Entity]]) -> None:
        """Saves one entity or a sequence of entities."""
        if isinstance(entities, datastore.Entity):
            return self.executor.execute(
                lambda client: client.put(entities), "save")
        entities = list(entities)
        return self.executor.execute(
            lambda client: client.put_multi(entities), "save")

    def delete(self, keys: Union[datastore.Key,
                                 Sequence[datastore.Key]]) -> None:
        """Deletes one key or a sequence of keys.

        Unlike every other remote call this is not retried.
        """
        client = self.connections.current()
        if isinstance(keys, datastore.Key):
            return client.delete(keys)
        return client.delete_multi(list(keys))

    # Reads

    def get(self, keys: Union[datastore.Key,
                              Sequence[datastore.Key]]) -> List[Any]:
        """Fetch one key or a sequence of keys.

        Returns:
            A list with the entities found; missing keys are left out.
        """
        if isinstance(keys, datastore.Key):
            def get_one(client):
                entity = client.get(keys)
                return [] if entity is None else [entity]
            return self.executor.execute(get_one, "get")
        keys = list(keys)
        return self.executor.execute(
            lambda client: client.get_multi(keys), "get")

    def get_single(self, key: datastore.Key) -> Optional[Any]:
        """Returns the entity stored under key, or None."""
        found = self.get(key)
        return found[0] if found else None

    # Queries

    def query(self, kind,
              processor: Optional[Callable[[QueryBuilder],
                                           QueryBuilder]] = None,
              options: Optional[dict] = None):
        """Run a query over kind.

        Args:
            kind: Kind to query, a str or str-valued Enum.
            processor: Optional callable receiving a fresh QueryBuilder and
                returning the builder to run; use it to add filters, orders,
                etc.
            options: Extra keyword arguments for Query.fetch().

        Returns:
            The raw (entities, info) pair from run_query().
        """
        builder = QueryBuilder(kind)
        if processor is not None:
            builder = processor(builder)
            if not isinstance(builder, QueryBuilder):
                raise TypeError("Query processor must return a QueryBuilder, "
                                "got %r" % (builder,))
        return self.executor.execute(
            lambda client: run_query(client, builder, options),
            "query on %s" % builder.kind)

    def get_all(self, kind):
        """Every entity of kind, as a raw (entities, info) pair."""
        return self.query(kind)

    def invoke_query(self, queryable: models.Queryable) -> models.QueryResult:
        builder = builder_from_queryable(queryable)
        raw = self.query(queryable.kind, lambda _: builder)
        return models.QueryResult.from_raw(raw)

    def invoke_paginated_query(self, queryable: models.Queryable
                               ) -> pagination.PaginatedQueryResult:
        return pagination.first_page(queryable, self.invoke_query)

    def iter_pages(self, queryable: models.Queryable):
        """Yields pages of queryable until the results run out."""
        yield from pagination.iter_pages(
            self.invoke_paginated_query(queryable))

    def iter_entities(self, queryable: models.Queryable):
        """Yields every entity matching queryable, page by page."""
        yield from pagination.iter_entities(
            self.invoke_paginated_query(queryable))
