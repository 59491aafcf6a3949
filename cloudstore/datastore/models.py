"""Keys, entities and query descriptions for Cloud Datastore.

Everything in this module is pure: building a key or an entity never talks
to the backend.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from google.cloud import datastore


def kind_name(kind) -> str:
    """Resolve a kind given as a string or a string-valued Enum member."""
    if isinstance(kind, enum.Enum):
        kind = kind.value
    if not isinstance(kind, str):
        raise TypeError("Kind must be a str or a str-valued Enum, got %r"
                        % (kind,))
    if not kind:
        raise ValueError("Kind must not be empty")
    return kind


def create_key(client: datastore.Client, kind, id) -> datastore.Key:
    """Creates the key of one record from its (kind, id) pair."""
    return client.key(kind_name(kind), id)


def build_entity(key: datastore.Key, data: Dict[str, Any],
                 exclude_from_indexes: Optional[Sequence[str]] = None
                 ) -> datastore.Entity:
    """Assemble a storable entity.

    Args:
        key: Key of the record
        data: Properties to store
        exclude_from_indexes: Property names the store should not index,
            e.g. large text fields

    Returns:
        A datastore.Entity holding a copy of data
    """
    entity = datastore.Entity(
        key=key, exclude_from_indexes=tuple(exclude_from_indexes or ()))
    entity.update(data)
    return entity


@dataclass(frozen=True)
class EntityBuilder:
    """Everything needed to save a record whose key is not built yet."""

    kind: Any
    id: Any
    data: Dict[str, Any]
    exclude_from_indexes: Tuple[str, ...] = ()


def entity_from_builder(client: datastore.Client,
                        builder: EntityBuilder) -> datastore.Entity:
    key = create_key(client, builder.kind, builder.id)
    return build_entity(key, builder.data, builder.exclude_from_indexes)


class Operator(enum.Enum):
    """Comparison operators supported by property filters."""

    EQUAL = '='
    NOT_EQUAL = '!='
    LESS_THAN = '<'
    LESS_THAN_OR_EQUAL = '<='
    GREATER_THAN = '>'
    GREATER_THAN_OR_EQUAL = '>='
    IN = 'IN'
    NOT_IN = 'NOT_IN'

    @classmethod
    def coerce(cls, value) -> 'Operator':
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError("Unknown filter operator %r" % (value,))


class Direction(enum.Enum):
    ASCENDING = 'asc'
    DESCENDING = 'desc'

    @classmethod
    def coerce(cls, value) -> 'Direction':
        """Accepts a Direction, 'asc'/'desc' or a {'descending': bool} dict."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ASCENDING
        if isinstance(value, dict):
            return cls.DESCENDING if value.get('descending') else cls.ASCENDING
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError("Unknown order direction %r" % (value,))


@dataclass(frozen=True)
class QueryableFilter:
    property: str
    operator: Operator
    value: Any

    def __post_init__(self):
        object.__setattr__(self, 'operator', Operator.coerce(self.operator))


@dataclass(frozen=True)
class Queryable:
    """Declarative description of a query.

    Only the fields that are set are applied.  Once a cursor is set it alone
    decides where the query resumes.
    """

    kind: Any
    limit: Optional[int] = None
    offset: Optional[int] = None
    filters: Tuple[QueryableFilter, ...] = ()
    order: Optional[Tuple[str, Direction]] = None
    cursor: Optional[str] = None
    group_by: Union[str, Sequence[str], None] = None
    projection: Optional[Sequence[str]] = None

    def __post_init__(self):
        kind_name(self.kind)
        filters = tuple(
            f if isinstance(f, QueryableFilter) else QueryableFilter(*f)
            for f in self.filters or ())
        object.__setattr__(self, 'filters', filters)
        if self.group_by is not None and not isinstance(self.group_by, str):
            object.__setattr__(self, 'group_by', tuple(self.group_by))
        if self.projection is not None:
            object.__setattr__(self, 'projection', tuple(self.projection))
        if self.order is not None:
            prop, direction = self.order
            object.__setattr__(self, 'order',
                               (prop, Direction.coerce(direction)))

    def with_cursor(self, cursor: str) -> 'Queryable':
        """Returns a copy resuming at cursor, with the offset dropped."""
        return replace(self, cursor=cursor, offset=None)


class ResultsStatus(enum.Enum):
    MORE_RESULTS = 'MORE_RESULTS'
    NO_MORE_RESULTS = 'NO_MORE_RESULTS'
    NOT_FINISHED = 'NOT_FINISHED'
    NO_RESULTS = 'NO_RESULTS'


@dataclass
class QueryResult:
    entities: List[Any] = field(default_factory=list)
    results_status: ResultsStatus = ResultsStatus.NO_RESULTS
    cursor: Optional[str] = None

    @classmethod
    def from_raw(cls, raw) -> 'QueryResult':
        """Normalize the (entities, info) pair returned by a query run."""
        raw = raw or ()
        entities = raw[0] if len(raw) > 0 else None
        info = (raw[1] if len(raw) > 1 else None) or {}
        status = info.get('more_results') or ResultsStatus.NO_RESULTS
        return cls(entities=list(entities or []),
                   results_status=ResultsStatus(status),
                   cursor=info.get('end_cursor'))

    def is_empty(self) -> bool:
        return self.results_status is ResultsStatus.NO_RESULTS
