"""Resilient access layer for Google Cloud Datastore.

Build keys and entities, read and write them, and run filtered, ordered and
paginated queries; remote calls survive one stale connection by reconnecting
and retrying.
"""

from .connection import ConnectionManager
from .credentials import Credentials, KeyFileCredentialsProvider
from .models import (
    Direction,
    EntityBuilder,
    Operator,
    Queryable,
    QueryableFilter,
    QueryResult,
    ResultsStatus,
)
from .pagination import PaginatedQueryResult
from .query import QueryBuilder
from .service import DatastoreService

__all__ = [
    'ConnectionManager',
    'Credentials',
    'KeyFileCredentialsProvider',
    'DatastoreService',
    'Direction',
    'EntityBuilder',
    'Operator',
    'PaginatedQueryResult',
    'QueryBuilder',
    'Queryable',
    'QueryableFilter',
    'QueryResult',
    'ResultsStatus',
]
