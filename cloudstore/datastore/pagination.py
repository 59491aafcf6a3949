"""Cursor-driven, pull-based pagination over query results.

Every page remembers a PageState: the query to run for the following page
and whether the results are used up.  Nothing is fetched until next_page()
is called, and pages are not cached, so calling next_page() twice on the
same page runs the same query twice.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from cloudstore.datastore import models


@dataclass(frozen=True)
class PageState:
    queryable: Optional[models.Queryable]
    exhausted: bool = False

    def advance(self, result: models.QueryResult) -> 'PageState':
        """Returns the state following a page with the given result."""
        if (self.exhausted
                or not result.cursor
                or result.is_empty()
                or result.results_status
                is models.ResultsStatus.NO_MORE_RESULTS):
            return EXHAUSTED
        return PageState(self.queryable.with_cursor(result.cursor))


EXHAUSTED = PageState(None, exhausted=True)


class PaginatedQueryResult(object):
    """One page of results plus the means to fetch the next one."""

    def __init__(self, entities: List[Any], cursor: Optional[str],
                 state: PageState,
                 fetch: Optional[Callable[[models.Queryable],
                                          models.QueryResult]] = None):
        self.entities = entities
        self.cursor = cursor
        self._state = state
        self._fetch = fetch

    def __repr__(self):
        return 'PaginatedQueryResult(%d entities, cursor=%r)' % (
            len(self.entities), self.cursor)

    @property
    def exhausted(self):
        """True when next_page() can only return a terminal page."""
        return self._state.exhausted

    def next_page(self) -> 'PaginatedQueryResult':
        """Fetch the page after this one.

        Past the last page this returns a terminal page: no entities, no
        cursor, and a next_page() that returns another terminal page.
        """
        if self._state.exhausted:
            return terminal_page()
        return first_page(self._state.queryable, self._fetch)


def terminal_page() -> PaginatedQueryResult:
    return PaginatedQueryResult([], None, EXHAUSTED)


def first_page(queryable: models.Queryable,
               fetch: Callable[[models.Queryable], models.QueryResult]
               ) -> PaginatedQueryResult:
    """Run queryable through fetch and wrap the result as a page."""
    result = fetch(queryable)
    state = PageState(queryable).advance(result)
    return PaginatedQueryResult(result.entities, result.cursor, state, fetch)


def iter_pages(page: PaginatedQueryResult):
    """Yields page and every page after it, stopping at the terminal page."""
    while True:
        yield page
        if page.exhausted:
            return
        page = page.next_page()


def iter_entities(page: PaginatedQueryResult):
    for p in iter_pages(page):
        for entity in p.entities:
            yield entity
