import unittest

from cloudstore.datastore import models
from cloudstore.datastore import pagination


MORE = models.ResultsStatus.MORE_RESULTS
DONE = models.ResultsStatus.NO_MORE_RESULTS


class ScriptedFetch(object):
    """Returns canned results and records the queryables it was given."""

    def __init__(self, *results):
        self.results = list(results)
        self.seen = []

    def __call__(self, queryable):
        self.seen.append(queryable)
        return self.results.pop(0)


class PageStateTest(unittest.TestCase):

    def setUp(self):
        self.state = pagination.PageState(
            models.Queryable('User', limit=2, offset=1))

    def test_advance_with_cursor(self):
        nxt = self.state.advance(models.QueryResult(['a'], MORE, 'c1'))
        self.assertFalse(nxt.exhausted)
        self.assertEqual('c1', nxt.queryable.cursor)
        self.assertEqual(None, nxt.queryable.offset)
        self.assertEqual(2, nxt.queryable.limit)

    def test_advance_to_exhausted(self):
        for result in (models.QueryResult(['a'], MORE, None),
                       models.QueryResult(['a'], DONE, 'c1'),
                       models.QueryResult([], models.ResultsStatus.NO_RESULTS,
                                          'c1')):
            self.assertIs(pagination.EXHAUSTED, self.state.advance(result))

    def test_exhausted_stays_exhausted(self):
        result = models.QueryResult(['a'], MORE, 'c1')
        self.assertIs(pagination.EXHAUSTED,
                      pagination.EXHAUSTED.advance(result))


class PaginatedQueryResultTest(unittest.TestCase):

    def test_pages_are_fetched_on_demand(self):
        fetch = ScriptedFetch(models.QueryResult(['a', 'b'], MORE, 'c1'),
                              models.QueryResult(['c'], DONE, None))
        queryable = models.Queryable('User', limit=2)
        page = pagination.first_page(queryable, fetch)
        self.assertEqual(['a', 'b'], page.entities)
        self.assertEqual('c1', page.cursor)
        self.assertEqual(1, len(fetch.seen))

        second = page.next_page()
        self.assertEqual(['c'], second.entities)
        self.assertEqual(None, second.cursor)
        self.assertEqual('c1', fetch.seen[1].cursor)
        self.assertTrue(second.exhausted)

        terminal = second.next_page()
        self.assertEqual([], terminal.entities)
        self.assertEqual(None, terminal.cursor)
        self.assertEqual(2, len(fetch.seen))

    def test_terminal_page_is_idempotent(self):
        page = pagination.terminal_page()
        for _ in range(3):
            page = page.next_page()
            self.assertEqual([], page.entities)
            self.assertEqual(None, page.cursor)
            self.assertTrue(page.exhausted)

    def test_next_page_is_not_cached(self):
        fetch = ScriptedFetch(models.QueryResult(['a'], MORE, 'c1'),
                              models.QueryResult(['b'], DONE, None),
                              models.QueryResult(['b'], DONE, None))
        page = pagination.first_page(models.Queryable('User', limit=1), fetch)
        page.next_page()
        page.next_page()
        self.assertEqual(3, len(fetch.seen))
        self.assertEqual(fetch.seen[1], fetch.seen[2])

    def test_iter_pages_and_entities(self):
        fetch = ScriptedFetch(models.QueryResult(['a', 'b'], MORE, 'c1'),
                              models.QueryResult(['c', 'd'], MORE, 'c2'),
                              models.QueryResult([], DONE, None))
        page = pagination.first_page(models.Queryable('User', limit=2), fetch)
        pages = list(pagination.iter_pages(page))
        self.assertEqual([['a', 'b'], ['c', 'd'], []],
                         [p.entities for p in pages])

        fetch = ScriptedFetch(models.QueryResult(['a', 'b'], MORE, 'c1'),
                              models.QueryResult(['c'], DONE, None))
        page = pagination.first_page(models.Queryable('User', limit=2), fetch)
        self.assertEqual(['a', 'b', 'c'],
                         list(pagination.iter_entities(page)))
