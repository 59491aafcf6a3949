#!/usr/bin/env python
"""
Dump every entity of one kind as JSON, one object per line.

Usage:

    do_dump_kind User > users.jsonl
    do_dump_kind User --filter age '>=' 18 --order age --desc --limit 100

Flags:
 --credentials = path to an alternate service account key file
 --page-size = number of entities fetched per request
"""

import argparse
import json
import sys

from cloudstore.common import conf
from cloudstore.datastore import models
from cloudstore.datastore.connection import ConnectionManager
from cloudstore.datastore.credentials import KeyFileCredentialsProvider
from cloudstore.datastore.service import DatastoreService


def _parse_value(text):
    """Filter values are read as JSON when they parse, else as strings."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def entity_to_json(entity):
    return json.dumps({'id': entity.key.id_or_name, 'data': dict(entity)},
                      default=str, sort_keys=True)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Dump the entities of a Datastore kind as JSON lines.")
    parser.add_argument('kind')
    parser.add_argument('--filter', nargs=3, action='append', default=[],
                        metavar=('PROPERTY', 'OPERATOR', 'VALUE'))
    parser.add_argument('--order', metavar='PROPERTY')
    parser.add_argument('--desc', action='store_true',
                        help="Sort in descending order (needs --order).")
    parser.add_argument('--limit', type=int,
                        help="Stop after this many entities.")
    parser.add_argument('--page-size', type=int,
                        default=conf.DUMP_PAGE_SIZE)
    parser.add_argument('--credentials',
                        default=conf.GOOGLE_APPLICATION_CREDENTIALS)
    return parser


def build_queryable(args):
    order = None
    if args.order:
        order = (args.order, 'desc' if args.desc else 'asc')
    filters = [models.QueryableFilter(prop, op, _parse_value(value))
               for prop, op, value in args.filter]
    page_size = args.page_size
    if args.limit is not None:
        page_size = min(page_size, args.limit)
    return models.Queryable(args.kind, limit=page_size,
                            filters=filters, order=order)


def main_generator(service, args, out=sys.stdout):
    count = 0
    for entity in service.iter_entities(build_queryable(args)):
        out.write(entity_to_json(entity) + '\n')
        count += 1
        yield
        # Stop before the next entity is pulled, which may fetch a page.
        if args.limit is not None and count >= args.limit:
            break
    sys.stderr.write("Dumped %d %s entities\n" % (count, args.kind))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.desc and not args.order:
        parser.error('--desc needs --order')
    if args.limit is not None and args.limit < 1:
        parser.error('--limit must be positive')
    if args.page_size < 1:
        parser.error('--page-size must be positive')
    service = DatastoreService(ConnectionManager(
        KeyFileCredentialsProvider(args.credentials)))
    for _ in main_generator(service, args):
        pass


if __name__ == "__main__":
    main()
