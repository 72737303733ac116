#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

"""Command line browser of a Cassandra cluster."""

from gevent import monkey
monkey.patch_socket()

import logging
import sys

from prettytable import PrettyTable

from cassandra_browser import exceptions as exc
from cassandra_browser import schema
from cassandra_browser.args import client_options
from cassandra_browser.args import parse_args
from cassandra_browser.client import Client
from cassandra_browser.logger import setup_logging
from cassandra_browser.records import FetchStatus

LOG = logging.getLogger(__name__)

TIME_FORMAT = '%Y-%m-%d %H:%M:%S'


def _key_values(pairs, what):
    result = {}
    for pair in pairs or []:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise exc.BrowserError('Invalid %s %r, expected name=value' % (
                what, pair))
        result[key] = value
    return result


def _column_metadata(text):
    # name[:validation_class[:index_type[:index_name]]]
    parts = text.split(":")
    parts += [None] * (4 - len(parts))
    parts = [p or None for p in parts[:4]]
    parts[1] = _marshal_class(parts[1], schema.VALIDATION_CLASS_MAP)
    return schema.ColumnMetadata(*parts)


def _marshal_class(name, class_map):
    # short type names expand to their class name, anything else is kept
    for class_name, short_name in class_map.items():
        if name == short_name:
            return class_name
    return name


def _short_type(class_name):
    if class_name is None:
        return ''
    return schema.COMPARATOR_TYPE_MAP.get(class_name, class_name)


def _megabytes_text(value):
    return '?' if value is None else '%.2f' % value


def _strategy_class(strategy):
    return schema.STRATEGY_MAP.get(strategy, strategy)


def _add_keyspace_arguments(sub):
    sub.add_argument('keyspace')
    sub.add_argument('--strategy', default=schema.SIMPLE_STRATEGY,
                     help="Replication strategy, short name (%s) or "
                          "class name" % ', '.join(schema.STRATEGY_MAP))
    sub.add_argument('--replication_factor', type=int, default=1)
    sub.add_argument('--option', action='append', metavar='NAME=VALUE',
                     help="Strategy option, may be repeated")
    sub.add_argument('--merge_options', action='store_true',
                     help="Send the given strategy options along the "
                          "computed one instead of dropping them")


def _add_column_family_arguments(sub):
    sub.add_argument('keyspace')
    sub.add_argument('column_family')
    sub.add_argument('--column_type', choices=schema.COLUMN_TYPES)
    comparators = ', '.join(schema.COMPARATOR_TYPE_MAP.values())
    sub.add_argument('--comparator',
                     help="Comparator, short name (%s) or class name" %
                          comparators)
    sub.add_argument('--subcomparator',
                     help="Super column subcomparator, short name (%s) or "
                          "class name" % comparators)
    sub.add_argument('--set', action='append', metavar='ATTRIBUTE=VALUE',
                     help="Tunable attribute (%s), may be repeated" %
                          ', '.join(schema.ColumnFamilyDescriptor.TUNABLES))
    sub.add_argument('--column', action='append',
                     metavar='NAME[:VALIDATION[:INDEX_TYPE[:INDEX_NAME]]]',
                     help="Column metadata, may be repeated. VALIDATION is a "
                          "short name (%s) or class name" %
                          ', '.join(schema.VALIDATION_CLASS_MAP.values()))


def add_commands(parser):
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    subparsers.add_parser('cluster', help="Describe the cluster")
    subparsers.add_parser('keyspaces', help="List keyspaces")

    sub = subparsers.add_parser('keyspace', help="Describe a keyspace")
    sub.add_argument('keyspace')

    sub = subparsers.add_parser('create-keyspace', help="Create a keyspace")
    _add_keyspace_arguments(sub)
    sub = subparsers.add_parser('update-keyspace', help="Update a keyspace")
    _add_keyspace_arguments(sub)

    sub = subparsers.add_parser('drop-keyspace', help="Drop a keyspace")
    sub.add_argument('keyspace')

    sub = subparsers.add_parser('column-families',
                                help="List column families of a keyspace")
    sub.add_argument('keyspace')

    sub = subparsers.add_parser('column-family',
                                help="Show column family attributes")
    sub.add_argument('keyspace')
    sub.add_argument('column_family')

    sub = subparsers.add_parser('create-column-family',
                                help="Create a column family")
    _add_column_family_arguments(sub)
    sub = subparsers.add_parser('update-column-family',
                                help="Update a column family")
    _add_column_family_arguments(sub)

    for name, help_text in (
            ('drop-column-family', "Drop a column family"),
            ('truncate', "Remove every row of a column family")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('keyspace')
        sub.add_argument('column_family')

    sub = subparsers.add_parser('count', help="Count columns of a row")
    sub.add_argument('keyspace')
    sub.add_argument('column_family')
    sub.add_argument('key')
    sub.add_argument('--super_column')

    sub = subparsers.add_parser('get', help="Show one row")
    sub.add_argument('keyspace')
    sub.add_argument('column_family')
    sub.add_argument('key')
    sub.add_argument('--super_column')

    sub = subparsers.add_parser('list', help="List rows in a key range")
    sub.add_argument('keyspace')
    sub.add_argument('column_family')
    sub.add_argument('--start', default='')
    sub.add_argument('--end', default='')
    sub.add_argument('--rows', type=int, default=100)

    sub = subparsers.add_parser('insert', help="Write one column")
    sub.add_argument('keyspace')
    sub.add_argument('column_family')
    sub.add_argument('key')
    sub.add_argument('column')
    sub.add_argument('value')
    sub.add_argument('--super_column')

    sub = subparsers.add_parser(
        'remove', help="Remove a row, a super column or a column")
    sub.add_argument('keyspace')
    sub.add_argument('column_family')
    sub.add_argument('key')
    sub.add_argument('--super_column')
    sub.add_argument('--column')

    subparsers.add_parser('ring', help="Show the token ring")

    sub = subparsers.add_parser('node-info', help="Show node statistics")
    sub.add_argument('endpoints', nargs='*',
                     help="Nodes to query, every live node by default")

    sub = subparsers.add_parser('tpstats', help="Show thread pool activity")
    sub.add_argument('endpoint', nargs='?')

    sub = subparsers.add_parser('cql-check',
                                help="Open and close a query-language session")
    sub.add_argument('keyspace')
# end add_commands


class CassandraBrowser(object):

    def __init__(self, args, stdout=None):
        self._args = args
        self._stdout = stdout or sys.stdout
        self._client = None
    # end __init__

    def _print(self, text):
        self._stdout.write('%s\n' % text)

    def _table(self, fields, rows):
        table = PrettyTable(fields)
        table.align = 'l'
        for row in rows:
            table.add_row(list(row))
        self._print(table)

    def run(self, client):
        self._client = client
        method = 'do_' + self._args.command.replace('-', '_')
        return getattr(self, method)()

    # Cluster and schema

    def do_cluster(self):
        client = self._client
        rows = [('Cluster', client.describe_cluster_name()),
                ('Version', client.describe_version()),
                ('Partitioner', client.describe_partitioner()),
                ('Snitch', client.describe_snitch())]
        for version, nodes in sorted(
                client.describe_schema_versions().items()):
            rows.append(('Schema %s' % version, ', '.join(sorted(nodes))))
        self._table(['Attribute', 'Value'], rows)

    def do_keyspaces(self):
        self._table(
            ['Keyspace', 'Strategy', 'Options', 'Column families'],
            [(ks.name, ks.strategy_class,
              ', '.join('%s=%s' % kv for kv in sorted(
                  (ks.strategy_options or {}).items())),
              len(ks.cf_defs or []))
             for ks in sorted(self._client.get_keyspaces(),
                              key=lambda ks: ks.name)])

    def do_keyspace(self):
        ks_def = self._client.describe_keyspace(self._args.keyspace)
        desc = schema.KeyspaceDescriptor.from_ks_def(ks_def)
        self._print('Keyspace %s (%s)' % (desc.name, desc.strategy_class))
        self._table(['Column family', 'Type', 'Comparator', 'Subcomparator'],
                    [(cf.name, cf.column_type, _short_type(cf.comparator),
                      _short_type(cf.subcomparator))
                     for cf in sorted(desc.column_families,
                                      key=lambda cf: cf.name)])

    def _keyspace_args(self):
        args = self._args
        return (args.keyspace, _strategy_class(args.strategy),
                _key_values(args.option, 'strategy option'),
                args.replication_factor)

    def do_create_keyspace(self):
        keyspace, strategy, options, rf = self._keyspace_args()
        self._client.add_keyspace(keyspace, strategy, options, rf,
                                  merge_options=self._args.merge_options)
        self._print('Keyspace %s created' % keyspace)

    def do_update_keyspace(self):
        keyspace, strategy, options, rf = self._keyspace_args()
        self._client.update_keyspace(keyspace, strategy, options, rf,
                                     merge_options=self._args.merge_options)
        self._print('Keyspace %s updated' % keyspace)

    def do_drop_keyspace(self):
        self._client.drop_keyspace(self._args.keyspace)
        self._print('Keyspace %s dropped' % self._args.keyspace)

    def do_column_families(self):
        self._table(['Column family'],
                    [(name,) for name in
                     self._client.get_column_families(self._args.keyspace)])

    def _not_found(self):
        raise exc.NotFoundError('No column family %s in keyspace %s' % (
            self._args.column_family, self._args.keyspace))

    def do_column_family(self):
        attributes = self._client.get_column_family_attributes(
            self._args.keyspace, self._args.column_family)
        if attributes is None:
            self._not_found()
        self._table(['Attribute', 'Value'],
                    [(k, '' if v is None else v)
                     for k, v in attributes.items()])

    def _apply_column_family_args(self, desc):
        args = self._args
        if args.column_type:
            desc.column_type = args.column_type
        if args.comparator:
            desc.comparator = _marshal_class(args.comparator,
                                             schema.COMPARATOR_TYPE_MAP)
        if args.subcomparator:
            desc.subcomparator = _marshal_class(args.subcomparator,
                                                schema.COMPARATOR_TYPE_MAP)
        tunables = _key_values(args.set, 'attribute')
        unknown = set(tunables) - set(desc.TUNABLES)
        if unknown:
            raise exc.InvalidSchemaError('Unknown attributes: %s' % (
                ', '.join(sorted(unknown))))
        for attr, value in tunables.items():
            setattr(desc, attr, value)
        if args.column:
            desc.metadata = [_column_metadata(c) for c in args.column]
        return desc

    def do_create_column_family(self):
        desc = self._apply_column_family_args(
            schema.ColumnFamilyDescriptor(self._args.column_family))
        self._client.add_column_family(self._args.keyspace, desc)
        self._print('Column family %s.%s created' % (
            self._args.keyspace, desc.name))

    def do_update_column_family(self):
        desc = self._client.get_column_family_descriptor(
            self._args.keyspace, self._args.column_family)
        if desc is None:
            self._not_found()
        self._client.update_column_family(
            self._args.keyspace, self._apply_column_family_args(desc))
        self._print('Column family %s.%s updated' % (
            self._args.keyspace, desc.name))

    def do_drop_column_family(self):
        self._client.drop_column_family(self._args.keyspace,
                                        self._args.column_family)
        self._print('Column family %s.%s dropped' % (
            self._args.keyspace, self._args.column_family))

    def do_truncate(self):
        self._client.truncate_column_family(self._args.keyspace,
                                            self._args.column_family)
        self._print('Column family %s.%s truncated' % (
            self._args.keyspace, self._args.column_family))

    # Data

    def do_count(self):
        args = self._args
        self._print(self._client.count_columns(
            args.keyspace, args.column_family, args.key, args.super_column))

    def _print_rows(self, rows):
        if rows.status == FetchStatus.NOT_FOUND:
            self._print('Row not found')
            return
        if rows.status == FetchStatus.TRANSIENT_FAILURE:
            self._print('No rows, the read failed: %s' % rows.error)
            return
        table_rows = []
        for key, record in rows.items():
            for name, super_column in record.super_columns.items():
                for cell in super_column.cells.values():
                    table_rows.append((key, name, cell.name, cell.value,
                                       cell.timestamp.as_datetime()))
            for cell in record.cells.values():
                table_rows.append((key, '', cell.name, cell.value,
                                   cell.timestamp.as_datetime()))
        self._table(['Key', 'Super column', 'Column', 'Value', 'Timestamp'],
                    table_rows)

    def do_get(self):
        args = self._args
        self._print_rows(self._client.get_key(
            args.keyspace, args.column_family, args.super_column, args.key))

    def do_list(self):
        args = self._args
        self._print_rows(self._client.list_rows(
            args.keyspace, args.column_family, args.start, args.end,
            args.rows))

    def do_insert(self):
        args = self._args
        written = self._client.insert_column(
            args.keyspace, args.column_family, args.key, args.super_column,
            args.column, args.value)
        self._print('Written at %s' %
                    written.as_datetime().strftime(TIME_FORMAT))

    def do_remove(self):
        args = self._args
        if args.column:
            self._client.remove_column(args.keyspace, args.column_family,
                                       args.key, args.column,
                                       super_column=args.super_column)
        elif args.super_column:
            self._client.remove_super_column(
                args.keyspace, args.column_family, args.key,
                args.super_column)
        else:
            self._client.remove_key(args.keyspace, args.column_family,
                                    args.key)
        self._print('Removed')

    # Ring

    def do_ring(self):
        topology = self._client.list_ring()
        self._table(
            ['Address', 'Status', 'Load', 'Token'],
            [(endpoint,
              'Up' if topology.is_live(endpoint) else 'Down',
              topology.load_map.get(endpoint, '?'),
              token)
             for token, endpoint in topology])

    def do_node_info(self):
        endpoints = self._args.endpoints
        if not endpoints:
            endpoints = sorted(self._client.list_ring().live_nodes)
        self._table(
            ['Endpoint', 'Load', 'Generation', 'Uptime (s)',
             'Heap used (MB)', 'Heap max (MB)'],
            [(info.endpoint, info.load, info.generation_number, info.uptime,
              _megabytes_text(info.mem_used), _megabytes_text(info.mem_max))
             for info in self._client.get_node_infos(endpoints)])

    def do_tpstats(self):
        endpoint = self._args.endpoint or self._client.host
        self._table(['Pool name', 'Active', 'Pending', 'Completed'],
                    self._client.get_thread_pool_stats(endpoint))

    def do_cql_check(self):
        self._client.cql_connect(self._args.keyspace)
        try:
            self._print('Session to keyspace %s is open' %
                        self._args.keyspace)
        finally:
            self._client.cql_disconnect()
# end class CassandraBrowser


def main(args_str=None):
    if args_str is None:
        args_str = sys.argv[1:]
    args = parse_args(args_str, add_commands=add_commands)
    setup_logging(args.log_level, args.log_file, args.log_format)

    browser = CassandraBrowser(args)
    try:
        with Client(args.host, args.thrift_port, args.jmx_port,
                    **client_options(args)) as client:
            browser.run(client)
    except exc.BrowserError as e:
        LOG.error('%s', e)
        return 1
    except KeyboardInterrupt:
        return 1
    return 0
# end main


if __name__ == "__main__":
    sys.exit(main())
