#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import time

import fixtures
import gevent
import mock
import testtools

from cassandra_browser import exceptions as exc
from cassandra_browser import records
from cassandra_browser import schema
from cassandra_browser.client import Client
from cassandra_browser.probe import MemoryUsage
from cassandra_browser.rpc import DEFAULT_CONSISTENCY_LEVEL
from cassandra_browser.rpc import cassandra_thrift

NOW = 1600000000123456

FULL_SLICE = cassandra_thrift.SlicePredicate(
    slice_range=cassandra_thrift.SliceRange(start=b'', finish=b''))


class ClientTestCase(testtools.TestCase):

    options = {}

    def setUp(self):
        super(ClientTestCase, self).setUp()
        self.rpc_cls = self.useFixture(fixtures.MockPatch(
            'cassandra_browser.client.RpcSession')).mock
        self.rpc = self.rpc_cls.return_value
        self.rpc.is_open = True
        self.probe_cls = self.useFixture(fixtures.MockPatch(
            'cassandra_browser.client.NodeProbe')).mock
        self.probe = self.probe_cls.return_value.connect.return_value
        self.useFixture(fixtures.MockPatch(
            'cassandra_browser.client.micros_now', return_value=NOW))
        self.client = Client('h', 9160, 7199, **self.options)
        self.client.connect()
# end class ClientTestCase


class TestLifecycle(ClientTestCase):

    def test_defaults(self):
        client = Client()
        self.assertEqual('localhost', client.host)
        self.assertEqual(9160, client.thrift_port)
        self.assertEqual(7199, client.jmx_port)
        self.assertFalse(client.is_connected())

    def test_unknown_option(self):
        self.assertRaises(TypeError, Client, 'h', colour='blue')

    def test_connect_is_idempotent(self):
        self.client.connect()
        self.assertTrue(self.client.is_connected())
        self.rpc_cls.assert_called_once_with('h', 9160, timeout=10.0,
                                             credential=None)
        self.rpc.open.assert_called_once_with()
        self.probe_cls.assert_called_once_with('h', 7199, timeout=10.0,
                                               protocol='http')

    def test_connect_probe_failure(self):
        client = Client('h')
        self.probe_cls.return_value.connect.side_effect = \
            exc.TransportError('h', 7199, 'refused')
        self.assertRaises(exc.TransportError, client.connect)
        self.assertFalse(client.is_connected())
        self.rpc.close.assert_called_once_with()

    def test_disconnect(self):
        self.client.disconnect()
        self.assertFalse(self.client.is_connected())
        self.rpc.close.assert_called_once_with()
        self.probe.close.assert_called_once_with()
        # second disconnect is a no-op
        self.client.disconnect()
        self.rpc.close.assert_called_once_with()

    def test_disconnect_when_not_connected(self):
        Client('h').disconnect()

    def test_not_connected(self):
        self.client.disconnect()
        self.assertRaises(exc.NotConnectedError,
                          self.client.describe_cluster_name)
        self.assertRaises(exc.NotConnectedError, self.client.list_ring)

    def test_context_manager(self):
        with Client('h') as client:
            self.assertTrue(client.is_connected())
        self.assertFalse(client.is_connected())

    @mock.patch('cassandra_browser.client.CqlSession')
    def test_cql_connect(self, mock_cql):
        mock_cql.return_value.is_open = True
        self.client.cql_connect('ks')
        self.client.cql_connect('ks')
        self.assertTrue(self.client.is_cql_connected())
        mock_cql.assert_called_once_with('h', 9042, 'ks', timeout=10.0,
                                         credential=None)
        mock_cql.return_value.open.assert_called_once_with()
        self.assertIs(mock_cql.return_value.session,
                      self.client.cql_session)

        self.client.cql_disconnect()
        self.client.cql_disconnect()
        self.assertFalse(self.client.is_cql_connected())
        mock_cql.return_value.close.assert_called_once_with()

    @mock.patch('cassandra_browser.client.CqlSession')
    def test_cql_is_independent(self, mock_cql):
        mock_cql.return_value.is_open = True
        self.client.disconnect()
        self.client.cql_connect('ks')
        self.assertTrue(self.client.is_cql_connected())
        self.assertFalse(self.client.is_connected())

    @mock.patch('cassandra_browser.client.CqlSession')
    def test_context_manager_closes_rpc_when_cql_close_fails(self, mock_cql):
        mock_cql.return_value.is_open = True
        mock_cql.return_value.close.side_effect = exc.DriverError('boom')
        client = Client('h')
        with testtools.ExpectedException(exc.DriverError):
            with client:
                client.cql_connect('ks')
        self.rpc.close.assert_called_once_with()
        self.assertFalse(client.is_connected())
        self.assertFalse(client.is_cql_connected())

    def test_log_response_time(self):
        log_response_time = mock.MagicMock()
        client = Client('h', log_response_time=log_response_time)
        client.connect()
        client.describe_version()
        args, _ = log_response_time.call_args
        self.assertEqual('describe_version', args[1])
# end class TestLifecycle


class TestSchema(ClientTestCase):

    def setUp(self):
        super(TestSchema, self).setUp()
        self.users = cassandra_thrift.CfDef(keyspace='ks', name='users',
                                            gc_grace_seconds=10, id=7)
        self.rpc.call.return_value = cassandra_thrift.KsDef(
            name='ks', strategy_class='SimpleStrategy',
            cf_defs=[self.users,
                     cassandra_thrift.CfDef(keyspace='ks', name='audit')])

    def test_describe(self):
        self.rpc.call.return_value = 'Test Cluster'
        self.assertEqual('Test Cluster', self.client.describe_cluster_name())
        self.rpc.call.assert_called_once_with('describe_cluster_name')

    def test_describe_ring(self):
        self.client.describe_ring('ks')
        self.rpc.call.assert_called_once_with('describe_ring', 'ks')

    def test_add_keyspace(self):
        self.client.add_keyspace('ks', 'SimpleStrategy', {'x': 'y'}, 3)
        self.rpc.call.assert_called_once_with(
            'system_add_keyspace', cassandra_thrift.KsDef(
                name='ks', strategy_class='SimpleStrategy',
                strategy_options={'replication_factor': '3'}, cf_defs=[]))

    def test_update_keyspace_network_topology(self):
        snitch = mock.MagicMock()
        snitch.get_datacenter.return_value = 'DC1'
        client = Client('h', snitch=snitch)
        client.connect()
        client.update_keyspace('ks', schema.STRATEGY_MAP[
            schema.NETWORK_TOPOLOGY_STRATEGY], {'DC2': '2'}, 3,
            merge_options=True)
        name, ks_def = self.rpc.call.call_args[0]
        self.assertEqual('system_update_keyspace', name)
        self.assertEqual({'DC1': '1', 'DC2': '2'}, ks_def.strategy_options)

    def test_drop_keyspace(self):
        self.client.drop_keyspace('ks')
        self.rpc.call.assert_called_once_with('system_drop_keyspace', 'ks')

    def test_add_column_family(self):
        self.client.add_column_family(
            'ks', schema.ColumnFamilyDescriptor('users', gc_grace='10',
                                                id='7'))
        keyspace, method, cf_def = self.rpc.call_in_keyspace.call_args[0]
        self.assertEqual(('ks', 'system_add_column_family'),
                         (keyspace, method))
        self.assertEqual(10, cf_def.gc_grace_seconds)
        self.assertIsNone(cf_def.id)

    def test_update_column_family_carries_id(self):
        desc = self.client.get_column_family_descriptor('ks', 'USERS')
        desc.comment = 'updated'
        self.client.update_column_family('ks', desc)
        keyspace, method, cf_def = self.rpc.call_in_keyspace.call_args[0]
        self.assertEqual('system_update_column_family', method)
        self.assertEqual(7, cf_def.id)
        self.assertEqual('updated', cf_def.comment)

    def test_invalid_descriptor_sends_nothing(self):
        self.assertRaises(
            exc.InvalidSchemaError, self.client.add_column_family, 'ks',
            schema.ColumnFamilyDescriptor('users', gc_grace='soon'))
        self.assertFalse(self.rpc.call_in_keyspace.called)

    def test_drop_and_truncate(self):
        self.client.drop_column_family('ks', 'users')
        self.client.truncate_column_family('ks', 'users')
        self.assertEqual(
            [mock.call('ks', 'system_drop_column_family', 'users'),
             mock.call('ks', 'truncate', 'users')],
            self.rpc.call_in_keyspace.call_args_list)

    def test_get_column_family_attributes(self):
        attributes = self.client.get_column_family_attributes('ks', 'Users')
        self.assertEqual('users', attributes['name'])
        self.assertEqual('10', attributes['gc_grace_seconds'])
        self.rpc.call.assert_called_once_with('describe_keyspace', 'ks')

    def test_get_column_family_not_found(self):
        self.assertIsNone(
            self.client.get_column_family_attributes('ks', 'nope'))
        self.assertIsNone(
            self.client.get_column_family_descriptor('ks', 'nope'))

    def test_keyspace_not_found(self):
        self.rpc.call.side_effect = exc.NotFoundError()
        self.assertRaises(exc.NotFoundError,
                          self.client.get_column_family_attributes,
                          'nope', 'users')

    def test_get_column_families(self):
        self.assertEqual(['audit', 'users'],
                         self.client.get_column_families('ks'))
# end class TestSchema


class TestData(ClientTestCase):

    def _columns(self, *names):
        return [cassandra_thrift.ColumnOrSuperColumn(
            column=cassandra_thrift.Column(name=n, value=b'v',
                                           timestamp=NOW))
            for n in names]

    def test_count_columns(self):
        self.rpc.call_in_keyspace.return_value = 3
        self.assertEqual(3, self.client.count_columns('ks', 'cf', 'k1'))
        self.rpc.call_in_keyspace.assert_called_once_with(
            'ks', 'get_count', b'k1',
            cassandra_thrift.ColumnParent(column_family='cf'),
            FULL_SLICE, DEFAULT_CONSISTENCY_LEVEL)

    def test_count_super_columns(self):
        self.client.count_columns('ks', 'cf', 'k1', 'sc1')
        parent = self.rpc.call_in_keyspace.call_args[0][3]
        self.assertEqual(b'sc1', parent.super_column)

    def test_insert_column(self):
        written = self.client.insert_column('ks', 'cf', 'k1', None,
                                            'name', 'value')
        self.assertEqual(1600000000, written)
        self.assertIsInstance(written, records.WriteTime)
        self.rpc.call_in_keyspace.assert_called_once_with(
            'ks', 'insert', b'k1',
            cassandra_thrift.ColumnParent(column_family='cf'),
            cassandra_thrift.Column(name=b'name', value=b'value',
                                    timestamp=NOW),
            DEFAULT_CONSISTENCY_LEVEL)

    def test_insert_column_under_super_column(self):
        self.client.insert_column('ks', 'cf', 'k1', 'sc1', 'name', 'value')
        parent = self.rpc.call_in_keyspace.call_args[0][3]
        self.assertEqual(cassandra_thrift.ColumnParent(column_family='sc1'),
                         parent)

    def test_insert_then_get(self):
        self.client.insert_column('ks', 'cf', 'k1', None, 'name', 'value')
        col = self.rpc.call_in_keyspace.call_args[0][4]
        self.rpc.call_in_keyspace.return_value = [
            cassandra_thrift.ColumnOrSuperColumn(column=col)]
        rows = self.client.get_key('ks', 'cf', None, 'k1')
        cell = rows['k1'].cells['name']
        self.assertEqual('value', cell.value)
        self.assertEqual(NOW // 1000, cell.timestamp)

    def test_removes(self):
        self.client.remove_key('ks', 'cf', 'k1')
        self.client.remove_super_column('ks', 'cf', 'k1', 'sc1')
        self.client.remove_column('ks', 'cf', 'k1', 'c1')
        self.client.remove_column('ks', 'cf', 'k1', 'c1', super_column='sc1')
        paths = [c[0][3] for c in self.rpc.call_in_keyspace.call_args_list]
        self.assertEqual([
            cassandra_thrift.ColumnPath(column_family='cf'),
            cassandra_thrift.ColumnPath(column_family='cf',
                                        super_column=b'sc1'),
            cassandra_thrift.ColumnPath(column_family='cf', column=b'c1'),
            cassandra_thrift.ColumnPath(column_family='cf',
                                        super_column=b'sc1', column=b'c1'),
        ], paths)
        for c in self.rpc.call_in_keyspace.call_args_list:
            self.assertEqual(('ks', 'remove', b'k1'), c[0][:3])
            self.assertEqual((NOW, DEFAULT_CONSISTENCY_LEVEL), c[0][4:])

    def test_get_key(self):
        self.rpc.call_in_keyspace.return_value = self._columns(b'b', b'a')
        rows = self.client.get_key('ks', 'cf', None, 'k1')
        self.assertEqual(['k1'], list(rows))
        self.assertEqual(records.FetchStatus.FOUND, rows.status)
        self.assertEqual(['a', 'b'], list(rows['k1'].cells))
        self.rpc.call_in_keyspace.assert_called_once_with(
            'ks', 'get_slice', b'k1',
            cassandra_thrift.ColumnParent(column_family='cf'),
            FULL_SLICE, DEFAULT_CONSISTENCY_LEVEL)

    def test_get_key_not_found(self):
        self.rpc.call_in_keyspace.return_value = []
        rows = self.client.get_key('ks', 'cf', None, 'nope')
        self.assertEqual(0, len(rows))
        self.assertEqual(records.FetchStatus.NOT_FOUND, rows.status)

    def test_get_key_error_propagates(self):
        self.rpc.call_in_keyspace.side_effect = exc.TimedOutError()
        self.assertRaises(exc.TimedOutError, self.client.get_key,
                          'ks', 'cf', None, 'k1')

    def test_get_key_degrades_on_request(self):
        error = exc.TimedOutError()
        self.rpc.call_in_keyspace.side_effect = error
        rows = self.client.get_key('ks', 'cf', None, 'k1',
                                   empty_on_error=True)
        self.assertEqual(0, len(rows))
        self.assertTrue(rows.degraded)
        self.assertIs(error, rows.error)

    def test_get_key_not_connected_is_never_degraded(self):
        self.client.disconnect()
        self.assertRaises(exc.NotConnectedError, self.client.get_key,
                          'ks', 'cf', None, 'k1', empty_on_error=True)

    def test_list_rows(self):
        self.rpc.call_in_keyspace.return_value = [
            cassandra_thrift.KeySlice(key=b'b', columns=self._columns(b'c')),
            cassandra_thrift.KeySlice(key=b'a', columns=self._columns(b'c')),
        ]
        rows = self.client.list_rows('ks', 'cf', 'a', 'z', 10)
        self.assertEqual(['a', 'b'], list(rows))
        self.rpc.call_in_keyspace.assert_called_once_with(
            'ks', 'get_range_slices',
            cassandra_thrift.ColumnParent(column_family='cf'), FULL_SLICE,
            cassandra_thrift.KeyRange(start_key=b'a', end_key=b'z',
                                      count=10),
            DEFAULT_CONSISTENCY_LEVEL)

    def test_list_rows_only_degrades_when_unavailable(self):
        self.rpc.call_in_keyspace.side_effect = exc.TimedOutError()
        self.assertRaises(exc.TimedOutError, self.client.list_rows,
                          'ks', 'cf', 'a', 'z', 10, empty_on_error=True)

        self.rpc.call_in_keyspace.side_effect = exc.UnavailableError()
        rows = self.client.list_rows('ks', 'cf', 'a', 'z', 10,
                                     empty_on_error=True)
        self.assertTrue(rows.degraded)
# end class TestData


class TestDataDegraded(ClientTestCase):

    options = {'empty_on_error': True}

    def test_option_enables_degradation(self):
        self.rpc.call_in_keyspace.side_effect = exc.UnavailableError()
        self.assertTrue(self.client.get_key('ks', 'cf', None, 'k1').degraded)
        self.assertTrue(
            self.client.list_rows('ks', 'cf', 'a', 'z', 10).degraded)

    def test_call_overrides_option(self):
        self.rpc.call_in_keyspace.side_effect = exc.UnavailableError()
        self.assertRaises(exc.UnavailableError, self.client.get_key,
                          'ks', 'cf', None, 'k1', empty_on_error=False)
# end class TestDataDegraded


class TestRing(ClientTestCase):

    def test_list_ring(self):
        self.probe.get_token_to_endpoint_map.return_value = {'0': 'h'}
        self.probe.get_live_nodes.return_value = ['h']
        self.probe.get_unreachable_nodes.return_value = []
        self.probe.get_load_map.return_value = {'h': '1 KB'}
        topology = self.client.list_ring()
        self.assertEqual(['0'], topology.ranges)

    def _node_probe(self, endpoint):
        node = mock.MagicMock()
        node.get_load_string.return_value = '1 KB'
        node.get_current_generation_number.return_value = 1
        node.get_uptime.return_value = 5000
        node.get_heap_memory_usage.return_value = MemoryUsage(0, 0, 0, 0)
        return node

    def test_get_node_info_uses_new_session(self):
        self.probe_cls.reset_mock()
        node = self._node_probe('10.0.0.2')
        self.probe_cls.return_value.connect.return_value = node
        info = self.client.get_node_info('10.0.0.2')
        self.probe_cls.assert_called_once_with('10.0.0.2', 7199,
                                               timeout=10.0, protocol='http')
        self.assertEqual(5, info.uptime)
        node.close.assert_called_once_with()

    def test_get_thread_pool_stats(self):
        node = self._node_probe('10.0.0.2')
        node.get_thread_pool_proxies.return_value = iter([])
        self.probe_cls.return_value.connect.return_value = node
        self.assertEqual([], self.client.get_thread_pool_stats('10.0.0.2'))
        node.close.assert_called_once_with()

    def test_get_node_infos(self):
        self.probe_cls.return_value.connect.side_effect = \
            lambda: self._node_probe(None)
        infos = self.client.get_node_infos(['a', 'b', 'c'])
        self.assertEqual(['a', 'b', 'c'], [i.endpoint for i in infos])

    def test_get_node_infos_overlaps_nodes(self):
        def slow_connect():
            gevent.sleep(0.3)
            return self._node_probe(None)
        self.probe_cls.return_value.connect.side_effect = slow_connect
        start = time.time()
        infos = self.client.get_node_infos(['a', 'b', 'c', 'd'])
        self.assertLess(time.time() - start, 0.6)
        self.assertEqual(['a', 'b', 'c', 'd'],
                         [i.endpoint for i in infos])
# end class TestRing
