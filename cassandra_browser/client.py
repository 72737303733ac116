#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

"""
Client facade of the Cassandra browser.

Every operation takes the keyspace it works on as an explicit argument,
the facade keeps no "current keyspace" between calls. The RPC session
underneath is keyspace-scoped on the server side, so a Client instance
must not be shared between threads or greenlets issuing RPC calls
concurrently. Per-node management queries (get_node_info,
get_thread_pool_stats, get_node_infos) open their own sessions and can
run concurrently. get_node_infos only overlaps the requests when the
socket module is gevent-patched, as the command line entry point does.
"""

import datetime
import logging

import gevent.pool

from cassandra_browser import api
from cassandra_browser import exceptions as exc
from cassandra_browser import records
from cassandra_browser import ring
from cassandra_browser import schema
from cassandra_browser.cql import CqlSession
from cassandra_browser.probe import NodeProbe
from cassandra_browser.rpc import DEFAULT_CONSISTENCY_LEVEL
from cassandra_browser.rpc import RpcSession
from cassandra_browser.rpc import cassandra_thrift
from cassandra_browser.utils import encode_string
from cassandra_browser.utils import micros_now

LOG = logging.getLogger(__name__)


def _full_slice():
    # empty boundaries select every column of the row
    return cassandra_thrift.SlicePredicate(
        slice_range=cassandra_thrift.SliceRange(start=b'', finish=b''))


class Client(api.Trace):

    def __init__(self, host=api.DEFAULT_THRIFT_HOST,
                 thrift_port=api.DEFAULT_THRIFT_PORT,
                 jmx_port=api.DEFAULT_JMX_PORT, **options):
        super(Client, self).__init__()
        self.options = api.make_options(**options)
        self.host = host
        self.thrift_port = thrift_port
        self.jmx_port = jmx_port
        self._logger = self.options.logger or LOG
        self._rpc = None
        self._probe = None
        self._cql = None
    # end __init__

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            self.cql_disconnect()
        finally:
            self.disconnect()

    # Lifecycle

    def connect(self):
        if self.is_connected():
            return
        rpc = RpcSession(self.host, self.thrift_port,
                         timeout=self.options.timeout,
                         credential=self.options.credential)
        rpc.open()
        try:
            self._probe = self._new_probe(self.host)
        except exc.BrowserError:
            rpc.close()
            raise
        self._rpc = rpc
        self._logger.info('Connected to %s (rpc %s, management %s)',
                          self.host, self.thrift_port, self.jmx_port)
    # end connect

    def disconnect(self):
        if self._rpc is not None:
            self._rpc.close()
            self._rpc = None
        if self._probe is not None:
            try:
                self._probe.close()
            except Exception as e:
                self._logger.debug('Ignoring management close error: %s', e)
            self._probe = None
    # end disconnect

    def is_connected(self):
        return self._rpc is not None and self._rpc.is_open

    def cql_connect(self, keyspace):
        if self.is_cql_connected():
            return
        cql = CqlSession(self.host, self.options.cql_port, keyspace,
                         timeout=self.options.timeout,
                         credential=self.options.credential)
        cql.open()
        self._cql = cql
    # end cql_connect

    def cql_disconnect(self):
        if self._cql is None:
            return
        try:
            self._cql.close()
        finally:
            self._cql = None
    # end cql_disconnect

    def is_cql_connected(self):
        return self._cql is not None and self._cql.is_open

    @property
    def cql_session(self):
        if self._cql is None:
            return None
        return self._cql.session

    # Plumbing

    def _session(self):
        if not self.is_connected():
            raise exc.NotConnectedError(self.host, self.thrift_port)
        return self._rpc

    def _timed(self, oper, func, *args):
        start_time = datetime.datetime.now()
        try:
            return func(*args)
        finally:
            if self.options.log_response_time:
                self.options.log_response_time(
                    datetime.datetime.now() - start_time, oper)

    def _call(self, method, *args):
        return self._timed(method, self._session().call, method, *args)

    def _call_in_keyspace(self, keyspace, method, *args):
        return self._timed(method, self._session().call_in_keyspace,
                           keyspace, method, *args)

    def _new_probe(self, endpoint):
        probe = NodeProbe(endpoint, self.jmx_port,
                          timeout=self.options.mgmt_timeout,
                          protocol=self.options.mgmt_protocol)
        return probe.connect()

    def _strategy_options(self, strategy, options, replication_factor, merge):
        return schema.strategy_options(strategy, options, replication_factor,
                                       snitch=self.options.snitch,
                                       merge=merge)

    # Cluster description

    @api.Trace.trace
    def describe_cluster_name(self):
        return self._call('describe_cluster_name')

    @api.Trace.trace
    def describe_version(self):
        return self._call('describe_version')

    @api.Trace.trace
    def describe_snitch(self):
        return self._call('describe_snitch')

    @api.Trace.trace
    def describe_partitioner(self):
        return self._call('describe_partitioner')

    @api.Trace.trace
    def describe_schema_versions(self):
        """Schema version -> list of nodes agreeing on it"""
        return self._call('describe_schema_versions')

    @api.Trace.trace
    def describe_ring(self, keyspace):
        return self._call('describe_ring', keyspace)

    # Keyspaces

    @api.Trace.trace
    def get_keyspaces(self):
        return self._call('describe_keyspaces')

    @api.Trace.trace
    def describe_keyspace(self, keyspace):
        return self._call('describe_keyspace', keyspace)

    @api.Trace.trace
    def add_keyspace(self, keyspace, strategy, options=None,
                     replication_factor=1, merge_options=False):
        opts = self._strategy_options(strategy, options, replication_factor,
                                      merge_options)
        self._logger.info('Adding keyspace %s (%s, %s)',
                          keyspace, strategy, opts)
        return self._call('system_add_keyspace',
                          schema.build_ks_def(keyspace, strategy, opts))

    @api.Trace.trace
    def update_keyspace(self, keyspace, strategy, options=None,
                        replication_factor=1, merge_options=False):
        opts = self._strategy_options(strategy, options, replication_factor,
                                      merge_options)
        self._logger.info('Updating keyspace %s (%s, %s)',
                          keyspace, strategy, opts)
        return self._call('system_update_keyspace',
                          schema.build_ks_def(keyspace, strategy, opts))

    @api.Trace.trace
    def drop_keyspace(self, keyspace):
        self._logger.info('Dropping keyspace %s', keyspace)
        return self._call('system_drop_keyspace', keyspace)

    # Column families

    @api.Trace.trace
    def add_column_family(self, keyspace, descriptor):
        cf_def = schema.build_cf_def(keyspace, descriptor)
        self._logger.info('Adding column family %s.%s',
                          keyspace, descriptor.name)
        return self._call_in_keyspace(keyspace, 'system_add_column_family',
                                      cf_def)

    @api.Trace.trace
    def update_column_family(self, keyspace, descriptor):
        cf_def = schema.build_cf_def(keyspace, descriptor, include_id=True)
        self._logger.info('Updating column family %s.%s',
                          keyspace, descriptor.name)
        return self._call_in_keyspace(keyspace,
                                      'system_update_column_family', cf_def)

    @api.Trace.trace
    def drop_column_family(self, keyspace, column_family):
        self._logger.info('Dropping column family %s.%s',
                          keyspace, column_family)
        return self._call_in_keyspace(keyspace, 'system_drop_column_family',
                                      column_family)

    @api.Trace.trace
    def truncate_column_family(self, keyspace, column_family):
        self._logger.info('Truncating column family %s.%s',
                          keyspace, column_family)
        return self._call_in_keyspace(keyspace, 'truncate', column_family)

    def _find_cf_def(self, keyspace, column_family):
        cf_def = schema.find_cf_def(self.describe_keyspace(keyspace),
                                    column_family)
        if cf_def is None:
            self._logger.debug('No column family %s in keyspace %s',
                               column_family, keyspace)
        return cf_def

    @api.Trace.trace
    def get_column_family_attributes(self, keyspace, column_family):
        """Flat attribute name -> string mapping, None if not found"""
        cf_def = self._find_cf_def(keyspace, column_family)
        if cf_def is None:
            return None
        return schema.cf_def_attributes(cf_def)

    @api.Trace.trace
    def get_column_family_descriptor(self, keyspace, column_family):
        cf_def = self._find_cf_def(keyspace, column_family)
        if cf_def is None:
            return None
        return schema.descriptor_from_cf_def(cf_def)

    @api.Trace.trace
    def get_column_families(self, keyspace):
        return schema.column_family_names(self.describe_keyspace(keyspace))

    # Data

    @api.Trace.trace
    def count_columns(self, keyspace, column_family, key, super_column=None):
        parent = cassandra_thrift.ColumnParent(
            column_family=column_family,
            super_column=encode_string(super_column))
        return self._call_in_keyspace(
            keyspace, 'get_count', encode_string(key), parent, _full_slice(),
            DEFAULT_CONSISTENCY_LEVEL)

    @api.Trace.trace
    def insert_column(self, keyspace, column_family, key, super_column,
                      column, value):
        """Writes one cell and returns its WriteTime.

        Under a super column the write targets the super column by name
        in place of the column family.
        """
        if super_column is None:
            parent = cassandra_thrift.ColumnParent(column_family=column_family)
        else:
            parent = cassandra_thrift.ColumnParent(column_family=super_column)
        timestamp = micros_now()
        col = cassandra_thrift.Column(name=encode_string(column),
                                      value=encode_string(value),
                                      timestamp=timestamp)
        self._call_in_keyspace(keyspace, 'insert', encode_string(key),
                               parent, col, DEFAULT_CONSISTENCY_LEVEL)
        return records.WriteTime.from_micros(timestamp)

    def _remove(self, keyspace, key, path):
        return self._call_in_keyspace(keyspace, 'remove', encode_string(key),
                                      path, micros_now(),
                                      DEFAULT_CONSISTENCY_LEVEL)

    @api.Trace.trace
    def remove_key(self, keyspace, column_family, key):
        return self._remove(keyspace, key, cassandra_thrift.ColumnPath(
            column_family=column_family))

    @api.Trace.trace
    def remove_super_column(self, keyspace, column_family, key,
                            super_column):
        return self._remove(keyspace, key, cassandra_thrift.ColumnPath(
            column_family=column_family,
            super_column=encode_string(super_column)))

    @api.Trace.trace
    def remove_column(self, keyspace, column_family, key, column,
                      super_column=None):
        return self._remove(keyspace, key, cassandra_thrift.ColumnPath(
            column_family=column_family,
            super_column=encode_string(super_column),
            column=encode_string(column)))

    def _degrade(self, oper, e, empty_on_error):
        if empty_on_error is None:
            empty_on_error = self.options.empty_on_error
        if not empty_on_error:
            return None
        self._logger.warning('%s failed, returning no rows: %s', oper, e)
        return records.RowSet.failed(e)

    @api.Trace.trace
    def get_key(self, keyspace, column_family, super_column, key,
                empty_on_error=None):
        """Every column of one row, as a RowSet of at most one Record."""
        parent = cassandra_thrift.ColumnParent(
            column_family=column_family,
            super_column=encode_string(super_column))
        try:
            columns = self._call_in_keyspace(
                keyspace, 'get_slice', encode_string(key), parent,
                _full_slice(), DEFAULT_CONSISTENCY_LEVEL)
        except exc.NotConnectedError:
            raise
        except exc.BrowserError as e:
            rows = self._degrade('get_key', e, empty_on_error)
            if rows is None:
                raise
            return rows
        if not columns:
            self._logger.debug('Row %s not found in %s.%s',
                               key, keyspace, column_family)
            return records.RowSet(status=records.FetchStatus.NOT_FOUND)
        return records.RowSet([records.record_from_columns(key, columns)])

    @api.Trace.trace
    def list_rows(self, keyspace, column_family, start_key, end_key,
                  max_rows, empty_on_error=None):
        """Up to max_rows rows with keys between start_key and end_key.

        Keys are bounded in the server's partitioner order, the RowSet
        itself is sorted by key.
        """
        parent = cassandra_thrift.ColumnParent(column_family=column_family)
        key_range = cassandra_thrift.KeyRange(
            start_key=encode_string(start_key),
            end_key=encode_string(end_key),
            count=max_rows)
        try:
            key_slices = self._call_in_keyspace(
                keyspace, 'get_range_slices', parent, _full_slice(),
                key_range, DEFAULT_CONSISTENCY_LEVEL)
        except exc.UnavailableError as e:
            rows = self._degrade('list_rows', e, empty_on_error)
            if rows is None:
                raise
            return rows
        return records.rowset_from_key_slices(key_slices)

    # Ring

    @api.Trace.trace
    def list_ring(self):
        if self._probe is None:
            raise exc.NotConnectedError(self.host, self.jmx_port)
        return ring.ring_from_probe(self._probe)

    @api.Trace.trace
    def get_node_info(self, endpoint):
        probe = self._new_probe(endpoint)
        try:
            return ring.node_info_from_probe(endpoint, probe)
        finally:
            probe.close()

    @api.Trace.trace
    def get_thread_pool_stats(self, endpoint):
        probe = self._new_probe(endpoint)
        try:
            return ring.tpstats_from_probe(probe)
        finally:
            probe.close()

    def get_node_infos(self, endpoints):
        """NodeInfo of every endpoint, in the given order."""
        pool = gevent.pool.Pool(self.options.pool_size)
        return pool.map(self.get_node_info, endpoints)
# end class Client
