#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import importlib
import logging

try:
    cassandra = importlib.import_module('cassandra')
    cassandra.auth = importlib.import_module('cassandra.auth')
    cassandra.cluster = importlib.import_module('cassandra.cluster')
except ImportError:
    cassandra = None

from cassandra_browser import exceptions as exc

LOG = logging.getLogger(__name__)


class CqlSession(object):
    """Live handle on the query-language endpoint of one keyspace.

    Nothing is queried here, callers get the driver session through
    `session`.
    """

    def __init__(self, host, port, keyspace, timeout=None, credential=None):
        global cassandra
        if cassandra is None:
            raise ImportError("the global 'cassandra' can't "
                              "be null at this step. Please verify "
                              "dependencies.")
        self.host = host
        self.port = port
        self.keyspace = keyspace
        self._timeout = timeout
        self._credential = credential
        self._cluster = None
        self._session = None
    # end __init__

    @property
    def is_open(self):
        return self._session is not None

    @property
    def session(self):
        return self._session

    def open(self):
        if self.is_open:
            return
        auth_provider = None
        if self._credential:
            auth_provider = cassandra.auth.PlainTextAuthProvider(
                username=self._credential.get('username'),
                password=self._credential.get('password'))
        kwargs = {}
        if self._timeout:
            kwargs['connect_timeout'] = self._timeout
        self._cluster = cassandra.cluster.Cluster(
            [self.host], port=self.port, auth_provider=auth_provider,
            **kwargs)
        try:
            self._session = self._cluster.connect(self.keyspace)
        except Exception as e:
            self._cluster.shutdown()
            self._cluster = None
            raise exc.DriverError('Cannot connect to %s:%s/%s: %s' % (
                self.host, self.port, self.keyspace, e))
        LOG.info('CQL session to %s:%s/%s opened',
                 self.host, self.port, self.keyspace)
    # end open

    def close(self):
        if not self.is_open:
            return
        try:
            self._session.shutdown()
            self._cluster.shutdown()
        except Exception as e:
            raise exc.DriverError(str(e))
        finally:
            self._session = None
            self._cluster = None
        LOG.info('CQL session to %s:%s/%s closed',
                 self.host, self.port, self.keyspace)
    # end close
# end class CqlSession
