#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

"""
RPC half of the remote stub adapter.

The Cassandra interface definition ships with the package and is loaded
at import time, so the wire structs (`KsDef`, `CfDef`, `ColumnParent`,
...) are available as attributes of `cassandra_thrift`.
"""

import logging
import os
import socket

import thriftpy2
from thriftpy2.protocol import TBinaryProtocolFactory
from thriftpy2.rpc import make_client
from thriftpy2.thrift import TApplicationException
from thriftpy2.transport import TFramedTransportFactory
from thriftpy2.transport import TTransportException

from cassandra_browser import exceptions as exc

IDL_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                        'cassandra.thrift')
cassandra_thrift = thriftpy2.load(IDL_PATH, module_name='cassandra_thrift')

ConsistencyLevel = cassandra_thrift.ConsistencyLevel

# The browser always asks for the weakest level, one replica must
# acknowledge.
DEFAULT_CONSISTENCY_LEVEL = ConsistencyLevel.ONE

LOG = logging.getLogger(__name__)


def translate_error(e, host, port):
    """Maps a remote or transport failure on the browser taxonomy."""
    why = getattr(e, 'why', None)
    if isinstance(e, cassandra_thrift.NotFoundException):
        return exc.NotFoundError(why)
    if isinstance(e, cassandra_thrift.InvalidRequestException):
        return exc.InvalidSchemaError(why)
    if isinstance(e, cassandra_thrift.SchemaDisagreementException):
        return exc.SchemaConflictError(why)
    if isinstance(e, cassandra_thrift.UnavailableException):
        return exc.UnavailableError(why)
    if isinstance(e, cassandra_thrift.TimedOutException):
        return exc.TimedOutError(why)
    if isinstance(e, (cassandra_thrift.AuthenticationException,
                      cassandra_thrift.AuthorizationException)):
        return exc.BrowserError('Access denied: %s' % why)
    if isinstance(e, socket.timeout) or (
            isinstance(e, TTransportException) and
            e.type == TTransportException.TIMED_OUT):
        return exc.TimedOutError(str(e) or 'socket timeout')
    if isinstance(e, (TTransportException, OSError)):
        return exc.TransportError(host, port, str(e))
    if isinstance(e, TApplicationException):
        return exc.BrowserError('Remote application error: %s' % e)
    return None


class RpcSession(object):
    """Framed binary RPC session to one node.

    Not reentrant: the remote keyspace scope is per session, so calls
    must be issued one at a time.
    """

    def __init__(self, host, port, timeout=None, credential=None):
        self.host = host
        self.port = port
        self._timeout = timeout
        self._credential = credential
        self._client = None
    # end __init__

    @property
    def is_open(self):
        return self._client is not None

    def open(self):
        if self.is_open:
            return
        kwargs = {}
        if self._timeout:
            # milliseconds
            kwargs['timeout'] = int(self._timeout * 1000)
        try:
            self._client = make_client(
                cassandra_thrift.Cassandra, self.host, self.port,
                trans_factory=TFramedTransportFactory(),
                proto_factory=TBinaryProtocolFactory(),
                **kwargs)
        except (TTransportException, OSError) as e:
            raise exc.TransportError(self.host, self.port, str(e))
        LOG.info('RPC session to %s:%s opened', self.host, self.port)

        if self._credential:
            try:
                self.call('login', cassandra_thrift.AuthenticationRequest(
                    credentials=dict(self._credential)))
            except exc.BrowserError:
                self.close()
                raise
    # end open

    def close(self):
        if not self.is_open:
            return
        try:
            self._client.close()
        except Exception as e:
            LOG.debug('Ignoring error while closing %s:%s: %s',
                      self.host, self.port, e)
        finally:
            self._client = None
        LOG.info('RPC session to %s:%s closed', self.host, self.port)
    # end close

    def call(self, method, *args):
        if not self.is_open:
            raise exc.NotConnectedError(self.host, self.port)
        LOG.debug('RPC %s%r', method, args)
        try:
            return getattr(self._client, method)(*args)
        except Exception as e:
            translated = translate_error(e, self.host, self.port)
            if translated is None:
                raise
            raise translated from e
    # end call

    def call_in_keyspace(self, keyspace, method, *args):
        """Selects the keyspace right before the call it scopes."""
        self.call('set_keyspace', keyspace)
        return self.call(method, *args)
# end class RpcSession
