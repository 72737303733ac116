#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

"""
Management half of the remote stub adapter.

Node management beans are read over HTTP/JSON through the Jolokia agent
attached to the Cassandra JVM. One NodeProbe talks to exactly one node.
"""

import collections
import logging

import requests

from cassandra_browser import exceptions as exc

STORAGE_SERVICE_MBEAN = 'org.apache.cassandra.db:type=StorageService'
RUNTIME_MBEAN = 'java.lang:type=Runtime'
MEMORY_MBEAN = 'java.lang:type=Memory'
THREAD_POOL_DOMAINS = ('org.apache.cassandra.request',
                       'org.apache.cassandra.internal')
THREAD_POOL_ATTRIBUTES = ['ActiveCount', 'PendingTasks', 'CompletedTasks']

MemoryUsage = collections.namedtuple(
    'MemoryUsage', ['init', 'used', 'committed', 'max'])

ThreadPoolProxy = collections.namedtuple(
    'ThreadPoolProxy', ['active_count', 'pending_tasks', 'completed_tasks'])

LOG = logging.getLogger(__name__)


def _mbean_property(mbean, name):
    _, _, props = mbean.partition(':')
    for prop in props.split(','):
        key, _, value = prop.partition('=')
        if key == name:
            return value
    return None


class NodeProbe(object):
    def __init__(self, host, port, timeout=None, protocol='http',
                 session=None):
        self.host = host
        self.port = port
        self.protocol = protocol
        self._timeout = timeout
        self._session = session
    # end __init__

    @property
    def url(self):
        return "{proto}://{ip}:{port}/jolokia/".format(
            proto=self.protocol, ip=self.host, port=self.port)

    @property
    def is_open(self):
        return self._session is not None

    def connect(self):
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({'Accept': 'application/json'})
        try:
            self._send({'type': 'version'})
        except exc.BrowserError:
            self.close()
            raise
        LOG.info('Management session to %s:%s opened', self.host, self.port)
        return self
    # end connect

    def close(self):
        if self._session is None:
            return
        try:
            self._session.close()
        finally:
            self._session = None
    # end close

    def _send(self, payload):
        if self._session is None:
            raise exc.NotConnectedError(self.host, self.port)
        mbean = payload.get('mbean', payload['type'])
        try:
            resp = self._session.post(self.url, json=payload,
                                      timeout=self._timeout)
        except requests.exceptions.Timeout as e:
            raise exc.TimedOutError(str(e))
        except requests.exceptions.RequestException as e:
            raise exc.TransportError(self.host, self.port, str(e))
        if resp.status_code != 200:
            raise exc.ManagementError(mbean, resp.status_code, resp.reason)
        try:
            body = resp.json()
        except ValueError as e:
            raise exc.ManagementError(mbean, resp.status_code, str(e))
        if body.get('status') != 200:
            raise exc.ManagementError(
                mbean, body.get('status'), body.get('error'))
        return body.get('value')
    # end _send

    def read(self, mbean, attribute=None):
        payload = {'type': 'read', 'mbean': mbean}
        if attribute is not None:
            payload['attribute'] = attribute
        return self._send(payload)

    def get_token_to_endpoint_map(self):
        return self.read(STORAGE_SERVICE_MBEAN, 'TokenToEndpointMap') or {}

    def get_live_nodes(self):
        return self.read(STORAGE_SERVICE_MBEAN, 'LiveNodes') or []

    def get_unreachable_nodes(self):
        return self.read(STORAGE_SERVICE_MBEAN, 'UnreachableNodes') or []

    def get_load_map(self):
        return self.read(STORAGE_SERVICE_MBEAN, 'LoadMap') or {}

    def get_load_string(self):
        return self.read(STORAGE_SERVICE_MBEAN, 'LoadString')

    def get_current_generation_number(self):
        return self.read(STORAGE_SERVICE_MBEAN, 'CurrentGenerationNumber')

    def get_uptime(self):
        """JVM uptime in milliseconds"""
        return self.read(RUNTIME_MBEAN, 'Uptime')

    def get_heap_memory_usage(self):
        usage = self.read(MEMORY_MBEAN, 'HeapMemoryUsage') or {}
        return MemoryUsage(init=usage.get('init'),
                           used=usage.get('used'),
                           committed=usage.get('committed'),
                           max=usage.get('max'))

    def get_thread_pool_proxies(self):
        """Yields (pool name, ThreadPoolProxy) for every registered stage.

        Request stages come first, then internal ones; each group is
        ordered by pool name.
        """
        for domain in THREAD_POOL_DOMAINS:
            try:
                beans = self.read('%s:type=*' % domain,
                                  THREAD_POOL_ATTRIBUTES) or {}
            except exc.ManagementError as e:
                # no stage registered under that domain
                if e.status != 404:
                    raise
                beans = {}
            pools = {}
            for mbean, attrs in beans.items():
                name = _mbean_property(mbean, 'type')
                if name is None:
                    continue
                pools[name] = ThreadPoolProxy(
                    active_count=attrs.get('ActiveCount'),
                    pending_tasks=attrs.get('PendingTasks'),
                    completed_tasks=attrs.get('CompletedTasks'))
            for name in sorted(pools):
                yield name, pools[name]
    # end get_thread_pool_proxies
# end class NodeProbe
