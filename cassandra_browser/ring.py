#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import collections

MB = 1024 * 1024


class RingTopology(object):
    def __init__(self, range_map, live_nodes, dead_nodes, load_map):
        # token -> endpoint
        self.range_map = dict(range_map)
        self.ranges = sorted(self.range_map)
        self.live_nodes = list(live_nodes)
        self.dead_nodes = list(dead_nodes)
        # endpoint -> load string
        self.load_map = dict(load_map)
    # end __init__

    def is_live(self, endpoint):
        return endpoint in self.live_nodes

    def __iter__(self):
        """Yields (token, endpoint) in range order."""
        for token in self.ranges:
            yield token, self.range_map[token]
# end class RingTopology


NodeInfo = collections.namedtuple(
    'NodeInfo', ['endpoint', 'load', 'generation_number', 'uptime',
                 'mem_used', 'mem_max'])

ThreadPoolStats = collections.namedtuple(
    'ThreadPoolStats', ['pool_name', 'active_count', 'pending_tasks',
                        'completed_tasks'])


def ring_from_probe(probe):
    return RingTopology(probe.get_token_to_endpoint_map(),
                        probe.get_live_nodes(),
                        probe.get_unreachable_nodes(),
                        probe.get_load_map())


def _megabytes(value):
    if value is None:
        return None
    return float(value) / MB


def node_info_from_probe(endpoint, probe):
    heap = probe.get_heap_memory_usage()
    uptime = probe.get_uptime()
    return NodeInfo(endpoint=endpoint,
                    load=probe.get_load_string(),
                    generation_number=probe.get_current_generation_number(),
                    uptime=uptime // 1000 if uptime is not None else None,
                    mem_used=_megabytes(heap.used),
                    mem_max=_megabytes(heap.max))


def tpstats_from_probe(probe):
    return [ThreadPoolStats(name, proxy.active_count, proxy.pending_tasks,
                            proxy.completed_tasks)
            for name, proxy in probe.get_thread_pool_proxies()]
