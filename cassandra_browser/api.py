#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import collections
import copy
import cProfile
import functools
import os


DEFAULT_THRIFT_HOST = 'localhost'
DEFAULT_THRIFT_PORT = 9160
DEFAULT_JMX_PORT = 7199
DEFAULT_CQL_PORT = 9042

# Seconds
DEFAULT_TIMEOUT = 10.0


# Defines the options the client accepts and their defaults. The
# usage is to initialize a client by listing only the necessary
# options.

OptionsDefault = {
    # RPC socket timeout, applied to every call
    'timeout': DEFAULT_TIMEOUT,
    # Management endpoint HTTP timeout
    'mgmt_timeout': DEFAULT_TIMEOUT,
    'mgmt_protocol': 'http',
    'cql_port': DEFAULT_CQL_PORT,
    # {'username': ..., 'password': ...}
    'credential': None,
    'logger': None,
    # Object providing get_datacenter(address), see snitch.py
    'snitch': None,
    # Reads return an empty RowSet instead of raising on remote failure
    'empty_on_error': False,
    'log_response_time': None,
    'pool_size': 8,
}
OptionsType = collections.namedtuple(
    'Options', OptionsDefault.keys())


def make_options(**options):
    opts = copy.deepcopy(OptionsDefault)
    opts.update(
        # This to filter inputs that are None, in that case we
        # prefer to use OptionDefault values.
        dict([(k, v) for k, v in options.items() if v is not None]))
    unknown = set(opts) - set(OptionsDefault)
    if unknown:
        raise TypeError('Unknown options: %s' % ', '.join(sorted(unknown)))
    return OptionsType(**opts)


# Defines base class to trace client calls to Cassandra. The results
# will be stored in files `profile.cassandra_browser.<function>.trace`.
# They can be read using `pstats` or more evolved tools like
# kcachegrind to find bottlenecks.

class Trace(object):
    def __init__(self):
        self._trace_track = {}
        self._trace_enabled = bool(int(
            # When defined and equal to 1, profiling the executions.
            os.getenv('CASSANDRA_BROWSER_PROFILE', 0)))

    @staticmethod
    def trace(f):
        @functools.wraps(f)
        def wrapped(self, *args, **kwargs):
            if self._trace_enabled:
                if f.__name__ not in self._trace_track:
                    self._trace_track[f.__name__] = cProfile.Profile()

                p = self._trace_track[f.__name__]
                p.enable()
                try:
                    return f(self, *args, **kwargs)
                finally:
                    p.disable()
                    p.dump_stats("profile.cassandra_browser.{}.trace".format(
                        f.__name__))
            else:
                return f(self, *args, **kwargs)
        return wrapped
