#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import collections
import time

from cassandra_browser.exceptions import EncodingError

UTF8 = 'utf-8'


def micros_now():
    """Write timestamp: wall-clock milliseconds scaled to microseconds."""
    return int(time.time() * 1000) * 1000


def is_empty(s):
    return s is None or s == ''


def encode_string(s):
    if s is None:
        return None
    if isinstance(s, bytes):
        return s
    return s.encode(UTF8)


def decode_string(raw):
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode(UTF8)
    except UnicodeDecodeError as e:
        raise EncodingError(raw, str(e))


def sorted_dict(mapping):
    return collections.OrderedDict(
        sorted(mapping.items(), key=lambda kv: kv[0]))


def format_value(value):
    """Stringifies a wire attribute for display, keeping absence."""
    if value is None:
        return None
    if isinstance(value, bytes):
        return decode_string(value)
    return str(value)
