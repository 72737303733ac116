#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import socket

DEFAULT_DATACENTER = 'datacenter1'


def local_address():
    try:
        return socket.gethostbyname(socket.gethostname())
    except socket.error:
        return '127.0.0.1'


class SimpleSnitch(object):
    """Places every node in the same datacenter."""

    def get_datacenter(self, address):
        return DEFAULT_DATACENTER
# end class SimpleSnitch
