#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

__version__ = '0.1dev'
