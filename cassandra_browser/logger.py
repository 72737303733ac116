#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

"""Logging setup shared by the command line entry points."""

import logging

DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"
LOGGING_FORMAT = '%(asctime)s [%(name)s] [%(levelname)s]:  %(message)s'

ROOT_LOGGER = 'cassandra_browser'


def setup_logging(log_level='WARNING', log_file=None, log_format=None):
    logger = logging.getLogger(ROOT_LOGGER)
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)

    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler()
    formatter = logging.Formatter(fmt=log_format or LOGGING_FORMAT,
                                  datefmt=DATE_FORMAT)
    handler.setFormatter(formatter)

    # configured once, repeated calls replace the handler
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)

    return logger
