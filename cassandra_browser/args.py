#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import argparse
import configparser

from cassandra_browser import api


def default_options():
    return {
        'host': api.DEFAULT_THRIFT_HOST,
        'thrift_port': api.DEFAULT_THRIFT_PORT,
        'jmx_port': api.DEFAULT_JMX_PORT,
        'cql_port': api.DEFAULT_CQL_PORT,
        'timeout': api.DEFAULT_TIMEOUT,
        'mgmt_timeout': api.DEFAULT_TIMEOUT,
        'mgmt_protocol': 'http',
        'cassandra_user': None,
        'cassandra_password': None,
        'empty_on_error': False,
        'log_level': 'WARNING',
        'log_file': None,
        'log_format': None,
    }


def add_parser_arguments(parser):
    parser.add_argument("--host",
                        help="Cassandra node to connect to")
    parser.add_argument("--thrift_port", type=int,
                        help="RPC port of the node")
    parser.add_argument("--jmx_port", type=int,
                        help="Management (Jolokia) port of the node")
    parser.add_argument("--cql_port", type=int,
                        help="Native query-language port of the node")
    parser.add_argument("--timeout", type=float,
                        help="RPC timeout in seconds")
    parser.add_argument("--mgmt_timeout", type=float,
                        help="Management request timeout in seconds")
    parser.add_argument("--mgmt_protocol", choices=['http', 'https'],
                        help="Scheme used to reach the management agent")
    parser.add_argument("--cassandra_user",
                        help="Cassandra user name")
    parser.add_argument("--cassandra_password",
                        help="Cassandra password")
    parser.add_argument("--empty_on_error", action="store_true",
                        help="Return no rows instead of failing when a "
                             "read cannot be served")
    parser.add_argument("--log_level",
                        help="Severity level for local logging")
    parser.add_argument("--log_file",
                        help="Filename for the logs to be written to")
    parser.add_argument("--log_format",
                        help="Format string for the log records")


def parse_args(args_str, add_commands=None):
    """
    Please see the example below.

    cassandra-browser
    --host 10.1.2.3
    --thrift_port 9160
    --jmx_port 7199
    --log_level DEBUG
    keyspaces

    Options are read from the [DEFAULTS] section of the config files
    given with -c, credentials also from [CASSANDRA]. Command line
    options win over config files.
    """
    # Source any specified config/ini file
    # Turn off help, so we see all options in response to -h
    conf_parser = argparse.ArgumentParser(add_help=False)

    conf_parser.add_argument("-c", "--conf_file", action='append',
                             help="Specify config file", metavar="FILE")
    if isinstance(args_str, str):
        args_str = args_str.split()
    args, remaining_argv = conf_parser.parse_known_args(args_str)

    defaults = default_options()

    saved_conf_file = args.conf_file
    if args.conf_file:
        config = configparser.ConfigParser(interpolation=None)
        config.read(args.conf_file)
        if 'DEFAULTS' in config.sections():
            defaults.update(dict(config.items("DEFAULTS")))
        if 'CASSANDRA' in config.sections():
            defaults.update(dict(config.items('CASSANDRA')))

    # Override with CLI options
    # Don't surpress add_help here so it will handle -h
    parser = argparse.ArgumentParser(
        prog='cassandra-browser',
        # Inherit options from config_parser
        parents=[conf_parser],
        # print script description with -h/--help
        description=parse_args.__doc__,
        # Don't mess with format of description
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.set_defaults(**defaults)

    add_parser_arguments(parser)
    if add_commands is not None:
        add_commands(parser)
    args = parser.parse_args(remaining_argv)

    # values sourced from config files are strings
    args.thrift_port = int(args.thrift_port)
    args.jmx_port = int(args.jmx_port)
    args.cql_port = int(args.cql_port)
    args.timeout = float(args.timeout)
    args.mgmt_timeout = float(args.mgmt_timeout)
    args.empty_on_error = (str(args.empty_on_error).lower() == 'true')

    args.conf_file = saved_conf_file
    return args
# end parse_args


def client_options(args):
    """Client keyword options matching parsed arguments."""
    credential = None
    if args.cassandra_user:
        credential = {'username': args.cassandra_user,
                      'password': args.cassandra_password or ''}
    return {
        'timeout': args.timeout,
        'mgmt_timeout': args.mgmt_timeout,
        'mgmt_protocol': args.mgmt_protocol,
        'cql_port': args.cql_port,
        'credential': credential,
        'empty_on_error': args.empty_on_error,
    }
