#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

import re
from setuptools import setup, find_packages


def requirements(filename):
    with open(filename) as f:
        lines = f.read().splitlines()
    c = re.compile(r'\s*#.*')
    return list(filter(bool, map(lambda y: c.sub('', y).strip(), lines)))


setup(
    name='cassandra-browser',
    description="Cassandra cluster browser",
    long_description="Schema, data and ring browser for Cassandra clusters "
                     "speaking the Thrift RPC interface",
    license='Apache-2',
    author='OpenContrail',
    version='0.1dev',
    classifiers=[
        'Environment :: Console',
        'Intended Audience :: Information Technology',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: POSIX :: Linux',
        'Development Status :: 4 - Beta',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    packages=find_packages(),
    package_data={'': ['*.thrift']},
    install_requires=requirements('requirements.txt'),
    tests_require=requirements('test-requirements.txt'),
    extras_require={'test': requirements('test-requirements.txt')},
    test_suite='cassandra_browser.tests',
    entry_points={
        'console_scripts': [
            'cassandra-browser = cassandra_browser.cli:main',
        ],
    },
    keywords='cassandra thrift browser',
)
