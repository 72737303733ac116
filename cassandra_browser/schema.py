#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

"""
Schema translator.

Keyspace and column family descriptors are edited as strings (the way a
property form hands them over) and turned into wire definitions through
the declarative CF_ATTRIBUTE_MAP table. Reads go the other way through
descriptor_from_cf_def and the CF_DEF_ATTRIBUTES dump table.
"""

import collections

from cassandra_browser import exceptions as exc
from cassandra_browser.rpc import cassandra_thrift
from cassandra_browser.snitch import SimpleSnitch
from cassandra_browser.snitch import local_address
from cassandra_browser.utils import decode_string
from cassandra_browser.utils import encode_string
from cassandra_browser.utils import format_value
from cassandra_browser.utils import is_empty

COLUMN_TYPE_STANDARD = 'Standard'
COLUMN_TYPE_SUPER = 'Super'
COLUMN_TYPES = (COLUMN_TYPE_STANDARD, COLUMN_TYPE_SUPER)

SIMPLE_STRATEGY = 'SimpleStrategy'
NETWORK_TOPOLOGY_STRATEGY = 'NetworkTopologyStrategy'
REPLICATION_FACTOR_OPTION = 'replication_factor'

_MARSHAL = 'org.apache.cassandra.db.marshal.'
_LOCATOR = 'org.apache.cassandra.locator.'

STRATEGY_MAP = collections.OrderedDict([
    (NETWORK_TOPOLOGY_STRATEGY, _LOCATOR + NETWORK_TOPOLOGY_STRATEGY),
    (SIMPLE_STRATEGY, _LOCATOR + SIMPLE_STRATEGY),
])

COMPARATOR_TYPE_MAP = collections.OrderedDict(
    (_MARSHAL + t, t) for t in ('AsciiType', 'BytesType', 'LexicalUUIDType',
                                'LongType', 'TimeUUIDType', 'UTF8Type'))

VALIDATION_CLASS_MAP = collections.OrderedDict(
    (_MARSHAL + t, t) for t in ('AsciiType', 'BytesType', 'IntegerType',
                                'LongType', 'TimeUUIDType', 'UTF8Type'))


class ColumnMetadata(object):
    def __init__(self, column_name, validation_class=None, index_type=None,
                 index_name=None):
        self.column_name = column_name
        self.validation_class = validation_class
        # index type name, e.g. 'KEYS'
        self.index_type = index_type
        self.index_name = index_name
    # end __init__

    def __eq__(self, other):
        return (isinstance(other, ColumnMetadata) and
                vars(self) == vars(other))

    def __repr__(self):
        return 'ColumnMetadata(%r)' % vars(self)
# end class ColumnMetadata


class ColumnFamilyDescriptor(object):
    """Column family as edited by the user, every tunable is a string."""

    TUNABLES = ('comment', 'rows_cached', 'row_cache_save_period',
                'keys_cached', 'key_cache_save_period', 'read_repair_chance',
                'gc_grace', 'memtable_operations', 'memtable_throughput',
                'memtable_flush_after', 'default_validation_class',
                'min_compaction_threshold', 'max_compaction_threshold')

    def __init__(self, name, column_type=COLUMN_TYPE_STANDARD,
                 comparator=None, subcomparator=None, id=None, metadata=None,
                 **tunables):
        unknown = set(tunables) - set(self.TUNABLES)
        if unknown:
            raise TypeError('Unknown column family attributes: %s' %
                            ', '.join(sorted(unknown)))
        self.name = name
        self.column_type = column_type
        self.comparator = comparator
        self.subcomparator = subcomparator
        self.id = id
        self.metadata = list(metadata or [])
        for attr in self.TUNABLES:
            setattr(self, attr, tunables.get(attr))
    # end __init__

    @property
    def is_super(self):
        return self.column_type == COLUMN_TYPE_SUPER

    def __eq__(self, other):
        return (isinstance(other, ColumnFamilyDescriptor) and
                vars(self) == vars(other))

    def __repr__(self):
        return 'ColumnFamilyDescriptor(%r)' % vars(self)
# end class ColumnFamilyDescriptor


class KeyspaceDescriptor(object):
    def __init__(self, name, strategy_class, strategy_options=None,
                 column_families=None):
        self.name = name
        self.strategy_class = strategy_class
        self.strategy_options = dict(strategy_options or {})
        self.column_families = list(column_families or [])
    # end __init__

    @classmethod
    def from_ks_def(cls, ks_def):
        return cls(ks_def.name, ks_def.strategy_class,
                   ks_def.strategy_options,
                   [descriptor_from_cf_def(cf_def)
                    for cf_def in ks_def.cf_defs or []])
# end class KeyspaceDescriptor


# Keyspace

def strategy_options(strategy, options, replication_factor, snitch=None,
                     merge=False, address=None):
    """Builds the replication options sent along a keyspace definition.

    With merge=False the caller's options are dropped and only the
    computed entry is sent, which is how the browser has always behaved.
    merge=True keeps them and adds the computed entry on top.
    """
    if merge:
        opts = dict(options or {})
    else:
        opts = {}

    if NETWORK_TOPOLOGY_STRATEGY in strategy:
        snitch = snitch or SimpleSnitch()
        datacenter = snitch.get_datacenter(address or local_address())
        opts[datacenter] = '1'
    else:
        opts[REPLICATION_FACTOR_OPTION] = str(replication_factor)
    return opts


def build_ks_def(name, strategy, options):
    # column families are created by separate calls
    return cassandra_thrift.KsDef(name=name,
                                  strategy_class=strategy,
                                  strategy_options=options,
                                  cf_defs=[])


# Column family

def _parser(typ):
    def parse(attr, value):
        try:
            return typ(value)
        except (TypeError, ValueError):
            raise exc.InvalidSchemaError(
                'Invalid value %r for %s, %s expected' % (
                    value, attr, typ.__name__))
    return parse


_str = _parser(str)
_int = _parser(int)
_float = _parser(float)

# (descriptor attribute, wire field, parser)
CF_ATTRIBUTE_MAP = (
    ('comparator', 'comparator_type', _str),
    ('comment', 'comment', _str),
    ('rows_cached', 'row_cache_size', _float),
    ('row_cache_save_period', 'row_cache_save_period_in_seconds', _int),
    ('keys_cached', 'key_cache_size', _float),
    ('key_cache_save_period', 'key_cache_save_period_in_seconds', _int),
    ('read_repair_chance', 'read_repair_chance', _float),
    ('gc_grace', 'gc_grace_seconds', _int),
    ('memtable_operations', 'memtable_operations_in_millions', _float),
    ('memtable_throughput', 'memtable_throughput_in_mb', _int),
    ('memtable_flush_after', 'memtable_flush_after_mins', _int),
    ('default_validation_class', 'default_validation_class', _str),
    ('min_compaction_threshold', 'min_compaction_threshold', _int),
    ('max_compaction_threshold', 'max_compaction_threshold', _int),
)


def _index_type_value(index_type):
    if index_type is None or isinstance(index_type, int):
        return index_type
    try:
        return cassandra_thrift.IndexType._NAMES_TO_VALUES[index_type.upper()]
    except KeyError:
        raise exc.InvalidSchemaError('Unknown index type %r' % index_type)


def _index_type_name(index_type):
    if index_type is None:
        return None
    return cassandra_thrift.IndexType._VALUES_TO_NAMES.get(
        index_type, str(index_type))


def build_column_def(metadata):
    column_def = cassandra_thrift.ColumnDef(
        name=encode_string(metadata.column_name))
    if metadata.validation_class is not None:
        column_def.validation_class = metadata.validation_class
    if metadata.index_type is not None:
        column_def.index_type = _index_type_value(metadata.index_type)
    if metadata.index_name is not None:
        column_def.index_name = metadata.index_name
    return column_def


def build_cf_def(keyspace, descriptor, include_id=False):
    """Wire definition of a column family.

    Attributes left empty keep the server defaults.
    """
    if is_empty(descriptor.name):
        raise exc.InvalidSchemaError('Column family name is required')
    cf_def = cassandra_thrift.CfDef(keyspace=keyspace, name=descriptor.name)
    if not is_empty(descriptor.column_type):
        if descriptor.column_type not in COLUMN_TYPES:
            raise exc.InvalidSchemaError(
                'Invalid column type %r' % descriptor.column_type)
        cf_def.column_type = descriptor.column_type
    if include_id and not is_empty(descriptor.id):
        cf_def.id = _int('id', descriptor.id)

    for attr, field, parse in CF_ATTRIBUTE_MAP:
        value = getattr(descriptor, attr)
        if not is_empty(value):
            setattr(cf_def, field, parse(attr, value))

    if descriptor.is_super and not is_empty(descriptor.subcomparator):
        cf_def.subcomparator_type = descriptor.subcomparator

    if descriptor.metadata:
        cf_def.column_metadata = [build_column_def(m)
                                  for m in descriptor.metadata]
    return cf_def


def descriptor_from_cf_def(cf_def):
    metadata = [ColumnMetadata(decode_string(column_def.name),
                               column_def.validation_class,
                               _index_type_name(column_def.index_type),
                               column_def.index_name)
                for column_def in cf_def.column_metadata or []]
    tunables = {}
    for attr, field, _ in CF_ATTRIBUTE_MAP:
        if attr == 'comparator':
            continue
        tunables[attr] = format_value(getattr(cf_def, field))
    return ColumnFamilyDescriptor(
        cf_def.name,
        column_type=cf_def.column_type,
        comparator=cf_def.comparator_type,
        subcomparator=cf_def.subcomparator_type,
        id=format_value(cf_def.id),
        metadata=metadata,
        **tunables)


def _column_names(cf_def):
    if not cf_def.column_metadata:
        return None
    return ', '.join(decode_string(c.name) for c in cf_def.column_metadata)


# (attribute name, accessor) of every field shown in the generic
# property view of a column family
CF_DEF_ATTRIBUTES = (
    ('keyspace', lambda cf: cf.keyspace),
    ('name', lambda cf: cf.name),
    ('column_type', lambda cf: cf.column_type),
    ('comparator_type', lambda cf: cf.comparator_type),
    ('subcomparator_type', lambda cf: cf.subcomparator_type),
    ('comment', lambda cf: cf.comment),
    ('row_cache_size', lambda cf: cf.row_cache_size),
    ('key_cache_size', lambda cf: cf.key_cache_size),
    ('read_repair_chance', lambda cf: cf.read_repair_chance),
    ('column_metadata', _column_names),
    ('gc_grace_seconds', lambda cf: cf.gc_grace_seconds),
    ('default_validation_class', lambda cf: cf.default_validation_class),
    ('id', lambda cf: cf.id),
    ('min_compaction_threshold', lambda cf: cf.min_compaction_threshold),
    ('max_compaction_threshold', lambda cf: cf.max_compaction_threshold),
    ('row_cache_save_period_in_seconds',
     lambda cf: cf.row_cache_save_period_in_seconds),
    ('key_cache_save_period_in_seconds',
     lambda cf: cf.key_cache_save_period_in_seconds),
    ('memtable_flush_after_mins', lambda cf: cf.memtable_flush_after_mins),
    ('memtable_throughput_in_mb', lambda cf: cf.memtable_throughput_in_mb),
    ('memtable_operations_in_millions',
     lambda cf: cf.memtable_operations_in_millions),
)


def cf_def_attributes(cf_def):
    return collections.OrderedDict(
        (name, format_value(accessor(cf_def)))
        for name, accessor in CF_DEF_ATTRIBUTES)


def find_cf_def(ks_def, name):
    """Case-insensitive lookup, None when the keyspace has no such family."""
    wanted = name.lower()
    for cf_def in ks_def.cf_defs or []:
        if cf_def.name.lower() == wanted:
            return cf_def
    return None


def column_family_names(ks_def):
    return sorted(set(cf_def.name for cf_def in ks_def.cf_defs or []))
