#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#

"""
Display model of the data translator.

A fetch produces a RowSet: row key -> Record, each Record holding either
super columns (name -> SuperColumnRecord -> cells) or flat cells. Every
level is kept sorted by name. Child records point back at their parent
through a weak reference; the parent owns the child, never the reverse.
"""

import collections
import datetime
import enum
import weakref

from cassandra_browser.utils import decode_string
from cassandra_browser.utils import sorted_dict


class CellTimestamp(int):
    """Display timestamp of a cell, in milliseconds."""

    @classmethod
    def from_micros(cls, micros):
        return cls(micros // 1000)

    def as_datetime(self):
        return datetime.datetime.fromtimestamp(self / 1000.0)
# end class CellTimestamp


class WriteTime(int):
    """Confirmation time of an insert, in whole seconds."""

    @classmethod
    def from_micros(cls, micros):
        return cls(micros // 1000000)

    def as_datetime(self):
        return datetime.datetime.fromtimestamp(self)
# end class WriteTime


class FetchStatus(enum.Enum):
    FOUND = 'found'
    NOT_FOUND = 'not-found'
    EMPTY = 'empty'
    TRANSIENT_FAILURE = 'transient-failure'
# end class FetchStatus


class _Child(object):
    def __init__(self, parent):
        self._parent = weakref.ref(parent) if parent is not None else None

    @property
    def parent(self):
        if self._parent is None:
            return None
        return self._parent()
# end class _Child


class CellRecord(_Child):
    def __init__(self, parent, name, value, timestamp):
        super(CellRecord, self).__init__(parent)
        self.name = name
        self.value = value
        self.timestamp = timestamp
    # end __init__

    def __repr__(self):
        return 'CellRecord(%r, %r, %r)' % (self.name, self.value,
                                           self.timestamp)
# end class CellRecord


class SuperColumnRecord(_Child):
    def __init__(self, parent, name, cells=None):
        super(SuperColumnRecord, self).__init__(parent)
        self.name = name
        self.cells = sorted_dict(cells or {})
    # end __init__

    def __repr__(self):
        return 'SuperColumnRecord(%r, %r)' % (self.name, list(self.cells))
# end class SuperColumnRecord


class Record(object):
    """One row. A row is homogeneous: super columns or flat cells."""

    def __init__(self, name, super_columns=None, cells=None, is_super=False):
        self.name = name
        self.super_columns = sorted_dict(super_columns or {})
        self.cells = sorted_dict(cells or {})
        self.is_super = is_super
    # end __init__

    def __len__(self):
        return len(self.super_columns) + len(self.cells)

    def __repr__(self):
        return 'Record(%r, super=%s, columns=%r)' % (
            self.name, self.is_super,
            list(self.super_columns) + list(self.cells))
# end class Record


class RowSet(collections.OrderedDict):
    """Rows keyed by row key, sorted, plus how the fetch went.

    `error` is set when the fetch degraded to an empty result instead of
    raising.
    """

    def __init__(self, records=(), status=None, error=None):
        super(RowSet, self).__init__(
            sorted(((r.name, r) for r in records), key=lambda kv: kv[0]))
        if status is None:
            status = FetchStatus.FOUND if self else FetchStatus.EMPTY
        self.status = status
        self.error = error
    # end __init__

    @classmethod
    def failed(cls, error):
        return cls(status=FetchStatus.TRANSIENT_FAILURE, error=error)

    @property
    def degraded(self):
        return self.status == FetchStatus.TRANSIENT_FAILURE
# end class RowSet


def _cell(parent, column):
    return CellRecord(parent,
                      decode_string(column.name),
                      decode_string(column.value),
                      CellTimestamp.from_micros(column.timestamp))


def record_from_columns(key, columns):
    """Builds the Record of one row from its ColumnOrSuperColumn list."""
    record = Record(key)
    for cosc in columns or []:
        record.is_super = cosc.super_column is not None
        if record.is_super:
            scol = cosc.super_column
            super_column = SuperColumnRecord(record,
                                             decode_string(scol.name))
            for column in scol.columns or []:
                cell = _cell(super_column, column)
                super_column.cells[cell.name] = cell
            super_column.cells = sorted_dict(super_column.cells)
            record.super_columns[super_column.name] = super_column
        else:
            cell = _cell(record, cosc.column)
            record.cells[cell.name] = cell
    record.super_columns = sorted_dict(record.super_columns)
    record.cells = sorted_dict(record.cells)
    return record


def rowset_from_key_slices(key_slices):
    # rows without live columns are kept, range scans return tombstones
    return RowSet(record_from_columns(decode_string(key_slice.key),
                                      key_slice.columns)
                  for key_slice in key_slices or [])
