"""
Value Variant Contract

The closed set of shapes a record value (or a context leaf) may take.
Every component that inspects values dispatches on ValueKind.
"""

from __future__ import annotations
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from numbers import Real
from typing import Any, Optional


class ValueKind(Enum):
    """Tagged variant over record value shapes."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    TEXT = "text"
    TEMPORAL = "temporal"
    LIST = "list"
    MAP = "map"


class UnsupportedValue(TypeError):
    """Raised by kind_of for values outside the variant set."""

    def __init__(self, value: Any):
        super().__init__(f"Unsupported value type: {type(value).__name__}")
        self.value = value


def kind_of(value: Any) -> ValueKind:
    """
    Classify a value into its ValueKind.

    bool is checked before NUMBER because bool is an int subclass.
    Tuples, sets and frozensets are treated as lists.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, Real):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (datetime, date)):
        return ValueKind.TEMPORAL
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, (list, tuple, set, frozenset)):
        return ValueKind.LIST
    raise UnsupportedValue(value)


def kind_or_none(value: Any) -> Optional[ValueKind]:
    """kind_of without the exception, for analyzers that tolerate anything."""
    try:
        return kind_of(value)
    except UnsupportedValue:
        return None


def epoch_millis(moment: date) -> int:
    """
    Convert a temporal leaf to epoch milliseconds.

    Naive datetimes are taken as UTC; plain dates as midnight UTC.
    """
    if not isinstance(moment, datetime):
        moment = datetime(moment.year, moment.month, moment.day)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
