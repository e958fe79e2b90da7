"""Pure per-kind column operations and descriptor factories.

Text, sort-key and match rules live here rather than on the descriptor so the
view pipeline can stay a set of stateless functions.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from numbers import Real
from typing import Any, TypeVar

from recordflow.core.column.models import ColumnDescriptor, ColumnKind
from recordflow.errors import DuplicateColumnError

T = TypeVar("T")

PLACEHOLDER = "—"
"""Rendered in place of missing values."""


def value_text(value: Any) -> str:
    """String representation used for filtering and default display."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def to_timestamp(value: Any) -> float | None:
    """Normalize a date-like value to a POSIX timestamp.

    Naive datetimes and plain dates are read as UTC so that mixed inputs stay
    mutually comparable. Unparseable values return None.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.timestamp()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC).timestamp()
    return None


def sort_key(column: ColumnDescriptor[T], record: T) -> Any:
    """Comparable key for a record under this column, or None when missing.

    Keys returned for one column are always mutually comparable, except when
    a custom sort_key mixes types.
    """
    value = column.value(record)
    if value is None:
        return None
    if column.sort_key is not None:
        return column.sort_key(value)

    if column.kind is ColumnKind.NUMERIC:
        if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
            return None
        if isinstance(value, float) and math.isnan(value):
            return None
        if isinstance(value, Decimal) and value.is_nan():
            return None
        return value
    if column.kind is ColumnKind.DATE:
        return to_timestamp(value)
    return value_text(value).casefold()


def format_cell(column: ColumnDescriptor[T], record: T) -> str:
    """Display text for a cell."""
    value = column.value(record)
    if column.formatter is not None:
        return column.formatter(value)
    if value is None:
        return PLACEHOLDER
    return value_text(value)


def is_active_filter(value: Any) -> bool:
    """Empty strings and None switch a filter off."""
    return value is not None and value != ""


def matches_filter(column: ColumnDescriptor[T], record: T, wanted: Any) -> bool:
    """Check one record against one column filter value.

    - str: case-insensitive substring of the value text (whole-value match
      for ENUM columns)
    - callable: predicate over the accessor value
    - anything else: equality with the accessor value
    """
    value = column.value(record)
    if isinstance(wanted, str):
        have = value_text(value).casefold()
        needle = wanted.casefold()
        if column.kind is ColumnKind.ENUM:
            return have == needle
        return needle in have
    if callable(wanted):
        return bool(wanted(value))
    return bool(value == wanted)


def index_columns(columns: Iterable[ColumnDescriptor[T]]) -> dict[str, ColumnDescriptor[T]]:
    """Map column id to descriptor, preserving order.

    Raises:
        DuplicateColumnError: If two descriptors share an id.
    """
    indexed: dict[str, ColumnDescriptor[T]] = {}
    for column in columns:
        if column.id in indexed:
            raise DuplicateColumnError(f"Duplicate column id: {column.id!r}")
        indexed[column.id] = column
    return indexed


# --- Descriptor factories ---


def item(name: str) -> Callable[[Mapping[str, Any]], Any]:
    """Accessor reading a key from mapping records (missing key reads as None)."""

    def read(record: Mapping[str, Any]) -> Any:
        return record.get(name)

    return read


def text_column(
    id: str, accessor: Callable[[T], Any] | None = None, **options: Any
) -> ColumnDescriptor[T]:
    """TEXT column. Accessor defaults to item(id)."""
    return ColumnDescriptor(id=id, accessor=accessor or item(id), kind=ColumnKind.TEXT, **options)


def enum_column(
    id: str, accessor: Callable[[T], Any] | None = None, **options: Any
) -> ColumnDescriptor[T]:
    """ENUM column. Accessor defaults to item(id)."""
    return ColumnDescriptor(id=id, accessor=accessor or item(id), kind=ColumnKind.ENUM, **options)


def date_column(
    id: str, accessor: Callable[[T], Any] | None = None, **options: Any
) -> ColumnDescriptor[T]:
    """DATE column. Accessor defaults to item(id)."""
    return ColumnDescriptor(id=id, accessor=accessor or item(id), kind=ColumnKind.DATE, **options)


def numeric_column(
    id: str, accessor: Callable[[T], Any] | None = None, **options: Any
) -> ColumnDescriptor[T]:
    """NUMERIC column. Accessor defaults to item(id)."""
    return ColumnDescriptor(
        id=id, accessor=accessor or item(id), kind=ColumnKind.NUMERIC, **options
    )
