"""Column descriptor models.

Usage:
    status = ColumnDescriptor(
        id="status",
        accessor=lambda task: task.status,
        kind=ColumnKind.ENUM,
    )

    # Not sortable, hidden from global search
    actions = ColumnDescriptor(id="actions", accessor=lambda _: None,
                               sortable=False, filterable=False)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ColumnKind(Enum):
    """Closed set of column variants. Each kind owns its text, sort and match rules."""

    TEXT = auto()
    """Free text. Filters match case-insensitive substrings."""

    ENUM = auto()
    """One of a fixed set of values. Filters match whole values, ignoring case."""

    DATE = auto()
    """datetime, date or ISO-8601 string. Sorts chronologically."""

    NUMERIC = auto()
    """int, float or Decimal. Sorts numerically, NaN counts as missing."""


@dataclass(frozen=True, slots=True)
class ColumnDescriptor(Generic[T]):
    """Declarative description of one displayed attribute of a record.

    Attributes:
        id: Unique within a view.
        accessor: Pure function reading the value from a record.
        kind: Column variant driving default text, sort and match rules.
        sortable: Whether set_sort may target this column.
        filterable: Whether column filters and the global filter consider it.
        header: Display label (defaults to id).
        formatter: Cell renderer for display; filtering ignores it.
        sort_key: Custom key over the accessor value; None means missing.
    """

    id: str
    accessor: Callable[[T], Any]
    kind: ColumnKind = ColumnKind.TEXT
    sortable: bool = True
    filterable: bool = True
    header: str | None = None
    formatter: Callable[[Any], str] | None = None
    sort_key: Callable[[Any], Any] | None = None

    @property
    def label(self) -> str:
        return self.header if self.header is not None else self.id

    def value(self, record: T) -> Any:
        """Read this column's value from a record."""
        return self.accessor(record)
