"""View state and projection models.

ViewState is an immutable value. RecordView replaces it on every intent
operation and nothing else holds a reference that can change it.

Usage:
    state = ViewState.initial(page_size=10)
    state = replace(state, sort=SortState("name", SortDirection.ASC))
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class SortDirection(Enum):
    """Sort direction for the active sort column."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class SortState:
    """Active sort: one column and a direction."""

    column_id: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True, slots=True)
class PageState:
    """Requested page. `index` is zero-based."""

    index: int = 0
    size: int = 10


def _empty_filters() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ViewState:
    """Sort, filter and page selection of one view.

    Attributes:
        sort: Active sort, or None for source order.
        filters: Column id to filter value (string or predicate). Read-only.
        global_filter: Text searched across every filterable column.
        page: Requested page.
    """

    sort: SortState | None = None
    filters: Mapping[str, Any] = field(default_factory=_empty_filters)
    global_filter: str | None = None
    page: PageState = field(default_factory=PageState)

    @classmethod
    def initial(cls, page_size: int) -> ViewState:
        """Defaults used when a view mounts."""
        return cls(page=PageState(index=0, size=page_size))


@dataclass(frozen=True, slots=True)
class Projection(Generic[T]):
    """Sorted, filtered, paginated result ready for display.

    Attributes:
        page_rows: Records on the current page, in display order.
        total_matching: Records passing every filter, ignoring pagination.
        page_count: Number of pages, never less than 1.
        page_index: Page the rows belong to (after clamping).
        page_size: Rows per page.
        can_prev: A previous page exists.
        can_next: A next page exists.
    """

    page_rows: tuple[T, ...]
    total_matching: int
    page_count: int
    page_index: int
    page_size: int
    can_prev: bool
    can_next: bool
