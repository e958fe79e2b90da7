"""Pure sort, filter and pagination primitives.

The pipeline runs in a fixed order: column filters (AND), global filter (OR
across filterable columns), stable sort, page slice. None of these functions
mutate their inputs.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any, TypeVar

from recordflow.core.column import (
    ColumnDescriptor,
    is_active_filter,
    matches_filter,
    sort_key,
    value_text,
)
from recordflow.core.view.models import (
    PageState,
    Projection,
    SortDirection,
    SortState,
    ViewState,
)
from recordflow.errors import UnknownColumnError

T = TypeVar("T")


def apply_column_filters(
    records: Iterable[T],
    columns: Mapping[str, ColumnDescriptor[T]],
    filters: Mapping[str, Any],
) -> list[T]:
    """Keep records satisfying every active column filter.

    Raises:
        UnknownColumnError: If a filter names a column not in `columns`.
    """
    active: list[tuple[ColumnDescriptor[T], Any]] = []
    for column_id, wanted in filters.items():
        if not is_active_filter(wanted):
            continue
        if column_id not in columns:
            raise UnknownColumnError(f"Unknown column: {column_id!r}")
        active.append((columns[column_id], wanted))

    if not active:
        return list(records)
    return [r for r in records if all(matches_filter(c, r, w) for c, w in active)]


def apply_global_filter(
    records: Iterable[T],
    columns: Iterable[ColumnDescriptor[T]],
    text: str | None,
) -> list[T]:
    """Keep records where any filterable column's text contains `text`, ignoring case."""
    if not text:
        return list(records)
    needle = text.casefold()
    searchable = [c for c in columns if c.filterable]
    return [
        r for r in records if any(needle in value_text(c.value(r)).casefold() for c in searchable)
    ]


def sort_records(
    records: Iterable[T],
    column: ColumnDescriptor[T],
    direction: SortDirection,
) -> list[T]:
    """Stable sort by column. Missing and non-comparable keys go last in both directions."""
    present: list[tuple[Any, T]] = []
    missing: list[T] = []
    for record in records:
        key = sort_key(column, record)
        if key is None:
            missing.append(record)
        else:
            present.append((key, record))

    reverse = direction is SortDirection.DESC
    try:
        ordered = sorted(present, key=lambda pair: pair[0], reverse=reverse)
    except TypeError:
        # Mixed key types: keep those comparable with the first key, rest go last
        reference = type(present[0][0])
        comparable = [p for p in present if isinstance(p[0], reference)]
        missing = [r for k, r in present if not isinstance(k, reference)] + missing
        try:
            ordered = sorted(comparable, key=lambda pair: pair[0], reverse=reverse)
        except TypeError:
            # Same type, still incomparable (e.g. tuples holding None): source order
            ordered = comparable

    return [r for _, r in ordered] + missing


def page_count(total: int, size: int) -> int:
    """ceil(total / size), never less than 1."""
    return max(1, math.ceil(total / size))


def clamp_page_index(index: int, count: int) -> int:
    """Clamp into [0, count - 1]."""
    return min(max(index, 0), count - 1)


def slice_page(records: Sequence[T], page: PageState) -> list[T]:
    """Rows belonging to `page`."""
    start = page.index * page.size
    return list(records[start : start + page.size])


def next_sort(current: SortState | None, column_id: str) -> SortState | None:
    """Cycle asc -> desc -> none on the same column; another column starts at asc."""
    if current is None or current.column_id != column_id:
        return SortState(column_id, SortDirection.ASC)
    if current.direction is SortDirection.ASC:
        return SortState(column_id, SortDirection.DESC)
    return None


def project(
    records: Sequence[T],
    columns: Mapping[str, ColumnDescriptor[T]],
    state: ViewState,
) -> tuple[Projection[T], ViewState]:
    """Run the full pipeline.

    Args:
        records: Source collection. Its order is kept when unsorted.
        columns: Column descriptors keyed by id.
        state: Requested view state.

    Returns:
        The projection and the effective state. The effective state differs
        from `state` only when the page index had to be clamped.

    Raises:
        UnknownColumnError: If the sort or a filter names an unknown column.
    """
    matched = apply_column_filters(records, columns, state.filters)
    matched = apply_global_filter(matched, columns.values(), state.global_filter)
    total = len(matched)

    if state.sort is not None:
        column = columns.get(state.sort.column_id)
        if column is None:
            raise UnknownColumnError(f"Unknown column: {state.sort.column_id!r}")
        matched = sort_records(matched, column, state.sort.direction)

    count = page_count(total, state.page.size)
    index = clamp_page_index(state.page.index, count)
    if index != state.page.index:
        state = replace(state, page=replace(state.page, index=index))

    projection = Projection(
        page_rows=tuple(slice_page(matched, state.page)),
        total_matching=total,
        page_count=count,
        page_index=index,
        page_size=state.page.size,
        can_prev=index > 0,
        can_next=index < count - 1,
    )
    return projection, state
