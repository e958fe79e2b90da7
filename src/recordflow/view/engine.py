"""RecordView: reactive sorted, filtered, paginated view over in-memory records.

Usage:
    view = RecordView(rows, [
        text_column("name"),
        enum_column("status"),
        date_column("updated_at", header="Updated"),
    ])

    view.set_column_filter("status", "todo")
    view.set_sort("updated_at")  # asc; call again for desc, again for none
    view.next_page()

    for row in view.projection.page_rows:
        ...

    # Feed refreshed backend data back in
    view.upsert(updated_row)
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Iterable
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from recordflow.config import ViewSettings
from recordflow.core.column import ColumnDescriptor, index_columns, is_active_filter
from recordflow.core.identity import record_id
from recordflow.core.types import RecordId
from recordflow.core.view import (
    PageState,
    Projection,
    SortDirection,
    SortState,
    ViewState,
    next_sort,
    project,
)
from recordflow.errors import ColumnCapabilityError, UnknownColumnError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProjectionListener = Callable[[Projection[Any]], None]
"""Called with the fresh projection after every state or data change."""


class RecordView(Generic[T]):
    """Owns a ViewState and the source records, derives a Projection on demand.

    The projection is recomputed lazily after any change and cached until the
    next one. When the result set shrinks below the requested page, the page
    index is clamped to the last page and the clamped index is stored.

    Args:
        records: Source collection. Its order is the unsorted order.
        columns: Column descriptors. Ids must be unique.
        page_size: Rows per page. Defaults to ViewSettings.default_page_size.
        settings: View settings (loaded from environment when omitted).

    Raises:
        DuplicateColumnError: If two descriptors share an id.
        ValueError: If page_size is less than 1.
    """

    def __init__(
        self,
        records: Iterable[T] = (),
        columns: Iterable[ColumnDescriptor[T]] = (),
        *,
        page_size: int | None = None,
        settings: ViewSettings | None = None,
    ) -> None:
        if page_size is None:
            page_size = (settings or ViewSettings()).default_page_size
        _check_page_size(page_size)

        self._columns = index_columns(columns)
        self._records: list[T] = list(records)
        self._state = ViewState.initial(page_size)
        self._projection: Projection[T] | None = None
        self._listeners: list[ProjectionListener] = []

    # --- Read accessors ---

    @property
    def records(self) -> tuple[T, ...]:
        """Source records in source order."""
        return tuple(self._records)

    @property
    def columns(self) -> tuple[ColumnDescriptor[T], ...]:
        return tuple(self._columns.values())

    @property
    def state(self) -> ViewState:
        """Current effective state (page index already clamped)."""
        self._refresh()
        return self._state

    @property
    def projection(self) -> Projection[T]:
        """Current projection, recomputed only after a change."""
        return self._refresh()

    def column(self, column_id: str) -> ColumnDescriptor[T]:
        """Look up a column descriptor.

        Raises:
            UnknownColumnError: If no column has this id.
        """
        try:
            return self._columns[column_id]
        except KeyError:
            raise UnknownColumnError(f"Unknown column: {column_id!r}") from None

    # --- Filtering ---

    def set_global_filter(self, text: str | None) -> None:
        """Search every filterable column. Empty text or None clears the search."""
        self._set_state(replace(self._state, global_filter=text or None))

    def set_column_filter(self, column_id: str, value: Any) -> None:
        """Filter one column by text, predicate or exact value.

        Empty strings and None remove the column's filter.

        Raises:
            UnknownColumnError: If no column has this id.
            ColumnCapabilityError: If the column is not filterable.
        """
        column = self.column(column_id)
        if not column.filterable:
            raise ColumnCapabilityError(f"Column {column_id!r} is not filterable")

        filters = dict(self._state.filters)
        if is_active_filter(value):
            filters[column_id] = value
        else:
            filters.pop(column_id, None)
        self._set_state(replace(self._state, filters=MappingProxyType(filters)))

    def clear_filter(self, column_id: str | None = None) -> None:
        """Clear one column filter, or every filter (global included) when no id is given."""
        if column_id is None:
            self._set_state(
                replace(self._state, filters=MappingProxyType({}), global_filter=None)
            )
            return
        self.column(column_id)
        filters = dict(self._state.filters)
        filters.pop(column_id, None)
        self._set_state(replace(self._state, filters=MappingProxyType(filters)))

    # --- Sorting ---

    def set_sort(self, column_id: str) -> None:
        """Toggle sort: asc, then desc, then none. Another column restarts at asc.

        Raises:
            UnknownColumnError: If no column has this id.
            ColumnCapabilityError: If the column is not sortable.
        """
        self._check_sortable(column_id)
        self._set_state(replace(self._state, sort=next_sort(self._state.sort, column_id)))

    def sort_by(self, column_id: str | None, direction: SortDirection = SortDirection.ASC) -> None:
        """Set the sort explicitly. None restores source order."""
        if column_id is None:
            self._set_state(replace(self._state, sort=None))
            return
        self._check_sortable(column_id)
        self._set_state(replace(self._state, sort=SortState(column_id, direction)))

    def _check_sortable(self, column_id: str) -> None:
        if not self.column(column_id).sortable:
            raise ColumnCapabilityError(f"Column {column_id!r} is not sortable")

    # --- Pagination ---

    def go_to_page(self, index: int) -> None:
        """Jump to a page. Out-of-range indices are clamped to the nearest valid page."""
        count = self.projection.page_count
        index = min(max(index, 0), count - 1)
        self._set_state(replace(self._state, page=replace(self._state.page, index=index)))

    def next_page(self) -> None:
        """Advance one page. No-op on the last page."""
        if self.projection.can_next:
            self.go_to_page(self._state.page.index + 1)

    def prev_page(self) -> None:
        """Go back one page. No-op on the first page."""
        if self.projection.can_prev:
            self.go_to_page(self._state.page.index - 1)

    def set_page_size(self, size: int) -> None:
        """Change rows per page, keeping the first visible row on screen.

        Raises:
            ValueError: If size is less than 1.
        """
        _check_page_size(size)
        page = self.state.page
        first_row = page.index * page.size
        self._set_state(replace(self._state, page=PageState(index=first_row // size, size=size)))

    # --- Source data ---

    def set_records(self, records: Iterable[T]) -> None:
        """Replace the whole source collection (e.g. after a list command)."""
        self._records = list(records)
        self._changed()

    def upsert(self, record: T) -> None:
        """Replace the record with the same id in place, or append it."""
        rid = record_id(record)
        for i, existing in enumerate(self._records):
            if record_id(existing) == rid:
                self._records[i] = record
                break
        else:
            self._records.append(record)
        self._changed()

    def remove(self, rid: RecordId) -> bool:
        """Remove a record by id. Returns True if it existed."""
        for i, existing in enumerate(self._records):
            if record_id(existing) == rid:
                del self._records[i]
                self._changed()
                return True
        return False

    # --- Change notification ---

    def subscribe(self, listener: ProjectionListener) -> Callable[[], None]:
        """Register a listener called after every change. Returns an unsubscribe function."""
        if listener in self._listeners:
            warnings.warn("Listener already subscribed to this view", stacklevel=2)
        else:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: ViewState) -> None:
        if state == self._state:
            return
        self._state = state
        self._changed()

    def _changed(self) -> None:
        self._projection = None
        if self._listeners:
            projection = self._refresh()
            for listener in list(self._listeners):
                listener(projection)

    def _refresh(self) -> Projection[T]:
        if self._projection is None:
            projection, effective = project(self._records, self._columns, self._state)
            if effective is not self._state:
                logger.debug(
                    "Clamped page index %d -> %d (%d matching)",
                    self._state.page.index,
                    effective.page.index,
                    projection.total_matching,
                )
                self._state = effective
            self._projection = projection
        return self._projection


def _check_page_size(size: int) -> None:
    if size < 1:
        raise ValueError(f"Page size must be at least 1, got {size}")
