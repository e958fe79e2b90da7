"""View primitives: state models and the pure projection pipeline."""

from recordflow.core.view.models import (
    PageState,
    Projection,
    SortDirection,
    SortState,
    ViewState,
)
from recordflow.core.view.operations import (
    apply_column_filters,
    apply_global_filter,
    clamp_page_index,
    next_sort,
    page_count,
    project,
    slice_page,
    sort_records,
)

__all__ = [
    # Models
    "ViewState",
    "SortState",
    "SortDirection",
    "PageState",
    "Projection",
    # Operations
    "apply_column_filters",
    "apply_global_filter",
    "sort_records",
    "page_count",
    "clamp_page_index",
    "slice_page",
    "next_sort",
    "project",
]
