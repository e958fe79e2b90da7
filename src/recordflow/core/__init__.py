"""Core functionalities: stateless column and view primitives.

Architecture Note:
    core/ contains pure, stateless functions and immutable models.
    For stateful services, see view/ (RecordView) and persistence/
    (DeferredSaveController).
"""

from recordflow.core.column import (
    ColumnDescriptor,
    ColumnKind,
    date_column,
    enum_column,
    format_cell,
    item,
    numeric_column,
    text_column,
)
from recordflow.core.identity import record_id
from recordflow.core.types import Accessor, FilterPredicate, RecordId
from recordflow.core.view import (
    PageState,
    Projection,
    SortDirection,
    SortState,
    ViewState,
    project,
)

__all__ = [
    # Types
    "RecordId",
    "Accessor",
    "FilterPredicate",
    # Identity
    "record_id",
    # Column
    "ColumnDescriptor",
    "ColumnKind",
    "item",
    "text_column",
    "enum_column",
    "date_column",
    "numeric_column",
    "format_cell",
    # View
    "ViewState",
    "SortState",
    "SortDirection",
    "PageState",
    "Projection",
    "project",
]
