"""recordflow: reactive record views and deferred persistence.

Usage:
    from recordflow import DeferredSaveController, RecordView, enum_column, text_column

    view = RecordView(rows, [text_column("name"), enum_column("status")], page_size=10)
    view.set_column_filter("status", "todo")
    view.set_sort("name")
    rows_on_screen = view.projection.page_rows

    controller = DeferredSaveController(write_body, debounce=0.6)
    controller.submit(doc_id, body)  # coalesced, written after 600ms of quiet
"""

__version__ = "0.1.0"

# Core primitives
from recordflow.core import (
    ColumnDescriptor,
    ColumnKind,
    PageState,
    Projection,
    SortDirection,
    SortState,
    ViewState,
    date_column,
    enum_column,
    format_cell,
    item,
    numeric_column,
    record_id,
    text_column,
)

# Errors
from recordflow.errors import (
    ColumnCapabilityError,
    CommandError,
    DuplicateColumnError,
    RecordflowError,
    TransientWriteError,
    UnknownColumnError,
    ValidationError,
)

# Persistence
from recordflow.persistence import (
    Clock,
    DeferredSaveController,
    EntitySaveHandle,
    LoopClock,
    ManualClock,
    PendingEdit,
    SaveEvent,
    SaveEventKind,
    SaveSlot,
    SaveState,
    all_of,
    required,
)

# View engine
from recordflow.view import RecordView

__all__ = [
    # Version
    "__version__",
    # Core
    "ColumnDescriptor",
    "ColumnKind",
    "item",
    "text_column",
    "enum_column",
    "date_column",
    "numeric_column",
    "format_cell",
    "record_id",
    "ViewState",
    "SortState",
    "SortDirection",
    "PageState",
    "Projection",
    # View
    "RecordView",
    # Persistence
    "DeferredSaveController",
    "EntitySaveHandle",
    "PendingEdit",
    "SaveSlot",
    "SaveState",
    "SaveEvent",
    "SaveEventKind",
    "Clock",
    "LoopClock",
    "ManualClock",
    "required",
    "all_of",
    # Errors
    "RecordflowError",
    "ValidationError",
    "TransientWriteError",
    "UnknownColumnError",
    "DuplicateColumnError",
    "ColumnCapabilityError",
    "CommandError",
]
