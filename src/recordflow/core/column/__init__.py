"""Column functionality: descriptors, per-kind rules and factories."""

from recordflow.core.column.models import ColumnDescriptor, ColumnKind
from recordflow.core.column.operations import (
    PLACEHOLDER,
    date_column,
    enum_column,
    format_cell,
    index_columns,
    is_active_filter,
    item,
    matches_filter,
    numeric_column,
    sort_key,
    text_column,
    to_timestamp,
    value_text,
)

__all__ = [
    # Models
    "ColumnDescriptor",
    "ColumnKind",
    # Operations
    "PLACEHOLDER",
    "value_text",
    "to_timestamp",
    "sort_key",
    "format_cell",
    "is_active_filter",
    "matches_filter",
    "index_columns",
    # Factories
    "item",
    "text_column",
    "enum_column",
    "date_column",
    "numeric_column",
]
