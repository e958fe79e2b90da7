"""Column presets for the task, idea and document list screens."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from recordflow.commands.models import DocRow, IdeaRow, TaskRow
from recordflow.core.column import (
    PLACEHOLDER,
    ColumnDescriptor,
    date_column,
    enum_column,
    numeric_column,
    text_column,
)


def format_datetime(value: Any) -> str:
    """Local "YYYY-MM-DD HH:MM", or the placeholder when missing."""
    if value is None:
        return PLACEHOLDER
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.strftime("%Y-%m-%d %H:%M")
    return str(value)


def task_columns() -> list[ColumnDescriptor[TaskRow]]:
    return [
        text_column("name", lambda t: t.name, header="Name"),
        enum_column("category", lambda t: t.category, header="Category"),
        enum_column("status", lambda t: t.status, header="Status"),
        text_column("current_stage", lambda t: t.current_stage, header="Current Stage"),
        date_column("start_at", lambda t: t.start_at, header="Start", formatter=format_datetime),
        date_column(
            "end_est_at", lambda t: t.end_est_at, header="End (est)", formatter=format_datetime
        ),
        date_column(
            "updated_at", lambda t: t.updated_at, header="Updated", formatter=format_datetime
        ),
    ]


def idea_columns() -> list[ColumnDescriptor[IdeaRow]]:
    return [
        text_column("title", lambda i: i.title, header="Title"),
        enum_column("status", lambda i: i.status, header="Status"),
        numeric_column("priority", lambda i: i.priority, header="Priority"),
        date_column(
            "updated_at", lambda i: i.updated_at, header="Updated", formatter=format_datetime
        ),
    ]


def doc_columns() -> list[ColumnDescriptor[DocRow]]:
    return [
        text_column("title", lambda d: d.title, header="Title"),
        enum_column("status", lambda d: d.status, header="Status"),
        text_column("slug", lambda d: d.slug, header="Slug"),
        date_column(
            "updated_at", lambda d: d.updated_at, header="Updated", formatter=format_datetime
        ),
    ]
