"""Backend command boundary: protocol, typed client, record models, column presets.

Usage:
    from recordflow.commands import CommandClient, doc_columns

    client = CommandClient(invoker)
    view = RecordView(await client.list_docs(project_id), doc_columns())
"""

from recordflow.commands.client import CommandClient, CommandWriter, build_write_args
from recordflow.commands.columns import doc_columns, format_datetime, idea_columns, task_columns
from recordflow.commands.models import (
    DocRow,
    DocStatus,
    IdeaRow,
    IdeaStatus,
    ProjectOption,
    TaskRow,
    TaskStatus,
)
from recordflow.commands.protocol import CommandInvoker

__all__ = [
    # Protocol
    "CommandInvoker",
    # Client
    "CommandClient",
    "CommandWriter",
    "build_write_args",
    # Models
    "TaskRow",
    "TaskStatus",
    "IdeaRow",
    "IdeaStatus",
    "DocRow",
    "DocStatus",
    "ProjectOption",
    # Columns
    "task_columns",
    "idea_columns",
    "doc_columns",
    "format_datetime",
]
