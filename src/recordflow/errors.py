"""Error taxonomy shared by the view engine, the save controller and commands.

Usage:
    try:
        controller.submit(doc_id, {"title": ""})
    except ValidationError as e:
        show_inline_error(str(e))
"""

from __future__ import annotations


class RecordflowError(Exception):
    """Base class for all recordflow errors."""

    pass


class ValidationError(RecordflowError):
    """Local edit rejected before it entered the pending state."""

    pass


class TransientWriteError(RecordflowError):
    """Backend write failed. The writer's exception is chained as __cause__.

    Attributes:
        entity_id: Entity whose write failed.
        seq: Sequence number of the failed edit.
    """

    def __init__(self, entity_id: str, seq: int, message: str | None = None) -> None:
        super().__init__(message or f"Write for {entity_id!r} (seq {seq}) failed")
        self.entity_id = entity_id
        self.seq = seq


class UnknownColumnError(RecordflowError, KeyError):
    """Column id not present in the view."""

    def __str__(self) -> str:
        # KeyError repr()s its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class DuplicateColumnError(RecordflowError, ValueError):
    """Two column descriptors in one view share an id."""

    pass


class ColumnCapabilityError(RecordflowError, ValueError):
    """Sort or filter requested on a column that does not allow it."""

    pass


class CommandError(RecordflowError):
    """Backend rejected a command or returned a malformed result.

    Attributes:
        command: Name of the command that failed.
    """

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command
