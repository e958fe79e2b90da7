"""Deferred-save models: pending edits, per-entity slots and save events."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from recordflow.errors import TransientWriteError
    from recordflow.persistence.clock import TimerHandle

E = TypeVar("E")


class SaveState(Enum):
    """Per-entity save state machine.

    IDLE -> PENDING (submit) -> SENDING (quiet period over, nothing in flight)
    SENDING -> IDLE | PENDING | SENDING (on completion)
    """

    IDLE = auto()
    """Nothing pending, nothing in flight."""

    PENDING = auto()
    """An edit waits for its quiet period, or for a retry after a failure."""

    SENDING = auto()
    """A write is in flight. Newer edits may be queued behind it."""


@dataclass(frozen=True, slots=True)
class PendingEdit(Generic[E]):
    """One local change not yet confirmed persisted.

    Attributes:
        entity_id: Entity the edit belongs to.
        payload: Edit content, sent as-is to the writer.
        issued_at_seq: Strictly increasing across the controller.
    """

    entity_id: str
    payload: E
    issued_at_seq: int


@dataclass(slots=True)
class SaveSlot(Generic[E]):
    """Save bookkeeping for one entity.

    Invariant: at most one write in flight; `in_flight_seq`, when set, is the
    highest sequence number known when that write was launched.

    Attributes:
        latest: Newest edit not yet confirmed persisted.
        in_flight_seq: Sequence number of the write in flight.
        error: Failure of the most recent write, cleared on success.
    """

    latest: PendingEdit[E] | None = None
    in_flight_seq: int | None = None
    error: TransientWriteError | None = None
    timer: TimerHandle | None = field(default=None, repr=False, compare=False)
    task: asyncio.Task[None] | None = field(default=None, repr=False, compare=False)


class SaveEventKind(Enum):
    """Outcome of a completed write."""

    SAVED = "saved"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SaveEvent:
    """Reported to subscribers after every write that still has an owner.

    Attributes:
        kind: SAVED or FAILED.
        entity_id: Entity that was written.
        seq: Sequence number of the written edit.
        payload: Payload that was written.
        error: TransientWriteError for FAILED events.
    """

    kind: SaveEventKind
    entity_id: str
    seq: int
    payload: Any
    error: TransientWriteError | None = None

    @property
    def ok(self) -> bool:
        return self.kind is SaveEventKind.SAVED
