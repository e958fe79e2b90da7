"""Deferred persistence: debounced, coalesced, ordered writes per entity.

Usage:
    async def write_body(entity_id: str, body: str) -> None:
        await invoker.invoke("update_doc_body", {"input": {"id": entity_id, "body_md": body}})

    controller = DeferredSaveController(write_body)
    controller.subscribe(lambda event: None if event.ok else show_error(event.error))

    # On every keystroke
    controller.submit(doc_id, body)

    # "Save" button, or before navigating away with unsaved changes
    await controller.flush(doc_id)

    # Editor torn down: pending edits dropped, in-flight result ignored
    controller.discard(doc_id)
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from functools import partial
from typing import Any, Generic, TypeVar

from recordflow.config import PersistenceSettings
from recordflow.errors import TransientWriteError
from recordflow.persistence.clock import Clock, LoopClock
from recordflow.persistence.handle import EntitySaveHandle
from recordflow.persistence.models import (
    PendingEdit,
    SaveEvent,
    SaveEventKind,
    SaveSlot,
    SaveState,
)

logger = logging.getLogger(__name__)

E = TypeVar("E")

Writer = Callable[[str, E], Awaitable[Any]]
"""Backend write: (entity_id, payload) -> awaitable. Any exception is a failed write."""

Validator = Callable[[str, E], None]
"""Raises ValidationError to reject an edit before it is queued."""

SaveListener = Callable[[SaveEvent], None]
"""Receives the outcome of every write whose entity is still owned."""


class DeferredSaveController(Generic[E]):
    """Coalesces rapid edits into debounced writes, one in flight per entity.

    Each submit replaces the entity's unsent edit and restarts its quiet-period
    timer. When the timer elapses and no write is in flight, the latest edit is
    written. Edits arriving while a write is in flight are sent as soon as it
    completes, newest only. Failed writes are reported, never retried
    automatically; the latest payload stays pending for the next submit or an
    explicit retry().

    Entities are fully independent. A discarded entity's in-flight write still
    counts as its write in flight: a later submit for the same id waits for it.
    All methods must be called from the event loop thread.

    Args:
        writer: Backend write for one entity.
        debounce: Quiet period in seconds. Defaults to
            PersistenceSettings.debounce_seconds.
        clock: Timer source. Defaults to LoopClock.
        validator: Synchronous check run by submit before anything is queued.
        settings: Persistence settings (loaded from environment when omitted).
    """

    def __init__(
        self,
        writer: Writer[E],
        *,
        debounce: float | None = None,
        clock: Clock | None = None,
        validator: Validator[E] | None = None,
        settings: PersistenceSettings | None = None,
    ) -> None:
        if debounce is None:
            debounce = (settings or PersistenceSettings()).debounce_seconds
        if debounce < 0:
            raise ValueError(f"Debounce must be non-negative, got {debounce}")

        self._writer = writer
        self._debounce = debounce
        self._clock = clock or LoopClock()
        self._validator = validator
        self._seq = itertools.count(1)
        self._slots: dict[str, SaveSlot[E]] = {}
        # Discarded slots whose write is still in flight, at most one per entity
        self._orphans: dict[str, SaveSlot[E]] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._listeners: list[SaveListener] = []
        self._closed = False

    @property
    def debounce(self) -> float:
        return self._debounce

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Edits ---

    def submit(self, entity_id: str, payload: E) -> PendingEdit[E]:
        """Queue an edit and restart the entity's quiet period. Never blocks.

        Returns:
            The recorded edit.

        Raises:
            ValidationError: From the validator. Nothing is queued.
            RuntimeError: If the controller is closed.
        """
        if self._closed:
            raise RuntimeError("Cannot submit to a closed DeferredSaveController")
        if self._validator is not None:
            self._validator(entity_id, payload)

        edit = PendingEdit(entity_id, payload, next(self._seq))
        slot = self._slots.setdefault(entity_id, SaveSlot())
        slot.latest = edit
        self._arm(entity_id, slot)
        return edit

    def retry(self, entity_id: str) -> bool:
        """Send the entity's latest pending edit now.

        Returns:
            True if a write was launched; False if nothing is pending or a
            write is already in flight (its completion sends the latest edit).
        """
        slot = self._slots.get(entity_id)
        if slot is None or slot.latest is None or self._busy(entity_id, slot):
            return False
        self._launch(entity_id, slot)
        return True

    async def flush(self, entity_id: str) -> None:
        """Send the pending edit without waiting for the quiet period, then wait
        until the entity has nothing left in flight.

        A write abandoned by discard() is awaited first, so the pending edit
        is never sent alongside it.

        Raises:
            TransientWriteError: If the last write for the entity failed.
        """
        while (orphan := self._orphans.get(entity_id)) is not None and orphan.task is not None:
            await asyncio.wait({orphan.task})

        slot = self._slots.get(entity_id)
        if slot is None:
            return
        if slot.latest is not None and slot.in_flight_seq is None:
            self._launch(entity_id, slot)

        while slot.task is not None and slot.in_flight_seq is not None:
            await asyncio.wait({slot.task})

        if self._slots.get(entity_id) is slot and slot.error is not None:
            raise slot.error

    async def wait_idle(self) -> None:
        """Wait until no write is in flight for any entity, including chained writes."""
        while self._tasks:
            await asyncio.wait(set(self._tasks))

    def bind(self, entity_id: str) -> EntitySaveHandle[E]:
        """Handle for repeated saves of one entity."""
        return EntitySaveHandle(self, entity_id)

    # --- Inspection ---

    def state(self, entity_id: str) -> SaveState:
        slot = self._slots.get(entity_id)
        if entity_id in self._orphans or (slot is not None and slot.in_flight_seq is not None):
            return SaveState.SENDING
        if slot is None:
            return SaveState.IDLE
        if slot.latest is not None:
            return SaveState.PENDING
        return SaveState.IDLE

    def slot(self, entity_id: str) -> SaveSlot[E] | None:
        """Copy of the entity's slot, or None when idle."""
        slot = self._slots.get(entity_id)
        return replace(slot) if slot is not None else None

    @property
    def active_entities(self) -> tuple[str, ...]:
        """Entities with a pending edit or a write in flight."""
        return tuple(dict.fromkeys([*self._slots, *self._orphans]))

    # --- Teardown ---

    def discard(self, entity_id: str) -> bool:
        """Drop the entity's unsent edit and timer. An in-flight write completes
        but its result is ignored; a later submit for the entity waits for it.

        Returns:
            True if the entity had a slot.
        """
        slot = self._slots.pop(entity_id, None)
        if slot is None:
            return False
        if slot.timer is not None:
            slot.timer.cancel()
            slot.timer = None
        if slot.latest is not None and slot.latest.issued_at_seq != slot.in_flight_seq:
            logger.debug(
                "Discarded unsent edit seq %d for %s", slot.latest.issued_at_seq, entity_id
            )
        slot.latest = None
        if slot.in_flight_seq is not None:
            self._orphans[entity_id] = slot
        return True

    def close(self) -> None:
        """Discard every entity and drop all subscribers. Further submits raise."""
        self._closed = True
        for entity_id in list(self._slots):
            self.discard(entity_id)
        self._listeners.clear()

    # --- Events ---

    def subscribe(self, listener: SaveListener) -> Callable[[], None]:
        """Register a listener for save outcomes. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: SaveEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Save listener failed for %s", event.entity_id)

    # --- State machine ---

    def _arm(self, entity_id: str, slot: SaveSlot[E]) -> None:
        """(Re)start the quiet-period timer."""
        if slot.timer is not None:
            slot.timer.cancel()
        callback = partial(self._on_quiet, entity_id, slot)
        slot.timer = self._clock.call_later(self._debounce, callback)

    def _on_quiet(self, entity_id: str, slot: SaveSlot[E]) -> None:
        slot.timer = None
        if self._slots.get(entity_id) is not slot or slot.latest is None:
            return
        if self._busy(entity_id, slot):
            # Sent on completion of the current write
            logger.debug("Quiet period over for %s, write in flight", entity_id)
            return
        self._launch(entity_id, slot)

    def _busy(self, entity_id: str, slot: SaveSlot[E]) -> bool:
        """True while a write for the entity is in flight, abandoned ones included."""
        return slot.in_flight_seq is not None or entity_id in self._orphans

    def _release_orphan(self, entity_id: str, slot: SaveSlot[E]) -> None:
        """Forget an abandoned write and send the successor edit if its quiet period is over."""
        if self._orphans.get(entity_id) is not slot:
            return
        del self._orphans[entity_id]
        successor = self._slots.get(entity_id)
        if successor is None or successor.latest is None:
            return
        if successor.timer is None and successor.in_flight_seq is None and successor.error is None:
            self._launch(entity_id, successor)

    def _launch(self, entity_id: str, slot: SaveSlot[E]) -> None:
        edit = slot.latest
        if edit is None:
            return
        if slot.timer is not None:
            slot.timer.cancel()
            slot.timer = None

        slot.in_flight_seq = edit.issued_at_seq
        logger.debug("Writing %s seq %d", entity_id, edit.issued_at_seq)
        task = asyncio.get_running_loop().create_task(
            self._write(entity_id, slot, edit),
            name=f"save:{entity_id}:{edit.issued_at_seq}",
        )
        slot.task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _write(self, entity_id: str, slot: SaveSlot[E], edit: PendingEdit[E]) -> None:
        try:
            await self._writer(entity_id, edit.payload)
        except asyncio.CancelledError:
            slot.in_flight_seq = None
            self._release_orphan(entity_id, slot)
            raise
        except Exception as e:
            message = f"Saving {entity_id!r} failed: {e}"
            error = TransientWriteError(entity_id, edit.issued_at_seq, message)
            error.__cause__ = e
            self._complete(entity_id, slot, edit, error)
        else:
            self._complete(entity_id, slot, edit, None)

    def _complete(
        self,
        entity_id: str,
        slot: SaveSlot[E],
        edit: PendingEdit[E],
        error: TransientWriteError | None,
    ) -> None:
        slot.in_flight_seq = None
        if self._slots.get(entity_id) is not slot:
            logger.debug(
                "Ignoring result of seq %d for discarded %s", edit.issued_at_seq, entity_id
            )
            self._release_orphan(entity_id, slot)
            return

        newer = slot.latest is not None and slot.latest.issued_at_seq > edit.issued_at_seq

        if error is None:
            slot.error = None
            if not newer:
                slot.latest = None
                del self._slots[entity_id]
            event = SaveEvent(SaveEventKind.SAVED, entity_id, edit.issued_at_seq, edit.payload)
        else:
            # Latest payload stays pending, no timer: next submit or retry() sends it
            slot.error = error
            logger.warning("%s", error)
            event = SaveEvent(
                SaveEventKind.FAILED, entity_id, edit.issued_at_seq, edit.payload, error
            )

        if newer:
            self._launch(entity_id, slot)
        self._notify(event)
