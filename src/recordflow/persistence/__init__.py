"""Deferred persistence: debounced, coalesced writes with one write in flight per entity."""

from recordflow.persistence.clock import Clock, LoopClock, ManualClock, TimerHandle
from recordflow.persistence.controller import (
    DeferredSaveController,
    SaveListener,
    Validator,
    Writer,
)
from recordflow.persistence.handle import EntitySaveHandle
from recordflow.persistence.models import (
    PendingEdit,
    SaveEvent,
    SaveEventKind,
    SaveSlot,
    SaveState,
)
from recordflow.persistence.validation import all_of, required

__all__ = [
    # Controller
    "DeferredSaveController",
    "EntitySaveHandle",
    # Models
    "PendingEdit",
    "SaveSlot",
    "SaveState",
    "SaveEvent",
    "SaveEventKind",
    # Clocks
    "Clock",
    "TimerHandle",
    "LoopClock",
    "ManualClock",
    # Validators
    "required",
    "all_of",
    # Protocols
    "Writer",
    "Validator",
    "SaveListener",
]
