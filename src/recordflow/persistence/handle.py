"""Single-entity wrapper around DeferredSaveController.

Usage:
    saver = controller.bind(doc.id)
    saver.submit(body)            # on every keystroke
    await saver.flush()           # explicit save
    saver.discard()               # editor closed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from recordflow.persistence.models import PendingEdit, SaveState

if TYPE_CHECKING:
    from recordflow.persistence.controller import DeferredSaveController

E = TypeVar("E")


class EntitySaveHandle(Generic[E]):
    """Convenient wrapper for repeated saves of one entity.

    An editor owns one handle for the entity it shows and discards it on
    teardown.

    Args:
        controller: Controller doing the actual work.
        entity_id: Entity this handle saves.
    """

    def __init__(self, controller: DeferredSaveController[E], entity_id: str):
        self._controller = controller
        self._entity_id = entity_id

    @property
    def id(self) -> str:
        return self._entity_id

    @property
    def state(self) -> SaveState:
        return self._controller.state(self._entity_id)

    @property
    def dirty(self) -> bool:
        """True while an edit is not yet confirmed persisted."""
        return self.state is not SaveState.IDLE

    def submit(self, payload: E) -> PendingEdit[E]:
        return self._controller.submit(self._entity_id, payload)

    def retry(self) -> bool:
        return self._controller.retry(self._entity_id)

    async def flush(self) -> None:
        await self._controller.flush(self._entity_id)

    def discard(self) -> bool:
        return self._controller.discard(self._entity_id)

    def __repr__(self) -> str:
        return f"EntitySaveHandle({self._entity_id!r}, {self.state.name})"
