"""Typed client for the backend command boundary.

Usage:
    client = CommandClient(invoker)

    view = RecordView(await client.list_docs(project_id), doc_columns())

    controller = DeferredSaveController(client.writer("update_doc_body", field="body_md"))
    controller.submit(doc_id, text)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from recordflow.commands.models import DocRow, IdeaRow, ProjectOption, TaskRow, TaskStatus
from recordflow.commands.protocol import CommandInvoker
from recordflow.errors import CommandError

ModelT = TypeVar("ModelT", bound=BaseModel)


def build_write_args(
    entity_id: str,
    payload: Any,
    *,
    field: str | None = None,
    wrap: str | None = None,
) -> dict[str, Any]:
    """Arguments for a write command: {"id": entity_id, **payload}.

    Args:
        entity_id: Entity being written. Always wins over an "id" in the payload.
        payload: Pydantic model, mapping, or scalar (requires `field`).
        field: Key for scalar payloads, e.g. "body_md".
        wrap: Argument name to nest the body under, e.g. "input".

    Raises:
        TypeError: Scalar payload without `field`.
    """
    if isinstance(payload, BaseModel):
        body = payload.model_dump(mode="json", exclude_none=True)
    elif isinstance(payload, Mapping):
        body = dict(payload)
    elif field is not None:
        body = {field: payload}
    else:
        raise TypeError(
            f"Cannot send {type(payload).__name__} payload without a field name"
        )
    body.pop("id", None)
    body = {"id": entity_id, **body}
    return {wrap: body} if wrap else body


class CommandClient:
    """Calls backend commands and validates their results.

    Any exception raised by the invoker is re-raised as CommandError with the
    invoker's exception chained.

    Args:
        invoker: Command boundary implementation.
    """

    def __init__(self, invoker: CommandInvoker) -> None:
        self._invoker = invoker

    async def call(self, name: str, args: Mapping[str, Any] | None = None) -> Any:
        """Run a command, normalizing failures to CommandError."""
        try:
            return await self._invoker.invoke(name, dict(args or {}))
        except CommandError:
            raise
        except Exception as e:
            raise CommandError(name, str(e) or type(e).__name__) from e

    async def _rows(
        self, name: str, model: type[ModelT], args: Mapping[str, Any] | None = None
    ) -> list[ModelT]:
        raw = await self.call(name, args)
        try:
            return TypeAdapter(list[model]).validate_python(raw)  # type: ignore[valid-type]
        except PydanticValidationError as e:
            raise CommandError(name, f"malformed result: {e}") from e

    # --- Read commands ---

    async def list_tasks(self) -> list[TaskRow]:
        return await self._rows("list_tasks", TaskRow)

    async def list_ideas(self, project_id: str) -> list[IdeaRow]:
        return await self._rows("list_ideas", IdeaRow, {"projectId": project_id})

    async def list_docs(self, project_id: str) -> list[DocRow]:
        return await self._rows("list_docs", DocRow, {"projectId": project_id})

    async def list_projects(self, workspace_id: str | None = None) -> list[ProjectOption]:
        args = {"workspaceId": workspace_id} if workspace_id is not None else None
        return await self._rows("list_projects", ProjectOption, args)

    # --- Write commands ---

    async def set_task_status(self, task_id: str, status: TaskStatus) -> None:
        await self.call("set_task_status", {"id": task_id, "status": status.value})

    def writer(
        self, command: str, *, field: str | None = None, wrap: str | None = "input"
    ) -> CommandWriter:
        """Writer for DeferredSaveController sending one write command per save."""
        return CommandWriter(self, command, field=field, wrap=wrap)


class CommandWriter:
    """Callable (entity_id, payload) -> awaitable write through a CommandClient.

    Args:
        client: Client used to send the command.
        command: Write command name, e.g. "update_doc_body".
        field: Key for scalar payloads.
        wrap: Argument name to nest the body under (None sends it flat).
    """

    def __init__(
        self,
        client: CommandClient,
        command: str,
        *,
        field: str | None = None,
        wrap: str | None = None,
    ) -> None:
        self._client = client
        self.command = command
        self.field = field
        self.wrap = wrap

    async def __call__(self, entity_id: str, payload: Any) -> Any:
        args = build_write_args(entity_id, payload, field=self.field, wrap=self.wrap)
        return await self._client.call(self.command, args)

    def __repr__(self) -> str:
        return f"CommandWriter({self.command!r})"
