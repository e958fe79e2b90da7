"""Command boundary protocol.

The backend is a remote, asynchronous, record-oriented command service
reached by name with JSON-serializable arguments and results.

Usage:
    class TauriBridge:
        async def invoke(self, name: str, args: Mapping[str, Any] | None = None) -> Any:
            return await bridge.call(name, dict(args or {}))

    client = CommandClient(TauriBridge())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CommandInvoker(Protocol):
    """Asynchronous named-command boundary. Rejections surface as exceptions."""

    async def invoke(self, name: str, args: Mapping[str, Any] | None = None) -> Any:
        """Run a backend command.

        Args:
            name: Command name, e.g. "list_tasks" or "update_doc_body".
            args: JSON-serializable arguments.

        Returns:
            JSON-serializable result.
        """
        ...
