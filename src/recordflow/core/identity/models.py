"""Record identity helpers.

Usage:
    record_id({"id": "a", "status": "todo"})  # "a"
    record_id(TaskRow(id="t1", ...))  # "t1"
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from recordflow.core.types import RecordId


def record_id(record: Any) -> RecordId:
    """Return the string id of a mapping or object record.

    Raises:
        TypeError: If the record carries no usable id.
    """
    if isinstance(record, Mapping):
        value = record.get("id")
    else:
        value = getattr(record, "id", None)
    if not isinstance(value, str):
        raise TypeError(f"Record has no string 'id' field: {record!r}")
    return value
