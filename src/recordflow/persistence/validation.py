"""Validators run by DeferredSaveController.submit before an edit is queued.

Usage:
    controller = DeferredSaveController(writer, validator=required("title"))
    controller.submit(doc_id, {"title": ""})  # raises ValidationError
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from recordflow.errors import ValidationError
from recordflow.persistence.controller import Validator


def _read(payload: Any, name: str) -> Any:
    if isinstance(payload, BaseModel):
        return getattr(payload, name, None)
    if isinstance(payload, Mapping):
        return payload.get(name)
    return payload


def required(*fields: str) -> Validator[Any]:
    """Reject payloads where any named field is missing, None or blank text.

    With no field names the payload itself must be non-blank.
    """

    def validate(entity_id: str, payload: Any) -> None:
        for name in fields or ("",):
            value = _read(payload, name) if name else payload
            if value is None or (isinstance(value, str) and not value.strip()):
                label = name or "value"
                raise ValidationError(f"{label} is required (entity {entity_id!r})")

    return validate


def all_of(*validators: Validator[Any]) -> Validator[Any]:
    """Run validators in order; the first failure wins."""

    def validate(entity_id: str, payload: Any) -> None:
        for validator in validators:
            validator(entity_id, payload)

    return validate
