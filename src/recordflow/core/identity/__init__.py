"""Record identity: string ids read from mapping or object records."""

from recordflow.core.identity.models import record_id

__all__ = [
    "record_id",
]
