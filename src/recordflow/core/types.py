"""Core type definitions for recordflow."""

from collections.abc import Callable
from typing import Any, TypeAlias, TypeVar

T = TypeVar("T")

RecordId: TypeAlias = str
"""String identifier every record carries in its `id` field."""

Accessor: TypeAlias = Callable[[T], Any]
"""Pure function reading one displayed attribute from a record."""

FilterPredicate: TypeAlias = Callable[[Any], bool]
"""Column filter given as a predicate over the accessor value."""
