"""Data models for py-super-types."""

from .node import (
    UNRESOLVED,
    SourcePosition,
    SourceLocation,
    BaseReference,
    ClassNode,
)
from .results import (
    LinearizedEntry,
    SuperTypesResult,
    PickerEntry,
)

__all__ = [
    "UNRESOLVED",
    "SourcePosition",
    "SourceLocation",
    "BaseReference",
    "ClassNode",
    "LinearizedEntry",
    "SuperTypesResult",
    "PickerEntry",
]
