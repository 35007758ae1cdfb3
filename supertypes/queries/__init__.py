"""Query classes for py-super-types."""

from .base import Query
from .hierarchy import HierarchyBuilder
from .linearize import linearize, merge
from .layout import annotate, group_by_depth
from .super_types import SuperTypesQuery

__all__ = [
    "Query",
    "HierarchyBuilder",
    "linearize",
    "merge",
    "annotate",
    "group_by_depth",
    "SuperTypesQuery",
]
