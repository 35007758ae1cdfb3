"""py-super-types - C3 linearized super types of a Python class."""

from .config import PickerConfig, load_config
from .errors import (
    SuperTypesError,
    NoEnclosingClassError,
    LinearizationError,
    ConfigError,
)
from .models import ClassNode, LinearizedEntry, SuperTypesResult
from .queries import (
    HierarchyBuilder,
    SuperTypesQuery,
    linearize,
    annotate,
)

__version__ = "0.1.0"

__all__ = [
    "PickerConfig",
    "load_config",
    "SuperTypesError",
    "NoEnclosingClassError",
    "LinearizationError",
    "ConfigError",
    "ClassNode",
    "LinearizedEntry",
    "SuperTypesResult",
    "HierarchyBuilder",
    "SuperTypesQuery",
    "linearize",
    "annotate",
]
