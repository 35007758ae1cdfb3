"""Output formatting module."""

from .json_formatter import print_json, to_json
from .picker import (
    build_picker_entries,
    display_label,
    picker_title,
    tree_prefix,
)
from .tree import (
    print_picker,
    print_class_tree,
    picker_to_dict,
)

__all__ = [
    "print_json",
    "to_json",
    "build_picker_entries",
    "display_label",
    "picker_title",
    "tree_prefix",
    "print_picker",
    "print_class_tree",
    "picker_to_dict",
]
