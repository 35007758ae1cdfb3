"""Picker entries: display labels for a linearized hierarchy.

The core only produces order, depth and index values. This module turns
them into the rows a picker shows, in one of three styles:

    tree        1 Child           flatten   Child
                └─ 2 Base                   Base
                ├─ 3 Mixin                  Mixin
                ·  └─ 4 object              object

    relpath    1 pkg/child.py:3:1 Child
               2 pkg/base.py:1:1 Base
               3 pkg/base.py:8:1 Mixin
               4 pkg/child.py:3:13 object
"""

from pathlib import Path
from typing import Optional

from ..config import PickerConfig
from ..models import LinearizedEntry, PickerEntry, SuperTypesResult


def _relative_path(path: str, cwd: Optional[Path] = None) -> str:
    base = cwd or Path.cwd()
    try:
        return str(Path(path).relative_to(base))
    except ValueError:
        return path


def tree_prefix(entry: LinearizedEntry) -> str:
    """Branch drawing for an entry in the tree style."""
    depth = entry.depth
    if depth == 0:
        branch = ""
    elif entry.is_first_at_depth:
        branch = " └─"
    else:
        branch = " ├─"

    if depth >= 2:
        branch = " " + branch

    return " ".join([" ·"] * max(0, depth - 1)) + branch


def display_label(
    entry: LinearizedEntry,
    style: str,
    depth_offset: int = 1,
    cwd: Optional[Path] = None,
) -> str:
    """Format the label of one entry.

    Args:
        entry: Annotated class.
        style: "tree", "flatten" or "relpath".
        depth_offset: Added to the 0-based index for display.
        cwd: Directory paths are shown relative to (relpath style).
    """
    node = entry.node
    index = entry.global_index + depth_offset

    if style == "flatten":
        return node.name
    if style == "relpath":
        pos = node.location.position
        relpath = _relative_path(node.location.path, cwd)
        return f"{index} {relpath}:{pos.line + 1}:{pos.column + 1} {node.name}"
    return f"{tree_prefix(entry)} {index} {node.name}"


def build_picker_entries(
    result: SuperTypesResult,
    config: PickerConfig,
    cwd: Optional[Path] = None,
) -> list[PickerEntry]:
    """Build picker rows in linearized order (the same for every style)."""
    return [
        PickerEntry(
            entry=entry,
            display_label=display_label(entry, config.style, config.depth_offset, cwd),
            file_location=entry.node.location.path,
            source_line=entry.node.start_line + 1,
        )
        for entry in result.entries
    ]


def picker_title(result: SuperTypesResult, style: str) -> str:
    return f"Super Types of {result.root.name} ({style})"
