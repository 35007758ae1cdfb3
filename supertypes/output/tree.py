"""Console and JSON formatters for super types results."""

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ..config import PickerConfig
from ..models import ClassNode, PickerEntry, SuperTypesResult
from .picker import picker_title


def print_picker(
    result: SuperTypesResult,
    entries: list[PickerEntry],
    config: PickerConfig,
    console: Console,
):
    """Print picker rows, one class per line.

    Args:
        result: SuperTypesResult the rows were built from.
        entries: Rows from build_picker_entries().
        config: Picker configuration (style).
        console: Rich console for output.
    """
    console.print(f"[bold]{escape(picker_title(result, config.style))}[/bold]")
    for row in entries:
        label = escape(row.display_label)
        if not row.entry.node.resolved:
            label += " [yellow](unresolved)[/yellow]"
        if config.style != "relpath":
            label += f" [dim]({escape(row.file_location)}:{row.source_line})[/dim]"
        console.print(label, highlight=False)


def print_class_tree(root: ClassNode, console: Console):
    """Print the resolved class hierarchy before linearization.

    Args:
        root: Tree root from the hierarchy builder.
        console: Rich console for output.
    """
    tree = Tree(f"[bold]{escape(root.name)}[/bold] [dim]({escape(root.location.location_str)})[/dim]")

    def add_bases(parent: Tree, node: ClassNode):
        for base in node.bases:
            label = escape(base.name)
            if base.resolved:
                label += f" [dim]({escape(base.location.location_str)})[/dim]"
            else:
                label += " [yellow](unresolved)[/yellow]"
            branch = parent.add(label)
            if not base.is_leaf:
                add_bases(branch, base)

    add_bases(tree, root)
    console.print(tree)


def picker_to_dict(
    result: SuperTypesResult,
    entries: list[PickerEntry],
    config: PickerConfig,
) -> dict:
    """Convert picker rows to a JSON-serializable dict.

    Depths and indices are shifted by ``config.depth_offset``, lines and
    columns are 1-based.
    """
    offset = config.depth_offset

    def entry_to_dict(row: PickerEntry) -> dict:
        node = row.entry.node
        return {
            "index": row.entry.global_index + offset,
            "depth": row.entry.depth + offset,
            "first_at_depth": row.entry.is_first_at_depth,
            "name": row.name,
            "label": row.display_label,
            "file": row.file_location,
            "line": row.source_line,
            "column": node.location.position.column + 1,
            "resolved": node.resolved,
        }

    root = result.root
    return {
        "root": {
            "name": root.name,
            "file": root.location.path,
            "line": root.start_line + 1,
        },
        "title": picker_title(result, config.style),
        "style": config.style,
        "max_depth": result.max_depth + offset,
        "depth_counts": {
            str(depth + offset): count for depth, count in result.depth_counts.items()
        },
        "total": len(entries),
        "entries": [entry_to_dict(row) for row in entries],
    }
