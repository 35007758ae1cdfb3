"""Depth and index layout for a linearized hierarchy."""

from ..models import ClassNode, LinearizedEntry


def node_depths(root: ClassNode) -> dict[tuple, int]:
    """Shortest depth of every class identity in the tree (root is 0)."""
    depths: dict[tuple, int] = {}
    for node, depth in root.walk():
        if node.key not in depths or depth < depths[node.key]:
            depths[node.key] = depth
    return depths


def annotate(root: ClassNode, linearized: list[ClassNode]) -> list[LinearizedEntry]:
    """Attach depth, global index and first-at-depth flags to each class.

    Depths are numbered in ascending order: every class at depth 0 gets an
    index before any class at depth 1, and so on; inside one depth the
    linearized order decides. The returned list keeps the linearized order.
    """
    depths = node_depths(root)
    entry_depths = [depths.get(node.key, 0) for node in linearized]

    entries: list[LinearizedEntry] = [None] * len(linearized)
    index = 0
    for depth in sorted(set(entry_depths)):
        first = True
        for i, node in enumerate(linearized):
            if entry_depths[i] != depth:
                continue
            entries[i] = LinearizedEntry(
                node=node,
                depth=depth,
                global_index=index,
                is_first_at_depth=first,
            )
            first = False
            index += 1

    return entries


def group_by_depth(entries: list[LinearizedEntry]) -> list[LinearizedEntry]:
    """Return entries ordered by global index (depth-grouped view)."""
    return sorted(entries, key=lambda e: e.global_index)
