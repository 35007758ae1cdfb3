"""C3 linearization (method resolution order)."""

from collections import deque

from ..errors import LinearizationError
from ..models import ClassNode


def merge(*sequences: list[ClassNode], owner: str = "<merge>") -> list[ClassNode]:
    """Merge linearizations, preserving the order of every input sequence.

    Nodes are compared by ``ClassNode.key``, so two classes that share a
    name but come from different definitions stay distinct.

    Args:
        sequences: Linearizations of the bases, followed by the base list.
        owner: Name of the class being linearized, used in errors.

    Raises:
        LinearizationError: If no head can be picked.
    """
    result: list[ClassNode] = []
    pending = [deque(seq) for seq in sequences if seq]

    while pending:
        tails = set()
        for seq in pending:
            tails.update(node.key for node in list(seq)[1:])

        for seq in pending:
            candidate = seq[0]
            if candidate.key not in tails:
                break
        else:
            raise LinearizationError(owner, [seq[0].name for seq in pending])

        result.append(candidate)
        for seq in pending:
            if seq[0].key == candidate.key:
                seq.popleft()
        pending = [seq for seq in pending if seq]

    return result


def linearize(root: ClassNode) -> list[ClassNode]:
    """Return the C3 linearization of a class tree, root first."""
    if not root.bases:
        return [root]
    parents = [linearize(base) for base in root.bases]
    return [root] + merge(*parents, list(root.bases), owner=root.name)
