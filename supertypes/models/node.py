"""Class node data model."""

from dataclasses import dataclass, field

UNRESOLVED = "<unresolved>"


@dataclass(frozen=True)
class SourcePosition:
    """Position in a source file (0-based line and column)."""

    line: int
    column: int


@dataclass(frozen=True)
class SourceLocation:
    """A position inside a specific file or module."""

    path: str
    position: SourcePosition

    @property
    def location_str(self) -> str:
        """Return file:line string."""
        return f"{self.path}:{self.position.line + 1}"  # 1-based


@dataclass(frozen=True)
class BaseReference:
    """Immediate base of a class, as written in its base list."""

    identifier: str
    position: SourcePosition


@dataclass(frozen=True)
class ClassNode:
    """A class definition with its resolved bases.

    ``bases`` follows the declared left-to-right order of the base list.
    Each node owns its subtree; an ancestor shared by two bases is present
    once under each of them.
    """

    name: str
    location: SourceLocation
    bases: tuple["ClassNode", ...] = field(default_factory=tuple)
    resolved: bool = True

    @property
    def key(self) -> tuple:
        """Identity of the definition this node stands for."""
        if not self.resolved:
            return (UNRESOLVED, self.name)
        pos = self.location.position
        return (self.location.path, pos.line, pos.column, self.name)

    @property
    def is_leaf(self) -> bool:
        return not self.bases

    @property
    def start_line(self) -> int:
        return self.location.position.line

    def walk(self):
        """Yield (node, depth) pairs in depth-first, declared order."""
        stack: list[tuple[ClassNode, int]] = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            for base in reversed(node.bases):
                stack.append((base, depth + 1))

