"""Query result types."""

from dataclasses import dataclass, field

from .node import ClassNode


@dataclass(frozen=True)
class LinearizedEntry:
    """A class from the linearized hierarchy with its layout metadata."""

    node: ClassNode
    depth: int  # 0-based, root is 0
    global_index: int  # 0-based
    is_first_at_depth: bool = False


@dataclass
class SuperTypesResult:
    """Result of a super types query."""

    root: ClassNode
    linearized: list[ClassNode]
    entries: list[LinearizedEntry] = field(default_factory=list)

    @property
    def max_depth(self) -> int:
        return max((e.depth for e in self.entries), default=0)

    @property
    def depth_counts(self) -> dict[int, int]:
        counts: dict[int, int] = {}
        for entry in self.entries:
            counts[entry.depth] = counts.get(entry.depth, 0) + 1
        return dict(sorted(counts.items()))


@dataclass
class PickerEntry:
    """One row handed to a presenter."""

    entry: LinearizedEntry
    display_label: str
    file_location: str
    source_line: int  # 1-based

    @property
    def name(self) -> str:
        return self.entry.node.name
