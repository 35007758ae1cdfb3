"""Tests for the hierarchy builder, using in-memory collaborators."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from supertypes.models import (
    BaseReference,
    ClassNode,
    SourceLocation,
    SourcePosition,
)
from supertypes.queries import HierarchyBuilder, linearize
from supertypes.resolve import DefinitionResolver
from supertypes.syntax import ClassHandle, SyntaxProvider


@dataclass
class FakeClass:
    name: str
    path: str
    line: int
    bases: list[str] = field(default_factory=list)

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.path, SourcePosition(self.line, 0))


class FakeSyntax(SyntaxProvider):
    """Classes declared up front; base N of a class sits at column 10 + N."""

    def __init__(self, classes: list[FakeClass], symbols: Optional[dict] = None):
        self.by_line = {(c.path, c.line): c for c in classes}
        self.symbols = symbols or {}
        self.identifiers: dict[tuple, str] = {}

    def find_enclosing_class(self, path, position):
        cls = self.by_line.get((path, position.line))
        return ClassHandle(path, cls) if cls else None

    def get_immediate_bases(self, handle):
        refs = []
        for i, name in enumerate(handle.node.bases):
            position = SourcePosition(handle.node.line, 10 + i)
            self.identifiers[(handle.path, position)] = name
            refs.append(BaseReference(name, position))
        return refs

    def get_class_identity(self, handle):
        return handle.node.name, handle.node.location

    def find_enclosing_class_at(self, location):
        cls = self.by_line.get((location.path, location.position.line))
        return ClassHandle(location.path, cls) if cls else None

    def symbol_name_at(self, location):
        return self.symbols.get((location.path, location.position.line))


class FakeResolver(DefinitionResolver):
    """Resolves identifiers through a fixed table, with optional delays."""

    def __init__(
        self,
        syntax: FakeSyntax,
        targets: dict[str, SourceLocation],
        delays: Optional[dict[str, float]] = None,
        failing: Optional[set[str]] = None,
    ):
        self.syntax = syntax
        self.targets = targets
        self.delays = delays or {}
        self.failing = failing or set()
        self.completed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def resolve(self, path, position):
        identifier = self.syntax.identifiers[(path, position)]
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(identifier, 0))
        finally:
            self.in_flight -= 1
        self.completed.append(identifier)
        if identifier in self.failing:
            raise RuntimeError(f"resolver crashed on {identifier}")
        target = self.targets.get(identifier)
        return [target] if target else []


def make_builder(classes: list[FakeClass], **kwargs) -> tuple[HierarchyBuilder, FakeResolver]:
    """Helper wiring a builder to fakes; every class resolves by name."""
    symbols = kwargs.pop("symbols", None)
    extra_targets = kwargs.pop("targets", {})
    syntax = FakeSyntax(classes, symbols)
    targets = {c.name: c.location for c in classes}
    targets.update(extra_targets)
    resolver = FakeResolver(syntax, targets, **kwargs)
    return HierarchyBuilder(syntax, resolver), resolver


def build(builder: HierarchyBuilder, path: str = "a.py", line: int = 0) -> Optional[ClassNode]:
    return asyncio.run(builder.build_at(path, SourcePosition(line, 4)))


def shape(node: ClassNode):
    """(name, [bases...]) nested tuples for easy comparison."""
    return (node.name, [shape(b) for b in node.bases])


class TestBuild:
    """Tests for HierarchyBuilder.build_at()."""

    def test_no_enclosing_class(self):
        builder, _ = make_builder([FakeClass("A", "a.py", 0)])
        assert build(builder, line=5) is None

    def test_leaf_class(self):
        builder, _ = make_builder([FakeClass("A", "a.py", 0)])
        root = build(builder)
        assert root == ClassNode("A", SourceLocation("a.py", SourcePosition(0, 0)))

    def test_bases_across_files(self):
        builder, _ = make_builder([
            FakeClass("A", "a.py", 0, ["B"]),
            FakeClass("B", "b.py", 3, ["C"]),
            FakeClass("C", "c.py", 7),
        ])
        root = build(builder)
        assert shape(root) == ("A", [("B", [("C", [])])])
        assert root.bases[0].location.path == "b.py"
        assert root.bases[0].bases[0].location == SourceLocation("c.py", SourcePosition(7, 0))

    def test_declared_order_survives_out_of_order_responses(self):
        """X answers after Y, but bases stay [X, Y]."""
        builder, resolver = make_builder(
            [
                FakeClass("A", "a.py", 0, ["X", "Y"]),
                FakeClass("X", "x.py", 0),
                FakeClass("Y", "y.py", 0),
            ],
            delays={"X": 0.05},
        )
        root = build(builder)
        assert resolver.completed == ["Y", "X"]
        assert [b.name for b in root.bases] == ["X", "Y"]

    def test_bases_resolved_concurrently(self):
        builder, resolver = make_builder(
            [
                FakeClass("A", "a.py", 0, ["X", "Y", "Z"]),
                FakeClass("X", "x.py", 0),
                FakeClass("Y", "y.py", 0),
                FakeClass("Z", "z.py", 0),
            ],
            delays={"X": 0.01, "Y": 0.01, "Z": 0.01},
        )
        build(builder)
        assert resolver.max_in_flight == 3

    def test_nested_fan_out_keeps_order(self):
        builder, _ = make_builder(
            [
                FakeClass("A", "a.py", 0, ["B", "C"]),
                FakeClass("B", "b.py", 0, ["D", "E"]),
                FakeClass("C", "c.py", 0),
                FakeClass("D", "d.py", 0),
                FakeClass("E", "e.py", 0),
            ],
            delays={"B": 0.03, "D": 0.02},
        )
        assert shape(build(builder)) == ("A", [("B", [("D", []), ("E", [])]), ("C", [])])

    def test_unresolvable_base_is_leaf(self):
        builder, _ = make_builder([FakeClass("A", "a.py", 0, ["Missing"])])
        root = build(builder)
        missing = root.bases[0]
        assert missing.name == "Missing"
        assert missing.bases == ()
        assert missing.resolved is False
        assert missing.location == SourceLocation("a.py", SourcePosition(0, 10))

    def test_resolver_error_degrades_to_leaf(self):
        builder, _ = make_builder(
            [FakeClass("A", "a.py", 0, ["B", "C"]), FakeClass("B", "b.py", 0), FakeClass("C", "c.py", 0)],
            failing={"B"},
        )
        root = build(builder)
        assert [(b.name, b.resolved) for b in root.bases] == [("B", False), ("C", True)]

    def test_resolver_error_is_logged_as_warning(self, caplog):
        builder, _ = make_builder(
            [FakeClass("A", "a.py", 0, ["B"]), FakeClass("B", "b.py", 0)],
            failing={"B"},
        )
        with caplog.at_level(logging.WARNING, logger="supertypes.queries.hierarchy"):
            build(builder)
        assert [r.levelno for r in caplog.records] == [logging.WARNING]
        assert "resolver crashed on B" in caplog.records[0].getMessage()

    def test_non_class_symbol_uses_symbol_name(self):
        """An alias resolves to a module-level assignment, not a class."""
        builder, _ = make_builder(
            [FakeClass("A", "a.py", 0, ["Alias"])],
            targets={"Alias": SourceLocation("alias.py", SourcePosition(4, 0))},
            symbols={("alias.py", 4): "RealName"},
        )
        leaf = build(builder).bases[0]
        assert leaf.name == "RealName"
        assert leaf.bases == ()
        assert leaf.resolved is True
        assert leaf.location.path == "alias.py"

    def test_non_class_symbol_without_name_uses_identifier(self):
        builder, _ = make_builder(
            [FakeClass("A", "a.py", 0, ["Alias"])],
            targets={"Alias": SourceLocation("alias.py", SourcePosition(4, 0))},
        )
        assert build(builder).bases[0].name == "Alias"

    def test_cycle_terminates(self):
        builder, _ = make_builder([
            FakeClass("A", "a.py", 0, ["B"]),
            FakeClass("B", "b.py", 0, ["C"]),
            FakeClass("C", "c.py", 0, ["A"]),
        ])
        root = build(builder)
        assert shape(root) == ("A", [("B", [("C", [])])])
        assert [n.name for n, _ in root.walk()].count("A") == 1

    def test_self_reference(self):
        builder, _ = make_builder([FakeClass("A", "a.py", 0, ["A"])])
        assert shape(build(builder)) == ("A", [])

    def test_shared_ancestor_resolved_under_each_base(self):
        builder, _ = make_builder([
            FakeClass("A", "a.py", 0, ["B", "C"]),
            FakeClass("B", "b.py", 0, ["O"]),
            FakeClass("C", "c.py", 0, ["O"]),
            FakeClass("O", "o.py", 0),
        ])
        root = build(builder)
        assert shape(root) == ("A", [("B", [("O", [])]), ("C", [("O", [])])])
        assert [n.name for n in linearize(root)] == ["A", "B", "C", "O"]

    def test_builds_are_independent(self):
        """A second build does not see the first build's visited-set."""
        builder, _ = make_builder([
            FakeClass("A", "a.py", 0, ["B"]),
            FakeClass("B", "b.py", 0),
        ])
        first = build(builder)
        second = build(builder)
        assert first == second
        assert shape(second) == ("A", [("B", [])])

    def test_same_name_in_one_file_is_not_a_cycle(self):
        """``class Meta(Base.Meta)`` nested in another class of the same module."""
        builder, _ = make_builder(
            [
                FakeClass("Meta", "models.py", 6, ["Base.Meta"]),
                FakeClass("Meta", "models.py", 1),
            ],
            targets={"Base.Meta": SourceLocation("models.py", SourcePosition(1, 0))},
        )
        root = build(builder, path="models.py", line=6)
        assert shape(root) == ("Meta", [("Meta", [])])
        assert root.bases[0].location.position.line == 1


class TestSharedWork:
    """A build looks up each base reference once."""

    def stacked_diamonds(self) -> list[FakeClass]:
        return [
            FakeClass("A", "a.py", 0, ["B1", "C1"]),
            FakeClass("B1", "b1.py", 0, ["D1"]),
            FakeClass("C1", "c1.py", 0, ["D1"]),
            FakeClass("D1", "d1.py", 0, ["B2", "C2"]),
            FakeClass("B2", "b2.py", 0, ["D2"]),
            FakeClass("C2", "c2.py", 0, ["D2"]),
            FakeClass("D2", "d2.py", 0),
        ]

    def test_each_reference_resolved_once(self):
        builder, resolver = make_builder(self.stacked_diamonds())
        root = build(builder)
        # A: 2, B1: 1, C1: 1, D1: 2, B2: 1, C2: 1
        assert len(resolver.completed) == 8
        assert [n.name for n in linearize(root)] == ["A", "B1", "C1", "D1", "B2", "C2", "D2"]

    def test_shared_ancestor_still_under_each_base(self):
        builder, _ = make_builder(self.stacked_diamonds(), delays={"D1": 0.01})
        root = build(builder)
        left, right = root.bases
        assert shape(left.bases[0]) == shape(right.bases[0])
        assert shape(left.bases[0]) == ("D1", [("B2", [("D2", [])]), ("C2", [("D2", [])])])

    def test_failed_lookup_is_shared(self):
        builder, resolver = make_builder(
            [
                FakeClass("A", "a.py", 0, ["B", "C"]),
                FakeClass("B", "b.py", 0, ["O"]),
                FakeClass("C", "c.py", 0, ["O"]),
                FakeClass("O", "o.py", 0, ["Broken"]),
            ],
            failing={"Broken"},
        )
        root = build(builder)
        assert resolver.completed.count("Broken") == 1
        assert [(n.name, n.resolved) for n in linearize(root)][-1] == ("Broken", False)

    def test_subtree_cut_by_cycle_is_rebuilt(self):
        """B loses its base A only on the path that starts at A."""
        builder, _ = make_builder([
            FakeClass("A", "a.py", 0, ["B", "C"]),
            FakeClass("B", "b.py", 0, ["A"]),
            FakeClass("C", "c.py", 0, ["B"]),
        ])
        assert shape(build(builder)) == ("A", [("B", []), ("C", [("B", [])])])
