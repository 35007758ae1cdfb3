"""Recursive class hierarchy builder."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from ..models import BaseReference, ClassNode, SourceLocation, SourcePosition
from ..resolve import DefinitionResolver
from ..syntax import ClassHandle, SyntaxProvider

logger = logging.getLogger(__name__)


@dataclass
class _BuildState:
    """Memo shared by every branch of one top-level build."""

    # (path, position) -> resolver task, so each base reference is looked up once
    lookups: dict[tuple, asyncio.Future] = field(default_factory=dict)
    # class key -> finished subtree that lost no branch to a cycle
    subtrees: dict[tuple, ClassNode] = field(default_factory=dict)


def _class_key(name: str, location: SourceLocation) -> tuple:
    pos = location.position
    return (location.path, pos.line, pos.column, name)


class HierarchyBuilder:
    """Resolve a class and all of its ancestors into a tree of ClassNode.

    Bases of one class are resolved concurrently: one resolver request per
    base, each result stored at the base's declared index, and the node is
    assembled after all of them have finished. Bases that cannot be resolved
    become leaves; a base leading back to a class already on the current
    path is dropped.

    Within one build, a base reference is sent to the resolver at most once
    and a finished subtree is reused wherever its class appears again.
    """

    def __init__(self, syntax: SyntaxProvider, resolver: DefinitionResolver):
        self.syntax = syntax
        self.resolver = resolver

    async def build_at(self, path: str, position: SourcePosition) -> Optional[ClassNode]:
        """Build the hierarchy of the class enclosing a position.

        Returns:
            The tree root, or None if no class encloses the position.
        """
        handle = self.syntax.find_enclosing_class(path, position)
        if handle is None:
            return None
        return await self.build(handle)

    async def build(self, handle: ClassHandle) -> ClassNode:
        """Build the hierarchy rooted at a class definition."""
        # Each top-level build starts with an empty visited-set and memo.
        node, _ = await self._build(handle, frozenset(), _BuildState())
        return node

    async def _build(
        self, handle: ClassHandle, visited: frozenset, state: _BuildState
    ) -> tuple[Optional[ClassNode], bool]:
        """Return the subtree and whether a cycle cut any branch of it."""
        name, location = self.syntax.get_class_identity(handle)
        key = _class_key(name, location)
        if key in visited:
            logger.debug(f"Cyclic reference to {name} ({location.location_str}), dropping branch")
            return None, True
        if key in state.subtrees:
            return state.subtrees[key], False
        visited = visited | {key}

        refs = self.syntax.get_immediate_bases(handle)
        if not refs:
            node = ClassNode(name, location)
            state.subtrees[key] = node
            return node, False

        slots: list[tuple[Optional[ClassNode], bool]] = [(None, False)] * len(refs)
        async with asyncio.TaskGroup() as tg:
            for index, ref in enumerate(refs):
                tg.create_task(self._fill_slot(slots, index, handle, ref, visited, state))

        bases = tuple(base for base, _ in slots if base is not None)
        cut = any(cut for _, cut in slots)
        node = ClassNode(name, location, bases)
        # A subtree missing a branch is only valid on the path that cut it.
        if not cut:
            state.subtrees[key] = node
        return node, cut

    async def _fill_slot(
        self,
        slots: list[tuple[Optional[ClassNode], bool]],
        index: int,
        handle: ClassHandle,
        ref: BaseReference,
        visited: frozenset,
        state: _BuildState,
    ):
        slots[index] = await self._resolve_base(handle, ref, visited, state)

    async def _locate(
        self, path: str, position: SourcePosition, state: _BuildState
    ) -> list[SourceLocation]:
        task = state.lookups.get((path, position))
        if task is None:
            task = asyncio.ensure_future(self.resolver.resolve(path, position))
            state.lookups[(path, position)] = task
        return await asyncio.shield(task)

    async def _resolve_base(
        self,
        handle: ClassHandle,
        ref: BaseReference,
        visited: frozenset,
        state: _BuildState,
    ) -> tuple[Optional[ClassNode], bool]:
        unresolved = ClassNode(
            ref.identifier,
            SourceLocation(handle.path, ref.position),
            resolved=False,
        )

        try:
            locations = await self._locate(handle.path, ref.position, state)
        except Exception as e:
            logger.warning(f"Resolver failed for {ref.identifier} in {handle.path}: {e}")
            return unresolved, False

        if not locations:
            logger.debug(f"No definition found for {ref.identifier}")
            return unresolved, False

        location = locations[0]
        target = self.syntax.find_enclosing_class_at(location)
        if target is None:
            # Not inside a class (alias, re-export, module): keep as a leaf
            name = self.syntax.symbol_name_at(location) or ref.identifier
            return ClassNode(name, location), False

        return await self._build(target, visited, state)
