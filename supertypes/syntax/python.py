"""Syntax provider for Python source built on the ``ast`` module."""

import ast
import logging
from typing import Optional

from ..models import BaseReference, SourceLocation, SourcePosition
from .base import ClassHandle, SyntaxProvider
from .buffers import BufferStore, contains, dotted_name, node_start

logger = logging.getLogger(__name__)


def _base_expression(expr: ast.expr) -> Optional[ast.expr]:
    """Strip generic subscripts: ``Generic[T]`` -> ``Generic``."""
    if isinstance(expr, ast.Subscript):
        expr = expr.value
    if isinstance(expr, (ast.Name, ast.Attribute)) and dotted_name(expr) is not None:
        return expr
    return None


class PythonSyntaxProvider(SyntaxProvider):
    """Locates classes and their bases in Python files."""

    def __init__(self, buffers: Optional[BufferStore] = None):
        self.buffers = buffers if buffers is not None else BufferStore()

    def find_enclosing_class(
        self, path: str, position: SourcePosition
    ) -> Optional[ClassHandle]:
        buffer = self.buffers.get(path)
        if buffer is None:
            return None

        innermost: Optional[ast.ClassDef] = None
        for cls in buffer.classes():
            if not contains(cls, position):
                continue
            # Nested classes start after the classes enclosing them.
            if innermost is None or (cls.lineno, cls.col_offset) > (
                innermost.lineno,
                innermost.col_offset,
            ):
                innermost = cls

        if innermost is None:
            return None
        return ClassHandle(buffer.path, innermost)

    def get_immediate_bases(self, handle: ClassHandle) -> list[BaseReference]:
        bases = []
        for expr in handle.node.bases:
            base = _base_expression(expr)
            if base is None:
                logger.debug(
                    f"Skipping base expression of {handle.node.name}: {ast.dump(expr)}"
                )
                continue
            bases.append(BaseReference(dotted_name(base), node_start(base)))
        return bases

    def get_class_identity(self, handle: ClassHandle) -> tuple[str, SourceLocation]:
        node = handle.node
        return node.name, SourceLocation(handle.path, node_start(node))

    def find_enclosing_class_at(self, location: SourceLocation) -> Optional[ClassHandle]:
        buffer = self.buffers.get(location.path)
        if buffer is None:
            return None

        # A class definition starting on the location's line
        for cls in buffer.classes():
            if cls.lineno - 1 == location.position.line:
                return ClassHandle(buffer.path, cls)

        node = buffer.node_at(location.position)
        if node is None:
            return None
        for ancestor in buffer.ancestors(node):
            if isinstance(ancestor, ast.ClassDef):
                return ClassHandle(buffer.path, ancestor)
        return None

    def symbol_name_at(self, location: SourceLocation) -> Optional[str]:
        buffer = self.buffers.get(location.path)
        if buffer is None:
            return None

        node = buffer.node_at(location.position)
        if node is None:
            return None
        if isinstance(node, (ast.Name, ast.Attribute)):
            return dotted_name(node)
        if isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            return node.name
        if isinstance(node, ast.alias):
            return node.asname or node.name
        if isinstance(node, (ast.Assign, ast.AnnAssign)):
            targets = node.targets if isinstance(node, ast.Assign) else [node.target]
            for target in targets:
                name = dotted_name(target)
                if name:
                    return name
        return None
