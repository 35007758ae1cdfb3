"""Parsed Python source buffers.

A buffer is one file parsed with the standard library ``ast`` module, plus a
parent map so that nodes can be walked upward. Buffers are cached by
absolute path for the lifetime of a ``BufferStore``.
"""

import ast
import logging
import threading
from pathlib import Path
from typing import Iterator, Optional

from ..models import SourcePosition

logger = logging.getLogger(__name__)


def normalize_path(path: str | Path) -> str:
    """Return the absolute form of a path, used as the buffer id."""
    return str(Path(path).resolve())


def node_start(node: ast.AST) -> SourcePosition:
    """0-based start position of an AST node."""
    return SourcePosition(node.lineno - 1, node.col_offset)


def _node_end(node: ast.AST) -> SourcePosition:
    end_line = getattr(node, "end_lineno", None) or node.lineno
    end_col = getattr(node, "end_col_offset", None)
    if end_col is None:
        end_col = node.col_offset
    return SourcePosition(end_line - 1, end_col)


def _as_tuple(pos: SourcePosition) -> tuple[int, int]:
    return (pos.line, pos.column)


def contains(node: ast.AST, position: SourcePosition) -> bool:
    """Whether the node's span contains the position (end inclusive)."""
    if not hasattr(node, "lineno"):
        return False
    start = _as_tuple(node_start(node))
    end = _as_tuple(_node_end(node))
    return start <= _as_tuple(position) <= end


def dotted_name(node: ast.AST) -> Optional[str]:
    """Return "a.b.C" for Name/Attribute chains, None for anything else."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        prefix = dotted_name(node.value)
        if prefix is None:
            return None
        return f"{prefix}.{node.attr}"
    return None


class SourceBuffer:
    """A parsed source file."""

    def __init__(self, path: str, text: str, tree: ast.Module):
        self.path = path
        self.text = text
        self.tree = tree
        self._parents: dict[ast.AST, ast.AST] = {}
        for parent in ast.walk(tree):
            for child in ast.iter_child_nodes(parent):
                self._parents[child] = parent

    def ancestors(self, node: ast.AST) -> Iterator[ast.AST]:
        """Yield the node and then each of its ancestors up to the module."""
        current: Optional[ast.AST] = node
        while current is not None:
            yield current
            current = self._parents.get(current)

    def classes(self) -> Iterator[ast.ClassDef]:
        for node in ast.walk(self.tree):
            if isinstance(node, ast.ClassDef):
                yield node

    def node_at(self, position: SourcePosition) -> Optional[ast.AST]:
        """Return the innermost node whose span contains the position."""
        best: Optional[ast.AST] = None
        best_span: Optional[tuple] = None
        for node in ast.walk(self.tree):
            if not contains(node, position):
                continue
            # Narrowest span wins: latest start, then earliest end.
            start = _as_tuple(node_start(node))
            end = _as_tuple(_node_end(node))
            span = (start, (-end[0], -end[1]))
            if best_span is None or span > best_span:
                best, best_span = node, span
        return best

    def name_expression_at(self, position: SourcePosition) -> Optional[ast.AST]:
        """Return the widest Name/Attribute chain starting at the position."""
        best: Optional[ast.AST] = None
        for node in ast.walk(self.tree):
            if not isinstance(node, (ast.Name, ast.Attribute)):
                continue
            if node_start(node) != position or dotted_name(node) is None:
                continue
            if best is None or _as_tuple(_node_end(node)) > _as_tuple(_node_end(best)):
                best = node
        if best is None:
            # Position may point inside the identifier rather than at its start.
            node = self.node_at(position)
            if isinstance(node, ast.Name):
                best = node
        return best


class BufferStore:
    """Cache of parsed buffers keyed by absolute path.

    Shared by the syntax provider on the event loop and the resolver on
    worker threads; each path is parsed once.
    """

    def __init__(self):
        self._buffers: dict[str, Optional[SourceBuffer]] = {}
        self._lock = threading.Lock()

    def get(self, path: str | Path) -> Optional[SourceBuffer]:
        """Load and parse a file, returning None if it cannot be parsed."""
        key = normalize_path(path)
        with self._lock:
            if key in self._buffers:
                return self._buffers[key]

            buffer: Optional[SourceBuffer] = None
            try:
                text = Path(key).read_text(encoding="utf-8")
                buffer = SourceBuffer(key, text, ast.parse(text, filename=key))
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Failed to read {key}: {e}")
            except (SyntaxError, ValueError) as e:
                logger.debug(f"Failed to parse {key}: {e}")

            self._buffers[key] = buffer
            return buffer

    def add(self, path: str | Path, text: str) -> Optional[SourceBuffer]:
        """Register in-memory source for a path (unsaved editor contents)."""
        key = normalize_path(path)
        try:
            buffer = SourceBuffer(key, text, ast.parse(text, filename=key))
        except (SyntaxError, ValueError) as e:
            logger.debug(f"Failed to parse {key}: {e}")
            buffer = None
        with self._lock:
            self._buffers[key] = buffer
        return buffer
