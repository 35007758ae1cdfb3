"""Import-following definition resolver over a directory tree.

Resolves a name the way a reader would by hand: look for a module-level
binding of its first segment (class, function, assignment, import), follow
``import`` and ``from ... import`` statements into other files under the
workspace roots, and continue with the remaining dotted segments there.

Only files under the configured roots (and the referencing file's own
directory) are searched; builtins and installed packages resolve to nothing.
"""

import ast
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from ..models import SourceLocation, SourcePosition
from ..syntax.buffers import BufferStore, SourceBuffer, dotted_name, node_start
from .base import DefinitionResolver

logger = logging.getLogger(__name__)

# Re-export chains longer than this are treated as unresolvable.
MAX_IMPORT_HOPS = 16


@dataclass
class _Binding:
    """What a module-level name is bound to."""

    kind: str  # "def", "module", "from"
    node: Optional[ast.AST] = None
    module: Optional[Path] = None
    name: Optional[str] = None


def _module_statements(body: list[ast.stmt]) -> Iterator[ast.stmt]:
    """Yield module-level statements, descending into if/try/with blocks."""
    for stmt in body:
        yield stmt
        if isinstance(stmt, ast.If):
            yield from _module_statements(stmt.body)
            yield from _module_statements(stmt.orelse)
        elif isinstance(stmt, ast.Try):
            yield from _module_statements(stmt.body)
            for handler in stmt.handlers:
                yield from _module_statements(handler.body)
            yield from _module_statements(stmt.orelse)
            yield from _module_statements(stmt.finalbody)
        elif isinstance(stmt, (ast.With, ast.AsyncWith)):
            yield from _module_statements(stmt.body)


def _ends_before(stmt: ast.stmt, position: SourcePosition) -> bool:
    end_line = getattr(stmt, "end_lineno", None) or stmt.lineno
    end_col = getattr(stmt, "end_col_offset", None) or 0
    return (end_line - 1, end_col) <= (position.line, position.column)


def find_module(base: Path, parts: list[str]) -> Optional[Path]:
    """Locate ``a.b.c`` below ``base`` as a file, package or namespace dir."""
    if not parts:
        init = base / "__init__.py"
        if init.is_file():
            return init
        return base if base.is_dir() else None

    module_file = base.joinpath(*parts[:-1], parts[-1] + ".py")
    if module_file.is_file():
        return module_file
    package = base.joinpath(*parts)
    if (package / "__init__.py").is_file():
        return package / "__init__.py"
    if package.is_dir():
        return package
    return None


class WorkspaceResolver(DefinitionResolver):
    """Resolves names to definitions across the files of a workspace."""

    def __init__(
        self,
        roots: Optional[list[str | Path]] = None,
        buffers: Optional[BufferStore] = None,
    ):
        """Initialize the resolver.

        Args:
            roots: Directories searched for absolute imports (default: cwd).
            buffers: Parsed buffer cache, shared with the syntax provider.
        """
        self.roots = [Path(r).resolve() for r in (roots or [Path.cwd()])]
        self.buffers = buffers if buffers is not None else BufferStore()

    async def resolve(self, path: str, position: SourcePosition) -> list[SourceLocation]:
        return await asyncio.to_thread(self.resolve_sync, path, position)

    def resolve_sync(self, path: str, position: SourcePosition) -> list[SourceLocation]:
        """Blocking variant of ``resolve``."""
        buffer = self.buffers.get(path)
        if buffer is None:
            return []

        expr = buffer.name_expression_at(position)
        if expr is None:
            logger.debug(f"No name at {path}:{position.line + 1}:{position.column + 1}")
            return []

        parts = dotted_name(expr).split(".")
        locations = self._resolve_in_buffer(buffer, parts, before=position, hops=0)
        if not locations:
            logger.debug(f"Unresolved {'.'.join(parts)} in {path}")
        return locations

    def _resolve_in_buffer(
        self,
        buffer: SourceBuffer,
        parts: list[str],
        before: Optional[SourcePosition] = None,
        hops: int = 0,
    ) -> list[SourceLocation]:
        if hops > MAX_IMPORT_HOPS:
            logger.debug(f"Import chain too long resolving {'.'.join(parts)}")
            return []

        binding = self._lookup(buffer, parts[0], before)
        if binding is None:
            return self._resolve_fallback(buffer, parts, hops)

        if binding.kind == "def":
            return self._resolve_definition(buffer, binding.node, parts[1:])
        if binding.kind == "module":
            return self._resolve_in_module(binding.module, parts[1:], hops)
        return self._resolve_in_module(binding.module, [binding.name] + parts[1:], hops)

    def _resolve_definition(
        self, buffer: SourceBuffer, node: ast.AST, rest: list[str]
    ) -> list[SourceLocation]:
        """Descend into nested class bodies for ``Outer.Inner``."""
        current = node
        for part in rest:
            if not isinstance(current, ast.ClassDef):
                return []
            found = None
            for stmt in current.body:
                binding = self._statement_binding(buffer, stmt, part)
                if binding is not None and binding.kind == "def":
                    found = binding.node
            if found is None:
                return []
            current = found
        return [SourceLocation(buffer.path, node_start(current))]

    def _resolve_fallback(
        self, buffer: SourceBuffer, parts: list[str], hops: int
    ) -> list[SourceLocation]:
        """Names not bound explicitly: star imports, then package submodules."""
        for stmt in _module_statements(buffer.tree.body):
            if isinstance(stmt, ast.ImportFrom) and any(a.name == "*" for a in stmt.names):
                module = self._import_from_module(buffer, stmt)
                if module is None:
                    continue
                found = self._resolve_in_module(module, parts, hops)
                if found:
                    return found

        if Path(buffer.path).name == "__init__.py":
            sub = find_module(Path(buffer.path).parent, parts[:1])
            if sub is not None:
                return self._resolve_in_module(sub, parts[1:], hops)
        return []

    def _resolve_in_module(
        self, module: Path, parts: list[str], hops: int
    ) -> list[SourceLocation]:
        if not parts:
            if module.is_dir():
                return []
            return [SourceLocation(str(module), SourcePosition(0, 0))]

        if module.is_dir():
            sub = find_module(module, parts[:1])
            if sub is None:
                return []
            return self._resolve_in_module(sub, parts[1:], hops + 1)

        buffer = self.buffers.get(module)
        if buffer is None:
            return []
        return self._resolve_in_buffer(buffer, parts, hops=hops + 1)

    def _lookup(
        self, buffer: SourceBuffer, name: str, before: Optional[SourcePosition]
    ) -> Optional[_Binding]:
        """Return the last module-level binding of a name.

        With ``before``, only statements that end before that position count,
        so ``class Foo(Foo)`` sees the imported ``Foo`` rather than itself.
        """
        result = None
        for stmt in _module_statements(buffer.tree.body):
            if before is not None and not _ends_before(stmt, before):
                continue
            binding = self._statement_binding(buffer, stmt, name)
            if binding is not None:
                result = binding
        return result

    def _statement_binding(
        self, buffer: SourceBuffer, stmt: ast.stmt, name: str
    ) -> Optional[_Binding]:
        if isinstance(stmt, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            if stmt.name == name:
                return _Binding("def", node=stmt)
            return None

        if isinstance(stmt, (ast.Assign, ast.AnnAssign)):
            targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
            for target in targets:
                if isinstance(target, ast.Name) and target.id == name:
                    return _Binding("def", node=target)
            return None

        if isinstance(stmt, ast.Import):
            for alias in stmt.names:
                if alias.asname == name:
                    module = self._find_absolute(buffer, alias.name.split("."))
                    return _Binding("module", module=module) if module else None
                if alias.asname is None and alias.name.split(".")[0] == name:
                    module = self._find_absolute(buffer, [name])
                    return _Binding("module", module=module) if module else None
            return None

        if isinstance(stmt, ast.ImportFrom):
            for alias in stmt.names:
                if (alias.asname or alias.name) != name or alias.name == "*":
                    continue
                module = self._import_from_module(buffer, stmt)
                if module is None:
                    return None
                return _Binding("from", module=module, name=alias.name)
        return None

    def _import_from_module(
        self, buffer: SourceBuffer, stmt: ast.ImportFrom
    ) -> Optional[Path]:
        parts = stmt.module.split(".") if stmt.module else []
        if stmt.level == 0:
            return self._find_absolute(buffer, parts)

        base = Path(buffer.path).parent
        for _ in range(stmt.level - 1):
            base = base.parent
        return find_module(base, parts)

    def _find_absolute(self, buffer: SourceBuffer, parts: list[str]) -> Optional[Path]:
        for root in self.roots + [Path(buffer.path).parent]:
            module = find_module(root, parts)
            if module is not None:
                return module
        return None
