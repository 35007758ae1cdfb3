"""Super types (MRO) query."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from ..errors import NoEnclosingClassError
from ..models import SourcePosition, SuperTypesResult
from ..resolve import WorkspaceResolver
from ..syntax import BufferStore, PythonSyntaxProvider, normalize_path
from .base import Query
from .hierarchy import HierarchyBuilder
from .layout import annotate
from .linearize import linearize

logger = logging.getLogger(__name__)


class SuperTypesQuery(Query[SuperTypesResult]):
    """Find the linearized super types of the class enclosing a position.

    Builds the class tree, computes its C3 linearization and annotates
    each class with its depth and index.
    """

    @classmethod
    def for_workspace(cls, roots: Optional[list[str | Path]] = None) -> "SuperTypesQuery":
        """Query over Python files, with a buffer cache shared by both sides."""
        buffers = BufferStore()
        return cls(PythonSyntaxProvider(buffers), WorkspaceResolver(roots, buffers))

    def execute(self, path: str | Path, line: int, column: int = 0) -> SuperTypesResult:
        """Execute the query.

        Args:
            path: File containing the cursor.
            line: 0-based line of the cursor.
            column: 0-based column of the cursor.

        Returns:
            SuperTypesResult with the tree, its linearization and layout.

        Raises:
            NoEnclosingClassError: If no class encloses the position.
            LinearizationError: If the hierarchy has no consistent MRO.
        """
        return asyncio.run(self.execute_async(path, line, column))

    async def execute_async(
        self, path: str | Path, line: int, column: int = 0
    ) -> SuperTypesResult:
        """Coroutine form of ``execute`` for callers with a running loop."""
        path = normalize_path(path)
        builder = HierarchyBuilder(self.syntax, self.resolver)
        root = await builder.build_at(path, SourcePosition(line, column))
        if root is None:
            raise NoEnclosingClassError(path, line, column)

        linearized = linearize(root)
        entries = annotate(root, linearized)
        logger.debug(f"Linearized {root.name}: {[n.name for n in linearized]}")
        return SuperTypesResult(root=root, linearized=linearized, entries=entries)
