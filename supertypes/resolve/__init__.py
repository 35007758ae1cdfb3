"""Definition resolvers."""

from .base import DefinitionResolver
from .workspace import WorkspaceResolver, find_module

__all__ = [
    "DefinitionResolver",
    "WorkspaceResolver",
    "find_module",
]
