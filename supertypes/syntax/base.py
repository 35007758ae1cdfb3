"""Syntax provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..models import BaseReference, SourceLocation, SourcePosition


@dataclass(frozen=True)
class ClassHandle:
    """Opaque reference to a class definition inside a buffer.

    ``node`` belongs to the provider that created the handle.
    """

    path: str
    node: Any


class SyntaxProvider(ABC):
    """Source-level queries the hierarchy builder relies on."""

    @abstractmethod
    def find_enclosing_class(
        self, path: str, position: SourcePosition
    ) -> Optional[ClassHandle]:
        """Return the innermost class definition containing the position."""
        pass

    @abstractmethod
    def get_immediate_bases(self, handle: ClassHandle) -> list[BaseReference]:
        """Return the class's bases in declared left-to-right order."""
        pass

    @abstractmethod
    def get_class_identity(self, handle: ClassHandle) -> tuple[str, SourceLocation]:
        """Return the class name and the location of its definition."""
        pass

    @abstractmethod
    def find_enclosing_class_at(self, location: SourceLocation) -> Optional[ClassHandle]:
        """Walk from a resolved location up to a class definition."""
        pass

    @abstractmethod
    def symbol_name_at(self, location: SourceLocation) -> Optional[str]:
        """Return the name of the symbol defined or referenced at a location."""
        pass
