"""Definition resolver interface."""

from abc import ABC, abstractmethod

from ..models import SourceLocation, SourcePosition


class DefinitionResolver(ABC):
    """Maps a position in a buffer to the definition(s) of the name there."""

    @abstractmethod
    async def resolve(self, path: str, position: SourcePosition) -> list[SourceLocation]:
        """Return definition locations, or an empty list if none is found."""
        pass
