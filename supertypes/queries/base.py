"""Base query interface."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from ..resolve import DefinitionResolver
from ..syntax import SyntaxProvider

T = TypeVar("T")


class Query(ABC, Generic[T]):
    """Base query interface.

    All queries take a syntax provider and a definition resolver and
    execute against them.
    """

    def __init__(self, syntax: SyntaxProvider, resolver: DefinitionResolver):
        self.syntax = syntax
        self.resolver = resolver

    @abstractmethod
    def execute(self, **params) -> T:
        """Execute the query and return typed result."""
        pass
