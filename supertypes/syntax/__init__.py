"""Syntax providers: locating classes and their base lists."""

from .base import ClassHandle, SyntaxProvider
from .buffers import BufferStore, SourceBuffer, normalize_path
from .python import PythonSyntaxProvider

__all__ = [
    "ClassHandle",
    "SyntaxProvider",
    "BufferStore",
    "SourceBuffer",
    "normalize_path",
    "PythonSyntaxProvider",
]
