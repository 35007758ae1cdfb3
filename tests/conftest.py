"""Shared fixtures for py-super-types tests."""

import textwrap
from pathlib import Path

import pytest

from supertypes.models import SourcePosition


@pytest.fixture
def write_files(tmp_path):
    """Write a small project below tmp_path.

    Takes a mapping of relative path -> source (dedented) and returns the
    resolved project root.
    """

    def _write(files: dict[str, str]) -> Path:
        for rel, source in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
        return tmp_path.resolve()

    return _write


def position_of(path: Path, snippet: str, token: str = None) -> SourcePosition:
    """0-based position of ``token`` inside the first line containing ``snippet``."""
    for line_no, line in enumerate(path.read_text(encoding="utf-8").splitlines()):
        if snippet in line:
            column = line.index(snippet)
            if token is not None:
                column += snippet.index(token)
            return SourcePosition(line_no, column)
    raise AssertionError(f"{snippet!r} not found in {path}")


@pytest.fixture
def position():
    return position_of
