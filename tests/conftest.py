"""Shared pytest fixtures."""

import pytest

from froggy_lsp.document import Document
from froggy_lsp.positions import Position

URI = 'file:///pond/main.frog'


@pytest.fixture
def make_doc():
    """Build a Document snapshot straight from text."""
    def _make(text: str, version: int = 1, **kwargs) -> Document:
        return Document.create(URI, text, version, **kwargs)
    return _make


@pytest.fixture
def at():
    """Position of the n-th occurrence of needle in ASCII text, shifted by offset characters."""
    def _at(text: str, needle: str, occurrence: int = 0, offset: int = 0) -> Position:
        index = -1
        for _ in range(occurrence + 1):
            index = text.index(needle, index + 1)
        index += offset
        line = text.count('\n', 0, index)
        column = index - (text.rfind('\n', 0, index) + 1)
        return Position(line, column)
    return _at
