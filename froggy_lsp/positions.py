"""
Byte offsets <-> editor positions.

The parser hands out byte offsets into the UTF-8 source. Editors speak in
(line, column) with the column counted in UTF-16 code units. An "é" is two
bytes and one unit, an emoji is four bytes and two units, so the two
coordinate systems drift apart on any line that isn't pure ASCII.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import bisect
from typing import Dict, List, NamedTuple

from .errors import LineNotFound, PositionOutOfRange


class Position(NamedTuple):
    line: int
    character: int

    def to_lsp(self) -> Dict[str, int]:
        return {'line': self.line, 'character': self.character}

    @classmethod
    def from_lsp(cls, data: dict) -> 'Position':
        return cls(data['line'], data['character'])


class Range(NamedTuple):
    start: Position
    end: Position

    def to_lsp(self) -> Dict[str, dict]:
        return {'start': self.start.to_lsp(), 'end': self.end.to_lsp()}


class ByteRange(NamedTuple):
    """Half-open [start, end) span of byte offsets."""

    start: int
    end: int

    @classmethod
    def of(cls, node) -> 'ByteRange':
        return cls(node.start_byte, node.end_byte)


def leading_word_range(node, source: bytes) -> ByteRange:
    """The node's first run of non-whitespace bytes, e.g. just ``PLOP`` of ``PLOP 5``.

    When the node leads with an anonymous keyword child, the run stops at
    that keyword's end, so ``PLOP"hi"`` and ``HOP//c`` yield only the keyword.
    """
    start = node.start_byte
    limit = node.end_byte
    first = node.child(0)
    if first is not None and not first.is_named:
        limit = min(limit, first.end_byte)
    end = start
    while end < limit and source[end] not in b' \t\r\n':
        end += 1
    return ByteRange(start, end)


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed to encode text."""
    return len(text.encode('utf-16-le')) // 2


class PositionMapper:
    """
    Line table for one text snapshot.

    Lines are split on ``\\n`` only; a ``\\r`` before it counts as an
    ordinary character of the line.
    """

    def __init__(self, text: str):
        self.source = text.encode('utf-8')
        self.line_starts: List[int] = [0]
        for index, byte in enumerate(self.source):
            if byte == 0x0A:
                self.line_starts.append(index + 1)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def _line_end(self, line: int) -> int:
        """Byte offset just before the line's newline (or end of text)."""
        if line + 1 < len(self.line_starts):
            return self.line_starts[line + 1] - 1
        return len(self.source)

    def byte_to_position(self, offset: int) -> Position:
        if offset < 0 or offset > len(self.source):
            raise PositionOutOfRange(offset, len(self.source))
        line = bisect.bisect_right(self.line_starts, offset) - 1
        prefix = self.source[self.line_starts[line]:offset]
        # An offset inside a multi-byte character counts up to that character's start
        return Position(line, utf16_length(prefix.decode('utf-8', errors='ignore')))

    def position_to_byte(self, position: Position) -> int:
        line, column = position
        if line < 0 or line >= len(self.line_starts):
            raise LineNotFound(line, len(self.line_starts))

        start = self.line_starts[line]
        text = self.source[start:self._line_end(line)].decode('utf-8')

        units = 0
        consumed = 0
        for char in text:
            width = 2 if ord(char) > 0xFFFF else 1
            # Columns landing inside a surrogate pair snap to the character start
            if units + width > column:
                break
            units += width
            consumed += len(char.encode('utf-8'))
        # Past the end of the line: clamp to line end
        return start + consumed

    def range_of(self, span: ByteRange) -> Range:
        return Range(self.byte_to_position(span.start), self.byte_to_position(span.end))

    def range_or_origin(self, span: ByteRange) -> Range:
        """Like range_of, but an out-of-range endpoint becomes (0, 0) instead of raising."""
        return Range(self.position_or_origin(span.start), self.position_or_origin(span.end))

    def position_or_origin(self, offset: int) -> Position:
        try:
            return self.byte_to_position(offset)
        except PositionOutOfRange:
            return Position(0, 0)
