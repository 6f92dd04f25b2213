"""
Exceptions raised by the Froggy query core.

Only the position mapper, text extraction and the parser raise. Everything
else that can come up empty (no node, no label, no references) answers with
None or an empty list instead.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""


class FroggyError(Exception):
    """Base class for every error the core raises."""


class PositionOutOfRange(FroggyError):
    """A byte offset outside [0, len(text)] was handed to the mapper."""

    def __init__(self, offset: int, length: int):
        super().__init__(f'byte offset {offset} outside document of {length} bytes')
        self.offset = offset
        self.length = length


class LineNotFound(FroggyError):
    """A line index past the last line of the document."""

    def __init__(self, line: int, line_count: int):
        super().__init__(f'line {line} not found (document has {line_count} lines)')
        self.line = line
        self.line_count = line_count


class InvalidTextSpan(FroggyError):
    """A byte span that does not decode to text."""

    def __init__(self, start: int, end: int):
        super().__init__(f'bytes [{start}, {end}) are not valid UTF-8 text')
        self.start = start
        self.end = end


class ParseFailure(FroggyError):
    """The parser could not produce a tree at all."""
