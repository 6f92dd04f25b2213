"""
Syntax diagnostics.

Froggy has no type system to speak of, so the only thing worth complaining
about is what the parser could not make sense of.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import logging
from typing import List, NamedTuple

from .errors import InvalidTextSpan
from .positions import ByteRange, PositionMapper, Range
from .syntax import ERROR, Node, Tree, node_text, walk

logger = logging.getLogger(__name__)

SEVERITY_ERROR = 1
SOURCE = 'froggy'
UNREADABLE_TEXT = '<unreadable text>'


class Diagnostic(NamedTuple):
    range: Range
    message: str
    severity: int = SEVERITY_ERROR
    source: str = SOURCE

    def to_lsp(self) -> dict:
        return {
            'range': self.range.to_lsp(),
            'severity': self.severity,
            'source': self.source,
            'message': self.message,
        }


def is_erroneous(node: Node) -> bool:
    return node.is_error or node.is_missing or node.type == ERROR


def collect_diagnostics(tree: Tree, positions: PositionMapper) -> List[Diagnostic]:
    """One error diagnostic per ERROR or MISSING node, nested ones included."""
    diagnostics = []
    source = positions.source

    for node in walk(tree.root_node):
        if not is_erroneous(node):
            continue
        try:
            snippet = node_text(node, source)
        except InvalidTextSpan:
            snippet = UNREADABLE_TEXT
        span = positions.range_or_origin(ByteRange.of(node))
        diagnostic = Diagnostic(span, f'Syntax error near `{snippet}`')
        logger.debug('[DIAG] %d:%d-%d:%d - %s', span.start.line, span.start.character,
                     span.end.line, span.end.character, diagnostic.message)
        diagnostics.append(diagnostic)

    return diagnostics
