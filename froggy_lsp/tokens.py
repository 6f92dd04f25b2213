"""
Semantic tokens for highlighting.

Tokens are classified in one walk over the tree and then packed into the
relative format clients expect: five integers per token, each position
expressed against the token before it.

Known limitation: a token whose span crosses a line break (a string
literal with an embedded newline is the only way to get one) is dropped
instead of being split per line.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import logging
from typing import List, NamedTuple, Optional, Tuple

from .document import Document
from .labels import definition_name_node, is_label_operand, jump_target_node
from .language import (
    DEFINITION,
    IDENTIFIER,
    INSTRUCTIONS_BY_KIND,
    JUMP_KINDS,
    KEYWORD,
    LABEL_DEFINITION,
    LITERAL_TOKEN_TYPES,
    VARIABLE,
)
from .positions import ByteRange, PositionMapper, leading_word_range
from .syntax import Node, walk

logger = logging.getLogger(__name__)

Classified = Tuple[ByteRange, int, int]


class Token(NamedTuple):
    line: int
    column: int
    length: int
    token_type: int
    modifiers: int = 0


def _named_operand(node: Optional[Node]) -> bool:
    return node is not None and node.type == IDENTIFIER and not node.is_missing


def _classify(node: Node, source: bytes) -> List[Classified]:
    kind = node.type

    if kind == LABEL_DEFINITION:
        found = [(leading_word_range(node, source), KEYWORD, 0)]
        name = definition_name_node(node)
        if _named_operand(name):
            found.append((ByteRange.of(name), VARIABLE, DEFINITION))
        return found

    if kind in JUMP_KINDS:
        found = [(leading_word_range(node, source), KEYWORD, 0)]
        target = jump_target_node(node)
        if _named_operand(target):
            found.append((ByteRange.of(target), VARIABLE, 0))
        return found

    if kind in INSTRUCTIONS_BY_KIND:
        return [(leading_word_range(node, source), INSTRUCTIONS_BY_KIND[kind].token_type, 0)]

    if kind == IDENTIFIER:
        # Label operands were already emitted by their parent's rule
        if is_label_operand(node):
            return []
        return [(ByteRange.of(node), VARIABLE, 0)]

    if kind in LITERAL_TOKEN_TYPES:
        return [(ByteRange.of(node), LITERAL_TOKEN_TYPES[kind], 0)]

    return []


def _token_from_range(positions: PositionMapper, span: ByteRange,
                      token_type: int, modifiers: int) -> Optional[Token]:
    start = positions.byte_to_position(span.start)
    end = positions.byte_to_position(span.end)
    if start.line != end.line:
        logger.debug('Dropping token spanning lines %d-%d', start.line, end.line)
        return None
    return Token(start.line, start.character, end.character - start.character, token_type, modifiers)


def build_tokens(doc: Document) -> List[Token]:
    tokens = []
    for node in walk(doc.tree.root_node):
        # Keyword literals are covered by their rule node, MISSING nodes have no text
        if not node.is_named or node.is_missing:
            continue
        for span, token_type, modifiers in _classify(node, doc.source):
            token = _token_from_range(doc.positions, span, token_type, modifiers)
            if token is not None:
                tokens.append(token)
    return tokens


def encode_tokens(tokens: List[Token]) -> List[int]:
    """Flatten tokens into LSP's relative five-integer encoding."""
    data: List[int] = []
    last_line = 0
    last_column = 0

    for token in sorted(tokens, key=lambda t: (t.line, t.column)):
        delta_line = token.line - last_line
        delta_column = token.column - last_column if delta_line == 0 else token.column
        data.extend((delta_line, delta_column, token.length, token.token_type, token.modifiers))
        last_line = token.line
        last_column = token.column

    return data


def semantic_tokens(doc: Document) -> List[int]:
    return encode_tokens(build_tokens(doc))
