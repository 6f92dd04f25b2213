"""
Hover, go-to-definition, references and document symbols.

Every query starts from the node under the cursor. Hover then climbs the
tree one ancestor at a time, trying HOVER_RULES in order at each level:
the first rule whose predicate matches decides that level, and if its
handler comes back empty the climb continues with the parent.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

from typing import Callable, List, NamedTuple, Optional, Tuple

from .document import Document
from .errors import InvalidTextSpan
from .labels import definition_name_node, is_label_operand
from .language import IDENTIFIER, INSTRUCTIONS_BY_KIND, JUMP_KINDS, LABEL_DEFINITION
from .locator import find_node_at
from .positions import ByteRange, Position, Range, leading_word_range
from .syntax import Node, node_text

SYMBOL_KIND_FUNCTION = 12


class Hover(NamedTuple):
    text: str
    range: Range

    def to_lsp(self) -> dict:
        return {
            'contents': {'kind': 'plaintext', 'value': self.text},
            'range': self.range.to_lsp(),
        }


class Symbol(NamedTuple):
    name: str
    range: Range

    def to_lsp(self) -> dict:
        return {
            'name': self.name,
            'detail': 'Label',
            'kind': SYMBOL_KIND_FUNCTION,
            'range': self.range.to_lsp(),
            'selectionRange': self.range.to_lsp(),
        }


def _text(doc: Document, node: Node) -> Optional[str]:
    try:
        return node_text(node, doc.source)
    except InvalidTextSpan:
        return None


# ============================================================================
# Hover rules
# ============================================================================

def _is_instruction(node: Node) -> bool:
    return node.type in INSTRUCTIONS_BY_KIND


def _instruction_hover(doc: Document, node: Node) -> Optional[Hover]:
    instruction = INSTRUCTIONS_BY_KIND[node.type]
    word = leading_word_range(node, doc.source)
    return Hover(instruction.description, doc.positions.range_or_origin(word))


def _is_label_definition(node: Node) -> bool:
    return node.type == LABEL_DEFINITION


def _label_definition_hover(doc: Document, node: Node) -> Optional[Hover]:
    name_node = definition_name_node(node)
    if name_node is None or name_node.type != IDENTIFIER or name_node.is_missing:
        return None
    name = _text(doc, name_node)
    if name is None:
        return None
    return Hover(f'Label definition: {name}', doc.positions.range_or_origin(ByteRange.of(name_node)))


def _is_bare_identifier(node: Node) -> bool:
    return node.type == IDENTIFIER and not is_label_operand(node)


def _label_hover(doc: Document, node: Node) -> Optional[Hover]:
    name = _text(doc, node)
    if name is None or doc.labels.definition(name) is None:
        return None
    return Hover(f'Label: {name}', doc.positions.range_or_origin(ByteRange.of(node)))


HOVER_RULES: List[Tuple[Callable[[Node], bool], Callable[[Document, Node], Optional[Hover]]]] = [
    (_is_instruction, _instruction_hover),
    (_is_label_definition, _label_definition_hover),
    (_is_bare_identifier, _label_hover),
]


def hover(doc: Document, position: Position) -> Optional[Hover]:
    current = find_node_at(doc.tree, doc.positions, position)
    while current is not None:
        for matches, handle in HOVER_RULES:
            if matches(current):
                result = handle(doc, current)
                if result is not None:
                    return result
                break
        current = current.parent
    return None


# ============================================================================
# Navigation
# ============================================================================

def definition(doc: Document, position: Position) -> Optional[Range]:
    """Jump from a HOP/LEAP target to the LILY that defines it."""
    node = find_node_at(doc.tree, doc.positions, position)
    if node.type != IDENTIFIER or node.parent is None or node.parent.type not in JUMP_KINDS:
        return None
    name = _text(doc, node)
    span = doc.labels.definition(name) if name is not None else None
    if span is None:
        return None
    return doc.positions.range_or_origin(span)


def references(doc: Document, position: Position, include_declaration: bool) -> List[Range]:
    """Definition first (when asked for), then every jump to the label in document order."""
    node = find_node_at(doc.tree, doc.positions, position)
    if node.type != IDENTIFIER:
        return []
    name = _text(doc, node)
    if name is None:
        return []

    spans = []
    if include_declaration:
        declared = doc.labels.definition(name)
        if declared is not None:
            spans.append(declared)
    spans.extend(doc.labels.references_to(name))
    return [doc.positions.range_or_origin(span) for span in spans]


def symbols(doc: Document) -> List[Symbol]:
    """One symbol per defined label, in the order they appear in the file."""
    entries = sorted(doc.labels.definitions.items(), key=lambda item: item[1].start)
    return [Symbol(name, doc.positions.range_or_origin(span)) for name, span in entries]
