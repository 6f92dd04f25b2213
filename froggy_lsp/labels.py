"""
Label index: where every lilypad is defined and who hops to it.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from .errors import InvalidTextSpan
from .language import IDENTIFIER, JUMP_KINDS, LABEL_DEFINITION
from .positions import ByteRange
from .syntax import Node, Tree, node_text, walk

logger = logging.getLogger(__name__)


class LabelPolicy(Enum):
    """Which definition wins when a label is declared more than once."""

    LAST_WINS = 'last'
    FIRST_WINS = 'first'


def definition_name_node(node: Node) -> Optional[Node]:
    """The name child of a label_definition, by field or by position."""
    return node.child_by_field_name('name') or node.child(1)


def jump_target_node(node: Node) -> Optional[Node]:
    """The label operand of a HOP/LEAP, by field or by position."""
    return node.child_by_field_name('target') or node.child(1)


def is_label_operand(node: Node) -> bool:
    """True for the name of a LILY or the target of a HOP/LEAP."""
    parent = node.parent
    if node.type != IDENTIFIER or parent is None:
        return False
    if parent.type == LABEL_DEFINITION:
        return definition_name_node(parent) is node
    if parent.type in JUMP_KINDS:
        return jump_target_node(parent) is node
    return False


def _usable_name(node: Optional[Node], source: bytes) -> Optional[str]:
    if node is None or node.type != IDENTIFIER or node.is_missing:
        return None
    try:
        return node_text(node, source) or None
    except InvalidTextSpan:
        return None


class LabelIndex:
    """
    Label definitions and references for one parse tree.

    definitions: name -> span of the whole ``LILY name`` node
    references:  name -> spans of jump targets, in document order
    """

    def __init__(self, definitions: Optional[Dict[str, ByteRange]] = None,
                 references: Optional[Dict[str, List[ByteRange]]] = None,
                 policy: LabelPolicy = LabelPolicy.LAST_WINS):
        self.definitions: Dict[str, ByteRange] = definitions or {}
        self.references: Dict[str, List[ByteRange]] = references or {}
        self.policy = policy

    @classmethod
    def build(cls, tree: Tree, text: str, policy: LabelPolicy = LabelPolicy.LAST_WINS) -> 'LabelIndex':
        source = text.encode('utf-8')
        index = cls(policy=policy)

        for node in walk(tree.root_node):
            if node.type == LABEL_DEFINITION:
                name = _usable_name(definition_name_node(node), source)
                if name is None:
                    continue
                index._define(name, ByteRange.of(node))
            elif node.type in JUMP_KINDS:
                target = jump_target_node(node)
                name = _usable_name(target, source)
                if name is None:
                    continue
                index.references.setdefault(name, []).append(ByteRange.of(target))

        return index

    def _define(self, name: str, span: ByteRange):
        if name in self.definitions:
            logger.debug('Label %r redefined at byte %d (%s)', name, span.start, self.policy.value)
            if self.policy is LabelPolicy.FIRST_WINS:
                return
        self.definitions[name] = span

    def definition(self, name: str) -> Optional[ByteRange]:
        return self.definitions.get(name)

    def references_to(self, name: str) -> List[ByteRange]:
        return list(self.references.get(name, ()))

    def __eq__(self, other):
        if not isinstance(other, LabelIndex):
            return NotImplemented
        return self.definitions == other.definitions and self.references == other.references

    def __repr__(self):
        return f'LabelIndex(definitions={self.definitions!r}, references={self.references!r})'
