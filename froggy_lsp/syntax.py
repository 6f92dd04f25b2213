"""
Froggy parser.

Produces a concrete syntax tree with the same shape the Froggy tree-sitter
grammar produces, and with node objects that answer the subset of the
py-tree-sitter ``Node`` API the rest of the server uses (``type``,
``start_byte``/``end_byte``, ``children``, ``child_by_field_name``,
``parent``, ``is_error``/``is_missing`` ...). Code written against this
module also works on real tree-sitter nodes.

Grammar:

    program            := statement*
    statement          := stack_operation | control_flow | stack_manipulation
                        | arithmetic | comparison | label_definition
    plop               := 'PLOP' (number | string)
    hop / leap         := 'HOP' / 'LEAP' identifier
    label_definition   := 'LILY' identifier
    everything else    := its keyword

Whitespace and ``//`` comments may appear anywhere. The parser never gives
up: tokens that cannot start a statement are gathered into ``ERROR`` nodes
and absent operands become zero-width ``MISSING`` nodes, so callers always
get a tree back.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import re
from typing import Dict, Iterator, List, Optional

from .errors import InvalidTextSpan, ParseFailure
from .language import CATEGORY_GROUPS, FROGGY_INSTRUCTIONS, OPERAND_RULES

# Tried in order at every position; byte-oriented so offsets are byte offsets
TOKEN_PATTERN = re.compile(rb'''
      (?P<comment>//[^\n]*)
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<number>[0-9]+(?:\.[0-9]+)?)
    | (?P<word>[a-zA-Z_][a-zA-Z0-9_]*)
    | (?P<space>\s+)
    | (?P<junk>[\x80-\xff]+|.)
''', re.VERBOSE | re.DOTALL)

ERROR = 'ERROR'


class Lexeme:
    __slots__ = ('kind', 'start', 'end', 'value')

    def __init__(self, kind: str, start: int, end: int, value: bytes):
        self.kind = kind
        self.start = start
        self.end = end
        self.value = value

    @property
    def word(self) -> str:
        return self.value.decode('ascii', errors='replace')

    def __repr__(self):
        return f'Lexeme({self.kind}, {self.start}, {self.end})'


def tokenize(source: bytes) -> List[Lexeme]:
    """Split source bytes into lexemes, dropping whitespace."""
    lexemes = []
    for match in TOKEN_PATTERN.finditer(source):
        kind = match.lastgroup
        if kind == 'space':
            continue
        lexemes.append(Lexeme(kind, match.start(), match.end(), match.group()))
    return lexemes


class Node:
    """A syntax node. Mirrors the py-tree-sitter ``Node`` surface."""

    def __init__(self, type: str, start_byte: int, end_byte: int,
                 children: Optional[List['Node']] = None, is_named: bool = True,
                 is_missing: bool = False, fields: Optional[Dict[str, 'Node']] = None):
        self.type = type
        self.start_byte = start_byte
        self.end_byte = end_byte
        self.children = children or []
        self.is_named = is_named
        self.is_missing = is_missing
        self.parent: Optional['Node'] = None
        self._fields = fields or {}
        for child in self.children:
            child.parent = self

    @property
    def is_error(self) -> bool:
        return self.type == ERROR

    @property
    def has_error(self) -> bool:
        if self.is_error or self.is_missing:
            return True
        return any(child.has_error for child in self.children)

    def child(self, index: int) -> Optional['Node']:
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    def child_by_field_name(self, name: str) -> Optional['Node']:
        return self._fields.get(name)

    def field_name_for_child(self, index: int) -> Optional[str]:
        child = self.child(index)
        for name, node in self._fields.items():
            if node is child:
                return name
        return None

    def descendant_for_byte_range(self, start: int, end: int) -> 'Node':
        """
        Smallest node (named or anonymous) spanning [start, end].

        Same selection rule as tree-sitter: a non-empty child must extend
        past ``start``, so a point sitting exactly on a child's end belongs
        to whatever follows it.
        """
        node = self
        while True:
            descended = False
            for child in node.children:
                if child.end_byte < end:
                    continue
                empty = child.start_byte == child.end_byte
                if (child.end_byte < start) if empty else (child.end_byte <= start):
                    continue
                if start < child.start_byte:
                    break
                node = child
                descended = True
                break
            if not descended:
                return node

    def sexp(self) -> str:
        if self.is_missing:
            return f'(MISSING {self.type})'
        parts = [self.type]
        for index, child in enumerate(self.children):
            if not child.is_named:
                continue
            field = self.field_name_for_child(index)
            parts.append(f'{field}: {child.sexp()}' if field else child.sexp())
        return '(' + ' '.join(parts) + ')'

    def __repr__(self):
        return f'<Node type={self.type} start_byte={self.start_byte} end_byte={self.end_byte}>'


class Tree:
    """Result of a parse: the root node plus the bytes it was built from."""

    def __init__(self, source: bytes, root_node: Node):
        self.text = source
        self.root_node = root_node


def walk(node: Node) -> Iterator[Node]:
    """Pre-order depth-first walk, yielding nodes in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Node, source: bytes) -> str:
    """Decode a node's byte span, raising InvalidTextSpan if it isn't UTF-8."""
    try:
        return source[node.start_byte:node.end_byte].decode('utf-8')
    except UnicodeDecodeError as exc:
        raise InvalidTextSpan(node.start_byte, node.end_byte) from exc


class _Parser:
    """Recursive descent over the lexeme list."""

    def __init__(self, source: bytes):
        self.source = source
        self.lexemes = tokenize(source)
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[Lexeme]:
        index = self.pos + offset
        if index < len(self.lexemes):
            return self.lexemes[index]
        return None

    def advance(self) -> Lexeme:
        lexeme = self.lexemes[self.pos]
        self.pos += 1
        return lexeme

    def starts_statement(self, lexeme: Lexeme) -> bool:
        return lexeme.kind == 'word' and lexeme.word in FROGGY_INSTRUCTIONS

    def parse(self) -> Tree:
        children: List[Node] = []
        stray: List[Lexeme] = []

        while self.peek() is not None:
            lexeme = self.peek()
            if lexeme.kind == 'comment' or self.starts_statement(lexeme):
                if stray:
                    children.append(self.error_node(stray))
                    stray = []
                if lexeme.kind == 'comment':
                    children.append(self.leaf(self.advance()))
                else:
                    children.append(self.parse_statement())
            else:
                stray.append(self.advance())

        if stray:
            children.append(self.error_node(stray))

        root = Node('program', 0, len(self.source), children)
        return Tree(self.source, root)

    def parse_statement(self) -> Node:
        keyword = self.advance()
        kind, category, _ = FROGGY_INSTRUCTIONS[keyword.word]

        if kind in OPERAND_RULES:
            instruction = self.parse_operand(kind, keyword)
        else:
            instruction = Node(kind, keyword.start, keyword.end)

        group = CATEGORY_GROUPS[category]
        if group is not None:
            instruction = Node(group, instruction.start_byte, instruction.end_byte, [instruction])
        return Node('statement', instruction.start_byte, instruction.end_byte, [instruction])

    def parse_operand(self, kind: str, keyword: Lexeme) -> Node:
        field, accepted = OPERAND_RULES[kind]
        children = [Node(keyword.word, keyword.start, keyword.end, is_named=False)]

        # Comments between the keyword and its operand belong to the instruction
        lookahead = 0
        while self.peek(lookahead) is not None and self.peek(lookahead).kind == 'comment':
            lookahead += 1
        candidate = self.peek(lookahead)

        operand = None
        if candidate is not None:
            if 'identifier' in accepted and candidate.kind == 'word':
                # After HOP/LEAP/LILY any word is a name, keywords included
                operand_kind = 'identifier'
            elif candidate.kind in accepted:
                operand_kind = candidate.kind
            elif candidate.kind == 'word' and not self.starts_statement(candidate):
                operand_kind = ERROR
            else:
                operand_kind = None

            if operand_kind is not None:
                for _ in range(lookahead):
                    children.append(self.leaf(self.advance()))
                lexeme = self.advance()
                if operand_kind == ERROR:
                    children.append(self.error_node([lexeme]))
                else:
                    operand = Node(operand_kind, lexeme.start, lexeme.end)
                    children.append(operand)

        if operand is None and children[-1].type != ERROR:
            operand = Node(accepted[0], keyword.end, keyword.end, is_missing=True)
            children.append(operand)

        fields = {field: operand} if operand is not None else {}
        return Node(kind, keyword.start, children[-1].end_byte, children, fields=fields)

    def leaf(self, lexeme: Lexeme) -> Node:
        kind = 'identifier' if lexeme.kind == 'word' else lexeme.kind
        return Node(kind, lexeme.start, lexeme.end)

    def error_node(self, lexemes: List[Lexeme]) -> Node:
        # Junk bytes have no node of their own; they just widen the ERROR
        children = [self.leaf(lexeme) for lexeme in lexemes if lexeme.kind != 'junk']
        return Node(ERROR, lexemes[0].start, lexemes[-1].end, children)


def parse(text: str, previous_tree: Optional[Tree] = None) -> Tree:
    """
    Parse Froggy source text into a Tree.

    ``previous_tree`` is accepted for signature compatibility with
    incremental parsers and ignored: every call is a full reparse.
    """
    try:
        source = text.encode('utf-8')
    except UnicodeEncodeError as exc:
        raise ParseFailure(f'document is not encodable as UTF-8: {exc.reason}') from exc
    return _Parser(source).parse()
