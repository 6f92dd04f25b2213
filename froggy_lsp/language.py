"""
Froggy Language Definitions

A stack machine for amphibians. Values go on the stack, frogs hop between
lilypads, and RIBBIT is how you print. Every keyword the grammar knows about
lives in the table below, and everything else (hover text, highlighting,
completion) reads it from here.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

from typing import Dict, NamedTuple

# ============================================================================
# Instructions
# keyword -> (grammar rule kind, category, one-line description)
# ============================================================================

FROGGY_INSTRUCTIONS = {
    # Stack operations
    'PLOP': ('plop', 'stack', 'PLOP <value>: Push a value onto the stack'),
    'SPLASH': ('splash', 'stack', 'SPLASH: Pop a value off the stack'),
    'GULP': ('gulp', 'stack', 'GULP: Increment top of stack'),
    'BURP': ('burp', 'stack', 'BURP: Decrement top of stack'),
    # I/O - a frog's only way to talk to the outside world
    'RIBBIT': ('ribbit', 'io', 'RIBBIT: Print top of stack'),
    'CROAK': ('croak', 'io', 'CROAK: Read input'),
    # Control flow
    'HOP': ('hop', 'control', 'HOP <Lilypad>: Unconditional jump to a lilypad'),
    'LEAP': ('leap', 'control', 'LEAP <Lilypad>: Pop a, if (a == 0) then jump to lilypad'),
    'LILY': ('label_definition', 'label', 'LILY <label>: Define a lilypad label'),
    # Stack manipulation
    'DUP': ('dup', 'manipulation', 'DUP: Duplicate top of stack'),
    'SWAP': ('swap', 'manipulation', 'SWAP: Swap top two stack values'),
    'OVER': ('over', 'manipulation', 'OVER: Duplicate second from top of stack'),
    # Arithmetic
    'ADD': ('add', 'arithmetic', 'ADD: Pop a b, push (b + a)'),
    'SUB': ('sub', 'arithmetic', 'SUB: Pop a b, push (b - a)'),
    'MUL': ('mul', 'arithmetic', 'MUL: Pop a b, push (b * a)'),
    'DIV': ('div', 'arithmetic', 'DIV: Pop a b, push (b / a)'),
    # Comparison
    'EQUALS': ('equals', 'comparison', 'EQUALS: Pop a b, push (b == a)'),
    'NOT_EQUAL': ('not_equal', 'comparison', 'NOT_EQUAL: Pop a b, push (b != a)'),
    'LESS_THAN': ('less_than', 'comparison', 'LESS_THAN: Pop a b, push (b < a)'),
    'GREATER_THAN': ('greater_than', 'comparison', 'GREATER_THAN: Pop a b, push (b > a)'),
    'LESS_EQ': ('less_eq', 'comparison', 'LESS_EQ: Pop a b, push (b <= a)'),
    'GREATER_EQ': ('greater_eq', 'comparison', 'GREATER_EQ: Pop a b, push (b >= a)'),
}

# Which statement wrapper each category lives under in the tree
CATEGORY_GROUPS = {
    'stack': 'stack_operation',
    'io': 'stack_operation',
    'control': 'control_flow',
    'label': None,
    'manipulation': 'stack_manipulation',
    'arithmetic': 'arithmetic',
    'comparison': 'comparison',
}

# Instructions that take an operand, and the node kind that operand must be
OPERAND_RULES = {
    'plop': ('value', ('number', 'string')),
    'hop': ('target', ('identifier',)),
    'leap': ('target', ('identifier',)),
    'label_definition': ('name', ('identifier',)),
}

JUMP_KINDS = frozenset(('hop', 'leap'))
LABEL_DEFINITION = 'label_definition'
IDENTIFIER = 'identifier'


# ============================================================================
# Semantic token legend
# Order matters: clients receive indices into these lists
# ============================================================================

TOKEN_TYPES = ['keyword', 'number', 'comment', 'string', 'variable', 'operator', 'parameter']
TOKEN_MODIFIERS = ['definition']

KEYWORD = 0
NUMBER = 1
COMMENT = 2
STRING = 3
VARIABLE = 4
OPERATOR = 5
PARAMETER = 6

DEFINITION = 1 << 0

CATEGORY_TOKEN_TYPES = {
    'stack': KEYWORD,
    'control': KEYWORD,
    'label': KEYWORD,
    'manipulation': KEYWORD,
    'arithmetic': OPERATOR,
    'comparison': OPERATOR,
    'io': PARAMETER,
}

LITERAL_TOKEN_TYPES = {
    'number': NUMBER,
    'string': STRING,
    'comment': COMMENT,
}


def legend() -> Dict[str, list]:
    """Semantic token legend as advertised in the initialize response."""
    return {'tokenTypes': list(TOKEN_TYPES), 'tokenModifiers': list(TOKEN_MODIFIERS)}


class Instruction(NamedTuple):
    keyword: str
    kind: str
    category: str
    description: str

    @property
    def token_type(self) -> int:
        return CATEGORY_TOKEN_TYPES[self.category]


def _build_dispatch() -> Dict[str, Instruction]:
    table = {}
    for keyword, (kind, category, description) in FROGGY_INSTRUCTIONS.items():
        instruction = Instruction(keyword, kind, category, description)
        table[keyword] = instruction
        # label_definition has its own hover and token rules
        if kind != LABEL_DEFINITION:
            table[kind] = instruction
    return table


INSTRUCTIONS_BY_KIND = _build_dispatch()
