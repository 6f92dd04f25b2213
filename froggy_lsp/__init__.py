"""
Language server for Froggy, the stack language for amphibians.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

__version__ = '0.1.0'

from .diagnostics import Diagnostic, collect_diagnostics
from .document import Document, DocumentStore, apply_change, open_document
from .errors import FroggyError, InvalidTextSpan, LineNotFound, ParseFailure, PositionOutOfRange
from .labels import LabelIndex, LabelPolicy
from .positions import ByteRange, Position, PositionMapper, Range
from .resolver import Hover, Symbol, definition, hover, references, symbols
from .tokens import Token, build_tokens, encode_tokens, semantic_tokens

__all__ = [
    'ByteRange',
    'Diagnostic',
    'Document',
    'DocumentStore',
    'FroggyError',
    'Hover',
    'InvalidTextSpan',
    'LabelIndex',
    'LabelPolicy',
    'LineNotFound',
    'ParseFailure',
    'Position',
    'PositionMapper',
    'PositionOutOfRange',
    'Range',
    'Symbol',
    'Token',
    'apply_change',
    'build_tokens',
    'collect_diagnostics',
    'definition',
    'encode_tokens',
    'hover',
    'open_document',
    'references',
    'semantic_tokens',
    'symbols',
]
