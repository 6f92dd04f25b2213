"""
Position -> innermost syntax node.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

from .errors import LineNotFound
from .positions import Position, PositionMapper
from .syntax import Node, Tree


def find_node_at(tree: Tree, positions: PositionMapper, position: Position) -> Node:
    """
    Smallest node whose [start, end) byte range holds the given position.

    Positions on a line that doesn't exist resolve to the start of the file;
    anything no child claims (end of file, empty document) resolves to the
    root node.
    """
    try:
        offset = positions.position_to_byte(position)
    except LineNotFound:
        offset = 0
    root = tree.root_node
    return root.descendant_for_byte_range(offset, offset) or root
