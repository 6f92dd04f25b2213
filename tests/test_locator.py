from froggy_lsp.locator import find_node_at
from froggy_lsp.positions import Position


def locate(doc, line, character):
    return find_node_at(doc.tree, doc.positions, Position(line, character))


def test_innermost_node(make_doc):
    doc = make_doc('PLOP 5')
    assert locate(doc, 0, 0).type == 'PLOP'
    assert locate(doc, 0, 3).type == 'PLOP'
    assert locate(doc, 0, 5).type == 'number'


def test_gap_between_children_resolves_to_parent(make_doc):
    doc = make_doc('PLOP 5')
    assert locate(doc, 0, 4).type == 'plop'


def test_end_of_file_falls_back_to_root(make_doc):
    doc = make_doc('PLOP 5')
    assert locate(doc, 0, 6) is doc.tree.root_node


def test_empty_document_is_root(make_doc):
    doc = make_doc('')
    assert locate(doc, 0, 0) is doc.tree.root_node


def test_unknown_line_resolves_to_start_of_file(make_doc):
    doc = make_doc('PLOP 5')
    assert locate(doc, 7, 0).type == 'PLOP'


def test_columns_are_utf16(make_doc):
    doc = make_doc('// 🐸🐸\nHOP pad')
    assert locate(doc, 0, 6).type == 'comment'
    assert locate(doc, 1, 4).type == 'identifier'
