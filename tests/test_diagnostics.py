from froggy_lsp.diagnostics import SEVERITY_ERROR, Diagnostic, collect_diagnostics
from froggy_lsp.positions import Position, Range


def diagnose(doc):
    found = collect_diagnostics(doc.tree, doc.positions)
    return sorted(found, key=lambda d: (d.range.start, d.range.end))


def test_clean_program_has_no_diagnostics(make_doc):
    doc = make_doc('LILY loop\nPLOP 5\nRIBBIT\nHOP loop // forever\n')
    assert diagnose(doc) == []


def test_stray_word_is_one_error(make_doc):
    doc = make_doc('PLOP 5\nFOO\n')
    assert diagnose(doc) == [
        Diagnostic(Range(Position(1, 0), Position(1, 3)), 'Syntax error near `FOO`'),
    ]


def test_every_field_is_filled(make_doc):
    [diagnostic] = diagnose(make_doc('FOO'))
    assert diagnostic.severity == SEVERITY_ERROR
    assert diagnostic.source == 'froggy'
    assert diagnostic.to_lsp() == {
        'range': {'start': {'line': 0, 'character': 0}, 'end': {'line': 0, 'character': 3}},
        'severity': 1,
        'source': 'froggy',
        'message': 'Syntax error near `FOO`',
    }


def test_missing_operand_reports_empty_span(make_doc):
    doc = make_doc('HOP')
    assert diagnose(doc) == [
        Diagnostic(Range(Position(0, 3), Position(0, 3)), 'Syntax error near ``'),
    ]


def test_wrong_operand_kind(make_doc):
    doc = make_doc('PLOP foo')
    assert diagnose(doc) == [
        Diagnostic(Range(Position(0, 5), Position(0, 8)), 'Syntax error near `foo`'),
    ]


def test_each_malformed_construct_reported(make_doc):
    doc = make_doc('FOO\nPLOP 1\nBAR')
    assert [d.range for d in diagnose(doc)] == [
        Range(Position(0, 0), Position(0, 3)),
        Range(Position(2, 0), Position(2, 3)),
    ]


def test_ranges_use_utf16_columns(make_doc):
    doc = make_doc('RIBBIT é 🐸')
    [diagnostic] = diagnose(doc)
    assert diagnostic.range == Range(Position(0, 7), Position(0, 11))
    assert diagnostic.message == 'Syntax error near `é 🐸`'
