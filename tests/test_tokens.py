from froggy_lsp.language import (
    COMMENT,
    DEFINITION,
    KEYWORD,
    NUMBER,
    OPERATOR,
    PARAMETER,
    STRING,
    TOKEN_MODIFIERS,
    TOKEN_TYPES,
    VARIABLE,
    legend,
)
from froggy_lsp.tokens import Token, build_tokens, encode_tokens, semantic_tokens


def test_legend_matches_indices():
    assert TOKEN_TYPES[KEYWORD] == 'keyword'
    assert TOKEN_TYPES[NUMBER] == 'number'
    assert TOKEN_TYPES[COMMENT] == 'comment'
    assert TOKEN_TYPES[STRING] == 'string'
    assert TOKEN_TYPES[VARIABLE] == 'variable'
    assert TOKEN_TYPES[OPERATOR] == 'operator'
    assert TOKEN_TYPES[PARAMETER] == 'parameter'
    assert TOKEN_MODIFIERS == ['definition']
    assert DEFINITION == 1
    assert legend() == {'tokenTypes': TOKEN_TYPES, 'tokenModifiers': TOKEN_MODIFIERS}


def test_push_is_keyword_then_number(make_doc):
    doc = make_doc('PLOP 5')
    assert build_tokens(doc) == [Token(0, 0, 4, KEYWORD), Token(0, 5, 1, NUMBER)]
    assert semantic_tokens(doc) == [0, 0, 4, KEYWORD, 0, 0, 5, 1, NUMBER, 0]


def test_keyword_against_operand_does_not_overlap(make_doc):
    doc = make_doc('PLOP"hi"')
    assert build_tokens(doc) == [Token(0, 0, 4, KEYWORD), Token(0, 4, 4, STRING)]
    assert semantic_tokens(doc) == [0, 0, 4, KEYWORD, 0, 0, 4, 4, STRING, 0]


def test_keyword_against_comment_does_not_overlap(make_doc):
    doc = make_doc('HOP//c\nloop')
    assert semantic_tokens(doc) == [
        0, 0, 3, KEYWORD, 0,
        0, 3, 3, COMMENT, 0,
        1, 0, 4, VARIABLE, 0,
    ]


def test_labels_and_jumps(make_doc):
    doc = make_doc('LILY loop\nPLOP 5\nHOP loop\n')
    assert semantic_tokens(doc) == [
        0, 0, 4, KEYWORD, 0,
        0, 5, 4, VARIABLE, DEFINITION,
        1, 0, 4, KEYWORD, 0,
        0, 5, 1, NUMBER, 0,
        1, 0, 3, KEYWORD, 0,
        0, 4, 4, VARIABLE, 0,
    ]


def test_label_names_are_tagged_once(make_doc):
    tokens = build_tokens(make_doc('LILY a\nLEAP a'))
    assert [t for t in tokens if t.token_type == VARIABLE] == [
        Token(0, 5, 1, VARIABLE, DEFINITION),
        Token(1, 5, 1, VARIABLE, 0),
    ]


def test_operators_and_io(make_doc):
    doc = make_doc('ADD\nRIBBIT\n  NOT_EQUAL CROAK')
    assert semantic_tokens(doc) == [
        0, 0, 3, OPERATOR, 0,
        1, 0, 6, PARAMETER, 0,
        1, 2, 9, OPERATOR, 0,
        0, 10, 5, PARAMETER, 0,
    ]


def test_stack_manipulation_is_keyword(make_doc):
    assert semantic_tokens(make_doc('DUP SWAP')) == [0, 0, 3, KEYWORD, 0, 0, 4, 4, KEYWORD, 0]


def test_comments_and_strings(make_doc):
    assert semantic_tokens(make_doc('PLOP 1 // one')) == [
        0, 0, 4, KEYWORD, 0,
        0, 5, 1, NUMBER, 0,
        0, 2, 6, COMMENT, 0,
    ]
    assert semantic_tokens(make_doc('PLOP "hi"')) == [0, 0, 4, KEYWORD, 0, 0, 5, 4, STRING, 0]


def test_lengths_are_utf16(make_doc):
    assert semantic_tokens(make_doc('PLOP "😀"')) == [0, 0, 4, KEYWORD, 0, 0, 5, 4, STRING, 0]


def test_multiline_string_is_dropped(make_doc):
    assert semantic_tokens(make_doc('PLOP "a\nb"')) == [0, 0, 4, KEYWORD, 0]


def test_identifiers_outside_labels_are_variables(make_doc):
    assert build_tokens(make_doc('foo')) == [Token(0, 0, 3, VARIABLE)]


def test_missing_nodes_make_no_tokens(make_doc):
    assert build_tokens(make_doc('HOP')) == [Token(0, 0, 3, KEYWORD)]


def test_encoder_sorts_and_uses_deltas():
    tokens = [Token(2, 3, 1, NUMBER), Token(0, 4, 2, KEYWORD), Token(0, 1, 2, KEYWORD, DEFINITION)]
    assert encode_tokens(tokens) == [
        0, 1, 2, KEYWORD, DEFINITION,
        0, 3, 2, KEYWORD, 0,
        2, 3, 1, NUMBER, 0,
    ]


def test_encoder_empty():
    assert encode_tokens([]) == []
