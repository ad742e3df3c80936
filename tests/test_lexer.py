import pytest

from pbxkit.errors import LexError
from pbxkit.lexer import TokenType, tokenize


def _kinds(text):
    return [t.kind for t in tokenize(text)]


def test_bare_string_is_one_token():
    text = "ab_c.d/e"
    tokens = tokenize(text)
    assert [t.kind for t in tokens] == [TokenType.STRING, TokenType.EOF]
    assert tokens[0].text(text) == "ab_c.d/e"
    assert (tokens[0].begin, tokens[0].end) == (0, len(text))


def test_quoted_string_includes_delimiters():
    text = '"a b"'
    tokens = tokenize(text)
    assert tokens[0].kind is TokenType.QUOTED_STRING
    assert tokens[0].text(text) == '"a b"'


def test_dangling_quote_closes_at_newline():
    text = '"a b\nnext'
    tokens = tokenize(text)
    assert [t.kind for t in tokens] == [TokenType.QUOTED_STRING, TokenType.STRING, TokenType.EOF]
    assert tokens[0].text(text) == '"a b'
    assert tokens[1].line == 1


def test_escaped_quote_does_not_terminate():
    text = r'"say \"hi\"" x'
    tokens = tokenize(text)
    assert tokens[0].text(text) == r'"say \"hi\""'
    assert tokens[1].text(text) == "x"


def test_escaped_backslash_before_closing_quote():
    text = r'"C:\\" x'
    tokens = tokenize(text)
    assert tokens[0].text(text) == r'"C:\\"'
    assert tokens[1].kind is TokenType.STRING


def test_operators():
    assert _kinds("; , = ( ) { }")[:-1] == [
        TokenType.SEMICOLON,
        TokenType.COMMA,
        TokenType.EQ,
        TokenType.LPAREN,
        TokenType.RPAREN,
        TokenType.LBRACE,
        TokenType.RBRACE,
    ]


def test_comments_and_line_numbers():
    text = "a /* one\ntwo */ b // tail\nc"
    tokens = tokenize(text)
    assert [t.kind for t in tokens] == [
        TokenType.STRING,
        TokenType.COMMENT,
        TokenType.STRING,
        TokenType.COMMENT,
        TokenType.STRING,
        TokenType.EOF,
    ]
    assert [t.line for t in tokens[:5]] == [0, 0, 1, 1, 2]
    assert tokens[3].text(text) == "// tail"


def test_slash_alone_is_a_bare_string():
    text = "/usr/bin"
    tokens = tokenize(text)
    assert tokens[0].kind is TokenType.STRING
    assert tokens[0].text(text) == "/usr/bin"


def test_invalid_character_reports_line():
    with pytest.raises(LexError) as excinfo:
        tokenize("a = b;\nc = $;")
    assert excinfo.value.line == 1


def test_empty_input_is_just_eof():
    assert _kinds("") == [TokenType.EOF]
    assert _kinds("  \n\t ") == [TokenType.EOF]


def test_unterminated_quote_at_end_of_input():
    text = '"abc'
    tokens = tokenize(text)
    assert tokens[0].kind is TokenType.QUOTED_STRING
    assert tokens[0].text(text) == '"abc'
    assert tokens[-1].kind is TokenType.EOF
