"""
Tokenizer for the pbxproj grammar.

Design constraints:
- Flat token stream; the parser owns all structure.
- Tokens carry offsets into the source rather than copies of the text. They
  live for one parse pass and are discarded afterwards.
- A dangling quote closes itself at end of line. Anything outside the grammar
  is a hard `LexError` with the 0-based line; there is no resynchronization.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import LexError
from .grammar import is_bare_char

# Lookahead reads at most one character past the current position.
_PADDING = "    "


class TokenType(Enum):
    EOF = "eof"
    INVALID = "invalid"
    STRING = "string"
    QUOTED_STRING = "quoted_string"
    COMMENT = "comment"

    SEMICOLON = ";"
    COMMA = ","
    EQ = "="
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"


_OPERATORS = {
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    "=": TokenType.EQ,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}


@dataclass(frozen=True)
class Token:
    """One lexical token; `begin`/`end` are past-the-end offsets into the source."""

    kind: TokenType
    line: int
    begin: int
    end: int

    def text(self, source: str) -> str:
        return source[self.begin : self.end]


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text + _PADDING
        self.length = len(text)
        self.pos = 0
        self.line = 0

    def _newline(self, ch: str) -> None:
        if ch == "\n":
            self.line += 1

    def scan_all(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            tok = self.scan_one()
            tokens.append(tok)
            if tok.kind is TokenType.EOF:
                return tokens

    def scan_one(self) -> Token:
        text = self.text
        while self.pos < self.length and text[self.pos].isspace():
            self._newline(text[self.pos])
            self.pos += 1

        if self.pos >= self.length:
            return Token(TokenType.EOF, self.line, self.length, self.length)

        ch = text[self.pos]
        ch2 = text[self.pos + 1]
        if ch == '"':
            return self._quoted_string()
        if ch == "/" and ch2 == "*":
            return self._block_comment()
        if ch == "/" and ch2 == "/":
            return self._line_comment()
        if is_bare_char(ch):
            return self._bare_string()
        kind = _OPERATORS.get(ch)
        if kind is not None:
            begin = self.pos
            self.pos += 1
            return Token(kind, self.line, begin, self.pos)
        raise LexError(self.line, f"invalid character {ch!r}")

    def _bare_string(self) -> Token:
        begin = self.pos
        while self.pos < self.length and is_bare_char(self.text[self.pos]):
            self.pos += 1
        return Token(TokenType.STRING, self.line, begin, self.pos)

    def _quoted_string(self) -> Token:
        text = self.text
        begin = self.pos
        line = self.line
        self.pos += 1
        while self.pos < self.length:
            ch = text[self.pos]
            # Escape pairs never terminate the string, except an escaped newline.
            if ch == "\\" and text[self.pos + 1] != "\n":
                self.pos += 2
                continue
            if ch == '"':
                self.pos += 1
                return Token(TokenType.QUOTED_STRING, line, begin, self.pos)
            if ch == "\n":
                end = self.pos
                self._newline(ch)
                self.pos += 1
                return Token(TokenType.QUOTED_STRING, line, begin, end)
            self.pos += 1
        self.pos = self.length
        return Token(TokenType.QUOTED_STRING, line, begin, self.length)

    def _block_comment(self) -> Token:
        text = self.text
        begin = self.pos
        line = self.line
        self.pos += 2
        while self.pos < self.length:
            if text[self.pos] == "*" and text[self.pos + 1] == "/":
                self.pos += 2
                return Token(TokenType.COMMENT, line, begin, self.pos)
            self._newline(text[self.pos])
            self.pos += 1
        return Token(TokenType.COMMENT, line, begin, self.length)

    def _line_comment(self) -> Token:
        text = self.text
        begin = self.pos
        line = self.line
        self.pos += 2
        while self.pos < self.length and text[self.pos] != "\n":
            self.pos += 1
        end = self.pos
        if self.pos < self.length:
            self._newline(text[self.pos])
            self.pos += 1
        return Token(TokenType.COMMENT, line, begin, end)


def tokenize(text: str) -> List[Token]:
    """Tokenize `text` into a list terminated by an `EOF` token."""
    return _Scanner(text).scan_all()
