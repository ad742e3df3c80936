"""
Line-level reader for pbxproj documents.

Design constraints:
- Header and footer are captured verbatim as lines; only the object table in
  between is interpreted.
- Each `/* Begin X section */ ... /* End X section */` block is handled on its
  own. Known kinds are tokenized and parsed into entries; unknown kinds are
  kept as raw text in their original position.
- Failures are loud. A malformed document raises `GrammarError` (or
  `LexError`) with a 0-based document line and nothing partial is returned.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .document import ProjectDocument
from .errors import GrammarError, IntegrityError, LexError
from .grammar import OBJECTS_SENTINEL, match_begin, match_end, unquote
from .lexer import Token, TokenType, tokenize
from .objects import Value
from .sections import SectionKind

log = logging.getLogger(__name__)


class _EntryReader:
    """Recursive-descent reader over the tokens of one section body."""

    def __init__(self, source: str, tokens: Sequence[Token], line_offset: int) -> None:
        self.source = source
        # Comments carry no structure; drop them up front.
        self.tokens = [t for t in tokens if t.kind is not TokenType.COMMENT]
        self.idx = 0
        self.line_offset = line_offset

    def _peek(self) -> Token:
        return self.tokens[self.idx]

    def _next(self) -> Token:
        tok = self.tokens[self.idx]
        if tok.kind is not TokenType.EOF:
            self.idx += 1
        return tok

    def _fail(self, message: str, tok: Token) -> GrammarError:
        return GrammarError(message, line=tok.line + self.line_offset)

    def _expect(self, kind: TokenType) -> Token:
        tok = self._next()
        if tok.kind is not kind:
            raise self._fail(f"expected {kind.value!r}, got {tok.text(self.source)!r}", tok)
        return tok

    def _string(self) -> str:
        tok = self._next()
        if tok.kind is TokenType.STRING:
            return tok.text(self.source)
        if tok.kind is TokenType.QUOTED_STRING:
            return unquote(tok.text(self.source))
        raise self._fail(f"expected a string, got {tok.text(self.source)!r}", tok)

    def _value(self) -> Value:
        tok = self._peek()
        if tok.kind is TokenType.LBRACE:
            return self._dict()
        if tok.kind is TokenType.LPAREN:
            return self._list()
        return self._string()

    def _dict(self) -> Dict[str, Value]:
        self._expect(TokenType.LBRACE)
        out: Dict[str, Value] = {}
        while self._peek().kind is not TokenType.RBRACE:
            if self._peek().kind is TokenType.EOF:
                raise self._fail("unterminated dictionary", self._peek())
            key = self._string()
            self._expect(TokenType.EQ)
            out[key] = self._value()
            self._expect(TokenType.SEMICOLON)
        self._next()
        return out

    def _list(self) -> List[Value]:
        self._expect(TokenType.LPAREN)
        out: List[Value] = []
        while self._peek().kind is not TokenType.RPAREN:
            if self._peek().kind is TokenType.EOF:
                raise self._fail("unterminated list", self._peek())
            out.append(self._value())
            if self._peek().kind is TokenType.COMMA:
                self._next()
            elif self._peek().kind is not TokenType.RPAREN:
                tok = self._peek()
                raise self._fail(f"expected ',' or ')', got {tok.text(self.source)!r}", tok)
        self._next()
        return out

    def entries(self) -> List[Tuple[str, Dict[str, Value], int]]:
        """Read `GUID = { ... };` items until end of input."""
        found: List[Tuple[str, Dict[str, Value], int]] = []
        while self._peek().kind is not TokenType.EOF:
            start = self._peek()
            guid = self._string()
            self._expect(TokenType.EQ)
            if self._peek().kind is not TokenType.LBRACE:
                raise self._fail(f"entry {guid} is not a dictionary", self._peek())
            props = self._dict()
            self._expect(TokenType.SEMICOLON)
            found.append((guid, props, start.line + self.line_offset))
        return found


def _read_section_lines(lines: Sequence[str], start: int, name: str) -> int:
    """Return the index of the `End` line matching the section opened at `start`."""
    for i in range(start + 1, len(lines)):
        end_name = match_end(lines[i])
        if end_name is None:
            continue
        if end_name != name:
            raise GrammarError(f"section {name} closed as {end_name}", line=i)
        return i
    raise GrammarError(f"section {name} is never closed", line=start)


def _parse_known(doc: ProjectDocument, kind: SectionKind, body: Sequence[str], first_line: int) -> int:
    source = "\n".join(body)
    try:
        tokens = tokenize(source)
    except LexError as exc:
        raise LexError(exc.line + first_line, exc.detail) from exc
    reader = _EntryReader(source, tokens, first_line)
    cls = kind.entry_class
    count = 0
    for guid, props, line in reader.entries():
        isa = props.get("isa")
        if isa != kind.value:
            raise GrammarError(f"entry {guid} has isa {isa!r} inside {kind.value} section", line=line)
        try:
            doc.add_entry(cls(guid, props))
        except IntegrityError as exc:
            raise GrammarError(str(exc), line=line) from exc
        count += 1
    return count


def parse_document(text: str) -> ProjectDocument:
    """Parse a full pbxproj document into a `ProjectDocument`."""
    doc = ProjectDocument()
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    else:
        doc.final_newline = False
    if lines and lines[0].endswith("\r"):
        doc.newline = "\r\n"
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]

    idx = 0
    n = len(lines)
    while idx < n:
        doc.header.append(lines[idx])
        idx += 1
        if lines[idx - 1].strip() == OBJECTS_SENTINEL:
            break
    else:
        raise GrammarError(f"missing {OBJECTS_SENTINEL!r} line")

    prev_name: Optional[str] = None
    while True:
        while idx < n and not lines[idx].strip():
            idx += 1
        if idx >= n:
            raise GrammarError("document ends inside the object table", line=n)
        name = match_begin(lines[idx])
        if name is None:
            break
        end = _read_section_lines(lines, idx, name)
        kind = SectionKind.from_name(name)
        if kind is not None:
            count = _parse_known(doc, kind, lines[idx + 1 : end], idx + 1)
            log.debug("parsed %d %s entries", count, name)
        else:
            doc.add_opaque(name, lines[idx : end + 1], prev_name)
            log.debug("kept unknown section %s (%d lines)", name, end + 1 - idx)
        prev_name = name
        idx = end + 1

    doc.footer.extend(lines[idx:])
    return doc
