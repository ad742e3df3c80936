"""
Grammar primitives shared by the tokenizer, the parser and the writer.

The bare-word charset is used symmetrically: the tokenizer reads maximal runs
of it as one unquoted string, and the writer leaves a value unquoted exactly
when every character belongs to it.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, Tuple

OBJECTS_SENTINEL = "objects = {"

BEGIN_SECTION_RE = re.compile(r"^\s*/\* Begin (\w+) section \*/\s*$")
END_SECTION_RE = re.compile(r"^\s*/\* End (\w+) section \*/\s*$")

# Object identifiers as Xcode emits them; used only to recover annotations from
# sections that are kept as raw text.
GUID_RE = re.compile(r"\b([0-9A-F]{24})\b")
ANNOTATED_GUID_RE = re.compile(r"\b([0-9A-F]{24}) /\* (.+?) \*/")

_BARE_EXTRA = "._/"
_HEX4_RE = re.compile(r"[0-9A-Fa-f]{4}")

_UNESCAPE = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"'}
_ESCAPE = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def is_bare_char(ch: str) -> bool:
    return ch.isalnum() or ch in _BARE_EXTRA


def needs_quoting(value: str) -> bool:
    return value == "" or not all(is_bare_char(ch) for ch in value)


class EscapedString(str):
    """
    A decoded quoted string that remembers the token it was read from.

    Old-style plist escapes (`\\U00e9`, `\\a`) have more than one spelling, so
    values read with a backslash are written back with their original text.
    Any string produced by an edit is a plain `str` and gets quoted afresh.
    """

    source: str

    def __new__(cls, value: str, source: str) -> "EscapedString":
        obj = super().__new__(cls, value)
        obj.source = source
        return obj


def quote(value: str) -> str:
    """Render `value` for output, quoting and escaping only when required."""
    if isinstance(value, EscapedString):
        return value.source
    if not needs_quoting(value):
        return value
    return '"' + "".join(_ESCAPE.get(ch, ch) for ch in value) + '"'


def unquote(raw: str) -> str:
    """
    Decode a quoted-string token's text.

    The closing quote may be missing (the tokenizer closes dangling quotes at
    end of line), so only a quote that is not part of an escape pair is
    stripped from the end.

    `\\UXXXX` decodes to its character. Escape pairs with no known meaning are
    kept as written, backslash included. A closed string that contained any
    escape comes back as an `EscapedString` so `quote` reproduces it exactly.
    """
    body = raw[1:] if raw.startswith('"') else raw
    out = []
    escaped = closed = False
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == "\\" and i + 1 < n:
            escaped = True
            nxt = body[i + 1]
            digits = body[i + 2 : i + 6]
            if nxt == "U" and _HEX4_RE.fullmatch(digits):
                out.append(chr(int(digits, 16)))
                i += 6
                continue
            out.append(_UNESCAPE.get(nxt, ch + nxt))
            i += 2
            continue
        if ch == '"' and i == n - 1:
            closed = True
            break
        out.append(ch)
        i += 1
    value = "".join(out)
    if escaped and closed:
        return EscapedString(value, raw)
    return value


def match_begin(line: str):
    m = BEGIN_SECTION_RE.match(line)
    return m.group(1) if m else None


def match_end(line: str):
    m = END_SECTION_RE.match(line)
    return m.group(1) if m else None


def begin_line(name: str) -> str:
    return f"/* Begin {name} section */"


def end_line(name: str) -> str:
    return f"/* End {name} section */"


def annotate(guid: str, label) -> str:
    """`GUID /* label */`, or the bare GUID when there is no label."""
    if not label:
        return guid
    return f"{guid} /* {label} */"


def scan_annotations(lines: Iterable[str]) -> Iterator[Tuple[str, str]]:
    for line in lines:
        for m in ANNOTATED_GUID_RE.finditer(line):
            yield m.group(1), m.group(2)


def harvest_labels(lines: Iterable[str]) -> Dict[str, str]:
    """First label seen for each annotated GUID in raw text."""
    labels: Dict[str, str] = {}
    for guid, label in scan_annotations(lines):
        labels.setdefault(guid, label)
    return labels
