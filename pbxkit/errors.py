"""
Error taxonomy for `pbxkit`.

Read failures (`LexError`, `GrammarError`) abort the whole read: no partial
project is ever returned. Lookups signal a miss by returning `None`; the
mutating operations that cannot proceed without an entry raise
`PBXReferenceError` instead. `IntegrityError` guards the graph invariants
(unique GUIDs, one phase per build file, matching file types).
"""

from __future__ import annotations

from typing import Optional


class PBXError(Exception):
    """Base pbxkit error."""


class LexError(PBXError):
    """Invalid character in the input text."""

    def __init__(self, line: int, detail: Optional[str] = None) -> None:
        self.line = line
        self.detail = detail or "invalid character"
        super().__init__(f"{self.detail} at line {line}")


class GrammarError(PBXError):
    """Malformed section or entry syntax."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class PBXReferenceError(PBXError):
    """A mutation needed an entry (by GUID, name or path) that does not exist."""


class IntegrityError(PBXError):
    """An operation would break a project-wide invariant."""
