"""
pbxkit: read, edit and write Xcode `project.pbxproj` files without Xcode.

The model is round-trippable: a document that is read and written back
without edits keeps its header, footer, section order and any sections this
package does not understand; only the `/* ... */` annotations are regenerated.

Layout:
- `lexer`, `grammar`: tokens and the quoting rules shared with the writer.
- `objects`, `sections`, `document`: the typed, GUID-keyed object graph.
- `parser`, `writer`, `comments`: text in, text out, annotations.
- `project`: `PBXProject`, the surface collaborators use.
- `session`: scoped edit of a file on disk with a single flush on close.
- `capabilities`, `filetypes`: fixed lookup tables.

Preferred imports:
- `from pbxkit import PBXProject, ProjectEditSession, SourceTree, Capability`
"""

from __future__ import annotations

from .capabilities import Capability  # noqa: F401
from .comments import build_comment_map  # noqa: F401
from .config import PBXConfig, load_config  # noqa: F401
from .document import ProjectDocument  # noqa: F401
from .errors import GrammarError, IntegrityError, LexError, PBXError, PBXReferenceError  # noqa: F401
from .lexer import Token, TokenType, tokenize  # noqa: F401
from .objects import SourceTree  # noqa: F401
from .parser import parse_document  # noqa: F401
from .project import PBXProject, read_project  # noqa: F401
from .sections import SectionKind  # noqa: F401
from .session import ProjectEditSession  # noqa: F401
from .writer import write_document  # noqa: F401

__all__ = [
    "Capability",
    "GrammarError",
    "IntegrityError",
    "LexError",
    "PBXConfig",
    "PBXError",
    "PBXProject",
    "PBXReferenceError",
    "ProjectDocument",
    "ProjectEditSession",
    "SectionKind",
    "SourceTree",
    "Token",
    "TokenType",
    "build_comment_map",
    "load_config",
    "parse_document",
    "read_project",
    "tokenize",
    "write_document",
]
