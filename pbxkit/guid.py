"""GUID allocation for new entries."""

from __future__ import annotations

import logging
import uuid
from typing import Set

from .document import ProjectDocument
from .errors import IntegrityError

log = logging.getLogger(__name__)

GUID_LENGTH = 24


def random_guid() -> str:
    """24 upper-case hex digits, the width Xcode uses for object identifiers."""
    return uuid.uuid4().hex[:GUID_LENGTH].upper()


class GuidAllocator:
    """
    Hands out GUIDs that collide with nothing in the document.

    Checked against every known entry, every GUID-shaped token in opaque
    sections, and every GUID this allocator already issued (callers may hold
    a GUID for a while before inserting the entry that uses it).
    """

    def __init__(self, doc: ProjectDocument, max_attempts: int = 1000) -> None:
        self.doc = doc
        self.max_attempts = max_attempts
        self.issued: Set[str] = set()

    def new_guid(self) -> str:
        for _ in range(self.max_attempts):
            guid = random_guid()
            if guid in self.issued or self.doc.guid_in_use(guid):
                log.debug("GUID collision on %s; retrying", guid)
                continue
            self.issued.add(guid)
            return guid
        raise IntegrityError(f"could not allocate a free GUID after {self.max_attempts} attempts")
