"""
In-memory project document: verbatim header and footer, the section registry
and the section output order.

GUID uniqueness is enforced here, across all sections, because a GUID that is
unique within its own section can still collide with one in another section.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set

from .errors import IntegrityError
from .objects import PBXObject
from .sections import KnownSection, OpaqueSection, SectionKind


class ProjectDocument:
    def __init__(self) -> None:
        self.header: List[str] = []
        self.footer: List[str] = []
        # Line ending of the input and whether its last line was terminated.
        self.newline = "\n"
        self.final_newline = True
        self.sections: Dict[SectionKind, KnownSection] = {kind: KnownSection(kind) for kind in SectionKind}
        self.opaque: Dict[str, OpaqueSection] = {}
        self.section_order: List[str] = [kind.value for kind in SectionKind]

    def section(self, kind: SectionKind) -> KnownSection:
        return self.sections[kind]

    def known_sections(self) -> Iterator[KnownSection]:
        return iter(self.sections.values())

    def entry(self, guid: Optional[str]) -> Optional[PBXObject]:
        if guid is None:
            return None
        for section in self.sections.values():
            found = section.get(guid)
            if found is not None:
                return found
        return None

    def guid_in_use(self, guid: str) -> bool:
        if any(guid in section for section in self.sections.values()):
            return True
        return any(guid in section.guids() for section in self.opaque.values())

    def all_guids(self) -> Set[str]:
        found: Set[str] = set()
        for section in self.sections.values():
            found.update(section.guids())
        for opaque in self.opaque.values():
            found.update(opaque.guids())
        return found

    def add_entry(self, entry: PBXObject) -> None:
        kind = SectionKind.from_name(entry.isa)
        if kind is None:
            raise IntegrityError(f"no section holds entries of type {entry.isa}")
        if self.entry(entry.guid) is not None:
            raise IntegrityError(f"duplicate GUID {entry.guid}")
        self.sections[kind].add_entry(entry)

    def remove_entry(self, entry: PBXObject) -> None:
        kind = SectionKind.from_name(entry.isa)
        if kind is None:
            raise IntegrityError(f"no section holds entries of type {entry.isa}")
        self.sections[kind].remove_entry(entry.guid)

    def add_opaque(self, name: str, lines: List[str], after: Optional[str]) -> OpaqueSection:
        """
        Register raw lines for an unrecognized section.

        A repeated name extends the existing section in place. A new name goes
        into the output order right after `after` (front when `after` is None).
        """
        existing = self.opaque.get(name)
        if existing is not None:
            existing.append_lines(lines)
            return existing
        section = OpaqueSection(name, lines)
        self.opaque[name] = section
        if name not in self.section_order:
            pos = 0
            if after is not None and after in self.section_order:
                pos = self.section_order.index(after) + 1
            self.section_order.insert(pos, name)
        return section
