"""
Sections of the object table.

Known section kinds form a closed enumeration; each kind holds entries of one
schema in a GUID-indexed, insertion-ordered `KnownSection`. Anything else the
input contains is kept as an `OpaqueSection` of raw lines and written back
untouched.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Type

from .errors import IntegrityError, PBXReferenceError
from .grammar import GUID_RE, harvest_labels
from .objects import OBJECT_CLASSES, PBXObject


class SectionKind(Enum):
    # Declaration order is the default output order (Xcode sorts by name).
    PBXBuildFile = "PBXBuildFile"
    PBXContainerItemProxy = "PBXContainerItemProxy"
    PBXCopyFilesBuildPhase = "PBXCopyFilesBuildPhase"
    PBXFileReference = "PBXFileReference"
    PBXFrameworksBuildPhase = "PBXFrameworksBuildPhase"
    PBXGroup = "PBXGroup"
    PBXNativeTarget = "PBXNativeTarget"
    PBXProject = "PBXProject"
    PBXReferenceProxy = "PBXReferenceProxy"
    PBXResourcesBuildPhase = "PBXResourcesBuildPhase"
    PBXShellScriptBuildPhase = "PBXShellScriptBuildPhase"
    PBXSourcesBuildPhase = "PBXSourcesBuildPhase"
    PBXTargetDependency = "PBXTargetDependency"
    PBXVariantGroup = "PBXVariantGroup"
    XCBuildConfiguration = "XCBuildConfiguration"
    XCConfigurationList = "XCConfigurationList"

    @classmethod
    def from_name(cls, name: str) -> Optional["SectionKind"]:
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def entry_class(self) -> Type[PBXObject]:
        return OBJECT_CLASSES[self.value]


BUILD_PHASE_KINDS = (
    SectionKind.PBXSourcesBuildPhase,
    SectionKind.PBXResourcesBuildPhase,
    SectionKind.PBXFrameworksBuildPhase,
    SectionKind.PBXCopyFilesBuildPhase,
    SectionKind.PBXShellScriptBuildPhase,
)


class KnownSection:
    """GUID-indexed entries of one schema, iterated in insertion order."""

    def __init__(self, kind: SectionKind) -> None:
        self.kind = kind
        self._entries: Dict[str, PBXObject] = {}

    @property
    def name(self) -> str:
        return self.kind.value

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PBXObject]:
        return iter(list(self._entries.values()))

    def __contains__(self, guid: object) -> bool:
        return guid in self._entries

    def guids(self) -> List[str]:
        return list(self._entries)

    def get(self, guid: Optional[str]) -> Optional[PBXObject]:
        if guid is None:
            return None
        return self._entries.get(guid)

    def add_entry(self, entry: PBXObject) -> None:
        if entry.isa != self.kind.value:
            raise IntegrityError(f"cannot add {entry.isa} entry {entry.guid} to {self.name} section")
        if entry.guid in self._entries:
            raise IntegrityError(f"duplicate GUID {entry.guid} in {self.name} section")
        self._entries[entry.guid] = entry

    def remove_entry(self, guid: str) -> PBXObject:
        try:
            return self._entries.pop(guid)
        except KeyError:
            raise PBXReferenceError(f"no {self.name} entry with GUID {guid}") from None


class OpaqueSection:
    """A section of unrecognized schema, kept as its raw lines (Begin/End included)."""

    def __init__(self, name: str, lines: Optional[List[str]] = None) -> None:
        self.name = name
        self.lines: List[str] = list(lines or [])
        self._guids: Optional[Set[str]] = None

    def append_lines(self, lines: List[str]) -> None:
        self.lines.extend(lines)
        self._guids = None

    def guids(self) -> Set[str]:
        """Every GUID-shaped token in the raw text, cached until the lines change."""
        if self._guids is None:
            found: Set[str] = set()
            for line in self.lines:
                found.update(GUID_RE.findall(line))
            self._guids = found
        return self._guids

    def labels(self) -> Dict[str, str]:
        return harvest_labels(self.lines)
