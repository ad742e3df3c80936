"""
Serializer for `ProjectDocument`.

Output layout follows Xcode so that a written file diffs cleanly against one
Xcode saved: tab indentation, one line per field, `PBXBuildFile` and
`PBXFileReference` entries collapsed onto a single line, and every GUID
reference followed by a `/* label */` annotation when the comment map has one.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping, Tuple

from .document import ProjectDocument
from .grammar import annotate, begin_line, end_line, quote
from .objects import PBXObject
from .sections import KnownSection, SectionKind

Path = Tuple[str, ...]


def _guid_paths(entry: PBXObject) -> FrozenSet[Path]:
    return frozenset(tuple(pattern.split("/")) for pattern in entry.guid_fields)


class _EntryWriter:
    def __init__(self, entry: PBXObject, comments: Mapping[str, str]) -> None:
        self.entry = entry
        self.comments = comments
        self.guid_paths = _guid_paths(entry)

    def _scalar(self, value: str, path: Path) -> str:
        if path in self.guid_paths:
            return annotate(quote(value), self.comments.get(value))
        return quote(value)

    def inline(self, value: Any, path: Path) -> str:
        if isinstance(value, dict):
            parts = [f"{quote(k)} = {self.inline(v, path + (k,))}; " for k, v in value.items()]
            return "{" + "".join(parts) + "}"
        if isinstance(value, list):
            parts = [f"{self.inline(v, path + ('*',))}, " for v in value]
            return "(" + "".join(parts) + ")"
        return self._scalar(value, path)

    def block(self, value: Any, path: Path, indent: int) -> str:
        if isinstance(value, dict):
            pad = "\t" * (indent + 1)
            lines = ["{"]
            for k, v in value.items():
                lines.append(f"{pad}{quote(k)} = {self.block(v, path + (k,), indent + 1)};")
            lines.append("\t" * indent + "}")
            return "\n".join(lines)
        if isinstance(value, list):
            pad = "\t" * (indent + 1)
            lines = ["("]
            for v in value:
                lines.append(f"{pad}{self.block(v, path + ('*',), indent + 1)},")
            lines.append("\t" * indent + ")")
            return "\n".join(lines)
        return self._scalar(value, path)

    def render(self) -> str:
        key = annotate(self.entry.guid, self.comments.get(self.entry.guid))
        if self.entry.single_line:
            return f"\t\t{key} = {self.inline(self.entry.props, ())};"
        return f"\t\t{key} = {self.block(self.entry.props, (), 2)};"


def write_entry(entry: PBXObject, comments: Mapping[str, str]) -> str:
    return _EntryWriter(entry, comments).render()


def write_section(section: KnownSection, comments: Mapping[str, str]) -> List[str]:
    lines = [begin_line(section.name)]
    for entry in section:
        lines.append(write_entry(entry, comments))
    lines.append(end_line(section.name))
    return lines


def write_document(doc: ProjectDocument, comments: Dict[str, str]) -> str:
    """Render `doc`; sections with no entries are left out."""
    out: List[str] = list(doc.header)
    for name in doc.section_order:
        kind = SectionKind.from_name(name)
        if kind is not None:
            section = doc.section(kind)
            if len(section) == 0:
                continue
            out.append("")
            out.extend(write_section(section, comments))
            continue
        opaque = doc.opaque.get(name)
        if opaque is None or not opaque.lines:
            continue
        out.append("")
        out.extend(opaque.lines)
    out.extend(doc.footer)
    text = "\n".join(out)
    if doc.newline != "\n":
        text = text.replace("\n", doc.newline)
    if doc.final_newline:
        text += doc.newline
    return text
