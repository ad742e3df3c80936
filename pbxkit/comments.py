"""
GUID -> label table used to annotate GUIDs on output.

The table is rebuilt from the current graph right before every write and is
never consulted for identity or lookup. Rules mirror what Xcode writes:
groups, targets, configurations and file references are labelled with their
names; phases, proxies and dependencies with fixed literals; build files with
`"<file> in <phase>"`.

Labels already present in sections kept as raw text are used as a fallback,
so references into sections this package does not model keep their comments.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, cast

from .document import ProjectDocument
from .objects import (
    PBXBuildFile,
    PBXBuildPhase,
    PBXFileReference,
    PBXGroup,
    PBXNativeTarget,
    PBXProjectObject,
    PBXReferenceProxy,
    XCBuildConfiguration,
)
from .sections import SectionKind

log = logging.getLogger(__name__)

CommentMap = Dict[str, str]

CONTAINER_ITEM_PROXY_LABEL = "PBXContainerItemProxy"
SHELL_SCRIPT_LABEL = "ShellScript"
TARGET_DEPENDENCY_LABEL = "PBXTargetDependency"
PROJECT_OBJECT_LABEL = "Project object"


def _put(comments: CommentMap, guid: Optional[str], label: Optional[str]) -> None:
    if guid and label and guid not in comments:
        comments[guid] = label


def _referenced_name(doc: ProjectDocument, guid: Optional[str], fallback: CommentMap) -> Optional[str]:
    entry = doc.entry(guid)
    if isinstance(entry, PBXFileReference):
        return entry.name
    if isinstance(entry, PBXReferenceProxy):
        return entry.path
    if isinstance(entry, PBXGroup):
        # variant groups stand in for localized files
        return entry.name
    if guid is not None:
        return fallback.get(guid)
    return None


def _label_build_files(
    comments: CommentMap,
    doc: ProjectDocument,
    guids: Iterable[str],
    phase_label: str,
    fallback: CommentMap,
) -> None:
    build_files = doc.section(SectionKind.PBXBuildFile)
    for guid in guids:
        build_file = build_files.get(guid)
        if not isinstance(build_file, PBXBuildFile):
            continue
        name = _referenced_name(doc, build_file.file_ref, fallback)
        if name is None:
            log.debug("no label for build file %s in %s", guid, phase_label)
            continue
        _put(comments, guid, f"{name} in {phase_label}")


def opaque_labels(doc: ProjectDocument) -> CommentMap:
    labels: CommentMap = {}
    for section in doc.opaque.values():
        for guid, label in section.labels().items():
            labels.setdefault(guid, label)
    return labels


def build_comment_map(doc: ProjectDocument, project_label: str) -> CommentMap:
    """
    Derive annotations for every labelled GUID in `doc`.

    `project_label` is embedded verbatim in the label of the project root's
    configuration list; see `pbxkit.config` for where the default comes from.
    """
    comments: CommentMap = {}
    fallback = opaque_labels(doc)

    for group in doc.section(SectionKind.PBXGroup):
        _put(comments, group.guid, group.name)
    for proxy in doc.section(SectionKind.PBXContainerItemProxy):
        _put(comments, proxy.guid, CONTAINER_ITEM_PROXY_LABEL)
    for ref in doc.section(SectionKind.PBXReferenceProxy):
        _put(comments, ref.guid, ref.path)

    for kind in (
        SectionKind.PBXSourcesBuildPhase,
        SectionKind.PBXResourcesBuildPhase,
        SectionKind.PBXFrameworksBuildPhase,
        SectionKind.PBXCopyFilesBuildPhase,
    ):
        for phase in cast(Iterable[PBXBuildPhase], doc.section(kind)):
            _put(comments, phase.guid, phase.label)
            _label_build_files(comments, doc, phase.files, phase.label, fallback)

    for script in doc.section(SectionKind.PBXShellScriptBuildPhase):
        _put(comments, script.guid, SHELL_SCRIPT_LABEL)
    for dep in doc.section(SectionKind.PBXTargetDependency):
        _put(comments, dep.guid, TARGET_DEPENDENCY_LABEL)

    for target in cast(Iterable[PBXNativeTarget], doc.section(SectionKind.PBXNativeTarget)):
        _put(comments, target.guid, target.name)
        _put(
            comments,
            target.build_config_list,
            f'Build configuration list for PBXNativeTarget "{target.name}"',
        )

    for variant in doc.section(SectionKind.PBXVariantGroup):
        _put(comments, variant.guid, variant.name)
    for config in cast(Iterable[XCBuildConfiguration], doc.section(SectionKind.XCBuildConfiguration)):
        _put(comments, config.guid, config.name)

    for root in cast(Iterable[PBXProjectObject], doc.section(SectionKind.PBXProject)):
        _put(comments, root.guid, PROJECT_OBJECT_LABEL)
        _put(
            comments,
            root.build_config_list,
            f'Build configuration list for PBXProject "{project_label}"',
        )

    for file_ref in doc.section(SectionKind.PBXFileReference):
        _put(comments, file_ref.guid, file_ref.name)

    for guid, label in fallback.items():
        _put(comments, guid, label)
    return comments
