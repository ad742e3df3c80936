"""
`PBXProject`: the collaborator-facing surface of `pbxkit`.

Collaborators read a document, ask for changes through the operations here,
and write it back. They never reach into sections directly.

Design constraints:
- Lookups return `None` on a miss. Mutations that need an entry raise
  `PBXReferenceError` when it is missing.
- Every mutation validates its inputs before touching the graph, so a failed
  call leaves the project as it was. There is no undo log.
- Paths coming from callers may use backslashes; they are stored with `/`.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union, cast

from . import filetypes
from .capabilities import Capability
from .comments import CommentMap, build_comment_map
from .config import PBXConfig, load_config
from .document import ProjectDocument
from .errors import IntegrityError, PBXReferenceError
from .guid import GuidAllocator
from .objects import (
    PBXBuildFile,
    PBXBuildPhase,
    PBXContainerItemProxy,
    PBXCopyFilesBuildPhase,
    PBXFileReference,
    PBXFrameworksBuildPhase,
    PBXGroup,
    PBXNativeTarget,
    PBXObject,
    PBXProjectObject,
    PBXReferenceProxy,
    PBXResourcesBuildPhase,
    PBXShellScriptBuildPhase,
    PBXSourcesBuildPhase,
    PBXTargetDependency,
    SourceTree,
    Value,
    XCBuildConfiguration,
    XCConfigurationList,
    source_tree_value,
)
from .parser import parse_document
from .sections import BUILD_PHASE_KINDS, KnownSection, SectionKind
from .writer import write_document

log = logging.getLogger(__name__)

FRAMEWORKS_REAL_DIR = "System/Library/Frameworks/"
FRAMEWORKS_PROJECT_DIR = "Frameworks/"
PRODUCTS_GROUP = "Products"
DEFAULT_CONFIG_NAMES = ("Debug", "Release")

# proxyType values used by Xcode
PROXY_TARGET = "1"
PROXY_REFERENCE = "2"

Guids = Union[str, Iterable[str]]


def fix_slashes(path: Optional[str]) -> Optional[str]:
    if path is None:
        return None
    return path.replace("\\", "/")


def directory_of(path: str) -> str:
    pos = path.rfind("/")
    return "" if pos == -1 else path[:pos]


def filename_of(path: str) -> str:
    pos = path.rfind("/")
    return path if pos == -1 else path[pos + 1 :]


def _as_list(guids: Guids) -> List[str]:
    if isinstance(guids, str):
        return [guids]
    return list(guids)


class PBXProject:
    def __init__(self, config: Optional[PBXConfig] = None) -> None:
        self.config = config or load_config()
        self.doc = ProjectDocument()
        self._guids = GuidAllocator(self.doc, self.config.guid_max_attempts)

    @classmethod
    def from_string(cls, text: str, config: Optional[PBXConfig] = None) -> "PBXProject":
        project = cls(config)
        project.read_from_string(text)
        return project

    # -- document -------------------------------------------------------

    def read_from_string(self, text: str) -> None:
        """Replace the current document with one parsed from `text`."""
        doc = parse_document(text)
        self.doc = doc
        self._guids = GuidAllocator(doc, self.config.guid_max_attempts)
        log.debug(
            "read project: %d known entries, %d opaque sections",
            sum(len(s) for s in doc.known_sections()),
            len(doc.opaque),
        )

    def comment_map(self) -> CommentMap:
        return build_comment_map(self.doc, self.config.project_label)

    def write_to_string(self) -> str:
        return write_document(self.doc, self.comment_map())

    # -- generic entry access -------------------------------------------

    def new_guid(self) -> str:
        return self._guids.new_guid()

    def section(self, kind: SectionKind) -> KnownSection:
        return self.doc.section(kind)

    def entry(self, guid: Optional[str]) -> Optional[PBXObject]:
        return self.doc.entry(guid)

    def add_entry(self, entry: PBXObject) -> None:
        self.doc.add_entry(entry)

    def remove_entry(self, guid: str) -> PBXObject:
        """Remove one entry without touching anything that references it."""
        entry = self.doc.entry(guid)
        if entry is None:
            raise PBXReferenceError(f"no entry with GUID {guid}")
        self.doc.remove_entry(entry)
        return entry

    def _get(self, kind: SectionKind, guid: Optional[str]):
        return self.doc.section(kind).get(guid)

    def _require(self, kind: SectionKind, guid: Optional[str], what: str):
        entry = self._get(kind, guid)
        if entry is None:
            raise PBXReferenceError(f"no {what} with GUID {guid}")
        return entry

    def _target(self, guid: str) -> PBXNativeTarget:
        return self._require(SectionKind.PBXNativeTarget, guid, "target")

    def _root(self) -> PBXProjectObject:
        for entry in self.doc.section(SectionKind.PBXProject):
            return entry  # type: ignore[return-value]
        raise PBXReferenceError("document has no PBXProject entry")

    def _group(self, guid: Optional[str]) -> Optional[PBXGroup]:
        return self._get(SectionKind.PBXGroup, guid)

    def _phase_entry(self, guid: str) -> Optional[PBXBuildPhase]:
        for kind in BUILD_PHASE_KINDS:
            phase = self._get(kind, guid)
            if phase is not None:
                return phase
        return None

    # -- lookups --------------------------------------------------------

    def project_guid(self) -> Optional[str]:
        for entry in self.doc.section(SectionKind.PBXProject):
            return entry.guid
        return None

    def target_guid_by_name(self, name: str) -> Optional[str]:
        for target in self.doc.section(SectionKind.PBXNativeTarget):
            if target.name == name:
                return target.guid
        return None

    def target_names(self) -> List[str]:
        return [t.name or "" for t in self.doc.section(SectionKind.PBXNativeTarget)]

    def find_file_guid_by_real_path(
        self, path: str, source_tree: Optional[Union[SourceTree, str]] = None
    ) -> Optional[str]:
        path = fix_slashes(path)
        tree = source_tree_value(source_tree) if source_tree is not None else None
        for ref in self.doc.section(SectionKind.PBXFileReference):
            if ref.path != path:
                continue
            if tree is not None and ref.source_tree != tree:
                continue
            return ref.guid
        return None

    def find_file_guid_by_project_path(self, path: str) -> Optional[str]:
        path = fix_slashes(path)
        group = self.get_source_group(directory_of(path))
        if group is None:
            return None
        name = filename_of(path)
        for guid in group.children:
            ref = self._get(SectionKind.PBXFileReference, guid)
            if ref is not None and ref.name == name:
                return guid
        return None

    def contains_file_by_real_path(self, path: str, source_tree: Optional[Union[SourceTree, str]] = None) -> bool:
        return self.find_file_guid_by_real_path(path, source_tree) is not None

    def contains_file_by_project_path(self, path: str) -> bool:
        return self.find_file_guid_by_project_path(path) is not None

    def has_framework(self, framework: str) -> bool:
        return self.contains_file_by_real_path(FRAMEWORKS_REAL_DIR + framework)

    # -- groups ---------------------------------------------------------

    def _child_group(self, group: PBXGroup, name: str) -> Optional[PBXGroup]:
        for guid in group.children:
            child = self._group(guid)
            if child is not None and child.name == name:
                return child
        return None

    def get_source_group(self, path: Optional[str]) -> Optional[PBXGroup]:
        """
        Walk the group tree from the main group along `path`.

        An empty path names the main group itself. Returns None when any
        component is missing.
        """
        root = self.project_guid()
        if root is None:
            return None
        group = self._group(self._root().main_group)
        path = fix_slashes(path) or ""
        if group is None or not path.strip("/"):
            return group
        for part in path.strip("/").split("/"):
            group = self._child_group(group, part)
            if group is None:
                return None
        return group

    def create_source_group(self, path: Optional[str]) -> PBXGroup:
        """Like `get_source_group`, creating missing groups on the way."""
        main = self._group(self._root().main_group)
        if main is None:
            raise PBXReferenceError("project has no main group")
        path = fix_slashes(path) or ""
        group = main
        if not path.strip("/"):
            return group
        for part in path.strip("/").split("/"):
            child = self._child_group(group, part)
            if child is None:
                child = PBXGroup.create(self.new_guid(), part)
                self.doc.add_entry(child)
                group.add_child(child.guid)
                log.debug("created group %s (%s)", part, child.guid)
            group = child
        return group

    def _group_containing(self, guid: str) -> Optional[PBXGroup]:
        for kind in (SectionKind.PBXGroup, SectionKind.PBXVariantGroup):
            for group in self.doc.section(kind):
                if guid in group.children:
                    return group
        return None

    # -- files ----------------------------------------------------------

    def add_file(
        self,
        path: str,
        project_path: str,
        source_tree: Union[SourceTree, str] = SourceTree.GROUP,
    ) -> str:
        """
        Add a file reference and return its GUID.

        `path` is the real path stored in the reference; `project_path` places
        the file in the group tree (its directory part names the groups, which
        are created as needed). A file already known under either path is
        returned as is.
        """
        path = fix_slashes(path)
        project_path = fix_slashes(project_path)
        ext = filetypes.extension(path)
        if ext != filetypes.extension(project_path):
            raise IntegrityError(f"extensions of {path!r} and {project_path!r} do not match")

        guid = self.find_file_guid_by_project_path(project_path) or self.find_file_guid_by_real_path(path)
        if guid is not None:
            return guid

        if self._group(self._root().main_group) is None:
            raise PBXReferenceError("project has no main group")
        ref = PBXFileReference.create(
            self.new_guid(),
            path,
            filename_of(project_path),
            source_tree_value(source_tree),
            filetypes.type_name(ext),
        )
        group = self.create_source_group(directory_of(project_path))
        self.doc.add_entry(ref)
        group.add_child(ref.guid)
        log.debug("added file %s as %s (%s)", path, project_path, ref.guid)
        return ref.guid

    def _phase_for_extension(self, target: PBXNativeTarget, ext: str) -> Optional[PBXBuildPhase]:
        kind = filetypes.file_type(ext).kind.phase
        if kind is None:
            return None
        for guid in target.phases:
            phase = self._get(kind, guid)
            if phase is not None:
                return phase
        return None

    def _phase_holding(self, build_guid: str) -> Optional[PBXBuildPhase]:
        for kind in BUILD_PHASE_KINDS:
            for phase in self.doc.section(kind):
                if build_guid in phase.files:
                    return phase
        return None

    def _attach(self, phase: PBXBuildPhase, build_guid: str) -> None:
        owner = self._phase_holding(build_guid)
        if owner is not None:
            raise IntegrityError(f"build file {build_guid} already belongs to phase {owner.guid}")
        phase.add_build_file(build_guid)

    def _build_file_in_phase(self, phase: PBXBuildPhase, file_guid: str) -> Optional[str]:
        for guid in phase.files:
            build_file = self._get(SectionKind.PBXBuildFile, guid)
            if build_file is not None and build_file.file_ref == file_guid:
                return guid
        return None

    def _file_path(self, file_guid: str) -> str:
        ref = self._get(SectionKind.PBXFileReference, file_guid)
        if ref is None:
            ref = self._get(SectionKind.PBXReferenceProxy, file_guid)
        if ref is None:
            raise PBXReferenceError(f"no file reference with GUID {file_guid}")
        return ref.path or getattr(ref, "name", None) or ""

    def _add_build_file(
        self,
        target_guid: str,
        file_guid: str,
        weak: bool,
        compile_flags: Optional[str],
        phase: Optional[PBXBuildPhase] = None,
    ) -> Optional[str]:
        target = self._target(target_guid)
        ext = filetypes.extension(self._file_path(file_guid))
        if phase is None:
            if not filetypes.is_buildable(ext):
                log.debug("%s is not buildable; not adding %s to a phase", ext or "(no extension)", file_guid)
                return None
            phase = self._phase_for_extension(target, ext)
            if phase is None:
                kind = filetypes.file_type(ext).kind.phase
                raise PBXReferenceError(f"target {target.name} has no {kind.value if kind else 'build'} phase")
        existing = self._build_file_in_phase(phase, file_guid)
        if existing is not None:
            return existing
        build_file = PBXBuildFile.create(self.new_guid(), file_guid, weak, compile_flags)
        self.doc.add_entry(build_file)
        self._attach(phase, build_file.guid)
        log.debug("added build file %s for %s to phase %s", build_file.guid, file_guid, phase.guid)
        return build_file.guid

    def add_file_to_build(self, target_guid: str, file_guid: str) -> Optional[str]:
        """
        Put a file into the matching build phase of a target.

        Returns the build-file GUID, or None when the file type is not
        buildable (headers, for example). Adding a file twice is a no-op.
        """
        return self._add_build_file(target_guid, file_guid, False, None)

    def add_file_to_build_with_flags(self, target_guid: str, file_guid: str, compile_flags: Optional[str]) -> Optional[str]:
        return self._add_build_file(target_guid, file_guid, False, compile_flags)

    def add_file_to_build_section(self, target_guid: str, phase_guid: str, file_guid: str) -> str:
        """Add a file to an explicit phase of the target, whatever its type."""
        target = self._target(target_guid)
        if phase_guid not in target.phases:
            raise PBXReferenceError(f"phase {phase_guid} does not belong to target {target.name}")
        phase = self._phase_entry(phase_guid)
        if phase is None:
            raise PBXReferenceError(f"no build phase with GUID {phase_guid}")
        return cast(str, self._add_build_file(target_guid, file_guid, False, None, phase=phase))

    def remove_file_from_build(self, target_guid: str, file_guid: str) -> None:
        """Drop the build files for `file_guid` from every phase of one target."""
        target = self._target(target_guid)
        for phase_guid in target.phases:
            phase = self._phase_entry(phase_guid)
            if phase is None:
                continue
            for build_guid in list(phase.files):
                build_file = self._get(SectionKind.PBXBuildFile, build_guid)
                if build_file is None or build_file.file_ref != file_guid:
                    continue
                phase.remove_build_file(build_guid)
                self.doc.section(SectionKind.PBXBuildFile).remove_entry(build_guid)
                log.debug("removed build file %s from phase %s", build_guid, phase.guid)

    def remove_file(self, file_guid: str) -> None:
        """
        Remove a file reference and everything that points at it.

        Build files referring to it are deleted and unlisted from their phases;
        the reference leaves its group. Both the reference and its group must
        exist, otherwise nothing is changed.
        """
        if self._get(SectionKind.PBXFileReference, file_guid) is None:
            raise PBXReferenceError(f"no file reference with GUID {file_guid}")
        group = self._group_containing(file_guid)
        if group is None:
            raise PBXReferenceError(f"file {file_guid} is not in any group")

        build_files = self.doc.section(SectionKind.PBXBuildFile)
        doomed = [bf.guid for bf in build_files if bf.file_ref == file_guid]
        for build_guid in doomed:
            for kind in BUILD_PHASE_KINDS:
                for phase in self.doc.section(kind):
                    phase.remove_build_file(build_guid)
            build_files.remove_entry(build_guid)
        self.doc.section(SectionKind.PBXFileReference).remove_entry(file_guid)
        group.remove_child(file_guid)
        log.debug("removed file %s and %d build files", file_guid, len(doomed))

    def add_framework_to_project(self, target_guid: str, framework: str, weak: bool = False) -> Optional[str]:
        """Link a system framework (name including `.framework`) into a target."""
        target = self._target(target_guid)
        if self._phase_for_extension(target, filetypes.extension(framework)) is None:
            raise PBXReferenceError(f"target {target.name} has no phase for {framework}")
        file_guid = self.add_file(
            FRAMEWORKS_REAL_DIR + framework,
            FRAMEWORKS_PROJECT_DIR + framework,
            SourceTree.SDK,
        )
        return self._add_build_file(target_guid, file_guid, weak, None)

    # -- targets and phases ---------------------------------------------

    def build_phases(self, target_guid: str) -> List[PBXBuildPhase]:
        target = self._target(target_guid)
        return [p for p in (self._phase_entry(g) for g in target.phases) if p is not None]

    def build_phase_by_target(self, target_guid: str, kind: SectionKind) -> Optional[str]:
        for guid in self._target(target_guid).phases:
            if self._get(kind, guid) is not None:
                return guid
        return None

    def _add_phase(self, target_guid: str, phase: PBXBuildPhase) -> str:
        target = self._target(target_guid)
        self.doc.add_entry(phase)
        target.add_phase(phase.guid)
        log.debug("added %s %s to target %s", phase.isa, phase.guid, target.name)
        return phase.guid

    def add_sources_build_phase(self, target_guid: str) -> str:
        existing = self.build_phase_by_target(target_guid, SectionKind.PBXSourcesBuildPhase)
        if existing is not None:
            return existing
        return self._add_phase(target_guid, PBXSourcesBuildPhase.create(self.new_guid()))

    def add_resources_build_phase(self, target_guid: str) -> str:
        existing = self.build_phase_by_target(target_guid, SectionKind.PBXResourcesBuildPhase)
        if existing is not None:
            return existing
        return self._add_phase(target_guid, PBXResourcesBuildPhase.create(self.new_guid()))

    def add_frameworks_build_phase(self, target_guid: str) -> str:
        existing = self.build_phase_by_target(target_guid, SectionKind.PBXFrameworksBuildPhase)
        if existing is not None:
            return existing
        return self._add_phase(target_guid, PBXFrameworksBuildPhase.create(self.new_guid()))

    def add_copy_files_build_phase(self, target_guid: str, name: str, dst_path: str, subfolder_spec: str) -> str:
        """
        Add a copy-files phase, or return the one with the same name,
        destination path and subfolder spec if the target has it already.
        """
        for guid in self._target(target_guid).phases:
            phase = self._get(SectionKind.PBXCopyFilesBuildPhase, guid)
            if phase is None:
                continue
            if (phase.name, phase.get("dstPath"), phase.get("dstSubfolderSpec")) == (name, dst_path, subfolder_spec):
                return guid
        phase = PBXCopyFilesBuildPhase.create(
            self.new_guid(),
            dstPath=dst_path,
            dstSubfolderSpec=subfolder_spec,
            name=name,
        )
        return self._add_phase(target_guid, phase)

    def add_shell_script_build_phase(self, target_guid: str, name: str, shell_path: str, script: str) -> str:
        phase = PBXShellScriptBuildPhase.create(
            self.new_guid(),
            inputPaths=[],
            name=name,
            outputPaths=[],
            shellPath=shell_path,
            shellScript=script,
        )
        return self._add_phase(target_guid, phase)

    def add_target(self, name: str, ext: str, product_type: str) -> str:
        """
        Create a native target with an empty phase list and return its GUID.

        The product reference (`<name><ext>`) lands in the products group and
        the target gets one build configuration per project configuration.
        """
        root = self._root()
        products = self._group(root.product_ref_group)
        if products is None:
            products = self.create_source_group(PRODUCTS_GROUP)

        product = PBXFileReference.create_product(self.new_guid(), name + ext, filetypes.type_name(ext))
        self.doc.add_entry(product)
        products.add_child(product.guid)

        config_names = self.build_config_names() or list(DEFAULT_CONFIG_NAMES)
        config_list = XCConfigurationList.create(self.new_guid(), default_name=config_names[-1])
        for config_name in config_names:
            config = XCBuildConfiguration.create(self.new_guid(), config_name)
            config.set_property("PRODUCT_NAME", "$(TARGET_NAME)")
            self.doc.add_entry(config)
            config_list.add_build_config(config.guid)
        self.doc.add_entry(config_list)

        target = PBXNativeTarget.create(self.new_guid(), name, product.guid, product_type, config_list.guid)
        self.doc.add_entry(target)
        root.add_target(target.guid)
        log.debug("added target %s (%s)", name, target.guid)
        return target.guid

    def get_target_product_file_ref(self, target_guid: str) -> Optional[str]:
        return self._target(target_guid).product_reference

    def add_target_dependency(self, target_guid: str, dependency_guid: str) -> str:
        """Make `target_guid` depend on another target of this project."""
        target = self._target(target_guid)
        dependency = self._target(dependency_guid)
        root = self._root()
        proxy = PBXContainerItemProxy.create(
            self.new_guid(), root.guid, PROXY_TARGET, dependency.guid, dependency.name or ""
        )
        self.doc.add_entry(proxy)
        link = PBXTargetDependency.create(self.new_guid(), dependency.guid, proxy.guid)
        self.doc.add_entry(link)
        target.add_dependency(link.guid)
        return link.guid

    # -- build configurations -------------------------------------------

    def _configs_in_list(self, list_guid: Optional[str]) -> List[XCBuildConfiguration]:
        config_list = self._require(SectionKind.XCConfigurationList, list_guid, "configuration list")
        found = []
        for guid in config_list.build_configs:
            config = self._get(SectionKind.XCBuildConfiguration, guid)
            if config is not None:
                found.append(config)
        return found

    def _target_configs(self, target_guid: str) -> List[XCBuildConfiguration]:
        return self._configs_in_list(self._target(target_guid).build_config_list)

    def _config(self, config_guid: str) -> XCBuildConfiguration:
        return self._require(SectionKind.XCBuildConfiguration, config_guid, "build configuration")

    def build_config_names(self) -> List[str]:
        """Names of the project-level build configurations."""
        root_guid = self.project_guid()
        if root_guid is None:
            return []
        list_guid = self._root().build_config_list
        if self._get(SectionKind.XCConfigurationList, list_guid) is None:
            return []
        return [c.name for c in self._configs_in_list(list_guid) if c.name]

    def build_config_by_name(self, target_guid: str, name: str) -> Optional[str]:
        for config in self._target_configs(target_guid):
            if config.name == name:
                return config.guid
        return None

    def _add_config_to_list(self, list_guid: Optional[str], name: str) -> str:
        config_list = self._require(SectionKind.XCConfigurationList, list_guid, "configuration list")
        for config in self._configs_in_list(list_guid):
            if config.name == name:
                return config.guid
        config = XCBuildConfiguration.create(self.new_guid(), name)
        self.doc.add_entry(config)
        config_list.add_build_config(config.guid)
        return config.guid

    def add_build_config_for_target(self, target_guid: str, name: str) -> str:
        return self._add_config_to_list(self._target(target_guid).build_config_list, name)

    def add_build_config(self, name: str) -> str:
        """Add a configuration to the project and to every target; returns the project-level GUID."""
        root = self._root()
        list_guids = [root.build_config_list] + [self._target(guid).build_config_list for guid in root.targets]
        for list_guid in list_guids:
            self._require(SectionKind.XCConfigurationList, list_guid, "configuration list")
        guid = self._add_config_to_list(list_guids[0], name)
        for list_guid in list_guids[1:]:
            self._add_config_to_list(list_guid, name)
        return guid

    def _configs_for_targets(self, target_guids: Guids) -> List[XCBuildConfiguration]:
        configs: List[XCBuildConfiguration] = []
        for guid in _as_list(target_guids):
            configs.extend(self._target_configs(guid))
        return configs

    def _configs_by_guid(self, config_guids: Guids) -> List[XCBuildConfiguration]:
        return [self._config(guid) for guid in _as_list(config_guids)]

    def add_build_property(self, target_guids: Guids, name: str, value: str) -> None:
        """Add `value` to a (possibly multi-valued) setting in every configuration of the targets."""
        for config in self._configs_for_targets(target_guids):
            config.add_property(name, value)

    def add_build_property_for_config(self, config_guids: Guids, name: str, value: str) -> None:
        for config in self._configs_by_guid(config_guids):
            config.add_property(name, value)

    def set_build_property(self, target_guids: Guids, name: str, value: str) -> None:
        for config in self._configs_for_targets(target_guids):
            config.set_property(name, value)

    def set_build_property_for_config(self, config_guids: Guids, name: str, value: str) -> None:
        for config in self._configs_by_guid(config_guids):
            config.set_property(name, value)

    def update_build_property(
        self,
        target_guids: Guids,
        name: str,
        add_values: Optional[Sequence[str]] = None,
        remove_values: Optional[Sequence[str]] = None,
    ) -> None:
        for config in self._configs_for_targets(target_guids):
            config.update_properties(name, add_values, remove_values)

    def update_build_property_for_config(
        self,
        config_guids: Guids,
        name: str,
        add_values: Optional[Sequence[str]] = None,
        remove_values: Optional[Sequence[str]] = None,
    ) -> None:
        for config in self._configs_by_guid(config_guids):
            config.update_properties(name, add_values, remove_values)

    def get_build_property_for_config(self, config_guid: str, name: str) -> Optional[Value]:
        return self._config(config_guid).get_property(name)

    # -- external projects ----------------------------------------------

    def add_external_project_dependency(
        self,
        path: str,
        project_path: str,
        source_tree: Union[SourceTree, str] = SourceTree.GROUP,
    ) -> str:
        """
        Reference another `.xcodeproj` and return the GUID of its file reference.

        Its products get a group of their own, outside the group tree, the way
        Xcode lays out project references.
        """
        path = fix_slashes(path)
        project_path = fix_slashes(project_path)
        root = self._root()
        if self._group(root.main_group) is None:
            raise PBXReferenceError("project has no main group")

        ref = PBXFileReference.create(
            self.new_guid(),
            path,
            filename_of(project_path),
            source_tree_value(source_tree),
            filetypes.type_name(filetypes.extension(path)),
        )
        product_group = PBXGroup.create(self.new_guid(), PRODUCTS_GROUP)
        parent = self.create_source_group(directory_of(project_path))
        self.doc.add_entry(ref)
        self.doc.add_entry(product_group)
        parent.add_child(ref.guid)
        root.add_project_reference(product_group.guid, ref.guid)
        log.debug("added external project %s (%s)", path, ref.guid)
        return ref.guid

    def add_external_library_dependency(
        self,
        target_guid: str,
        filename: str,
        remote_file_guid: str,
        project_path: str,
        remote_info: str,
    ) -> str:
        """
        Link a product of an external project into a target.

        `project_path` must be the `path` given to
        `add_external_project_dependency`, and `remote_file_guid` the GUID of
        the product's file reference inside that project.
        """
        target = self._target(target_guid)
        filename = fix_slashes(filename)
        project_path = fix_slashes(project_path)

        project_guid = self.find_file_guid_by_real_path(project_path)
        if project_guid is None:
            raise PBXReferenceError(f"no external project at {project_path!r}")
        group_guid = None
        for ref in self._root().project_references:
            if ref.get("ProjectRef") == project_guid:
                group_guid = ref.get("ProductGroup")
                break
        product_group = self._group(group_guid) if isinstance(group_guid, str) else None
        if product_group is None:
            raise PBXReferenceError(f"project {project_path!r} has no products group in projectReferences")

        ext = filetypes.extension(filename)
        if not filetypes.is_buildable(ext):
            raise IntegrityError(f"{filename!r} is not a buildable product")
        phase = self._phase_for_extension(target, ext)
        if phase is None:
            raise PBXReferenceError(f"target {target.name} has no phase for {ext} files")

        proxy = PBXContainerItemProxy.create(self.new_guid(), project_guid, PROXY_REFERENCE, remote_file_guid, remote_info)
        self.doc.add_entry(proxy)
        lib_ref = PBXReferenceProxy.create(
            self.new_guid(), filename, filetypes.type_name(ext), proxy.guid, SourceTree.BUILD.value
        )
        self.doc.add_entry(lib_ref)
        build_file = PBXBuildFile.create(self.new_guid(), lib_ref.guid)
        self.doc.add_entry(build_file)
        self._attach(phase, build_file.guid)
        product_group.add_child(lib_ref.guid)
        return lib_ref.guid

    # -- capabilities ---------------------------------------------------

    def enable_capability(
        self,
        target_guid: str,
        capability: Capability,
        entitlements_path: Optional[str] = None,
        add_optional_framework: bool = False,
    ) -> None:
        """
        Switch a capability on for one target.

        Records it under the target's `SystemCapabilities`, links its framework
        and, when an entitlements file is given, references the file and points
        `CODE_SIGN_ENTITLEMENTS` at it. Writing the entitlements themselves is
        up to the caller.
        """
        target = self._target(target_guid)
        root = self._root()
        self._target_configs(target_guid)
        framework = capability.framework_to_add(add_optional_framework)
        if framework is not None and self._phase_for_extension(target, ".framework") is None:
            raise PBXReferenceError(f"target {target.name} has no frameworks phase for {framework}")

        if entitlements_path is not None:
            entitlements_path = fix_slashes(entitlements_path)
            self.add_file(entitlements_path, entitlements_path)
            self.set_build_property(target_guid, "CODE_SIGN_ENTITLEMENTS", entitlements_path)
        elif capability.requires_entitlements:
            log.debug("%s needs entitlements; none given", capability.name)

        if framework is not None:
            self.add_framework_to_project(target_guid, framework, False)

        attrs = root.target_attributes(target_guid)
        system = attrs.setdefault("SystemCapabilities", {})
        system[capability.identifier] = {"enabled": "1"}

    def enabled_capabilities(self, target_guid: str) -> List[Capability]:
        attrs = self._root().attributes.get("TargetAttributes")
        if not isinstance(attrs, dict):
            return []
        system = (attrs.get(target_guid) or {}).get("SystemCapabilities") or {}
        found = []
        for identifier, state in system.items():
            capability = Capability.from_identifier(identifier)
            if capability is not None and isinstance(state, dict) and state.get("enabled") == "1":
                found.append(capability)
        return found

    def set_team_id(self, target_guid: str, team_id: str) -> None:
        self._target(target_guid)
        self._root().target_attributes(target_guid)["DevelopmentTeam"] = team_id
        self.set_build_property(target_guid, "DEVELOPMENT_TEAM", team_id)

    # -- summaries ------------------------------------------------------

    def summary(self) -> Dict[str, object]:
        """Plain-data overview: entry counts per section, opaque sections, targets and their phases."""
        targets = []
        for target in self.doc.section(SectionKind.PBXNativeTarget):
            phases = []
            for phase in self.build_phases(target.guid):
                phases.append({"guid": phase.guid, "isa": phase.isa, "label": phase.label, "files": len(phase.files)})
            targets.append({"guid": target.guid, "name": target.name, "phases": phases})
        return {
            "sections": {s.name: len(s) for s in self.doc.known_sections() if len(s)},
            "opaque": {name: len(s.lines) for name, s in self.doc.opaque.items()},
            "section_order": list(self.doc.section_order),
            "targets": targets,
        }


def read_project(text: str, config: Optional[PBXConfig] = None) -> PBXProject:
    return PBXProject.from_string(text, config)
