"""
Typed entries of a pbxproj object table.

Every entry keeps its fields as an ordered mapping of plain values (`str`,
`list`, `dict`) exactly as parsed, so fields this module does not name still
survive a read/write cycle. Each class adds:
- `isa`: the schema name, also the name of the section that owns it.
- `single_line`: whether Xcode writes the entry on one line.
- `guid_fields`: paths (`key`, `key/*`, `key/*/subkey`) whose values are GUID
  references and get comment annotations on output.

References are weak: they hold GUID strings and nothing else. Resolving them is
the project's job, and a miss is a normal outcome.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, Union

Value = Union[str, List[Any], Dict[str, Any]]

BUILD_ACTION_MASK = "2147483647"


class PBXObject:
    isa: ClassVar[str] = ""
    single_line: ClassVar[bool] = False
    guid_fields: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, guid: str, props: Optional[Dict[str, Value]] = None) -> None:
        self.guid = guid
        if props is None:
            props = {"isa": self.isa}
        self.props: Dict[str, Value] = props

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.guid!r})"

    @classmethod
    def new(cls, guid: str, **fields: Value):
        """Create an entry with `isa` first and the remaining fields sorted, as Xcode writes them."""
        props: Dict[str, Value] = {"isa": cls.isa}
        for key in sorted(fields):
            if fields[key] is not None:
                props[key] = fields[key]
        return cls(guid, props)

    def get(self, key: str, default: Optional[Value] = None) -> Optional[Value]:
        return self.props.get(key, default)

    def set(self, key: str, value: Optional[Value]) -> None:
        if value is None:
            self.props.pop(key, None)
        else:
            self.props[key] = value

    def _str(self, key: str) -> Optional[str]:
        value = self.props.get(key)
        return value if isinstance(value, str) else None

    def _guid_list(self, key: str) -> List[str]:
        """The list stored under `key`; an absent field reads as empty and stays absent."""
        value = self.props.get(key)
        return value if isinstance(value, list) else []

    def _ensure_list(self, key: str) -> List[Any]:
        """The list stored under `key`, created for callers about to add to it."""
        value = self.props.get(key)
        if not isinstance(value, list):
            value = []
            self.props[key] = value
        return value

    def _ensure_dict(self, key: str) -> Dict[str, Any]:
        value = self.props.get(key)
        if not isinstance(value, dict):
            value = {}
            self.props[key] = value
        return value

    def _discard(self, key: str, guid: str) -> None:
        value = self.props.get(key)
        if isinstance(value, list):
            while guid in value:
                value.remove(guid)

    def referenced_guids(self) -> List[str]:
        """Every GUID this entry points at through its schema reference fields."""
        found: List[str] = []
        for pattern in self.guid_fields:
            _collect(self.props, pattern.split("/"), found)
        return found


def _collect(value: Any, parts: List[str], out: List[str]) -> None:
    if not parts:
        if isinstance(value, str):
            out.append(value)
        return
    head, rest = parts[0], parts[1:]
    if head == "*":
        if isinstance(value, list):
            for item in value:
                _collect(item, rest, out)
        return
    if isinstance(value, dict) and head in value:
        _collect(value[head], rest, out)


class _Named(PBXObject):
    @property
    def name(self) -> Optional[str]:
        return self._str("name")


class _PathNamed(_Named):
    """Entries whose display name falls back to their path, like Xcode's."""

    @property
    def name(self) -> Optional[str]:
        return self._str("name") or self._str("path")

    @property
    def path(self) -> Optional[str]:
        return self._str("path")

    @property
    def source_tree(self) -> Optional[str]:
        return self._str("sourceTree")


class PBXBuildFile(PBXObject):
    isa = "PBXBuildFile"
    single_line = True
    guid_fields = ("fileRef", "productRef")

    @classmethod
    def create(cls, guid: str, file_ref: str, weak: bool = False, compile_flags: Optional[str] = None) -> "PBXBuildFile":
        settings: Optional[Dict[str, Value]] = None
        if weak or compile_flags:
            settings = {}
            if weak:
                settings["ATTRIBUTES"] = ["Weak"]
            if compile_flags:
                settings["COMPILER_FLAGS"] = compile_flags
        return cls.new(guid, fileRef=file_ref, settings=settings)

    @property
    def file_ref(self) -> Optional[str]:
        return self._str("fileRef") or self._str("productRef")

    @property
    def settings(self) -> Optional[Dict[str, Value]]:
        value = self.props.get("settings")
        return value if isinstance(value, dict) else None

    @property
    def weak(self) -> bool:
        attrs = (self.settings or {}).get("ATTRIBUTES")
        return isinstance(attrs, list) and "Weak" in attrs

    @property
    def compile_flags(self) -> Optional[str]:
        flags = (self.settings or {}).get("COMPILER_FLAGS")
        return flags if isinstance(flags, str) else None


class PBXFileReference(_PathNamed):
    isa = "PBXFileReference"
    single_line = True

    @classmethod
    def create(cls, guid: str, path: str, name: str, source_tree: str, file_type: str) -> "PBXFileReference":
        return cls.new(
            guid,
            lastKnownFileType=file_type,
            name=name if name != path else None,
            path=path,
            sourceTree=source_tree,
        )

    @classmethod
    def create_product(cls, guid: str, path: str, file_type: str) -> "PBXFileReference":
        return cls.new(
            guid,
            explicitFileType=file_type,
            includeInIndex="0",
            path=path,
            sourceTree="BUILT_PRODUCTS_DIR",
        )

    @property
    def file_type(self) -> Optional[str]:
        return self._str("lastKnownFileType") or self._str("explicitFileType")


class PBXGroup(_PathNamed):
    isa = "PBXGroup"
    guid_fields = ("children/*",)

    @classmethod
    def create(cls, guid: str, name: str, path: Optional[str] = None, source_tree: str = "<group>"):
        return cls.new(guid, children=[], name=name, path=path, sourceTree=source_tree)

    @property
    def children(self) -> List[str]:
        return self._guid_list("children")

    def add_child(self, guid: str) -> None:
        self._ensure_list("children").append(guid)

    def remove_child(self, guid: str) -> None:
        self._discard("children", guid)


class PBXVariantGroup(PBXGroup):
    isa = "PBXVariantGroup"


class PBXContainerItemProxy(PBXObject):
    isa = "PBXContainerItemProxy"
    guid_fields = ("containerPortal",)

    @classmethod
    def create(cls, guid: str, container_portal: str, proxy_type: str, remote_global_id: str, remote_info: str):
        return cls.new(
            guid,
            containerPortal=container_portal,
            proxyType=proxy_type,
            remoteGlobalIDString=remote_global_id,
            remoteInfo=remote_info,
        )

    @property
    def container_portal(self) -> Optional[str]:
        return self._str("containerPortal")

    @property
    def remote_global_id(self) -> Optional[str]:
        return self._str("remoteGlobalIDString")


class PBXReferenceProxy(PBXObject):
    isa = "PBXReferenceProxy"
    guid_fields = ("remoteRef",)

    @classmethod
    def create(cls, guid: str, path: str, file_type: str, remote_ref: str, source_tree: str):
        return cls.new(guid, fileType=file_type, path=path, remoteRef=remote_ref, sourceTree=source_tree)

    @property
    def path(self) -> Optional[str]:
        return self._str("path")

    @property
    def remote_ref(self) -> Optional[str]:
        return self._str("remoteRef")


class PBXBuildPhase(_Named):
    guid_fields = ("files/*",)
    # Label used for the phase and its build files when the entry carries no name.
    default_label: ClassVar[str] = ""

    @classmethod
    def create(cls, guid: str, **fields: Value):
        return cls.new(
            guid,
            buildActionMask=BUILD_ACTION_MASK,
            files=[],
            runOnlyForDeploymentPostprocessing="0",
            **fields,
        )

    @property
    def files(self) -> List[str]:
        return self._guid_list("files")

    def add_build_file(self, guid: str) -> None:
        self._ensure_list("files").append(guid)

    def remove_build_file(self, guid: str) -> None:
        self._discard("files", guid)

    @property
    def label(self) -> str:
        return self.default_label


class PBXSourcesBuildPhase(PBXBuildPhase):
    isa = "PBXSourcesBuildPhase"
    default_label = "Sources"


class PBXResourcesBuildPhase(PBXBuildPhase):
    isa = "PBXResourcesBuildPhase"
    default_label = "Resources"


class PBXFrameworksBuildPhase(PBXBuildPhase):
    isa = "PBXFrameworksBuildPhase"
    default_label = "Frameworks"


class PBXCopyFilesBuildPhase(PBXBuildPhase):
    isa = "PBXCopyFilesBuildPhase"
    default_label = "CopyFiles"

    @property
    def label(self) -> str:
        return self.name or self.default_label


class PBXShellScriptBuildPhase(PBXBuildPhase):
    isa = "PBXShellScriptBuildPhase"
    default_label = "ShellScript"


class PBXNativeTarget(_Named):
    isa = "PBXNativeTarget"
    guid_fields = (
        "buildConfigurationList",
        "buildPhases/*",
        "buildRules/*",
        "dependencies/*",
        "packageProductDependencies/*",
        "productReference",
    )

    @classmethod
    def create(cls, guid: str, name: str, product_ref: str, product_type: str, config_list: str):
        return cls.new(
            guid,
            buildConfigurationList=config_list,
            buildPhases=[],
            buildRules=[],
            dependencies=[],
            name=name,
            productName=name,
            productReference=product_ref,
            productType=product_type,
        )

    @property
    def build_config_list(self) -> Optional[str]:
        return self._str("buildConfigurationList")

    @property
    def phases(self) -> List[str]:
        return self._guid_list("buildPhases")

    @property
    def dependencies(self) -> List[str]:
        return self._guid_list("dependencies")

    def add_phase(self, guid: str) -> None:
        self._ensure_list("buildPhases").append(guid)

    def add_dependency(self, guid: str) -> None:
        self._ensure_list("dependencies").append(guid)

    @property
    def product_reference(self) -> Optional[str]:
        return self._str("productReference")

    @property
    def product_type(self) -> Optional[str]:
        return self._str("productType")


class PBXTargetDependency(PBXObject):
    isa = "PBXTargetDependency"
    guid_fields = ("target", "targetProxy")

    @classmethod
    def create(cls, guid: str, target: str, target_proxy: str):
        return cls.new(guid, target=target, targetProxy=target_proxy)

    @property
    def target(self) -> Optional[str]:
        return self._str("target")

    @property
    def target_proxy(self) -> Optional[str]:
        return self._str("targetProxy")


class XCBuildConfiguration(_Named):
    isa = "XCBuildConfiguration"
    guid_fields = ("baseConfigurationReference",)

    @classmethod
    def create(cls, guid: str, name: str):
        return cls.new(guid, buildSettings={}, name=name)

    @property
    def settings(self) -> Dict[str, Value]:
        value = self.props.get("buildSettings")
        return value if isinstance(value, dict) else {}

    def get_property(self, name: str) -> Optional[Value]:
        return self.settings.get(name)

    def set_property(self, name: str, value: str) -> None:
        self._ensure_dict("buildSettings")[name] = value

    def add_property(self, name: str, value: str) -> None:
        """Add `value` to a possibly multi-valued setting; duplicates are ignored."""
        settings = self._ensure_dict("buildSettings")
        current = settings.get(name)
        if current is None:
            settings[name] = value
        elif isinstance(current, str):
            if current != value:
                settings[name] = [current, value]
        elif isinstance(current, list):
            if value not in current:
                current.append(value)
        else:
            settings[name] = value

    def remove_property(self, name: str) -> None:
        self.settings.pop(name, None)

    def remove_property_value(self, name: str, value: str) -> None:
        current = self.settings.get(name)
        if current == value:
            del self.settings[name]
        elif isinstance(current, list) and value in current:
            current.remove(value)

    def update_properties(self, name: str, add_values=None, remove_values=None) -> None:
        """
        Treat the setting as a set of space-separated strings: drop every item in
        `remove_values`, then append missing items from `add_values`.

        The result is stored as a string when one item is left, as a list when
        several are, and the setting is removed when nothing is left.
        """
        current = self.settings.get(name)
        if isinstance(current, str):
            values = current.split()
        elif isinstance(current, list):
            values = [v for v in current if isinstance(v, str)]
        else:
            values = []
        if remove_values:
            values = [v for v in values if v not in remove_values]
        for value in add_values or ():
            if value not in values:
                values.append(value)
        if not values:
            self.settings.pop(name, None)
        elif len(values) == 1:
            self._ensure_dict("buildSettings")[name] = values[0]
        else:
            self._ensure_dict("buildSettings")[name] = values


class XCConfigurationList(PBXObject):
    isa = "XCConfigurationList"
    guid_fields = ("buildConfigurations/*",)

    @classmethod
    def create(cls, guid: str, default_name: str = "Release"):
        return cls.new(
            guid,
            buildConfigurations=[],
            defaultConfigurationIsVisible="0",
            defaultConfigurationName=default_name,
        )

    @property
    def build_configs(self) -> List[str]:
        return self._guid_list("buildConfigurations")

    def add_build_config(self, guid: str) -> None:
        self._ensure_list("buildConfigurations").append(guid)


class PBXProjectObject(PBXObject):
    """The project root entry (`isa = PBXProject`)."""

    isa = "PBXProject"
    guid_fields = (
        "buildConfigurationList",
        "mainGroup",
        "productRefGroup",
        "targets/*",
        "projectReferences/*/ProductGroup",
        "projectReferences/*/ProjectRef",
    )

    @property
    def build_config_list(self) -> Optional[str]:
        return self._str("buildConfigurationList")

    @property
    def main_group(self) -> Optional[str]:
        return self._str("mainGroup")

    @property
    def product_ref_group(self) -> Optional[str]:
        return self._str("productRefGroup")

    @property
    def targets(self) -> List[str]:
        return self._guid_list("targets")

    def add_target(self, guid: str) -> None:
        self._ensure_list("targets").append(guid)

    @property
    def attributes(self) -> Dict[str, Value]:
        value = self.props.get("attributes")
        return value if isinstance(value, dict) else {}

    @property
    def project_references(self) -> List[Dict[str, Value]]:
        return [ref for ref in self._guid_list("projectReferences") if isinstance(ref, dict)]

    def add_project_reference(self, product_group: str, project_ref: str) -> None:
        self._ensure_list("projectReferences").append({"ProductGroup": product_group, "ProjectRef": project_ref})

    def target_attributes(self, target_guid: str) -> Dict[str, Value]:
        """`attributes.TargetAttributes[target_guid]`, created on demand."""
        table = self._ensure_dict("attributes").setdefault("TargetAttributes", {})
        return table.setdefault(target_guid, {})


OBJECT_CLASSES: Dict[str, Type[PBXObject]] = {
    cls.isa: cls
    for cls in (
        PBXBuildFile,
        PBXContainerItemProxy,
        PBXCopyFilesBuildPhase,
        PBXFileReference,
        PBXFrameworksBuildPhase,
        PBXGroup,
        PBXNativeTarget,
        PBXProjectObject,
        PBXReferenceProxy,
        PBXResourcesBuildPhase,
        PBXShellScriptBuildPhase,
        PBXSourcesBuildPhase,
        PBXTargetDependency,
        PBXVariantGroup,
        XCBuildConfiguration,
        XCConfigurationList,
    )
}


class SourceTree(Enum):
    """Values of the `sourceTree` field: what a path is relative to."""

    ABSOLUTE = "<absolute>"
    GROUP = "<group>"
    BUILD = "BUILT_PRODUCTS_DIR"
    DEVELOPER = "DEVELOPER_DIR"
    SDK = "SDKROOT"
    SOURCE = "SOURCE_ROOT"


def source_tree_value(tree: Union[SourceTree, str]) -> str:
    return tree.value if isinstance(tree, SourceTree) else tree
