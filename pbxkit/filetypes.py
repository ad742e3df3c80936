"""
File-extension table: Xcode file type name and the build phase a file with
that extension belongs to.

Extensions not listed are treated as plain-text resources.
"""

from __future__ import annotations

import posixpath
from enum import Enum
from typing import Dict, NamedTuple, Optional

from .sections import SectionKind


class FileKind(Enum):
    NOT_BUILDABLE = "not_buildable"
    FRAMEWORK = "framework"
    SOURCE = "source"
    RESOURCE = "resource"
    COPY_FILE = "copy_file"
    HEADER = "header"

    @property
    def phase(self) -> Optional[SectionKind]:
        return _PHASES.get(self)


_PHASES = {
    FileKind.FRAMEWORK: SectionKind.PBXFrameworksBuildPhase,
    FileKind.SOURCE: SectionKind.PBXSourcesBuildPhase,
    FileKind.RESOURCE: SectionKind.PBXResourcesBuildPhase,
    FileKind.COPY_FILE: SectionKind.PBXCopyFilesBuildPhase,
}


class FileTypeInfo(NamedTuple):
    name: str
    kind: FileKind


FILE_TYPES: Dict[str, FileTypeInfo] = {
    ".a": FileTypeInfo("archive.ar", FileKind.FRAMEWORK),
    ".app": FileTypeInfo("wrapper.application", FileKind.NOT_BUILDABLE),
    ".appex": FileTypeInfo("wrapper.app-extension", FileKind.COPY_FILE),
    ".bin": FileTypeInfo("archive.macbinary", FileKind.RESOURCE),
    ".s": FileTypeInfo("sourcecode.asm", FileKind.SOURCE),
    ".c": FileTypeInfo("sourcecode.c.c", FileKind.SOURCE),
    ".cc": FileTypeInfo("sourcecode.cpp.cpp", FileKind.SOURCE),
    ".cpp": FileTypeInfo("sourcecode.cpp.cpp", FileKind.SOURCE),
    ".swift": FileTypeInfo("sourcecode.swift", FileKind.SOURCE),
    ".dll": FileTypeInfo("file", FileKind.NOT_BUILDABLE),
    ".framework": FileTypeInfo("wrapper.framework", FileKind.FRAMEWORK),
    ".h": FileTypeInfo("sourcecode.c.h", FileKind.HEADER),
    ".pch": FileTypeInfo("sourcecode.c.h", FileKind.HEADER),
    ".icns": FileTypeInfo("image.icns", FileKind.RESOURCE),
    ".xcassets": FileTypeInfo("folder.assetcatalog", FileKind.RESOURCE),
    ".inc": FileTypeInfo("sourcecode.inc", FileKind.NOT_BUILDABLE),
    ".m": FileTypeInfo("sourcecode.c.objc", FileKind.SOURCE),
    ".mm": FileTypeInfo("sourcecode.cpp.objcpp", FileKind.SOURCE),
    ".nib": FileTypeInfo("wrapper.nib", FileKind.RESOURCE),
    ".plist": FileTypeInfo("text.plist.xml", FileKind.RESOURCE),
    ".png": FileTypeInfo("image.png", FileKind.RESOURCE),
    ".rtf": FileTypeInfo("text.rtf", FileKind.RESOURCE),
    ".tiff": FileTypeInfo("image.tiff", FileKind.RESOURCE),
    ".txt": FileTypeInfo("text", FileKind.RESOURCE),
    ".json": FileTypeInfo("text.json", FileKind.RESOURCE),
    ".xcodeproj": FileTypeInfo("wrapper.pb-project", FileKind.NOT_BUILDABLE),
    ".xib": FileTypeInfo("file.xib", FileKind.RESOURCE),
    ".strings": FileTypeInfo("text.plist.strings", FileKind.RESOURCE),
    ".storyboard": FileTypeInfo("file.storyboard", FileKind.RESOURCE),
    ".bundle": FileTypeInfo("wrapper.plug-in", FileKind.RESOURCE),
    ".dylib": FileTypeInfo("compiled.mach-o.dylib", FileKind.FRAMEWORK),
    ".tbd": FileTypeInfo("sourcecode.text-based-dylib-definition", FileKind.FRAMEWORK),
    ".entitlements": FileTypeInfo("text.plist.entitlements", FileKind.NOT_BUILDABLE),
}

UNKNOWN_FILE_TYPE = FileTypeInfo("text", FileKind.RESOURCE)


def extension(path: str) -> str:
    return posixpath.splitext(path)[1]


def file_type(ext: str) -> FileTypeInfo:
    return FILE_TYPES.get(ext.lower(), UNKNOWN_FILE_TYPE)


def is_known_extension(ext: str) -> bool:
    return ext.lower() in FILE_TYPES


def is_buildable(ext: str) -> bool:
    return file_type(ext).kind.phase is not None


def type_name(ext: str) -> str:
    return file_type(ext).name
