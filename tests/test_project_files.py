import pytest

from conftest import (
    BASIC_CLASSES,
    BASIC_FOO,
    BASIC_MAIN_GROUP,
    BASIC_SOURCES,
    BASIC_TARGET,
    UNITY_MAIN_MM,
    UNITY_MAIN_MM_BUILD,
    UNITY_TARGET,
    UNITY_UIKIT,
    UNITY_UIKIT_BUILD,
)
from pbxkit import PBXProject, SourceTree
from pbxkit.errors import IntegrityError, PBXReferenceError
from pbxkit.objects import PBXBuildFile
from pbxkit.sections import SectionKind


def test_add_file_to_build_scenario(basic_project):
    build_guid = basic_project.add_file_to_build(BASIC_TARGET, BASIC_FOO)

    build_files = list(basic_project.section(SectionKind.PBXBuildFile))
    assert len(build_files) == 1
    assert build_files[0].guid == build_guid
    assert isinstance(build_files[0], PBXBuildFile)
    assert build_files[0].file_ref == BASIC_FOO

    sources = basic_project.entry(BASIC_SOURCES)
    assert sources.files == [build_guid]

    out = basic_project.write_to_string()
    assert f"{build_guid} /* Foo.m in Sources */" in out


def test_add_file_to_build_twice_is_a_no_op(basic_project):
    first = basic_project.add_file_to_build(BASIC_TARGET, BASIC_FOO)
    second = basic_project.add_file_to_build(BASIC_TARGET, BASIC_FOO)
    assert first == second
    assert len(basic_project.section(SectionKind.PBXBuildFile)) == 1


def test_add_file_path_round_trip(basic_project):
    guid = basic_project.add_file("/abs/src/Bar.mm", "Classes/Sub/Bar.mm")
    assert basic_project.find_file_guid_by_project_path("Classes/Sub/Bar.mm") == guid
    assert basic_project.find_file_guid_by_real_path("/abs/src/Bar.mm") == guid
    sub = basic_project.get_source_group("Classes/Sub")
    assert sub is not None
    assert guid in sub.children
    assert sub.guid in basic_project.entry(BASIC_CLASSES).children


def test_add_file_is_idempotent_by_either_path(basic_project):
    guid = basic_project.add_file("src/Bar.m", "Classes/Bar.m")
    assert basic_project.add_file("src/Bar.m", "Classes/Bar.m") == guid
    assert basic_project.add_file("src/Bar.m", "Other/Bar.m") == guid
    assert basic_project.add_file("src\\Bar.m", "Classes\\Bar.m") == guid


def test_add_file_rejects_mismatched_extensions(basic_project):
    before = basic_project.write_to_string()
    with pytest.raises(IntegrityError):
        basic_project.add_file("src/Bar.m", "Classes/Bar.mm")
    assert basic_project.write_to_string() == before


def test_add_file_sets_type_and_source_tree(basic_project):
    guid = basic_project.add_file("art/icon.png", "Art/icon.png", SourceTree.SOURCE)
    ref = basic_project.entry(guid)
    assert ref.file_type == "image.png"
    assert ref.source_tree == "SOURCE_ROOT"
    assert ref.name == "icon.png"
    assert ref.path == "art/icon.png"


def test_find_by_real_path_with_source_tree(unity_project):
    path = "System/Library/Frameworks/UIKit.framework"
    assert unity_project.find_file_guid_by_real_path(path) == UNITY_UIKIT
    assert unity_project.find_file_guid_by_real_path(path, SourceTree.SDK) == UNITY_UIKIT
    assert unity_project.find_file_guid_by_real_path(path, SourceTree.GROUP) is None
    assert unity_project.contains_file_by_project_path("Classes/main.mm")
    assert not unity_project.contains_file_by_project_path("Classes/missing.mm")


def test_header_files_are_not_built(basic_project):
    guid = basic_project.add_file("Classes/Foo.h", "Classes/Foo.h")
    assert basic_project.add_file_to_build(BASIC_TARGET, guid) is None
    assert len(basic_project.section(SectionKind.PBXBuildFile)) == 0


def test_files_go_to_the_phase_for_their_type(basic_project):
    png = basic_project.add_file("Art/icon.png", "Art/icon.png")
    build_guid = basic_project.add_file_to_build(BASIC_TARGET, png)
    assert build_guid in basic_project.entry("1D60588D0D05DD3D006BFB54").files
    assert basic_project.comment_map()[build_guid] == "icon.png in Resources"


def test_add_file_to_build_with_flags(basic_project):
    build_guid = basic_project.add_file_to_build_with_flags(BASIC_TARGET, BASIC_FOO, "-fno-objc-arc")
    build = basic_project.entry(build_guid)
    assert build.compile_flags == "-fno-objc-arc"
    assert 'settings = {COMPILER_FLAGS = "-fno-objc-arc"; }; };' in basic_project.write_to_string()


def test_add_file_to_build_section(basic_project):
    guid = basic_project.add_file("Classes/notes.txt", "Classes/notes.txt")
    build_guid = basic_project.add_file_to_build_section(BASIC_TARGET, BASIC_SOURCES, guid)
    assert build_guid in basic_project.entry(BASIC_SOURCES).files
    with pytest.raises(PBXReferenceError):
        basic_project.add_file_to_build_section(BASIC_TARGET, "FFFFFFFFFFFFFFFFFFFFFFFF", guid)


def test_add_file_to_build_for_unknown_target(basic_project):
    with pytest.raises(PBXReferenceError):
        basic_project.add_file_to_build("FFFFFFFFFFFFFFFFFFFFFFFF", BASIC_FOO)


def test_build_file_cannot_join_a_second_phase(basic_project):
    build_guid = basic_project.add_file_to_build(BASIC_TARGET, BASIC_FOO)
    resources = basic_project.entry("1D60588D0D05DD3D006BFB54")
    with pytest.raises(IntegrityError):
        basic_project._attach(resources, build_guid)


def test_remove_file_cascades(unity_project):
    unity_project.remove_file(UNITY_MAIN_MM)

    assert unity_project.entry(UNITY_MAIN_MM) is None
    assert unity_project.entry(UNITY_MAIN_MM_BUILD) is None
    sources = unity_project.entry("1D60588E0D05DD3D006BFB54")
    assert UNITY_MAIN_MM_BUILD not in sources.files
    classes = unity_project.entry("080E96DDFE201D6D7F000001")
    assert UNITY_MAIN_MM not in classes.children
    assert unity_project.find_file_guid_by_project_path("Classes/main.mm") is None

    out = unity_project.write_to_string()
    assert UNITY_MAIN_MM not in out
    assert UNITY_MAIN_MM_BUILD not in out


def test_remove_file_checks_before_mutating(basic_project):
    with pytest.raises(PBXReferenceError):
        basic_project.remove_file("FFFFFFFFFFFFFFFFFFFFFFFF")

    basic_project.add_file_to_build(BASIC_TARGET, BASIC_FOO)
    basic_project.entry(BASIC_CLASSES).remove_child(BASIC_FOO)
    before = basic_project.write_to_string()
    with pytest.raises(PBXReferenceError):
        basic_project.remove_file(BASIC_FOO)
    assert basic_project.write_to_string() == before


def test_remove_file_from_build_is_target_scoped(unity_project):
    other = unity_project.add_target("Other", ".app", "com.apple.product-type.application")
    unity_project.add_sources_build_phase(other)
    other_build = unity_project.add_file_to_build(other, UNITY_MAIN_MM)

    unity_project.remove_file_from_build(UNITY_TARGET, UNITY_MAIN_MM)

    assert unity_project.entry(UNITY_MAIN_MM_BUILD) is None
    assert unity_project.entry(other_build) is not None
    assert unity_project.entry(UNITY_MAIN_MM) is not None


def test_frameworks(unity_project):
    assert unity_project.has_framework("UIKit.framework")
    assert not unity_project.has_framework("GameKit.framework")

    build_guid = unity_project.add_framework_to_project(UNITY_TARGET, "GameKit.framework", weak=True)
    assert unity_project.has_framework("GameKit.framework")
    build = unity_project.entry(build_guid)
    assert build.weak
    assert build_guid in unity_project.entry("1D60588F0D05DD3D006BFB54").files
    frameworks_group = unity_project.get_source_group("Frameworks")
    assert build.file_ref in frameworks_group.children
    ref = unity_project.entry(build.file_ref)
    assert ref.source_tree == "SDKROOT"
    assert ref.path == "System/Library/Frameworks/GameKit.framework"

    assert unity_project.add_framework_to_project(UNITY_TARGET, "UIKit.framework", weak=True) == UNITY_UIKIT_BUILD


def test_add_framework_without_phase_changes_nothing(basic_project):
    basic_project.entry(BASIC_TARGET).phases.remove("1D60588F0D05DD3D006BFB54")
    before = basic_project.write_to_string()
    with pytest.raises(PBXReferenceError):
        basic_project.add_framework_to_project(BASIC_TARGET, "GameKit.framework")
    assert basic_project.write_to_string() == before


def test_groups_are_created_under_the_main_group(basic_project):
    group = basic_project.create_source_group("A/B")
    assert basic_project.get_source_group("A/B") is group
    a = basic_project.get_source_group("A")
    assert group.guid in a.children
    assert a.guid in basic_project.entry(BASIC_MAIN_GROUP).children
    assert basic_project.get_source_group("") is basic_project.entry(BASIC_MAIN_GROUP)
    assert basic_project.get_source_group("Missing") is None


def test_lookup_misses_return_none(basic_project):
    assert basic_project.entry("FFFFFFFFFFFFFFFFFFFFFFFF") is None
    assert basic_project.target_guid_by_name("Nope") is None
    assert basic_project.find_file_guid_by_real_path("nope.m") is None
    assert basic_project.find_file_guid_by_project_path("No/Such/nope.m") is None


def test_empty_project_has_no_groups():
    project = PBXProject()
    assert project.get_source_group("") is None
    with pytest.raises(PBXReferenceError):
        project.add_file("a.m", "a.m")
