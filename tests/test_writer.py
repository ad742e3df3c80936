from conftest import BASIC_FOO, UNITY_UIKIT_BUILD
from pbxkit import PBXProject
from pbxkit.grammar import needs_quoting, quote, unquote
from pbxkit.objects import PBXGroup
from pbxkit.writer import write_entry

HEADER = "// !$*UTF8*$!\n{\n\tarchiveVersion = 1;\n\tobjects = {\n"
FOOTER = "\t};\n\trootObject = 29B97313FDCFA39411CA2CEA /* Project object */;\n}\n"

BARE_TARGET = (
    "\n/* Begin PBXNativeTarget section */\n"
    "\t\tCCCCCCCCCCCCCCCCCCCCCCCC /* T */ = {\n"
    "\t\t\tisa = PBXNativeTarget;\n"
    "\t\t\tname = T;\n"
    "\t\t};\n"
    "/* End PBXNativeTarget section */\n"
)

SOURCES_WITHOUT_FILES = (
    "\n/* Begin PBXSourcesBuildPhase section */\n"
    "\t\tAAAAAAAAAAAAAAAAAAAAAAAA /* Sources */ = {\n"
    "\t\t\tisa = PBXSourcesBuildPhase;\n"
    "\t\t\tbuildActionMask = 2147483647;\n"
    "\t\t};\n"
    "/* End PBXSourcesBuildPhase section */\n"
)

ESCAPED_GROUP = (
    "\n/* Begin PBXGroup section */\n"
    "\t\tBBBBBBBBBBBBBBBBBBBBBBBB /* Café */ = {\n"
    "\t\t\tisa = PBXGroup;\n"
    '\t\t\tname = "Caf\\U00e9";\n'
    '\t\t\tpath = "dir\\\\file";\n'
    '\t\t\tcomment = "bell\\a";\n'
    '\t\t\tsourceTree = "<group>";\n'
    "\t\t};\n"
    "/* End PBXGroup section */\n"
)


def test_untouched_project_is_byte_identical(basic_text, basic_project):
    assert basic_project.write_to_string() == basic_text


def test_untouched_unity_project_is_byte_identical(unity_text, unity_project):
    assert unity_project.write_to_string() == unity_text


def test_round_trip_is_idempotent(unity_project, config):
    unity_project.add_file("Classes/Extra.mm", "Classes/Extra.mm")
    first = unity_project.write_to_string()
    second = PBXProject.from_string(first, config).write_to_string()
    assert first == second


def test_comments_are_regenerated_not_copied(basic_text, config):
    stale = basic_text.replace("/* Foo.m */", "/* stale */")
    assert PBXProject.from_string(stale, config).write_to_string() == basic_text


def test_unknown_sections_survive_in_place(unity_text, unity_project):
    out = unity_project.write_to_string()
    start = unity_text.index("/* Begin PBXBuildRule section */")
    end = unity_text.index("/* End PBXBuildRule section */")
    block = unity_text[start:end]
    assert block in out
    assert out.index("/* End PBXBuildFile section */") < out.index(block) < out.index("/* Begin PBXFileReference section */")
    assert out.index("/* End PBXAggregateTarget section */") < out.index("/* Begin PBXBuildFile section */")


def test_single_line_entries(unity_project):
    build = unity_project.entry(UNITY_UIKIT_BUILD)
    line = write_entry(build, unity_project.comment_map())
    assert line == (
        "\t\t830B5C110E5ED4C100C7819F /* UIKit.framework in Frameworks */ = "
        "{isa = PBXBuildFile; fileRef = 830B5C100E5ED4C100C7819F /* UIKit.framework */; "
        "settings = {ATTRIBUTES = (Weak, ); }; };"
    )


def test_multi_line_entries_annotate_children(basic_project):
    group = PBXGroup.create("0123456789ABCDEF01234567", "Extra")
    group.add_child(BASIC_FOO)
    text = write_entry(group, {BASIC_FOO: "Foo.m", group.guid: "Extra"})
    assert text.splitlines() == [
        "\t\t0123456789ABCDEF01234567 /* Extra */ = {",
        "\t\t\tisa = PBXGroup;",
        "\t\t\tchildren = (",
        "\t\t\t\t56C56C9117D6015100616839 /* Foo.m */,",
        "\t\t\t);",
        "\t\t\tname = Extra;",
        "\t\t\tsourceTree = \"<group>\";",
        "\t\t};",
    ]


def test_missing_label_omits_annotation():
    group = PBXGroup.create("0123456789ABCDEF01234567", "Extra")
    group.add_child("FFFFFFFFFFFFFFFFFFFFFFFF")
    text = write_entry(group, {})
    assert "\t\t0123456789ABCDEF01234567 = {" in text
    assert "\t\t\t\tFFFFFFFFFFFFFFFFFFFFFFFF," in text


def test_empty_sections_are_not_written(basic_project):
    out = basic_project.write_to_string()
    assert "PBXBuildFile section" not in out
    basic_project.add_file_to_build("1D6058900D05DD3D006BFB54", BASIC_FOO)
    out = basic_project.write_to_string()
    assert "/* Begin PBXBuildFile section */" in out
    assert out.index("/* End PBXBuildFile section */") < out.index("/* Begin PBXFileReference section */")


def test_quoting_rules():
    assert not needs_quoting("sourcecode.c.objc")
    assert not needs_quoting("System/Library/Frameworks/UIKit.framework")
    assert needs_quoting("")
    assert needs_quoting("<group>")
    assert needs_quoting("Unity-iPhone")
    assert quote("") == '""'
    assert quote('say "hi"\n') == '"say \\"hi\\"\\n"'
    assert quote("a\\b") == '"a\\\\b"'


def test_unquote_reverses_quote():
    for value in ["", "plain", 'say "hi"', "tab\tand\nnewline", "back\\slash", "$(inherited)"]:
        rendered = quote(value)
        if needs_quoting(value):
            assert unquote(rendered) == value
        else:
            assert rendered == value


def test_unquote_dangling_quote():
    assert unquote('"a b') == "a b"


def test_absent_lists_stay_absent():
    text = HEADER + BARE_TARGET + SOURCES_WITHOUT_FILES + FOOTER
    project = PBXProject.from_string(text)
    phase = project.entry("AAAAAAAAAAAAAAAAAAAAAAAA")
    target = project.entry("CCCCCCCCCCCCCCCCCCCCCCCC")
    assert phase.files == []
    assert target.phases == []
    project.comment_map()
    assert project.summary()["targets"] == [{"guid": target.guid, "name": "T", "phases": []}]
    assert phase.props == {"isa": "PBXSourcesBuildPhase", "buildActionMask": "2147483647"}
    assert target.props == {"isa": "PBXNativeTarget", "name": "T"}
    out = project.write_to_string()
    assert "files" not in out
    assert out == text


def test_escapes_are_written_as_read():
    text = HEADER + ESCAPED_GROUP + FOOTER
    project = PBXProject.from_string(text)
    group = project.entry("BBBBBBBBBBBBBBBBBBBBBBBB")
    assert group.name == "Café"
    assert group.path == "dir\\file"
    assert group.get("comment") == "bell\\a"
    assert project.write_to_string() == text

    group.set("name", "Café 2")
    assert '\t\t\tname = "Café 2";' in project.write_to_string()


def test_unquote_escapes():
    assert unquote('"Caf\\U00e9"') == "Café"
    assert unquote('"a\\\\b"') == "a\\b"
    assert unquote('"keep\\q"') == "keep\\q"
    assert quote(unquote('"Caf\\U00e9"')) == '"Caf\\U00e9"'
    assert quote(unquote('"a\\\\b"')) == '"a\\\\b"'


def test_crlf_line_endings_survive(basic_text):
    text = basic_text.replace("\n", "\r\n")
    assert PBXProject.from_string(text).write_to_string() == text

    bare = (HEADER + FOOTER).replace("\n", "\r\n")
    assert PBXProject.from_string(bare).write_to_string() == bare


def test_missing_final_newline_survives(basic_text):
    text = basic_text.rstrip("\n")
    assert PBXProject.from_string(text).write_to_string() == text


def test_form_feed_inside_value_is_not_a_line_break():
    text = HEADER + ESCAPED_GROUP.replace("bell\\a", "page\x0cbreak") + FOOTER
    project = PBXProject.from_string(text)
    assert project.entry("BBBBBBBBBBBBBBBBBBBBBBBB").get("comment") == "page\x0cbreak"
    assert project.write_to_string() == text
