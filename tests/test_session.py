import pytest

from conftest import BASIC_FOO, BASIC_TARGET, read_fixture
from pbxkit import PBXProject, ProjectEditSession


def _project_file(tmp_path):
    path = tmp_path / "project.pbxproj"
    path.write_text(read_fixture("basic.pbxproj"), encoding="utf-8")
    return path


def test_session_flushes_on_exit(tmp_path):
    path = _project_file(tmp_path)
    with ProjectEditSession(path) as session:
        session.project.add_file_to_build(BASIC_TARGET, BASIC_FOO)
    assert session.closed
    assert session.flush_count == 1
    assert "/* Foo.m in Sources */" in path.read_text(encoding="utf-8")


def test_session_flushes_once_when_closed_explicitly(tmp_path):
    path = _project_file(tmp_path)
    with ProjectEditSession(path) as session:
        session.project.add_file("Classes/Bar.m", "Classes/Bar.m")
        session.close()
        path.write_text("sentinel", encoding="utf-8")
    assert session.flush_count == 1
    assert path.read_text(encoding="utf-8") == "sentinel"
    session.close()
    assert session.flush_count == 1


def test_session_flushes_on_error(tmp_path):
    path = _project_file(tmp_path)
    with pytest.raises(RuntimeError):
        with ProjectEditSession(path) as session:
            session.project.add_file("Classes/Bar.m", "Classes/Bar.m")
            raise RuntimeError("boom")
    assert session.flush_count == 1
    reread = PBXProject.from_string(path.read_text(encoding="utf-8"))
    assert reread.find_file_guid_by_project_path("Classes/Bar.m") is not None


def test_session_without_with_block(tmp_path):
    path = _project_file(tmp_path)
    session = ProjectEditSession(path)
    session.close()
    assert path.read_text(encoding="utf-8") == read_fixture("basic.pbxproj")
