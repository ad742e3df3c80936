from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from pbxkit import PBXConfig, PBXProject  # noqa: E402

DATA_DIR = Path(__file__).resolve().parent / "data"

# GUIDs from tests/data/basic.pbxproj
BASIC_TARGET = "1D6058900D05DD3D006BFB54"
BASIC_FOO = "56C56C9117D6015100616839"
BASIC_SOURCES = "1D60588E0D05DD3D006BFB54"
BASIC_RESOURCES = "1D60588D0D05DD3D006BFB54"
BASIC_FRAMEWORKS = "1D60588F0D05DD3D006BFB54"
BASIC_CLASSES = "080E96DDFE201D6D7F000001"
BASIC_MAIN_GROUP = "29B97314FDCFA39411CA2CEA"

# GUIDs from tests/data/unity.pbxproj
UNITY_TARGET = "1D6058900D05DD3D006BFB54"
UNITY_MAIN_MM = "8358D1B70ED1CC3700E3A684"
UNITY_MAIN_MM_BUILD = "8358D1B80ED1CC3700E3A684"
UNITY_UIKIT = "830B5C100E5ED4C100C7819F"
UNITY_UIKIT_BUILD = "830B5C110E5ED4C100C7819F"
UNITY_DEBUG = "1D6058940D05DD3E006BFB54"
UNITY_RELEASE = "1D6058950D05DD3E006BFB54"


def read_fixture(name: str) -> str:
    return (DATA_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def config() -> PBXConfig:
    return PBXConfig()


@pytest.fixture
def basic_text() -> str:
    return read_fixture("basic.pbxproj")


@pytest.fixture
def unity_text() -> str:
    return read_fixture("unity.pbxproj")


@pytest.fixture
def basic_project(basic_text: str, config: PBXConfig) -> PBXProject:
    return PBXProject.from_string(basic_text, config)


@pytest.fixture
def unity_project(unity_text: str, config: PBXConfig) -> PBXProject:
    return PBXProject.from_string(unity_text, config)
