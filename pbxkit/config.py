"""
Runtime configuration for `pbxkit`.

Values come from the environment and are read once at import time. Callers
that need a different setup (tests, embedding tools) build a `PBXConfig`
explicitly via `load_config(env=...)` and hand it to `PBXProject`.

Knobs:
- `PBXKIT_PROJECT_LABEL`: product name embedded in the comment on the project's
  own configuration-list GUID. Xcode derives this from the project name; the
  Unity exporter always wrote the literal `Unity-iPhone`, which stays the
  default so existing exports keep their annotations.
- `PBXKIT_GUID_MAX_ATTEMPTS`: retry bound for collision-free GUID allocation.
- `PBXKIT_LOG_LEVEL`: level applied by the CLI when it configures logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_PROJECT_LABEL = "Unity-iPhone"
DEFAULT_GUID_MAX_ATTEMPTS = 1000
DEFAULT_LOG_LEVEL = "WARNING"

PROJECT_LABEL = os.environ.get("PBXKIT_PROJECT_LABEL", DEFAULT_PROJECT_LABEL)

try:
    GUID_MAX_ATTEMPTS = int(os.environ.get("PBXKIT_GUID_MAX_ATTEMPTS", str(DEFAULT_GUID_MAX_ATTEMPTS)))
except Exception:
    GUID_MAX_ATTEMPTS = DEFAULT_GUID_MAX_ATTEMPTS

LOG_LEVEL = os.environ.get("PBXKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


@dataclass(frozen=True)
class PBXConfig:
    project_label: str = DEFAULT_PROJECT_LABEL
    guid_max_attempts: int = DEFAULT_GUID_MAX_ATTEMPTS
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_attempts(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_GUID_MAX_ATTEMPTS
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_GUID_MAX_ATTEMPTS
    return value if value > 0 else DEFAULT_GUID_MAX_ATTEMPTS


def load_config(env: Optional[Mapping[str, str]] = None) -> PBXConfig:
    """
    Build a `PBXConfig` from `env` (defaults to the module-level values).

    Invalid numeric values fall back to their defaults.
    """
    if env is None:
        return PBXConfig(
            project_label=PROJECT_LABEL,
            guid_max_attempts=GUID_MAX_ATTEMPTS if GUID_MAX_ATTEMPTS > 0 else DEFAULT_GUID_MAX_ATTEMPTS,
            log_level=LOG_LEVEL,
        )
    return PBXConfig(
        project_label=env.get("PBXKIT_PROJECT_LABEL", DEFAULT_PROJECT_LABEL),
        guid_max_attempts=_parse_attempts(env.get("PBXKIT_GUID_MAX_ATTEMPTS")),
        log_level=env.get("PBXKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
