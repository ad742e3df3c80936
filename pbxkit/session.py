"""
Edit session over a `project.pbxproj` file on disk.

The file is read when the session opens and written back exactly once, when
the session closes. Closing happens on `close()` or on leaving a `with` block,
including when the block raises; whichever comes first wins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .config import PBXConfig
from .project import PBXProject

log = logging.getLogger(__name__)


class ProjectEditSession:
    def __init__(self, path: Union[str, Path], config: Optional[PBXConfig] = None) -> None:
        self.path = Path(path)
        self.project = PBXProject.from_string(self.path.read_text(encoding="utf-8"), config)
        self.closed = False
        self.flush_count = 0

    def __enter__(self) -> "ProjectEditSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None:
            log.warning("edit session for %s exiting with %s; flushing anyway", self.path, exc_type.__name__)
        self.close()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.path.write_text(self.project.write_to_string(), encoding="utf-8")
        self.flush_count += 1
        log.debug("wrote %s", self.path)
