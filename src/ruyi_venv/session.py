from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from .utils import ACTIVE_VENV_ENV, dot_relative


class Session:
    """Tracks which venv of a workspace is currently activated."""

    def __init__(self, workspace: str | Path, active: Optional[str] = None):
        self.workspace = Path(workspace)
        self.active: Optional[str] = None
        if active:
            self.activate(active)

    @classmethod
    def from_environ(cls, workspace: str | Path, environ: Mapping[str, str] = os.environ) -> "Session":
        # bin/ruyi-activate exports RUYI_VENV as the venv's absolute path
        session = cls(workspace)
        value = environ.get(ACTIVE_VENV_ENV)
        if value:
            session.activate(value)
        return session

    def _normalise(self, path: str) -> Optional[str]:
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            resolved = candidate.resolve()
            workspace = self.workspace.resolve()
            if not resolved.is_relative_to(workspace) or resolved == workspace:
                return None
            return dot_relative(resolved.relative_to(workspace).as_posix())
        return dot_relative(path)

    def activate(self, path: str) -> None:
        self.active = self._normalise(path)

    def deactivate(self) -> None:
        self.active = None

    def is_active(self, path: str) -> bool:
        return self.active is not None and self._normalise(path) == self.active
