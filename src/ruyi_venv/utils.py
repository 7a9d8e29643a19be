from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

WORKSPACE_ENV = "RUYI_VENV_WORKSPACE"
ACTIVE_VENV_ENV = "RUYI_VENV"

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


class WorkspaceError(RuntimeError):
    pass


def resolve_workspace(path: str | Path | None = None) -> Path:
    """Return the absolute workspace root, failing fast when it is missing."""

    if path is None:
        path = os.environ.get(WORKSPACE_ENV) or Path.cwd()
    root = Path(path).expanduser().resolve()
    if not root.is_dir():
        raise WorkspaceError(f"No workspace folder at {root}")
    return root


def strip_dot_prefix(path: str) -> str:
    return path[2:] if path.startswith("./") else path


def dot_relative(path: str) -> str:
    """Normalise a venv path to the ``./<relative>`` form."""

    return "./" + strip_dot_prefix(path).rstrip("/")


def configure_logging(verbose: bool = False) -> None:
    global _handler

    level = logging.DEBUG if verbose else logging.WARNING
    root = logging.getLogger("ruyi_venv")
    root.setLevel(level)
    # Rebind to the current stderr on every call.
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(_handler)
