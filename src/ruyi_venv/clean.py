from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .scanner import is_candidate_safe
from .session import Session
from .utils import dot_relative, strip_dot_prefix

logger = logging.getLogger(__name__)

ACTIVE_VENV_MESSAGE = "Cannot delete the currently active Ruyi venv. Please deactivate it first."


class CleanError(RuntimeError):
    pass


class ActiveVenvError(CleanError):
    pass


class UnsafeVenvPathError(CleanError):
    pass


def venv_abspath(workspace: str | Path, path: str) -> Path:
    """Join a detected venv path (``venv`` or ``./venv``) under the workspace."""

    relative = strip_dot_prefix(path)
    if not is_candidate_safe(relative):
        raise UnsafeVenvPathError(f"Refusing to delete unsafe venv path: {path!r}")
    root = Path(workspace).resolve()
    target = Path(os.path.abspath(root / relative))
    if target == root or not target.is_relative_to(root):
        raise UnsafeVenvPathError(f"Refusing to delete {target}: outside workspace {root}")
    return target


def confirm_message(path: str) -> str:
    return f"Are you sure you want to delete the Ruyi venv at {dot_relative(path)}? This action cannot be undone."


def clean_venv(workspace: str | Path, path: str, session: Session) -> Path:
    """Delete the venv at ``path`` unless it is the session's active one.

    Returns the absolute path removed. Filesystem failures surface as
    ``CleanError`` carrying the underlying message.
    """

    if session.is_active(path):
        raise ActiveVenvError(ACTIVE_VENV_MESSAGE)
    target = venv_abspath(workspace, path)
    try:
        target.stat()
        shutil.rmtree(target)
    except OSError as exc:
        raise CleanError(f"Failed to delete venv: {exc}") from exc
    logger.info("Deleted Ruyi venv at %s", target)
    return target
