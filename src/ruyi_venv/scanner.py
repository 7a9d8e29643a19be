"""Detect Ruyi venvs in a workspace.

Looks at first and second level subdirectories of the workspace root. A
directory holding ``bin/ruyi-activate`` is a venv; its label is the value of
the ``RUYI_VENV_PROMPT=`` line in that file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

MARKER_DIR = "bin"
MARKER_NAME = "ruyi-activate"
PROMPT_KEY = "RUYI_VENV_PROMPT="

SKIP_UNSAFE = "unsafe path"
SKIP_NO_MARKER = "no bin/ruyi-activate"
SKIP_UNREADABLE = "unreadable ruyi-activate"
SKIP_NO_PROMPT = "no RUYI_VENV_PROMPT line"


@dataclass(slots=True, frozen=True)
class Venv:
    path: str
    label: str

    def as_record(self) -> dict:
        return {"path": self.path, "label": self.label}


@dataclass(slots=True, frozen=True)
class ScanOutcome:
    candidate: str
    venv: Optional[Venv] = None
    reason: Optional[str] = None


def is_path_safe(segment: str) -> bool:
    if not segment:
        return False
    if ".." in segment or "\0" in segment:
        return False
    if segment == "." or segment.startswith("/"):
        return False
    return True


def is_candidate_safe(candidate: str) -> bool:
    return all(is_path_safe(segment) for segment in candidate.split("/"))


def marker_path(root: Path, candidate: str) -> Path:
    return Path(root, candidate, MARKER_DIR, MARKER_NAME)


def parse_prompt(text: str) -> Optional[str]:
    """Return the trimmed ``RUYI_VENV_PROMPT`` value, or None if absent.

    Only the text between the first and second ``=`` of the line is kept.
    """

    for line in text.split("\n"):
        if PROMPT_KEY in line:
            return line.split("=")[1].strip()
    return None


def _list_dirs(path: Path) -> List[str]:
    with os.scandir(path) as entries:
        return sorted(entry.name for entry in entries if entry.is_dir(follow_symlinks=False))


def _candidates(root: Path) -> List[str]:
    top = _list_dirs(root)
    nested: List[str] = []
    for name in top:
        try:
            nested.extend(f"{name}/{child}" for child in _list_dirs(root / name))
        except OSError as exc:
            logger.warning("Failed to read %s: %s", name, exc)
    return top + nested


def evaluate_candidate(root: Path, candidate: str) -> ScanOutcome:
    if not is_candidate_safe(candidate):
        logger.warning("Skipping unsafe path: %r", candidate)
        return ScanOutcome(candidate, reason=SKIP_UNSAFE)

    activate = marker_path(root, candidate)
    try:
        if not activate.exists():
            logger.debug("No %s/%s under %s", MARKER_DIR, MARKER_NAME, candidate)
            return ScanOutcome(candidate, reason=SKIP_NO_MARKER)
        text = activate.read_text(encoding="utf-8")
    except (OSError, ValueError) as exc:
        logger.warning("Failed to read %s: %s", activate, exc)
        return ScanOutcome(candidate, reason=SKIP_UNREADABLE)

    label = parse_prompt(text)
    if label is None:
        logger.debug("%s has no %s line", activate, PROMPT_KEY)
        return ScanOutcome(candidate, reason=SKIP_NO_PROMPT)
    return ScanOutcome(candidate, venv=Venv(candidate, label))


def scan_outcomes(root: str | Path) -> List[ScanOutcome]:
    """Evaluate every depth-1 and depth-2 directory under ``root``.

    Never raises: failing to list ``root`` logs an error and returns an empty
    list, and per-candidate failures become skipped outcomes.
    """

    root = Path(root)
    try:
        candidates = _candidates(root)
    except Exception as exc:
        logger.error("Failed to detect venvs in %s: %s", root, exc)
        return []
    return [evaluate_candidate(root, candidate) for candidate in candidates]


def scan(root: str | Path) -> List[Venv]:
    return [outcome.venv for outcome in scan_outcomes(root) if outcome.venv is not None]
