from .clean import ActiveVenvError, CleanError, UnsafeVenvPathError, clean_venv
from .scanner import ScanOutcome, Venv, scan, scan_outcomes
from .session import Session

__all__ = [
    "ActiveVenvError",
    "CleanError",
    "ScanOutcome",
    "Session",
    "UnsafeVenvPathError",
    "Venv",
    "clean_venv",
    "scan",
    "scan_outcomes",
]
