import logging

import pytest

from ruyi_venv import ActiveVenvError, CleanError, Session, UnsafeVenvPathError, clean_venv
from ruyi_venv.clean import venv_abspath
from ruyi_venv.utils import configure_logging


def make_venv(root, rel):
    bindir = root / rel / "bin"
    bindir.mkdir(parents=True)
    (bindir / "ruyi-activate").write_text("RUYI_VENV_PROMPT=demo\n", encoding="utf-8")


def test_clean_removes_directory(tmp_path):
    make_venv(tmp_path, "proj/venv")
    removed = clean_venv(tmp_path, "proj/venv", Session(tmp_path))
    assert removed == (tmp_path / "proj" / "venv").resolve()
    assert not removed.exists()
    assert (tmp_path / "proj").is_dir()


def test_clean_accepts_dot_prefix(tmp_path):
    make_venv(tmp_path, "venv")
    clean_venv(tmp_path, "./venv", Session(tmp_path))
    assert not (tmp_path / "venv").exists()


def test_clean_refuses_active_venv(tmp_path):
    make_venv(tmp_path, "venv")
    session = Session(tmp_path, active="./venv")
    with pytest.raises(ActiveVenvError):
        clean_venv(tmp_path, "venv", session)
    assert (tmp_path / "venv" / "bin" / "ruyi-activate").exists()

    session.deactivate()
    clean_venv(tmp_path, "venv", session)
    assert not (tmp_path / "venv").exists()


def test_clean_missing_directory_reports_os_error(tmp_path):
    with pytest.raises(CleanError) as excinfo:
        clean_venv(tmp_path, "gone", Session(tmp_path))
    assert str(excinfo.value).startswith("Failed to delete venv:")
    assert "No such file or directory" in str(excinfo.value)


@pytest.mark.parametrize("path", ["../outside", "proj/..", ".", "", "./"])
def test_abspath_rejects_escaping_paths(tmp_path, path):
    with pytest.raises(UnsafeVenvPathError):
        venv_abspath(tmp_path, path)


def test_session_from_environ(tmp_path):
    venv = tmp_path / "proj" / "venv"
    venv.mkdir(parents=True)
    session = Session.from_environ(tmp_path, {"RUYI_VENV": str(venv)})
    assert session.active == "./proj/venv"
    assert session.is_active("proj/venv")
    assert session.is_active("./proj/venv/")


def test_session_ignores_venv_outside_workspace(tmp_path):
    workspace = tmp_path / "ws"
    workspace.mkdir()
    session = Session.from_environ(workspace, {"RUYI_VENV": str(tmp_path / "other")})
    assert session.active is None
    assert not session.is_active("other")


def test_session_ignores_sibling_with_shared_prefix(tmp_path):
    workspace = tmp_path / "ws"
    workspace.mkdir()
    sibling = tmp_path / "ws-other" / "venv"
    sibling.mkdir(parents=True)
    session = Session.from_environ(workspace, {"RUYI_VENV": str(sibling)})
    assert session.active is None


def test_configure_logging_keeps_a_single_handler():
    logger = logging.getLogger("ruyi_venv")
    configure_logging()
    configure_logging(verbose=True)
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
