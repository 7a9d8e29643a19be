from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml

from .clean import ACTIVE_VENV_MESSAGE, CleanError, clean_venv, confirm_message
from .scanner import Venv, scan, scan_outcomes
from .session import Session
from .utils import WORKSPACE_ENV, WorkspaceError, configure_logging, dot_relative, resolve_workspace

app = typer.Typer(add_completion=False, help="ruyi-venv - find and remove Ruyi venvs in a workspace")

_FORMATS = ("text", "json", "yaml")


def _workspace(ctx: typer.Context) -> Path:
    ctx.ensure_object(dict)
    try:
        return resolve_workspace(ctx.obj.get("root"))
    except WorkspaceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)


def _echo_none(root: Path) -> None:
    typer.echo(f"No Ruyi venvs found in {root}")


def _pick(venvs: List[Venv], path: Optional[str]) -> Venv:
    if path is not None:
        wanted = dot_relative(path)
        for venv in venvs:
            if dot_relative(venv.path) == wanted:
                return venv
        typer.echo(f"No Ruyi venv detected at {wanted}", err=True)
        raise typer.Exit(1)
    for index, venv in enumerate(venvs, start=1):
        typer.echo(f"{index}. {venv.label} ({venv.path})")
    choice = typer.prompt("Select a venv to delete", type=int)
    if not 1 <= choice <= len(venvs):
        raise typer.BadParameter(f"Choose a number between 1 and {len(venvs)}")
    return venvs[choice - 1]


@app.callback()
def cli(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(None, envvar=WORKSPACE_ENV, help="Workspace root (defaults to cwd)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    configure_logging(verbose)
    ctx.obj = {"root": root}


@app.command()
def detect(
    ctx: typer.Context,
    fmt: str = typer.Option("text", "--format", "-f", help="Output format: text, json or yaml"),
    show_all: bool = typer.Option(False, "--all", "-a", help="Also list skipped directories"),
) -> None:
    """List the Ruyi venvs in the workspace."""
    if fmt not in _FORMATS:
        raise typer.BadParameter(f"Unknown format '{fmt}'; expected one of {', '.join(_FORMATS)}")
    root = _workspace(ctx)
    outcomes = scan_outcomes(root)
    venvs = [outcome.venv for outcome in outcomes if outcome.venv is not None]

    if fmt != "text":
        data: Any = [venv.as_record() for venv in venvs]
        if show_all:
            skipped = [
                {"path": outcome.candidate, "reason": outcome.reason}
                for outcome in outcomes
                if outcome.venv is None
            ]
            data = {"venvs": data, "skipped": skipped}
        if fmt == "json":
            typer.echo(json.dumps(data, indent=2))
        else:
            typer.echo(yaml.safe_dump(data, sort_keys=False).rstrip())
        return

    if not venvs:
        _echo_none(root)
    for venv in venvs:
        typer.echo(f"{venv.path}  {venv.label}")
    if show_all:
        for outcome in outcomes:
            if outcome.venv is None:
                typer.echo(f"- {outcome.candidate}: {outcome.reason}")


@app.command()
def clean(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="Venv path relative to the workspace"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    active: Optional[str] = typer.Option(None, help="Active venv path (defaults to env RUYI_VENV)"),
) -> None:
    """Delete a Ruyi venv that is not currently active."""
    root = _workspace(ctx)
    venvs = scan(root)
    if not venvs:
        _echo_none(root)
        return
    picked = _pick(venvs, path)
    session = Session(root, active) if active else Session.from_environ(root)
    if session.is_active(picked.path):
        typer.echo(ACTIVE_VENV_MESSAGE, err=True)
        raise typer.Exit(1)
    if not yes:
        typer.confirm(confirm_message(picked.path), abort=True)
    try:
        removed = clean_venv(root, picked.path, session)
    except CleanError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)
    typer.echo(f"Ruyi venv at {removed} has been deleted.")
