"""wsroot CLI — presentation layer.

Thin adapter: discovery and resolution live in ``wsroot.core``.
The CLI only reads the environment at the boundary, calls into the core and
formats output.  Results go to stdout, logs go to stderr.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog
import typer
from rich import print
from rich.table import Table

from wsroot.core.errors import ConfigurationError, CurrentDirectoryUnavailable
from wsroot.core.logging import configure_logging
from wsroot.core.paths import resolve_root_path, resolve_workspace_path
from wsroot.core.root import DiscoveryConfig, RootContext, discover_root_working_directory
from wsroot.core.settings import Settings
from wsroot.dotenv import dotenv_files, load_dotenv_files

logger = structlog.get_logger()

app = typer.Typer(help="wsroot — monorepo root discovery and path resolution.")


# ── Callback (runs before every command) ────────────────────
@app.callback(invoke_without_command=True)
def _main_callback(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    log_level: str = typer.Option("INFO", "--log-level", envvar="WSROOT_LOG_LEVEL", help="Log level."),
    log_json: bool = typer.Option(True, "--log-json/--log-text", envvar="WSROOT_LOG_JSON", help="JSON or human logs."),
    env_file: Path = typer.Option(
        None,
        "--env-file",
        help="Base dotenv file to load (with its .local / .<NODE_ENV> layers) before reading settings.",
    ),
) -> None:
    """Configure logging, load dotenv layers, then store settings in context."""
    configure_logging(level=log_level, json_output=log_json)
    if env_file is not None:
        loaded = load_dotenv_files(env_file)
        logger.info("dotenv_loaded", files=[str(p) for p in loaded])

    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings(log_level=log_level, log_json=log_json)

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _context(ctx: typer.Context) -> RootContext:
    """Discover the root once per invocation, caching it in the Typer context."""
    if "root" not in ctx.obj:
        try:
            config = DiscoveryConfig.from_settings(_settings(ctx))
            ctx.obj["root"] = discover_root_working_directory(config)
        except CurrentDirectoryUnavailable as exc:
            print(f"[red]ERROR:[/red] {exc}")
            raise typer.Exit(code=2)
    return ctx.obj["root"]


# ── Commands ────────────────────────────────────────────────
@app.command()
def root(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the full discovery result as JSON."),
) -> None:
    """Print the root working directory."""
    rc = _context(ctx)
    if as_json:
        payload = {
            "root": str(rc.root),
            "cwd": str(rc.cwd),
            "decision": rc.decision.value,
            "manifest": str(rc.manifest) if rc.manifest else None,
            "candidates": [str(p) for p in rc.candidates],
        }
        typer.echo(json.dumps(payload, indent=2))
        return
    typer.echo(str(rc.root))


@app.command()
def resolve(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Path to resolve (relative or absolute)."),
    workspace: bool = typer.Option(
        False,
        "--workspace",
        "-w",
        help="Resolve against the current working directory instead of the root.",
    ),
    from_env: bool = typer.Option(
        False,
        "--from-env",
        help="Skip discovery and use the ROOT_WORKING_DIRECTORY already in the environment.",
    ),
) -> None:
    """Resolve PATH against the root (or the current working directory)."""
    try:
        if from_env:
            resolved = resolve_workspace_path(path) if workspace else resolve_root_path(path)
        else:
            rc = _context(ctx)
            resolved = rc.resolve_workspace_path(path) if workspace else rc.resolve_root_path(path)
    except ConfigurationError as exc:
        print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=1)
    typer.echo(resolved)


@app.command()
def status(ctx: typer.Context) -> None:
    """Show how the root was determined."""
    s = _settings(ctx)
    rc = _context(ctx)

    table = Table(title="wsroot", show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Current dir", str(rc.cwd))
    table.add_row("Root", str(rc.root))
    table.add_row("Decision", rc.decision.value)
    table.add_row("Manifest", str(rc.manifest) if rc.manifest else "[yellow]none[/yellow]")
    for candidate in rc.candidates:
        table.add_row("Candidate", str(candidate))
    table.add_row("Verbosity", s.working_dir_logs_level.value)
    table.add_row("Honor override", str(s.honor_root_override))
    print(table)

    logger.info("status_checked", root=str(rc.root), decision=rc.decision.value)


@app.command(name="env-files")
def env_files(
    ctx: typer.Context,
    base: Path = typer.Argument(Path(".env"), help="Base dotenv file."),
    load: bool = typer.Option(False, "--load", help="Load the existing files into the environment."),
) -> None:
    """List the layered dotenv files for BASE, highest priority first."""
    s = _settings(ctx)
    candidates = dotenv_files(base, s.node_env)
    loaded = set(load_dotenv_files(base, node_env=s.node_env)) if load else set()

    table = Table(title=f"dotenv layers (NODE_ENV={s.node_env or '-'})")
    table.add_column("File", style="bold")
    table.add_column("Exists")
    table.add_column("Loaded")
    for candidate in candidates:
        exists = candidate.is_file()
        table.add_row(
            str(candidate),
            "[green]yes[/green]" if exists else "[yellow]no[/yellow]",
            "[green]yes[/green]" if candidate in loaded else "-",
        )
    print(table)


# ── Entrypoint ──────────────────────────────────────────────
def main() -> None:  # noqa: D103
    app()
