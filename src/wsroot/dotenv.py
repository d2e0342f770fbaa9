"""Layered ``.env`` loading (python-dotenv).

For a base path ``.env`` and ``NODE_ENV=development`` the candidates are,
highest priority first::

    .env.development.local
    .env.development
    .env.local          # skipped when NODE_ENV=test
    .env

Files are loaded one after another in that order.  A key is only written if
the environment does not hold it yet, so real process variables beat every
file and a more specific file beats a more general one.  The async variant
awaits each file in turn and gives the same result.

Parsing and ``${VAR}`` expansion are python-dotenv's job.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import MutableMapping
from pathlib import Path

import structlog
from dotenv import dotenv_values

from wsroot.core.models import EnvVar
from wsroot.core.paths import StrPath

logger = structlog.get_logger()


def dotenv_files(path: StrPath, node_env: str | None = None) -> list[Path]:
    """Return the layered dotenv candidates for *path*, highest priority first.

    When *node_env* is unset the two ``.<NODE_ENV>`` entries are left out.
    """
    base = os.fspath(path)
    names: list[str] = []
    if node_env:
        names += [f"{base}.{node_env}.local", f"{base}.{node_env}"]
    if node_env != "test":
        names.append(f"{base}.local")
    names.append(base)
    return [Path(name) for name in names]


def _apply(
    dotenv_file: Path,
    values: dict[str, str | None],
    environ: MutableMapping[str, str],
    *,
    override: bool,
) -> None:
    written = 0
    for key, value in values.items():
        if value is None:
            continue
        if override or key not in environ:
            environ[key] = value
            written += 1
    logger.debug("dotenv_file_loaded", path=str(dotenv_file), keys=len(values), written=written)


def _node_env(node_env: str | None, environ: MutableMapping[str, str]) -> str | None:
    return node_env if node_env is not None else environ.get(EnvVar.NODE_ENV.value)


def load_dotenv_files(
    path: StrPath = ".env",
    *,
    node_env: str | None = None,
    environ: MutableMapping[str, str] | None = None,
    override: bool = False,
) -> list[Path]:
    """Load every existing layered dotenv file into *environ*.

    Parameters
    ----------
    path:
        Base file path (``.env`` by default, relative to the cwd).
    node_env:
        Environment name.  Defaults to ``NODE_ENV`` from *environ*.
    environ:
        Target mapping.  Defaults to ``os.environ``.
    override:
        Let file values replace keys already present in *environ*.  Files are
        still visited highest priority first, so with *override* the most
        general file wins; leave it off for the usual precedence.

    Returns
    -------
    list[Path]
        The files that existed and were loaded, in load order.
    """
    if environ is None:
        environ = os.environ

    loaded: list[Path] = []
    for dotenv_file in dotenv_files(path, _node_env(node_env, environ)):
        if not dotenv_file.is_file():
            continue
        _apply(dotenv_file, dotenv_values(dotenv_file, interpolate=True), environ, override=override)
        loaded.append(dotenv_file)
    return loaded


async def aload_dotenv_files(
    path: StrPath = ".env",
    *,
    node_env: str | None = None,
    environ: MutableMapping[str, str] | None = None,
    override: bool = False,
) -> list[Path]:
    """Async :func:`load_dotenv_files`; file reads run in a worker thread, one at a time."""
    if environ is None:
        environ = os.environ

    loaded: list[Path] = []
    for dotenv_file in dotenv_files(path, _node_env(node_env, environ)):
        if not await asyncio.to_thread(dotenv_file.is_file):
            continue
        values = await asyncio.to_thread(dotenv_values, dotenv_file, interpolate=True)
        _apply(dotenv_file, values, environ, override=override)
        loaded.append(dotenv_file)
    return loaded
