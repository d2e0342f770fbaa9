"""Path resolution against the root or the current working directory.

Everything here is lexical: the base is joined with the requested path and
normalised (``.`` elided, ``..`` pops the preceding segment).  Nothing touches
the filesystem except :func:`current_working_directory`.

Bases
-----
``resolve_root_path``
    Anchors at the published root (``ROOT_WORKING_DIRECTORY``) unless an
    explicit *root* is passed.
``resolve_workspace_path``
    Anchors at the real current working directory, independent of the root.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from wsroot.core.errors import ConfigurationError, CurrentDirectoryUnavailable
from wsroot.core.models import EnvVar

StrPath = str | os.PathLike[str]


def current_working_directory() -> Path:
    """Return the symlink-resolved working directory.

    Raises
    ------
    CurrentDirectoryUnavailable
        If the working directory was removed or cannot be resolved.
    """
    try:
        return Path.cwd().resolve(strict=True)
    except OSError as exc:
        raise CurrentDirectoryUnavailable(str(exc)) from exc


def resolve_path(base: StrPath, relative_path: StrPath = "") -> str:
    """Join *relative_path* onto *base* and normalise the result.

    An absolute *relative_path* replaces the base; ``""`` returns the base.
    A leading ``//`` collapses to ``/``.
    """
    resolved = os.path.normpath(os.path.join(os.fspath(base), os.fspath(relative_path)))
    # POSIX normpath keeps exactly two leading slashes.
    if resolved.startswith("//"):
        resolved = resolved[1:]
    return resolved


def resolve_root_path(
    relative_path: StrPath = "",
    *,
    root: StrPath | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Resolve *relative_path* against the root working directory.

    Parameters
    ----------
    relative_path:
        Path to anchor.  May be absolute, may contain ``.``/``..``.
    root:
        Explicit base.  When omitted, ``ROOT_WORKING_DIRECTORY`` is read
        from *environ* (default ``os.environ``).

    Raises
    ------
    ConfigurationError
        If no root is available.
    """
    if root is None:
        env = os.environ if environ is None else environ
        root = env.get(EnvVar.ROOT_WORKING_DIRECTORY.value) or None
    if not root:
        raise ConfigurationError(
            "Root working directory", EnvVar.ROOT_WORKING_DIRECTORY.value
        )
    return resolve_path(root, relative_path)


def resolve_workspace_path(
    relative_path: StrPath = "",
    *,
    cwd: StrPath | None = None,
) -> str:
    """Resolve *relative_path* against the current working directory."""
    if cwd is None:
        try:
            cwd = current_working_directory()
        except CurrentDirectoryUnavailable as exc:
            raise ConfigurationError(
                "Current working directory", EnvVar.ROOT_WORKING_DIRECTORY.value
            ) from exc
    return resolve_path(cwd, relative_path)
