"""Shared fixtures: every test runs against a scrubbed copy of ``os.environ``."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from unittest import mock

import pytest

from wsroot.core.models import EnvVar

_SCRUBBED = [var.value for var in EnvVar] + [
    "WSROOT_HONOR_ROOT_OVERRIDE",
    "WSROOT_LOG_LEVEL",
    "WSROOT_LOG_JSON",
]


@pytest.fixture(autouse=True)
def _isolated_environ() -> Iterator[None]:  # pyright: ignore[reportUnusedFunction]
    """Restore ``os.environ`` after each test; discovery writes into it."""
    with mock.patch.dict(os.environ):
        for name in _SCRUBBED:
            os.environ.pop(name, None)
        yield


@pytest.fixture()
def monorepo(tmp_path: Path) -> Path:
    """A yarn-style monorepo: root workspace manifest plus one member package.

    Layout::

        repo/package.json                 {"workspaces": ["packages/*"]}
        repo/packages/app/package.json    {"name": "app"}
        repo/packages/app/src/
    """
    repo = tmp_path / "repo"
    app = repo / "packages" / "app"
    (app / "src").mkdir(parents=True)
    (repo / "package.json").write_text(
        '{"name": "repo", "private": true, "workspaces": ["packages/*"]}',
        encoding="utf-8",
    )
    (app / "package.json").write_text('{"name": "app", "version": "1.0.0"}', encoding="utf-8")
    return repo.resolve()
