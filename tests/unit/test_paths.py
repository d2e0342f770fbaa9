"""Tests for wsroot.core.paths — lexical path resolution."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from wsroot.core.errors import ConfigurationError, CurrentDirectoryUnavailable
from wsroot.core.paths import (
    current_working_directory,
    resolve_path,
    resolve_root_path,
    resolve_workspace_path,
)

ROOT = "/home/user/projects/sentenel"


# ── resolve_root_path ───────────────────────────────────────
class TestResolveRootPath:
    def test_relative_path_appended_to_root(self) -> None:
        assert resolve_root_path("src/index.ts", root=ROOT) == f"{ROOT}/src/index.ts"

    def test_reads_root_from_environ(self) -> None:
        env = {"ROOT_WORKING_DIRECTORY": ROOT}
        assert resolve_root_path("packages/node-utils", environ=env) == f"{ROOT}/packages/node-utils"

    def test_defaults_to_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOT_WORKING_DIRECTORY", ROOT)
        assert resolve_root_path("src") == f"{ROOT}/src"

    def test_empty_path_is_root(self) -> None:
        assert resolve_root_path("", root=ROOT) == ROOT

    def test_dot_segments_normalised(self) -> None:
        assert resolve_root_path("./a/b", root=ROOT) == resolve_root_path("a/b", root=ROOT)

    def test_dotdot_pops_segment(self) -> None:
        assert resolve_root_path("a/../b", root=ROOT) == resolve_root_path("b", root=ROOT)
        assert resolve_root_path("packages/../src", root=ROOT) == f"{ROOT}/src"

    def test_dotdot_can_leave_root(self) -> None:
        assert resolve_root_path("../other", root=ROOT) == "/home/user/projects/other"

    def test_absolute_input_replaces_root(self) -> None:
        assert resolve_root_path("/etc/./hosts", root=ROOT) == "/etc/hosts"

    def test_leading_double_slash_collapses(self) -> None:
        assert resolve_root_path("//etc/hosts", root=ROOT) == "/etc/hosts"
        assert resolve_root_path("src", root="//srv/repo") == "/srv/repo/src"

    def test_trailing_slash_on_root_is_dropped(self) -> None:
        assert resolve_root_path("src", root=ROOT + "/") == f"{ROOT}/src"

    def test_accepts_path_objects(self) -> None:
        assert resolve_root_path(Path("src/index.ts"), root=Path(ROOT)) == f"{ROOT}/src/index.ts"

    def test_repeated_calls_are_identical(self) -> None:
        env = {"ROOT_WORKING_DIRECTORY": ROOT}
        assert resolve_root_path("src/utils", environ=env) == resolve_root_path("src/utils", environ=env)

    def test_missing_root_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="ROOT_WORKING_DIRECTORY"):
            resolve_root_path("src", environ={})

    def test_empty_root_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            resolve_root_path("src", environ={"ROOT_WORKING_DIRECTORY": ""})

    def test_no_filesystem_access(self) -> None:
        """The root does not have to exist."""
        assert resolve_root_path("x", root="/does/not/exist") == "/does/not/exist/x"


# ── resolve_workspace_path ─────────────────────────────────
class TestResolveWorkspacePath:
    def test_anchors_at_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        expected = os.path.join(str(tmp_path.resolve()), "src", "index.ts")
        assert resolve_workspace_path("src/index.ts") == expected

    def test_ignores_published_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ROOT_WORKING_DIRECTORY", ROOT)
        assert resolve_workspace_path("") == str(tmp_path.resolve())

    def test_explicit_cwd(self) -> None:
        assert resolve_workspace_path("packages/../src", cwd="/work") == "/work/src"

    def test_deleted_cwd_raises_configuration_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        gone = tmp_path / "gone"
        gone.mkdir()
        monkeypatch.chdir(gone)
        gone.rmdir()
        with pytest.raises(ConfigurationError) as info:
            resolve_workspace_path("src")
        assert isinstance(info.value.__cause__, CurrentDirectoryUnavailable)


# ── current_working_directory ──────────────────────────────
def test_current_working_directory_is_resolved(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    link.symlink_to(real, target_is_directory=True)
    monkeypatch.chdir(link)
    assert current_working_directory() == real.resolve()


def test_current_working_directory_deleted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    gone = tmp_path / "gone"
    gone.mkdir()
    monkeypatch.chdir(gone)
    gone.rmdir()
    with pytest.raises(CurrentDirectoryUnavailable):
        current_working_directory()


def test_resolve_path_plain_join() -> None:
    assert resolve_path("/a", "b/c") == "/a/b/c"
