"""Root working directory discovery.

The single source of truth for "where is the monorepo root?".  Root-relative
paths are resolved through the :class:`RootContext` produced here — never
from ``Path.cwd()`` alone.

Algorithm
---------
1. Resolve the real current working directory (*cwd*).
2. List the module-resolution paths for *cwd*: ``cwd/node_modules``, then
   ``parent/node_modules`` for every ancestor, up to ``/node_modules``.
3. Swap each trailing ``node_modules`` for its sibling ``package.json``.
4. Keep the candidates that exist on disk.
5. Keep the manifests that declare a non-empty ``workspaces`` list.
6. Decide:

   * no match        → *cwd*
   * exactly one     → the directory holding that manifest
   * more than one   → *cwd* (a well-formed workspace never nests roots)

7. Publish the root as ``ROOT_WORKING_DIRECTORY`` and return it.

Only step 1 can fail.  Missing, unreadable or malformed manifests simply
drop out of the candidate list.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, MutableMapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import structlog

from wsroot.core.errors import CurrentDirectoryUnavailable
from wsroot.core.models import (
    DEPENDENCY_DIRNAME,
    MANIFEST_FILENAME,
    EnvVar,
    RootDecision,
    WorkingDirLogsLevel,
)
from wsroot.core.paths import (
    StrPath,
    current_working_directory,
    resolve_root_path,
    resolve_workspace_path,
)
from wsroot.core.settings import Settings
from wsroot.manifest import WorkspaceManifest, read_workspace_manifest

logger = structlog.get_logger()


@dataclass(frozen=True)
class DiscoveryConfig:
    """Inputs to :func:`discover_root_working_directory`.

    Build it with :meth:`from_settings` at the process boundary; tests build
    it directly with a ``tmp_path`` as *cwd*.
    """

    cwd: Path
    verbosity: WorkingDirLogsLevel = WorkingDirLogsLevel.NONE
    manifest_filename: str = MANIFEST_FILENAME
    dependency_dirname: str = DEPENDENCY_DIRNAME
    max_manifest_bytes: int = 1024 * 1024
    # Pre-set root to honor instead of discovering; None means always discover.
    override: Path | None = None

    @classmethod
    def from_settings(cls, settings: Settings, *, cwd: Path | None = None) -> DiscoveryConfig:
        """Read the environment-derived settings once and freeze them.

        Raises
        ------
        CurrentDirectoryUnavailable
            If *cwd* is not given and the working directory cannot be resolved.
        """
        return cls(
            cwd=(cwd or current_working_directory()),
            verbosity=settings.working_dir_logs_level,
            manifest_filename=settings.manifest_filename,
            dependency_dirname=settings.dependency_dirname,
            max_manifest_bytes=settings.manifest_max_size_bytes,
            override=settings.root_working_directory if settings.honor_root_override else None,
        )


@dataclass(frozen=True)
class RootContext:
    """The discovered root, computed once and passed to whoever resolves paths."""

    root: Path
    cwd: Path
    decision: RootDecision
    manifest: Path | None = None
    # Every workspace manifest seen on the way, nearest first.
    candidates: tuple[Path, ...] = field(default_factory=tuple)

    def resolve_root_path(self, relative_path: StrPath = "") -> str:
        """Resolve *relative_path* against :attr:`root`."""
        return resolve_root_path(relative_path, root=self.root)

    def resolve_workspace_path(self, relative_path: StrPath = "") -> str:
        """Resolve *relative_path* against :attr:`cwd`."""
        return resolve_workspace_path(relative_path, cwd=self.cwd)


# ── Candidate pipeline ─────────────────────────────────────
def module_resolution_paths(start: Path, dependency_dirname: str = DEPENDENCY_DIRNAME) -> list[Path]:
    """Return ``<dir>/node_modules`` for *start* and each ancestor, nearest first.

    Directories that are themselves ``node_modules`` are skipped, so a start
    inside ``node_modules/pkg`` never yields ``node_modules/node_modules``.
    """
    return [
        directory / dependency_dirname
        for directory in (start, *start.parents)
        if directory.name != dependency_dirname
    ]


def manifest_candidates(
    search_paths: Iterable[Path],
    manifest_filename: str = MANIFEST_FILENAME,
) -> list[Path]:
    """Map each module-resolution path to the manifest sitting beside it."""
    return [search_path.with_name(manifest_filename) for search_path in search_paths]


def _exists(path: Path) -> bool:
    try:
        path.resolve(strict=True)
    except (OSError, RuntimeError):
        return False
    return True


def existing_manifests(candidates: Iterable[Path]) -> list[Path]:
    """Keep the candidates that resolve to something on disk."""
    return [candidate for candidate in candidates if _exists(candidate)]


def workspace_manifests(
    paths: Iterable[Path],
    *,
    max_size_bytes: int = 1024 * 1024,
) -> list[WorkspaceManifest]:
    """Parse each manifest and keep those declaring workspace members."""
    found: list[WorkspaceManifest] = []
    for path in paths:
        manifest = read_workspace_manifest(path, max_size_bytes=max_size_bytes)
        if manifest is not None:
            found.append(manifest)
    return found


# ── Discovery ───────────────────────────────────────────────
def _publish(context: RootContext, environ: MutableMapping[str, str]) -> RootContext:
    environ[EnvVar.ROOT_WORKING_DIRECTORY.value] = str(context.root)
    return context


def discover_root_working_directory(
    config: DiscoveryConfig | None = None,
    *,
    environ: MutableMapping[str, str] | None = None,
) -> RootContext:
    """Find the monorepo root, publish it into *environ* and return it.

    Parameters
    ----------
    config:
        Discovery inputs.  Defaults to :meth:`DiscoveryConfig.from_settings`
        over settings read from *environ*.
    environ:
        Where settings are read from when *config* is not given, and where
        ``ROOT_WORKING_DIRECTORY`` is written.  Defaults to ``os.environ``.

    Raises
    ------
    CurrentDirectoryUnavailable
        If the current working directory cannot be resolved.
    """
    if config is None:
        settings = Settings() if environ is None else Settings.from_environ(environ)
        config = DiscoveryConfig.from_settings(settings)
    if environ is None:
        environ = os.environ

    is_verbose = config.verbosity is WorkingDirLogsLevel.VERBOSE
    is_info = is_verbose or config.verbosity is WorkingDirLogsLevel.INFO

    if is_info:
        logger.info(
            "root_working_directory_discovery_started",
            variable=EnvVar.ROOT_WORKING_DIRECTORY.value,
        )

    try:
        cwd = config.cwd.resolve(strict=True)
    except OSError as exc:
        raise CurrentDirectoryUnavailable(str(exc)) from exc

    if config.override is not None and config.override.is_dir():
        root = config.override.resolve()
        if is_info:
            logger.info("root_working_directory_override_honored", root=root)
        return _publish(
            RootContext(root=root, cwd=cwd, decision=RootDecision.OVERRIDE),
            environ,
        )

    search_paths = module_resolution_paths(cwd, config.dependency_dirname)
    if is_verbose:
        logger.info("current_working_directory", cwd=cwd)
        logger.info("module_resolution_paths", paths=search_paths)

    candidates = manifest_candidates(search_paths, config.manifest_filename)
    if is_verbose:
        logger.info("manifest_candidates", paths=candidates)

    existing = existing_manifests(candidates)
    if is_verbose:
        logger.info("existing_manifests", paths=existing)
    if not existing and is_info:
        logger.info("no_manifest_found", manifest=config.manifest_filename)

    workspaces = workspace_manifests(existing, max_size_bytes=config.max_manifest_bytes)
    if is_verbose:
        declaring = {w.path for w in workspaces}
        logger.info("workspace_manifests", paths=[w.path for w in workspaces])
        skipped = [p for p in existing if p.resolve() not in declaring]
        if skipped:
            logger.info("manifests_skipped", paths=skipped, reason="no workspaces or unreadable")

    found = tuple(w.path for w in workspaces)

    if len(workspaces) == 1:
        manifest = workspaces[0]
        if is_info:
            logger.info("single_workspace_manifest_found", manifest=manifest.path)
        context = RootContext(
            root=manifest.directory,
            cwd=cwd,
            decision=RootDecision.SINGLE_WORKSPACE,
            manifest=manifest.path,
            candidates=found,
        )
    elif not workspaces:
        if is_info:
            logger.info("no_workspace_manifest_found", manifest=config.manifest_filename)
        context = RootContext(root=cwd, cwd=cwd, decision=RootDecision.NO_WORKSPACE)
    else:
        if is_info:
            logger.info("multiple_workspace_manifests_found", manifests=list(found))
        context = RootContext(
            root=cwd,
            cwd=cwd,
            decision=RootDecision.MULTIPLE_WORKSPACES,
            candidates=found,
        )

    if is_info:
        logger.info(
            "root_working_directory_determined",
            cwd=context.cwd,
            root=context.root,
            decision=context.decision.value,
        )
    return _publish(context, environ)


@lru_cache(maxsize=1)
def root_context() -> RootContext:
    """Cached :func:`discover_root_working_directory` (from cwd at first call)."""
    return discover_root_working_directory()
