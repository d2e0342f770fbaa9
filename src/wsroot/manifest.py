"""Package manifest (``package.json``) loader.

Loads a manifest with safety guards:

* Size limit (default 1 MiB) — rejects oversized files.
* UTF-8 only, JSON object at the top level.
* Typed exceptions (:class:`ManifestNotFound`, :class:`ManifestInvalid`,
  :class:`ManifestTooLarge`).

Root discovery only asks whether a manifest declares workspace members, so
:func:`read_workspace_manifest` wraps the loader into a parse-and-classify
step that returns ``None`` instead of raising.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from wsroot.core.errors import ManifestInvalid, ManifestNotFound, ManifestTooLarge

# Default max manifest size (bytes).
_DEFAULT_MAX_SIZE_BYTES = 1024 * 1024  # 1 MiB


# ── Pydantic v2 models ─────────────────────────────────────
class WorkspacesConfig(BaseModel):
    """Object form of ``workspaces`` (``{"packages": [...], "nohoist": [...]}``)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    packages: list[str] = []


class PackageManifest(BaseModel):
    """The subset of ``package.json`` that discovery reads; other keys pass through."""

    model_config = ConfigDict(extra="allow", frozen=True)

    workspaces: list[str] | WorkspacesConfig | None = None

    @property
    def workspace_members(self) -> tuple[str, ...]:
        if self.workspaces is None:
            return ()
        if isinstance(self.workspaces, WorkspacesConfig):
            return tuple(self.workspaces.packages)
        return tuple(self.workspaces)


@dataclass(frozen=True)
class WorkspaceManifest:
    """A manifest on disk that declares at least one workspace member glob."""

    path: Path
    directory: Path
    members: tuple[str, ...]


# ── Loader ──────────────────────────────────────────────────
def load_package_manifest(
    path: Path,
    *,
    max_size_bytes: int = _DEFAULT_MAX_SIZE_BYTES,
) -> PackageManifest:
    """Load and validate a ``package.json`` file.

    Raises
    ------
    ManifestNotFound
        File does not exist (or is not a regular file).
    ManifestTooLarge
        File exceeds *max_size_bytes*.
    ManifestInvalid
        Read failure, bad encoding, JSON parse error or schema violation.
    """
    if not path.is_file():
        raise ManifestNotFound(f"manifest not found: {path}")

    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ManifestInvalid(f"manifest is not readable: {exc}") from exc
    if size > max_size_bytes:
        raise ManifestTooLarge(
            f"manifest {path} is {size:,} bytes (limit {max_size_bytes:,})"
        )

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestInvalid(f"manifest is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ManifestInvalid(f"manifest is not readable: {exc}") from exc

    try:
        raw: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestInvalid(f"JSON parse error: {exc}") from exc
    except RecursionError as exc:
        # Nesting deep enough to exhaust the decoder's stack.
        raise ManifestInvalid("JSON parse error: nesting too deep") from exc

    if not isinstance(raw, dict):
        raise ManifestInvalid("manifest schema invalid: expected a JSON object")

    try:
        return PackageManifest.model_validate(raw)
    except ValidationError as exc:
        raise ManifestInvalid(f"manifest schema invalid: {exc}") from exc


def read_workspace_manifest(
    path: Path,
    *,
    max_size_bytes: int = _DEFAULT_MAX_SIZE_BYTES,
) -> WorkspaceManifest | None:
    """Return the workspace view of *path*, or ``None`` if it declares no members.

    Unreadable and malformed manifests also yield ``None``.
    """
    try:
        manifest = load_package_manifest(path, max_size_bytes=max_size_bytes)
    except (ManifestNotFound, ManifestInvalid):
        return None

    members = manifest.workspace_members
    if not members:
        return None

    resolved = path.resolve()
    return WorkspaceManifest(path=resolved, directory=resolved.parent, members=members)
