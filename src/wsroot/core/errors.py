"""wsroot domain exceptions.

Callers catch typed exceptions instead of bare OSError/ValueError:

* :class:`CurrentDirectoryUnavailable` is the one fatal condition.
* :class:`ConfigurationError` means a required base directory is absent
  and the caller may supply a default.
* Manifest errors never escape discovery; they only flow out of
  :func:`wsroot.manifest.load_package_manifest`.
"""

from __future__ import annotations


# ── Base ────────────────────────────────────────────────────
class WsRootError(Exception):
    """Root exception for all wsroot errors."""


# ── Working directories ────────────────────────────────────
class CurrentDirectoryUnavailable(WsRootError):
    """The process working directory cannot be resolved (deleted, unmounted, …)."""

    def __init__(self, reason: str | None = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Current working directory cannot be resolved{detail}")
        self.reason = reason


class ConfigurationError(WsRootError):
    """A path resolver was invoked without the base directory it needs."""

    def __init__(self, concept: str, variable: str) -> None:
        super().__init__(
            f"{concept} is not defined. Please set the environment variable "
            f"{variable} to the desired root working directory path."
        )
        self.concept = concept
        self.variable = variable


# ── Manifest ────────────────────────────────────────────────
class ManifestNotFound(WsRootError):
    """The package manifest does not exist at the expected path."""


class ManifestInvalid(WsRootError):
    """The package manifest is not valid UTF-8 JSON or fails the schema."""


class ManifestTooLarge(ManifestInvalid):
    """The package manifest exceeds the allowed size limit."""
