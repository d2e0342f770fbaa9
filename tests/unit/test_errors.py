"""Tests for wsroot.core.errors — typed domain exceptions."""

from __future__ import annotations

from wsroot.core.errors import (
    ConfigurationError,
    CurrentDirectoryUnavailable,
    ManifestInvalid,
    ManifestNotFound,
    ManifestTooLarge,
    WsRootError,
)


def test_all_errors_inherit_from_wsroot_error() -> None:
    """Every domain exception must be catchable as WsRootError."""
    exceptions: list[WsRootError] = [
        CurrentDirectoryUnavailable(),
        ConfigurationError("Root working directory", "ROOT_WORKING_DIRECTORY"),
        ManifestNotFound("x"),
        ManifestInvalid("x"),
        ManifestTooLarge("x"),
    ]
    for exc in exceptions:
        assert isinstance(exc, WsRootError), f"{type(exc).__name__} does not inherit WsRootError"


def test_configuration_error_names_variable() -> None:
    exc = ConfigurationError("Root working directory", "ROOT_WORKING_DIRECTORY")
    assert str(exc).startswith("Root working directory is not defined")
    assert "ROOT_WORKING_DIRECTORY" in str(exc)
    assert exc.concept == "Root working directory"
    assert exc.variable == "ROOT_WORKING_DIRECTORY"


def test_configuration_error_is_distinct_from_fatal() -> None:
    assert not isinstance(ConfigurationError("a", "B"), CurrentDirectoryUnavailable)


def test_current_directory_unavailable_reason() -> None:
    exc = CurrentDirectoryUnavailable(reason="No such file or directory")
    assert "No such file or directory" in str(exc)
    assert exc.reason == "No such file or directory"


def test_manifest_too_large_is_invalid() -> None:
    assert isinstance(ManifestTooLarge("x"), ManifestInvalid)
