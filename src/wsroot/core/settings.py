"""wsroot runtime settings (Pydantic v2 Settings).

This is the one place that reads the process environment:

* ``ENABLE_WORKING_DIR_LOGS_LEVEL`` — discovery verbosity (``none`` | ``info`` | ``verbose``).
* ``ROOT_WORKING_DIRECTORY`` — a previously published (or pre-seeded) root.
* ``NODE_ENV`` — selects the layered ``.env.<NODE_ENV>`` files.
* ``WSROOT_*`` — everything else (``WSROOT_HONOR_ROOT_OVERRIDE``, ``WSROOT_LOG_LEVEL``, …).

Tests construct ``Settings(...)`` directly instead of patching the environment.
Callers holding their own environment mapping use :meth:`Settings.from_environ`.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from wsroot.core.models import (
    DEPENDENCY_DIRNAME,
    MANIFEST_FILENAME,
    EnvVar,
    WorkingDirLogsLevel,
)

logger = structlog.get_logger()


def coerce_logs_level(value: Any) -> WorkingDirLogsLevel:
    """Map a raw verbosity value to :class:`WorkingDirLogsLevel`.

    Unset or empty means ``none``.  Anything unrecognised is reported as an
    error and also treated as ``none``.
    """
    if isinstance(value, WorkingDirLogsLevel):
        return value
    if value is None or value == "":
        return WorkingDirLogsLevel.NONE
    try:
        return WorkingDirLogsLevel(str(value).strip().lower())
    except ValueError:
        logger.error(
            "invalid_working_dir_logs_level",
            variable=EnvVar.WORKING_DIR_LOGS_LEVEL.value,
            value=str(value),
            fallback=WorkingDirLogsLevel.NONE.value,
        )
        return WorkingDirLogsLevel.NONE


class Settings(BaseSettings):
    """All runtime configuration for wsroot."""

    model_config = SettingsConfigDict(
        env_prefix="WSROOT_",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Discovery ───────────────────────────────────────────
    working_dir_logs_level: WorkingDirLogsLevel = Field(
        default=WorkingDirLogsLevel.NONE,
        validation_alias=AliasChoices(EnvVar.WORKING_DIR_LOGS_LEVEL.value, "working_dir_logs_level"),
    )
    root_working_directory: Path | None = Field(
        default=None,
        validation_alias=AliasChoices(EnvVar.ROOT_WORKING_DIRECTORY.value, "root_working_directory"),
    )
    # When False (default) a pre-set ROOT_WORKING_DIRECTORY is recomputed and overwritten.
    honor_root_override: bool = False

    manifest_filename: str = MANIFEST_FILENAME
    dependency_dirname: str = DEPENDENCY_DIRNAME
    manifest_max_size_kb: int = 1024

    # ── Dotenv layering ─────────────────────────────────────
    node_env: str | None = Field(
        default=None,
        validation_alias=AliasChoices(EnvVar.NODE_ENV.value, "node_env"),
    )

    # ── Logging ─────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("working_dir_logs_level", mode="before")
    @classmethod
    def _coerce_logs_level(cls, v: Any) -> WorkingDirLogsLevel:
        return coerce_logs_level(v)

    @field_validator("root_working_directory", "node_env", mode="before")
    @classmethod
    def _empty_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def manifest_max_size_bytes(self) -> int:
        return self.manifest_max_size_kb * 1024

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> Settings:
        """Build settings from *environ* alone, ignoring ``os.environ``.

        Keys are matched case-insensitively, like the environment source.
        """
        prefix = cls.model_config["env_prefix"].lower()
        aliased = {
            EnvVar.WORKING_DIR_LOGS_LEVEL.value.lower(): "working_dir_logs_level",
            EnvVar.ROOT_WORKING_DIRECTORY.value.lower(): "root_working_directory",
            EnvVar.NODE_ENV.value.lower(): "node_env",
        }
        values: dict[str, Any] = {}
        for key, value in environ.items():
            name = key.lower()
            if name in aliased:
                values[aliased[name]] = value
            elif name.startswith(prefix):
                field = name[len(prefix):]
                if field in cls.model_fields and field not in aliased.values():
                    values[field] = value
        return _MappingSettings(**values)


class _MappingSettings(Settings):
    """:class:`Settings` that only takes constructor values."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)
