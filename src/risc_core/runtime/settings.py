# SPDX-License-Identifier: MIT
"""Centralised application configuration management.

This module exposes :class:`Settings`, a ``pydantic-settings`` model that
combines values sourced from the YAML configuration file and environment
variables. Environment variables take precedence over file-based values and
the merged configuration is validated before use.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..io_utils.loader import load_app_config
from ..models import RiScVersion, check_supported_version


class Settings(BaseSettings):
    """Application settings combining file-based and environment configuration."""

    log_level: str = Field("INFO", description="Logging verbosity level.")
    latest_supported_version: str = Field(
        RiScVersion.VERSION_4_2.value,
        description="Schema version documents are migrated to by default.",
    )
    logfire_token: str | None = Field(
        None, description="Logfire authentication token, if available.", repr=False
    )
    diagnostics: bool = Field(
        False, description="Enable verbose diagnostics and tracing."
    )

    model_config = SettingsConfigDict(env_prefix="RISC_", extra="ignore")

    @field_validator("latest_supported_version")
    @classmethod
    def _supported(cls, value: str) -> str:
        return check_supported_version(value)


def _env_overrides() -> set[str]:
    """Return the setting names provided through ``RISC_`` variables."""

    prefix = Settings.model_config.get("env_prefix", "")
    return {
        key[len(prefix) :].lower()
        for key in os.environ
        if key.upper().startswith(prefix)
    }


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load and validate application settings.

    Configuration values are read from the application configuration file and
    then merged with environment variables using ``pydantic-settings``. When a
    value is provided in both sources the environment variable wins. A ``.env``
    file in the working directory is loaded automatically when present.

    Args:
        config_path: Optional path to a YAML configuration file. Defaults to
            ``config/app.yaml``.

    Returns:
        Settings: Fully validated application configuration.

    Raises:
        RuntimeError: If configuration values are invalid.
    """
    if config_path:
        cfg_path = Path(config_path)
        config = load_app_config(cfg_path.parent, cfg_path.name)
    else:
        config = load_app_config()
    env_file_path = Path(".env")
    env_file = env_file_path if env_file_path.exists() else None
    try:
        # Init kwargs rank above the environment, so only pass file values
        # for fields the environment leaves unset.
        file_values = {
            name: value
            for name, value in config.model_dump().items()
            if name not in _env_overrides()
        }
        return Settings(**file_values, _env_file=env_file)
    except ValidationError as exc:
        # Summarise validation issues so the caller receives clear feedback.
        details = "; ".join(
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            for error in exc.errors()
        )
        raise RuntimeError(f"Invalid configuration: {details}") from exc
