# SPDX-License-Identifier: MIT
"""File-based application configuration."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .version import RiScVersion


class StrictModel(BaseModel):
    """Base model with strict settings to prevent shape drift."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)


def check_supported_version(value: str) -> str:
    """Return ``value`` when it names a supported schema version."""

    if RiScVersion.from_string(value) is None:
        supported = ", ".join(version.value for version in RiScVersion)
        raise ValueError(
            f"unsupported schema version {value!r}; expected one of {supported}"
        )
    return value


class AppConfig(StrictModel):
    """Top-level application configuration read from ``config/app.yaml``."""

    log_level: Annotated[
        str, Field(min_length=1, description="Logging verbosity level.")
    ] = "INFO"
    latest_supported_version: str = Field(
        RiScVersion.VERSION_4_2.value,
        description="Schema version documents are migrated to by default.",
    )
    diagnostics: bool = Field(
        False, description="Enable verbose diagnostics and tracing."
    )

    @field_validator("latest_supported_version")
    @classmethod
    def _supported(cls, value: str) -> str:
        return check_supported_version(value)


__all__ = ["StrictModel", "AppConfig", "check_supported_version"]
