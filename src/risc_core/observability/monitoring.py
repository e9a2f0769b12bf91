# SPDX-License-Identifier: MIT
"""Helpers for enabling Pydantic Logfire telemetry."""

from __future__ import annotations

import os
from typing import Literal

import logfire

LogLevel = Literal["fatal", "error", "warn", "notice", "info", "debug", "trace"]

_LEVEL_NAMES: dict[str, LogLevel] = {
    "CRITICAL": "fatal",
    "ERROR": "error",
    "WARNING": "warn",
    "WARN": "warn",
    "INFO": "info",
    "DEBUG": "debug",
}


def _mask_token(value: str | None) -> str | None:
    """Return a masked representation of ``value`` for safe logging."""

    if not value:
        return None
    return f"{value[:4]}..."


def logfire_level(level: str) -> LogLevel:
    """Translate a ``logging`` level name into a Logfire level."""

    return _LEVEL_NAMES.get(level.upper(), "info")


def init_logfire(token: str | None = None, min_log_level: LogLevel = "warn") -> None:
    """Configure Logfire for the command-line tools.

    Args:
        token: Optional Logfire API token. If omitted, ``RISC_LOGFIRE_TOKEN``
            from the environment is used. Missing tokens keep telemetry local.
        min_log_level: Minimum level for console and telemetry output.
    """

    key = token or os.getenv("RISC_LOGFIRE_TOKEN")
    masked = _mask_token(key)
    logfire.configure(
        token=key,
        send_to_logfire="if-token-present",
        service_name="risc-core",
        console=logfire.ConsoleOptions(
            min_log_level=min_log_level,
            show_project_link=False,
        ),
        min_level=min_log_level,
    )
    logfire.debug("Configured logfire", token=masked)
    instrument = getattr(logfire, "instrument_pydantic", None)
    if instrument:
        instrument()
