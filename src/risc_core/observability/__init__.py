"""Telemetry helpers.

Exports:
    init_logfire: Configure Pydantic Logfire.
    logfire_level: Map ``logging`` level names to Logfire levels.
"""

from .monitoring import init_logfire, logfire_level

__all__ = ["init_logfire", "logfire_level"]
