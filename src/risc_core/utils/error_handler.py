"""Error handling abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod

import logfire


class ErrorHandler(ABC):
    """Interface for reporting non-fatal errors.

    Implementations should avoid raising further exceptions and should emit
    concise diagnostics suitable for production logs.
    """

    @abstractmethod
    def handle(self, message: str, exc: Exception | None = None) -> None:
        """Record ``message`` with optional ``exc`` context."""


class LoggingErrorHandler(ErrorHandler):
    """Error handler that logs via ``logfire``."""

    def handle(self, message: str, exc: Exception | None = None) -> None:
        """Log an error message with optional exception context.

        Args:
            message: Description of the error to record.
            exc: Exception instance providing additional context.
        """
        if exc:
            logfire.error(f"{message}: {exc}", error_type=type(exc).__name__)
        else:
            logfire.error(message)


class CollectingErrorHandler(ErrorHandler):
    """Error handler that keeps reported messages in memory."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def handle(self, message: str, exc: Exception | None = None) -> None:
        self.messages.append(f"{message}: {exc}" if exc else message)
