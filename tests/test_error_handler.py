# SPDX-License-Identifier: MIT
"""Tests for error handler implementations."""

from risc_core.utils import CollectingErrorHandler, LoggingErrorHandler
from risc_core.utils import error_handler


def test_logging_error_handler_includes_exception(monkeypatch) -> None:
    messages: list[tuple[str, dict]] = []
    monkeypatch.setattr(
        error_handler.logfire,
        "error",
        lambda message, **kwargs: messages.append((message, kwargs)),
    )

    LoggingErrorHandler().handle("Unable to parse", ValueError("bad"))
    LoggingErrorHandler().handle("Plain message")

    assert messages == [
        ("Unable to parse: bad", {"error_type": "ValueError"}),
        ("Plain message", {}),
    ]


def test_collecting_error_handler_keeps_messages() -> None:
    handler = CollectingErrorHandler()

    handler.handle("first")
    handler.handle("second", RuntimeError("boom"))

    assert handler.messages == ["first", "second: boom"]
