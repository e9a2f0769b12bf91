# SPDX-License-Identifier: MIT
"""Reading and writing risk scorecard documents and application config.

Documents arrive as JSON or YAML text. :func:`parse_document` never raises:
anything that cannot be read into a known document family becomes an
:class:`~risc_core.models.UnknownRiSc` and the reason is reported through an
:class:`~risc_core.utils.ErrorHandler`.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar

import logfire
import yaml
from pydantic import TypeAdapter, ValidationError

from ..models import (
    DOCUMENT_TYPES,
    AppConfig,
    KnownRiSc,
    RiSc,
    RiScVersion,
    UnknownRiSc,
)
from ..utils import ErrorHandler, LoggingErrorHandler

T = TypeVar("T")


def _read_file(path: Path, error_handler: ErrorHandler | None = None) -> str:
    """Return the contents of ``path``.

    Raises:
        FileNotFoundError: If the file does not exist.
        RuntimeError: If the file cannot be read.
    """

    handler = error_handler or LoggingErrorHandler()
    try:
        with path.open("r", encoding="utf-8") as file:
            return file.read()
    except FileNotFoundError:
        handler.handle(f"File not found: {path}")
        raise
    except OSError as exc:
        handler.handle(f"Error reading file {path}", exc)
        raise RuntimeError(f"An error occurred while reading {path}: {exc}") from exc


def _read_yaml_file(
    path: Path,
    schema: type[T],
    error_handler: ErrorHandler | None = None,
) -> T:
    """Return YAML data loaded from ``path`` validated against ``schema``.

    Args:
        path: File location.
        schema: Pydantic-compatible schema to validate against.
        error_handler: Processor for any errors encountered.
    """
    handler = error_handler or LoggingErrorHandler()
    with logfire.span("fs.read_yaml", attributes={"path": str(path)}):
        try:
            adapter = TypeAdapter(schema)
            return adapter.validate_python(
                yaml.safe_load(_read_file(path, handler)) or {}
            )
        except FileNotFoundError:
            raise
        except (RuntimeError, ValidationError, yaml.YAMLError, ValueError) as exc:
            handler.handle(f"Error reading YAML file {path}", exc)
            raise RuntimeError(
                f"An error occurred while reading the YAML file: {exc}"
            ) from exc


@lru_cache(maxsize=None)
def load_app_config(
    base_dir: Path | str = Path("config"),
    filename: Path | str = Path("app.yaml"),
) -> AppConfig:
    """Return application configuration from ``base_dir``.

    A missing file yields the defaults. Results are cached for the lifetime of
    the process.
    """
    path = Path(base_dir) / Path(filename)
    if not path.exists():
        return AppConfig()
    return _read_yaml_file(path, AppConfig)


def parse_raw(text: str) -> Any:
    """Return the data structure encoded in ``text``.

    JSON is tried first; on failure the text is read as YAML, which also
    accepts most hand-written documents.

    Raises:
        ValueError: If ``text`` is neither valid JSON nor valid YAML.
    """

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Content is neither JSON nor YAML: {exc}") from exc


def parse_document(
    text: str | None, error_handler: ErrorHandler | None = None
) -> RiSc:
    """Read ``text`` into the document model matching its schema version.

    Args:
        text: Serialised document, or ``None`` when there is no content.
        error_handler: Receives the reason a document could not be read.

    Returns:
        A :class:`RiSc3X`, :class:`RiSc4X` or :class:`RiSc5X`, or an
        :class:`UnknownRiSc` holding ``text`` when the content is missing,
        malformed, of an unsupported version or fails validation.
    """

    handler = error_handler or LoggingErrorHandler()
    if text is None:
        return UnknownRiSc(content=None)
    try:
        data = parse_raw(text)
    except ValueError as exc:
        handler.handle("Unable to parse RiSc content", exc)
        return UnknownRiSc(content=text)
    if not isinstance(data, dict):
        handler.handle("RiSc content is not an object")
        return UnknownRiSc(content=text)

    raw_version = data.get("schemaVersion")
    if isinstance(raw_version, (int, float)) and not isinstance(raw_version, bool):
        # Unquoted YAML versions such as ``4.1`` load as numbers
        raw_version = str(raw_version)
        data = {**data, "schemaVersion": raw_version}
    version = RiScVersion.from_string(raw_version)
    if version is None:
        handler.handle(f"Unsupported RiSc schema version: {raw_version!r}")
        return UnknownRiSc(content=text)
    try:
        return DOCUMENT_TYPES[version.family].model_validate(data)
    except ValidationError as exc:
        handler.handle(f"Invalid RiSc of schema version {version.value}", exc)
        return UnknownRiSc(content=text)


def document_to_data(document: KnownRiSc) -> dict[str, Any]:
    """Return ``document`` as JSON-compatible data in the wire layout."""

    return document.model_dump(mode="json", by_alias=True)


def serialize_document(document: RiSc, indent: int | None = None) -> str:
    """Render ``document`` as JSON text.

    Raises:
        TypeError: If ``document`` is an :class:`UnknownRiSc`.
    """

    if isinstance(document, UnknownRiSc):
        raise TypeError("A RiSc with an unknown schema version cannot be serialised")
    return json.dumps(document_to_data(document), indent=indent, ensure_ascii=False)


__all__ = [
    "load_app_config",
    "parse_raw",
    "parse_document",
    "document_to_data",
    "serialize_document",
]
