"""Input/output helpers for documents and configuration."""

from .loader import (
    document_to_data,
    load_app_config,
    parse_document,
    parse_raw,
    serialize_document,
)

__all__ = [
    "load_app_config",
    "parse_raw",
    "parse_document",
    "document_to_data",
    "serialize_document",
]
