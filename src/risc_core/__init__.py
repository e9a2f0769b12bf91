# SPDX-License-Identifier: MIT
"""Schema migration, structural comparison and path diffing of RiSc documents.

Exports:
    migrate: Upgrade a document to a newer schema version.
    compare: Field-level change report between two documents.
    diff: Schema-agnostic path diff of two raw documents.
    parse_document: Read JSON or YAML text into a document model.
"""

from .comparison import compare
from .exceptions import (
    NotComparableError,
    RiScError,
    UnsupportedComparisonError,
    UnsupportedMigrationError,
)
from .flat_diff import FlatDiff, diff
from .io_utils import parse_document, serialize_document
from .migration import migrate, migrate_to_latest

__all__ = [
    "compare",
    "diff",
    "FlatDiff",
    "migrate",
    "migrate_to_latest",
    "parse_document",
    "serialize_document",
    "RiScError",
    "UnsupportedMigrationError",
    "UnsupportedComparisonError",
    "NotComparableError",
]
