# SPDX-License-Identifier: MIT
"""Exception types raised by the migration, comparison and diff helpers.

All errors signal a violated precondition rather than a transient fault, so
callers should not retry them.
"""

from __future__ import annotations


class RiScError(ValueError):
    """Base class for risk scorecard processing errors."""


class UnsupportedMigrationError(RiScError):
    """Raised when a document cannot be migrated to the requested version.

    Covers unknown source versions, unparseable or unsupported targets and
    attempts to migrate to an older version than the source.
    """


class UnsupportedComparisonError(RiScError):
    """Raised when two documents cannot be compared."""


class NotComparableError(RiScError):
    """Raised by the flat diff when an input is not a structured object."""


__all__ = [
    "RiScError",
    "UnsupportedMigrationError",
    "UnsupportedComparisonError",
    "NotComparableError",
]
