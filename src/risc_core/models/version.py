# SPDX-License-Identifier: MIT
"""Schema version identifiers for risk scorecard documents.

Two layers are provided. :class:`SchemaVersion` is a generic ``major.minor``
pair that orders numerically, so ``4.10`` sorts after ``4.9``.
:class:`RiScVersion` enumerates the versions this package knows how to read,
each belonging to one :class:`VersionFamily`.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import NamedTuple

_VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)")


class SchemaVersion(NamedTuple):
    """Numeric ``major.minor`` version with tuple ordering."""

    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


class Ordering(str, Enum):
    """Result of comparing two versions."""

    LESS = "less"
    EQUAL = "equal"
    GREATER = "greater"


def parse_version(value: object) -> SchemaVersion | None:
    """Return the :class:`SchemaVersion` encoded in ``value``.

    Parsing is total: anything that is not a ``<major>.<minor>`` string of
    non-negative integers yields ``None`` instead of raising.
    """

    if not isinstance(value, str):
        return None
    match = _VERSION_PATTERN.fullmatch(value)
    if match is None:
        return None
    return SchemaVersion(int(match.group(1)), int(match.group(2)))


def compare_versions(left: SchemaVersion, right: SchemaVersion) -> Ordering:
    """Order ``left`` relative to ``right`` by ``(major, minor)``."""

    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL


class VersionFamily(str, Enum):
    """Groups of schema versions sharing one document shape."""

    V3X = "3.*"
    V4X = "4.*"
    V5X = "5.*"


class RiScVersion(str, Enum):
    """Schema versions supported by the document models."""

    VERSION_3_2 = "3.2"
    VERSION_3_3 = "3.3"
    VERSION_4_0 = "4.0"
    VERSION_4_1 = "4.1"
    VERSION_4_2 = "4.2"
    VERSION_5_0 = "5.0"
    VERSION_5_1 = "5.1"
    VERSION_5_2 = "5.2"
    VERSION_5_3 = "5.3"

    @property
    def schema_version(self) -> SchemaVersion:
        major, minor = self.value.split(".")
        return SchemaVersion(int(major), int(minor))

    @property
    def family(self) -> VersionFamily:
        return _FAMILIES[self.schema_version.major]

    @classmethod
    def from_string(cls, value: object) -> RiScVersion | None:
        """Return the supported version matching ``value`` or ``None``."""

        parsed = parse_version(value)
        if parsed is None:
            return None
        for member in cls:
            if member.schema_version == parsed:
                return member
        return None

    def __str__(self) -> str:
        return self.value


_FAMILIES = {3: VersionFamily.V3X, 4: VersionFamily.V4X, 5: VersionFamily.V5X}


__all__ = [
    "SchemaVersion",
    "Ordering",
    "parse_version",
    "compare_versions",
    "VersionFamily",
    "RiScVersion",
]
