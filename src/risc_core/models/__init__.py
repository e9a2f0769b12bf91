# SPDX-License-Identifier: MIT
"""Document, version, change-report and configuration models.

Exports:
    RiScVersion: Supported schema versions and their families.
    parse_version: Total ``major.minor`` parser.
    RiSc3X, RiSc4X, RiSc5X, UnknownRiSc: Document variants.
    MigrationStatus: Outcome of a migration.
    RiScChange: Base of the per-family comparison reports.
    AppConfig: File-based application configuration.
"""

from .changes import *  # noqa: F401,F403
from .changes import __all__ as _changes_all
from .config import *  # noqa: F401,F403
from .config import __all__ as _config_all
from .document import *  # noqa: F401,F403
from .document import __all__ as _document_all
from .version import *  # noqa: F401,F403
from .version import __all__ as _version_all

__all__ = [*_version_all, *_document_all, *_changes_all, *_config_all]
