"""Forward-only schema migration of risk scorecard documents."""

from .engine import migrate, migrate_to_latest, plan_migration, resolve_version
from .steps import MIGRATION_STEPS, MigrationContext, StepResult

__all__ = [
    "migrate",
    "migrate_to_latest",
    "plan_migration",
    "resolve_version",
    "MIGRATION_STEPS",
    "MigrationContext",
    "StepResult",
]
