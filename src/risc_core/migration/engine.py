# SPDX-License-Identifier: MIT
"""Drive a document through consecutive migration steps."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import logfire

from ..exceptions import UnsupportedMigrationError
from ..models import (
    KnownRiSc,
    MigrationChange40,
    MigrationChange41,
    MigrationChange42,
    MigrationStatus,
    MigrationVersions,
    RiSc,
    RiScVersion,
    UnknownRiSc,
)
from .steps import (
    MIGRATION_STEPS,
    STEP_TARGETS,
    MigrationContext,
    MigrationStep,
    StepResult,
)

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from ..runtime.settings import Settings

_CHANGE_FIELDS = {
    MigrationChange40: "migration_change40",
    MigrationChange41: "migration_change41",
    MigrationChange42: "migration_change42",
}


def resolve_version(version: RiScVersion | str) -> RiScVersion:
    """Return ``version`` as a supported :class:`RiScVersion`.

    Raises:
        UnsupportedMigrationError: If ``version`` is unparseable or unknown.
    """

    if isinstance(version, RiScVersion):
        return version
    resolved = RiScVersion.from_string(version)
    if resolved is None:
        raise UnsupportedMigrationError(
            f"Unsupported migration target version: {version!r}"
        )
    return resolved


def plan_migration(
    source: RiScVersion, target: RiScVersion
) -> list[tuple[RiScVersion, MigrationStep]]:
    """Return the ordered steps leading from ``source`` to ``target``.

    Migration only moves forward, so a ``target`` older than ``source`` or
    beyond the last registered step cannot be reached.

    Raises:
        UnsupportedMigrationError: If no chain of steps reaches ``target``.
    """

    if target.schema_version < source.schema_version:
        raise UnsupportedMigrationError(
            f"Cannot migrate from {source.value} to older version {target.value}"
        )
    plan: list[tuple[RiScVersion, MigrationStep]] = []
    current = source
    while current is not target:
        step = MIGRATION_STEPS.get(current)
        if step is None:
            raise UnsupportedMigrationError(
                f"Unsupported migration from {current.value} towards {target.value}"
            )
        plan.append((current, step))
        current = STEP_TARGETS[current]
    return plan


def _fold(status: MigrationStatus, result: StepResult) -> MigrationStatus:
    """Merge the outcome of one step into the accumulated ``status``."""

    update: dict[str, object] = {
        "migration_changes": status.migration_changes or result.changes_made,
        "migration_requires_new_approval": (
            status.migration_requires_new_approval or result.requires_new_approval
        ),
    }
    if result.change is not None:
        update[_CHANGE_FIELDS[type(result.change)]] = result.change
    return status.model_copy(update=update)


def migrate(
    document: RiSc,
    target_version: RiScVersion | str,
    last_published: datetime | None = None,
) -> tuple[KnownRiSc, MigrationStatus]:
    """Upgrade ``document`` to ``target_version``.

    Args:
        document: Document to migrate. It is never modified.
        target_version: Version to migrate to, as a string such as ``"4.1"``
            or a :class:`RiScVersion`.
        last_published: When the document was last published, if ever. Used
            by the 4.1 to 4.2 step.

    Returns:
        The migrated document and a :class:`MigrationStatus` describing the
        changes caused by the migration itself. Migrating to the document's
        own version returns it unchanged with an empty status.

    Raises:
        UnsupportedMigrationError: If the document version is unknown, the
            target is unparseable or unsupported, or the target is older than
            the document.
    """

    if isinstance(document, UnknownRiSc):
        raise UnsupportedMigrationError(
            "Migration of a RiSc with an unknown schema version is not supported"
        )
    target = resolve_version(target_version)
    source = document.schema_version
    status = MigrationStatus(
        migration_versions=MigrationVersions(
            from_version=source.value, to_version=target.value
        )
    )
    if source is target:
        return document, status

    plan = plan_migration(source, target)
    context = MigrationContext(last_published=last_published)
    with logfire.span(
        "migration.migrate",
        attributes={"from_version": source.value, "to_version": target.value},
    ):
        for version, step in plan:
            result = step(document, context)
            logfire.debug(
                "Applied migration step",
                from_version=version.value,
                to_version=result.document.schema_version.value,
                changes_made=result.changes_made,
            )
            document = result.document
            status = _fold(status, result)
    logfire.info(
        "Migrated RiSc",
        from_version=source.value,
        to_version=target.value,
        requires_new_approval=status.migration_requires_new_approval,
    )
    return document, status


def migrate_to_latest(
    document: RiSc,
    settings: "Settings",
    last_published: datetime | None = None,
) -> tuple[KnownRiSc, MigrationStatus]:
    """Migrate ``document`` to the latest version configured in ``settings``."""

    return migrate(document, settings.latest_supported_version, last_published)


__all__ = ["migrate", "migrate_to_latest", "plan_migration", "resolve_version"]
