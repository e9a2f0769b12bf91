# SPDX-License-Identifier: MIT
"""Field-level comparison of two risk scorecard documents.

The old document is first migrated to the version of the updated one, then
both are compared field by field. Scenarios and actions are matched by their
``id``; valuations, threat actors and vulnerabilities are compared by value.
The resulting report carries the :class:`MigrationStatus` of the migration so
consumers can tell edits apart from migration side effects.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import logfire

from ..exceptions import UnsupportedComparisonError, UnsupportedMigrationError
from ..migration import migrate
from ..models import (
    MigrationStatus,
    RiSc,
    RiSc3X,
    RiSc3XChange,
    RiSc3XScenario,
    RiSc3XScenarioAction,
    RiSc3XScenarioActionChange,
    RiSc3XScenarioChange,
    RiSc4X,
    RiSc4XChange,
    RiSc4XScenario,
    RiSc4XScenarioAction,
    RiSc4XScenarioActionChange,
    RiSc4XScenarioChange,
    RiSc5X,
    RiSc5XChange,
    RiSc5XScenario,
    RiSc5XScenarioAction,
    RiSc5XScenarioActionChange,
    RiSc5XScenarioChange,
    RiScDocument,
    TrackedProperty,
    UnknownRiSc,
    VersionedChange,
)
from .tracking import (
    EmitPolicy,
    track_keyed_list,
    track_mandatory,
    track_optional,
    track_risk,
    track_value,
    track_value_list,
)


def _by_id(entry: Any) -> str:
    return entry.id


def _action_fields(old: Any, new: Any) -> dict[str, Any]:
    """Fields tracked for actions of every version family."""

    return {
        "title": track_mandatory(old.title, new.title),
        "id": new.id,
        "description": track_mandatory(old.description, new.description),
        "url": track_optional(old.url, new.url),
        "status": track_optional(old.status, new.status),
    }


def _scenario_fields(old: Any, new: Any) -> dict[str, Any]:
    """Fields tracked for scenarios of every version family, except actions."""

    return {
        "title": track_mandatory(old.title, new.title),
        "id": new.id,
        "description": track_mandatory(old.description, new.description),
        "url": track_optional(old.url, new.url),
        "threat_actors": track_value_list(old.threat_actors, new.threat_actors),
        "vulnerabilities": track_value_list(old.vulnerabilities, new.vulnerabilities),
        "risk": track_risk(old.risk, new.risk),
        "remaining_risk": track_risk(old.remaining_risk, new.remaining_risk),
    }


# ---------------------------------------------------------------------------
# Version 3.X


def compare_actions_3x(
    old: list[RiSc3XScenarioAction], new: list[RiSc3XScenarioAction]
) -> list[TrackedProperty]:
    def diff(
        old_action: RiSc3XScenarioAction, new_action: RiSc3XScenarioAction
    ) -> RiSc3XScenarioActionChange:
        return RiSc3XScenarioActionChange(
            **_action_fields(old_action, new_action),
            deadline=track_optional(old_action.deadline, new_action.deadline),
            owner=track_optional(old_action.owner, new_action.owner),
        )

    return track_keyed_list(old, new, _by_id, diff)


def compare_scenarios_3x(
    old: list[RiSc3XScenario], new: list[RiSc3XScenario]
) -> list[TrackedProperty]:
    def diff(
        old_scenario: RiSc3XScenario, new_scenario: RiSc3XScenario
    ) -> RiSc3XScenarioChange:
        return RiSc3XScenarioChange(
            **_scenario_fields(old_scenario, new_scenario),
            actions=compare_actions_3x(old_scenario.actions, new_scenario.actions),
            existing_actions=track_optional(
                old_scenario.existing_actions, new_scenario.existing_actions
            ),
        )

    return track_keyed_list(old, new, _by_id, diff)


# ---------------------------------------------------------------------------
# Version 4.X


def compare_actions_4x(
    old: list[RiSc4XScenarioAction], new: list[RiSc4XScenarioAction]
) -> list[TrackedProperty]:
    def diff(
        old_action: RiSc4XScenarioAction, new_action: RiSc4XScenarioAction
    ) -> RiSc4XScenarioActionChange:
        return RiSc4XScenarioActionChange(
            **_action_fields(old_action, new_action),
            last_updated=track_optional(
                old_action.last_updated, new_action.last_updated
            ),
        )

    return track_keyed_list(old, new, _by_id, diff)


def compare_scenarios_4x(
    old: list[RiSc4XScenario], new: list[RiSc4XScenario]
) -> list[TrackedProperty]:
    def diff(
        old_scenario: RiSc4XScenario, new_scenario: RiSc4XScenario
    ) -> RiSc4XScenarioChange:
        return RiSc4XScenarioChange(
            **_scenario_fields(old_scenario, new_scenario),
            actions=compare_actions_4x(old_scenario.actions, new_scenario.actions),
        )

    return track_keyed_list(old, new, _by_id, diff)


# ---------------------------------------------------------------------------
# Version 5.X


def compare_actions_5x(
    old: list[RiSc5XScenarioAction], new: list[RiSc5XScenarioAction]
) -> list[TrackedProperty]:
    def diff(
        old_action: RiSc5XScenarioAction, new_action: RiSc5XScenarioAction
    ) -> RiSc5XScenarioActionChange:
        return RiSc5XScenarioActionChange(
            **_action_fields(old_action, new_action),
            last_updated=track_optional(
                old_action.last_updated, new_action.last_updated
            ),
            last_updated_by=track_optional(
                old_action.last_updated_by, new_action.last_updated_by
            ),
        )

    return track_keyed_list(old, new, _by_id, diff)


def compare_scenarios_5x(
    old: list[RiSc5XScenario], new: list[RiSc5XScenario]
) -> list[TrackedProperty]:
    def diff(
        old_scenario: RiSc5XScenario, new_scenario: RiSc5XScenario
    ) -> RiSc5XScenarioChange:
        return RiSc5XScenarioChange(
            **_scenario_fields(old_scenario, new_scenario),
            actions=compare_actions_5x(old_scenario.actions, new_scenario.actions),
        )

    return track_keyed_list(old, new, _by_id, diff)


# ---------------------------------------------------------------------------
# Documents


def _document_fields(
    updated: RiScDocument,
    old: RiScDocument,
    policy: EmitPolicy,
    migration_status: MigrationStatus,
) -> dict[str, Any]:
    return {
        "title": track_value(old.title, updated.title, policy),
        "scope": track_value(old.scope, updated.scope, policy),
        "valuations": track_value_list(old.valuations or [], updated.valuations or []),
        "migration_changes": migration_status,
    }


def _migrate_old(
    updated: RiScDocument, old: RiSc, last_published: datetime | None
) -> tuple[Any, MigrationStatus]:
    try:
        return migrate(old, updated.schema_version, last_published)
    except UnsupportedMigrationError as exc:
        raise UnsupportedComparisonError(
            f"The comparison failed due to migration failure of the old RiSc: {exc}"
        ) from exc


def compare(
    updated: RiSc,
    old: RiSc,
    last_published: datetime | None = None,
) -> VersionedChange:
    """Return the field-level differences between ``old`` and ``updated``.

    Args:
        updated: The newest version of the document.
        old: The version to compare against. It is migrated to the version of
            ``updated`` before comparing.
        last_published: Passed on to the migration of ``old``.

    Returns:
        A report for the version family of ``updated``. Document titles and
        scopes are always reported for 3.X and only when changed for later
        families.

    Raises:
        UnsupportedComparisonError: If either document has an unknown version,
            or ``old`` cannot be migrated to the version of ``updated``
            (including when ``old`` is newer).
    """

    if isinstance(updated, UnknownRiSc) or isinstance(old, UnknownRiSc):
        raise UnsupportedComparisonError(
            "The version of the RiSc is unknown and not supported for comparison"
        )

    with logfire.span(
        "comparison.compare",
        attributes={
            "updated_version": updated.schema_version.value,
            "old_version": old.schema_version.value,
        },
    ):
        migrated, status = _migrate_old(updated, old, last_published)
        if isinstance(updated, RiSc5X):
            return RiSc5XChange(
                **_document_fields(updated, migrated, EmitPolicy.ON_CHANGE, status),
                scenarios=compare_scenarios_5x(migrated.scenarios, updated.scenarios),
            )
        if isinstance(updated, RiSc4X):
            return RiSc4XChange(
                **_document_fields(updated, migrated, EmitPolicy.ON_CHANGE, status),
                scenarios=compare_scenarios_4x(migrated.scenarios, updated.scenarios),
            )
        if isinstance(updated, RiSc3X):
            return RiSc3XChange(
                **_document_fields(updated, migrated, EmitPolicy.ALWAYS, status),
                scenarios=compare_scenarios_3x(migrated.scenarios, updated.scenarios),
            )
    raise UnsupportedComparisonError(
        f"Comparison of {type(updated).__name__} documents is not supported"
    )


__all__ = [
    "compare",
    "compare_scenarios_3x",
    "compare_actions_3x",
    "compare_scenarios_4x",
    "compare_actions_4x",
    "compare_scenarios_5x",
    "compare_actions_5x",
]
