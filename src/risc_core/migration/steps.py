# SPDX-License-Identifier: MIT
"""Single-version migration steps for risk scorecard documents.

Each step upgrades a document by exactly one schema version and returns a
:class:`StepResult` holding the new document and the change log describing
what the upgrade itself altered. Steps never mutate their input.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from ..models import (
    KnownRiSc,
    MigrationChange,
    MigrationChange40,
    MigrationChange40Action,
    MigrationChange40Scenario,
    MigrationChange41,
    MigrationChange41Scenario,
    MigrationChange42,
    MigrationChange42Action,
    MigrationChange42Scenario,
    MigrationChangedTypedValue,
    MigrationChangedValue,
    RiSc3X,
    RiSc3XScenario,
    RiSc3XScenarioVulnerability,
    RiSc4X,
    RiSc4XScenario,
    RiSc4XScenarioAction,
    RiScScenarioRisk,
    RiScScenarioVulnerability,
    RiScVersion,
)

# 3.3 -> 4.0: vulnerabilities that were merged or renamed. Every other value
# keeps its name.
_Old = RiSc3XScenarioVulnerability
_New = RiScScenarioVulnerability

VULNERABILITY_REPLACEMENTS: dict[_Old, _New] = {
    _Old.USER_REPUDIATION: _New.UNMONITORED_USE,
    _Old.COMPROMISED_ADMIN_USER: _New.UNAUTHORIZED_ACCESS,
    _Old.ESCALATION_OF_RIGHTS: _New.UNAUTHORIZED_ACCESS,
    _Old.DISCLOSED_SECRET: _New.INFORMATION_LEAK,
    _Old.DENIAL_OF_SERVICE: _New.EXCESSIVE_USE,
}

# 4.0 -> 4.1: preset risk values moved to a base-20 scale. Only exact preset
# values are remapped; custom values pass through untouched.
PROBABILITY_PRESETS: dict[float, float] = {
    0.01: 0.0025,
    0.1: 0.05,
    1.0: 1.0,
    50.0: 20.0,
    300.0: 400.0,
}

# NOTE: older documentation listed 1_000_000 -> 32_000_000; 3_200_000 (20**5)
# is the value the table has always used.
CONSEQUENCE_PRESETS: dict[float, float] = {
    1_000.0: 8_000.0,
    30_000.0: 160_000.0,
    1_000_000.0: 3_200_000.0,
    30_000_000.0: 64_000_000.0,
    1_000_000_000.0: 1_280_000_000.0,
}


@dataclass(frozen=True)
class MigrationContext:
    """External inputs a migration step may depend on."""

    last_published: datetime | None = None


@dataclass(frozen=True)
class StepResult:
    """Outcome of applying a single migration step."""

    document: KnownRiSc
    change: MigrationChange | None = None
    changes_made: bool = False
    requires_new_approval: bool = False


MigrationStep = Callable[[Any, MigrationContext], StepResult]


def migrate_32_to_33(document: RiSc3X, context: MigrationContext) -> StepResult:
    """Bump the version; 3.3 is backwards compatible with 3.2."""

    return StepResult(
        document=document.model_copy(
            update={"schema_version": RiScVersion.VERSION_3_3}
        )
    )


def _migrate_vulnerabilities(
    vulnerabilities: list[RiSc3XScenarioVulnerability],
) -> tuple[list[RiScScenarioVulnerability], list[MigrationChangedTypedValue]]:
    """Return de-duplicated 4.0 vulnerabilities and the values that were replaced."""

    migrated: list[RiScScenarioVulnerability] = []
    replaced: list[MigrationChangedTypedValue] = []
    for vulnerability in vulnerabilities:
        replacement = VULNERABILITY_REPLACEMENTS.get(vulnerability)
        if replacement is None:
            replacement = RiScScenarioVulnerability[vulnerability.name]
        else:
            replaced.append(
                MigrationChangedTypedValue(
                    old_value=vulnerability, new_value=replacement
                )
            )
        # Two old values may collapse onto the same new one.
        if replacement not in migrated:
            migrated.append(replacement)
    return migrated, replaced


def _migrate_scenario_33_to_40(
    scenario: RiSc3XScenario,
) -> tuple[RiSc4XScenario, MigrationChange40Scenario | None]:
    vulnerabilities, replaced = _migrate_vulnerabilities(scenario.vulnerabilities)

    actions: list[RiSc4XScenarioAction] = []
    changed_actions: list[MigrationChange40Action] = []
    for action in scenario.actions:
        actions.append(
            RiSc4XScenarioAction(
                title=action.title,
                id=action.id,
                description=action.description,
                url=action.url,
                status=action.status,
            )
        )
        if action.owner or action.deadline:
            changed_actions.append(
                MigrationChange40Action(
                    title=action.title,
                    id=action.id,
                    removed_owner=action.owner or None,
                    removed_deadline=action.deadline or None,
                )
            )

    migrated = RiSc4XScenario(
        title=scenario.title,
        id=scenario.id,
        description=scenario.description,
        url=scenario.url,
        threat_actors=list(scenario.threat_actors),
        vulnerabilities=vulnerabilities,
        risk=scenario.risk,
        remaining_risk=scenario.remaining_risk,
        actions=actions,
    )

    if not (scenario.existing_actions or replaced or changed_actions):
        return migrated, None
    return migrated, MigrationChange40Scenario(
        title=scenario.title,
        id=scenario.id,
        removed_existing_actions=scenario.existing_actions or None,
        changed_vulnerabilities=replaced,
        changed_actions=changed_actions,
    )


def migrate_33_to_40(document: RiSc3X, context: MigrationContext) -> StepResult:
    """Move a 3.3 document onto the 4.0 schema.

    Vulnerabilities are renamed or merged according to
    :data:`VULNERABILITY_REPLACEMENTS`, ``owner`` and ``deadline`` are removed
    from actions and ``existingActions`` is removed from scenarios. The new
    schema is breaking, so the result always requires a new approval even when
    no individual scenario lost data.
    """

    scenarios: list[RiSc4XScenario] = []
    changes: list[MigrationChange40Scenario] = []
    for scenario in document.scenarios:
        migrated, change = _migrate_scenario_33_to_40(scenario)
        scenarios.append(migrated)
        if change is not None:
            changes.append(change)

    migrated_document = RiSc4X(
        schema_version=RiScVersion.VERSION_4_0,
        title=document.title,
        scope=document.scope,
        valuations=document.valuations,
        scenarios=scenarios,
    )
    return StepResult(
        document=migrated_document,
        change=MigrationChange40(scenarios=changes) if changes else None,
        changes_made=True,
        requires_new_approval=True,
    )


def _remap(value: float, presets: dict[float, float]) -> MigrationChangedValue | None:
    new_value = presets.get(value, value)
    if new_value == value:
        return None
    return MigrationChangedValue(old_value=value, new_value=new_value)


def _migrate_scenario_40_to_41(
    scenario: RiSc4XScenario,
) -> tuple[RiSc4XScenario, MigrationChange41Scenario]:
    change = MigrationChange41Scenario(
        title=scenario.title,
        id=scenario.id,
        changed_risk_probability=_remap(
            scenario.risk.probability, PROBABILITY_PRESETS
        ),
        changed_risk_consequence=_remap(
            scenario.risk.consequence, CONSEQUENCE_PRESETS
        ),
        changed_remaining_risk_probability=_remap(
            scenario.remaining_risk.probability, PROBABILITY_PRESETS
        ),
        changed_remaining_risk_consequence=_remap(
            scenario.remaining_risk.consequence, CONSEQUENCE_PRESETS
        ),
    )
    migrated = scenario.model_copy(
        update={
            "risk": _remap_risk(scenario.risk),
            "remaining_risk": _remap_risk(scenario.remaining_risk),
        }
    )
    return migrated, change


def _remap_risk(risk: RiScScenarioRisk) -> RiScScenarioRisk:
    return risk.model_copy(
        update={
            "probability": PROBABILITY_PRESETS.get(risk.probability, risk.probability),
            "consequence": CONSEQUENCE_PRESETS.get(risk.consequence, risk.consequence),
        }
    )


def migrate_40_to_41(document: RiSc4X, context: MigrationContext) -> StepResult:
    """Rescale preset probability and consequence values to the 4.1 scale."""

    scenarios: list[RiSc4XScenario] = []
    changes: list[MigrationChange41Scenario] = []
    for scenario in document.scenarios:
        migrated, change = _migrate_scenario_40_to_41(scenario)
        scenarios.append(migrated)
        if change.has_changes():
            changes.append(change)

    return StepResult(
        document=document.model_copy(
            update={"schema_version": RiScVersion.VERSION_4_1, "scenarios": scenarios}
        ),
        change=MigrationChange41(scenarios=changes) if changes else None,
        changes_made=bool(changes),
        requires_new_approval=bool(changes),
    )


def migrate_41_to_42(document: RiSc4X, context: MigrationContext) -> StepResult:
    """Stamp every action with the time the document was last published.

    Documents that were never published end up without ``lastUpdated``.
    """

    last_published = context.last_published
    scenarios: list[RiSc4XScenario] = []
    changes: list[MigrationChange42Scenario] = []
    for scenario in document.scenarios:
        actions: list[RiSc4XScenarioAction] = []
        changed_actions: list[MigrationChange42Action] = []
        for action in scenario.actions:
            actions.append(action.model_copy(update={"last_updated": last_published}))
            if action.last_updated != last_published:
                changed_actions.append(
                    MigrationChange42Action(
                        title=action.title,
                        id=action.id,
                        changed_last_updated=MigrationChangedValue(
                            old_value=action.last_updated, new_value=last_published
                        ),
                    )
                )
        scenarios.append(scenario.model_copy(update={"actions": actions}))
        if changed_actions:
            changes.append(
                MigrationChange42Scenario(
                    title=scenario.title,
                    id=scenario.id,
                    changed_actions=changed_actions,
                )
            )

    return StepResult(
        document=document.model_copy(
            update={"schema_version": RiScVersion.VERSION_4_2, "scenarios": scenarios}
        ),
        change=MigrationChange42(scenarios=changes) if changes else None,
        changes_made=bool(changes),
    )


# Keyed by the version a step migrates from. 4.2 -> 5.0 has no step yet, so
# 4.2 and every 5.X version are terminal.
MIGRATION_STEPS: dict[RiScVersion, MigrationStep] = {
    RiScVersion.VERSION_3_2: migrate_32_to_33,
    RiScVersion.VERSION_3_3: migrate_33_to_40,
    RiScVersion.VERSION_4_0: migrate_40_to_41,
    RiScVersion.VERSION_4_1: migrate_41_to_42,
}

STEP_TARGETS: dict[RiScVersion, RiScVersion] = {
    RiScVersion.VERSION_3_2: RiScVersion.VERSION_3_3,
    RiScVersion.VERSION_3_3: RiScVersion.VERSION_4_0,
    RiScVersion.VERSION_4_0: RiScVersion.VERSION_4_1,
    RiScVersion.VERSION_4_1: RiScVersion.VERSION_4_2,
}


__all__ = [
    "VULNERABILITY_REPLACEMENTS",
    "PROBABILITY_PRESETS",
    "CONSEQUENCE_PRESETS",
    "MigrationContext",
    "StepResult",
    "MigrationStep",
    "migrate_32_to_33",
    "migrate_33_to_40",
    "migrate_40_to_41",
    "migrate_41_to_42",
    "MIGRATION_STEPS",
    "STEP_TARGETS",
]
