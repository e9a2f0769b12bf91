# SPDX-License-Identifier: MIT
"""Models for migration change logs and field-level comparison results.

A :class:`MigrationStatus` records what upgrading an old document did to it,
while the ``*Change`` models describe the differences between two documents
of the same schema version. Both serialise to camelCase JSON so they can be
returned from an API or stored as an audit trail unchanged.

Comparison results are built from five tracked property variants, tagged by
``type`` when serialised:

* ``ADDED`` and ``DELETED`` carry the whole value that appeared or vanished.
* ``CHANGED`` carries the old and new value of a scalar field.
* ``CONTENT_CHANGED`` wraps a nested change record for a composite value.
* ``UNCHANGED`` carries a value that is reported for context only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from .version import VersionFamily

T = TypeVar("T")
S = TypeVar("S")


class ReportModel(BaseModel):
    """Immutable base model with camelCase aliases for output."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ChangeRecord(ReportModel):
    """Change record whose untracked optional fields are left out of the output."""

    @model_serializer(mode="wrap")
    def _omit_untracked(self, handler: Any) -> Any:
        data = handler(self)
        if not isinstance(data, dict):
            return data
        return {key: value for key, value in data.items() if value is not None}


# ---------------------------------------------------------------------------
# Tracked properties


class AddedProperty(ReportModel, Generic[T]):
    """A value that exists only in the updated document."""

    type: Literal["ADDED"] = "ADDED"
    new_value: T


class DeletedProperty(ReportModel, Generic[T]):
    """A value that exists only in the old document."""

    type: Literal["DELETED"] = "DELETED"
    old_value: T


class ChangedProperty(ReportModel, Generic[T]):
    """A scalar value that differs between the two documents."""

    type: Literal["CHANGED"] = "CHANGED"
    old_value: T | None = None
    new_value: T | None = None


class ContentChangedProperty(ReportModel, Generic[S]):
    """A composite value whose sub-fields were compared individually."""

    type: Literal["CONTENT_CHANGED"] = "CONTENT_CHANGED"
    value: S


class UnchangedProperty(ReportModel, Generic[T]):
    """A value that is equal in both documents, kept for context."""

    type: Literal["UNCHANGED"] = "UNCHANGED"
    value: T


TrackedProperty = Union[
    AddedProperty,
    DeletedProperty,
    ChangedProperty,
    ContentChangedProperty,
    UnchangedProperty,
]


# ---------------------------------------------------------------------------
# Migration change log


class MigrationChangedValue(ReportModel, Generic[T]):
    old_value: T
    new_value: T


class MigrationChangedTypedValue(ReportModel, Generic[S, T]):
    """Value changed between two differently typed enumerations."""

    old_value: S
    new_value: T


class MigrationChange40Action(ChangeRecord):
    title: str
    id: str
    removed_owner: str | None = None
    removed_deadline: str | None = None


class MigrationChange40Scenario(ChangeRecord):
    title: str
    id: str
    removed_existing_actions: str | None = None
    changed_vulnerabilities: list[MigrationChangedTypedValue] = Field(
        default_factory=list
    )
    changed_actions: list[MigrationChange40Action] = Field(default_factory=list)


class MigrationChange40(ReportModel):
    """Changes made by the 3.3 to 4.0 migration."""

    scenarios: list[MigrationChange40Scenario]


class MigrationChange41Scenario(ChangeRecord):
    title: str
    id: str
    changed_risk_probability: MigrationChangedValue | None = None
    changed_risk_consequence: MigrationChangedValue | None = None
    changed_remaining_risk_probability: MigrationChangedValue | None = None
    changed_remaining_risk_consequence: MigrationChangedValue | None = None

    def has_changes(self) -> bool:
        return any(
            value is not None
            for value in (
                self.changed_risk_probability,
                self.changed_risk_consequence,
                self.changed_remaining_risk_probability,
                self.changed_remaining_risk_consequence,
            )
        )


class MigrationChange41(ReportModel):
    """Changes made by the 4.0 to 4.1 migration."""

    scenarios: list[MigrationChange41Scenario]


class MigrationChange42Action(ReportModel):
    title: str
    id: str
    changed_last_updated: MigrationChangedValue


class MigrationChange42Scenario(ReportModel):
    title: str
    id: str
    changed_actions: list[MigrationChange42Action]


class MigrationChange42(ReportModel):
    """Changes made by the 4.1 to 4.2 migration."""

    scenarios: list[MigrationChange42Scenario]


MigrationChange = Union[MigrationChange40, MigrationChange41, MigrationChange42]


class MigrationVersions(ReportModel):
    from_version: str | None = None
    to_version: str | None = None


class MigrationStatus(ChangeRecord):
    """Accumulated outcome of migrating a document between versions."""

    migration_changes: bool = False
    migration_requires_new_approval: bool = False
    migration_versions: MigrationVersions = Field(default_factory=MigrationVersions)
    migration_change40: MigrationChange40 | None = None
    migration_change41: MigrationChange41 | None = None
    migration_change42: MigrationChange42 | None = None


# ---------------------------------------------------------------------------
# Comparison results


class RiScScenarioRiskChange(ChangeRecord):
    summary: TrackedProperty | None = None
    probability: TrackedProperty
    consequence: TrackedProperty


class RiSc3XScenarioActionChange(ChangeRecord):
    title: TrackedProperty
    # The id never changes
    id: str
    description: TrackedProperty
    url: TrackedProperty | None = None
    status: TrackedProperty | None = None
    deadline: TrackedProperty | None = None
    owner: TrackedProperty | None = None


class RiSc3XScenarioChange(ChangeRecord):
    title: TrackedProperty
    id: str
    description: TrackedProperty
    url: TrackedProperty | None = None
    threat_actors: list[TrackedProperty]
    vulnerabilities: list[TrackedProperty]
    risk: TrackedProperty
    remaining_risk: TrackedProperty
    actions: list[TrackedProperty]
    existing_actions: TrackedProperty | None = None


class RiSc4XScenarioActionChange(ChangeRecord):
    title: TrackedProperty
    id: str
    description: TrackedProperty
    url: TrackedProperty | None = None
    status: TrackedProperty | None = None
    last_updated: TrackedProperty | None = None


class RiSc4XScenarioChange(ChangeRecord):
    title: TrackedProperty
    id: str
    description: TrackedProperty
    url: TrackedProperty | None = None
    threat_actors: list[TrackedProperty]
    vulnerabilities: list[TrackedProperty]
    risk: TrackedProperty
    remaining_risk: TrackedProperty
    actions: list[TrackedProperty]


class RiSc5XScenarioActionChange(RiSc4XScenarioActionChange):
    last_updated_by: TrackedProperty | None = None


class RiSc5XScenarioChange(RiSc4XScenarioChange):
    pass


class RiScChange(ChangeRecord):
    """Differences between two documents plus the migration that preceded them."""

    schema_family: VersionFamily
    title: TrackedProperty | None = None
    scope: TrackedProperty | None = None
    valuations: list[TrackedProperty]
    scenarios: list[TrackedProperty]
    migration_changes: MigrationStatus

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible representation of the report."""

        return self.model_dump(mode="json", by_alias=True)


class RiSc3XChange(RiScChange):
    schema_family: VersionFamily = VersionFamily.V3X


class RiSc4XChange(RiScChange):
    schema_family: VersionFamily = VersionFamily.V4X


class RiSc5XChange(RiScChange):
    schema_family: VersionFamily = VersionFamily.V5X


VersionedChange = Union[RiSc3XChange, RiSc4XChange, RiSc5XChange]


__all__ = [
    "AddedProperty",
    "DeletedProperty",
    "ChangedProperty",
    "ContentChangedProperty",
    "UnchangedProperty",
    "TrackedProperty",
    "MigrationChangedValue",
    "MigrationChangedTypedValue",
    "MigrationChange40Action",
    "MigrationChange40Scenario",
    "MigrationChange40",
    "MigrationChange41Scenario",
    "MigrationChange41",
    "MigrationChange42Action",
    "MigrationChange42Scenario",
    "MigrationChange42",
    "MigrationChange",
    "MigrationVersions",
    "MigrationStatus",
    "RiScScenarioRiskChange",
    "RiSc3XScenarioActionChange",
    "RiSc3XScenarioChange",
    "RiSc4XScenarioActionChange",
    "RiSc4XScenarioChange",
    "RiSc5XScenarioActionChange",
    "RiSc5XScenarioChange",
    "RiScChange",
    "RiSc3XChange",
    "RiSc4XChange",
    "RiSc5XChange",
    "VersionedChange",
]
