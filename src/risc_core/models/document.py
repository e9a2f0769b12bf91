# SPDX-License-Identifier: MIT
"""Pydantic models describing risk scorecard (RiSc) documents.

One model exists per schema family: :class:`RiSc3X` covers ``3.2`` and
``3.3``, :class:`RiSc4X` covers ``4.0`` to ``4.2`` and :class:`RiSc5X` covers
``5.0`` to ``5.3``. Documents that cannot be read into one of these are
wrapped in :class:`UnknownRiSc`, which takes part in neither migration nor
comparison.

On the wire every key is camelCase and each scenario and action keeps its
title at the top level with the remaining fields nested under ``scenario`` or
``action`` respectively::

    {"title": "...", "scenario": {"ID": "...", "description": "...", ...}}

The models accept that layout and emit it again when dumped.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .version import RiScVersion, VersionFamily


class DocumentModel(BaseModel):
    """Immutable base model using the camelCase wire names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        """Drop absent optional fields so the output mirrors the input."""

        data = handler(self)
        if not isinstance(data, dict):
            return data
        return self._wire_layout(
            {key: value for key, value in data.items() if value is not None}
        )

    def _wire_layout(self, data: dict[str, Any]) -> dict[str, Any]:
        return data


class NestedEntry(DocumentModel):
    """Entry stored as ``{"title": ..., "<key>": {...}}`` on the wire."""

    nested_key: ClassVar[str]

    @model_validator(mode="before")
    @classmethod
    def _unnest(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get(cls.nested_key), dict):
            return {"title": data.get("title"), **data[cls.nested_key]}
        return data

    def _wire_layout(self, data: dict[str, Any]) -> dict[str, Any]:
        title = data.pop("title", None)
        return {"title": title, self.nested_key: data}


# ---------------------------------------------------------------------------
# Enumerations


class RiScValuationConfidentiality(str, Enum):
    PUBLIC = "Public"
    INTERNAL = "Internal"
    CONFIDENTIAL = "Confidential"
    STRICTLY_CONFIDENTIAL = "Strictly confidential"


class RiScValuationIntegrity(str, Enum):
    INSIGNIFICANT = "Insignificant"
    EXPECTED = "Expected"
    DEPENDENT = "Dependent"
    CRITICAL = "Critical"


class RiScValuationAvailability(str, Enum):
    INSIGNIFICANT = "Insignificant"
    TWO_DAYS = "2 days"
    FOUR_HOURS = "4 hours"
    IMMEDIATE = "Immediate"


class RiScScenarioThreatActor(str, Enum):
    SCRIPT_KIDDIE = "Script kiddie"
    HACKTIVIST = "Hacktivist"
    RECKLESS_EMPLOYEE = "Reckless employee"
    INSIDER = "Insider"
    ORGANISED_CRIME = "Organised crime"
    TERRORIST_ORGANISATION = "Terrorist organisation"
    NATION_OR_GOVERNMENT = "Nation/government"


class RiSc3XScenarioVulnerability(str, Enum):
    """Vulnerability categories used before schema 4.0."""

    COMPROMISED_ADMIN_USER = "Compromised admin user"
    DEPENDENCY_VULNERABILITY = "Dependency vulnerability"
    DISCLOSED_SECRET = "Disclosed secret"
    MISCONFIGURATION = "Misconfiguration"
    INPUT_TAMPERING = "Input tampering"
    USER_REPUDIATION = "User repudiation"
    INFORMATION_LEAK = "Information leak"
    DENIAL_OF_SERVICE = "Denial of service"
    ESCALATION_OF_RIGHTS = "Escalation of rights"


class RiScScenarioVulnerability(str, Enum):
    """Vulnerability categories used from schema 4.0 onwards."""

    FLAWED_DESIGN = "Flawed design"
    MISCONFIGURATION = "Misconfiguration"
    DEPENDENCY_VULNERABILITY = "Dependency vulnerability"
    UNAUTHORIZED_ACCESS = "Unauthorized access"
    UNMONITORED_USE = "Unmonitored use"
    INPUT_TAMPERING = "Input tampering"
    INFORMATION_LEAK = "Information leak"
    EXCESSIVE_USE = "Excessive use"


class RiSc3X4XScenarioActionStatus(str, Enum):
    NOT_STARTED = "Not started"
    IN_PROGRESS = "In progress"
    ON_HOLD = "On hold"
    COMPLETED = "Completed"
    ABORTED = "Aborted"


class RiScScenarioActionStatus(str, Enum):
    """Action status values introduced with schema 5.0."""

    OK = "OK"
    NOT_OK = "Not OK"
    NOT_RELEVANT = "Not relevant"


# ---------------------------------------------------------------------------
# Shared value objects


class RiScValuation(DocumentModel):
    """Valuation of an asset. Valuations carry no identity key."""

    description: str
    confidentiality: RiScValuationConfidentiality
    integrity: RiScValuationIntegrity
    availability: RiScValuationAvailability


class RiScScenarioRisk(DocumentModel):
    """Probability and consequence of a scenario, before or after actions."""

    summary: str | None = None
    probability: float
    consequence: float


# ---------------------------------------------------------------------------
# Version 3.X


class RiSc3XScenarioAction(NestedEntry):
    nested_key: ClassVar[str] = "action"

    title: str
    id: str = Field(alias="ID")
    description: str
    url: str | None = None
    status: RiSc3X4XScenarioActionStatus
    deadline: str | None = None
    owner: str | None = None


class RiSc3XScenario(NestedEntry):
    nested_key: ClassVar[str] = "scenario"

    title: str
    id: str = Field(alias="ID")
    description: str
    url: str | None = None
    threat_actors: list[RiScScenarioThreatActor]
    vulnerabilities: list[RiSc3XScenarioVulnerability]
    risk: RiScScenarioRisk
    remaining_risk: RiScScenarioRisk
    actions: list[RiSc3XScenarioAction]
    existing_actions: str | None = None


# ---------------------------------------------------------------------------
# Version 4.X


class RiSc4XScenarioAction(NestedEntry):
    nested_key: ClassVar[str] = "action"

    title: str
    id: str = Field(alias="ID")
    description: str
    url: str | None = None
    status: RiSc3X4XScenarioActionStatus
    last_updated: datetime | None = None


class RiSc4XScenario(NestedEntry):
    nested_key: ClassVar[str] = "scenario"

    title: str
    id: str = Field(alias="ID")
    description: str
    url: str | None = None
    threat_actors: list[RiScScenarioThreatActor]
    vulnerabilities: list[RiScScenarioVulnerability]
    risk: RiScScenarioRisk
    remaining_risk: RiScScenarioRisk
    actions: list[RiSc4XScenarioAction]


# ---------------------------------------------------------------------------
# Version 5.X


class RiSc5XScenarioAction(NestedEntry):
    nested_key: ClassVar[str] = "action"

    title: str
    id: str = Field(alias="ID")
    description: str
    url: str | None = None
    status: RiScScenarioActionStatus
    last_updated: datetime | None = None
    last_updated_by: str | None = None


class RiSc5XScenario(NestedEntry):
    nested_key: ClassVar[str] = "scenario"

    title: str
    id: str = Field(alias="ID")
    description: str
    url: str | None = None
    threat_actors: list[RiScScenarioThreatActor]
    vulnerabilities: list[RiScScenarioVulnerability]
    risk: RiScScenarioRisk
    remaining_risk: RiScScenarioRisk
    actions: list[RiSc5XScenarioAction]


class RiSc5XMetadataUnencrypted(DocumentModel):
    belongs_to: str | None = None


# ---------------------------------------------------------------------------
# Documents


class RiScDocument(DocumentModel):
    """Fields shared by every known document family."""

    family: ClassVar[VersionFamily] = VersionFamily.V3X

    schema_version: RiScVersion
    title: str
    scope: str | None = None
    valuations: list[RiScValuation] | None = None

    @model_validator(mode="after")
    def _check_family(self) -> RiScDocument:
        """Reject versions that belong to another document family."""

        if self.schema_version.family is not self.family:
            raise ValueError(
                f"schemaVersion {self.schema_version.value} is not a "
                f"{self.family.value} version"
            )
        return self


class RiSc3X(RiScDocument):
    """Document of schema version 3.2 or 3.3."""

    family: ClassVar[VersionFamily] = VersionFamily.V3X
    scenarios: list[RiSc3XScenario]


class RiSc4X(RiScDocument):
    """Document of schema version 4.0, 4.1 or 4.2."""

    family: ClassVar[VersionFamily] = VersionFamily.V4X
    scenarios: list[RiSc4XScenario]


class RiSc5X(RiScDocument):
    """Document of schema version 5.0 to 5.3."""

    family: ClassVar[VersionFamily] = VersionFamily.V5X
    scenarios: list[RiSc5XScenario]
    metadata_unencrypted: RiSc5XMetadataUnencrypted | None = Field(
        default=None, alias="metadata_unencrypted"
    )


class UnknownRiSc(BaseModel):
    """Payload whose schema version is missing, unsupported or invalid."""

    model_config = ConfigDict(frozen=True)

    content: str | None = None

    @property
    def schema_version(self) -> None:
        return None


KnownRiSc = Union[RiSc3X, RiSc4X, RiSc5X]
RiSc = Union[RiSc3X, RiSc4X, RiSc5X, UnknownRiSc]

DOCUMENT_TYPES: dict[VersionFamily, type[RiScDocument]] = {
    VersionFamily.V3X: RiSc3X,
    VersionFamily.V4X: RiSc4X,
    VersionFamily.V5X: RiSc5X,
}


__all__ = [
    "RiScValuationConfidentiality",
    "RiScValuationIntegrity",
    "RiScValuationAvailability",
    "RiScScenarioThreatActor",
    "RiSc3XScenarioVulnerability",
    "RiScScenarioVulnerability",
    "RiSc3X4XScenarioActionStatus",
    "RiScScenarioActionStatus",
    "RiScValuation",
    "RiScScenarioRisk",
    "RiSc3XScenarioAction",
    "RiSc3XScenario",
    "RiSc4XScenarioAction",
    "RiSc4XScenario",
    "RiSc5XScenarioAction",
    "RiSc5XScenario",
    "RiSc5XMetadataUnencrypted",
    "RiScDocument",
    "RiSc3X",
    "RiSc4X",
    "RiSc5X",
    "UnknownRiSc",
    "KnownRiSc",
    "RiSc",
    "DOCUMENT_TYPES",
]
