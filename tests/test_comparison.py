# SPDX-License-Identifier: MIT
"""Tests for the structural comparator."""

from __future__ import annotations

import pytest

from risc_core.comparison import compare
from risc_core.comparison.tracking import (
    EmitPolicy,
    track_keyed_list,
    track_mandatory,
    track_value,
    track_value_list,
)
from risc_core.exceptions import UnsupportedComparisonError
from risc_core.models import (
    AddedProperty,
    ChangedProperty,
    ContentChangedProperty,
    DeletedProperty,
    RiSc3X,
    RiSc3XChange,
    RiSc4X,
    RiSc4XChange,
    RiSc5X,
    RiSc5XChange,
    UnchangedProperty,
    UnknownRiSc,
    VersionFamily,
)


def test_track_value_policies() -> None:
    assert track_value("a", "a", EmitPolicy.ON_CHANGE) is None
    assert track_value("a", "a", EmitPolicy.ALWAYS) == UnchangedProperty(value="a")
    assert track_value("a", "b", EmitPolicy.ON_CHANGE) == ChangedProperty(
        old_value="a", new_value="b"
    )


def test_track_mandatory_always_reports() -> None:
    assert track_mandatory(1, 1) == UnchangedProperty(value=1)
    assert track_mandatory(1, 2) == ChangedProperty(old_value=1, new_value=2)


def test_track_value_list_reports_membership_changes() -> None:
    result = track_value_list(["x", "y"], ["y", "z"])

    assert result == [DeletedProperty(old_value="x"), AddedProperty(new_value="z")]


def test_track_keyed_list_orders_deletions_changes_additions() -> None:
    old = [("a", 1), ("b", 1), ("d", 1)]
    new = [("c", 1), ("d", 1), ("b", 2)]

    result = track_keyed_list(
        old, new, key=lambda item: item[0], content_diff=lambda o, n: (o[1], n[1])
    )

    assert result == [
        DeletedProperty(old_value=("a", 1)),
        ContentChangedProperty(value=(1, 2)),
        AddedProperty(new_value=("c", 1)),
    ]


def test_keyed_scenarios_are_matched_by_id(payload_factory, make_scenario) -> None:
    old = RiSc4X.model_validate(
        payload_factory("4.2", [make_scenario("a"), make_scenario("b")])
    )
    updated = RiSc4X.model_validate(
        payload_factory(
            "4.2",
            [make_scenario("b", description="Rewritten"), make_scenario("c")],
        )
    )

    change = compare(updated, old)

    assert isinstance(change, RiSc4XChange)
    deleted, changed, added = change.scenarios
    assert isinstance(deleted, DeletedProperty)
    assert deleted.old_value.id == "a"
    assert isinstance(changed, ContentChangedProperty)
    assert changed.value.id == "b"
    assert changed.value.description == ChangedProperty(
        old_value="Scenario b", new_value="Rewritten"
    )
    assert changed.value.title == UnchangedProperty(value="Scenario b")
    assert changed.value.url is None
    assert isinstance(added, AddedProperty)
    assert added.new_value.id == "c"


def test_identical_documents_have_no_changes(payload_factory) -> None:
    document = RiSc4X.model_validate(payload_factory("4.2"))

    change = compare(document, document)

    assert change.title is None
    assert change.scope is None
    assert change.valuations == []
    assert change.scenarios == []


def test_3x_reports_unchanged_title_and_scope(payload_factory) -> None:
    document = RiSc3X.model_validate(payload_factory("3.3"))

    change = compare(document, document)

    assert isinstance(change, RiSc3XChange)
    assert change.title == UnchangedProperty(value="Payments")
    assert change.scope == UnchangedProperty(value="Payment processing")


def test_4x_reports_changed_title_only(payload_factory) -> None:
    old = RiSc4X.model_validate(payload_factory("4.1"))
    updated = RiSc4X.model_validate(payload_factory("4.1", title="Payments v2"))

    change = compare(updated, old)

    assert change.title == ChangedProperty(
        old_value="Payments", new_value="Payments v2"
    )
    assert change.scope is None


def test_risk_is_always_content_changed(payload_factory, make_scenario) -> None:
    old = RiSc4X.model_validate(payload_factory("4.2", [make_scenario("s1")]))
    updated = RiSc4X.model_validate(
        payload_factory(
            "4.2",
            [
                make_scenario(
                    "s1",
                    risk={"summary": "", "probability": 0.1, "consequence": 64_000_000},
                )
            ],
        )
    )

    scenario = compare(updated, old).scenarios[0].value

    assert isinstance(scenario.risk, ContentChangedProperty)
    assert scenario.risk.value.probability == UnchangedProperty(value=0.1)
    assert scenario.risk.value.consequence == ChangedProperty(
        old_value=30000, new_value=64_000_000
    )
    assert scenario.risk.value.summary is None
    assert isinstance(scenario.remaining_risk, ContentChangedProperty)
    assert scenario.remaining_risk.value.consequence == UnchangedProperty(value=1000)


def test_actions_are_diffed_inside_scenarios(
    payload_factory, make_scenario, make_action
) -> None:
    old = RiSc4X.model_validate(
        payload_factory(
            "4.2",
            [make_scenario("s1", actions=[make_action("a1"), make_action("a2")])],
        )
    )
    updated = RiSc4X.model_validate(
        payload_factory(
            "4.2",
            [
                make_scenario(
                    "s1",
                    actions=[make_action("a1", status="Completed"), make_action("a2")],
                )
            ],
        )
    )

    scenario = compare(updated, old).scenarios[0].value

    assert len(scenario.actions) == 1
    action = scenario.actions[0].value
    assert action.id == "a1"
    assert action.status.old_value.value == "Not started"
    assert action.status.new_value.value == "Completed"
    assert action.url is None
    assert action.last_updated is None


def test_3x_actions_track_owner_and_deadline(
    payload_factory, make_scenario, make_action
) -> None:
    old = RiSc3X.model_validate(
        payload_factory("3.3", [make_scenario("s1", actions=[make_action("a1")])])
    )
    updated = RiSc3X.model_validate(
        payload_factory(
            "3.3", [make_scenario("s1", actions=[make_action("a1", owner="Ola")])]
        )
    )

    action = compare(updated, old).scenarios[0].value.actions[0].value

    assert action.owner == ChangedProperty(old_value=None, new_value="Ola")
    assert action.deadline is None


def test_5x_actions_track_last_updated_by(
    payload_factory, make_scenario, make_action
) -> None:
    def document(by: str) -> RiSc5X:
        return RiSc5X.model_validate(
            payload_factory(
                "5.1",
                [
                    make_scenario(
                        "s1",
                        actions=[make_action("a1", status="OK", lastUpdatedBy=by)],
                    )
                ],
            )
        )

    change = compare(document("kari"), document("ola"))

    assert isinstance(change, RiSc5XChange)
    action = change.scenarios[0].value.actions[0].value
    assert action.last_updated_by == ChangedProperty(old_value="ola", new_value="kari")


def test_old_document_is_migrated_first(risc_32_payload, payload_factory) -> None:
    old = RiSc3X.model_validate(risc_32_payload)
    updated = RiSc4X.model_validate(payload_factory("4.1"))

    change = compare(updated, old)

    status = change.migration_changes
    assert status.migration_changes
    assert status.migration_requires_new_approval
    assert status.migration_versions.from_version == "3.2"
    assert status.migration_versions.to_version == "4.1"
    assert status.migration_change40 is not None
    # s2 only exists in the old document
    assert [type(item) for item in change.scenarios] == [
        DeletedProperty,
        ContentChangedProperty,
    ]


def test_valuation_changes(payload_factory) -> None:
    old = RiSc4X.model_validate(payload_factory("4.2"))
    updated = RiSc4X.model_validate(payload_factory("4.2", valuations=None))

    change = compare(updated, old)

    assert len(change.valuations) == 1
    assert isinstance(change.valuations[0], DeletedProperty)


def test_unknown_documents_are_rejected(payload_factory) -> None:
    known = RiSc4X.model_validate(payload_factory("4.2"))

    with pytest.raises(UnsupportedComparisonError):
        compare(UnknownRiSc(content=None), known)
    with pytest.raises(UnsupportedComparisonError):
        compare(known, UnknownRiSc(content="{}"))


def test_newer_old_document_is_rejected(payload_factory) -> None:
    old = RiSc4X.model_validate(payload_factory("4.2"))
    updated = RiSc4X.model_validate(payload_factory("4.0"))

    with pytest.raises(UnsupportedComparisonError):
        compare(updated, old)


def test_report_payload_is_tagged(payload_factory, make_scenario) -> None:
    old = RiSc4X.model_validate(payload_factory("4.2", [make_scenario("a")]))
    updated = RiSc4X.model_validate(
        payload_factory("4.2", [make_scenario("a", url="https://example.org")])
    )

    payload = compare(updated, old).to_payload()

    assert payload["schemaFamily"] == VersionFamily.V4X.value
    assert "title" not in payload
    scenario = payload["scenarios"][0]
    assert scenario["type"] == "CONTENT_CHANGED"
    assert scenario["value"]["url"] == {
        "type": "CHANGED",
        "oldValue": None,
        "newValue": "https://example.org",
    }
    assert scenario["value"]["risk"]["value"]["probability"] == {
        "type": "UNCHANGED",
        "value": 0.1,
    }
    assert payload["migrationChanges"]["migrationChanges"] is False
