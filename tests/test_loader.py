# SPDX-License-Identifier: MIT
"""Tests for document parsing, serialisation and config loading."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from risc_core.io_utils.loader import (
    load_app_config,
    parse_document,
    parse_raw,
    serialize_document,
)
from risc_core.models import (
    RiSc3X,
    RiSc4X,
    RiSc5X,
    RiSc3XScenarioVulnerability,
    RiScVersion,
    UnknownRiSc,
)
from risc_core.utils import CollectingErrorHandler


def test_parse_raw_prefers_json_and_falls_back_to_yaml() -> None:
    assert parse_raw('{"a": [1, 2]}') == {"a": [1, 2]}
    assert parse_raw("a:\n  - 1\n  - 2\n") == {"a": [1, 2]}
    with pytest.raises(ValueError):
        parse_raw("a: [1,")


def test_parse_document_reads_nested_wire_layout(risc_32_payload) -> None:
    document = parse_document(json.dumps(risc_32_payload))

    assert isinstance(document, RiSc3X)
    assert document.schema_version is RiScVersion.VERSION_3_2
    scenario = document.scenarios[0]
    assert scenario.id == "s1"
    assert scenario.title == "Scenario s1"
    assert scenario.existing_actions == "Firewall in place"
    assert scenario.vulnerabilities[0] is (
        RiSc3XScenarioVulnerability.COMPROMISED_ADMIN_USER
    )
    assert scenario.actions[0].owner == "Kari"


def test_parse_document_dispatches_on_family(payload_factory) -> None:
    assert isinstance(parse_document(json.dumps(payload_factory("4.1"))), RiSc4X)
    assert isinstance(
        parse_document(yaml.safe_dump(payload_factory("5.2"))), RiSc5X
    )


def test_unquoted_yaml_version_is_read_as_text() -> None:
    document = parse_document("schemaVersion: 4.1\ntitle: t\nscenarios: []\n")

    assert isinstance(document, RiSc4X)
    assert document.schema_version is RiScVersion.VERSION_4_1
    assert json.loads(serialize_document(document))["schemaVersion"] == "4.1"


def test_numeric_version_outside_supported_set_is_unknown() -> None:
    handler = CollectingErrorHandler()

    document = parse_document("schemaVersion: 4\ntitle: t\nscenarios: []\n", handler)

    assert isinstance(document, UnknownRiSc)
    assert handler.messages == ["Unsupported RiSc schema version: '4'"]


def test_serialised_document_matches_input(risc_32_payload) -> None:
    """Dumping restores the nested layout and omits absent optional fields."""

    document = parse_document(json.dumps(risc_32_payload))

    assert json.loads(serialize_document(document)) == risc_32_payload


def test_serialised_datetimes_are_iso_strings(
    payload_factory, make_scenario, make_action
) -> None:
    stamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
    payload = payload_factory(
        "4.2",
        [
            make_scenario(
                "s1", actions=[make_action("a1", lastUpdated=stamp.isoformat())]
            )
        ],
    )

    data = json.loads(serialize_document(parse_document(json.dumps(payload))))

    action = data["scenarios"][0]["scenario"]["actions"][0]["action"]
    assert datetime.fromisoformat(action["lastUpdated"].replace("Z", "+00:00")) == stamp


def test_5x_metadata_keeps_snake_case_key(payload_factory) -> None:
    payload = payload_factory("5.0", metadata_unencrypted={"belongsTo": "team-a"})

    document = parse_document(json.dumps(payload))

    assert document.metadata_unencrypted.belongs_to == "team-a"
    assert json.loads(serialize_document(document))["metadata_unencrypted"] == {
        "belongsTo": "team-a"
    }


@pytest.mark.parametrize(
    "text",
    [
        None,
        "",
        "[1, 2]",
        "a: [1,",
        '{"title": "no version"}',
        '{"schemaVersion": "9.9", "title": "x", "scenarios": []}',
        '{"schemaVersion": "4.1", "title": "x"}',
    ],
)
def test_unreadable_content_becomes_unknown(text: str | None) -> None:
    handler = CollectingErrorHandler()

    document = parse_document(text, error_handler=handler)

    assert isinstance(document, UnknownRiSc)
    assert document.content == text
    assert document.schema_version is None
    if text is not None:
        assert handler.messages


def test_family_mismatch_is_rejected(payload_factory) -> None:
    """A document model only accepts versions of its own family."""

    with pytest.raises(ValueError):
        RiSc4X.model_validate(payload_factory("3.3"))
    with pytest.raises(ValueError):
        RiSc3X.model_validate(payload_factory("5.0"))


def test_serialising_unknown_document_fails() -> None:
    with pytest.raises(TypeError):
        serialize_document(UnknownRiSc(content="{}"))


def test_error_handler_receives_parse_failures() -> None:
    handler = CollectingErrorHandler()

    parse_document("a: [1,", error_handler=handler)

    assert len(handler.messages) == 1
    assert handler.messages[0].startswith("Unable to parse RiSc content: ")


def test_load_app_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "app.yaml"
    path.write_text(
        "log_level: DEBUG\nlatest_supported_version: '4.1'\n", encoding="utf-8"
    )

    config = load_app_config(tmp_path, "app.yaml")

    assert config.log_level == "DEBUG"
    assert config.latest_supported_version == "4.1"
    assert config.diagnostics is False


def test_load_app_config_missing_file_uses_defaults(tmp_path: Path) -> None:
    config = load_app_config(tmp_path, "absent.yaml")

    assert config.latest_supported_version == "4.2"


@pytest.mark.parametrize(
    "content", ["latest_supported_version: '2.0'\n", "unknown_key: 1\n"]
)
def test_load_app_config_rejects_invalid_values(tmp_path: Path, content: str) -> None:
    path = tmp_path / "app.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(RuntimeError):
        load_app_config(tmp_path, "app.yaml")
