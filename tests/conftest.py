# SPDX-License-Identifier: MIT
"""Test configuration for risc-core.

Keeps Logfire local and provides wire-format RiSc payloads shared by the
migration, comparison and loader tests.
"""

from __future__ import annotations

import copy
import os
from typing import Any, Callable

import logfire
import pytest

from risc_core.io_utils import loader

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Ensure cached application config does not leak between tests."""

    loader.load_app_config.cache_clear()
    yield
    loader.load_app_config.cache_clear()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Drop ``RISC_`` variables from the developer environment."""

    for key in list(os.environ):
        if key.upper().startswith("RISC_"):
            monkeypatch.delenv(key, raising=False)


def action_payload(action_id: str, **fields: Any) -> dict[str, Any]:
    """Return an action in the nested wire layout."""

    body = {
        "ID": action_id,
        "description": f"Action {action_id}",
        "status": "Not started",
    }
    title = fields.pop("title", f"Action {action_id}")
    body.update(fields)
    return {"title": title, "action": body}


def scenario_payload(scenario_id: str, **fields: Any) -> dict[str, Any]:
    """Return a scenario in the nested wire layout."""

    body = {
        "ID": scenario_id,
        "description": f"Scenario {scenario_id}",
        "threatActors": ["Script kiddie"],
        "vulnerabilities": ["Misconfiguration"],
        "risk": {"summary": "", "probability": 0.1, "consequence": 30000},
        "remainingRisk": {"summary": "", "probability": 0.01, "consequence": 1000},
        "actions": [],
    }
    title = fields.pop("title", f"Scenario {scenario_id}")
    body.update(fields)
    return {"title": title, "scenario": body}


def document_payload(version: str, scenarios: list[dict[str, Any]], **fields: Any):
    """Return a document payload of ``version``."""

    data = {
        "schemaVersion": version,
        "title": "Payments",
        "scope": "Payment processing",
        "valuations": [
            {
                "description": "Card data",
                "confidentiality": "Confidential",
                "integrity": "Critical",
                "availability": "4 hours",
            }
        ],
        "scenarios": scenarios,
    }
    data.update(fields)
    return data


@pytest.fixture()
def risc_32_payload() -> dict[str, Any]:
    """A 3.2 document exercising every 3.3 to 4.0 change."""

    return document_payload(
        "3.2",
        [
            scenario_payload(
                "s1",
                vulnerabilities=[
                    "Compromised admin user",
                    "Escalation of rights",
                    "Misconfiguration",
                ],
                existingActions="Firewall in place",
                actions=[
                    action_payload("a1", owner="Kari", deadline="2024-01-01"),
                    action_payload("a2"),
                ],
            ),
            scenario_payload(
                "s2",
                risk={"probability": 1234.5, "consequence": 77},
                remainingRisk={"probability": 1234.5, "consequence": 77},
            ),
        ],
    )


@pytest.fixture()
def payload_factory() -> Callable[..., dict[str, Any]]:
    """Return :func:`document_payload` for tests building their own documents."""

    def build(version: str, scenarios=None, **fields: Any) -> dict[str, Any]:
        return copy.deepcopy(
            document_payload(version, scenarios or [scenario_payload("s1")], **fields)
        )

    return build


@pytest.fixture()
def make_scenario() -> Callable[..., dict[str, Any]]:
    return scenario_payload


@pytest.fixture()
def make_action() -> Callable[..., dict[str, Any]]:
    return action_payload
