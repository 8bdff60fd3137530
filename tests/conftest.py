"""Shared pytest fixtures for Issue Copilot tests."""

from __future__ import annotations

import json
import socket
from pathlib import Path
from typing import Any, Callable, Dict

import pytest


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent network access during the test suite.

    The Jira client is always driven through a fake session in tests; any
    attempt to open a real socket is a bug in the test.
    """

    def _guard(*args: object, **kwargs: object) -> socket.socket:  # type: ignore[override]
        raise RuntimeError("Network access is disabled during tests.")

    monkeypatch.setattr(socket, "socket", _guard)
    monkeypatch.setattr(socket, "create_connection", _guard)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer Jira settings from leaking into configuration tests."""

    for key in (
        "JIRA_BASE",
        "JIRA_BASE_URL",
        "JIRA_EMAIL",
        "JIRA_TOKEN",
        "JIRA_API_TOKEN",
        "JIRA_AC_FIELD",
        "TIMEOUT",
        "ISSUECOPILOT_JIRA_BASE",
        "ISSUECOPILOT_JIRA_EMAIL",
        "ISSUECOPILOT_JIRA_TOKEN",
        "ISSUECOPILOT_ACCEPTANCE_CRITERIA_FIELD",
        "ISSUECOPILOT_TIMEOUT",
        "ACCEPTANCE_CRITERIA_FIELD",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the shared fixtures directory."""

    return Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def load_json(fixtures_dir: Path) -> Callable[[str], Dict[str, Any]]:
    """Helper fixture to load JSON fixtures by filename."""

    def _loader(name: str) -> Dict[str, Any]:
        with (fixtures_dir / name).open("r", encoding="utf-8") as handle:
            return json.load(handle)

    return _loader
