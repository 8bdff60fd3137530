from __future__ import annotations

import copy

import pytest

from issuecopilot.errors import JiraPayloadError
from issuecopilot.issue import ParsedIssue, parse_issue


def test_parse_issue_renders_description_and_extracts_criteria(load_json) -> None:
    payload = load_json("jira_issue.json")

    issue = parse_issue(payload)

    assert issue.key == "SHOP-17"
    assert issue.summary == "Customer can save a basket for later"
    assert issue.issue_type == "Story"
    assert issue.status == "In Progress"
    assert issue.description.startswith(
        "As a shopper I want to save my basket so I can finish checkout later. Raised by @Priya Shah\n\n"
        "## Acceptance Criteria\n\n"
    )
    assert issue.acceptance_criteria == (
        "• Saved baskets survive logout\n• Prices refresh on restore\n\n[WARNING]\nGuest baskets are out of scope"
    )


def test_structured_criteria_field_takes_precedence(load_json) -> None:
    payload = load_json("jira_issue.json")

    issue = parse_issue(payload, acceptance_criteria_field="customfield_10050")

    assert issue.acceptance_criteria == "1. Basket saved for 30 days"


def test_empty_structured_field_falls_back_to_description(load_json) -> None:
    payload = load_json("jira_issue.json")
    payload["fields"]["customfield_10050"] = None

    issue = parse_issue(payload, acceptance_criteria_field="customfield_10050")

    assert issue.acceptance_criteria is not None
    assert issue.acceptance_criteria.startswith("• Saved baskets survive logout")


def test_legacy_plain_text_description(load_json) -> None:
    payload = load_json("jira_issue.json")
    payload["fields"]["description"] = "Old style text\n\nAC:\n- still parsed"

    issue = parse_issue(payload)

    assert issue.description == "Old style text\n\nAC:\n- still parsed"
    assert issue.acceptance_criteria == "- still parsed"


def test_missing_optional_fields() -> None:
    issue = parse_issue({"key": "OPS-1", "fields": {"summary": "Bare", "description": None, "status": None}})

    assert issue == ParsedIssue(key="OPS-1", summary="Bare", description="")
    assert issue.as_dict() == {"key": "OPS-1", "summary": "Bare", "description": ""}


def test_as_dict_uses_camel_case_keys(load_json) -> None:
    issue = parse_issue(load_json("jira_issue.json"))

    payload = issue.as_dict()

    assert set(payload) == {"key", "summary", "description", "acceptanceCriteria", "issueType", "status"}


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("key"),
        lambda p: p["fields"].pop("summary"),
        lambda p: p.__setitem__("fields", "nope"),
        lambda p: p["fields"].__setitem__("description", 12),
    ],
)
def test_invalid_payload_raises(load_json, mutate) -> None:
    payload = copy.deepcopy(load_json("jira_issue.json"))
    mutate(payload)

    with pytest.raises(JiraPayloadError) as excinfo:
        parse_issue(payload)

    assert excinfo.value.context["reason"]
