"""Turn a Jira issue payload into the narrative fields the editor works with."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import jsonschema

from .adf_text import to_plain_text
from .criteria import extract_acceptance_criteria
from .errors import JiraPayloadError
from .logging_config import get_logger

LOGGER = get_logger(__name__)

ISSUE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["key", "fields"],
    "properties": {
        "key": {"type": "string", "minLength": 1},
        "fields": {
            "type": "object",
            "required": ["summary"],
            "properties": {
                "summary": {"type": "string"},
                "description": {"type": ["object", "string", "null"]},
                "issuetype": {"type": ["object", "null"]},
                "status": {"type": ["object", "null"]},
            },
        },
    },
}


@dataclass(frozen=True)
class ParsedIssue:
    """Simplified issue record handed to the editing UI."""

    key: str
    summary: str
    description: str
    acceptance_criteria: Optional[str] = None
    issue_type: Optional[str] = None
    status: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "key": self.key,
            "summary": self.summary,
            "description": self.description,
        }
        if self.acceptance_criteria is not None:
            payload["acceptanceCriteria"] = self.acceptance_criteria
        if self.issue_type is not None:
            payload["issueType"] = self.issue_type
        if self.status is not None:
            payload["status"] = self.status
        return payload


def validate_issue_payload(payload: Any) -> None:
    """Raise :class:`JiraPayloadError` unless ``payload`` looks like a Jira issue."""

    try:
        jsonschema.validate(instance=payload, schema=ISSUE_SCHEMA)
    except jsonschema.ValidationError as exc:
        path = "/".join(str(part) for part in exc.absolute_path)
        context = {"path": path or "<root>", "reason": exc.message}
        LOGGER.error("Jira issue payload failed validation", extra=context)
        raise JiraPayloadError("Invalid issue data received from Jira", context=context) from exc


def _name(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        name = value.get("name")
        if isinstance(name, str) and name:
            return name
    return None


def parse_issue(payload: Mapping[str, Any], *, acceptance_criteria_field: str | None = None) -> ParsedIssue:
    """Validate ``payload`` and build a :class:`ParsedIssue`.

    The acceptance criteria come from ``fields[acceptance_criteria_field]``
    when that custom field is set and renders to text; otherwise they are
    extracted from the rendered description.
    """

    validate_issue_payload(payload)
    fields = payload["fields"]

    description = to_plain_text(fields.get("description"))

    criteria = ""
    source = "none"
    if acceptance_criteria_field:
        criteria = to_plain_text(fields.get(acceptance_criteria_field)).strip()
        if criteria:
            source = "field"
    if not criteria:
        criteria = extract_acceptance_criteria(description)
        if criteria:
            source = "description"

    LOGGER.debug(
        "Parsed Jira issue",
        extra={"issue_key": payload["key"], "criteria_source": source, "description_chars": len(description)},
    )
    return ParsedIssue(
        key=payload["key"],
        summary=fields["summary"],
        description=description,
        acceptance_criteria=criteria or None,
        issue_type=_name(fields.get("issuetype")),
        status=_name(fields.get("status")),
    )


__all__ = ["ISSUE_SCHEMA", "ParsedIssue", "parse_issue", "validate_issue_payload"]
