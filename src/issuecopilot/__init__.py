"""Plain-text rendering and acceptance criteria extraction for Jira issues."""

from .adf_text import to_plain_text
from .criteria import extract_acceptance_criteria
from .issue import ParsedIssue, parse_issue

__all__ = ["ParsedIssue", "extract_acceptance_criteria", "parse_issue", "to_plain_text"]
