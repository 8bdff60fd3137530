"""Locate the acceptance criteria section inside free-form issue text."""
from __future__ import annotations

import re
from typing import Any, List, Optional, Pattern, Sequence

# Heading patterns in priority order. Each must occupy a whole line.
CRITERIA_HEADINGS: Sequence[Pattern[str]] = (
    re.compile(r"^[ \t]*(?:#{1,6}[ \t]*)?acceptance[ \t]+criteria[ \t]*:[ \t]*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^[ \t]*(?:#{1,6}[ \t]*)?ac[ \t]*:[ \t]*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^[ \t]*#{1,6}[ \t]*acceptance[ \t]+criteria[ \t]*:?[ \t]*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^[ \t]*\[[ \t]*acceptance[ \t]+criteria[ \t]*\][ \t]*:?[ \t]*$", re.IGNORECASE | re.MULTILINE),
)

_MARKDOWN_HEADING = re.compile(r"^[ \t]*#{1,6}[ \t]+\S")


def _is_section_heading(line: str) -> bool:
    if _MARKDOWN_HEADING.match(line):
        return True
    return any(pattern.match(line) for pattern in CRITERIA_HEADINGS)


def _trim_blank_lines(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _section_body(text: str, heading_end: int) -> str:
    """Return the lines after a heading up to the next section heading."""

    remainder = text[heading_end:]
    # Drop the newline that terminates the heading line itself.
    if remainder.startswith("\n"):
        remainder = remainder[1:]

    body: List[str] = []
    for line in remainder.split("\n"):
        if _is_section_heading(line):
            break
        body.append(line)
    return "\n".join(_trim_blank_lines(body))


def find_criteria(text: str) -> Optional[str]:
    """Return the first non-empty criteria body, or ``None`` when absent."""

    text = text.replace("\r\n", "\n")
    for pattern in CRITERIA_HEADINGS:
        for match in pattern.finditer(text):
            body = _section_body(text, match.end())
            if body:
                return body
    return None


def extract_acceptance_criteria(text: Any) -> str:
    """Extract the acceptance criteria section from ``text``.

    Headings are tried in priority order (``Acceptance Criteria:``, ``AC:``,
    a markdown ``## Acceptance Criteria`` heading, then a bracketed
    ``[Acceptance Criteria]`` line) and the first one followed by a
    non-empty body wins. The body stops at the next section heading or the
    end of the text, without surrounding blank lines. Returns ``""`` when
    nothing is found or ``text`` is not a string.
    """

    if not isinstance(text, str) or not text:
        return ""
    return find_criteria(text) or ""


__all__ = ["CRITERIA_HEADINGS", "extract_acceptance_criteria", "find_criteria"]
