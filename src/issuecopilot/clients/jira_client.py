"""Jira API client for fetching a single issue."""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

import requests
from requests.auth import HTTPBasicAuth

from issuecopilot.errors import JiraAuthError, JiraIssueNotFoundError, JiraPayloadError, JiraRequestError
from issuecopilot.issue import ParsedIssue, parse_issue
from issuecopilot.logging_config import get_logger

from .base import BaseAPIClient

logger = get_logger(__name__)

ISSUE_KEY_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*-\d+$")
DEFAULT_FIELDS = ("summary", "description", "issuetype", "status")


class JiraClient(BaseAPIClient):
    """Wraps the Jira REST API v3 issue endpoint with Basic authentication."""

    def __init__(
        self,
        *,
        base_url: str,
        email: str,
        api_token: str,
        timeout: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(session)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session.auth = HTTPBasicAuth(email, api_token)
        self.session.headers.update({"Accept": "application/json"})

    def fetch_issue(self, issue_key: str, *, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Return the raw JSON payload for ``issue_key``."""

        key = issue_key.strip()
        if not ISSUE_KEY_PATTERN.match(key):
            raise JiraRequestError(f"Invalid issue key '{issue_key}'", context={"issue_key": issue_key})

        url = f"{self.base_url}/rest/api/3/issue/{quote(key)}"
        params = {"fields": ",".join(fields)} if fields else None
        context: Dict[str, Any] = {"service": "jira", "operation": "get_issue", "issue_key": key}
        try:
            response = self._request_with_retry(
                method="GET",
                url=url,
                logger_context=context,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            context["error"] = str(exc)
            logger.error("Jira issue request failed", extra=context)
            raise JiraRequestError("Failed to fetch Jira issue", context=context) from exc

        status = response.status_code
        if status >= 400:
            context.update({"status_code": status, "snippet": response.text[:200]})
            if status == 404:
                logger.warning("Jira issue not found", extra=context)
                raise JiraIssueNotFoundError(f"Issue {key} not found", context=context)
            if status in {401, 403}:
                logger.error("Jira rejected credentials", extra=context)
                raise JiraAuthError("Unauthorized - please check your credentials", context=context)
            logger.error("Jira issue request failed", extra=context)
            raise JiraRequestError(f"HTTP {status} while fetching {key}", context=context)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Jira returned a non-JSON body", extra=context)
            raise JiraPayloadError("Invalid issue data received from Jira", context=context) from exc

        logger.info("Fetched Jira issue %s", key)
        return payload

    def get_issue(self, issue_key: str, *, acceptance_criteria_field: str | None = None) -> ParsedIssue:
        """Fetch ``issue_key`` and parse it into a :class:`ParsedIssue`."""

        fields = list(DEFAULT_FIELDS)
        if acceptance_criteria_field:
            fields.append(acceptance_criteria_field)
        payload = self.fetch_issue(issue_key, fields=fields)
        return parse_issue(payload, acceptance_criteria_field=acceptance_criteria_field)


__all__ = ["JiraClient", "DEFAULT_FIELDS"]
