"""HTTP clients for the issue tracker."""

from .jira_client import JiraClient

__all__ = ["JiraClient"]
