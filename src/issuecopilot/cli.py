"""Command line interface for Issue Copilot."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Iterable, Optional, TextIO

from dotenv import load_dotenv

from .adf_text import to_plain_text
from .clients.jira_client import JiraClient
from .config import ConfigError, build_config, require
from .criteria import extract_acceptance_criteria
from .errors import IssueCopilotError
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def _load_local_dotenv() -> bool:
    """Load a project-level ``.env`` file when one exists."""

    env_path = Path(__file__).resolve().parents[2] / ".env"
    if not env_path.is_file():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issuecopilot",
        description="Convert Jira issue descriptions to plain text and pull out acceptance criteria",
    )
    parser.add_argument(
        "--config",
        help="Path to an issuecopilot.yaml file (defaults to ./issuecopilot.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Render an ADF JSON document as plain text")
    render.add_argument("path", nargs="?", default="-", help="ADF JSON file, or '-' for stdin")

    extract = commands.add_parser("extract", help="Print the acceptance criteria section of a text")
    extract.add_argument("path", nargs="?", default="-", help="Text file, or '-' for stdin")

    fetch = commands.add_parser("fetch", help="Fetch a Jira issue and print its narrative fields")
    fetch.add_argument("issue_key", help="Issue key, e.g. PROJ-123")
    fetch.add_argument("--jira-base", dest="jira_base", help="Base URL, e.g. https://example.atlassian.net")
    fetch.add_argument("--jira-email", dest="jira_email", help="Account email used for Basic auth")
    fetch.add_argument("--jira-token", dest="jira_token", help="Jira API token")
    fetch.add_argument(
        "--ac-field",
        dest="acceptance_criteria_field",
        help="Custom field id holding acceptance criteria (e.g. customfield_10042)",
    )
    fetch.add_argument("--timeout", type=int, default=None, help="Request timeout in seconds")
    fetch.add_argument("--json", dest="as_json", action="store_true", help="Print the issue as JSON")
    return parser


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments into a namespace."""

    parser = _create_parser()
    return parser.parse_args(None if argv is None else list(argv))


def _read_source(path: str, stdin: TextIO) -> str:
    if path == "-":
        return stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _render(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> int:
    raw = _read_source(args.path, stdin)
    try:
        document: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Input is not valid JSON", extra={"path": args.path, "error": str(exc)})
        return 2
    stdout.write(to_plain_text(document) + "\n")
    return 0


def _extract(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> int:
    criteria = extract_acceptance_criteria(_read_source(args.path, stdin))
    if not criteria:
        logger.info("No acceptance criteria section found", extra={"path": args.path})
        return 1
    stdout.write(criteria + "\n")
    return 0


def _format_issue(issue: Any) -> str:
    lines = [f"{issue.key}: {issue.summary}"]
    meta = ", ".join(part for part in (issue.issue_type, issue.status) if part)
    if meta:
        lines.append(f"({meta})")
    lines.extend(["", "Description:", issue.description or "(empty)"])
    if issue.acceptance_criteria:
        lines.extend(["", "Acceptance Criteria:", issue.acceptance_criteria])
    return "\n".join(lines)


def _fetch(args: argparse.Namespace, stdout: TextIO) -> int:
    config = build_config(args)
    require(config, "jira_base", "jira_email", "jira_token")
    client = JiraClient(
        base_url=config["jira_base"],
        email=config["jira_email"],
        api_token=config["jira_token"],
        timeout=config["timeout"],
    )
    issue = client.get_issue(args.issue_key, acceptance_criteria_field=config.get("acceptance_criteria_field"))
    if args.as_json:
        stdout.write(json.dumps(issue.as_dict(), indent=2, ensure_ascii=False) + "\n")
    else:
        stdout.write(_format_issue(issue) + "\n")
    return 0


def run(
    argv: Optional[Iterable[str]] = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Parse arguments, dispatch the sub-command and return an exit status."""

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = parse_args(argv)
    configure_logging(args.log_level, stream=sys.stderr)
    logger.debug("CLI arguments parsed", extra={"cli_args": {k: v for k, v in vars(args).items() if v is not None}})

    try:
        if args.command == "render":
            return _render(args, stdin, stdout)
        if args.command == "extract":
            return _extract(args, stdin, stdout)
        return _fetch(args, stdout)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Unable to read input: %s", exc)
        return 2
    except IssueCopilotError as exc:
        logger.error("%s", exc, extra=exc.context)
        return 1


def main() -> None:
    _load_local_dotenv()
    sys.exit(run())


__all__ = ["main", "parse_args", "run"]
