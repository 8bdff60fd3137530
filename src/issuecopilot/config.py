"""Configuration helpers for Issue Copilot."""
from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

import yaml

DEFAULT_CONFIG_FILE = "issuecopilot.yaml"

# Keys that the configuration system understands. Additional keys found in
# the YAML file are kept but never looked up in the environment.
KNOWN_CONFIG_KEYS: set[str] = {
    "acceptance_criteria_field",
    "jira_base",
    "jira_email",
    "jira_token",
    "timeout",
}

INTEGER_KEYS = {"timeout"}

# ``JIRA_BASE`` and ``ISSUECOPILOT_JIRA_BASE`` are both accepted.
ENV_PREFIXES = ("", "ISSUECOPILOT_")

# Names used by the browser tool's environment for the same settings.
ENV_ALIASES: Dict[str, tuple[str, ...]] = {
    "jira_base": ("JIRA_BASE_URL",),
    "jira_token": ("JIRA_API_TOKEN",),
    "acceptance_criteria_field": ("JIRA_AC_FIELD",),
}

DEFAULTS: Dict[str, Any] = {"timeout": 30}


class ConfigError(RuntimeError):
    """Raised when configuration validation fails."""


def load_yaml_defaults(path: str | Path | None) -> dict:
    """Load YAML configuration defaults from ``path``.

    A missing file (or ``None``) yields an empty dictionary; a file whose top
    level is not a mapping raises :class:`ConfigError`.
    """

    if not path:
        return {}

    yaml_path = Path(path)
    if not yaml_path.exists():
        return {}

    with yaml_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected top-level mapping in configuration file '{yaml_path}',"
            f" but received {type(data).__name__}."
        )

    return data


def _coerce(key: str, value: Any) -> Any:
    if key not in INTEGER_KEYS or value is None or isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"Configuration value '{key}' must be an integer, got '{value}'.") from exc


def load_env_overrides(keys: Iterable[str], env: Mapping[str, str] | None = None) -> dict:
    """Return environment overrides for ``keys``.

    Each key is looked up upper-cased with every prefix in
    :data:`ENV_PREFIXES`, then under its :data:`ENV_ALIASES`.
    """

    env = os.environ if env is None else env
    overrides: Dict[str, Any] = {}
    for key in keys:
        candidates = [f"{prefix}{key.upper()}" for prefix in ENV_PREFIXES]
        candidates.extend(ENV_ALIASES.get(key, ()))
        for candidate in candidates:
            value = env.get(candidate)
            if value:
                overrides[key] = _coerce(key, value)
                break
    return overrides


def merge_configs(*dicts: Mapping[str, Any] | None) -> dict:
    """Merge dictionaries honoring precedence from left to right."""

    merged: Dict[str, Any] = {}
    for cfg in reversed(dicts):
        if not cfg:
            continue
        merged.update(cfg)
    return merged


def _extract_cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(cli_args).items()
        if key in KNOWN_CONFIG_KEYS and value is not None
    }


def build_config(cli_args: argparse.Namespace, env: Mapping[str, str] | None = None) -> dict:
    """Build the final configuration dictionary from CLI, env, and YAML."""

    if not isinstance(cli_args, argparse.Namespace):
        raise TypeError("cli_args must be an argparse.Namespace instance")

    config_path: Path | None = None
    if getattr(cli_args, "config", None):
        config_path = Path(cli_args.config)
        if not config_path.exists():
            raise ConfigError(f"Configuration file '{config_path}' was not found.")
    else:
        default_path = Path(DEFAULT_CONFIG_FILE)
        if default_path.exists():
            config_path = default_path

    yaml_defaults = {
        key: _coerce(key, value) for key, value in load_yaml_defaults(config_path).items() if value is not None
    }
    env_overrides = load_env_overrides(KNOWN_CONFIG_KEYS, env)
    cli_overrides = _extract_cli_overrides(cli_args)

    merged = merge_configs(cli_overrides, env_overrides, yaml_defaults, DEFAULTS)
    if config_path:
        merged["config_path"] = str(config_path)
    return merged


def require(config: Mapping[str, Any], *keys: str) -> None:
    """Raise :class:`ConfigError` naming every key in ``keys`` without a value."""

    missing = [key for key in keys if not config.get(key)]
    if missing:
        raise ConfigError("Missing required configuration values: " + ", ".join(sorted(missing)))


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_FILE",
    "build_config",
    "load_env_overrides",
    "load_yaml_defaults",
    "merge_configs",
    "require",
]
