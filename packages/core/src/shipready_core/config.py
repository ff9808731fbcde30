from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from shipready_core.errors import ConfigError

DEFAULT_CONFIG: dict = {
    "github_server": "https://github.com",
    "github_api_url": None,  # None = derive from github_server
    "jira_server": None,
    "config_owner": None,
    "config_repo": "config",
    "config_path": "apps/{service}/config.json",
    "ready_field": "customfield_19899",
    "ready_value": "Go",
    "max_results": 100,
    "max_workers": None,  # None = one worker per commit
    "default_target": "master",
    "projects": {},  # extra project name -> ticket prefix
}

_ENV_KEYS = {
    "github_server": "GITHUB_SERVER",
    "github_api_url": "GITHUB_API_URL",
    "jira_server": "JIRA_SERVER",
}


@dataclass(frozen=True)
class Config:
    github_server: str = DEFAULT_CONFIG["github_server"]
    github_api_url: Optional[str] = None
    github_token: Optional[str] = None
    jira_server: Optional[str] = None
    jira_token: Optional[str] = None
    config_owner: Optional[str] = None
    config_repo: str = DEFAULT_CONFIG["config_repo"]
    config_path: str = DEFAULT_CONFIG["config_path"]
    ready_field: str = DEFAULT_CONFIG["ready_field"]
    ready_value: str = DEFAULT_CONFIG["ready_value"]
    max_results: int = DEFAULT_CONFIG["max_results"]
    max_workers: Optional[int] = None
    default_target: str = DEFAULT_CONFIG["default_target"]
    projects: dict = field(default_factory=dict)

    @property
    def api_url(self) -> str:
        """REST endpoint for github_server (GitHub.com or GitHub Enterprise)."""
        if self.github_api_url:
            return self.github_api_url.rstrip("/")
        server = self.github_server.rstrip("/")
        if server in ("https://github.com", "http://github.com"):
            return "https://api.github.com"
        return f"{server}/api/v3"

    def require(self, *keys: str) -> None:
        missing = [k for k in keys if not getattr(self, k)]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")


def load_config(config_path: str = ".shipready.yml", cli_overrides: Optional[dict] = None) -> Config:
    """
    Build the process-wide Config by merging (in order of precedence):
      1. Built-in defaults
      2. .shipready.yml in the current directory
      3. CLI argument overrides
      4. Servers and credentials from environment variables
    """
    values = {**DEFAULT_CONFIG, "projects": dict(DEFAULT_CONFIG["projects"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        values.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                values[key] = value

    for key, env_name in _ENV_KEYS.items():
        env_value = os.environ.get(env_name)
        if env_value:
            values[key] = env_value
    values["github_token"] = os.environ.get("GITHUB_TOKEN")
    values["jira_token"] = os.environ.get("JIRA_TOKEN")

    known = set(Config.__dataclass_fields__)
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

    max_workers = values.get("max_workers")
    if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
        raise ConfigError(f"max_workers must be a positive integer, got {max_workers!r}")

    return Config(**values)
