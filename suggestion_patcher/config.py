"""
Configuration — loads settings from .suggestion_patcher.yaml, environment
variables, and built-in defaults (in that priority order: CLI args > env >
YAML > defaults).
"""

import os

import yaml


class ConfigError(Exception):
    """Raised when a required run parameter is missing or invalid."""


_DEFAULTS = {
    "pr": None,
    "bot": "coderabbitai[bot]",
    "repo": None,
    "github_token": "",
    "github_api_url": "https://api.github.com",
    "request_timeout": 30,
    "log_dir": ".suggestion_patcher/logs",
    "report_file": "",
}

# Config file search locations
_CONFIG_FILENAMES = [".suggestion_patcher.yaml", ".suggestion_patcher.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Run configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller via :meth:`override`)
    2. Environment variables
    3. .suggestion_patcher.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_keys, yaml_key: str, default, cast=str):
            if isinstance(env_keys, str):
                env_keys = (env_keys,)
            for env_key in env_keys:
                env_val = os.getenv(env_key)
                if env_val:
                    value, source = env_val, env_key
                    break
            else:
                value, source = yd.get(yaml_key), yaml_key
            if value is None:
                return default
            try:
                return cast(value)
            except (TypeError, ValueError):
                raise ConfigError(
                    f"Invalid value for {source}: {value!r}") from None

        # Pull request number; validated lazily by require_pr()
        self.PR = _get("PR", "pr", _DEFAULTS["pr"])
        self.BOT = _get("BOT", "bot", _DEFAULTS["bot"])

        # owner/name; resolved from gh or the git remote when unset
        self.REPO = _get("GITHUB_REPOSITORY", "repo", _DEFAULTS["repo"])
        self.GITHUB_TOKEN = _get(("GITHUB_TOKEN", "GH_TOKEN"), "github_token",
                                 _DEFAULTS["github_token"])
        self.GITHUB_API_URL = _get("GITHUB_API_URL", "github_api_url",
                                   _DEFAULTS["github_api_url"])
        self.REQUEST_TIMEOUT = _get("REQUEST_TIMEOUT", "request_timeout",
                                    _DEFAULTS["request_timeout"], cast=float)

        self.LOG_DIR = _get("LOG_DIR", "log_dir", _DEFAULTS["log_dir"])
        self.REPORT_FILE = _get("REPORT_FILE", "report_file",
                                _DEFAULTS["report_file"])

    def override(self, **values) -> "Config":
        """Apply CLI/API overrides; ``None`` values leave a setting alone."""
        for key, value in values.items():
            if value is None:
                continue
            attr = key.upper()
            if not hasattr(self, attr):
                raise ConfigError(f"Unknown setting: {key}")
            setattr(self, attr, value)
        return self

    def require_pr(self) -> int:
        """Return the pull request number, or raise :class:`ConfigError`."""
        if self.PR is None or str(self.PR).strip() == "":
            raise ConfigError("PR environment variable not set")
        try:
            pr = int(str(self.PR).strip().lstrip("#"))
        except ValueError:
            raise ConfigError(f"PR must be a number, got {self.PR!r}") from None
        if pr <= 0:
            raise ConfigError(f"PR must be positive, got {pr}")
        return pr

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
