"""
Configuration — loads settings from .linepatch.yaml, environment variables,
and built-in defaults (in that priority order: CLI args > env > YAML > defaults).
"""

import os

import yaml

from .project_scanner import DEFAULT_EXCLUDES


_DEFAULTS = {
    "context_lines": 2,
    "highlight": False,
    "preview": True,
    "confirm": True,
    "search_workers": 0,
    "search_queue_size": 0,
    "binary_sniff_bytes": 1024,
    "log_dir": ".linepatch/logs",
    "tree_exclude": DEFAULT_EXCLUDES,
}

# Config file search locations
_CONFIG_FILENAMES = [".linepatch.yaml", ".linepatch.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    for d in (os.getcwd(), os.path.expanduser("~")):
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
    """Application configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables (``LINEPATCH_*``)
    3. .linepatch.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() in ("1", "true", "yes")
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        self.CONTEXT_LINES = _get("LINEPATCH_CONTEXT_LINES", "context_lines",
                                  _DEFAULTS["context_lines"], cast=int)
        self.HIGHLIGHT = _get_bool("LINEPATCH_HIGHLIGHT", "highlight",
                                   _DEFAULTS["highlight"])
        self.PREVIEW = _get_bool("LINEPATCH_PREVIEW", "preview",
                                 _DEFAULTS["preview"])
        self.CONFIRM = _get_bool("LINEPATCH_CONFIRM", "confirm",
                                 _DEFAULTS["confirm"])

        # Search worker pool; 0 means "decide at call time"
        self.SEARCH_WORKERS = _get("LINEPATCH_SEARCH_WORKERS", "search_workers",
                                   _DEFAULTS["search_workers"], cast=int)
        self.SEARCH_QUEUE_SIZE = _get("LINEPATCH_SEARCH_QUEUE_SIZE",
                                      "search_queue_size",
                                      _DEFAULTS["search_queue_size"], cast=int)
        self.BINARY_SNIFF_BYTES = _get("LINEPATCH_BINARY_SNIFF_BYTES",
                                       "binary_sniff_bytes",
                                       _DEFAULTS["binary_sniff_bytes"], cast=int)

        self.LOG_DIR = _get("LINEPATCH_LOG_DIR", "log_dir", _DEFAULTS["log_dir"])

        self.TREE_EXCLUDE: list[str] = yd.get("tree_exclude",
                                              list(_DEFAULTS["tree_exclude"]))
        if not isinstance(self.TREE_EXCLUDE, list):
            self.TREE_EXCLUDE = list(_DEFAULTS["tree_exclude"])
        env_exclude = os.getenv("LINEPATCH_TREE_EXCLUDE")
        if env_exclude is not None:
            self.TREE_EXCLUDE = [p for p in env_exclude.split(",") if p]

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
