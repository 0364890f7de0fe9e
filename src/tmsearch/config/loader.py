import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List

import yaml

DEFAULT_CONFIG_PATH = Path("tmsearch.config.yaml")
CONFIG_PATH_ENV = "TMSEARCH_CONFIG"

DEFAULT_ENDPOINT = "https://vit-tm-task.api.trademarkia.app/api/v3/us"

BASE_SEARCH_DEFAULTS: Dict[str, Any] = {
    "endpoint": DEFAULT_ENDPOINT,
    "timeout_seconds": 20,
    "user_agent": "tmsearch/1.0",
    "page": 1,
    "rows": 10,
    "query_param": "q",
}

BASE_DISPLAY_DEFAULTS: Dict[str, Any] = {
    "description_max_length": 160,
    "status_categories": ["All", "Registered", "Pending", "Abandoned", "Others"],
    "owner_facets": ["Tesla", "LegalForce", "SpaceX"],
    "owner_case_sensitive": False,
    "display_mode": "list",
}

ALLOWED_DISPLAY_MODES = ("list", "grid")


def resolve_config_path(path: Path | None = None) -> Path:
    """Pick the explicit path, then $TMSEARCH_CONFIG, then the default."""
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load runtime configuration from YAML file.

    Args:
        path: Optional path to config file. Defaults to $TMSEARCH_CONFIG or
            tmsearch.config.yaml

    Returns:
        Dictionary with 'search' and 'display' sections (possibly empty)

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config structure is invalid
    """
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    for section in ("search", "display"):
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Config '{section}' must be a dictionary if provided")

    return config


def load_config_or_defaults(path: Path | None = None) -> Dict[str, Any]:
    """Best-effort variant of load_config: a missing file yields an empty config."""
    try:
        return load_config(path)
    except FileNotFoundError:
        return {}


def _string_list(value: Any, field: str) -> List[str]:
    if not isinstance(value, list):
        raise ValueError(f"Display '{field}' must be a list")
    items = []
    for entry in value:
        if not isinstance(entry, str) or not entry.strip():
            raise ValueError(f"Display '{field}' entries must be non-empty strings")
        items.append(entry.strip())
    return items


def get_search_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Resolve remote search settings with built-in fallbacks.

    Raises:
        ValueError: If a numeric setting is not a positive integer
    """
    config = config or {}
    settings = {
        **deepcopy(BASE_SEARCH_DEFAULTS),
        **(config.get("search") or {}),
    }

    for field in ("page", "rows"):
        value = settings[field]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"Search '{field}' must be a positive integer")

    timeout = settings["timeout_seconds"]
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError("Search 'timeout_seconds' must be a positive number")

    if not settings["endpoint"] or not isinstance(settings["endpoint"], str):
        raise ValueError("Search 'endpoint' must be a non-empty string")

    return settings


def get_display_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Resolve table/facet display settings with built-in fallbacks.

    Raises:
        ValueError: If a setting has the wrong type or an unknown display mode
    """
    config = config or {}
    settings = {
        **deepcopy(BASE_DISPLAY_DEFAULTS),
        **(config.get("display") or {}),
    }

    max_length = settings["description_max_length"]
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 1:
        raise ValueError("Display 'description_max_length' must be a positive integer")

    settings["status_categories"] = _string_list(settings["status_categories"], "status_categories")
    settings["owner_facets"] = _string_list(settings["owner_facets"], "owner_facets")
    settings["owner_case_sensitive"] = bool(settings["owner_case_sensitive"])

    if settings["display_mode"] not in ALLOWED_DISPLAY_MODES:
        raise ValueError(
            f"Display 'display_mode' must be one of {', '.join(ALLOWED_DISPLAY_MODES)}"
        )

    return settings
