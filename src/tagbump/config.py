"""YAML configuration loading and runtime overrides.

Precedence, lowest to highest: built-in ``Constants`` defaults, the YAML
file, environment variables, CLI flags (see ``cli_config``).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from .constants import Constants

logger = logging.getLogger(__name__)

# (section, key) -> (Constants attribute, coercion)
_SETTINGS = {
    ("registry", "default"): ("DEFAULT_REGISTRY", str),
    ("registry", "connect_timeout"): ("CONNECT_TIMEOUT", float),
    ("registry", "read_timeout"): ("READ_TIMEOUT", float),
    ("registry", "page_size"): ("TAGS_PAGE_SIZE", int),
    ("retry", "max_attempts"): ("HTTP_RETRY_MAX", int),
    ("retry", "base_delay"): ("HTTP_RETRY_BASE_DELAY_SEC", float),
    ("retry", "max_delay"): ("HTTP_RETRY_MAX_DELAY_SEC", float),
    ("resolution", "canonical_tags"): ("CANONICAL_TAGS", list),
    ("resolution", "prerelease_keywords"): ("PRERELEASE_KEYWORDS", list),
}

_ENV_SETTINGS = {
    Constants.ENV_DEFAULT_REGISTRY: ("DEFAULT_REGISTRY", str),
    Constants.ENV_READ_TIMEOUT: ("READ_TIMEOUT", float),
    Constants.ENV_RETRY_MAX: ("HTTP_RETRY_MAX", int),
}


def find_config_file(explicit: Optional[str] = None) -> Optional[str]:
    """Locate the config file: explicit path, $TAGBUMP_CONFIG, ./tagbump.yml, ~/.config/tagbump/."""
    if explicit:
        return explicit
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        return env_path
    home_dir = os.path.join(os.path.expanduser("~"), ".config", "tagbump")
    for directory in (os.getcwd(), home_dir):
        for name in Constants.CONFIG_FILE_NAMES:
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                return candidate
    return None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the YAML config; an unreadable or malformed file yields an empty config."""
    config_path = find_config_file(path)
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Failed to load config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    logger.debug("Loaded config from %s", config_path)
    return data


def apply_config(cfg: Dict[str, Any]) -> None:
    """Copy recognized settings from a loaded config onto ``Constants``."""
    for (section, key), (attr, coerce) in _SETTINGS.items():
        block = cfg.get(section)
        if not isinstance(block, dict) or block.get(key) is None:
            continue
        _set_constant(attr, coerce, block[key], f"{section}.{key}")

    registry = cfg.get("registry")
    namespaces = registry.get("namespaces") if isinstance(registry, dict) else None
    if isinstance(namespaces, dict):
        merged = dict(Constants.REPOSITORY_NAMESPACES)
        merged.update({str(k): str(v) for k, v in namespaces.items() if v})
        Constants.REPOSITORY_NAMESPACES = merged


def apply_env_overrides() -> None:
    for env_name, (attr, coerce) in _ENV_SETTINGS.items():
        value = os.environ.get(env_name)
        if value:
            _set_constant(attr, coerce, value, env_name)


def ignore_rules_for(cfg: Dict[str, Any], dependency_name: str) -> List[str]:
    """Ignore specifiers configured under ``ignore: {<name>: [...]}``."""
    ignore = cfg.get("ignore")
    rules = (ignore.get(dependency_name) if isinstance(ignore, dict) else None) or []
    if isinstance(rules, str):
        return [rules]
    return [str(r) for r in rules]


def _set_constant(attr: str, coerce, value: Any, origin: str) -> None:
    try:
        if coerce is list:
            coerced = [str(v) for v in value] if isinstance(value, (list, tuple)) else [str(value)]
        else:
            coerced = coerce(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid value for %s: %r", origin, value)
        return
    setattr(Constants, attr, coerced)
