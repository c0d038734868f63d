"""3-layer configuration system for workspace audits.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (.wsaudit/config.yaml)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Optional

import yaml

from ..compliance.control_map import ControlMap
from ..compliance.frameworks import DEFAULT_PROFILES
from ..compliance.loader import build_control_map
from .synthesis import DEFAULT_AUDIT_SCOPE

logger = logging.getLogger(__name__)

CONFIG_DIR = ".wsaudit"

DEFAULT_CONFIG: dict = {
    "audit": {
        "domain": "",
        "scope": DEFAULT_AUDIT_SCOPE,
    },
    "frameworks": {
        "required": [],
        "default": ["CMMC"],
        "profiles": DEFAULT_PROFILES,
    },
    "controls": {
        "map_file": "",
        "overrides": {},
    },
    "output": {
        "format": "json",
        "indent": 2,
    },
    "logging": {
        "level": "WARNING",
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_project_config(project_path: Path) -> dict:
    """Load project configuration from .wsaudit/config.yaml."""
    config_path = project_path / CONFIG_DIR / "config.yaml"
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        loaded = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return loaded if isinstance(loaded, dict) else {}


def get_effective_frameworks(
    config: dict,
    profile: Optional[str] = None,
    add_frameworks: Optional[list[str]] = None,
    skip_frameworks: Optional[list[str]] = None,
) -> list[str]:
    """Calculate the effective list of frameworks to assess."""
    frameworks_config = config.get("frameworks") or {
        "required": [],
        "default": [],
    }
    skip = set(skip_frameworks or [])

    effective: list[str] = []

    # Required frameworks always included
    for fw in frameworks_config.get("required") or []:
        effective.append(fw)

    # Profile or default frameworks
    if profile and profile != "default" and frameworks_config.get("profiles"):
        profile_config = frameworks_config["profiles"].get(profile)
        if profile_config and profile_config.get("frameworks"):
            effective.extend(profile_config["frameworks"])
        else:
            logger.warning("Unknown framework profile %r", profile)
    else:
        for fw in frameworks_config.get("default") or []:
            if fw not in skip:
                effective.append(fw)

    if add_frameworks:
        for fw in add_frameworks:
            if fw and fw not in effective:
                effective.append(fw)

    # Deduplicate preserving order
    seen: set[str] = set()
    result: list[str] = []
    for fw in effective:
        if fw and fw not in seen:
            seen.add(fw)
            result.append(fw)

    return result


def get_effective_config(
    project_path: Path,
    profile: Optional[str] = None,
    add_frameworks: Optional[list[str]] = None,
    skip_frameworks: Optional[list[str]] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration for an audit report."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    project_config = load_project_config(project_path)
    if project_config:
        config = deep_merge(config, project_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    config["_effective_frameworks"] = get_effective_frameworks(
        config, profile, add_frameworks, skip_frameworks
    )
    config["_project_path"] = str(project_path)

    return config


def get_control_map(config: dict) -> ControlMap:
    """Default control map with the configured file and overrides layered on."""
    controls = config.get("controls") or {}
    map_file: Optional[Path] = None
    if controls.get("map_file"):
        map_file = Path(controls["map_file"])
        if not map_file.is_absolute():
            map_file = Path(config.get("_project_path", ".")) / map_file
    return build_control_map(map_file=map_file, overrides=controls.get("overrides") or None)
