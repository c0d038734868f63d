"""Control map YAML loading.

A control map file is either a bare mapping of check id -> framework ->
control code, or the same mapping nested under a top-level ``controls`` key.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml

from .control_map import ControlMap

logger = logging.getLogger(__name__)


def load_control_mappings(path: Path) -> dict:
    """Read raw check mappings from a YAML file. Missing or invalid -> {}."""
    if not path.exists():
        logger.warning("Control map file not found: %s", path)
        return {}

    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8-sig"))
    except yaml.YAMLError as exc:
        logger.warning("Control map file %s is not valid YAML: %s", path, exc)
        return {}

    if not isinstance(content, dict):
        return {}
    if isinstance(content.get("controls"), dict):
        content = content["controls"]

    return {k: v for k, v in content.items() if isinstance(v, dict)}


def build_control_map(
    base: Optional[ControlMap] = None,
    map_file: Optional[Path] = None,
    overrides: Optional[dict] = None,
) -> ControlMap:
    """Layer a YAML file and inline overrides over a base control map."""
    control_map = base if base is not None else ControlMap.default()
    if map_file is not None:
        control_map = control_map.merged(load_control_mappings(map_file))
    if overrides:
        control_map = control_map.merged(overrides)
    return control_map
