"""Configuration loader for the recipe-finder project.

- JSON config preferred, YAML accepted
- Defaults reproduce the reference behaviour (MobileNet, 0.20 threshold, 3 recipes)
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULTS: Dict[str, Any] = {
    "classifier": {
        "backend": "mobilenet_v3_large",  # or 'mobilenet_v2'
        "device": None,
        "top_k": 5,
    },
    "resolver": {
        "confidence_threshold": 0.20,
    },
    "vocabulary": {
        # Optional JSON mapping of extra classifier label -> ingredient entries
        "extra_entries_path": None,
    },
    "recipes": {
        "base_url": "https://www.themealdb.com/api/json/v1/1/filter.php",
        "detail_url": "https://www.themealdb.com/meal.php?c={id}",
        "timeout": 10.0,
    },
    "pipeline": {
        "wait_for_recipes": True,
    },
    "io": {
        "image_extensions": [".jpg", ".jpeg", ".png", ".bmp", ".gif", ".webp"],
        "results_dir": "results",
        "write_json": False,
        "write_html": False,
    },
}


def _deep_update(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _deep_update(base[k], v)  # type: ignore[index]
        else:
            base[k] = v
    return base


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load configuration from a file (JSON or YAML) and merge with defaults.

    Lookup order:
    1) Explicit path if provided
    2) ./config.json in project root if present
    3) ./config.yaml or ./config.yml if present
    4) Defaults
    """
    merged = json.loads(json.dumps(DEFAULTS))  # deep copy via JSON round-trip

    candidates: list[Path] = []
    if path is not None:
        explicit = Path(path)
        if not explicit.exists():
            warnings.warn(f"Config file not found: {explicit}. Falling back to defaults.")
        candidates.append(explicit)
    # Project root assumed as CWD
    candidates.extend([Path("config.json"), Path("config.yaml"), Path("config.yml")])

    chosen: Optional[Path] = next((p for p in candidates if p.exists()), None)
    if not chosen:
        return merged

    try:
        if chosen.suffix.lower() == ".json":
            data = _load_json(chosen)
        elif chosen.suffix.lower() in {".yaml", ".yml"}:
            data = _load_yaml(chosen)
        else:
            warnings.warn(f"Unsupported config format: {chosen.suffix}. Using defaults.")
            data = {}
    except Exception as exc:
        warnings.warn(f"Failed to load config from {chosen}: {exc}. Using defaults.")
        data = {}

    if isinstance(data, dict):
        _deep_update(merged, data)
    else:
        warnings.warn(f"Config at {chosen} is not a mapping. Using defaults.")

    return merged


def resolve_path_relative_to_project(path_str: str | None) -> Optional[Path]:
    if not path_str:
        return None
    p = Path(path_str)
    if p.exists():
        return p
    # Try relative to project root (CWD)
    cwd_p = Path.cwd() / p
    if cwd_p.exists():
        return cwd_p
    # Try relative to package directory
    pkg_p = Path(__file__).resolve().parent.parent / p
    if pkg_p.exists():
        return pkg_p
    return p  # return original Path even if not existing, caller may handle
