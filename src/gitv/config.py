from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping

from .registry import DEFAULT_EXCLUDE_DIRNAMES, default_registry_path

CONFIG_FILENAME = ".gitv.json"
COLOR_MODES = ("auto", "always", "never")


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    if env is None:
        env = os.environ
    override = str(env.get("GITV_CONFIG", "") or "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_FILENAME


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        config = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e
    if not isinstance(config, dict):
        raise ValueError(f"Invalid config file {config_path}: expected a JSON object")
    return config


def registry_path_from(config: dict, env: Mapping[str, str] | None = None) -> Path:
    if env is None:
        env = os.environ
    override = str(env.get("GITV_REGISTRY", "") or "").strip()
    if override:
        return Path(override).expanduser()
    configured = str(config.get("registry_path", "") or "").strip()
    if configured:
        return Path(configured).expanduser()
    return default_registry_path()


def exclude_dirnames_from(config: dict) -> set[str]:
    names = {str(d).strip() for d in (config.get("exclude_dirnames") or []) if str(d).strip()}
    if not names:
        names = set(DEFAULT_EXCLUDE_DIRNAMES)
    names.add(".git")
    return names


def color_enabled(mode: str, *, isatty: bool, env: Mapping[str, str] | None = None) -> bool:
    if env is None:
        env = os.environ
    m = (mode or "auto").strip().lower()
    if m not in COLOR_MODES:
        m = "auto"
    if m == "always":
        return True
    if m == "never":
        return False
    if env.get("NO_COLOR"):
        return False
    return isatty
