"""Load settings and env configuration."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobscout.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"

DEFAULT_SETTINGS: dict[str, Any] = {
    "api": {
        "enabled": False,
        "base_url": "",
        "timeout": 10.0,
        "retry_attempts": 3,
        "retry_base_delay": 1.0,
    },
    "mock": {
        "latency_seconds": 0.0,
    },
    "storage": {
        "backend": "file",
        "dir": "",
        "filename": "storage.json",
    },
    "workers": 4,
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _settings_path() -> Path:
    override = get_env("JOBSCOUT_SETTINGS")
    return Path(override) if override else SETTINGS_PATH


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Defaults, then the YAML file (if any), then environment overrides."""
    path = path or _settings_path()
    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
            if isinstance(loaded, dict):
                data = loaded
            elif loaded is not None:
                log.warning("Ignoring %s: top level must be a mapping", path.name)
        except (yaml.YAMLError, OSError) as exc:
            log.warning("Failed to read %s, using defaults: %s", path.name, exc)

    settings = _merge(DEFAULT_SETTINGS, data)

    api_url = get_env("JOBSCOUT_API_URL")
    if api_url:
        settings["api"]["base_url"] = api_url
        settings["api"]["enabled"] = True

    data_dir = get_env("JOBSCOUT_DATA_DIR")
    if data_dir:
        settings["storage"]["dir"] = data_dir

    latency = get_env("JOBSCOUT_MOCK_LATENCY")
    if latency:
        try:
            settings["mock"]["latency_seconds"] = float(latency)
        except ValueError:
            log.warning("JOBSCOUT_MOCK_LATENCY=%r is not a number, ignoring", latency)

    return settings


def storage_dir(settings: dict[str, Any]) -> Path:
    """Directory holding the persisted key-value document."""
    configured = (settings.get("storage", {}).get("dir") or "").strip()
    if not configured:
        return DATA_DIR
    candidate = Path(configured)
    if candidate.is_absolute():
        return candidate
    return (ROOT_DIR / candidate).resolve()
