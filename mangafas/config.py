"""Runtime settings.

Values are read from environment variables, optionally layered over a YAML
file named by ``MANGAFAS_CONFIG``.  Environment variables win over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_NOTIFICATION_CAP = 50
DEFAULT_SYSTEM_RECIPIENT = "admin-1"
DEFAULT_OWNER_NAME = "Site Owner"
DEFAULT_OWNER_EMAIL = "owner@mangafas.local"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one process."""

    data_dir: Path
    notification_cap: int = DEFAULT_NOTIFICATION_CAP
    system_recipient_id: str = DEFAULT_SYSTEM_RECIPIENT
    owner_name: str = DEFAULT_OWNER_NAME
    owner_email: str = DEFAULT_OWNER_EMAIL
    log_level: str = "INFO"
    log_json: bool = True


def _as_int(raw: Any, default: int) -> int:
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _as_bool(raw: Any, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if not text:
        return default
    return text in {"1", "true", "yes", "y", "on"}


def _load_file(path: Optional[str]) -> dict:
    if not path:
        return {}
    config_path = Path(path).expanduser()
    if not config_path.exists():
        return {}
    with open(config_path) as f:
        data = yaml.safe_load(f) or {}
    return data if isinstance(data, dict) else {}


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Build a :class:`Settings` from the config file and the environment."""
    file_values = _load_file(config_path or os.environ.get("MANGAFAS_CONFIG"))

    def pick(env_name: str, key: str) -> Any:
        value = os.environ.get(env_name)
        if value is not None and value != "":
            return value
        return file_values.get(key)

    data_dir = pick("MANGAFAS_HOME", "data_dir") or str(Path.home() / ".mangafas")
    cap = max(1, _as_int(pick("MANGAFAS_NOTIFICATION_CAP", "notification_cap"), DEFAULT_NOTIFICATION_CAP))

    return Settings(
        data_dir=Path(data_dir).expanduser(),
        notification_cap=cap,
        system_recipient_id=pick("MANGAFAS_SYSTEM_RECIPIENT", "system_recipient_id") or DEFAULT_SYSTEM_RECIPIENT,
        owner_name=pick("MANGAFAS_OWNER_NAME", "owner_name") or DEFAULT_OWNER_NAME,
        owner_email=pick("MANGAFAS_OWNER_EMAIL", "owner_email") or DEFAULT_OWNER_EMAIL,
        log_level=str(pick("MANGAFAS_LOG_LEVEL", "log_level") or "INFO").upper(),
        log_json=_as_bool(pick("MANGAFAS_LOG_JSON", "log_json"), True),
    )


@lru_cache()
def get_settings() -> Settings:
    """Return the cached process-wide settings."""
    return load_settings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
