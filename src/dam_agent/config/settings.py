"""Agent configuration: environment, JSON config store and validated sections.

Environment variables (optionally from ``.env.local``):

- DAM_CONFIG_DIR: directory holding ``config.json`` (default ``~/.dam-agent``)
- DAM_DB_PATH: SQLite file (default ``<config dir>/dam-agent.db``)
- DAM_LOG_DIR / DAM_LOG_LEVEL: log location and level
- DAM_TESSERACT_CMD: path to the tesseract binary
- DAM_DASHBOARD_URL / DAM_DASHBOARD_API_KEY / DAM_ORGANIZATION_ID:
  enterprise dashboard defaults, overridden by the stored ``enterprise`` section
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from dam_agent.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
DB_FILE_NAME = "dam-agent.db"

DEFAULT_CONFIG: dict[str, Any] = {
    "monitoring": {
        "auto_start": True,
        "interval_seconds": 5.0,
        "analysis_throttle_seconds": 3.0,
        "notification_throttle_seconds": 30.0,
    },
    "privacy": {"data_retention_days": 30},
    "enterprise": {
        "enabled": False,
        "dashboard_url": "",
        "organization_id": "",
        "api_key": "",
        "sync_interval_seconds": 300.0,
    },
    "notification_preferences": {},
}

FREQUENCY_MULTIPLIERS = {"all": 1.0, "occasional": 0.3, "minimal": 0.1}
DEFAULT_FREQUENCY_MULTIPLIER = 0.1


def load_local_env(path: str | Path = ".env.local") -> bool:
    """Load ``.env.local`` over the process environment if it exists."""
    return load_dotenv(dotenv_path=Path(path), override=True)


@dataclass(frozen=True)
class AgentSettings:
    """Process-level settings resolved from the environment."""

    config_dir: Path
    db_path: Path
    log_dir: Path
    log_level: str = "INFO"
    tesseract_cmd: str | None = None
    dashboard_url: str = ""
    dashboard_api_key: str = ""
    organization_id: str = ""

    @classmethod
    def from_env(cls) -> AgentSettings:
        config_dir = Path(
            os.environ.get("DAM_CONFIG_DIR", Path.home() / ".dam-agent")
        ).expanduser()
        return cls(
            config_dir=config_dir,
            db_path=Path(os.environ.get("DAM_DB_PATH", config_dir / DB_FILE_NAME)),
            log_dir=Path(os.environ.get("DAM_LOG_DIR", config_dir / "log")),
            log_level=os.environ.get("DAM_LOG_LEVEL", "INFO"),
            tesseract_cmd=os.environ.get("DAM_TESSERACT_CMD") or None,
            dashboard_url=os.environ.get("DAM_DASHBOARD_URL", ""),
            dashboard_api_key=os.environ.get("DAM_DASHBOARD_API_KEY", ""),
            organization_id=os.environ.get("DAM_ORGANIZATION_ID", ""),
        )


# --- validated sections ---


class MonitoringConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    auto_start: bool = True
    interval_seconds: float = 5.0
    analysis_throttle_seconds: float = 3.0
    notification_throttle_seconds: float = 30.0

    @field_validator(
        "interval_seconds", "analysis_throttle_seconds", "notification_throttle_seconds"
    )
    @classmethod
    def must_not_be_negative(cls, v: float) -> float:
        if v < 0:
            msg = "intervals must not be negative"
            raise ValueError(msg)
        return v


class EnterpriseSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = False
    dashboard_url: str = ""
    organization_id: str = ""
    api_key: str = ""
    sync_interval_seconds: float = 300.0

    @field_validator("dashboard_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @property
    def active(self) -> bool:
        """Sync runs only when enabled and fully configured."""
        return bool(self.enabled and self.dashboard_url and self.api_key)


class NotificationPreferences(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    critical_alerts: bool = True
    security_warnings: bool = True
    prompt_suggestions: bool = False
    learning_tips: bool = False
    frequency: Literal["all", "occasional", "minimal"] = "minimal"
    sound_enabled: bool = False
    position: Literal["top-right", "bottom-right", "center"] = "bottom-right"


def frequency_multiplier(frequency: str) -> float:
    return FREQUENCY_MULTIPLIERS.get(frequency, DEFAULT_FREQUENCY_MULTIPLIER)


# --- JSON store ---


class ConfigStore:
    """JSON-backed key/value store addressed with dotted keys.

    A missing or unreadable file yields the defaults; writes replace the
    file atomically.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            path = AgentSettings.from_env().config_dir / CONFIG_FILE_NAME
        self.path = Path(path)
        self._lock = threading.RLock()
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        data = copy.deepcopy(DEFAULT_CONFIG)
        if not self.path.exists():
            return data
        try:
            with self.path.open(encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Config %s unreadable, using defaults: %s", self.path, e)
            return data
        if not isinstance(stored, dict):
            logger.warning("Config %s is not an object, using defaults", self.path)
            return data
        return _deep_merge(data, stored)

    def _save(self) -> None:
        tmp = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            tmp.replace(self.path)
        except OSError as e:
            msg = f"Cannot write config {self.path}: {e}"
            raise ConfigError(msg) from e

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            node: Any = self._data
            for part in key.split("."):
                if not isinstance(node, dict) or part not in node:
                    return default
                node = node[part]
            return copy.deepcopy(node)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            parts = key.split(".")
            node = self._data
            for part in parts[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[parts[-1]] = value
            self._save()
        logger.info("Config updated: %s", key)

    def all(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)

    def reset(self) -> None:
        with self._lock:
            self._data = copy.deepcopy(DEFAULT_CONFIG)
            self._save()
        logger.info("Config reset to defaults")

    # typed sections

    def monitoring(self) -> MonitoringConfig:
        return _section(MonitoringConfig, self.get("monitoring", {}), "monitoring")

    def enterprise(self, settings: AgentSettings | None = None) -> EnterpriseSettings:
        raw = self.get("enterprise", {})
        if settings is not None and isinstance(raw, dict):
            # Environment fills whatever the stored section leaves empty.
            env = {
                "dashboard_url": settings.dashboard_url,
                "api_key": settings.dashboard_api_key,
                "organization_id": settings.organization_id,
            }
            for field, value in env.items():
                if value and not raw.get(field):
                    raw[field] = value
        return _section(EnterpriseSettings, raw, "enterprise")

    def save_enterprise(self, **changes: Any) -> EnterpriseSettings:
        merged = {**self.get("enterprise", {}), **changes}
        try:
            validated = EnterpriseSettings(**merged)
        except ValidationError as e:
            msg = f"Invalid enterprise settings: {e}"
            raise ConfigError(msg) from e
        self.set("enterprise", validated.model_dump())
        return validated

    def retention_days(self) -> int:
        days = self.get("privacy.data_retention_days", 30)
        return days if isinstance(days, int) and days > 0 else 30


class NotificationSettings:
    """Notification preferences stored under ``notification_preferences``."""

    KEY = "notification_preferences"

    def __init__(self, store: ConfigStore) -> None:
        self.store = store

    def get_preferences(self) -> NotificationPreferences:
        saved = self.store.get(self.KEY, {})
        return _section(NotificationPreferences, saved, self.KEY)

    def save_preferences(self, **changes: Any) -> NotificationPreferences:
        merged = {**self.get_preferences().model_dump(), **changes}
        try:
            validated = NotificationPreferences(**merged)
        except ValidationError as e:
            msg = f"Invalid notification preferences: {e}"
            raise ConfigError(msg) from e
        self.store.set(self.KEY, validated.model_dump())
        return validated


def _section(model: type[BaseModel], raw: Any, name: str) -> Any:
    if not isinstance(raw, dict):
        logger.warning("Config section %s is not an object, using defaults", name)
        return model()
    try:
        return model(**raw)
    except ValidationError as e:
        invalid = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
        logger.warning(
            "Invalid %s config, dropping %s: %s", name, ", ".join(sorted(invalid)), e
        )
    # Keys that validated keep their stored value; the rest take defaults.
    kept = {k: v for k, v in raw.items() if k not in invalid}
    try:
        return model(**kept)
    except ValidationError:
        return model()


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


__all__ = [
    "AgentSettings",
    "ConfigStore",
    "EnterpriseSettings",
    "MonitoringConfig",
    "NotificationPreferences",
    "NotificationSettings",
    "frequency_multiplier",
    "load_local_env",
]
