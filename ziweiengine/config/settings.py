"""Configuration models and helpers for ZiWeiEngine settings."""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

LOG = logging.getLogger(__name__)

CURRENT_SETTINGS_SCHEMA_VERSION = 1

# -------------------- Settings Schema --------------------


class CalendarCfg(BaseModel):
    """Gregorian range accepted for birth dates."""

    min_year: int = 1900
    max_year: int = 2100

    @model_validator(mode="after")
    def _check_range(self) -> "CalendarCfg":
        if self.min_year > self.max_year:
            raise ValueError(
                f"calendar.min_year ({self.min_year}) exceeds max_year ({self.max_year})"
            )
        return self


class AnnualFlowCfg(BaseModel):
    """Anchor of the twelve-year annual flow cycle.

    The reference year is projected onto palace 1, which always sits on the
    Si branch, so only Si years (2013, 2025, ...) are accepted.
    """

    reference_year: int = 2013

    @field_validator("reference_year", mode="before")
    @classmethod
    def _require_si_year(cls, value: int) -> int:
        numeric = int(value)
        if (numeric - 4) % 12 != 5:
            raise ValueError(f"annual_flow.reference_year {numeric} is not a Si (巳) year")
        return numeric


class TraceCfg(BaseModel):
    """Diagnostic trace recorded on each chart."""

    enabled: bool = True


class ObservabilityCfg(BaseModel):
    """Metrics controls."""

    metrics_enabled: bool = True


class Settings(BaseModel):
    """Root of the persisted settings document."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Layout version of the YAML document; older layouts are migrated on load.",
    )
    calendar: CalendarCfg = Field(default_factory=CalendarCfg)
    annual_flow: AnnualFlowCfg = Field(default_factory=AnnualFlowCfg)
    trace: TraceCfg = Field(default_factory=TraceCfg)
    observability: ObservabilityCfg = Field(default_factory=ObservabilityCfg)


# -------------------- Persistence --------------------

CONFIG_FILENAME = "config.yaml"
HOME_ENV_VAR = "ZIWEIENGINE_HOME"

# Unversioned payloads kept these keys at the top level.
_LEGACY_FLAT_KEYS: dict[str, str] = {
    "min_year": "calendar",
    "max_year": "calendar",
    "reference_year": "annual_flow",
}


def get_config_home() -> Path:
    """Return the directory holding ``config.yaml``.

    ``ZIWEIENGINE_HOME`` takes precedence on every platform. Otherwise the
    file lives in ``%LOCALAPPDATA%\\ZiWeiEngine`` on Windows and in
    ``~/.ziweiengine`` elsewhere.
    """

    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    if os.name == "nt":
        local = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(local) / "ZiWeiEngine"
    return Path.home() / ".ziweiengine"


def config_path() -> Path:
    return get_config_home() / CONFIG_FILENAME


def default_settings() -> Settings:
    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Write ``settings`` as YAML and return the file written."""

    target = Path(path) if path is not None else config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    document = yaml.safe_dump(
        settings.model_dump(mode="json"), sort_keys=False, allow_unicode=True
    )
    target.write_text(document, encoding="utf-8")
    LOG.debug("Wrote settings to %s", target)
    return target


def _payload_schema_version(payload: dict[str, Any]) -> int:
    try:
        return max(0, int(payload.get("schema_version", 0)))
    except (TypeError, ValueError):
        return 0


def _migrate_payload(payload: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """Return ``payload`` upgraded to the current schema and whether it changed."""

    migrated = deepcopy(payload)
    version = _payload_schema_version(migrated)
    if version < 1:
        for key, section in _LEGACY_FLAT_KEYS.items():
            if key in migrated:
                migrated.setdefault(section, {})[key] = migrated.pop(key)
        version = CURRENT_SETTINGS_SCHEMA_VERSION
    changed = migrated.get("schema_version") != version
    migrated["schema_version"] = version
    return migrated, changed


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from ``path`` (default :func:`config_path`).

    A missing file is created with defaults. Older payloads are migrated and
    written back. A document that is not a YAML mapping counts as empty.
    """

    source = Path(path) if path is not None else config_path()
    if not source.exists():
        LOG.info("No settings at %s; writing defaults", source)
        settings = default_settings()
        save_settings(settings, source)
        return settings

    raw = yaml.safe_load(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        if raw is not None:
            LOG.warning("Ignoring settings in %s: expected a mapping, got %s", source, type(raw).__name__)
        raw = {}
    payload, migrated = _migrate_payload(raw)
    settings = Settings.model_validate(payload)
    if migrated:
        LOG.info("Upgraded settings in %s to schema %d", source, settings.schema_version)
        save_settings(settings, source)
    return settings


def ensure_default_config(path: Optional[Path] = None) -> Path:
    """Create the settings file with defaults unless it exists; return its path."""

    target = Path(path) if path is not None else config_path()
    if target.exists():
        return target
    return save_settings(default_settings(), target)
