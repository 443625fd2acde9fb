"""Configuration helpers exposed at :mod:`ziweiengine.config`."""

from __future__ import annotations

from .settings import (
    CURRENT_SETTINGS_SCHEMA_VERSION,
    AnnualFlowCfg,
    CalendarCfg,
    ObservabilityCfg,
    Settings,
    TraceCfg,
    config_path,
    default_settings,
    ensure_default_config,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "AnnualFlowCfg",
    "CalendarCfg",
    "ObservabilityCfg",
    "Settings",
    "TraceCfg",
    "config_path",
    "default_settings",
    "ensure_default_config",
    "get_config_home",
    "load_settings",
    "save_settings",
]
