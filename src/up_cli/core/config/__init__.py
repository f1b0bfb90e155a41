"""Configuration management with Pydantic validation."""

from up_cli.core.config.models import (
    CloudConfig,
    ProfileConfig,
    SystemConfig,
    UXPConfig,
    load_config,
    load_raw_config,
    load_settings,
)

__all__ = [
    "CloudConfig",
    "ProfileConfig",
    "SystemConfig",
    "UXPConfig",
    "load_config",
    "load_raw_config",
    "load_settings",
]
