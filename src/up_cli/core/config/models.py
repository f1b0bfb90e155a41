"""Configuration models for up-cli.

Settings are read from ``~/.config/up/config.yaml`` and may be overridden
per invocation with ``UP_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from up_cli.services.uxp.config import (
    DEFAULT_CHART_NAME,
    DEFAULT_NAMESPACE,
)

CONFIG_DIR = Path.home() / ".config" / "up"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_CLOUD_ENDPOINT = "https://api.upbound.io"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_PROFILE = "default"

# Environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "UP_NAMESPACE": ("uxp", "namespace"),
    "UP_REPO_URL": ("uxp", "repo_url"),
    "UP_CACHE_DIR": ("uxp", "cache_dir"),
    "UP_KUBECONFIG": ("uxp", "kubeconfig"),
    "UP_CONTEXT": ("uxp", "context"),
    "UP_HELM_BINARY": ("uxp", "helm_binary"),
    "UP_ENDPOINT": ("cloud", "endpoint"),
    "UP_ACCOUNT": ("cloud", "account"),
    "UP_TOKEN": ("cloud", "token"),
}


class ProfileConfig(BaseModel):
    """Per-profile console logging settings.

    ``log_level`` is the console level when neither ``--verbose`` nor
    ``--debug`` is given. ``debug`` turns on debug output as ``--debug`` does.
    """

    model_config = ConfigDict(extra="forbid")

    debug: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return level


class UXPConfig(BaseModel):
    """Defaults for ``up uxp`` commands.

    ``repo_url`` and ``cache_dir`` are left unset so the installer can pick
    the stable or unstable repository and the home-relative cache itself.
    """

    model_config = ConfigDict(extra="forbid")

    namespace: str = DEFAULT_NAMESPACE
    repo_url: str | None = None
    chart_name: str = DEFAULT_CHART_NAME
    cache_dir: Path | None = None
    kubeconfig: str | None = None
    context: str | None = None
    helm_binary: str | None = None


class CloudConfig(BaseModel):
    """Upbound Cloud connection settings."""

    model_config = ConfigDict(extra="forbid")

    endpoint: str = DEFAULT_CLOUD_ENDPOINT
    account: str | None = None
    token: SecretStr | None = Field(default=None, description="Upbound Cloud API token")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid endpoint: {v}. Must be an http(s) URL")
        return v.rstrip("/")


class SystemConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    version: str = "1.0"
    profiles: dict[str, ProfileConfig] = Field(
        default_factory=lambda: {DEFAULT_PROFILE: ProfileConfig()}
    )
    uxp: UXPConfig = Field(default_factory=UXPConfig)
    cloud: CloudConfig = Field(default_factory=CloudConfig)

    def get_profile(self, name: str = DEFAULT_PROFILE) -> ProfileConfig:
        """Return the named profile.

        A missing default profile resolves to the built-in defaults.

        Raises:
            ValueError: A non-default profile is not defined.
        """
        if name in self.profiles:
            return self.profiles[name]
        if name == DEFAULT_PROFILE:
            return ProfileConfig()
        raise ValueError(f"Unknown profile: {name}. Defined: {sorted(self.profiles)}")

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> SystemConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over ``base_config`` values.

        Supported environment variables:
            UP_NAMESPACE, UP_REPO_URL, UP_CACHE_DIR, UP_KUBECONFIG,
            UP_CONTEXT, UP_HELM_BINARY: ``uxp`` section
            UP_ENDPOINT, UP_ACCOUNT, UP_TOKEN: ``cloud`` section
        """
        config_dict = dict(base_config) if base_config else {}
        for env_var, (section, field) in ENV_OVERRIDES.items():
            if value := os.environ.get(env_var):
                section_dict = dict(config_dict.get(section) or {})
                section_dict[field] = value
                config_dict[section] = section_dict
        return cls.model_validate(config_dict)

    def to_yaml(self) -> str:
        """Export configuration as YAML with a comment header.

        The cloud token is never written out.
        """
        data = self.model_dump(mode="json", exclude_none=True, exclude={"cloud": {"token"}})
        header = "# up CLI Configuration\n# Generated by: up init\n\n"
        return header + yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Load the config file as a plain mapping.

    Missing files, empty files and unparsable YAML all yield ``{}``.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return {}
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Path | None = None) -> SystemConfig | None:
    """Load and validate the config file.

    Returns:
        The configuration, or None if the file does not exist.

    Raises:
        ValueError: The file is not valid YAML or fails validation.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return None
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
    return SystemConfig.model_validate(data)


def load_settings(path: Path | None = None) -> SystemConfig:
    """Load the config file, if any, and apply environment overrides.

    Raises:
        ValueError: The merged settings fail validation.
    """
    try:
        return SystemConfig.from_env(load_raw_config(path))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
