"""Configuration management for dtupload.

Supports a YAML config file with environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import SecretStr

from dtupload.core.exceptions import ConfigurationError, DTUploadError
from dtupload.core.validation import (
    validate_artifact_name,
    validate_port,
    validate_proxy_hostname,
)

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "dtupload"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_INIT_TIMEOUT = 30
DEFAULT_UPLOAD_TIMEOUT = 300

# Environment variable names
ENV_API_KEY = "DATA_THEOREM_UPLOAD_API_KEY"
ENV_CONFIG = "DT_CONFIG"
ENV_BUILD = "DT_BUILD_TO_UPLOAD"
ENV_DONT_UPLOAD = "DT_DONT_UPLOAD"
ENV_ARTIFACTS_DIR = "DT_ARTIFACTS_DIR"
ENV_TIMEOUT = "DT_TIMEOUT"
ENV_PROXY_HOSTNAME = "DT_PROXY_HOSTNAME"
ENV_PROXY_PORT = "DT_PROXY_PORT"
ENV_PROXY_USERNAME = "DT_PROXY_USERNAME"
ENV_PROXY_PASSWORD = "DT_PROXY_PASSWORD"
ENV_PROXY_UNSECURED = "DT_PROXY_UNSECURED"

TRUTHY = ("true", "1", "yes")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


# =============================================================================
# ProxyConfig
# =============================================================================


@dataclass
class ProxyConfig:
    """Optional HTTP proxy used for both upload calls."""

    hostname: str = ""
    port: int = 0
    username: Optional[str] = None
    password: Optional[SecretStr] = field(default=None, repr=False)
    unsecured_connection: bool = False

    @property
    def enabled(self) -> bool:
        """A proxy is used only when a hostname is configured."""
        return bool(self.hostname)

    @property
    def url(self) -> str:
        """Proxy URL without credentials."""
        host = self.hostname
        if "://" not in host:
            host = f"http://{host}"
        return f"{host}:{self.port}" if self.port else host

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (excludes the password)."""
        return {
            "hostname": self.hostname,
            "port": self.port,
            "username": self.username,
            "unsecured_connection": self.unsecured_connection,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProxyConfig":
        """Create from dictionary."""
        password = data.get("password")
        return cls(
            hostname=data.get("hostname") or "",
            port=int(data.get("port") or 0),
            username=data.get("username"),
            password=SecretStr(password) if password else None,
            unsecured_connection=_as_bool(data.get("unsecured_connection", False)),
        )


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration."""

    build_to_upload: Optional[str] = None
    dont_upload: bool = False
    artifacts_dir: Optional[str] = None
    timeout: int = DEFAULT_INIT_TIMEOUT
    upload_timeout: int = DEFAULT_UPLOAD_TIMEOUT
    proxy: ProxyConfig = field(default_factory=ProxyConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.

        Raises:
            ConfigurationError: If the file is malformed or a value is invalid.
        """
        env_path = os.getenv(ENV_CONFIG)
        path = config_path or (Path(env_path) if env_path else CONFIG_FILE)
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
                if not isinstance(data, dict):
                    raise ConfigurationError(f"Config root must be a mapping: {path}")

                config.build_to_upload = data.get("build_to_upload")
                config.dont_upload = _as_bool(data.get("dont_upload", False))
                config.artifacts_dir = data.get("artifacts_dir")
                config.timeout = int(data.get("timeout", DEFAULT_INIT_TIMEOUT))
                config.upload_timeout = int(data.get("upload_timeout", DEFAULT_UPLOAD_TIMEOUT))
                config.proxy = ProxyConfig.from_dict(data.get("proxy") or {})
            except ConfigurationError:
                raise
            except Exception as e:
                raise ConfigurationError(f"Failed to load config: {e}")

        config._apply_env()
        config.validate()
        return config

    def _apply_env(self) -> None:
        if build := os.getenv(ENV_BUILD):
            self.build_to_upload = build
        if (dont_upload := os.getenv(ENV_DONT_UPLOAD)) is not None:
            self.dont_upload = _as_bool(dont_upload)
        if artifacts_dir := os.getenv(ENV_ARTIFACTS_DIR):
            self.artifacts_dir = artifacts_dir
        if timeout := os.getenv(ENV_TIMEOUT):
            try:
                self.timeout = int(timeout)
            except ValueError:
                raise ConfigurationError("Timeout must be an integer", field="timeout", value=timeout)

        if hostname := os.getenv(ENV_PROXY_HOSTNAME):
            self.proxy.hostname = hostname
        if port := os.getenv(ENV_PROXY_PORT):
            try:
                self.proxy.port = int(port)
            except ValueError:
                raise ConfigurationError("Proxy port must be an integer", field="proxy.port", value=port)
        if username := os.getenv(ENV_PROXY_USERNAME):
            self.proxy.username = username
        if password := os.getenv(ENV_PROXY_PASSWORD):
            self.proxy.password = SecretStr(password)
        if (unsecured := os.getenv(ENV_PROXY_UNSECURED)) is not None:
            self.proxy.unsecured_connection = _as_bool(unsecured)

    def validate(self) -> None:
        """Check values that can be checked before a run.

        Raises:
            ConfigurationError: If a value is invalid.
        """
        try:
            if self.build_to_upload:
                self.build_to_upload = validate_artifact_name(self.build_to_upload)
            if self.proxy.enabled:
                self.proxy.hostname = validate_proxy_hostname(self.proxy.hostname)
                self.proxy.port = validate_port(self.proxy.port)
        except DTUploadError as e:
            raise ConfigurationError(str(e))

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file (excludes secrets).

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (excludes secrets)."""
        return {
            "build_to_upload": self.build_to_upload,
            "dont_upload": self.dont_upload,
            "artifacts_dir": self.artifacts_dir,
            "timeout": self.timeout,
            "upload_timeout": self.upload_timeout,
            "proxy": self.proxy.to_dict(),
        }
