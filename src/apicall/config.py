"""Configuration management for apicall.

Settings come from YAML or JSON config files and environment variables,
in that order of precedence. The loaded :class:`ApiCallConfig` is used to
build the ``httpx`` clients and the logging hook for a call surface.
"""

import json
import logging
import os
import typing as _t

from enum import Enum
from pathlib import Path

import httpx
import yaml

from pydantic import BaseModel, Field

if _t.TYPE_CHECKING:
    from .http.loggers import HttpLogging


class LogStyle(str, Enum):
    """Which logging hook a call surface is built with."""

    STDOUT = "stdout"
    LOGGER = "logger"


__all__ = [
    "ApiCallConfig",
    "LogStyle",
    "build_async_client",
    "build_client",
    "build_http_logging",
    "find_config_files",
    "get_config",
    "load_config",
    "load_config_file",
]

CONFIG_FILENAMES = ["config.yaml", "config.yml", "config.json"]


class ApiCallConfig(BaseModel):
    """Main configuration class for apicall."""

    # Connection settings
    base_url: str = ""
    timeout: float = 30.0
    connect_timeout: float = 10.0
    follow_redirects: bool = True

    # Request settings
    default_headers: dict[str, str] = Field(default_factory=dict)

    # Logging
    log_style: LogStyle = LogStyle.STDOUT
    log_level: int = logging.INFO
    debug: bool = False


def load_config_file(config_path: Path) -> dict[str, _t.Any]:
    """Load configuration from a YAML or JSON file."""
    if not config_path.exists():
        return {}

    try:
        content = config_path.read_text(encoding="utf-8")

        if config_path.suffix.lower() in [".yaml", ".yml"]:
            return yaml.safe_load(content) or {}
        if config_path.suffix.lower() == ".json":
            return json.loads(content) or {}
        raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def find_config_files(config_file: Path | None = None) -> list[Path]:
    """Find all configuration files in order of precedence.

    Args:
        config_file: Optional custom config file path to use instead of defaults

    Searches for config files in:
    1. ~/.apicall/ (global user config)
    2. Current working directory (project-specific config)

    Later files override earlier ones. A custom config file replaces both.
    """
    if config_file:
        if not config_file.exists():
            raise ValueError(f"Specified config file not found: {config_file}")
        return [config_file]

    config_files = []
    for config_dir in (Path.home() / ".apicall", Path.cwd()):
        for filename in CONFIG_FILENAMES:
            config_path = config_dir / filename
            if config_path.exists():
                config_files.append(config_path)

    return config_files


def _env_flag(name: str) -> bool:
    return os.environ[name].lower() in ("1", "true", "yes")


def load_config(config_file: Path | str | None = None) -> ApiCallConfig:
    """Load configuration from files and environment variables.

    Args:
        config_file: Optional path to a specific config file to use
    """
    config_data: dict[str, _t.Any] = {}

    config_path = Path(config_file) if config_file else None
    for config_file_path in find_config_files(config_path):
        config_data.update(load_config_file(config_file_path))

    # Environment variables win over files
    if "APICALL_BASE_URL" in os.environ:
        config_data["base_url"] = os.environ["APICALL_BASE_URL"]

    if "APICALL_TIMEOUT" in os.environ:
        config_data["timeout"] = float(os.environ["APICALL_TIMEOUT"])

    if "APICALL_CONNECT_TIMEOUT" in os.environ:
        config_data["connect_timeout"] = float(os.environ["APICALL_CONNECT_TIMEOUT"])

    if "APICALL_LOG_STYLE" in os.environ:
        config_data["log_style"] = os.environ["APICALL_LOG_STYLE"].lower()

    if "DEBUG" in os.environ:
        config_data["debug"] = _env_flag("DEBUG")

    known = {key: value for key, value in config_data.items() if key in ApiCallConfig.model_fields}
    return ApiCallConfig.model_validate(known)


# Global config instance
_config: ApiCallConfig | None = None
_config_file: Path | None = None


def get_config(config_file: Path | str | None = None) -> ApiCallConfig:
    """Get the global configuration, reloading when a different file is requested."""
    global _config, _config_file

    config_path = Path(config_file) if config_file else None
    if _config is None or config_path != _config_file:
        _config = load_config(config_path)
        _config_file = config_path

    return _config


def _timeout(config: ApiCallConfig) -> httpx.Timeout:
    return httpx.Timeout(timeout=config.timeout, connect=config.connect_timeout)


def build_client(config: ApiCallConfig | None = None) -> httpx.Client:
    """Create a synchronous ``httpx.Client`` from configuration."""
    config = config or get_config()
    return httpx.Client(
        base_url=config.base_url,
        timeout=_timeout(config),
        headers=dict(config.default_headers),
        follow_redirects=config.follow_redirects,
    )


def build_async_client(config: ApiCallConfig | None = None) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` from configuration."""
    config = config or get_config()
    return httpx.AsyncClient(
        base_url=config.base_url,
        timeout=_timeout(config),
        headers=dict(config.default_headers),
        follow_redirects=config.follow_redirects,
    )


def build_http_logging(config: ApiCallConfig | None = None) -> "HttpLogging":
    """Create the logging hook selected by ``log_style``."""
    from .http.loggers import LoggerHttpLogging, StdoutHttpLogging

    config = config or get_config()
    if config.log_style == LogStyle.LOGGER:
        return LoggerHttpLogging()
    return StdoutHttpLogging()
