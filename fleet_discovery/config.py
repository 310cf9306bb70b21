"""Frozen dataclasses for configuration and YAML loader with env-var interpolation."""

from __future__ import annotations

import os
import re
import typing
from dataclasses import dataclass, field, is_dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _interpolate_env(value: str) -> str:
    """Replace ${ENV_VAR} placeholders with environment variable values."""

    def _replace(match: re.Match) -> str:
        env_key = match.group(1)
        env_val = os.environ.get(env_key)
        if env_val is None:
            raise ConfigError(f"Environment variable '{env_key}' is not set")
        return env_val

    return _ENV_PATTERN.sub(_replace, value)


def _walk_and_interpolate(obj: Any) -> Any:
    """Recursively interpolate env vars in strings throughout a nested structure."""
    if isinstance(obj, str):
        return _interpolate_env(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(v) for v in obj]
    return obj


@dataclass(frozen=True)
class CredentialsConfig:
    path: str = ""  # empty = ~/.aws/credentials


@dataclass(frozen=True)
class DiscoveryConfig:
    bootstrap_region: str = "us-east-1"
    region: str = ""  # exact-match filter, empty = every region
    profile: str = ""  # exact-match filter, empty = every profile
    include_addressless: bool = False
    max_workers: int = 0  # cap on concurrent boto3 calls, 0 = one thread per call


@dataclass(frozen=True)
class OutputConfig:
    raw: bool = False  # no profile/region headers, no colour
    color: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"
    format: str = "text"  # "json" or "text"


@dataclass(frozen=True)
class AppConfig:
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build_nested(cls: type, data: dict[str, Any]) -> Any:
    """Construct a frozen dataclass, recursively building nested section dataclasses."""
    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in hints:
            continue
        ft = hints[key]
        if is_dataclass(ft):
            if not isinstance(value, dict):
                raise ConfigError(f"Configuration section '{key}' must be a mapping")
            kwargs[key] = _build_nested(ft, value)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate configuration from a YAML file; no path means built-in defaults."""
    if path is None:
        config = AppConfig()
        _validate(config)
        return config

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must be a YAML mapping")

    raw = _walk_and_interpolate(raw)
    config = _build_nested(AppConfig, raw)
    _validate(config)
    return config


def _validate(config: AppConfig) -> None:
    """Validate configuration values."""
    if not config.discovery.bootstrap_region:
        raise ConfigError("discovery.bootstrap_region must not be empty")

    if not isinstance(config.discovery.max_workers, int) or config.discovery.max_workers < 0:
        raise ConfigError("discovery.max_workers must be an integer >= 0 (0 = unbounded)")

    if config.logging.format not in ("json", "text"):
        raise ConfigError("logging.format must be 'json' or 'text'")
