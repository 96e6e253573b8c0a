"""Configuration for the checkhub command line.

Settings come from, in increasing priority: defaults, a YAML or JSON
config file, ``CHECKHUB_*`` environment variables and CLI flags.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from checkhub.format import Format
from checkhub.hub.filters import NameFilter
from checkhub.hub.options import Option, break_failed_count, subdir_rewrites

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAMES = ("checkhub.yaml", "checkhub.yml", "checkhub.json")

ENV_DIRECTORY = "CHECKHUB_DIRECTORY"
ENV_FORMAT = "CHECKHUB_FORMAT"
ENV_MODULES = "CHECKHUB_MODULES"
ENV_BREAK_FAILED_COUNT = "CHECKHUB_BREAK_FAILED_COUNT"
ENV_LOG_LEVEL = "CHECKHUB_LOG_LEVEL"


class ConfigError(ValueError):
    """Raised when the checkhub configuration is invalid."""


class Settings(BaseModel):
    """Resolved configuration for a checkhub run."""

    directory: str | None = Field(default=None, description="Directory holding the data files")
    format: Format = Field(default=Format.JSON, description="Format of the data files")
    modules: list[str] = Field(
        default_factory=list, description="Modules to import so their checkers register"
    )
    include: list[str] = Field(default_factory=list, description="Glob patterns of checkers to run")
    exclude: list[str] = Field(default_factory=list, description="Glob patterns of checkers to skip")
    break_failed_count: int = Field(default=1, description="Stop checking after this many failures")
    subdir_rewrites: dict[str, str] = Field(default_factory=dict)
    report_path: str | None = Field(default=None, description="Write the run outcome as JSON here")
    log_level: str = "INFO"

    @field_validator("modules", "include", "exclude", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    def to_filter(self) -> NameFilter | None:
        if not self.include and not self.exclude:
            return None
        return NameFilter(include=self.include, exclude=self.exclude)

    def to_options(self) -> list[Option]:
        return [
            break_failed_count(self.break_failed_count),
            subdir_rewrites(self.subdir_rewrites),
        ]


def find_config_file(cwd: Path | None = None) -> Path | None:
    """Return the first default config file present in *cwd*."""
    base = cwd or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def _load_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        elif suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            raise ConfigError(f"Unsupported configuration format: {path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, Mapping):
        raise ConfigError("Configuration file must contain a mapping at the root.")
    return dict(data)


def _environment_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if ENV_DIRECTORY in env:
        overrides["directory"] = env[ENV_DIRECTORY]
    if ENV_FORMAT in env:
        overrides["format"] = env[ENV_FORMAT].lower()
    if ENV_MODULES in env:
        overrides["modules"] = env[ENV_MODULES]
    if ENV_BREAK_FAILED_COUNT in env:
        overrides["break_failed_count"] = env[ENV_BREAK_FAILED_COUNT]
    if ENV_LOG_LEVEL in env:
        overrides["log_level"] = env[ENV_LOG_LEVEL]
    return overrides


def load_settings(
    path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Load and validate settings.

    Args:
        path: Config file. ``None`` looks for ``checkhub.yaml`` (or .yml,
            .json) in the current directory and uses defaults if absent.
        overrides: Values from CLI flags; ``None`` entries are ignored.
        env: Environment mapping, defaults to ``os.environ``.
    """
    env_map = os.environ if env is None else env

    config_path = path if path is not None else find_config_file()
    data: dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Reading configuration from %s", config_path)
        data = _load_config_file(config_path)

    data.update(_environment_overrides(env_map))
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
