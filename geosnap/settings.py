from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from geosnap.exceptions import ConfigurationError
from geosnap.geometry.contract import (
    DEFAULT_VIEW_HEIGHT,
    DEFAULT_VIEW_WIDTH,
    VIEWPORT_MARGIN_FACTOR,
)
from geosnap.vector.snap import SnapMode

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

CONFIG_ENV_VAR = "GEOSNAP_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/default.yaml")

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class SnapSettings(BaseModel):
    """User-facing snap toggles (mirrors the editor's snap toolbar)."""

    enabled: bool = True
    mode: SnapMode = SnapMode.BOTH
    pixels: float = Field(12.0, gt=0.0, le=100.0, description="Snap tolerance in screen pixels")
    guides_enabled: bool = True
    initial_guides: bool = Field(True, description="Horizontal/vertical guides through the first vertex")
    right_angle_lock: bool = Field(True, description="Constrain draw-90deg-polygon to axis-aligned steps")

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ViewportSettings(BaseModel):
    width: int = Field(DEFAULT_VIEW_WIDTH, ge=1)
    height: int = Field(DEFAULT_VIEW_HEIGHT, ge=1)
    margin_factor: float = Field(VIEWPORT_MARGIN_FACTOR, gt=0.0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    log_file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}', expected one of {', '.join(_LOG_LEVELS)}")
        return level


class Settings(BaseModel):
    snap: SnapSettings = Field(default_factory=SnapSettings)
    viewport: ViewportSettings = Field(default_factory=ViewportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def default(cls) -> "Settings":
        return cls()

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                the GEOSNAP_CONFIG environment variable or defaults to
                config/default.yaml.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML or
                does not describe valid settings.
        """
        config_path = path or Path(os.getenv(CONFIG_ENV_VAR, str(DEFAULT_CONFIG_PATH)))
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)},
            )
        try:
            with config_path.open("r", encoding="utf-8") as fp:
                payload = yaml.safe_load(fp) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Configuration file is not valid YAML: {config_path}",
                {"path": str(config_path), "error": str(exc)},
            ) from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping",
                {"path": str(config_path)},
            )
        try:
            return cls(**payload)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid configuration: {exc}",
                {"path": str(config_path)},
            ) from exc


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "SnapSettings",
    "ViewportSettings",
    "LoggingSettings",
    "get_settings",
]
