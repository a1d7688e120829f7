"""Configuration management for TypeNinja."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.metrics import TAB_WIDTH
from core.models import SessionConfig, SessionMode

log = logging.getLogger("typeninja.config")


def default_settings_path() -> Path:
    """Settings file in the XDG config directory."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "typeninja" / "settings.json"


class TrainerSettings(BaseModel):
    """Trainer settings with validation."""

    mode: SessionMode = Field(
        default=SessionMode.WORDS, description="Session bound (words or time)"
    )
    word_count: int = Field(
        default=25, gt=0, le=500, description="Random words per session (words mode)"
    )
    time_limit_seconds: int = Field(
        default=30, gt=0, le=3600, description="Session length (time mode, seconds)"
    )
    preserve_formatting: bool = Field(
        default=True,
        description="Type documents with whitespace preserved (code mode)",
    )
    tab_width: int = Field(
        default=TAB_WIDTH, description="Spaces a target tab stands for (fixed)"
    )
    recent_keys_limit: int = Field(
        default=20, ge=1, le=200, description="Keys shown in the recent keys log"
    )
    timer_interval_ms: int = Field(
        default=1000, gt=0, description="Session tick interval (ms)"
    )

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    @field_validator("tab_width")
    @classmethod
    def validate_tab_width(cls, v):
        """The engines only support their own tab width."""
        if v != TAB_WIDTH:
            raise ValueError(f"tab_width must be {TAB_WIDTH}, got {v}")
        return v

    @field_validator("timer_interval_ms")
    @classmethod
    def validate_interval(cls, v):
        """Keep the tick at a whole number of 100ms steps."""
        if v % 100 != 0:
            raise ValueError(f"timer_interval_ms ({v}) must be a multiple of 100")
        return v


class Config:
    """Configuration manager using a JSON file with Pydantic validation."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize config, loading the settings file if it exists.

        Args:
            path: Settings file (defaults to the XDG config location)
        """
        self.path = path or default_settings_path()
        self.settings = self._load()

    def _load(self) -> TrainerSettings:
        if not self.path.exists():
            return TrainerSettings()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return TrainerSettings(**data)
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
            log.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return TrainerSettings()

    def save(self) -> None:
        """Write settings to the settings file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self.settings.model_dump(), indent=2), encoding="utf-8"
        )

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get configuration value.

        Args:
            key: Setting key
            default: Value for keys that are not settings

        Returns:
            Setting value
        """
        if key in TrainerSettings.model_fields:
            return getattr(self.settings, key)
        return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value with pydantic validation and save.

        Args:
            key: Setting key
            value: Setting value

        Raises:
            ValueError: If key is unknown or value fails validation
        """
        if key not in TrainerSettings.model_fields:
            raise ValueError(f"Unknown setting: {key}")

        try:
            data = self.settings.model_dump()
            data[key] = value
            self.settings = TrainerSettings(**data)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {key}: {e}")

        self.save()

    def get_all(self) -> dict[str, Any]:
        """Get all settings as dictionary."""
        return self.settings.model_dump()

    def session_config(self) -> SessionConfig:
        """Build session parameters from the settings."""
        return SessionConfig(
            mode=self.settings.mode,
            target_word_count=self.settings.word_count,
            target_duration_seconds=self.settings.time_limit_seconds,
            preserve_formatting=self.settings.preserve_formatting,
        )
