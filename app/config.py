from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.timeline import TimelineLayoutConfig

DEFAULT_CONFIG_PATH = Path("config/timeline.yaml")


class TimelineSettings(BaseModel):
    pixels_per_hour: float = Field(default=60.0, gt=0)
    left_offset_pixels: float = Field(default=0.0, ge=0)
    min_width_pixels: float = Field(default=60.0, ge=0)
    row_height_pixels: float = Field(default=48.0, ge=0)
    base_offset_pixels: float = 0.0
    reserve_min_width: bool = False

    def to_layout_config(self, **overrides: object) -> TimelineLayoutConfig:
        values: dict[str, object] = {
            "pixels_per_hour": self.pixels_per_hour,
            "left_offset_pixels": self.left_offset_pixels,
            "min_width_pixels": self.min_width_pixels,
            "row_height_pixels": self.row_height_pixels,
            "base_offset_pixels": self.base_offset_pixels,
            "reserve_min_width": self.reserve_min_width,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return TimelineLayoutConfig(**values)  # type: ignore[arg-type]


class SourceSettings(BaseModel):
    kind: Literal["filesystem", "http"] = "filesystem"
    tasks_path: Path = Path("data/tasks.json")
    api_base_url: str = "http://localhost:8080"
    timeout_seconds: float = Field(default=5.0, gt=0)

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, value: object) -> str:
        return str(value).strip().lower() if value else "filesystem"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TIMELINE_", env_nested_delimiter="__")

    title: str = "Day Timeline"
    log_level: str = "INFO"
    timeline: TimelineSettings = TimelineSettings()
    source: SourceSettings = SourceSettings()

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return str(value).upper() if value else "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("TIMELINE_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
