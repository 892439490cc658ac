"""Configuration models for jsbundle."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from jsbundle.errors import ConfigError
from jsbundle.paths import CONFIG_FILE, DEFAULT_MARKER


class LayoutConfig(BaseModel):
    """Source tree layout."""

    root: str = Field(
        default=".",
        description="Project root; relative paths below are resolved against it",
    )
    src_dir: str = Field(
        default="src",
        description="Directory holding public modules",
    )
    internal_dir: str = Field(
        default="internal",
        description="Subdirectory of src_dir holding internal (_-prefixed) modules",
    )
    extension: str = Field(
        default=".js",
        description="Module file extension",
    )


class TemplateConfig(BaseModel):
    """Bundle template configuration."""

    path: str | None = Field(
        default=None,
        description="Template file (None uses the built-in UMD wrapper)",
    )
    marker: str = Field(
        default=DEFAULT_MARKER,
        description="Text in the template replaced by the generated code",
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    aggregate_name: str = Field(
        default="R",
        description="Variable holding the object of requested modules",
    )
    indent: str = Field(
        default="    ",
        description="One level of indentation in the generated code",
    )


class BundleConfig(BaseSettings):
    """Main jsbundle configuration."""

    model_config = SettingsConfigDict(
        env_prefix="JSBUNDLE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    version: str = Field(default="1.0", description="Config version")
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> BundleConfig:
        """Load configuration from file and environment.

        The first existing file wins:
        1. Provided config file path
        2. .jsbundlerc.toml in current directory
        3. .jsbundlerc.toml in home directory

        Keys the file leaves unset fall back to JSBUNDLE_* environment
        variables, then to built-in defaults.
        """
        config_data: dict[str, Any] = {}

        locations = []
        if config_path:
            locations.append(config_path)
        locations.extend(
            [
                Path.cwd() / CONFIG_FILE,
                Path.home() / CONFIG_FILE,
            ]
        )

        for loc in locations:
            if loc.exists():
                try:
                    with open(loc, "rb") as f:
                        config_data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"Invalid config file {loc}: {e}", path=str(loc)) from e
                break

        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
