"""Configuration management for Schema Diff using Pydantic.

This module provides type-safe configuration models for the snapshot
location, diff display and logging.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PathConfig(BaseModel):
    """Configuration for file paths."""

    snapshot_file: str = Field(
        default="schema_snapshot.yaml",
        description="YAML snapshot of the host's installed and defined schema metadata",
    )
    report_dir: str = Field(
        default="reports", description="Directory relative --output report paths are saved under"
    )


class DiffConfig(BaseModel):
    """Field diff display configuration."""

    title: str = Field(default="View difference", description="Title of the field diff page")
    installed_label: str = Field(default="Installed", description="Header of the installed side")
    defined_label: str = Field(default="Defined", description="Header of the defined side")
    leading_context_lines: int | None = Field(
        default=2,
        ge=0,
        le=1000,
        description="Unchanged lines shown before a change (null shows every earlier line)",
    )
    trailing_context_lines: int | None = Field(
        default=2,
        ge=0,
        le=1000,
        description="Unchanged lines shown after a change (null shows every later line)",
    )
    route_prefix: str = Field(
        default="/admin/reports/schema-diff",
        description="Path the field diff operation is routed under",
    )

    @field_validator("route_prefix")
    @classmethod
    def validate_route_prefix(cls, v: str) -> str:
        """Validate route prefix is an absolute path."""
        if not v.startswith("/"):
            raise ValueError("Route prefix must start with /")
        return v.rstrip("/") or "/"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="WARNING",
        description="Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    file_level: str = Field(
        default="DEBUG",
        description="File log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    format: str = Field(default="json", description="Log format (json or console)")
    file: str | None = Field(default=None, description="Log file path")

    @field_validator("level", "file_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "console"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Log format must be one of: {', '.join(valid_formats)}")
        return v_lower


class SchemaDiffConfig(BaseSettings):
    """Main Schema Diff configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SCHEMA_DIFF_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    paths: PathConfig = Field(default_factory=PathConfig, description="Path configuration")
    diff: DiffConfig = Field(default_factory=DiffConfig, description="Diff display configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )


def load_config_from_yaml(config_path: str | Path) -> SchemaDiffConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        SchemaDiffConfig: Loaded configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        raise ValueError(f"Empty configuration file: {config_path}")
    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {config_path}")

    config_data = _expand_env_vars(config_data)

    return SchemaDiffConfig(**config_data)


def _expand_env_vars(data: dict) -> dict:
    """Recursively expand environment variables in config dict.

    Supports ${VAR_NAME} syntax for environment variable substitution.

    Args:
        data: Configuration dictionary

    Returns:
        dict: Dictionary with expanded environment variables
    """
    if isinstance(data, dict):
        return {k: _expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        if data.startswith("${") and data.endswith("}"):
            var_name = data[2:-1]
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(
                    f"Environment variable '{var_name}' not found. "
                    f"Please set it in your environment or .env file."
                )
            return env_value
        return data
    else:
        return data


def save_config_to_yaml(config: SchemaDiffConfig, output_path: str | Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration to save
        output_path: Path to output YAML file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
