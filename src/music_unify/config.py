from __future__ import annotations

import os
import tomllib
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    TEXT = "text"
    JSON = "json"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING")  # DEBUG, INFO, WARNING, ERROR
    format: str = Field(default="%(message)s")


class OutputConfig(BaseModel):
    """Rendering of unified records."""

    format: OutputFormat = Field(default=OutputFormat.TEXT)
    json_indent: int = Field(default=2, ge=0)


class ResolutionConfig(BaseModel):
    """Resolution pipeline behaviour."""

    # Abort when the video search comes back empty instead of continuing
    # without YouTube data
    strict: bool = Field(default=False)


class Config(BaseModel):
    """
    Main configuration for music-unify.

    Loads from TOML file with optional environment variable overrides.
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """
        Load configuration from TOML file with environment variable overrides.

        Environment variables take precedence and follow the pattern:
        MUSIC_UNIFY_<SECTION>_<KEY> (e.g., MUSIC_UNIFY_OUTPUT_JSON_INDENT)
        """
        config_dict: dict[str, object] = {}

        if config_path and config_path.exists():
            config_dict = tomllib.loads(config_path.read_text())

        config_dict = cls._merge_env_overrides(config_dict)
        return cls.model_validate(config_dict)

    @classmethod
    def _merge_env_overrides(cls, config_dict: dict[str, object]) -> dict[str, object]:
        """Return the dictionary with env vars applied, ready for validation."""
        env_prefix = "MUSIC_UNIFY_"

        logging_config = config_dict.setdefault("logging", {})
        if not isinstance(logging_config, dict):
            logging_config = {}
            config_dict["logging"] = logging_config

        if log_level := os.getenv(f"{env_prefix}LOGGING_LEVEL"):
            logging_config["level"] = log_level
        if log_format := os.getenv(f"{env_prefix}LOGGING_FORMAT"):
            logging_config["format"] = log_format

        output = config_dict.setdefault("output", {})
        if not isinstance(output, dict):
            output = {}
            config_dict["output"] = output

        if output_format := os.getenv(f"{env_prefix}OUTPUT_FORMAT"):
            output["format"] = output_format.lower()
        if json_indent := os.getenv(f"{env_prefix}OUTPUT_JSON_INDENT"):
            output["json_indent"] = json_indent

        resolution = config_dict.setdefault("resolution", {})
        if not isinstance(resolution, dict):
            resolution = {}
            config_dict["resolution"] = resolution

        if strict := os.getenv(f"{env_prefix}RESOLUTION_STRICT"):
            resolution["strict"] = strict.lower() in ("true", "1", "yes")

        return config_dict


## Tests


def test_config_defaults():
    config = Config()
    assert config.logging.level == "WARNING"
    assert config.output.format == OutputFormat.TEXT
    assert config.output.json_indent == 2
    assert config.resolution.strict is False


def test_config_from_dict():
    config = Config.model_validate(
        {
            "output": {"format": "json", "json_indent": 4},
            "resolution": {"strict": True},
        }
    )
    assert config.output.format == OutputFormat.JSON
    assert config.output.json_indent == 4
    assert config.resolution.strict is True


def test_config_env_overrides(
    monkeypatch,  # pyright: ignore[reportMissingParameterType,reportUnknownParameterType]
):
    monkeypatch.setenv("MUSIC_UNIFY_OUTPUT_FORMAT", "JSON")  # pyright: ignore[reportUnknownMemberType]
    monkeypatch.setenv("MUSIC_UNIFY_OUTPUT_JSON_INDENT", "0")  # pyright: ignore[reportUnknownMemberType]
    monkeypatch.setenv("MUSIC_UNIFY_RESOLUTION_STRICT", "yes")  # pyright: ignore[reportUnknownMemberType]
    monkeypatch.setenv("MUSIC_UNIFY_LOGGING_LEVEL", "DEBUG")  # pyright: ignore[reportUnknownMemberType]

    config = Config.load()
    assert config.output.format == OutputFormat.JSON
    assert config.output.json_indent == 0
    assert config.resolution.strict is True
    assert config.logging.level == "DEBUG"


def test_config_load_nonexistent_file():
    config = Config.load(Path("/nonexistent/config.toml"))
    assert config.output.format == OutputFormat.TEXT
    assert config.resolution.strict is False
