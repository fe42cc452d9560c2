import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class APIKeyConfig(BaseModel):
    token: str


class PlatformSettings(BaseModel):
    """Connection to the learning platform holding submissions and their threads."""

    host: str
    shared_key: str
    timeout: float = Field(default=30, gt=0)


class AnalysisSettings(BaseModel):
    """Connection to the static-analysis service."""

    host: str
    timeout: float = Field(default=30, gt=0)


class CommentSettings(BaseModel):
    directory: Path
    track: str = Field(default="ruby")

    @field_validator("track")
    @classmethod
    def validate_track(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError(f"Invalid track identifier: {value!r}")
        return value


class WorkerSettings(BaseModel):
    concurrency: int = Field(default=4, ge=1)


class SentrySettings(BaseModel):
    dsn: Optional[str] = Field(default=None)
    environment: str = Field(default="development")
    release: Optional[str] = Field(default=None)


class Settings(BaseModel):
    """Settings represents application configuration settings loaded from a YAML file."""

    api_keys: list[APIKeyConfig]
    log_level: str = Field(default="INFO")
    platform: PlatformSettings
    analysis: AnalysisSettings
    comments: CommentSettings
    worker: WorkerSettings = Field(default_factory=WorkerSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    @classmethod
    def get_settings(cls):
        """Get the settings from the configuration file."""
        file_path_env = os.environ.get("APPLICATION_YML_PATH")
        if not file_path_env:
            raise EnvironmentError(
                "APPLICATION_YML_PATH environment variable is not set."
            )

        file_path = Path(file_path_env)
        try:
            with open(file_path, "r", encoding="utf-8") as file:
                settings_file = yaml.safe_load(file)
        except FileNotFoundError as e:
            raise FileNotFoundError(
                f"Configuration file not found at {file_path}."
            ) from e
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML file at {file_path}.") from e

        loaded = cls.model_validate(settings_file)
        # Relative comment directories are relative to the configuration file
        if not loaded.comments.directory.is_absolute():
            loaded.comments.directory = (
                file_path.resolve().parent / loaded.comments.directory
            )
        return loaded


settings = Settings.get_settings()
