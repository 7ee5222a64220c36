"""Configuration models and YAML loader for the job board engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

ALLOWED_BACKENDS = {"sqlite", "memory"}
ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


class DatabaseConfig(BaseModel):
    """Record store configuration."""

    backend: str = "sqlite"
    path: str = "data/jobboard.db"

    @field_validator("backend")
    @classmethod
    def backend_known(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in ALLOWED_BACKENDS:
            msg = f"backend must be one of {sorted(ALLOWED_BACKENDS)}, got '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("path")
    @classmethod
    def path_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "database path must not be empty"
            raise ValueError(msg)
        return v.strip()


class SeedConfig(BaseModel):
    """Demo data loaded into an empty store on init."""

    demo_data: bool = True


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def level_known(cls, v: str) -> str:
        v = v.upper().strip()
        if v not in ALLOWED_LOG_LEVELS:
            msg = f"log level must be one of {sorted(ALLOWED_LOG_LEVELS)}, got '{v}'"
            raise ValueError(msg)
        return v


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
