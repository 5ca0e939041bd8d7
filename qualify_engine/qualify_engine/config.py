"""Qualification engine configuration loaded from environment variables."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_NON_PROD_DATABASES: tuple[str, ...] = ("STGDV", "STGQA", "CIDDV", "CIDQA", "DEV", "TEST", "UAT")


class ConfigurationError(Exception):
    """Raised when the target database or schema is not configured."""


def _split_names(value: object) -> object:
    """Accept a JSON array or a comma- or whitespace-separated string as a list of names."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            return json.loads(stripped)
        return [part for part in stripped.replace(",", " ").split() if part]
    return value


class QualifierConfig(BaseModel):
    """Target names and non-prod databases for one qualification run.

    ``dbname`` and ``schemaname`` are used verbatim in rewritten names;
    every comparison against them is case-insensitive.
    """

    model_config = ConfigDict(frozen=True)

    dbname: str = Field(
        min_length=1,
        description="Target database used to qualify object references.",
    )
    schemaname: str = Field(
        min_length=1,
        description="Target schema used for unqualified object references.",
    )
    non_prod_databases: tuple[str, ...] = Field(
        default=DEFAULT_NON_PROD_DATABASES,
        description="Database names flagged when referenced from FROM/JOIN clauses.",
    )

    @field_validator("dbname", "schemaname", mode="before")
    @classmethod
    def _strip_name(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("non_prod_databases", mode="before")
    @classmethod
    def _parse_non_prod(cls, v: object) -> object:
        return _split_names(v)

    def is_non_prod(self, database: str) -> bool:
        """Return True if *database* is a configured non-prod database."""
        upper = database.upper()
        return any(name.upper() == upper for name in self.non_prod_databases)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with SQLQ_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="SQLQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Target
    dbname: str | None = None
    schemaname: str | None = None
    non_prod_databases: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_NON_PROD_DATABASES),
    )

    # Output
    preview: bool = False
    output_dir: Path = Path(".")

    # Telemetry
    metrics_file: Path | None = None
    structured_logging: bool = False

    @field_validator("dbname", "schemaname", mode="before")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("non_prod_databases", mode="before")
    @classmethod
    def _parse_non_prod(cls, v: object) -> object:
        return _split_names(v)

    def is_target_configured(self) -> bool:
        return self.dbname is not None and self.schemaname is not None

    def to_qualifier_config(self) -> QualifierConfig:
        """Build the engine configuration, failing if a target name is missing."""
        missing = [name for name in ("dbname", "schemaname") if getattr(self, name) is None]
        if missing:
            raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")
        return QualifierConfig(
            dbname=self.dbname,
            schemaname=self.schemaname,
            non_prod_databases=tuple(self.non_prod_databases),
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info(
            "Loaded settings: dbname=%s schemaname=%s preview=%s",
            settings.dbname,
            settings.schemaname,
            settings.preview,
        )

    return settings
