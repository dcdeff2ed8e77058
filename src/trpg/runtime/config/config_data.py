"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field

OrphanPolicy = Literal["detach", "delete"]


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/trpg.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./trpg.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def connection_string(self) -> str:
        """Construct the database connection string, injecting the password if configured."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if not self.password_env_var:
            return self.url

        password = os.getenv(self.password_env_var)
        if password is None:
            raise ValueError(f"Environment variable {self.password_env_var} not set")

        if base_url.password and base_url.password != password:
            logger.warning(
                "Database password from environment variable does not match the one in the URL. "
                "Using password from environment variable."
            )
        return base_url.set(password=password).render_as_string(hide_password=False)


class PersistenceConfig(BaseModel):
    """Persistence rules for account records and their owned rows."""

    orphan_policy: OrphanPolicy = Field(
        default="detach",
        description="What happens to a character or equipment row released by its owner",
    )
    default_actor: str | None = Field(
        default="system", description="Actor recorded in audit fields when none is given"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    name: str = Field(default="trpg", description="Application name")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    persistence: PersistenceConfig = Field(
        default_factory=PersistenceConfig, description="Persistence configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
