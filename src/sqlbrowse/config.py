"""
Configuration system for sqlbrowse using Pydantic.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class ServerConfig(BaseModel):
    """HTTP listener configuration."""

    host: str = Field("localhost", description="Interface to bind")
    port: int = Field(3000, ge=1, le=65535, description="Port to listen on")
    shutdown_timeout: float = Field(
        60.0, description="Seconds to wait for in-flight requests on shutdown"
    )


class PoolConfig(BaseModel):
    """Connection pool configuration."""

    min_size: int = Field(1, ge=0, description="Minimum connections in pool")
    max_size: int = Field(5, ge=1, description="Maximum connections in pool")
    command_timeout: Optional[float] = Field(
        None, description="Per-statement timeout in seconds (driver default if unset)"
    )

    @model_validator(mode="after")
    def check_sizes(self) -> "PoolConfig":
        if self.min_size > self.max_size:
            raise ValueError(
                f"min_size ({self.min_size}) cannot exceed max_size ({self.max_size})"
            )
        return self


class BrowseConfig(BaseModel):
    """Table browsing and serialization options."""

    default_limit: int = Field(50, ge=1, description="Rows per page when no limit is given")
    attribute_case: Literal["camel", "kebab", "snake", "none"] = Field(
        "camel", description="Case convention applied to attribute keys"
    )
    schema_name: Optional[str] = Field(
        None, description="Schema to browse (the connection's current schema if unset)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Log level"
    )
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file: Optional[str] = Field(None, description="Log file path")
    max_size: int = Field(10485760, description="Max log file size in bytes")  # 10MB
    backup_count: int = Field(5, description="Number of backup log files")


class SqlBrowseConfig(BaseSettings):
    """Main sqlbrowse configuration."""

    service_name: str = Field("sqlbrowse", description="Service name")
    debug: bool = Field(False, description="Enable debug mode")

    database_url: Optional[str] = Field(
        None, description="PostgreSQL connection URI (prompted for when unset)"
    )

    server: ServerConfig = Field(
        default_factory=ServerConfig, description="HTTP server configuration"
    )
    pool: PoolConfig = Field(
        default_factory=PoolConfig, description="Connection pool configuration"
    )
    browse: BrowseConfig = Field(
        default_factory=BrowseConfig, description="Browsing configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SQLBROWSE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SqlBrowseConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            data = cls._expand_env_vars(data)

            return cls(**data)
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration structure: {e}")

    @classmethod
    def _expand_env_vars(cls, data: Any) -> Any:
        """Recursively expand environment variables in configuration data."""
        if isinstance(data, dict):
            return {k: cls._expand_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._expand_env_vars(item) for item in data]
        elif isinstance(data, str):
            return os.path.expandvars(data)
        else:
            return data

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(exclude_none=True),
                f,
                default_flow_style=False,
                indent=2,
                sort_keys=False,
            )


def configure_logging(config: LoggingConfig, debug: bool = False) -> None:
    """Install root handlers according to the logging configuration."""
    level = logging.DEBUG if debug else getattr(logging, config.level)
    formatter = logging.Formatter(config.format)

    handlers = [logging.StreamHandler()]
    if config.file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.file,
                maxBytes=config.max_size,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
