"""Configuration system for client-side event tracking.

This module provides configuration management for the tracking client,
including YAML loading, environment variables and construction overrides.
Sources are applied in increasing precedence:

    defaults < config file < environment variables < overrides

Missing values fall back to safe defaults: tracking disabled, ``localhost``
domain and a local API host.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .errors import TrackingConfigurationError
from .models import DEFAULT_SENSITIVE_FIELDS, ITEM_LABEL_LIMIT, SEARCH_LABEL_LIMIT

logger = logging.getLogger(__name__)


ENV_PREFIX = "TAG_COURIER_"
DEFAULT_SITE_DOMAIN = "localhost"
DEFAULT_API_HOST = "http://localhost:8000"


class PlausibleConfig(BaseModel):
    """Settings for the Plausible-compatible HTTP transport."""

    track_localhost: bool = Field(
        default=True,
        description="Send events when the site domain is a localhost address"
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="HTTP request timeout in seconds"
    )
    user_agent: str = Field(
        default="tag-courier/1.0",
        description="User-Agent header sent with events"
    )
    fire_and_forget: bool = Field(
        default=True,
        description="Deliver events on a background worker instead of inline"
    )
    event_path: str = Field(
        default="/api/event",
        description="Event endpoint path on the API host"
    )
    max_pending: int = Field(
        default=100,
        ge=1,
        description="Maximum queued background deliveries; further events are dropped"
    )


class TrackingConfig(BaseModel):
    """Root configuration for the tracking client."""

    enabled: bool = Field(
        default=False,
        description="Enable event tracking entirely"
    )
    site_domain: str = Field(
        default=DEFAULT_SITE_DOMAIN,
        description="Destination domain/site identifier"
    )
    api_host: str = Field(
        default=DEFAULT_API_HOST,
        description="Analytics API host events are delivered to"
    )
    environment: str = Field(
        default="production",
        description="Environment name (affects diagnostic verbosity)"
    )

    default_consent: bool = Field(
        default=True,
        description="Initial analytics consent for newly created consent gates"
    )
    sensitive_fields: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SENSITIVE_FIELDS),
        description="Property names removed from every event"
    )
    search_label_limit: int = Field(
        default=SEARCH_LABEL_LIMIT,
        ge=1,
        description="Maximum characters of a search term label"
    )
    item_label_limit: int = Field(
        default=ITEM_LABEL_LIMIT,
        ge=1,
        description="Maximum characters of an opened item label"
    )

    transports: List[str] = Field(
        default_factory=lambda: ["plausible"],
        description="Registered transport names to build"
    )
    plausible: PlausibleConfig = Field(default_factory=PlausibleConfig)

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment name."""
        allowed_envs = ['development', 'staging', 'production', 'test']
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator('api_host')
    @classmethod
    def validate_api_host(cls, v):
        """Require an absolute http(s) API host without trailing slash."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("api_host must start with http:// or https://")
        return v.rstrip('/')

    @field_validator('site_domain')
    @classmethod
    def validate_site_domain(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("site_domain must not be empty")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


class TrackingConfigManager:
    """Manages tracking configuration loading and validation."""

    def __init__(self, config_path: Union[str, Path, None] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[TrackingConfig] = None

    def load_config(
        self,
        config_path: Union[str, Path, None] = None,
        overrides: Optional[Mapping[str, Any]] = None
    ) -> TrackingConfig:
        """Load configuration from file, environment and overrides.

        Args:
            config_path: Optional override for config file path
            overrides: Construction-time overrides; keys set to None are ignored

        Returns:
            Loaded and validated configuration

        Raises:
            TrackingConfigurationError: If the file or resulting values are invalid
        """
        if config_path:
            self.config_path = Path(config_path)
        elif self.config_path is None and (env_path := os.getenv(f"{ENV_PREFIX}CONFIG")):
            self.config_path = Path(env_path)

        config_data: Dict[str, Any] = {}

        if self.config_path:
            config_data = self._load_file(self.config_path)

        env_config = self._load_environment_variables()
        self._merge_config(config_data, env_config)

        if overrides:
            explicit = {key: value for key, value in overrides.items() if value is not None}
            self._merge_config(config_data, explicit)
            logger.debug(f"Applied configuration overrides: {sorted(explicit)}")

        try:
            self._config = TrackingConfig(**config_data)
        except Exception as e:
            raise TrackingConfigurationError(f"Invalid tracking configuration: {e}")

        return self._config

    def get_config(self) -> TrackingConfig:
        """Get current configuration, loading defaults if needed."""
        if self._config is None:
            return self.load_config()
        return self._config

    def apply_overrides(
        self,
        config: TrackingConfig,
        overrides: Optional[Mapping[str, Any]] = None
    ) -> TrackingConfig:
        """Return a copy of an already built configuration with overrides applied.

        Keys set to None are ignored, as in ``load_config``.

        Raises:
            TrackingConfigurationError: If the resulting values are invalid
        """
        explicit = {key: value for key, value in (overrides or {}).items() if value is not None}
        if not explicit:
            return config

        config_data = config.model_dump()
        self._merge_config(config_data, explicit)
        logger.debug(f"Applied configuration overrides: {sorted(explicit)}")

        try:
            return TrackingConfig(**config_data)
        except Exception as e:
            raise TrackingConfigurationError(f"Invalid tracking configuration: {e}")

    def _load_file(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.info(f"Tracking config file not found, using defaults: {path}")
            return {}

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise TrackingConfigurationError(f"Failed to parse YAML config: {e}")
        except IOError as e:
            raise TrackingConfigurationError(f"Failed to read config file: {e}")

        if not isinstance(data, dict):
            raise TrackingConfigurationError("Config file must contain a YAML dictionary")

        logger.info(f"Loaded tracking configuration from: {path}")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        if (enabled := os.getenv(f"{ENV_PREFIX}TRACKING_ENABLED")) is not None:
            env_config['enabled'] = enabled.strip().lower() == 'true'

        if env_domain := os.getenv(f"{ENV_PREFIX}SITE_DOMAIN"):
            env_config['site_domain'] = env_domain

        if env_host := os.getenv(f"{ENV_PREFIX}API_HOST"):
            env_config['api_host'] = env_host

        if env_environment := os.getenv(f"{ENV_PREFIX}ENVIRONMENT"):
            env_config['environment'] = env_environment

        return env_config

    def _merge_config(self, base_config: Dict[str, Any], override_config: Mapping[str, Any]) -> None:
        """Deep merge configuration dictionaries."""
        for key, value in override_config.items():
            if key in base_config and isinstance(base_config[key], dict) and isinstance(value, dict):
                self._merge_config(base_config[key], value)
            else:
                base_config[key] = value


def load_tracking_config(
    config_path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None
) -> TrackingConfig:
    """Load tracking configuration with a fresh manager."""
    return TrackingConfigManager(config_path).load_config(overrides=overrides)
