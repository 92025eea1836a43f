"""
============================================================================
Cryptsy Private API Client - Configuration
============================================================================

This module provides configuration management for the client:
- Environment variable parsing with type safety
- Default values for optional configuration
- Fail-closed validation when credentials are missing (CRYPTSY-CFG-001)

ENVIRONMENT VARIABLES:
    - CRYPTSY_PUBLIC_KEY: Public API key (REQUIRED)
    - CRYPTSY_PRIVATE_KEY: Private API key (REQUIRED)
    - CRYPTSY_API_HOST: API host (default: api.cryptsy.com)
    - CRYPTSY_API_PATH: API path (default: /api)
    - CRYPTSY_TIMEOUT_SECONDS: Request timeout (default: 5)
    - CRYPTSY_POOL_SIZE: Pooled connections (default: 5)
    - CRYPTSY_VERIFY_TLS: Validate certificates (default: true)

ERROR CODES:
    - CRYPTSY-CFG-001: Required configuration missing or invalid

============================================================================
"""

from dataclasses import dataclass, field
from typing import List
import logging
import os

from cryptsy.errors import ConfigurationError
from cryptsy.transport import (
    DEFAULT_HOST,
    DEFAULT_PATH,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_POOL_SIZE,
)

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.lower().strip() in ("true", "1", "yes", "on")


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning(
            f"[CRYPTSY-CFG] Invalid {name} value: {raw}, using default: {default}"
        )
        return default


@dataclass
class CryptsyConfig:
    """
    Client configuration.

    The private key is excluded from repr() and to_dict().
    """

    public_key: str = ""
    private_key: str = field(default="", repr=False)
    api_host: str = DEFAULT_HOST
    api_path: str = DEFAULT_PATH
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    pool_size: int = DEFAULT_POOL_SIZE
    verify_tls: bool = True

    def validate(self) -> None:
        """
        Validate configuration completeness.

        Raises:
            ConfigurationError: If credentials are missing or bounds are invalid
        """
        errors: List[str] = []

        if not self.public_key:
            errors.append("CRYPTSY_PUBLIC_KEY must be set")
        if not self.private_key:
            errors.append("CRYPTSY_PRIVATE_KEY must be set")
        if self.timeout_seconds <= 0:
            errors.append(
                f"CRYPTSY_TIMEOUT_SECONDS must be positive, got: {self.timeout_seconds}"
            )
        if self.pool_size <= 0:
            errors.append(f"CRYPTSY_POOL_SIZE must be positive, got: {self.pool_size}")
        if not self.api_host:
            errors.append("CRYPTSY_API_HOST must not be empty")

        if errors:
            error_msg = "Cryptsy configuration validation failed: " + "; ".join(errors)
            logger.error(f"[{ConfigurationError.error_code}] {error_msg}")
            raise ConfigurationError(error_msg)

        if not self.verify_tls:
            logger.warning("[CRYPTSY-CFG] CRYPTSY_VERIFY_TLS=false - certificates will not be checked")

    @classmethod
    def from_environment(cls, validate: bool = True) -> "CryptsyConfig":
        """
        Load configuration from environment variables.

        Args:
            validate: Whether to validate configuration after loading (default: True)

        Raises:
            ConfigurationError: If required configuration is missing
        """
        config = cls(
            public_key=os.environ.get("CRYPTSY_PUBLIC_KEY", "").strip(),
            private_key=os.environ.get("CRYPTSY_PRIVATE_KEY", "").strip(),
            api_host=os.environ.get("CRYPTSY_API_HOST", DEFAULT_HOST).strip(),
            api_path=os.environ.get("CRYPTSY_API_PATH", DEFAULT_PATH).strip(),
            timeout_seconds=_env_number("CRYPTSY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, float),
            pool_size=_env_number("CRYPTSY_POOL_SIZE", DEFAULT_POOL_SIZE, int),
            verify_tls=_env_bool("CRYPTSY_VERIFY_TLS", True),
        )

        logger.info(
            f"[CRYPTSY-CFG] Loading configuration from environment | "
            f"api_host={config.api_host} | timeout_seconds={config.timeout_seconds} | "
            f"pool_size={config.pool_size} | verify_tls={config.verify_tls} | "
            f"credentials_present={bool(config.public_key and config.private_key)}"
        )

        if validate:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Configuration without the private key, for logging and display."""
        return {
            "public_key": "[SET]" if self.public_key else "[MISSING]",
            "private_key": "[REDACTED]" if self.private_key else "[MISSING]",
            "api_host": self.api_host,
            "api_path": self.api_path,
            "timeout_seconds": self.timeout_seconds,
            "pool_size": self.pool_size,
            "verify_tls": self.verify_tls,
        }
