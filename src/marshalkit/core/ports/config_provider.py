"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: Load from MARSHALKIT_* environment variables
- FileConfigProvider: Load from YAML/TOML config files
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class MarshalConfig:
    """Settings for a Marshaller and its logging."""

    path_separator: str = "."

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text or json
    log_file: str | None = None

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.path_separator:
            errors.append("path_separator must not be empty")
        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"Unknown log_level: {self.log_level} (expected one of {', '.join(LOG_LEVELS)})")
        if self.log_format not in LOG_FORMATS:
            errors.append(f"Unknown log_format: {self.log_format} (expected text or json)")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "path_separator": self.path_separator,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "log_file": self.log_file,
        }


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.

    Configuration can come from:
    - Environment variables
    - YAML/TOML config files
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> MarshalConfig:
        """
        Load configuration from source.

        Returns:
            Complete marshaller configuration

        Raises:
            ConfigError: If the source cannot be read or is invalid
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value
        """
        ...
