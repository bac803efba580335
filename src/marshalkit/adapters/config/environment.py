"""
Environment Config Provider - Load marshaller settings from env vars.

Variables:
- MARSHALKIT_PATH_SEPARATOR
- MARSHALKIT_LOG_LEVEL
- MARSHALKIT_LOG_FORMAT
- MARSHALKIT_LOG_FILE

An optional config file is read first; environment variables win over it.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from marshalkit.core.ports.config_provider import ConfigProviderPort, MarshalConfig

from .file_config import FileConfigProvider


ENV_KEYS = {
    "path_separator": "MARSHALKIT_PATH_SEPARATOR",
    "log_level": "MARSHALKIT_LOG_LEVEL",
    "log_format": "MARSHALKIT_LOG_FORMAT",
    "log_file": "MARSHALKIT_LOG_FILE",
}


class EnvironmentConfigProvider(ConfigProviderPort):
    """Configuration provider reading MARSHALKIT_* environment variables."""

    def __init__(
        self,
        config_file: Path | str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            config_file: Optional YAML/TOML file loaded underneath the env vars
            environ: Environment mapping (defaults to os.environ)
        """
        self.logger = logging.getLogger("EnvironmentConfigProvider")
        self._environ = environ if environ is not None else os.environ
        self._config_file = config_file

    @property
    def name(self) -> str:
        return "Environment"

    def _env_values(self) -> dict[str, str]:
        return {
            key: self._environ[env_name]
            for key, env_name in ENV_KEYS.items()
            if self._environ.get(env_name)
        }

    def load(self) -> MarshalConfig:
        overrides = self._env_values()
        if overrides:
            self.logger.debug("Using environment overrides: %s", ", ".join(sorted(overrides)))

        # Without an explicit file only the environment and defaults apply
        file_provider = FileConfigProvider(
            config_path=self._config_file,
            overrides=overrides,
            search=False,
        )
        return file_provider.load()

    def get(self, key: str, default: Any = None) -> Any:
        return self._env_values().get(key, default)
