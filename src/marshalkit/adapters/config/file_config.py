"""
File Config Provider - Load marshaller settings from YAML or TOML files.

Searched, in order, when no path is given:
- .marshalkit.yaml / .marshalkit.yml
- .marshalkit.toml
- pyproject.toml ([tool.marshalkit] section)

File format (YAML shown, TOML uses the same keys):

    path_separator: "."
    logging:
      level: DEBUG
      format: json
      file: marshalkit.log
"""

import logging
from pathlib import Path
from typing import Any

import yaml


try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for older Python

from marshalkit.core.exceptions import ConfigError, ConfigValidationError
from marshalkit.core.ports.config_provider import ConfigProviderPort, MarshalConfig


CONFIG_FILE_NAMES = (
    ".marshalkit.yaml",
    ".marshalkit.yml",
    ".marshalkit.toml",
    "pyproject.toml",
)

# Flat override key -> dotted key in the file structure
_OVERRIDE_KEYS = {
    "path_separator": "path_separator",
    "log_level": "logging.level",
    "log_format": "logging.format",
    "log_file": "logging.file",
}


class FileConfigProvider(ConfigProviderPort):
    """
    Configuration provider backed by a YAML or TOML file.

    Overrides (e.g. from a caller's own CLI) take precedence over the file.
    """

    def __init__(
        self,
        config_path: Path | str | None = None,
        overrides: dict[str, Any] | None = None,
        search_dir: Path | str | None = None,
        search: bool = True,
    ) -> None:
        """
        Initialize the provider.

        Args:
            config_path: Explicit config file; searched for when None
            overrides: Flat keys (log_level, log_format, ...) that win over the file
            search_dir: Directory searched for config files (defaults to cwd)
            search: Look for a config file when no path is given
        """
        self.logger = logging.getLogger("FileConfigProvider")
        self._explicit_path = Path(config_path) if config_path is not None else None
        self._search_dir = Path(search_dir) if search_dir is not None else None
        self._search = search
        self._overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        self._data: dict[str, Any] | None = None
        self.config_file_path: Path | None = None

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "File"

    def load(self) -> MarshalConfig:
        data = self._load_data()
        config = MarshalConfig(
            path_separator=str(self.get("path_separator", ".")),
            log_level=str(self.get("logging.level", "INFO")).upper(),
            log_format=str(self.get("logging.format", "text")).lower(),
            log_file=self.get("logging.file"),
        )

        errors = config.validate()
        if errors:
            raise ConfigValidationError(
                "; ".join(errors),
                config_path=str(self.config_file_path) if self.config_file_path else None,
            )

        self.logger.debug(
            "Loaded config from %s (%d top-level keys)",
            self.config_file_path or "defaults",
            len(data),
        )
        return config

    def get(self, key: str, default: Any = None) -> Any:
        for flat_key, dotted_key in _OVERRIDE_KEYS.items():
            if key in (flat_key, dotted_key) and flat_key in self._overrides:
                return self._overrides[flat_key]

        current: Any = self._load_data()
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def validate(self) -> list[str]:
        """
        Validate the config file without raising.

        Returns:
            List of validation error messages (empty if valid)
        """
        try:
            self.load()
        except ConfigError as e:
            return [str(e)]
        return []

    # -------------------------------------------------------------------------
    # File Handling
    # -------------------------------------------------------------------------

    def _find_config_file(self) -> Path | None:
        if self._explicit_path is not None:
            return self._explicit_path
        if not self._search:
            return None

        search_dir = self._search_dir or Path.cwd()
        for file_name in CONFIG_FILE_NAMES:
            candidate = search_dir / file_name
            if not candidate.is_file():
                continue
            if file_name == "pyproject.toml" and "marshalkit" not in self._read_toml(candidate).get(
                "tool", {}
            ):
                continue
            return candidate
        return None

    def _load_data(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        path = self._find_config_file()
        if path is None:
            self._data = {}
            return self._data

        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}", config_path=str(path))

        self.config_file_path = path
        if path.suffix in (".yaml", ".yml"):
            data = self._read_yaml(path)
        elif path.suffix == ".toml":
            data = self._read_toml(path)
            if path.name == "pyproject.toml":
                data = data.get("tool", {}).get("marshalkit", {})
        else:
            raise ConfigError(f"Unsupported config file type: {path.suffix}", config_path=str(path))

        self._data = data
        return data

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax in {path}", config_path=str(path), cause=e) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping in {path}", config_path=str(path))
        return data

    def _read_toml(self, path: Path) -> dict[str, Any]:
        try:
            with path.open("rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {path}", config_path=str(path), cause=e) from e
