"""
Config adapters - Configuration providers.
"""

from .environment import ENV_KEYS, EnvironmentConfigProvider
from .file_config import CONFIG_FILE_NAMES, FileConfigProvider


__all__ = [
    "CONFIG_FILE_NAMES",
    "ENV_KEYS",
    "EnvironmentConfigProvider",
    "FileConfigProvider",
]
