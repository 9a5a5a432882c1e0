"""Configuration module for memsearch."""

from .manager import CONFIG_FILENAME, ConfigManager, get_config
from .models import (
    DEFAULT_INDEX_FILENAME,
    MEMORY_DIRNAME,
    MEMORY_FILENAME,
    IndexSettings,
    LoggingSettings,
    MemSearchConfig,
    SearchSettings,
)

__all__ = [
    "MemSearchConfig",
    "IndexSettings",
    "SearchSettings",
    "LoggingSettings",
    "ConfigManager",
    "get_config",
    "CONFIG_FILENAME",
    "DEFAULT_INDEX_FILENAME",
    "MEMORY_DIRNAME",
    "MEMORY_FILENAME",
]
