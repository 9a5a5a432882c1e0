"""Configuration discovery and loading for a memsearch workspace."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import MemSearchConfig

CONFIG_FILENAME = "memsearch.yaml"

# Settings whose relative values are taken relative to the config file
_RELATIVE_PATH_FIELDS = [
    ("workspace_root",),
    ("index", "index_file"),
    ("logging", "log_dir"),
]


def user_config_locations() -> list[Path]:
    """Per-user config files, in lookup order."""
    home = Path.home()
    return [
        home / ".config" / "memsearch" / "config.yaml",
        home / ".memsearch" / "config.yaml",
    ]


class ConfigManager:
    """
    Finds and loads the configuration for a workspace.

    Lookup order is an explicit ``config_path``, then ``memsearch.yaml`` in the
    workspace root (the current directory when no workspace is given), then
    the per-user locations. A workspace passed to ``load`` replaces the
    file's ``workspace_root`` and goes through the same validation.
    """

    def __init__(self, config_path: Path | None = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Explicit path to config file. If None, searches default locations.
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self.loaded_from: Path | None = None

    def candidate_paths(self, workspace: Path | None = None) -> list[Path]:
        """List the config files to try, most specific first."""
        if self.config_path is not None:
            return [self.config_path]
        root = Path(workspace).expanduser() if workspace is not None else Path.cwd()
        return [root / CONFIG_FILENAME, *user_config_locations()]

    def find_config_file(self, workspace: Path | None = None) -> Path | None:
        """Return the first candidate that exists."""
        for location in self.candidate_paths(workspace):
            if location.is_file():
                return location
        return None

    def load(
        self, workspace: Path | None = None, create_if_missing: bool = False
    ) -> MemSearchConfig:
        """
        Load configuration for a workspace.

        Args:
            workspace: Workspace root overriding the file's ``workspace_root``
            create_if_missing: Use defaults when no config file is found.
                An explicit ``config_path`` must always exist.

        Returns:
            Loaded and validated configuration.

        Raises:
            FileNotFoundError: If no config file is found and defaults were not requested.
            ValueError: If the config file is not valid YAML or fails validation.
        """
        config_file = self.find_config_file(workspace)

        if config_file is None:
            if self.config_path is not None or not create_if_missing:
                searched = ", ".join(str(p) for p in self.candidate_paths(workspace))
                raise FileNotFoundError(f"No configuration file found. Searched: {searched}")
            data: dict[str, Any] = {}
            source = "defaults"
        else:
            data = self._read(config_file)
            source = str(config_file)

        if workspace is not None:
            data["workspace_root"] = workspace

        try:
            config = MemSearchConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {source}: {e}") from e

        self.loaded_from = config_file
        return config

    def _read(self, config_file: Path) -> dict[str, Any]:
        try:
            with open(config_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration in {config_file}: expected a mapping")

        base = config_file.parent.resolve()
        for field_path in _RELATIVE_PATH_FIELDS:
            _resolve_relative(data, field_path, base)
        return data


def _resolve_relative(data: dict, field_path: tuple[str, ...], base: Path):
    *parents, key = field_path
    section = data
    for name in parents:
        section = section.get(name)
        if not isinstance(section, dict):
            return

    value = section.get(key)
    if not isinstance(value, str):
        return
    path = Path(value).expanduser()
    if not path.is_absolute():
        section[key] = str(base / path)


def get_config(workspace: Path | None = None) -> MemSearchConfig:
    """
    Load the configuration for a workspace, falling back to defaults.

    Args:
        workspace: Optional workspace root (defaults to the configured one)

    Returns:
        Current configuration.
    """
    return ConfigManager().load(workspace=workspace, create_if_missing=True)
