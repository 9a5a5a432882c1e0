"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from memsearch.config import (
    CONFIG_FILENAME,
    DEFAULT_INDEX_FILENAME,
    ConfigManager,
    IndexSettings,
    LoggingSettings,
    MemSearchConfig,
    SearchSettings,
    get_config,
)


class TestModels:
    """Tests for the configuration models."""

    def test_defaults(self, tmp_path):
        """Test default values."""
        config = MemSearchConfig(workspace_root=tmp_path)

        assert config.index.debounce_seconds == 2.0
        assert config.index.watch_enabled is True
        assert config.search.limit == 10
        assert config.search.score_threshold == 0.01
        assert config.logging.level == "INFO"
        assert config.logging.file_enabled is False

    def test_paths(self, tmp_path):
        """Test derived memory paths."""
        config = MemSearchConfig(workspace_root=tmp_path)

        assert config.memory_dir == tmp_path / "memory"
        assert config.memory_file == tmp_path / "MEMORY.md"
        assert config.get_index_path() == tmp_path / DEFAULT_INDEX_FILENAME

    def test_custom_index_file(self, tmp_path):
        """Test that an explicit index file overrides the default."""
        config = MemSearchConfig(
            workspace_root=tmp_path, index=IndexSettings(index_file=tmp_path / "state" / "idx.json")
        )
        assert config.get_index_path() == tmp_path / "state" / "idx.json"

    def test_default_workspace_is_cwd(self):
        """Test that the workspace defaults to the current directory."""
        assert MemSearchConfig().workspace_root == Path.cwd()

    def test_rejects_unknown_fields(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ValueError):
            MemSearchConfig(unknown_option=True)

    def test_rejects_invalid_values(self):
        """Test field constraints."""
        with pytest.raises(ValueError):
            SearchSettings(limit=0)
        with pytest.raises(ValueError):
            SearchSettings(score_threshold=-1)
        with pytest.raises(ValueError):
            IndexSettings(debounce_seconds=-0.5)

    def test_log_level_normalized(self):
        """Test that log levels are upper-cased and validated."""
        assert LoggingSettings(level="debug").level == "DEBUG"
        with pytest.raises(ValueError):
            LoggingSettings(level="chatty")


class TestConfigManager:
    """Tests for ConfigManager."""

    @pytest.fixture(autouse=True)
    def isolated_home(self, tmp_path, monkeypatch):
        """Keep per-user config files out of the lookup."""
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))
        return home

    def test_load_from_file(self, tmp_path):
        """Test loading a YAML config file."""
        config_file = tmp_path / "memsearch.yaml"
        config_file.write_text(
            yaml.safe_dump(
                {
                    "workspace_root": str(tmp_path / "ws"),
                    "index": {"debounce_seconds": 0.5},
                    "search": {"limit": 3},
                }
            )
        )

        manager = ConfigManager(config_file)
        config = manager.load()

        assert config.workspace_root == tmp_path / "ws"
        assert config.index.debounce_seconds == 0.5
        assert config.search.limit == 3
        assert manager.loaded_from == config_file

    def test_finds_config_in_workspace(self, tmp_path):
        """Test that memsearch.yaml in the workspace root is picked up."""
        workspace = tmp_path / "ws"
        workspace.mkdir()
        (workspace / CONFIG_FILENAME).write_text(yaml.safe_dump({"search": {"limit": 4}}))

        manager = ConfigManager()
        config = manager.load(workspace=workspace)

        assert config.workspace_root == workspace
        assert config.search.limit == 4
        assert manager.loaded_from == workspace / CONFIG_FILENAME

    def test_workspace_config_wins_over_user_config(self, tmp_path, isolated_home):
        """Test lookup order between workspace and per-user files."""
        workspace = tmp_path / "ws"
        workspace.mkdir()
        (workspace / CONFIG_FILENAME).write_text(yaml.safe_dump({"search": {"limit": 4}}))
        user_config = isolated_home / ".config" / "memsearch" / "config.yaml"
        user_config.parent.mkdir(parents=True)
        user_config.write_text(yaml.safe_dump({"search": {"limit": 7}}))

        assert ConfigManager().load(workspace=workspace).search.limit == 4
        assert ConfigManager().load(workspace=tmp_path / "other").search.limit == 7

    def test_workspace_overrides_file(self, tmp_path):
        """Test that an explicit workspace replaces workspace_root from the file."""
        config_file = tmp_path / "memsearch.yaml"
        config_file.write_text(yaml.safe_dump({"workspace_root": str(tmp_path / "ws")}))

        config = ConfigManager(config_file).load(workspace=tmp_path / "other")

        assert config.workspace_root == tmp_path / "other"

    def test_workspace_override_expands_home(self, isolated_home):
        """Test that a workspace given as ~/... is expanded."""
        config = ConfigManager().load(workspace=Path("~/notes"), create_if_missing=True)

        assert config.workspace_root == isolated_home / "notes"

    def test_relative_paths_follow_config_file(self, tmp_path):
        """Test that relative paths in a config file are relative to that file."""
        config_dir = tmp_path / "conf"
        config_dir.mkdir()
        config_file = config_dir / "memsearch.yaml"
        config_file.write_text(
            yaml.safe_dump(
                {
                    "workspace_root": "../ws",
                    "index": {"index_file": "state/idx.json"},
                    "logging": {"log_dir": "logs"},
                }
            )
        )

        config = ConfigManager(config_file).load()

        base = config_dir.resolve()
        assert config.workspace_root == base / ".." / "ws"
        assert config.get_index_path() == base / "state" / "idx.json"
        assert config.logging.log_dir == base / "logs"

    def test_missing_file_without_defaults(self, tmp_path, monkeypatch):
        """Test that a missing config raises unless defaults are requested."""
        monkeypatch.chdir(tmp_path)
        manager = ConfigManager()

        with pytest.raises(FileNotFoundError):
            manager.load()

        assert isinstance(manager.load(create_if_missing=True), MemSearchConfig)
        assert manager.loaded_from is None

    def test_missing_explicit_file(self, tmp_path):
        """Test that an explicit config path must exist even with defaults allowed."""
        with pytest.raises(FileNotFoundError):
            ConfigManager(tmp_path / "none.yaml").load(create_if_missing=True)

    def test_invalid_yaml(self, tmp_path):
        """Test that broken YAML is reported as ValueError."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("index: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigManager(config_file).load()

    def test_non_mapping_yaml(self, tmp_path):
        """Test that a YAML list is rejected."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("- one\n- two\n")

        with pytest.raises(ValueError, match="expected a mapping"):
            ConfigManager(config_file).load()

    def test_invalid_values(self, tmp_path):
        """Test that validation errors are reported as ValueError."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text(yaml.safe_dump({"search": {"limit": -5}}))

        with pytest.raises(ValueError, match="Invalid configuration"):
            ConfigManager(config_file).load()

    def test_get_config_defaults(self, tmp_path):
        """Test that get_config falls back to defaults for a bare workspace."""
        config = get_config(workspace=tmp_path)

        assert config.workspace_root == tmp_path
        assert config == MemSearchConfig(workspace_root=tmp_path)
