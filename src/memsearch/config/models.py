"""Configuration models using Pydantic for validation."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_INDEX_FILENAME = ".memsearch-index.json"
MEMORY_FILENAME = "MEMORY.md"
MEMORY_DIRNAME = "memory"


class IndexSettings(BaseModel):
    """Settings for index persistence and rebuild scheduling."""

    index_file: Path | None = Field(
        default=None,
        description="Snapshot location (defaults to <workspace_root>/.memsearch-index.json)",
    )
    debounce_seconds: float = Field(
        default=2.0, ge=0.0, description="Quiet window after the last file change before rebuilding"
    )
    watch_enabled: bool = Field(default=True, description="Watch memory files and rebuild on change")


class SearchSettings(BaseModel):
    """Default search options."""

    limit: int = Field(default=10, ge=1, description="Maximum number of results")
    score_threshold: float = Field(
        default=0.01, ge=0.0, description="Documents scoring below this are discarded"
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_dir: Path = Field(default=Path("logs"), description="Directory for log files")
    max_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1024, description="Max log file size before rotation (bytes)"
    )
    backup_count: int = Field(default=5, ge=1, description="Number of rotated log files to keep")
    console_enabled: bool = Field(default=True, description="Enable console logging")
    file_enabled: bool = Field(default=False, description="Enable file logging")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class MemSearchConfig(BaseModel):
    """Main configuration for memsearch."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    workspace_root: Path = Field(
        default_factory=Path.cwd,
        description="Directory holding MEMORY.md and the memory/ folder",
    )

    index: IndexSettings = Field(default_factory=IndexSettings, description="Index settings")

    search: SearchSettings = Field(default_factory=SearchSettings, description="Search defaults")

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    @field_validator("workspace_root")
    @classmethod
    def expand_workspace_root(cls, v: Path) -> Path:
        """Expand ~ in the workspace root."""
        return v.expanduser()

    @property
    def memory_dir(self) -> Path:
        """The memory/ folder under the workspace root."""
        return self.workspace_root / MEMORY_DIRNAME

    @property
    def memory_file(self) -> Path:
        """The top-level MEMORY.md file."""
        return self.workspace_root / MEMORY_FILENAME

    def get_index_path(self) -> Path:
        """Get the snapshot path, defaulting to a hidden file in the workspace root."""
        if self.index.index_file is not None:
            return self.index.index_file.expanduser()
        return self.workspace_root / DEFAULT_INDEX_FILENAME
