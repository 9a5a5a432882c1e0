"""Discovery of memory files under a workspace root."""

import os
from pathlib import Path

from ..config.models import MEMORY_DIRNAME, MEMORY_FILENAME
from ..utils.logging import get_logger

logger = get_logger(__name__)

MEMORY_SUFFIX = ".md"


def is_memory_note(path: Path) -> bool:
    """Check whether a file name marks it as a memory note."""
    return path.name.endswith(MEMORY_SUFFIX)


def discover_files(workspace_root: Path | str) -> set[Path]:
    """
    Find all memory files under a workspace root.

    Recognizes ``MEMORY.md`` directly under the root and every ``*.md`` file
    anywhere below ``<root>/memory``. Missing locations are skipped silently;
    unreadable subdirectories are logged and skipped.

    Args:
        workspace_root: The workspace directory

    Returns:
        Set of discovered file paths
    """
    root = Path(workspace_root)
    files: set[Path] = set()

    memory_file = root / MEMORY_FILENAME
    if memory_file.is_file():
        files.add(memory_file)

    memory_dir = root / MEMORY_DIRNAME
    if memory_dir.is_dir():

        def on_error(error: OSError):
            logger.warning(f"Error reading memory directory {error.filename}: {error}")

        for dirpath, _dirnames, filenames in os.walk(memory_dir, onerror=on_error):
            for filename in filenames:
                path = Path(dirpath) / filename
                if is_memory_note(path) and path.is_file():
                    files.add(path)

    logger.debug(f"Discovered {len(files)} memory file(s) under {root}")
    return files
