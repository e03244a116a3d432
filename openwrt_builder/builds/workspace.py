"""Output directory preparation."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from openwrt_builder.errors import WorkspaceError

logger = logging.getLogger(__name__)


def prepare_output_dir(out_dir: Path) -> Path:
    """Empty the output directory, creating it if needed.

    Every entry inside an existing directory is removed, hidden files and
    subdirectories included, so nothing from a previous run survives.

    Args:
        out_dir: Output directory path.

    Returns:
        The prepared directory.

    Raises:
        WorkspaceError: If the directory cannot be cleared or created.
    """
    try:
        if out_dir.is_dir():
            removed = 0
            for entry in out_dir.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
                removed += 1
            logger.info("Cleared %d entries from %s", removed, out_dir)
        else:
            out_dir.mkdir(parents=True)
            logger.info("Created output directory %s", out_dir)
    except OSError as e:
        raise WorkspaceError(f"Failed to prepare {out_dir}: {e}") from e

    return out_dir


__all__ = ["prepare_output_dir"]
