"""Buildroot configuration, download and build steps.

This module handles:
- Applying the diffconfig as the active .config
- Expanding it with `make defconfig`
- Downloading upstream sources with `make download`
- Composing and running the parallel `make` build
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from openwrt_builder.builds.runner import CommandResult, run_command
from openwrt_builder.errors import MissingDiffConfigError, WorkspaceError

logger = logging.getLogger(__name__)


def apply_diffconfig(diffconfig: Path, src_dir: Path) -> Path:
    """Copy the diffconfig into the source tree as .config.

    The existence check runs before anything is written, so a missing
    diffconfig leaves any previous .config untouched.

    Args:
        diffconfig: Path to the diffconfig file.
        src_dir: OpenWrt source directory.

    Returns:
        Path to the written .config.

    Raises:
        MissingDiffConfigError: If the diffconfig does not exist.
    """
    if not diffconfig.is_file():
        raise MissingDiffConfigError(diffconfig)

    config_path = src_dir / ".config"
    try:
        shutil.copyfile(diffconfig, config_path)
    except OSError as e:
        raise WorkspaceError(f"Failed to copy {diffconfig} to {config_path}: {e}") from e

    logger.info("Applied %s as %s", diffconfig, config_path)
    return config_path


def expand_config(src_dir: Path) -> CommandResult:
    """Expand the diffconfig into a full configuration."""
    return run_command(["make", "defconfig"], cwd=src_dir)


def download_sources(src_dir: Path) -> CommandResult:
    """Fetch every upstream source referenced by the configuration."""
    return run_command(["make", "download"], cwd=src_dir)


def compose_build_command(jobs: int, verbose: bool = True) -> list[str]:
    """Compose the firmware build command.

    Args:
        jobs: Number of parallel make jobs.
        verbose: Add V=s for full build output.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    cmd = ["make", f"-j{jobs}"]
    if verbose:
        cmd.append("V=s")
    return cmd


def build_firmware(src_dir: Path, jobs: int, verbose: bool = True) -> CommandResult:
    """Build the firmware images.

    Args:
        src_dir: OpenWrt source directory.
        jobs: Number of parallel make jobs.
        verbose: Add V=s for full build output.

    Returns:
        CommandResult of the build.

    Raises:
        CommandError: If the build fails.
    """
    logger.info("Building with %d parallel jobs", jobs)
    result = run_command(compose_build_command(jobs, verbose), cwd=src_dir)
    logger.info("Build finished in %.1fs", result.duration)
    return result


__all__ = [
    "apply_diffconfig",
    "build_firmware",
    "compose_build_command",
    "download_sources",
    "expand_config",
]
