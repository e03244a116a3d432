"""Firmware image collection.

This module handles:
- Copying build output images into the output directory
- Classifying artifact types (sysupgrade, factory, etc.)
- Computing checksums
- Listing the output directory
"""

from __future__ import annotations

import hashlib
import logging
import shutil
from pathlib import Path

from openwrt_builder.types import ArtifactInfo

logger = logging.getLogger(__name__)

# File patterns for artifact classification (lowercase for case-insensitive matching)
SYSUPGRADE_PATTERNS = ["-sysupgrade.bin", "-sysupgrade.img.gz"]
FACTORY_PATTERNS = ["-factory.bin", "-factory.img"]
INITRAMFS_PATTERNS = ["-initramfs-kernel.bin", "-initramfs.bin"]
KERNEL_PATTERNS = ["-kernel.bin", "-uimage", "-vmlinux"]

# Default chunk size for hashing
HASH_CHUNK_SIZE = 64 * 1024  # 64KB


def classify_artifact(filename: str) -> str:
    """Classify an artifact by its filename pattern.

    Args:
        filename: The artifact filename.

    Returns:
        Artifact kind (sysupgrade, initramfs, factory, kernel, other).
    """
    filename_lower = filename.lower()

    if any(p in filename_lower for p in SYSUPGRADE_PATTERNS):
        return "sysupgrade"
    # Check initramfs BEFORE kernel since -initramfs-kernel.bin matches -kernel.bin
    if any(p in filename_lower for p in INITRAMFS_PATTERNS):
        return "initramfs"
    if any(p in filename_lower for p in FACTORY_PATTERNS):
        return "factory"
    if any(p in filename_lower for p in KERNEL_PATTERNS):
        return "kernel"

    return "other"


def compute_file_hash(
    file_path: Path,
    chunk_size: int = HASH_CHUNK_SIZE,
) -> str:
    """Compute SHA-256 hash of a file.

    Args:
        file_path: Path to the file.
        chunk_size: Size of chunks for streaming hash.

    Returns:
        SHA-256 hex digest.
    """
    sha256 = hashlib.sha256()
    with file_path.open("rb") as f:
        while chunk := f.read(chunk_size):
            sha256.update(chunk)
    return sha256.hexdigest()


def collect_artifacts(
    images_dir: Path,
    out_dir: Path,
    pattern: str = "*.bin",
) -> list[ArtifactInfo]:
    """Copy firmware images from the build output into the output directory.

    A missing images directory or an empty match is not an error here; the
    caller decides whether zero images should abort the run.

    Args:
        images_dir: Build output directory (bin/targets/<target>/<subtarget>).
        out_dir: Destination directory.
        pattern: Glob selecting the images to copy.

    Returns:
        ArtifactInfo for each copied file, sorted by filename.
    """
    if not images_dir.is_dir():
        logger.warning("Build output directory does not exist: %s", images_dir)
        return []

    artifacts: list[ArtifactInfo] = []
    for path in sorted(images_dir.glob(pattern)):
        if not path.is_file():
            continue

        dest = out_dir / path.name
        shutil.copy2(path, dest)

        kind = classify_artifact(path.name)
        artifact = ArtifactInfo(
            filename=path.name,
            relative_path=dest.relative_to(out_dir).as_posix(),
            size_bytes=dest.stat().st_size,
            sha256=compute_file_hash(dest),
            kind=kind,
            labels=[],
        )
        if kind == "sysupgrade":
            artifact.labels.append("for_sysupgrade")
        if kind == "factory":
            artifact.labels.append("for_factory_install")

        artifacts.append(artifact)
        logger.debug(
            "Collected artifact: %s (kind=%s, size=%d)",
            path.name,
            kind,
            artifact.size_bytes,
        )

    if not artifacts:
        logger.warning("No files matching %s in %s", pattern, images_dir)
    else:
        logger.info("Collected %d artifacts into %s", len(artifacts), out_dir)
    return artifacts


def list_output_dir(out_dir: Path) -> list[str]:
    """Return the sorted names of the entries in the output directory."""
    if not out_dir.is_dir():
        return []
    return sorted(p.name for p in out_dir.iterdir())


def get_primary_artifact(artifacts: list[ArtifactInfo]) -> ArtifactInfo | None:
    """Get the image to recommend for flashing (usually sysupgrade).

    Args:
        artifacts: List of artifacts.

    Returns:
        The primary artifact, or None if not found.
    """
    for kind in ("sysupgrade", "factory"):
        for artifact in artifacts:
            if artifact.kind == kind:
                return artifact
    return None


__all__ = [
    "FACTORY_PATTERNS",
    "HASH_CHUNK_SIZE",
    "INITRAMFS_PATTERNS",
    "KERNEL_PATTERNS",
    "SYSUPGRADE_PATTERNS",
    "classify_artifact",
    "collect_artifacts",
    "compute_file_hash",
    "get_primary_artifact",
    "list_output_dir",
]
