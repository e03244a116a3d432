"""Shared type definitions for openwrt_builder.

This module contains dataclasses and enums shared across subpackages to
avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum


class PipelineStage(str, Enum):
    """Stage of a build run, in execution order."""

    PREPARE = "prepare"
    SYNC = "sync"
    FEEDS = "feeds"
    CONFIGURE = "configure"
    DOWNLOAD = "download"
    BUILD = "build"
    COLLECT = "collect"
    METADATA = "metadata"
    PUBLISH = "publish"
    SKIP = "skip"


@dataclass(frozen=True)
class CommitInfo:
    """Version-control metadata of a repository's HEAD commit."""

    commit: str
    date: str
    message: str


MISSING_COMMIT = CommitInfo(commit="N/A", date="N/A", message="Directory not found")


@dataclass
class ArtifactInfo:
    """Information about a collected firmware image."""

    filename: str
    relative_path: str
    size_bytes: int
    sha256: str
    kind: str | None = None
    labels: list[str] = field(default_factory=list)


__all__ = [
    "MISSING_COMMIT",
    "ArtifactInfo",
    "CommitInfo",
    "PipelineStage",
]
