"""Release metadata generation.

This module handles:
- Collecting commit metadata from the OpenWrt checkout and the custom feed
- Rendering the release-info report
- Writing it to the output directory

The rendered text doubles as the body of the published release notes, so the
format must stay stable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from openwrt_builder.source.git import FULL_MESSAGE, SUBJECT, get_commit_info
from openwrt_builder.types import CommitInfo

if TYPE_CHECKING:
    from openwrt_builder.config import Settings

logger = logging.getLogger(__name__)

RELEASE_INFO_TITLE = "OpenWrt Build Release Info"


@dataclass(frozen=True)
class ReleaseInfo:
    """Release metadata record.

    Attributes:
        build_time: Build timestamp (ISO-8601, seconds precision).
        branch: Source branch or tag.
        source: HEAD commit of the OpenWrt checkout.
        feed_url: Custom feed URL.
        feed: HEAD commit of the custom feed checkout.
        firmware_files: Output paths of the collected images.
    """

    build_time: str
    branch: str
    source: CommitInfo
    feed_url: str
    feed: CommitInfo
    firmware_files: list[str] = field(default_factory=list)


def _indent(text: str, prefix: str) -> str:
    return "\n".join(f"{prefix}{line}" if line else "" for line in text.splitlines())


def build_release_info(
    settings: Settings,
    filenames: Iterable[str],
    now: datetime | None = None,
) -> ReleaseInfo:
    """Assemble the release metadata for a finished build.

    Args:
        settings: Build settings.
        filenames: Names of the images in the output directory.
        now: Build timestamp; the current local time if not given.

    Returns:
        ReleaseInfo record.

    Raises:
        CommandError: If git fails on an existing repository.
    """
    if now is None:
        now = datetime.now().astimezone()

    return ReleaseInfo(
        build_time=now.isoformat(timespec="seconds"),
        branch=settings.release_branch,
        source=get_commit_info(settings.src_dir, FULL_MESSAGE),
        feed_url=settings.feed_url,
        feed=get_commit_info(settings.feed_dir, SUBJECT),
        firmware_files=[
            (settings.out_dir / name).as_posix() for name in sorted(filenames)
        ],
    )


def render_release_info(info: ReleaseInfo) -> str:
    """Render the release metadata as text."""
    lines = [
        RELEASE_INFO_TITLE,
        "=" * len(RELEASE_INFO_TITLE),
        "",
        "Build Time:",
        f"  {info.build_time}",
        "",
        "OpenWrt Source:",
        f"  Branch: {info.branch}",
        f"  Commit: {info.source.commit}",
        f"  Date:   {info.source.date}",
        "  Message:",
        _indent(info.source.message, "    "),
        "",
        "Custom Feed:",
        f"  URL: {info.feed_url}",
        f"  Commit: {info.feed.commit}",
        f"  Date:   {info.feed.date}",
        "  Message:",
        _indent(info.feed.message, "    "),
        "",
        "Firmware Files:",
    ]
    lines.extend(f"  {path}" for path in info.firmware_files)
    return "\n".join(lines) + "\n"


def write_release_info(info: ReleaseInfo, path: Path) -> Path:
    """Write the rendered release metadata.

    Args:
        info: Release metadata.
        path: Output file path.

    Returns:
        Path to the written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_release_info(info), encoding="utf-8")
    logger.info("Wrote release info to %s", path)
    return path


__all__ = [
    "RELEASE_INFO_TITLE",
    "ReleaseInfo",
    "build_release_info",
    "render_release_info",
    "write_release_info",
]
