"""GitHub release publishing through the gh CLI."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from openwrt_builder.builds.runner import CommandResult, run_command

logger = logging.getLogger(__name__)

TAG_TIME_FORMAT = "%Y%m%d-%H%M"


def is_affirmative(answer: str | None) -> bool:
    """Return True only for a single "y" or "Y" answer."""
    if answer is None:
        return False
    return answer.strip().lower() == "y"


def make_release_tag(now: datetime | None = None, prefix: str = "build-") -> str:
    """Build a release tag from a timestamp, e.g. build-20250101-1230."""
    if now is None:
        now = datetime.now()
    return f"{prefix}{now.strftime(TAG_TIME_FORMAT)}"


def compose_release_command(
    tag: str,
    files: Sequence[Path],
    notes_file: Path,
    title: str,
) -> list[str]:
    """Compose the `gh release create` command.

    Args:
        tag: Release tag.
        files: Assets to upload.
        notes_file: File whose contents become the release notes.
        title: Release title.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    cmd = ["gh", "release", "create", tag]
    cmd.extend(str(f) for f in files)
    cmd.extend(["--title", title, "--notes-file", str(notes_file)])
    return cmd


def publish_release(
    tag: str,
    files: Sequence[Path],
    notes_file: Path,
    title: str,
) -> CommandResult:
    """Create a GitHub release with the firmware images attached.

    Raises:
        CommandError: If gh fails.
    """
    logger.info("Creating GitHub release %s with %d assets", tag, len(files))
    result = run_command(compose_release_command(tag, files, notes_file, title))
    logger.info("GitHub release created and assets uploaded.")
    return result


__all__ = [
    "TAG_TIME_FORMAT",
    "compose_release_command",
    "is_affirmative",
    "make_release_tag",
    "publish_release",
]
