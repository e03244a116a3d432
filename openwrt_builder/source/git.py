"""Git operations on the OpenWrt checkout and feed repositories."""

from __future__ import annotations

import logging
from pathlib import Path

from openwrt_builder.builds.runner import capture_output, run_command
from openwrt_builder.types import MISSING_COMMIT, CommitInfo

logger = logging.getLogger(__name__)

# git log formats for the commit message
FULL_MESSAGE = "%B"
SUBJECT = "%s"


def sync_source(repo_url: str, branch: str, src_dir: Path) -> bool:
    """Clone the repository, or update an existing checkout in place.

    Args:
        repo_url: Repository URL.
        branch: Branch or tag to check out.
        src_dir: Local checkout path.

    Returns:
        True if a fresh clone was made, False if an existing checkout was updated.

    Raises:
        CommandError: If any git command fails.
    """
    if not src_dir.exists():
        logger.info("Cloning %s (%s) into %s", repo_url, branch, src_dir)
        run_command(["git", "clone", "--branch", branch, repo_url, src_dir])
        return True

    logger.info("Updating existing checkout %s to %s", src_dir, branch)
    run_command(["git", "fetch", "--all"], cwd=src_dir)
    run_command(["git", "checkout", branch], cwd=src_dir)
    return False


def get_commit_info(repo_dir: Path, message_format: str = FULL_MESSAGE) -> CommitInfo:
    """Read HEAD commit metadata from a repository.

    Args:
        repo_dir: Repository working tree.
        message_format: git pretty format for the message (%B or %s).

    Returns:
        CommitInfo for HEAD, or the "Directory not found" placeholder when
        repo_dir does not exist.

    Raises:
        CommandError: If git fails on an existing directory.
    """
    if not repo_dir.is_dir():
        logger.warning("Repository directory not found: %s", repo_dir)
        return MISSING_COMMIT

    commit = capture_output(["git", "-C", repo_dir, "rev-parse", "--short", "HEAD"])
    message = capture_output(
        ["git", "-C", repo_dir, "log", "-1", f"--pretty={message_format}"]
    )
    date = capture_output(
        ["git", "-C", repo_dir, "log", "-1", "--date=iso", "--pretty=%cd"]
    )
    return CommitInfo(commit=commit, date=date, message=message.strip())


__all__ = ["FULL_MESSAGE", "SUBJECT", "get_commit_info", "sync_source"]
