"""Custom feed registration and the OpenWrt feeds script."""

from __future__ import annotations

import logging
from pathlib import Path

from openwrt_builder.builds.runner import CommandResult, run_command

logger = logging.getLogger(__name__)

FEEDS_SCRIPT = "./scripts/feeds"


def register_feed(conf_path: Path, feed_line: str) -> bool:
    """Append a feed declaration unless an identical line is already present.

    Args:
        conf_path: Path to feeds.conf.default.
        feed_line: Full declaration, e.g. "src-git name url".

    Returns:
        True if the line was appended, False if it was already registered.
    """
    existing = ""
    if conf_path.exists():
        existing = conf_path.read_text(encoding="utf-8")
        if feed_line in existing.splitlines():
            logger.info("Custom feed already registered in %s", conf_path.name)
            return False

    with conf_path.open("a", encoding="utf-8") as f:
        if existing and not existing.endswith("\n"):
            f.write("\n")
        f.write(f"{feed_line}\n")

    logger.info("Custom feed added to %s", conf_path.name)
    return True


def update_feeds(src_dir: Path) -> CommandResult:
    """Refresh the metadata of every configured feed."""
    return run_command([FEEDS_SCRIPT, "update", "-a"], cwd=src_dir)


def install_feeds(src_dir: Path) -> CommandResult:
    """Install all packages from every configured feed."""
    return run_command([FEEDS_SCRIPT, "install", "-a"], cwd=src_dir)


__all__ = ["FEEDS_SCRIPT", "install_feeds", "register_feed", "update_feeds"]
