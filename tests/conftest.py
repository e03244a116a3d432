"""Shared fixtures for pipeline tests.

FakeSubprocess stands in for subprocess.run and mimics the side effects of
git, the feeds script, make and gh closely enough for the pipeline to run
end to end inside tmp_path.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from openwrt_builder.config import Settings

DEFAULT_FEEDS_CONF = (
    "src-git packages https://git.openwrt.org/feed/packages.git\n"
    "src-git luci https://git.openwrt.org/project/luci.git\n"
)
DEFAULT_IMAGES = [
    "openwrt-ath79-generic-tplink_archer-c6-v2-squashfs-factory.bin",
    "openwrt-ath79-generic-tplink_archer-c6-v2-squashfs-sysupgrade.bin",
]


class FakeSubprocess:
    """Records commands and simulates their effects on the filesystem."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.calls: list[tuple[list[str], Path | None]] = []
        self.images = list(DEFAULT_IMAGES)
        self.create_feed_dir = True
        self.fail_on: tuple[str, ...] | None = None

    def commands(self) -> list[list[str]]:
        return [args for args, _ in self.calls]

    def find(self, *prefix: str) -> list[list[str]]:
        return [c for c in self.commands() if tuple(c[: len(prefix)]) == prefix]

    def __call__(self, args, cwd=None, stdout=None, **kwargs):
        args = list(args)
        self.calls.append((args, cwd))

        if self.fail_on is not None and tuple(args[: len(self.fail_on)]) == self.fail_on:
            return subprocess.CompletedProcess(args, 1, stdout="" if stdout else None)

        output = self._simulate(args)
        return subprocess.CompletedProcess(
            args, 0, stdout=output if stdout is not None else None
        )

    def _simulate(self, args: list[str]) -> str:
        s = self.settings
        if args[:2] == ["git", "clone"]:
            dest = Path(args[-1])
            dest.mkdir(parents=True)
            (dest / "feeds.conf.default").write_text(DEFAULT_FEEDS_CONF)
        elif args[:3] == ["./scripts/feeds", "update", "-a"]:
            if self.create_feed_dir:
                s.feed_dir.mkdir(parents=True, exist_ok=True)
        elif args[0] == "make" and args[1].startswith("-j"):
            s.images_dir.mkdir(parents=True, exist_ok=True)
            for name in self.images:
                (s.images_dir / name).write_bytes(b"\x00" * 2048)
        elif args[:2] == ["git", "-C"]:
            repo = Path(args[2])
            is_feed = repo == s.feed_dir
            if "rev-parse" in args:
                return "f00dfee\n" if is_feed else "abc1234\n"
            if "--pretty=%cd" in args:
                return "2025-01-02 03:04:05 +0000\n"
            if "--pretty=%s" in args:
                return "Add luci theme\n"
            if "--pretty=%B" in args:
                return "ath79: fix archer c6 v2 leds\n\nSigned-off-by: Dev\n\n"
        return ""


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings rooted in tmp_path with an existing diffconfig."""
    diffconfig = tmp_path / "archer-c6-v2.diffconfig"
    diffconfig.write_text("CONFIG_TARGET_ath79=y\nCONFIG_TARGET_ath79_generic=y\n")
    return Settings(
        src_dir=tmp_path / "src",
        out_dir=tmp_path / "out",
        diffconfig=diffconfig,
        jobs=4,
    )


@pytest.fixture
def fake_subprocess(settings):
    """Patch subprocess.run with a FakeSubprocess for the test."""
    fake = FakeSubprocess(settings)
    with patch("subprocess.run", side_effect=fake):
        yield fake
