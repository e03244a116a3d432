"""Tests for configuration module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from openwrt_builder.config import Settings, get_settings, print_settings_json


class TestSettings:
    """Test Settings class."""

    def test_default_settings(self) -> None:
        """Settings should default to the Archer C6 v2 build."""
        settings = Settings()

        assert settings.repo_url == "git@github.com:bartcubbins/openwrt.git"
        assert settings.release_branch == "openwrt-24.10"
        assert settings.feed_name == "customfeed"
        assert settings.diffconfig == Path("archer-c6-v2.diffconfig")
        assert settings.src_dir == Path("src")
        assert settings.out_dir == Path("out")
        assert settings.artifact_pattern == "*.bin"
        assert settings.jobs is None
        assert settings.verbose is True
        assert settings.require_artifacts is False
        assert settings.log_level == "INFO"

    def test_settings_from_env(self) -> None:
        """Settings should be loadable from environment variables."""
        with patch.dict(
            os.environ,
            {
                "OWRT_BUILD_RELEASE_BRANCH": "openwrt-23.05",
                "OWRT_BUILD_JOBS": "8",
                "OWRT_BUILD_LOG_LEVEL": "DEBUG",
                "OWRT_BUILD_REQUIRE_ARTIFACTS": "true",
            },
        ):
            settings = Settings()
            assert settings.release_branch == "openwrt-23.05"
            assert settings.jobs == 8
            assert settings.log_level == "DEBUG"
            assert settings.require_artifacts is True

    def test_settings_are_frozen(self) -> None:
        """Settings should not be mutable once built."""
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.release_branch = "main"  # type: ignore[misc]

    def test_empty_repo_url_rejected(self) -> None:
        """An empty required value should fail validation."""
        with pytest.raises(ValidationError):
            Settings(repo_url="")

    def test_zero_jobs_rejected(self) -> None:
        """Job count must be at least one."""
        with pytest.raises(ValidationError):
            Settings(jobs=0)


class TestDerivedValues:
    """Test properties derived from settings."""

    def test_feed_line(self) -> None:
        """Feed line should be a src-git declaration."""
        settings = Settings(feed_name="myfeed", feed_url="https://example.com/f.git")
        assert settings.feed_line == "src-git myfeed https://example.com/f.git"

    def test_paths(self, tmp_path) -> None:
        """Derived paths should live under src_dir and out_dir."""
        settings = Settings(
            src_dir=tmp_path / "src",
            out_dir=tmp_path / "out",
            target="ramips",
            subtarget="mt7621",
        )
        assert settings.feeds_conf == tmp_path / "src" / "feeds.conf.default"
        assert settings.feed_dir == tmp_path / "src" / "feeds" / "customfeed"
        assert settings.images_dir == (
            tmp_path / "src" / "bin" / "targets" / "ramips" / "mt7621"
        )
        assert settings.release_info_path == tmp_path / "out" / "release-info.txt"

    def test_effective_jobs_explicit(self) -> None:
        """Explicit job count should be used as-is."""
        assert Settings(jobs=3).effective_jobs == 3

    def test_effective_jobs_defaults_to_cpu_count(self) -> None:
        """Unset job count should use all CPUs."""
        with patch("os.cpu_count", return_value=12):
            assert Settings().effective_jobs == 12

    def test_effective_jobs_unknown_cpu_count(self) -> None:
        """Unknown CPU count should fall back to one job."""
        with patch("os.cpu_count", return_value=None):
            assert Settings().effective_jobs == 1


class TestGetSettings:
    """Test get_settings function."""

    def test_get_settings_returns_settings(self) -> None:
        """get_settings should return a Settings instance."""
        assert isinstance(get_settings(), Settings)

    def test_overrides_take_precedence_over_env(self) -> None:
        """CLI overrides should beat environment variables."""
        with patch.dict(os.environ, {"OWRT_BUILD_RELEASE_BRANCH": "from-env"}):
            settings = get_settings(release_branch="from-cli")
            assert settings.release_branch == "from-cli"

    def test_none_overrides_ignored(self) -> None:
        """None overrides should fall through to env/defaults."""
        with patch.dict(os.environ, {"OWRT_BUILD_RELEASE_BRANCH": "from-env"}):
            settings = get_settings(release_branch=None)
            assert settings.release_branch == "from-env"


class TestPrintSettingsJson:
    """Test print_settings_json function."""

    def test_print_settings_json(self) -> None:
        """print_settings_json should return valid JSON."""
        parsed = json.loads(print_settings_json(Settings()))

        assert "repo_url" in parsed
        assert "release_branch" in parsed
        assert "out_dir" in parsed
        assert "diffconfig" in parsed

    def test_print_settings_json_default(self) -> None:
        """print_settings_json without args should use default settings."""
        parsed = json.loads(print_settings_json())
        assert "src_dir" in parsed
