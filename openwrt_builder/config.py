"""Configuration settings for openwrt_builder.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.

The settings object is frozen: it is built once at the start of a run and
passed explicitly to every pipeline step.
"""

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Build settings.

    Settings are loaded from environment variables with the OWRT_BUILD_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="OWRT_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Sources
    repo_url: str = Field(
        default="git@github.com:bartcubbins/openwrt.git",
        min_length=1,
        description="OpenWrt source repository URL",
    )
    release_branch: str = Field(
        default="openwrt-24.10",
        min_length=1,
        description="Branch or tag to build",
    )
    feed_name: str = Field(
        default="customfeed",
        min_length=1,
        pattern=r"^\S+$",
        description="Name of the custom feed in feeds.conf.default",
    )
    feed_url: str = Field(
        default="https://github.com/bartcubbins/openwrt-archer-c6-v2-custom-feed.git",
        min_length=1,
        description="Custom feed repository URL",
    )
    diffconfig: Path = Field(
        default=Path("archer-c6-v2.diffconfig"),
        description="Diffconfig applied as the build configuration",
    )

    # Paths
    src_dir: Path = Field(
        default=Path("src"),
        description="OpenWrt source checkout directory",
    )
    out_dir: Path = Field(
        default=Path("out"),
        description="Output directory, wiped on every run",
    )

    # Build
    target: str = Field(default="ath79", min_length=1, description="Build target")
    subtarget: str = Field(
        default="generic", min_length=1, description="Build subtarget"
    )
    artifact_pattern: str = Field(
        default="*.bin",
        min_length=1,
        description="Glob for firmware images collected from the build output",
    )
    jobs: int | None = Field(
        default=None,
        ge=1,
        description="make -j worker count (uses all CPUs if not set)",
    )
    verbose: bool = Field(default=True, description="Pass V=s to make")
    require_artifacts: bool = Field(
        default=False,
        description="Fail the run when the build produced no images",
    )

    # Release
    release_title_prefix: str = Field(
        default="OpenWrt Firmware",
        description="GitHub release title prefix",
    )
    tag_prefix: str = Field(default="build-", description="Release tag prefix")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def feed_line(self) -> str:
        """Feed declaration line for feeds.conf.default."""
        return f"src-git {self.feed_name} {self.feed_url}"

    @property
    def feeds_conf(self) -> Path:
        return self.src_dir / "feeds.conf.default"

    @property
    def feed_dir(self) -> Path:
        """Checkout of the custom feed inside the source tree."""
        return self.src_dir / "feeds" / self.feed_name

    @property
    def images_dir(self) -> Path:
        """Directory where the buildroot places firmware images."""
        return self.src_dir / "bin" / "targets" / self.target / self.subtarget

    @property
    def release_info_path(self) -> Path:
        return self.out_dir / "release-info.txt"

    @property
    def effective_jobs(self) -> int:
        """Worker count for make, defaulting to the number of CPUs."""
        if self.jobs is not None:
            return self.jobs
        return os.cpu_count() or 1


def get_settings(**overrides: Any) -> Settings:
    """Build the settings for a run.

    Args:
        **overrides: Field values that take precedence over the environment.
            None values are ignored so unset CLI flags fall through.

    Returns:
        Settings instance loaded from environment and overrides.
    """
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
