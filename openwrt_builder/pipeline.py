"""Build pipeline orchestration.

This module provides the high-level build API:
- run_pipeline(): Main entry point - run every stage in order
- Stage numbering and announcements
- The interactive publish decision

Stages run strictly in sequence. The first PipelineError aborts the run and
propagates to the caller; nothing is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from openwrt_builder.builds.artifacts import collect_artifacts, list_output_dir
from openwrt_builder.builds.make import (
    apply_diffconfig,
    build_firmware,
    download_sources,
    expand_config,
)
from openwrt_builder.builds.workspace import prepare_output_dir
from openwrt_builder.errors import NoArtifactsError
from openwrt_builder.release.info import build_release_info, write_release_info
from openwrt_builder.release.publish import (
    is_affirmative,
    make_release_tag,
    publish_release,
)
from openwrt_builder.source.feeds import install_feeds, register_feed, update_feeds
from openwrt_builder.source.git import sync_source
from openwrt_builder.types import ArtifactInfo, PipelineStage

if TYPE_CHECKING:
    from openwrt_builder.config import Settings

logger = logging.getLogger(__name__)

# Announced stages; PUBLISH and SKIP share the final "release" number.
STAGE_TITLES: list[tuple[PipelineStage, str]] = [
    (PipelineStage.PREPARE, "Preparing output directory"),
    (PipelineStage.SYNC, "Syncing OpenWrt source"),
    (PipelineStage.FEEDS, "Updating and installing feeds"),
    (PipelineStage.CONFIGURE, "Applying diffconfig"),
    (PipelineStage.DOWNLOAD, "Downloading all source files"),
    (PipelineStage.BUILD, "Building firmware"),
    (PipelineStage.COLLECT, "Collecting firmware images"),
    (PipelineStage.METADATA, "Writing release info"),
    (PipelineStage.PUBLISH, "Release"),
]
TOTAL_STAGES = len(STAGE_TITLES)

StageCallback = Callable[[int, int, str], None]


@dataclass
class PipelineResult:
    """Outcome of a completed run.

    Attributes:
        stages: Stages completed, in order.
        artifacts: Images collected into the output directory.
        release_info_path: Written release-info file.
        release_tag: Published tag, or None when publishing was skipped.
    """

    stages: list[PipelineStage] = field(default_factory=list)
    artifacts: list[ArtifactInfo] = field(default_factory=list)
    release_info_path: Path | None = None
    release_tag: str | None = None

    @property
    def published(self) -> bool:
        return self.release_tag is not None


def _log_stage(number: int, total: int, title: str) -> None:
    logger.info("[%d/%d] %s", number, total, title)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def run_pipeline(
    settings: Settings,
    confirm: Callable[[], str],
    on_stage: StageCallback | None = None,
    clock: Callable[[], datetime] | None = None,
) -> PipelineResult:
    """Run the whole build.

    Args:
        settings: Frozen build settings for this run.
        confirm: Called once after the release info is written; its answer
            decides whether a GitHub release is published.
        on_stage: Called with (number, total, title) as each stage starts.
        clock: Source of the build timestamp and release tag time.

    Returns:
        PipelineResult describing the completed run.

    Raises:
        PipelineError: On the first failing stage.
    """
    announce = on_stage or _log_stage
    now = clock or _local_now
    result = PipelineResult()
    titles = dict(STAGE_TITLES)
    numbers = {stage: i for i, (stage, _) in enumerate(STAGE_TITLES, start=1)}

    def begin(stage: PipelineStage) -> None:
        announce(numbers[stage], TOTAL_STAGES, titles[stage])

    begin(PipelineStage.PREPARE)
    prepare_output_dir(settings.out_dir)
    result.stages.append(PipelineStage.PREPARE)

    begin(PipelineStage.SYNC)
    sync_source(settings.repo_url, settings.release_branch, settings.src_dir)
    result.stages.append(PipelineStage.SYNC)

    begin(PipelineStage.FEEDS)
    register_feed(settings.feeds_conf, settings.feed_line)
    update_feeds(settings.src_dir)
    install_feeds(settings.src_dir)
    result.stages.append(PipelineStage.FEEDS)

    begin(PipelineStage.CONFIGURE)
    apply_diffconfig(settings.diffconfig, settings.src_dir)
    expand_config(settings.src_dir)
    result.stages.append(PipelineStage.CONFIGURE)

    begin(PipelineStage.DOWNLOAD)
    download_sources(settings.src_dir)
    result.stages.append(PipelineStage.DOWNLOAD)

    begin(PipelineStage.BUILD)
    build_firmware(settings.src_dir, settings.effective_jobs, settings.verbose)
    result.stages.append(PipelineStage.BUILD)

    begin(PipelineStage.COLLECT)
    result.artifacts = collect_artifacts(
        settings.images_dir, settings.out_dir, settings.artifact_pattern
    )
    if not result.artifacts and settings.require_artifacts:
        raise NoArtifactsError(settings.images_dir, settings.artifact_pattern)
    for name in list_output_dir(settings.out_dir):
        logger.info("  %s", name)
    result.stages.append(PipelineStage.COLLECT)

    begin(PipelineStage.METADATA)
    info = build_release_info(
        settings, [a.filename for a in result.artifacts], now=now()
    )
    result.release_info_path = write_release_info(info, settings.release_info_path)
    result.stages.append(PipelineStage.METADATA)

    begin(PipelineStage.PUBLISH)
    if is_affirmative(confirm()):
        tag = make_release_tag(now(), settings.tag_prefix)
        publish_release(
            tag,
            [settings.out_dir / a.filename for a in result.artifacts],
            result.release_info_path,
            f"{settings.release_title_prefix} {tag}",
        )
        result.release_tag = tag
        result.stages.append(PipelineStage.PUBLISH)
    else:
        logger.info("Skipping GitHub release creation.")
        result.stages.append(PipelineStage.SKIP)

    return result


__all__ = [
    "STAGE_TITLES",
    "TOTAL_STAGES",
    "PipelineResult",
    "StageCallback",
    "run_pipeline",
]
