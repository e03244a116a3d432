"""Release notes and GitHub release publishing."""

from openwrt_builder.release.info import ReleaseInfo, render_release_info

__all__ = ["ReleaseInfo", "render_release_info"]
