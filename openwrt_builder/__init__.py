"""OpenWrt Builder - build orchestration for a custom OpenWrt firmware.

This package wraps the OpenWrt buildroot: it syncs the source tree, registers
a custom feed, applies a diffconfig, builds, collects images, writes release
notes and optionally publishes a GitHub release.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
