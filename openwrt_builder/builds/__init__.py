"""Build steps module.

This module handles:
- Output directory preparation
- Diffconfig application and config expansion
- Source download and the parallel make build
- Firmware image collection
"""

from openwrt_builder.builds.runner import CommandResult, run_command

__all__ = ["CommandResult", "run_command"]
