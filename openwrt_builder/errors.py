"""Error definitions for the build pipeline.

Every failure that aborts a run is a PipelineError subclass with a stable
code, so the CLI can report it uniformly.
"""

from __future__ import annotations

# Error code constants
COMMAND_FAILED = "command_failed"
EXECUTION_ERROR = "execution_error"
DIFFCONFIG_NOT_FOUND = "diffconfig_not_found"
WORKSPACE_ERROR = "workspace_error"
NO_ARTIFACTS = "no_artifacts"


class PipelineError(Exception):
    """Base error for pipeline operations."""

    def __init__(self, message: str, code: str = "pipeline_error") -> None:
        super().__init__(message)
        self.code = code


class CommandError(PipelineError):
    """Raised when an external command fails or cannot be started."""

    def __init__(
        self,
        message: str,
        command: str,
        exit_code: int | None = None,
        code: str = COMMAND_FAILED,
    ) -> None:
        super().__init__(message, code=code)
        self.command = command
        self.exit_code = exit_code


class MissingDiffConfigError(PipelineError):
    """Raised when the diffconfig file does not exist."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Diffconfig {path} not found!", code=DIFFCONFIG_NOT_FOUND)
        self.path = path


class WorkspaceError(PipelineError):
    """Raised when the output directory cannot be prepared."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code=WORKSPACE_ERROR)


class NoArtifactsError(PipelineError):
    """Raised when no firmware images were produced and images are required."""

    def __init__(self, images_dir: object, pattern: str) -> None:
        super().__init__(
            f"No firmware images matching {pattern} in {images_dir}",
            code=NO_ARTIFACTS,
        )
        self.images_dir = images_dir
        self.pattern = pattern


__all__ = [
    "COMMAND_FAILED",
    "DIFFCONFIG_NOT_FOUND",
    "EXECUTION_ERROR",
    "NO_ARTIFACTS",
    "WORKSPACE_ERROR",
    "CommandError",
    "MissingDiffConfigError",
    "NoArtifactsError",
    "PipelineError",
    "WorkspaceError",
]
