"""Runner for external build commands.

This module handles:
- Executing git, feeds, make and gh commands with subprocess
- Logging each command and its duration
- Converting non-zero exits into CommandError

Commands run in the foreground with inherited stdout/stderr so the operator
sees build output live. No timeout is applied.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from openwrt_builder.errors import EXECUTION_ERROR, CommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of an external command.

    Attributes:
        command: The command that was executed, shell-quoted.
        exit_code: Process exit code.
        started_at: Start time.
        finished_at: Finish time.
        stdout: Captured standard output, or None when output was inherited.
    """

    command: str
    exit_code: int
    started_at: datetime
    finished_at: datetime
    stdout: str | None = None

    @property
    def duration(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


def run_command(
    cmd: Sequence[str | Path],
    cwd: Path | None = None,
    capture: bool = False,
) -> CommandResult:
    """Run an external command and wait for it to exit.

    Args:
        cmd: Command as a list of arguments.
        cwd: Working directory (current directory if None).
        capture: Capture stdout as text instead of inheriting it.

    Returns:
        CommandResult for a zero exit status.

    Raises:
        CommandError: If the command cannot be started or exits non-zero.
    """
    args = [str(c) for c in cmd]
    cmd_str = shlex.join(args)
    if cwd is not None:
        logger.info("Executing: %s (in %s)", cmd_str, cwd)
    else:
        logger.info("Executing: %s", cmd_str)

    started_at = datetime.now(timezone.utc)
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE if capture else None,
            text=True,
            check=False,
        )
    except OSError as e:
        message = f"Failed to execute {args[0]}: {e}"
        logger.error(message)
        raise CommandError(
            message, command=cmd_str, exit_code=None, code=EXECUTION_ERROR
        ) from e
    finished_at = datetime.now(timezone.utc)

    if result.returncode != 0:
        message = f"Command failed with exit code {result.returncode}: {cmd_str}"
        logger.error(message)
        raise CommandError(message, command=cmd_str, exit_code=result.returncode)

    outcome = CommandResult(
        command=cmd_str,
        exit_code=result.returncode,
        started_at=started_at,
        finished_at=finished_at,
        stdout=result.stdout if capture else None,
    )
    logger.debug("Finished in %.1fs: %s", outcome.duration, cmd_str)
    return outcome


def capture_output(cmd: Sequence[str | Path], cwd: Path | None = None) -> str:
    """Run a command and return its stdout with the trailing newline removed.

    Raises:
        CommandError: If the command fails.
    """
    result = run_command(cmd, cwd=cwd, capture=True)
    return (result.stdout or "").rstrip("\n")


__all__ = [
    "CommandResult",
    "capture_output",
    "run_command",
]
