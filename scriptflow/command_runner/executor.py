# scriptflow/command_runner/executor.py
"""
Subprocess execution for the wrapper scripts.

Each call spawns exactly one child process and waits for it to finish.
There is no retry and no timeout: ffmpeg runs as long as it needs.
"""

import asyncio
import shlex
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from scriptflow.command_runner.exceptions import ToolNotFoundError
from scriptflow.core.setup_logging import get_logger

logger = get_logger("executor")


@dataclass(frozen=True)
class SubprocessOutcome:
    """Exit status and captured output of one finished child process."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


async def run(
    command: str,
    args: Sequence[object],
    *,
    inherit_stdio: bool = False,
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> SubprocessOutcome:
    """
    Run an external binary to completion.

    Args:
        command: Binary name or path
        args: Arguments, converted to strings
        inherit_stdio: Let the child write straight to our stdout/stderr instead of capturing
        cwd: Working directory of the child
        env: Environment of the child (inherits ours if None)

    Returns:
        SubprocessOutcome: Exit status and captured output (empty when inherited)

    Raises:
        ToolNotFoundError: If the binary cannot be spawned
    """
    cmd = [str(command)] + [str(arg) for arg in args]
    logger.debug(f"Executing: {shlex.join(cmd)}")

    if inherit_stdio:
        streams = {}
    else:
        streams = {
            "stdin": asyncio.subprocess.DEVNULL,
            "stdout": asyncio.subprocess.PIPE,
            "stderr": asyncio.subprocess.PIPE,
        }

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd, cwd=cwd, env=dict(env) if env is not None else None, **streams
        )
    except OSError as e:
        raise ToolNotFoundError(cmd[0], str(e))

    stdout, stderr = await process.communicate()
    outcome = SubprocessOutcome(process.returncode, _decode(stdout), _decode(stderr))
    logger.debug(f"{cmd[0]} exited with status {outcome.exit_code}")
    return outcome
