# scriptflow/command_runner/preflight.py
"""
Input validation with ffprobe before any ffmpeg command runs.

An input that is missing or that ffprobe cannot read is a soft failure:
the validator reports it in a ``ProbeResult`` and never raises for it.
Only a missing ffprobe binary raises (``ToolNotFoundError``).
"""

import asyncio
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from scriptflow.command_runner import executor
from scriptflow.core.config import config
from scriptflow.core.setup_logging import get_logger

logger = get_logger("preflight")


@dataclass(frozen=True)
class ProbeResult:
    """Result of probing one input. Computed on every call, never cached."""

    is_valid: bool
    diagnostic_output: str = ""
    codec: str = ""


class PreflightValidator:
    """
    Check that a file exists and that ffprobe finds a stream in it.

    Args:
        probe_bin: ffprobe binary (defaults to ``FFPROBE_BIN``)
    """

    def __init__(self, probe_bin: Optional[str] = None):
        self.probe_bin = probe_bin or config.FFPROBE_BIN

    async def validate(self, path: str, stream: str = "v:0") -> ProbeResult:
        """
        Validate one input file.

        Args:
            path: File to check
            stream: ffprobe stream specifier that must be readable

        Returns:
            ProbeResult: Validity and, when invalid, what ffprobe had to say
        """
        if not path:
            return ProbeResult(False, "No input file specified.")
        if not os.path.exists(path):
            return ProbeResult(False, f"Input file not found: {path}")

        result = await executor.run(
            self.probe_bin,
            [
                "-v",
                "quiet",
                "-select_streams",
                stream,
                "-show_entries",
                "stream=codec_name",
                "-print_format",
                "csv=p=0",
                path,
            ],
        )
        if result.success:
            return ProbeResult(True, codec=result.stdout.strip())

        # A second, verbose run tells the user why the file was rejected
        diagnostics = await executor.run(self.probe_bin, [path])
        return ProbeResult(False, (diagnostics.stderr or diagnostics.stdout).strip())

    async def probe_dimensions(self, path: str) -> Tuple[Optional[int], Optional[int]]:
        """
        Read the width and height of the first video stream.

        The two probes are independent and run concurrently.

        Args:
            path: Video file

        Returns:
            tuple: ``(width, height)``, each None when it could not be read
        """
        width, height = await asyncio.gather(
            self._probe_entry(path, "width"), self._probe_entry(path, "height")
        )
        return width, height

    async def _probe_entry(self, path: str, entry: str) -> Optional[int]:
        result = await executor.run(
            self.probe_bin,
            [
                "-v",
                "error",
                "-select_streams",
                "v:0",
                "-show_entries",
                f"stream={entry}",
                "-of",
                "csv=s=x:p=0",
                path,
            ],
        )
        try:
            return int(result.stdout.strip())
        except ValueError:
            logger.debug(f"Could not read {entry} of {path}: {result.stderr.strip()}")
            return None
