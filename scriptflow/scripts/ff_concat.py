# scriptflow/scripts/ff_concat.py
"""
Concatenate videos with the ffmpeg concat demuxer.

Inputs are given with repeated ``-i`` flags; a folder expands to the videos
it contains, sorted by name and filtered with ``--grep``. Streams are copied,
so every input must share the same codecs and dimensions.
"""

import os
import sys
import tempfile
from typing import List, Optional

from scriptflow.command_runner import BaseScript, Option, Outcome, RecoveryPolicy, ResolvedSettings
from scriptflow.command_runner.settings import grep_option
from scriptflow.core.config import config


def quote_list_entry(path: str) -> str:
    """Format one line of a concat demuxer list file."""
    escaped = os.path.abspath(path).replace("'", "'\\''")
    return f"file '{escaped}'"


class ConcatScript(BaseScript):
    name = "ff_concat"
    summary = "Concatenate videos together. Inputs must share the same codecs and dimensions."
    default_input = ""
    default_output = "ff_concat.mp4"
    multiple_inputs = True
    recovery_policy = RecoveryPolicy.NO_OUTPUT

    def extra_options(self) -> List[Option]:
        return [grep_option()]

    def expand_inputs(self, settings: ResolvedSettings) -> List[str]:
        files: List[str] = []
        for path in settings.inputs:
            if os.path.isdir(path):
                files.extend(self.directory_inputs(path, settings.param("grep", "")))
            else:
                files.append(path)
        return files

    async def preflight(self, settings: ResolvedSettings) -> Optional[str]:
        for path in settings.inputs:
            probe = await self.validator.validate(path, self.probe_stream)
            if not probe.is_valid:
                if probe.diagnostic_output:
                    print(probe.diagnostic_output)
                return f"Input file: '{path or '<none>'}' not a valid media file"
        return None

    async def execute(self, settings: ResolvedSettings) -> Outcome:
        files = self.expand_inputs(settings)
        if not files:
            print("❌ No input files specified. Exiting.")
            return Outcome.hard(1, "No input files specified")

        file_settings = settings.model_copy(update={"inputs": tuple(files)})
        reason = await self.preflight(file_settings)
        if reason:
            return Outcome.soft(reason)

        os.makedirs(config.TEMP_DIR, exist_ok=True)
        fd, list_file = tempfile.mkstemp(prefix="ff_concat_", suffix=".txt", dir=config.TEMP_DIR)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write("\n".join(quote_list_entry(path) for path in files) + "\n")
            if config.DEBUG:
                with open(list_file, "r", encoding="utf-8") as f:
                    print(f.read())
            params = dict(file_settings.params, list_file=list_file)
            return await self.run_command(file_settings.model_copy(update={"params": params}))
        finally:
            if os.path.exists(list_file):
                os.remove(list_file)

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        return [
            "-y",
            "-v",
            settings.log_level,
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            settings.param("list_file"),
            "-c",
            "copy",
            settings.output_path,
        ]


def get_script() -> ConcatScript:
    return ConcatScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
