# scriptflow/scripts/ff_thumbnail.py
"""
Create thumbnails from a video.

``-o shot.png -c 3`` writes ``shot-01.png``, ``shot-02.png`` and ``shot-03.png``.
"""

import os
import sys
from typing import List

from scriptflow.command_runner import BaseScript, Option, ResolvedSettings


class ThumbnailScript(BaseScript):
    name = "ff_thumbnail"
    summary = "Create a number of thumbnails, each picked as the most representative frame of a batch."
    default_output = "ff_thumbnail.png"
    help_when_empty = True

    def extra_options(self) -> List[Option]:
        return [
            Option("count", ("-c", "--count"), default=3, type=int, help="Number of thumbnails to create."),
            Option(
                "sample",
                ("-s", "--sample"),
                default=300,
                type=int,
                help="Number of frames to analyse for each thumbnail. Each thumbnail uses the next batch.",
            ),
        ]

    def output_pattern(self, settings: ResolvedSettings) -> str:
        directory, filename = os.path.split(settings.output_path)
        stem, extension = os.path.splitext(filename)
        return os.path.join(directory, f"{stem}-%02d{extension}")

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        return [
            "-y",
            "-v",
            settings.log_level,
            "-i",
            settings.input_path,
            "-vf",
            f"thumbnail={settings.param('sample')}",
            "-frames:v",
            str(settings.param("count")),
            "-fps_mode",
            "vfr",
            self.output_pattern(settings),
        ]

    def describe_output(self, settings: ResolvedSettings) -> str:
        return self.output_pattern(settings)


def get_script() -> ThumbnailScript:
    return ThumbnailScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
