# scriptflow/scripts/ff_blur.py
"""Blur a video with a gaussian blur."""

import sys
from typing import List

from scriptflow.command_runner import BaseScript, Option, ResolvedSettings
from scriptflow.command_runner.settings import grep_option


class BlurScript(BaseScript):
    name = "ff_blur"
    summary = "Apply a gaussian blur to a video."
    default_output = "ff_blur.mp4"
    supports_directory = True

    def extra_options(self) -> List[Option]:
        return [
            Option("strength", ("-s", "--strength"), default="0.5", help="Sigma of the gaussian blur."),
            Option("steps", ("-t", "--steps"), default="1", help="Number of blur passes."),
            grep_option(),
        ]

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        return [
            "-y",
            "-v",
            settings.log_level,
            "-i",
            settings.input_path,
            "-vf",
            f"gblur=sigma={settings.param('strength')}:steps={settings.param('steps')}",
            "-c:a",
            "copy",
            settings.output_path,
        ]


def get_script() -> BlurScript:
    return BlurScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
