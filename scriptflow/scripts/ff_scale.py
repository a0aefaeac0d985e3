# scriptflow/scripts/ff_scale.py
"""Change the scale (width/height) of a video, or of every video in a folder."""

import sys
from typing import List, Optional

from scriptflow.command_runner import BaseScript, Option, ResolvedSettings
from scriptflow.command_runner.settings import grep_option
from scriptflow.core.config import config


class ScaleScript(BaseScript):
    name = "ff_scale"
    summary = "Change the scale (Width/Height) of a video."
    default_output = "ff_scale.mp4"
    help_when_empty = True
    supports_directory = True

    def extra_options(self) -> List[Option]:
        return [
            Option(
                "width",
                ("-w", "--width"),
                default="1920",
                help="Width of the video. -1 keeps the aspect ratio, -n keeps it as a multiple of n, iw is the input width.",
                metavar="PIXELS",
            ),
            Option(
                "height",
                ("-h", "--height"),
                default="1080",
                help="Height of the video. -1 keeps the aspect ratio, -n keeps it as a multiple of n, ih is the input height.",
                metavar="PIXELS",
            ),
            Option("dar", ("-d", "--dar"), default="16/9", help="Display aspect ratio."),
            Option("sar", ("-s", "--sar"), default="1/1", help="Sample aspect ratio."),
            grep_option(),
        ]

    async def preflight(self, settings: ResolvedSettings) -> Optional[str]:
        reason = await super().preflight(settings)
        if reason is None and config.DEBUG:
            width, height = await self.validator.probe_dimensions(settings.input_path)
            print(f"\tSource : {width}x{height}")
        return reason

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        width, height = settings.param("width"), settings.param("height")
        return [
            "-y",
            "-v",
            settings.log_level,
            "-i",
            settings.input_path,
            "-vf",
            f"scale={width}:{height}:force_original_aspect_ratio=decrease:force_divisible_by=2,"
            f"setdar={settings.param('dar')},setsar={settings.param('sar')}",
            settings.output_path,
        ]


def get_script() -> ScaleScript:
    return ScaleScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
