# scriptflow/scripts/ff_pad.py
"""Add padding around a video, or around every video in a folder."""

import sys
from typing import List

from scriptflow.command_runner import BaseScript, Option, ResolvedSettings
from scriptflow.command_runner.settings import grep_option


class PadScript(BaseScript):
    name = "ff_pad"
    summary = "Add padding to a video. Width and height are those of the padded output."
    default_output = "ff_pad.mp4"
    supports_directory = True

    def extra_options(self) -> List[Option]:
        return [
            Option("width", ("-w", "--width"), default="iw", help="Output width (iw is the input width).", metavar="PIXELS"),
            Option("height", ("-h", "--height"), default="ih*2", help="Output height (ih is the input height).", metavar="PIXELS"),
            Option("xpixels", ("-x", "--xpixels"), default="(ow-iw)/2", help="Horizontal position of the input.", metavar="PIXELS"),
            Option("ypixels", ("-y", "--ypixels"), default="(oh-ih)/2", help="Vertical position of the input.", metavar="PIXELS"),
            Option("colour", ("-c", "--colour"), default="#fb923c", help="Colour of the padding."),
            grep_option(),
        ]

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        pad = (
            f"pad=width={settings.param('width')}:height={settings.param('height')}"
            f":x={settings.param('xpixels')}:y={settings.param('ypixels')}"
            f":color={settings.param('colour')}"
        )
        return ["-y", "-v", settings.log_level, "-i", settings.input_path, "-vf", pad, settings.output_path]


def get_script() -> PadScript:
    return PadScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
