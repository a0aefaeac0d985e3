# scriptflow/scripts/ff_sharpen.py
"""Sharpen (or blur, with a negative amount) a video using the unsharp filter."""

import sys
from typing import List, Optional

from scriptflow.command_runner import BaseScript, Option, ResolvedSettings
from scriptflow.command_runner.settings import grep_option

PIXEL_RANGE = (3, 23)
SHARPEN_RANGE = (-2.0, 5.0)


class SharpenScript(BaseScript):
    name = "ff_sharpen"
    summary = "Sharpen a video with the unsharp filter."
    default_output = "ff_sharpen.mp4"
    supports_directory = True

    def extra_options(self) -> List[Option]:
        return [
            Option(
                "pixel",
                ("-p", "--pixel"),
                default="5.0",
                help="Matrix size of the filter, an odd number between 3 and 23.",
            ),
            Option(
                "sharpen",
                ("-s", "--sharpen"),
                default="1.0",
                help="Amount between -2.0 (blur) and 5.0 (sharpen).",
            ),
            grep_option(),
        ]

    def validate_parameters(self, settings: ResolvedSettings) -> Optional[str]:
        pixel = settings.param("pixel")
        try:
            pixel_value = float(pixel)
        except (TypeError, ValueError):
            pixel_value = None
        if (
            pixel_value is None
            or not pixel_value.is_integer()
            or int(pixel_value) % 2 == 0
            or not PIXEL_RANGE[0] <= pixel_value <= PIXEL_RANGE[1]
        ):
            return f"Invalid pixel value: '{pixel}'. Must be an odd integer between 3 and 23"

        sharpen = settings.param("sharpen")
        try:
            sharpen_value = float(sharpen)
        except (TypeError, ValueError):
            sharpen_value = None
        if sharpen_value is None or not SHARPEN_RANGE[0] <= sharpen_value <= SHARPEN_RANGE[1]:
            return f"Invalid sharpen value: '{sharpen}'. Must be between -2.0 and 5.0"
        return None

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        pixel, sharpen = settings.param("pixel"), settings.param("sharpen")
        return [
            "-y",
            "-v",
            settings.log_level,
            "-i",
            settings.input_path,
            "-vf",
            f"unsharp={pixel}:{pixel}:{sharpen}",
            "-c:a",
            "copy",
            settings.output_path,
        ]


def get_script() -> SharpenScript:
    return SharpenScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
