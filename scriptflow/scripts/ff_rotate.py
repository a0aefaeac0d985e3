# scriptflow/scripts/ff_rotate.py
"""Rotate a video clockwise by 90, 180 or 270 degrees."""

import sys
from typing import List, Optional

from scriptflow.command_runner import BaseScript, Option, ResolvedSettings
from scriptflow.command_runner.settings import grep_option

# transpose=1 turns 90 degrees clockwise, transpose=2 90 degrees counter-clockwise
TRANSPOSE_FILTERS = {
    90: "transpose=1",
    180: "transpose=1,transpose=1",
    270: "transpose=2",
}


class RotateScript(BaseScript):
    name = "ff_rotate"
    summary = "Rotate a video clockwise."
    default_output = "ff_rotate.mp4"
    supports_directory = True

    def extra_options(self) -> List[Option]:
        return [
            Option(
                "rotate",
                ("-r", "--rotate"),
                default=90,
                type=int,
                help="Angle in degrees: 90, 180 or 270.",
                metavar="DEGREES",
            ),
            grep_option(),
        ]

    def validate_parameters(self, settings: ResolvedSettings) -> Optional[str]:
        if settings.param("rotate") not in TRANSPOSE_FILTERS:
            return f"Invalid rotation: '{settings.param('rotate')}'. Must be 90, 180 or 270"
        return None

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        return [
            "-y",
            "-v",
            settings.log_level,
            "-i",
            settings.input_path,
            "-vf",
            TRANSPOSE_FILTERS[settings.param("rotate")],
            "-c:a",
            "copy",
            settings.output_path,
        ]


def get_script() -> RotateScript:
    return RotateScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
