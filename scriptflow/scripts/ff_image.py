# scriptflow/scripts/ff_image.py
"""Turn a still image (or an animated gif) into a video clip."""

import os
import sys
from typing import List, Optional, Sequence

from scriptflow.command_runner import BaseScript, Option, ResolvedSettings


class ImageScript(BaseScript):
    name = "ff_image"
    summary = "Convert an image into a video of the given duration."
    default_input = "input.png"
    default_output = "ff_image.mp4"
    help_exit_code = 0

    def extra_options(self) -> List[Option]:
        return [
            Option("duration", ("-d", "--duration"), default="3", help="Duration of the video in seconds."),
        ]

    def resolve_settings(self, argv: Sequence[str]) -> ResolvedSettings:
        settings = super().resolve_settings(argv)
        if settings.output_path and not os.path.splitext(settings.output_path)[1]:
            settings = settings.model_copy(update={"output_path": f"{settings.output_path}.mp4"})
        return settings

    def validate_parameters(self, settings: ResolvedSettings) -> Optional[str]:
        duration = settings.param("duration")
        try:
            if float(duration) > 0:
                return None
        except (TypeError, ValueError):
            pass
        return f"Invalid duration: '{duration}'. Must be a positive number of seconds"

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        if settings.input_path.lower().endswith(".gif"):
            loop = ["-stream_loop", "-1"]
        else:
            loop = ["-loop", "1"]
        return (
            ["-y", "-v", settings.log_level]
            + loop
            + [
                "-i",
                settings.input_path,
                "-vf",
                "scale=trunc(iw/2)*2:trunc(ih/2)*2,fps=29.97",
                "-c:v",
                "libx264",
                "-t",
                str(settings.param("duration")),
                "-pix_fmt",
                "yuv420p",
                settings.output_path,
            ]
        )


def get_script() -> ImageScript:
    return ImageScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
