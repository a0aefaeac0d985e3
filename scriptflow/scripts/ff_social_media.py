# scriptflow/scripts/ff_social_media.py
"""Make a video compatible with social media platforms."""

import sys
from typing import List

from scriptflow.command_runner import BaseScript, Option, Outcome, ResolvedSettings
from scriptflow.command_runner.recovery import recover


class SocialMediaScript(BaseScript):
    name = "ff_social_media"
    summary = "Convert a video to the format expected by a social media platform."
    default_input = ""
    default_output = "ff_social_media.mp4"

    def extra_options(self) -> List[Option]:
        return [
            Option(
                "instagram",
                ("-ig", "--instagram"),
                default=False,
                takes_value=False,
                help="Convert to the yuv420p pixel format required by Instagram.",
            ),
        ]

    async def run_command(self, settings: ResolvedSettings) -> Outcome:
        if not settings.param("instagram"):
            # No platform selected: hand the input on unchanged
            return recover(self.recovery_policy, settings.input_path, settings.output_path)
        return await super().run_command(settings)

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        return [
            "-y",
            "-v",
            settings.log_level,
            "-i",
            settings.input_path,
            "-pix_fmt",
            "yuv420p",
            settings.output_path,
        ]


def get_script() -> SocialMediaScript:
    return SocialMediaScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
