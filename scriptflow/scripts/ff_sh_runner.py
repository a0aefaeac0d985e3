# scriptflow/scripts/ff_sh_runner.py
"""
Run an arbitrary command as a pipeline stage.

Configured from a JSON file only::

    {"ff_sh_runner": {"script": "./make_intro.sh", "parameters": "--fast", "output": "intro.mp4"}}

The command inherits stdin, stdout and stderr and its exit status is passed on.
"""

import shlex
import sys
from typing import List

from scriptflow.command_runner import BaseScript, Option, Outcome, ResolvedSettings
from scriptflow.command_runner.settings import DEFAULT_LOG_LEVEL


class ShellRunnerScript(BaseScript):
    name = "ff_sh_runner"
    summary = "Run a shell command or script from a config file."
    default_input = ""
    inherit_stdio = True
    help_when_empty = True

    def get_options(self) -> List[Option]:
        return [
            Option("script", (), help="Command to run, with its own arguments."),
            Option("parameters", (), help="Extra arguments appended to the command."),
            Option("output", (), help="Output file, appended as the last argument."),
            Option("loglevel", (), default=DEFAULT_LOG_LEVEL),
        ]

    def print_flags(self, settings: ResolvedSettings) -> None:
        print(f"🎬 {self.name}")

    def get_tool(self, settings: ResolvedSettings) -> str:
        return shlex.split(settings.param("script"))[0]

    def build_command(self, settings: ResolvedSettings) -> List[str]:
        args = shlex.split(settings.param("script"))[1:]
        parameters = settings.param("parameters", "")
        if isinstance(parameters, list):
            args.extend(str(item) for item in parameters)
        elif str(parameters).strip():
            args.extend(shlex.split(str(parameters)))
        if settings.output_path:
            args.append(settings.output_path)
        return args

    async def execute(self, settings: ResolvedSettings) -> Outcome:
        script = settings.param("script", "")
        if not str(script).strip():
            print("❌ No script specified in config file")
            return Outcome.hard(1, "No script specified in config file")

        try:
            command = self.command_line(settings)
        except ValueError as e:
            # Unbalanced quotes in script or parameters
            print(f"❌ Cannot parse command: {e}")
            return Outcome.hard(1, f"Cannot parse command: {e}")

        print(f"🚀 Running: {shlex.join(command)}")
        outcome = await self.run_command(settings)
        if not outcome.ok:
            print(f"❌ Exit : {outcome.exit_code}")
        return outcome

    def describe_output(self, settings: ResolvedSettings) -> str:
        return settings.output_path or "exit 0"


def get_script() -> ShellRunnerScript:
    return ShellRunnerScript()


def main(argv=None) -> int:
    return get_script().main(argv)


if __name__ == "__main__":
    sys.exit(main())
