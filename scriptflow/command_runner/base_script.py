# scriptflow/command_runner/base_script.py
"""
Base class for all ffmpeg wrapper scripts.

A script only declares its options and how to build its command line;
``BaseScript.run`` drives the common sequence:

    resolve settings -> print flags -> validate parameters -> preflight
    -> build command -> run the tool -> map the exit status
"""

import asyncio
import os
import shlex
import sys
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from scriptflow.command_runner import executor
from scriptflow.command_runner.exceptions import (
    ConfigError,
    HelpRequested,
    ToolNotFoundError,
    UsageError,
)
from scriptflow.command_runner.outcome import Outcome, OutcomeKind
from scriptflow.command_runner.preflight import PreflightValidator
from scriptflow.command_runner.recovery import RecoveryPolicy, recover
from scriptflow.command_runner.settings import (
    Option,
    ResolvedSettings,
    common_options,
    resolve,
)
from scriptflow.core.config import config
from scriptflow.core.setup_logging import get_logger, setup_default_logging

VIDEO_EXTENSIONS = (".mp4", ".mov")


class BaseScript(ABC):
    """
    Abstract base class for wrapper scripts.

    Subclasses set the class attributes below and implement ``build_command``.
    """

    name: str = ""
    summary: str = ""
    default_input: str = "input.mp4"
    default_output: str = ""
    help_exit_code: int = 1
    probe_stream: str = "v:0"
    recovery_policy: RecoveryPolicy = RecoveryPolicy.PASS_THROUGH
    # None means ffmpeg
    tool: Optional[str] = None
    inherit_stdio: bool = False
    # Accept a folder as input and process every video in it
    supports_directory: bool = False
    multiple_inputs: bool = False
    # Print the usage instead of running on defaults when called without arguments
    help_when_empty: bool = False

    def __init__(self, validator: Optional[PreflightValidator] = None):
        self.logger = get_logger(self.name or "script")
        self.validator = validator or PreflightValidator()

    # Options

    def extra_options(self) -> List[Option]:
        """Options specific to the script."""
        return []

    def get_options(self) -> List[Option]:
        """Every option the script recognises."""
        return common_options(
            self.default_input, self.default_output, multiple_inputs=self.multiple_inputs
        ) + list(self.extra_options())

    @property
    def help_flags(self) -> tuple:
        """``-h`` only requests help when no option of the script uses it."""
        claimed = {flag for option in self.get_options() for flag in option.flags}
        return ("--help",) if "-h" in claimed else ("-h", "--help")

    def wants_help(self, argv: Sequence[str]) -> bool:
        """Whether the command line only asks for the usage text."""
        if not argv and self.help_when_empty:
            return True
        return any(token in self.help_flags for token in argv)

    def resolve_settings(self, argv: Sequence[str]) -> ResolvedSettings:
        return resolve(
            argv,
            self.get_options(),
            script_name=self.name,
            help_flags=self.help_flags,
            help_exit_code=self.help_exit_code,
        )

    # Text output

    def usage(self) -> str:
        """Build the usage text printed for ``--help`` and usage errors."""
        lines = [f"ℹ️ Usage: {self.name} [flags]", "", "Summary:", self.summary, "", "Flags:"]
        for option in self.get_options():
            if not option.flags:
                continue
            value = "" if not option.takes_value else f" <{option.metavar or option.key.upper()}>"
            lines.append(f" {' | '.join(option.flags)}{value}")
            description = option.help
            if option.default not in (None, "", []):
                description += f" Default: {option.default}"
            lines.append(f"\t{description.strip()}")
            lines.append("")
        lines.append(" -C | --config <CONFIG_FILE>")
        lines.append("\tJSON config file. Its values take priority over command-line flags.")
        lines.append("")
        lines.append(" --description <TEXT>")
        lines.append("\tFree text, ignored.")
        lines.append("")
        lines.append(f" {' | '.join(self.help_flags)}")
        lines.append("\tDisplay this summary and exit.")
        return "\n".join(lines)

    def print_flags(self, settings: ResolvedSettings) -> None:
        """Print the resolved values of the script-specific options."""
        print(f"🎬 {self.name}")
        for option in self.extra_options():
            value = settings.param(option.key)
            if value is not None:
                print(f"\t{option.key.replace('_', ' ').capitalize()} : {value}")

    # Hooks

    def validate_parameters(self, settings: ResolvedSettings) -> Optional[str]:
        """
        Check script-specific values before anything runs.

        Returns:
            str: Reason the parameters are unusable (a soft failure), or None
        """
        return None

    @abstractmethod
    def build_command(self, settings: ResolvedSettings) -> List[str]:
        """
        Build the tool arguments for one input.

        Must be deterministic: identical settings give identical arguments.

        Args:
            settings: Resolved settings

        Returns:
            list: Arguments, without the binary itself
        """

    def get_tool(self, settings: ResolvedSettings) -> str:
        return self.tool or config.FFMPEG_BIN

    def command_line(self, settings: ResolvedSettings) -> List[str]:
        """Full command line, binary included."""
        return [self.get_tool(settings)] + [str(arg) for arg in self.build_command(settings)]

    async def preflight(self, settings: ResolvedSettings) -> Optional[str]:
        """
        Validate the input of one invocation.

        Returns:
            str: Reason the input was rejected, or None
        """
        probe = await self.validator.validate(settings.input_path, self.probe_stream)
        if probe.is_valid:
            return None
        if probe.diagnostic_output:
            print(probe.diagnostic_output)
        if not settings.input_path:
            return "No input file specified"
        if not os.path.exists(settings.input_path):
            return "Input file not found"
        return f"Input file: '{settings.input_path}' not a valid media file"

    # Execution

    async def execute(self, settings: ResolvedSettings) -> Outcome:
        """Validate, build and run the command for one input."""
        reason = self.validate_parameters(settings)
        if reason:
            return Outcome.soft(reason)

        reason = await self.preflight(settings)
        if reason:
            return Outcome.soft(reason)

        return await self.run_command(settings)

    async def run_command(self, settings: ResolvedSettings) -> Outcome:
        """Run the command built from validated settings and map its exit status."""
        cmd = self.command_line(settings)
        if config.DEBUG:
            print(f"🐛 {shlex.join(cmd)}")

        result = await executor.run(cmd[0], cmd[1:], inherit_stdio=self.inherit_stdio)

        if not result.success:
            self.logger.error(
                f"{cmd[0]} exited with status {result.exit_code}: {result.stderr.strip()}"
            )
            return Outcome.hard(result.exit_code, f"{cmd[0]} exited with status {result.exit_code}")

        if result.stdout.strip():
            print(result.stdout.rstrip())
        if result.stderr.strip():
            print(result.stderr.rstrip(), file=sys.stderr)

        output = self.describe_output(settings)
        print(f"✅ Output : {output}")
        return Outcome.proceed(output)

    def describe_output(self, settings: ResolvedSettings) -> str:
        """What the command wrote, as shown to the user."""
        return settings.output_path

    def directory_inputs(self, folder: str, grep: str = "") -> List[str]:
        """Videos of a folder whose name contains ``grep``, sorted by name."""
        return [
            os.path.join(folder, entry)
            for entry in sorted(os.listdir(folder))
            if entry.lower().endswith(VIDEO_EXTENSIONS) and grep in entry
        ]

    async def execute_directory(self, settings: ResolvedSettings) -> Outcome:
        """
        Run the command on every video of the input folder, one at a time.

        The output of file ``i`` is written to ``<i>_<output name>``.
        Rejected files are skipped; the first failing command stops the run.
        """
        files = self.directory_inputs(settings.input_path, settings.param("grep", ""))
        if not files:
            return Outcome.soft(f"No video files found in folder: {settings.input_path}")

        out_dir, out_name = os.path.split(settings.output_path)
        for index, path in enumerate(files):
            file_settings = settings.model_copy(
                update={
                    "input_path": path,
                    "inputs": (path,),
                    "output_path": os.path.join(out_dir, f"{index}_{out_name}"),
                }
            )
            outcome = await self.execute(file_settings)
            if outcome.kind is OutcomeKind.SOFT_FAILURE:
                self.logger.warning(f"Skipping {path}: {outcome.message}")
                continue
            if not outcome.ok:
                return outcome
        return Outcome.proceed(settings.output_path)

    async def run(self, argv: Sequence[str]) -> Outcome:
        """
        Run the script on a command line.

        Args:
            argv: Command-line tokens, without the program name

        Returns:
            Outcome: Final outcome; its exit code is the process exit status
        """
        if not argv and self.help_when_empty:
            print(self.usage())
            return Outcome.usage(self.help_exit_code)

        try:
            settings = self.resolve_settings(argv)
        except HelpRequested as e:
            print(self.usage())
            return Outcome.usage(e.exit_code)
        except UsageError as e:
            print(f"❌ {e}")
            print(self.usage())
            return Outcome.usage(e.exit_code, str(e))
        except ConfigError as e:
            self.logger.error(str(e))
            print(f"❌ {e}")
            return Outcome.hard(e.exit_code, str(e))

        self.print_flags(settings)

        try:
            if self.supports_directory and os.path.isdir(settings.input_path):
                outcome = await self.execute_directory(settings)
            else:
                outcome = await self.execute(settings)
        except ToolNotFoundError as e:
            self.logger.error(str(e))
            print(f"❌ {e}")
            return Outcome.hard(e.exit_code, str(e))

        if outcome.kind is OutcomeKind.SOFT_FAILURE:
            print(f"\t❌ {outcome.message}. Exiting.")
            return recover(self.recovery_policy, settings.input_path, settings.output_path)
        return outcome

    def main(self, argv: Optional[Sequence[str]] = None) -> int:
        """
        Console entry point.

        Args:
            argv: Command-line tokens (defaults to ``sys.argv[1:]``)

        Returns:
            int: Process exit status
        """
        argv = sys.argv[1:] if argv is None else list(argv)
        # The log file is only opened for real runs, help leaves the disk untouched
        if not self.wants_help(argv):
            setup_default_logging()
        outcome = asyncio.run(self.run(argv))
        return outcome.exit_code
