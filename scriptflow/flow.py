# scriptflow/flow.py
"""
Pipeline runner: executes the ``ff_*`` stages of a JSON pipeline in order.

A pipeline file maps stage names to the settings of a wrapper script::

    {
        "ff_scale1": {"input": "intro.mov", "output": "scaled.mp4", "width": "1280"},
        "ff_pad": {"input": "scaled.mp4", "colour": "<CONSTANT_RANDOM_COLOUR>"},
        "ff_scale2": {"input": "ff_pad.mp4", "output": "final.mp4"}
    }

Trailing digits let the same script appear several times. Each stage runs as
its own process in the pipeline's folder. A failing stage is reported and the
next one still runs. The output of the last successful stage is copied to
``output.mp4`` next to the pipeline file.
"""

import argparse
import asyncio
import json
import os
import random
import re
import shutil
import sys
import tempfile
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from scriptflow.command_runner import executor
from scriptflow.command_runner.exceptions import ToolNotFoundError, UsageError
from scriptflow.command_runner.settings import CONFIG_DIR_ENV
from scriptflow.core.config import config
from scriptflow.core.setup_logging import LogContext, setup_default_logging
from scriptflow.scripts import get_script_manager

logger = setup_default_logging()

FINAL_OUTPUT = "output.mp4"
VIDEO_EXTENSIONS = (".mp4", ".mov")
INTERMEDIATE_EXTENSIONS = (".mp4", ".mov", ".avi", ".mkv")

LIGHT_COLOUR = "#fafafa"
DARK_COLOUR = "#171717"

# Tailwind CSS palette, shades 50 to 950 of every colour
TAILWIND_PALETTE = (
    "#f8fafc #f1f5f9 #e2e8f0 #cbd5e1 #94a3b8 #64748b #475569 #334155 #1e293b #0f172a #020617 "
    "#f9fafb #f3f4f6 #e5e7eb #d1d5db #9ca3af #6b7280 #4b5563 #374151 #1f2937 #111827 #030712 "
    "#fafafa #f4f4f5 #e4e4e7 #d4d4d8 #a1a1aa #71717a #52525b #3f3f46 #27272a #18181b #09090b "
    "#fafafa #f5f5f5 #e5e5e5 #d4d4d4 #a3a3a3 #737373 #525252 #404040 #262626 #171717 #0a0a0a "
    "#fafaf9 #f5f5f4 #e7e5e4 #d6d3d1 #a8a29e #78716c #57534e #44403c #292524 #1c1917 #0c0a09 "
    "#fef2f2 #fee2e2 #fecaca #fca5a5 #f87171 #ef4444 #dc2626 #b91c1c #991b1b #7f1d1d #450a0a "
    "#fff7ed #ffedd5 #fed7aa #fdba74 #fb923c #f97316 #ea580c #c2410c #9a3412 #7c2d12 #431407 "
    "#fffbeb #fef3c7 #fde68a #fcd34d #fbbf24 #f59e0b #d97706 #b45309 #92400e #78350f #451a03 "
    "#fefce8 #fef9c3 #fef08a #fde047 #facc15 #eab308 #ca8a04 #a16207 #854d0e #713f12 #422006 "
    "#f7fee7 #ecfccb #d9f99d #bef264 #a3e635 #84cc16 #65a30d #4d7c0f #3f6212 #365314 #1a2e05 "
    "#f0fdf4 #dcfce7 #bbf7d0 #86efac #4ade80 #22c55e #16a34a #15803d #166534 #14532d #052e16 "
    "#ecfdf5 #d1fae5 #a7f3d0 #6ee7b7 #34d399 #10b981 #059669 #047857 #065f46 #064e3b #022c22 "
    "#f0fdfa #ccfbf1 #99f6e4 #5eead4 #2dd4bf #14b8a6 #0d9488 #0f766e #115e59 #134e4a #042f2e "
    "#ecfeff #cffafe #a5f3fc #67e8f9 #22d3ee #06b6d4 #0891b2 #0e7490 #155e75 #164e63 #083344 "
    "#f0f9ff #e0f2fe #bae6fd #7dd3fc #38bdf8 #0ea5e9 #0284c7 #0369a1 #075985 #0c4a6e #082f49 "
    "#eff6ff #dbeafe #bfdbfe #93c5fd #60a5fa #3b82f6 #2563eb #1d4ed8 #1e40af #1e3a8a #172554 "
    "#eef2ff #e0e7ff #c7d2fe #a5b4fc #818cf8 #6366f1 #4f46e5 #4338ca #3730a3 #312e81 #1e1b4b "
    "#f5f3ff #ede9fe #ddd6fe #c4b5fd #a78bfa #8b5cf6 #7c3aed #6d28d9 #5b21b6 #4c1d95 #2e1065 "
    "#faf5ff #f3e8ff #e9d5ff #d8b4fe #c084fc #a855f7 #9333ea #7e22ce #6b21a8 #581c87 #3b0764 "
    "#fdf4ff #fae8ff #f5d0fe #f0abfc #e879f9 #d946ef #c026d3 #a21caf #86198f #701a75 #4a044e "
    "#fdf2f8 #fce7f3 #fbcfe8 #f9a8d4 #f472b6 #ec4899 #db2777 #be185d #9d174d #831843 #500724 "
    "#fff1f2 #ffe4e6 #fecdd3 #fda4af #fb7185 #f43f5e #e11d48 #be123c #9f1239 #881337 #4c0519"
).split()

_ENV_PATTERN = re.compile(r"<ENV_([^>]*)>")
_DATE_PATTERN = re.compile(r"<DATE_([^>]*)>")
_RANDOM_FILTER_PATTERN = re.compile(r"<RANDOM_VIDEO_FILTER_([^>]*)>")


def _file_signature(path: str) -> Optional[Tuple[int, int]]:
    """Modification time and size of a file, None when it does not exist."""
    try:
        stat = os.stat(path)
    except OSError:
        return None
    return stat.st_mtime_ns, stat.st_size


class FlowError(Exception):
    """The pipeline file cannot be used at all."""


def contrast_colour(colour: str) -> str:
    """
    Pick a light or dark colour readable on top of ``colour``.

    Args:
        colour: Hex colour such as ``#fb923c``

    Returns:
        str: ``#171717`` for bright colours, ``#fafafa`` otherwise
    """
    hex_value = colour.lstrip("#")
    r, g, b = (int(hex_value[i : i + 2], 16) for i in (0, 2, 4))
    brightness = (r * 299 + g * 587 + b * 114) / 1000
    return DARK_COLOUR if brightness > 128 else LIGHT_COLOUR


def stage_script_name(stage: str) -> str:
    """``ff_scale2`` -> ``ff_scale``"""
    return stage.rstrip("0123456789")


def load_pipeline(path: str) -> Dict[str, Dict[str, Any]]:
    """
    Read a pipeline file and return its stages in document order.

    Args:
        path: JSON pipeline file

    Returns:
        dict: Stage name to stage settings, for every key starting with ``ff``

    Raises:
        FlowError: If the file cannot be read or is not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError:
        raise FlowError(f"Config file not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise FlowError(f"Error reading config file: {e}")

    if not isinstance(document, dict):
        raise FlowError(f"Config file {path} must contain a JSON object")

    return {key: value for key, value in document.items() if key.startswith("ff")}


class KeywordSubstitutions:
    """
    Replace the ``<KEYWORD>`` placeholders of stage settings.

    ``<RANDOM_COLOUR>`` changes on every stage while ``<CONSTANT_RANDOM_COLOUR>``
    is drawn once and shared by the whole pipeline run.

    Args:
        folder: Folder of the pipeline file
        rng: Random generator (seeded in tests)
        now: Clock used for ``<DATE_...>`` keywords
        environ: Environment used for ``<ENV_...>`` keywords
    """

    def __init__(
        self,
        folder: str,
        rng: Optional[random.Random] = None,
        now=None,
        environ: Optional[Dict[str, str]] = None,
    ):
        self.folder = folder
        self.rng = rng or random.Random()
        self.now = now or datetime.now
        self.environ = os.environ if environ is None else environ
        self.constant_colour = self.rng.choice(TAILWIND_PALETTE)
        self.constant_contrast = contrast_colour(self.constant_colour)

    def _videos(self, contains: str = "") -> List[str]:
        try:
            entries = sorted(os.listdir(self.folder))
        except OSError:
            return []
        return [
            os.path.join(self.folder, entry)
            for entry in entries
            if entry.lower().endswith(VIDEO_EXTENSIONS) and contains in entry
        ]

    def _random_video(self, match: "re.Match") -> str:
        videos = self._videos(match.group(1))
        return self.rng.choice(videos) if videos else match.group(0)

    def apply_text(self, text: str, stage_colour: str) -> str:
        """Substitute every keyword of one string."""
        text = _ENV_PATTERN.sub(lambda m: self.environ.get(m.group(1), "").replace("_", " "), text)

        folder_name = os.path.basename(os.path.abspath(self.folder))
        text = text.replace("<FOLDER_NAME>", folder_name)
        text = text.replace("<FOLDER_TITLE>", folder_name.replace("_", " "))

        text = _DATE_PATTERN.sub(lambda m: self.now().strftime(m.group(1)), text)

        if "<RANDOM_VIDEO>" in text:
            videos = self._videos()
            if videos:
                text = text.replace("<RANDOM_VIDEO>", self.rng.choice(videos))
        text = _RANDOM_FILTER_PATTERN.sub(self._random_video, text)

        text = text.replace("<RANDOM_COLOUR>", stage_colour)
        text = text.replace("<RANDOM_CONTRAST_COLOUR>", contrast_colour(stage_colour))
        text = text.replace("<CONSTANT_RANDOM_COLOUR>", self.constant_colour)
        text = text.replace("<CONSTANT_CONTRAST_COLOUR>", self.constant_contrast)
        return text

    def apply(self, value: Any, stage_colour: Optional[str] = None) -> Any:
        """
        Substitute keywords in every string of a stage's settings.

        Args:
            value: Settings (dict, list or scalar)
            stage_colour: Colour used for ``<RANDOM_COLOUR>`` (drawn if None)

        Returns:
            Settings with the same structure and substituted strings
        """
        if stage_colour is None:
            stage_colour = self.rng.choice(TAILWIND_PALETTE)
        if isinstance(value, dict):
            return {key: self.apply(item, stage_colour) for key, item in value.items()}
        if isinstance(value, list):
            return [self.apply(item, stage_colour) for item in value]
        if isinstance(value, str):
            return self.apply_text(value, stage_colour)
        return value


class FlowRunner:
    """
    Run every stage of a pipeline file, one at a time.

    Args:
        config_path: Pipeline file
        tidy: Remove stage configs and intermediate outputs at the end
        substitutions: Keyword substitution helper (created for the pipeline folder if None)
    """

    def __init__(
        self,
        config_path: str,
        tidy: bool = True,
        substitutions: Optional[KeywordSubstitutions] = None,
    ):
        self.config_path = os.path.abspath(config_path)
        self.folder = os.path.dirname(self.config_path)
        self.tidy = tidy
        self.substitutions = substitutions or KeywordSubstitutions(self.folder)
        self.temp_files: List[str] = []
        self.produced: List[str] = []
        # Inputs that existed before this run wrote them; tidy never removes these
        self.protected: Set[str] = set()

    def resolve(self, path: Any) -> str:
        """Absolute path of a stage setting, relative to the pipeline folder."""
        return os.path.normpath(os.path.join(self.folder, str(path)))

    def stage_inputs(self, settings: Dict[str, Any]) -> List[str]:
        inputs = settings.get("input")
        if not inputs:
            return []
        if not isinstance(inputs, list):
            inputs = [inputs]
        return [self.resolve(path) for path in inputs if path]

    def write_stage_config(self, stage: str, script_name: str, settings: Dict[str, Any]) -> str:
        os.makedirs(config.TEMP_DIR, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix=f"temp_config_{stage}_", suffix=".json", dir=config.TEMP_DIR)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump({script_name: settings}, f, indent=2)
        self.temp_files.append(path)
        return path

    async def run_stage(self, stage: str, raw_settings: Any) -> Optional[str]:
        """
        Run one stage.

        Args:
            stage: Stage name (``ff_scale1``)
            raw_settings: Settings from the pipeline file

        Returns:
            str: Absolute path of the stage output when the stage succeeded, None otherwise
        """
        script_name = stage_script_name(stage)
        manager = get_script_manager()
        module = manager.module_name(script_name)
        if module is None:
            logger.error(f"Script not found: {script_name}")
            return None
        if not isinstance(raw_settings, dict):
            logger.error(f"Settings of {stage} must be a JSON object")
            return None

        cleaned = {key: value for key, value in raw_settings.items() if value is not None}
        settings = self.substitutions.apply(cleaned)
        stage_config = self.write_stage_config(stage, script_name, settings)

        output = settings.get("output") or manager.get_script(script_name).default_output
        output_path = self.resolve(output) if output else None
        before = _file_signature(output_path) if output_path else None
        for path in self.stage_inputs(settings):
            if path not in self.produced:
                self.protected.add(path)

        print(f"\n🚀 Running : {stage} {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        env = dict(os.environ, **{CONFIG_DIR_ENV: self.folder})
        try:
            result = await executor.run(
                sys.executable,
                ["-m", module, "-C", stage_config],
                inherit_stdio=True,
                cwd=self.folder,
                env=env,
            )
        except ToolNotFoundError as e:
            logger.error(f"Error running script {stage}: {e}")
            return None

        if not result.success:
            logger.error(f"Script {stage} failed with exit code {result.exit_code}")
            return None

        if not output_path:
            return None
        after = _file_signature(output_path)
        # Only files this stage created or rewrote count as intermediates
        if after is not None and after != before and output_path not in self.produced:
            self.produced.append(output_path)
        return output_path

    async def run(self) -> int:
        """
        Run the whole pipeline.

        Returns:
            int: 0 when at least one stage succeeded (or there was none), 1 otherwise
        """
        stages = load_pipeline(self.config_path)
        last_output: Optional[str] = None
        succeeded = 0

        try:
            for stage, stage_settings in stages.items():
                with LogContext(logger, pipeline=self.config_path, stage=stage):
                    output = await self.run_stage(stage, stage_settings)
                if output is None:
                    print("Continuing with next script...")
                    continue
                succeeded += 1
                last_output = output

            if last_output and os.path.isfile(last_output):
                final_output = os.path.join(self.folder, FINAL_OUTPUT)
                if os.path.abspath(last_output) != final_output:
                    print(f"Final: Copying {os.path.basename(last_output)} to {FINAL_OUTPUT}")
                    shutil.copyfile(last_output, final_output)
        finally:
            self.cleanup()

        return 0 if succeeded or not stages else 1

    def cleanup(self) -> None:
        """Remove stage configs and, when tidying, the intermediate outputs of this run."""
        if not self.tidy:
            return
        for path in self.temp_files:
            if os.path.exists(path):
                os.remove(path)
        final_output = os.path.join(self.folder, FINAL_OUTPUT)
        for path in self.produced:
            if path == final_output or path in self.protected:
                continue
            if not path.lower().endswith(INTERMEDIATE_EXTENSIONS):
                continue
            if os.path.isfile(path):
                os.remove(path)
                print(f"🧹 Cleaned up intermediate file: {os.path.basename(path)}")


class _FlowArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


USAGE = """ℹ️ Usage: scriptflow -C <CONFIG_FILE> [-t]

Summary:
Takes a JSON config file and executes each ff_ script in sequence.

Flags:
 -C | --config <CONFIG_FILE>
\tSupply a config.json file with the settings of every stage.

 -t | --notidy
\tKeep the temporary stage configs and the intermediate videos.

 --help
\tDisplay this summary and exit."""


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = _FlowArgumentParser(prog="scriptflow", add_help=False, allow_abbrev=False)
    parser.add_argument("-C", "--config", dest="config", default="config.json")
    parser.add_argument("-t", "--notidy", dest="tidy", action="store_false")
    parser.add_argument("--description", dest="description", default=None)
    parser.add_argument("--help", dest="help", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Console entry point of the pipeline runner.

    Args:
        argv: Command-line tokens (defaults to ``sys.argv[1:]``)

    Returns:
        int: Process exit status
    """
    try:
        args, extras = _build_arg_parser().parse_known_args(
            sys.argv[1:] if argv is None else list(argv)
        )
    except UsageError as e:
        print(f"❌ {e}")
        print(USAGE)
        return 1
    if args.help:
        print(USAGE)
        return 1
    for token in extras:
        if token.startswith("-"):
            print(f"Unknown option {token}")
            return 1

    runner = FlowRunner(args.config, tidy=args.tidy)
    try:
        return asyncio.run(runner.run())
    except FlowError as e:
        logger.error(str(e))
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
