# scriptflow/command_runner/settings.py
"""
Settings resolution for the wrapper scripts.

A script declares the options it understands as a list of ``Option`` objects.
``resolve`` merges defaults, command-line flags and an optional JSON config
file into one immutable ``ResolvedSettings``.

Precedence is defaults < command line < config file: every field the config
file defines wins, wherever ``-C`` appears among the flags.
"""

import argparse
import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from scriptflow.command_runner.exceptions import (
    ConfigError,
    HelpRequested,
    InvalidValue,
    MissingValue,
    UnknownFlag,
    UsageError,
)

LOG_LEVELS = ("quiet", "panic", "fatal", "error", "warning", "info", "verbose", "debug", "trace")
LogLevel = Literal["quiet", "panic", "fatal", "error", "warning", "info", "verbose", "debug", "trace"]
DEFAULT_LOG_LEVEL = "error"

# Exported by the flow runner so stage configs resolve paths against the pipeline folder
CONFIG_DIR_ENV = "SCRIPTFLOW_CONFIG_DIR"

# Keys handled by every script; everything else ends up in ResolvedSettings.params
_RESERVED_KEYS = ("input", "output", "loglevel")


@dataclass(frozen=True)
class Option:
    """One setting recognised by a script, on the command line and in config files.

    An option with no ``flags`` can only be set from a config file.
    """

    key: str
    flags: Tuple[str, ...] = ()
    default: Any = None
    type: Callable[[Any], Any] = str
    takes_value: bool = True
    multiple: bool = False
    is_path: bool = False
    help: str = ""
    metavar: Optional[str] = None


def common_options(
    default_input: str, default_output: str, *, multiple_inputs: bool = False
) -> List[Option]:
    """Options shared by all ffmpeg wrappers."""
    return [
        Option(
            "input",
            ("-i", "--input"),
            default=[default_input] if multiple_inputs and default_input else default_input,
            multiple=multiple_inputs,
            is_path=True,
            help="Input file(s) or folders" if multiple_inputs else "Input file",
        ),
        Option("output", ("-o", "--output"), default=default_output, is_path=True, help="Output file"),
        Option(
            "loglevel",
            ("-l", "--loglevel"),
            default=DEFAULT_LOG_LEVEL,
            help=f"The FFMPEG loglevel to use ({', '.join(LOG_LEVELS)})",
        ),
    ]


def grep_option() -> Option:
    """Filter applied to file names when a folder is given as input."""
    return Option(
        "grep",
        ("-g", "--grep"),
        default="",
        help="Only process files whose name contains this string when a folder is given.",
        metavar="STRING",
    )


def to_bool(value: Any) -> bool:
    """Coerce a switch value coming from the command line or a JSON config."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off", ""}:
        return False
    raise ValueError(f"not a boolean: {value!r}")


class ResolvedSettings(BaseModel):
    """
    Fully merged settings of one script invocation.

    Built once by ``resolve`` and never modified afterwards.

    Attributes:
        script_name: Name of the wrapper script (e.g. ``ff_scale``)
        input_path: Primary input file, empty when none was given
        inputs: Every input, for scripts accepting several
        output_path: Output file
        log_level: ffmpeg ``-v`` level
        params: Script-specific values keyed by option key
        config_path: JSON config file the values were read from, if any
    """

    model_config = ConfigDict(frozen=True)

    script_name: str
    input_path: str = ""
    inputs: Tuple[str, ...] = ()
    output_path: str = ""
    log_level: LogLevel = DEFAULT_LOG_LEVEL
    params: Dict[str, Any] = Field(default_factory=dict)
    config_path: Optional[str] = None

    def param(self, key: str, default: Any = None) -> Any:
        """Return a script-specific value, or ``default`` when unset."""
        value = self.params.get(key)
        return default if value is None else value


class _ArgumentParser(argparse.ArgumentParser):
    """argparse parser reporting errors as exceptions instead of exiting."""

    def error(self, message):
        if "expected one argument" in message:
            raise MissingValue(message)
        raise UsageError(message)


def _build_arg_parser(script_name: str, options: Sequence[Option]) -> _ArgumentParser:
    parser = _ArgumentParser(prog=script_name, add_help=False, allow_abbrev=False)
    parser.add_argument("-C", "--config", dest="config", default=None)
    parser.add_argument("--description", dest="description", default=None)
    for option in options:
        if not option.flags:
            continue
        if not option.takes_value:
            parser.add_argument(
                *option.flags, dest=option.key, action="store_const", const=True, default=None
            )
        elif option.multiple:
            parser.add_argument(*option.flags, dest=option.key, action="append", default=None)
        else:
            parser.add_argument(*option.flags, dest=option.key, default=None)
    return parser


def load_config_document(path: str, script_name: str) -> Dict[str, Any]:
    """
    Read a JSON config file and return the settings it defines for a script.

    Two shapes are accepted: a flat object of settings, or an object wrapping
    the settings under the script name (or under any single top-level key).
    ``null`` and empty-string values count as absent.

    Args:
        path: Path of the JSON file
        script_name: Name of the script reading it

    Returns:
        dict: Settings defined by the file

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")

    if not isinstance(document, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    section = document.get(script_name)
    if isinstance(section, dict):
        document = section
    elif len(document) == 1:
        (only_value,) = document.values()
        if isinstance(only_value, dict):
            document = only_value

    return {key: value for key, value in document.items() if value is not None and value != ""}


def _coerce(option: Option, value: Any) -> Any:
    """Convert a raw flag or config value to the option's type."""
    convert = to_bool if not option.takes_value else option.type
    try:
        if option.multiple:
            items = value if isinstance(value, (list, tuple)) else [value]
            return [convert(item) for item in items if item is not None and item != ""]
        return convert(value)
    except (TypeError, ValueError):
        flag = option.flags[0] if option.flags else option.key
        raise InvalidValue(f"Invalid value for {flag}: {value!r}")


def _resolve_path(value: Any, base_dir: Optional[str]) -> Any:
    if not base_dir or not isinstance(value, str) or not value or os.path.isabs(value):
        return value
    return os.path.normpath(os.path.join(base_dir, value))


def _resolve_paths(option: Option, value: Any, base_dir: Optional[str]) -> Any:
    if not option.is_path or value is None:
        return value
    if option.multiple:
        return [_resolve_path(item, base_dir) for item in value]
    return _resolve_path(value, base_dir)


def resolve(
    cli_args: Sequence[str],
    options: Sequence[Option],
    *,
    script_name: str,
    help_flags: Sequence[str] = ("-h", "--help"),
    help_exit_code: int = 1,
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ResolvedSettings:
    """
    Merge defaults, command-line flags and the JSON config file of a script.

    Args:
        cli_args: Command-line tokens, without the program name
        options: Options the script recognises
        script_name: Name of the script, used to pick its section of a config file
        help_flags: Tokens that request the usage text
        help_exit_code: Exit status carried by ``HelpRequested``
        cwd: Directory relative command-line paths resolve against (kept relative if None)
        env: Environment used to look up ``SCRIPTFLOW_CONFIG_DIR`` (defaults to ``os.environ``)

    Returns:
        ResolvedSettings: Immutable merged settings

    Raises:
        HelpRequested: If a help flag appears anywhere on the command line
        UsageError: On unknown flags, missing or invalid values
        ConfigError: If the config file cannot be loaded
    """
    if any(token in help_flags for token in cli_args):
        raise HelpRequested(help_exit_code)

    env = os.environ if env is None else env
    parser = _build_arg_parser(script_name, options)
    namespace, extras = parser.parse_known_args(list(cli_args))
    for token in extras:
        if token.startswith("-"):
            raise UnknownFlag(token)

    by_key = {option.key: option for option in options}
    values: Dict[str, Any] = {option.key: option.default for option in options}

    for option in options:
        raw = getattr(namespace, option.key, None) if option.flags else None
        if raw is not None:
            values[option.key] = _resolve_paths(option, _coerce(option, raw), cwd)

    config_path = namespace.config
    if config_path:
        document = load_config_document(config_path, script_name)
        base_dir = env.get(CONFIG_DIR_ENV) or os.path.dirname(os.path.abspath(config_path))
        for key, raw in document.items():
            option = by_key.get(key)
            if option is None:
                continue
            values[key] = _resolve_paths(option, _coerce(option, raw), base_dir)

    log_level = str(values.get("loglevel") or DEFAULT_LOG_LEVEL).lower()
    if log_level not in LOG_LEVELS:
        raise InvalidValue(f"Invalid loglevel {log_level!r}, expected one of: {', '.join(LOG_LEVELS)}")

    input_option = by_key.get("input")
    raw_input = values.get("input")
    if input_option is not None and input_option.multiple:
        inputs = tuple(raw_input or ())
        input_path = inputs[0] if inputs else ""
    else:
        input_path = raw_input or ""
        inputs = (input_path,) if input_path else ()

    return ResolvedSettings(
        script_name=script_name,
        input_path=input_path,
        inputs=inputs,
        output_path=values.get("output") or "",
        log_level=log_level,
        params={key: value for key, value in values.items() if key not in _RESERVED_KEYS},
        config_path=config_path,
    )
