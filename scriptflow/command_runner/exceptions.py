# scriptflow/command_runner/exceptions.py
"""
Exceptions raised while resolving settings and spawning tools.

They never leave ``BaseScript.run``: each one is translated into an ``Outcome``.
"""


class UsageError(Exception):
    """Invalid command line or settings. The script prints its usage and exits 1."""

    exit_code = 1


class UnknownFlag(UsageError):
    """A token starting with ``-`` that the script does not recognise."""

    def __init__(self, flag: str):
        super().__init__(f"Unknown option {flag}")
        self.flag = flag


class MissingValue(UsageError):
    """A flag that expects a value was given without one."""


class InvalidValue(UsageError):
    """A value that cannot be coerced to the type the flag expects."""


class HelpRequested(Exception):
    """``--help`` was found on the command line."""

    def __init__(self, exit_code: int):
        super().__init__("help requested")
        self.exit_code = exit_code


class ConfigError(Exception):
    """The JSON config file is missing, unreadable or not an object."""

    exit_code = 1


class ToolNotFoundError(Exception):
    """An external binary could not be spawned."""

    exit_code = 1

    def __init__(self, tool: str, reason: str = ""):
        message = f"Cannot run {tool}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.tool = tool
