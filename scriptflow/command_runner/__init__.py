# scriptflow/command_runner/__init__.py
"""
Shared machinery of the ffmpeg wrapper scripts.

Every script resolves its settings, validates its input with ffprobe, runs a
single external command and maps the result onto its process exit status.
"""

from scriptflow.command_runner.base_script import BaseScript
from scriptflow.command_runner.outcome import Outcome, OutcomeKind
from scriptflow.command_runner.recovery import RecoveryPolicy
from scriptflow.command_runner.settings import Option, ResolvedSettings

__all__ = [
    "BaseScript",
    "Option",
    "Outcome",
    "OutcomeKind",
    "RecoveryPolicy",
    "ResolvedSettings",
]
