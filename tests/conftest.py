"""Pytest configuration for adding the project root to sys.path, plus fake ffmpeg/ffprobe tools."""

import os
import sys

import pytest

# Ensure the repository root (containing the `scriptflow` package) is on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from scriptflow.command_runner import executor  # noqa: E402
from scriptflow.command_runner.exceptions import ToolNotFoundError  # noqa: E402
from scriptflow.command_runner.executor import SubprocessOutcome  # noqa: E402
from scriptflow.core.config import config  # noqa: E402


class FakeTools:
    """Stands in for ``executor.run``: records every command instead of spawning it."""

    def __init__(self):
        self.calls = []
        self.probe_exit = 0
        self.exit_codes = {}
        self.missing = set()
        self.on_run = None
        # Captured output of successful runs, by tool name
        self.stdout = {}
        self.stderr = {}

    async def run(self, command, args, *, inherit_stdio=False, cwd=None, env=None):
        cmd = [str(command)] + [str(arg) for arg in args]
        self.calls.append({"cmd": cmd, "inherit_stdio": inherit_stdio, "cwd": cwd, "env": env})
        tool = os.path.basename(cmd[0])
        if tool in self.missing:
            raise ToolNotFoundError(tool, "No such file or directory")
        if tool == "ffprobe":
            if self.probe_exit == 0:
                return SubprocessOutcome(0, "h264\n", "")
            return SubprocessOutcome(self.probe_exit, "", "Invalid data found when processing input")
        if self.on_run is not None:
            self.on_run(cmd, cwd, env)
        exit_code = self.exit_codes.get(tool, 0)
        if exit_code:
            return SubprocessOutcome(exit_code, "", "boom")
        return SubprocessOutcome(0, self.stdout.get(tool, ""), self.stderr.get(tool, ""))

    def commands(self, tool):
        return [call["cmd"] for call in self.calls if os.path.basename(call["cmd"][0]) == tool]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "FFMPEG_BIN", "ffmpeg")
    monkeypatch.setattr(config, "FFPROBE_BIN", "ffprobe")
    monkeypatch.setattr(config, "DEBUG", False)
    monkeypatch.setattr(config, "TEMP_DIR", str(tmp_path / "tmp"))
    monkeypatch.setattr(config, "LOG_DIRECTORY", str(tmp_path / "logs"))
    monkeypatch.delenv("SCRIPTFLOW_CONFIG_DIR", raising=False)
    return config


@pytest.fixture
def fake_tools(monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(executor, "run", tools.run)
    return tools


@pytest.fixture
def video(tmp_path):
    path = tmp_path / "input.mp4"
    path.write_bytes(b"not really a video")
    return path
