import os
import sys

import pytest

from scriptflow.command_runner import executor
from scriptflow.command_runner.exceptions import ToolNotFoundError


@pytest.mark.asyncio
async def test_run_captures_output_and_exit_code():
    result = await executor.run(
        sys.executable,
        ["-c", "import sys; sys.stdout.write('out'); sys.stderr.write('err'); sys.exit(3)"],
    )
    assert result.exit_code == 3
    assert result.success is False
    assert result.stdout == "out"
    assert result.stderr == "err"


@pytest.mark.asyncio
async def test_run_success(tmp_path):
    result = await executor.run(
        sys.executable, ["-c", "import os; print(os.getcwd())"], cwd=str(tmp_path)
    )
    assert result.success is True
    assert os.path.realpath(result.stdout.strip()) == os.path.realpath(str(tmp_path))


@pytest.mark.asyncio
async def test_run_passes_environment():
    result = await executor.run(
        sys.executable,
        ["-c", "import os; print(os.environ['SCRIPTFLOW_TEST_VALUE'])"],
        env=dict(os.environ, SCRIPTFLOW_TEST_VALUE="42"),
    )
    assert result.stdout.strip() == "42"


@pytest.mark.asyncio
async def test_missing_binary_raises_tool_not_found():
    with pytest.raises(ToolNotFoundError) as exc:
        await executor.run("scriptflow-no-such-binary", ["-version"])
    assert exc.value.exit_code == 1
