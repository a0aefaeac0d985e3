import os

import pytest

from scriptflow.command_runner.outcome import OutcomeKind
from scriptflow.scripts.ff_concat import ConcatScript, quote_list_entry


def _clip(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"video")
    return str(path)


def test_quote_list_entry_escapes_single_quotes(tmp_path):
    path = str(tmp_path / "it's.mp4")
    assert quote_list_entry(path) == "file '" + path.replace("'", "'\\''") + "'"


@pytest.mark.asyncio
async def test_concat_writes_list_file_and_removes_it(fake_tools, tmp_path, isolated_config):
    first = _clip(tmp_path, "a.mp4")
    second = _clip(tmp_path, "b'c.mp4")
    output = str(tmp_path / "joined.mp4")
    seen = {}

    def on_run(cmd, cwd, env):
        list_file = cmd[cmd.index("-i") + 1]
        seen["list_file"] = list_file
        with open(list_file, "r", encoding="utf-8") as f:
            seen["content"] = f.read()

    fake_tools.on_run = on_run
    outcome = await ConcatScript().run(["-i", first, "-i", second, "-o", output])

    assert outcome.exit_code == 0
    assert seen["content"] == f"{quote_list_entry(first)}\n{quote_list_entry(second)}\n"
    assert os.path.dirname(seen["list_file"]) == isolated_config.TEMP_DIR
    assert os.path.basename(seen["list_file"]).startswith("ff_concat_")
    assert not os.path.exists(seen["list_file"])

    (cmd,) = fake_tools.commands("ffmpeg")
    assert cmd[1:] == [
        "-y",
        "-v",
        "error",
        "-f",
        "concat",
        "-safe",
        "0",
        "-i",
        seen["list_file"],
        "-c",
        "copy",
        output,
    ]
    # every input was probed
    assert len(fake_tools.commands("ffprobe")) == 2


@pytest.mark.asyncio
async def test_concat_expands_folders(fake_tools, tmp_path):
    folder = tmp_path / "clips"
    folder.mkdir()
    for name in ("2_part.mp4", "1_part.mov", "skip.mp4"):
        (folder / name).write_bytes(b"video")
    seen = {}

    def on_run(cmd, cwd, env):
        with open(cmd[cmd.index("-i") + 1], "r", encoding="utf-8") as f:
            seen["content"] = f.read()

    fake_tools.on_run = on_run
    await ConcatScript().run(["-i", str(folder), "-g", "part", "-o", str(tmp_path / "out.mp4")])

    assert seen["content"].splitlines() == [
        quote_list_entry(str(folder / "1_part.mov")),
        quote_list_entry(str(folder / "2_part.mp4")),
    ]


@pytest.mark.asyncio
async def test_concat_without_inputs_is_a_hard_failure(fake_tools, tmp_path, capsys):
    outcome = await ConcatScript().run(["-o", str(tmp_path / "out.mp4")])
    assert outcome.kind is OutcomeKind.HARD_FAILURE
    assert outcome.exit_code == 1
    assert fake_tools.calls == []
    assert "No input files specified" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_concat_invalid_input_produces_nothing(fake_tools, tmp_path, isolated_config):
    first = _clip(tmp_path, "a.mp4")
    output = tmp_path / "out.mp4"
    outcome = await ConcatScript().run(
        ["-i", first, "-i", str(tmp_path / "missing.mp4"), "-o", str(output)]
    )
    assert outcome.exit_code == 0
    assert fake_tools.commands("ffmpeg") == []
    assert not output.exists()
    assert not os.path.exists(isolated_config.TEMP_DIR) or os.listdir(isolated_config.TEMP_DIR) == []


@pytest.mark.asyncio
async def test_concat_failure_still_removes_list_file(fake_tools, tmp_path, isolated_config):
    fake_tools.exit_codes["ffmpeg"] = 1
    outcome = await ConcatScript().run(
        ["-i", _clip(tmp_path, "a.mp4"), "-i", _clip(tmp_path, "b.mp4"), "-o", str(tmp_path / "out.mp4")]
    )
    assert outcome.exit_code == 1
    assert os.listdir(isolated_config.TEMP_DIR) == []
