import json

import pytest
from pydantic import ValidationError

from scriptflow.command_runner.exceptions import (
    ConfigError,
    HelpRequested,
    InvalidValue,
    MissingValue,
    UnknownFlag,
)
from scriptflow.command_runner.settings import (
    Option,
    common_options,
    load_config_document,
    resolve,
    to_bool,
)


def _options(multiple_inputs=False):
    return common_options("input.mp4", "ff_test.mp4", multiple_inputs=multiple_inputs) + [
        Option("count", ("-c", "--count"), default=3, type=int),
        Option("colour", ("--colour",), default="#fb923c"),
        Option("fast", ("-f", "--fast"), default=False, takes_value=False),
    ]


def _write_config(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")
    return str(path)


def test_defaults_when_nothing_given():
    settings = resolve([], _options(), script_name="ff_test", env={})
    assert settings.input_path == "input.mp4"
    assert settings.inputs == ("input.mp4",)
    assert settings.output_path == "ff_test.mp4"
    assert settings.log_level == "error"
    assert settings.params == {"count": 3, "colour": "#fb923c", "fast": False}
    assert settings.config_path is None


def test_command_line_flags_override_defaults():
    settings = resolve(
        ["-i", "clip.mov", "-o", "out.mp4", "-c", "5", "-l", "info", "--fast"],
        _options(),
        script_name="ff_test",
        env={},
    )
    assert settings.input_path == "clip.mov"
    assert settings.output_path == "out.mp4"
    assert settings.log_level == "info"
    assert settings.param("count") == 5
    assert settings.param("fast") is True


def test_relative_cli_paths_resolve_against_cwd(tmp_path):
    settings = resolve(
        ["-i", "clip.mov"], _options(), script_name="ff_test", cwd=str(tmp_path), env={}
    )
    assert settings.input_path == str(tmp_path / "clip.mov")


def test_flat_config_matches_equivalent_flags(tmp_path):
    config_path = _write_config(
        tmp_path / "config.json",
        {"input": "clip.mov", "output": "out.mp4", "count": "5", "loglevel": "info"},
    )
    from_config = resolve(["-C", config_path], _options(), script_name="ff_test", env={})
    from_flags = resolve(
        ["-i", str(tmp_path / "clip.mov"), "-o", str(tmp_path / "out.mp4"), "-c", "5", "-l", "info"],
        _options(),
        script_name="ff_test",
        env={},
    )
    assert from_config.model_dump(exclude={"config_path"}) == from_flags.model_dump(
        exclude={"config_path"}
    )


@pytest.mark.parametrize("flags_first", [True, False])
def test_config_wins_over_flags_wherever_config_appears(tmp_path, flags_first):
    config_path = _write_config(tmp_path / "config.json", {"count": 7})
    flags = ["-c", "2", "--colour", "#000000"]
    argv = flags + ["-C", config_path] if flags_first else ["-C", config_path] + flags
    settings = resolve(argv, _options(), script_name="ff_test", env={})
    assert settings.param("count") == 7
    # Fields the config does not define keep their command-line value
    assert settings.param("colour") == "#000000"


def test_config_wrapped_under_script_name(tmp_path):
    config_path = _write_config(
        tmp_path / "config.json",
        {"ff_other": {"count": 1}, "ff_test": {"count": 9}},
    )
    settings = resolve(["-C", config_path], _options(), script_name="ff_test", env={})
    assert settings.param("count") == 9


def test_config_single_wrapper_key_is_unwrapped(tmp_path):
    config_path = _write_config(tmp_path / "config.json", {"ff_test1": {"count": 4}})
    settings = resolve(["-C", config_path], _options(), script_name="ff_test", env={})
    assert settings.param("count") == 4


def test_config_null_empty_and_unknown_keys_are_ignored(tmp_path):
    config_path = _write_config(
        tmp_path / "config.json",
        {"count": None, "colour": "", "description": "Intro", "unknown": 1},
    )
    settings = resolve(["-C", config_path, "-c", "6"], _options(), script_name="ff_test", env={})
    assert settings.param("count") == 6
    assert settings.param("colour") == "#fb923c"
    assert "unknown" not in settings.params


def test_config_paths_resolve_against_config_folder(tmp_path):
    folder = tmp_path / "project"
    folder.mkdir()
    config_path = _write_config(folder / "config.json", {"input": "clip.mov", "output": "/abs/out.mp4"})
    settings = resolve(["-C", config_path], _options(), script_name="ff_test", env={})
    assert settings.input_path == str(folder / "clip.mov")
    assert settings.output_path == "/abs/out.mp4"


def test_config_paths_resolve_against_scriptflow_config_dir(tmp_path):
    config_path = _write_config(tmp_path / "stage.json", {"input": "clip.mov"})
    settings = resolve(
        ["-C", config_path],
        _options(),
        script_name="ff_test",
        env={"SCRIPTFLOW_CONFIG_DIR": "/pipelines/intro"},
    )
    assert settings.input_path == "/pipelines/intro/clip.mov"


def test_config_boolean_switch(tmp_path):
    config_path = _write_config(tmp_path / "config.json", {"fast": "true"})
    settings = resolve(["-C", config_path], _options(), script_name="ff_test", env={})
    assert settings.param("fast") is True


def test_repeated_inputs_accumulate():
    settings = resolve(
        ["-i", "a.mp4", "-i", "b.mp4", "--input", "c.mp4"],
        _options(multiple_inputs=True),
        script_name="ff_test",
        env={},
    )
    assert settings.inputs == ("a.mp4", "b.mp4", "c.mp4")
    assert settings.input_path == "a.mp4"


def test_config_input_list(tmp_path):
    config_path = _write_config(tmp_path / "config.json", {"input": ["a.mp4", "/b.mp4"]})
    settings = resolve(
        ["-C", config_path], _options(multiple_inputs=True), script_name="ff_test", env={}
    )
    assert settings.inputs == (str(tmp_path / "a.mp4"), "/b.mp4")


def test_description_flag_is_accepted_and_ignored():
    settings = resolve(
        ["--description", "Scale the intro", "-c", "2"], _options(), script_name="ff_test", env={}
    )
    assert settings.param("count") == 2
    assert "description" not in settings.params


def test_unknown_flag_raises():
    with pytest.raises(UnknownFlag) as exc:
        resolve(["--frobnicate"], _options(), script_name="ff_test", env={})
    assert str(exc.value) == "Unknown option --frobnicate"
    assert exc.value.exit_code == 1


def test_stray_positional_tokens_are_ignored():
    settings = resolve(["leftover", "-c", "2"], _options(), script_name="ff_test", env={})
    assert settings.param("count") == 2


def test_flag_without_value_raises():
    with pytest.raises(MissingValue):
        resolve(["-c"], _options(), script_name="ff_test", env={})


def test_invalid_integer_raises():
    with pytest.raises(InvalidValue):
        resolve(["-c", "three"], _options(), script_name="ff_test", env={})


def test_invalid_loglevel_raises():
    with pytest.raises(InvalidValue):
        resolve(["-l", "chatty"], _options(), script_name="ff_test", env={})


def test_help_anywhere_short_circuits(tmp_path):
    missing_config = str(tmp_path / "missing.json")
    with pytest.raises(HelpRequested) as exc:
        resolve(
            ["-C", missing_config, "--frobnicate", "--help"],
            _options(),
            script_name="ff_test",
            help_exit_code=0,
            env={},
        )
    assert exc.value.exit_code == 0


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        resolve(["-C", str(tmp_path / "missing.json")], _options(), script_name="ff_test", env={})


def test_config_must_be_an_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_document(str(path), "ff_test")


def test_config_invalid_json_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_document(str(path), "ff_test")


def test_resolved_settings_are_immutable():
    settings = resolve([], _options(), script_name="ff_test", env={})
    with pytest.raises(ValidationError):
        settings.output_path = "other.mp4"


@pytest.mark.parametrize(
    "value,expected",
    [(True, True), ("yes", True), ("1", True), (1, True), ("false", False), (0, False)],
)
def test_to_bool(value, expected):
    assert to_bool(value) is expected


def test_to_bool_rejects_garbage():
    with pytest.raises(ValueError):
        to_bool("maybe")
