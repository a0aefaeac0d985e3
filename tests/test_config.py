import pytest


def test_parse_helpers_cover_edge_cases():
    from scriptflow.core import config as cfg

    assert cfg._parse_bool(None, default=True) is True
    assert cfg._parse_bool(" TrUe ") is True
    assert cfg._parse_bool("0") is False
    assert cfg._parse_bool("not-a-bool", default=False) is False

    assert cfg._parse_int(None, 7) == 7
    assert cfg._parse_int("not-an-int", 7) == 7
    assert cfg._parse_int(" 5 ", 0) == 5
    assert cfg._parse_int("5", 0, min_value=10) == 10
    assert cfg._parse_int("50", 0, max_value=10) == 10

    assert cfg._parse_csv(None) == ["*"]
    assert cfg._parse_csv("a, b,,c") == ["a", "b", "c"]


def test_config_reads_environment(monkeypatch):
    from scriptflow.core import config as cfg

    monkeypatch.setenv("DEBUG", "1")
    monkeypatch.setenv("FFMPEG_BIN", "/opt/ffmpeg/bin/ffmpeg")
    monkeypatch.setenv("SCRIPTFLOW_TEMP_DIR", "/var/tmp/sf")
    monkeypatch.setenv("SERVER_PORT", "8080")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test,http://b.test")

    instance = cfg.Config()
    assert instance.DEBUG is True
    assert instance.FFMPEG_BIN == "/opt/ffmpeg/bin/ffmpeg"
    assert instance.FFPROBE_BIN == "ffprobe"
    assert instance.TEMP_DIR == "/var/tmp/sf"
    assert instance.SERVER_PORT == 8080
    assert instance.CORS_ALLOW_ORIGINS == ["http://a.test", "http://b.test"]


def test_config_defaults(monkeypatch):
    from scriptflow.core import config as cfg

    for name in ("DEBUG", "LOG_LEVEL", "API_TOKEN", "SERVER_PORT"):
        monkeypatch.delenv(name, raising=False)

    instance = cfg.Config()
    assert instance.DEBUG is False
    assert instance.LOG_LEVEL == "WARNING"
    assert instance.API_TOKEN == ""
    assert instance.SERVER_PORT == 3002


def test_validate_configuration(monkeypatch):
    from scriptflow.core import config as cfg

    instance = cfg.Config()
    instance.CORS_ALLOW_CREDENTIALS = False
    instance.validate_configuration()

    instance.SERVER_PORT = 0
    with pytest.raises(ValueError):
        instance.validate_configuration()

    instance.SERVER_PORT = 3002
    instance.CORS_ALLOW_CREDENTIALS = True
    instance.CORS_ALLOW_ORIGINS = ["*"]
    with pytest.raises(ValueError):
        instance.validate_configuration()

    instance.CORS_ALLOW_CREDENTIALS = False
    instance.FFPROBE_BIN = ""
    with pytest.raises(ValueError):
        instance.validate_configuration()


def test_reload_config_updates_shared_instance(monkeypatch):
    from scriptflow.core import config as cfg

    shared = cfg.get_config()
    monkeypatch.setattr(shared, "SERVER_PORT", shared.SERVER_PORT)
    monkeypatch.setenv("SERVER_PORT", "4000")

    refreshed = cfg.reload_config_from_env()
    assert refreshed is shared
    assert shared.SERVER_PORT == 4000
