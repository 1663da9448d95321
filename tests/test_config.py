from __future__ import annotations

import pytest
import yaml

from beat_stats.config import (
    SAMPLE_CONFIG,
    BeatConfig,
    config_from_mapping,
    get_settings,
    load_config,
    parse_duration,
)
from beat_stats.errors import ConfigError


def test_defaults() -> None:
    config = BeatConfig()
    assert config.url == "http://127.0.0.1:5066"
    assert config.collect_beat_stats
    assert config.collect_libbeat_stats
    assert config.collect_system_stats
    assert config.collect_filebeat_stats
    assert config.method == "GET"
    assert config.headers == {}
    assert config.host_header == ""
    assert config.timeout == 5.0
    assert config.username == "" and config.password == ""
    assert not config.insecure_skip_verify


@pytest.mark.parametrize(
    "raw, expected",
    [
        (5, 5.0),
        (2.5, 2.5),
        ("5s", 5.0),
        ("500ms", 0.5),
        ("1m", 60.0),
        ("1h", 3600.0),
        ("10", 10.0),
        ("1m30s", 90.0),
        ("1.5h", 5400.0),
        ("250us", 0.00025),
        ("1h2m3.5s", 3723.5),
        (0, 0.0),
        ("0s", 0.0),
    ],
)
def test_parse_duration(raw, expected) -> None:
    assert parse_duration(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "five", "5d", "-1s", -1, "1m30", "s", True])
def test_parse_duration_rejects_invalid(raw) -> None:
    with pytest.raises(ConfigError):
        parse_duration(raw)


def test_config_from_mapping() -> None:
    config = config_from_mapping(
        {
            "url": "http://beat:5066",
            "collect_system_stats": False,
            "method": "POST",
            "headers": {"X-Test": "test-value"},
            "host_header": "beat.test.local",
            "timeout": "2s",
            "username": "admin",
            "password": "PWD",
        }
    )
    assert config.url == "http://beat:5066"
    assert not config.collect_system_stats
    assert config.collect_beat_stats
    assert config.method == "POST"
    assert config.headers == {"X-Test": "test-value"}
    assert config.host_header == "beat.test.local"
    assert config.timeout == 2.0
    assert (config.username, config.password) == ("admin", "PWD")


def test_config_from_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigError, match="collect_registrar_stats"):
        config_from_mapping({"collect_registrar_stats": True})


@pytest.mark.parametrize(
    "data",
    [
        {"collect_beat_stats": "yes"},
        {"url": 5066},
        {"headers": ["X-Test"]},
        ["url"],
    ],
)
def test_config_from_mapping_rejects_bad_types(data) -> None:
    with pytest.raises(ConfigError):
        config_from_mapping(data)


def test_empty_document_gives_defaults() -> None:
    assert config_from_mapping(None) == BeatConfig()


def test_sample_config_is_loadable(tmp_path) -> None:
    path = tmp_path / "beat.yaml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    config = load_config(path)
    assert config.url == "http://127.0.0.1:5066"
    assert config.collect_system_stats is False
    assert config.timeout == 5.0
    assert yaml.safe_load(SAMPLE_CONFIG)["collect_filebeat_stats"] is True


def test_load_config_errors(tmp_path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")
    broken = tmp_path / "broken.yaml"
    broken.write_text("url: [unterminated\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(broken)


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("BEAT_STATS_PORT", "6000")
    monkeypatch.setenv("BEAT_STATS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BEAT_STATS_INTERVAL", "30s")
    monkeypatch.setenv("BEAT_STATS_CONFIG", "/etc/beat-stats/beat.yaml")
    get_settings.cache_clear()
    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()
    assert settings.port == 6000
    assert settings.log_level == "debug"
    assert settings.interval == 30.0
    assert settings.config_path == "/etc/beat-stats/beat.yaml"
    assert settings.host == "0.0.0.0"
