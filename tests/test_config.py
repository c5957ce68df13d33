from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from msgpet.config import (
    RunMode,
    Settings,
    TestConfig,
    load_settings,
    parse_duration,
    resolve_config,
    resolve_mode,
    split_host_port,
)
from msgpet.errors import ConfigError


@pytest.mark.parametrize(
    ("text", "seconds"),
    [
        ("0", 0.0),
        ("200ms", 0.2),
        ("1.5s", 1.5),
        ("1m30s", 90.0),
        ("250us", 0.00025),
        ("2h", 7200.0),
    ],
)
def test_parse_duration(text: str, seconds: float) -> None:
    assert parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "200", "ms", "1.5 s", "-1s", "3d"])
def test_parse_duration_rejects_garbage(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_duration(text)


@given(st.integers(min_value=0, max_value=10_000))
def test_parse_duration_milliseconds(ms: int) -> None:
    assert parse_duration(f"{ms}ms") == pytest.approx(ms / 1000.0)


def test_split_host_port() -> None:
    assert split_host_port("localhost:8080") == ("localhost", 8080)
    assert split_host_port("[::1]:9000") == ("::1", 9000)


@pytest.mark.parametrize("address", ["localhost", ":80", "host:", "host:0", "host:70000", "::1:80", "h:x"])
def test_invalid_addresses(address: str) -> None:
    with pytest.raises(ConfigError):
        TestConfig(address, requests=1)


def test_config_validation() -> None:
    with pytest.raises(ConfigError):
        TestConfig("h:1", requests=0)
    with pytest.raises(ConfigError):
        TestConfig("h:1", requests=1, delay_sec=-0.1)
    with pytest.raises(ConfigError):
        TestConfig("h:1", requests=1, payload=b"two\nlines")
    with pytest.raises(ConfigError):
        TestConfig("h:1", requests=1, timeout_sec=0)
    config = TestConfig("h:1", requests=2, payload=b"x")
    assert (config.host, config.port) == ("h", 1)


def test_load_settings_from_rc_file(tmp_path: Path) -> None:
    rc = tmp_path / ".msgpetrc"
    rc.write_text("host: example.com\nport: 7000\nclients: 25\ndelay: 200ms\nmode: single\n")
    settings = load_settings(rc)
    assert settings == Settings(
        host="example.com",
        port=7000,
        clients=25,
        delay_sec=pytest.approx(0.2),
        mode=RunMode.SINGLE,
    )


def test_missing_rc_file_is_empty(tmp_path: Path) -> None:
    assert load_settings(tmp_path / "absent") == Settings()


@pytest.mark.parametrize(
    "content",
    ["port: [1, 2]\n", "- just\n- a list\n", "host: [unterminated\n", "mode: turbo\n", "clients: yes\n"],
)
def test_bad_rc_file(tmp_path: Path, content: str) -> None:
    rc = tmp_path / ".msgpetrc"
    rc.write_text(content)
    with pytest.raises(ConfigError):
        load_settings(rc)


def test_explicit_values_win_over_stored() -> None:
    settings = Settings(host="stored", port=1, clients=5, delay_sec=1.0)
    config = resolve_config(settings, b"x", host="explicit", requests=9)
    assert config.host_addr == "explicit:1"
    assert config.requests == 9
    assert config.delay_sec == 1.0
    assert config.timeout_sec is None


def test_missing_required_setting_is_fatal() -> None:
    with pytest.raises(ConfigError, match="port"):
        resolve_config(Settings(host="h", clients=1), b"x")
    with pytest.raises(ConfigError, match="clients"):
        resolve_config(Settings(host="h", port=1), b"x")


def test_delay_defaults_to_zero() -> None:
    config = resolve_config(Settings(), b"x", host="h", port=2, requests=1)
    assert config.delay_sec == 0.0


def test_resolve_mode() -> None:
    assert resolve_mode(Settings()) is RunMode.MULTI
    assert resolve_mode(Settings(mode=RunMode.SINGLE)) is RunMode.SINGLE
    assert resolve_mode(Settings(mode=RunMode.SINGLE), RunMode.MULTI) is RunMode.MULTI
