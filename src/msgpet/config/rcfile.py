from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from msgpet.config.models import RunMode, TestConfig, join_host_port
from msgpet.errors import ConfigError

logger = logging.getLogger("msgpet.config")

DEFAULT_RC_PATH = Path("~/.msgpetrc")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_TERM = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION_RE = re.compile(rf"(?:{_TERM})+")
_TERM_RE = re.compile(_TERM)


def parse_duration(text: str) -> float:
    """Parse a Go-style duration such as ``200ms`` or ``1m30s`` into seconds."""
    value = text.strip()
    if value == "0":
        return 0.0
    if not _DURATION_RE.fullmatch(value):
        msg = f"Invalid duration {text!r}, expected <number><unit> such as 200ms"
        raise ConfigError(msg)
    return sum(float(number) * _UNIT_SECONDS[unit] for number, unit in _TERM_RE.findall(value))


@dataclass(frozen=True, slots=True)
class Settings:
    host: str | None = None
    port: int | None = None
    clients: int | None = None
    delay_sec: float | None = None
    timeout_sec: float | None = None
    mode: RunMode | None = None


def load_settings(path: Path | None = None) -> Settings:
    rc_path = (path or DEFAULT_RC_PATH).expanduser()
    if not rc_path.exists():
        logger.debug("No rc file at %s", rc_path)
        return Settings()
    try:
        raw = yaml.safe_load(rc_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        msg = f"Could not parse {rc_path}: {exc}"
        raise ConfigError(msg) from exc
    if raw is None:
        return Settings()
    if not isinstance(raw, Mapping):
        msg = f"Expected a mapping at the top of {rc_path}"
        raise ConfigError(msg)
    logger.debug("Loaded settings from %s", rc_path)
    return settings_from_mapping(raw)


def settings_from_mapping(raw: Mapping[str, Any]) -> Settings:
    return Settings(
        host=_optional(raw, "host", str),
        port=_optional(raw, "port", int),
        clients=_optional(raw, "clients", int),
        delay_sec=_optional_duration(raw, "delay"),
        timeout_sec=_optional_duration(raw, "timeout"),
        mode=_optional_mode(raw),
    )


def resolve_config(
    settings: Settings,
    payload: bytes,
    *,
    host: str | None = None,
    port: int | None = None,
    requests: int | None = None,
    delay_sec: float | None = None,
    timeout_sec: float | None = None,
) -> TestConfig:
    """Merge explicit values over stored settings, field by field."""
    resolved_host = _first(host, settings.host, field="host")
    resolved_port = _first(port, settings.port, field="port")
    resolved_requests = _first(requests, settings.clients, field="clients")
    resolved_delay = delay_sec if delay_sec is not None else settings.delay_sec
    resolved_timeout = timeout_sec if timeout_sec is not None else settings.timeout_sec
    return TestConfig(
        host_addr=join_host_port(resolved_host, resolved_port),
        requests=resolved_requests,
        delay_sec=resolved_delay if resolved_delay is not None else 0.0,
        payload=payload,
        timeout_sec=resolved_timeout,
    )


def resolve_mode(settings: Settings, mode: RunMode | None = None) -> RunMode:
    if mode is not None:
        return mode
    return settings.mode or RunMode.MULTI


def _first(explicit: Any, stored: Any, *, field: str) -> Any:
    if explicit is not None:
        return explicit
    if stored is not None:
        return stored
    msg = f"Missing required setting {field!r}, pass it explicitly or add it to the rc file"
    raise ConfigError(msg)


def _optional(raw: Mapping[str, Any], key: str, kind: type) -> Any:
    value = raw.get(key)
    if value is None:
        return None
    if (kind is int and isinstance(value, bool)) or not isinstance(value, kind):
        msg = f"Setting {key!r} must be of type {kind.__name__}, got {value!r}"
        raise ConfigError(msg)
    return value


def _optional_duration(raw: Mapping[str, Any], key: str) -> float | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return parse_duration(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    msg = f"Setting {key!r} must be a duration such as 200ms, got {value!r}"
    raise ConfigError(msg)


def _optional_mode(raw: Mapping[str, Any]) -> RunMode | None:
    value = raw.get("mode")
    if value is None:
        return None
    try:
        return RunMode(value)
    except ValueError as exc:
        choices = ", ".join(m.value for m in RunMode)
        msg = f"Setting 'mode' must be one of {choices}, got {value!r}"
        raise ConfigError(msg) from exc
