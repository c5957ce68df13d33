from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from msgpet.errors import ConfigError


class RunMode(str, Enum):
    MULTI = "multi"
    SINGLE = "single"


class DialFailurePolicy(str, Enum):
    RECORD = "record"
    ABORT = "abort"  # legacy: first failed dial ends the run


def split_host_port(host_addr: str) -> tuple[str, int]:
    host, sep, port_text = host_addr.rpartition(":")
    if not sep or not host or not port_text:
        msg = f"Invalid target address {host_addr!r}, expected host:port"
        raise ConfigError(msg)
    if host.startswith("["):
        if not host.endswith("]"):
            msg = f"Invalid target address {host_addr!r}, unterminated IPv6 literal"
            raise ConfigError(msg)
        host = host[1:-1]
    elif ":" in host:
        msg = f"Invalid target address {host_addr!r}, IPv6 hosts must be bracketed"
        raise ConfigError(msg)
    if not port_text.isdigit() or not 0 < int(port_text) < 65536:
        msg = f"Invalid port {port_text!r} in target address {host_addr!r}"
        raise ConfigError(msg)
    return host, int(port_text)


def join_host_port(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


@dataclass(frozen=True, slots=True)
class TestConfig:
    host_addr: str
    requests: int
    delay_sec: float = 0.0
    payload: bytes = b""
    timeout_sec: float | None = None

    __test__ = False  # not a pytest test class

    def __post_init__(self) -> None:
        split_host_port(self.host_addr)
        if isinstance(self.requests, bool) or not isinstance(self.requests, int) or self.requests < 1:
            msg = f"Request count must be an integer greater than zero, got {self.requests!r}"
            raise ConfigError(msg)
        if self.delay_sec < 0:
            msg = f"Delay must not be negative, got {self.delay_sec!r}"
            raise ConfigError(msg)
        if self.timeout_sec is not None and self.timeout_sec <= 0:
            msg = f"Timeout must be positive, got {self.timeout_sec!r}"
            raise ConfigError(msg)
        if not isinstance(self.payload, bytes):
            msg = "Payload must be bytes"
            raise ConfigError(msg)
        if b"\n" in self.payload:
            msg = "Payload must not contain a newline, it terminates the request on the wire"
            raise ConfigError(msg)

    @property
    def host(self) -> str:
        return split_host_port(self.host_addr)[0]

    @property
    def port(self) -> int:
        return split_host_port(self.host_addr)[1]
