from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import socket
import time
from dataclasses import dataclass
from typing import Union

from msgpet.config import TestConfig
from msgpet.metrics import Failure, RequestOutcome, Success, classify_error

logger = logging.getLogger("msgpet.client")

LINE_TERMINATOR = b"\n"
MIN_READ_LIMIT = 64 * 1024
CLOSED_CONNECTION = "use of closed network connection"

TRANSPORT_ERRORS = (
    OSError,
    EOFError,
    asyncio.TimeoutError,
    asyncio.LimitOverrunError,
)


@dataclass(frozen=True, slots=True)
class TransportFailure:
    description: str


ExchangeResult = Union[Success, TransportFailure]


def describe_error(op: str, address: str, exc: BaseException) -> str:
    """Render a transport error as ``"<op> tcp <address>: <reason>"``."""
    return f"{op} tcp {address}: {_reason(exc)}"


def _reason(exc: BaseException) -> str:
    if isinstance(exc, asyncio.IncompleteReadError):
        return "EOF"
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return "i/o timeout"
    if isinstance(exc, asyncio.LimitOverrunError):
        return "line too long"
    if isinstance(exc, socket.gaierror):
        return (exc.strerror or str(exc)).lower()
    if isinstance(exc, OSError) and exc.errno is not None:
        return os.strerror(exc.errno).lower()
    if isinstance(exc, ConnectionError):
        return CLOSED_CONNECTION
    return str(exc) or type(exc).__name__


def to_outcome(result: ExchangeResult) -> RequestOutcome:
    if isinstance(result, TransportFailure):
        return Failure(classify_error(result.description))
    return result


def read_limit(payload: bytes) -> int:
    return max(MIN_READ_LIMIT, 2 * (len(payload) + len(LINE_TERMINATOR)))


async def dial(config: TestConfig) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    connect = asyncio.open_connection(config.host, config.port, limit=read_limit(config.payload))
    if config.timeout_sec is None:
        return await connect
    return await asyncio.wait_for(connect, timeout=config.timeout_sec)


async def exchange(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    payload: bytes,
    address: str,
    timeout_sec: float | None = None,
) -> ExchangeResult:
    """Send one line and time the wait for one line back; the clock starts after the write."""
    op = "write"
    try:
        if writer.is_closing():
            raise ConnectionError
        writer.write(payload + LINE_TERMINATOR)
        await _bounded(writer.drain(), timeout_sec)
        op = "read"
        start_mono = time.perf_counter()
        await _bounded(reader.readuntil(LINE_TERMINATOR), timeout_sec)
        latency_ms = (time.perf_counter() - start_mono) * 1000.0
    except TRANSPORT_ERRORS as exc:
        description = describe_error(op, address, exc)
        logger.debug("Exchange failed: %s", description)
        return TransportFailure(description)
    return Success(latency_ms)


async def close(writer: asyncio.StreamWriter) -> None:
    writer.close()
    # peer resets surface here too
    with contextlib.suppress(OSError):
        await writer.wait_closed()


async def _bounded(awaitable, timeout_sec: float | None):
    if timeout_sec is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout=timeout_sec)
