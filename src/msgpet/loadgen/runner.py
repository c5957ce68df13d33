from __future__ import annotations

import asyncio
import logging
from typing import Coroutine

from msgpet.config import DialFailurePolicy, RunMode, TestConfig
from msgpet.errors import DialError
from msgpet.loadgen.client import (
    TRANSPORT_ERRORS,
    ExchangeResult,
    TransportFailure,
    close,
    describe_error,
    dial,
    exchange,
    to_outcome,
)
from msgpet.metrics import Failure, ResultAggregator, TestResult, classify_error

logger = logging.getLogger("msgpet.runner")


async def run_test(
    config: TestConfig,
    mode: RunMode = RunMode.MULTI,
    dial_policy: DialFailurePolicy = DialFailurePolicy.RECORD,
) -> TestResult:
    if mode is RunMode.SINGLE:
        return await run_single_connection(config, dial_policy)
    return await run_multi_connection(config, dial_policy)


async def run_multi_connection(
    config: TestConfig,
    dial_policy: DialFailurePolicy = DialFailurePolicy.RECORD,
) -> TestResult:
    logger.info(
        "Testing %s with %s requests over multiple sockets (delay %ss)",
        config.host_addr,
        config.requests,
        config.delay_sec,
    )
    aggregator = ResultAggregator(config.requests)
    tasks: list[asyncio.Task[None]] = []
    aggregator.start()
    try:
        for index in range(config.requests):
            try:
                reader, writer = await dial(config)
            except TRANSPORT_ERRORS as exc:
                description = describe_error("dial", config.host_addr, exc)
                if dial_policy is DialFailurePolicy.ABORT:
                    raise DialError(description) from exc
                logger.warning("Attempt %s could not connect: %s", index, description)
                _spawn(tasks, aggregator.record(Failure(classify_error(description))))
            else:
                _spawn(tasks, _attempt(aggregator, reader, writer, config))
            if index < config.requests - 1:
                await asyncio.sleep(config.delay_sec)
    except BaseException:
        await _cancel(tasks)
        raise
    return await _finish(aggregator, tasks)


async def run_single_connection(
    config: TestConfig,
    dial_policy: DialFailurePolicy = DialFailurePolicy.RECORD,
) -> TestResult:
    """Send every request over one connection; the delay is not used in this mode."""
    logger.info(
        "Testing %s with %s requests over a single socket",
        config.host_addr,
        config.requests,
    )
    aggregator = ResultAggregator(config.requests)
    tasks: list[asyncio.Task[None]] = []
    aggregator.start()
    try:
        reader, writer = await dial(config)
    except TRANSPORT_ERRORS as exc:
        description = describe_error("dial", config.host_addr, exc)
        if dial_policy is DialFailurePolicy.ABORT:
            raise DialError(description) from exc
        logger.warning("Could not connect, failing all %s attempts: %s", config.requests, description)
        category = classify_error(description)
        for _ in range(config.requests):
            _spawn(tasks, aggregator.record(Failure(category)))
        return await _finish(aggregator, tasks)

    try:
        for index in range(config.requests):
            result = await exchange(
                reader,
                writer,
                config.payload,
                config.host_addr,
                timeout_sec=config.timeout_sec,
            )
            _spawn(tasks, _settle(aggregator, result))
            if isinstance(result, TransportFailure):
                # a late reply may still be buffered on this stream
                remaining = config.requests - index - 1
                if remaining:
                    logger.warning(
                        "Connection unusable, failing the remaining %s attempts: %s",
                        remaining,
                        result.description,
                    )
                category = classify_error(result.description)
                for _ in range(remaining):
                    _spawn(tasks, aggregator.record(Failure(category)))
                break
        return await _finish(aggregator, tasks)
    except BaseException:
        await _cancel(tasks)
        raise
    finally:
        await close(writer)


async def _attempt(
    aggregator: ResultAggregator,
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    config: TestConfig,
) -> None:
    try:
        result = await exchange(
            reader,
            writer,
            config.payload,
            config.host_addr,
            timeout_sec=config.timeout_sec,
        )
    finally:
        await close(writer)
    await _settle(aggregator, result)


async def _settle(aggregator: ResultAggregator, result: ExchangeResult) -> None:
    await aggregator.record(to_outcome(result))


async def _finish(aggregator: ResultAggregator, tasks: list[asyncio.Task[None]]) -> TestResult:
    if tasks:
        await asyncio.gather(*tasks)
    aggregator.ensure_complete()
    result = await aggregator.wait()
    logger.info(
        "Run finished in %.1fms: %s ok, %s failed",
        result.total_time_ms,
        result.successful,
        result.failed,
    )
    return result


def _spawn(tasks: list[asyncio.Task[None]], coro: Coroutine[object, object, None]) -> None:
    tasks.append(asyncio.create_task(coro))


async def _cancel(tasks: list[asyncio.Task[None]]) -> None:
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
