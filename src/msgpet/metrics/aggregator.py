from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter

from msgpet.errors import AggregationError
from msgpet.metrics.models import Failure, RequestOutcome, Success, TestResult

logger = logging.getLogger("msgpet.aggregator")


class ResultAggregator:
    """Counts the outcomes of one run; the tally freezes when the last one arrives."""

    def __init__(self, expected: int) -> None:
        if expected < 1:
            msg = f"Expected outcome count must be positive, got {expected}"
            raise AggregationError(msg)
        self.expected = expected
        self._lock = asyncio.Lock()
        self._released = asyncio.Event()
        self._successful = 0
        self._failed = 0
        self._errors: Counter[str] = Counter()
        self._latencies_ms: list[float] = []
        self._frozen: TestResult | None = None
        self._result: TestResult | None = None
        self._started_mono: float | None = None

    @property
    def recorded(self) -> int:
        return self._successful + self._failed

    @property
    def released(self) -> bool:
        return self._released.is_set()

    def start(self) -> None:
        self._started_mono = time.perf_counter()

    async def record(self, outcome: RequestOutcome) -> None:
        async with self._lock:
            if self._frozen is not None:
                msg = f"Outcome {outcome!r} reported after all {self.expected} outcomes were recorded"
                raise AggregationError(msg)
            if isinstance(outcome, Success):
                self._successful += 1
                self._latencies_ms.append(outcome.latency_ms)
            elif isinstance(outcome, Failure):
                self._failed += 1
                self._errors[outcome.category] += 1
            else:
                msg = f"Unknown outcome {outcome!r}"
                raise AggregationError(msg)
            if self.recorded == self.expected:
                self._frozen = TestResult(
                    successful=self._successful,
                    failed=self._failed,
                    errors=dict(self._errors),
                    latencies_ms=tuple(self._latencies_ms),
                )
                self._released.set()

    async def wait(self) -> TestResult:
        """Block until exactly ``expected`` outcomes are in, then return the snapshot."""
        await self._released.wait()
        if self._result is None:
            stopped_mono = time.perf_counter()
            if self._frozen is None:
                msg = "Barrier released without a frozen tally"
                raise AggregationError(msg)
            if self._started_mono is None:
                total_ms = 0.0
            else:
                total_ms = (stopped_mono - self._started_mono) * 1000.0
            self._result = TestResult(
                successful=self._frozen.successful,
                failed=self._frozen.failed,
                errors=self._frozen.errors,
                latencies_ms=self._frozen.latencies_ms,
                total_time_ms=total_ms,
            )
            logger.debug(
                "Barrier released after %s outcomes (%s ok, %s failed)",
                self.expected,
                self._result.successful,
                self._result.failed,
            )
        return self._result

    def ensure_complete(self) -> None:
        if not self.released:
            msg = f"Run finished with {self.recorded} of {self.expected} outcomes recorded"
            raise AggregationError(msg)
