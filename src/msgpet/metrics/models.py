from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

import numpy as np


@dataclass(frozen=True, slots=True)
class Success:
    latency_ms: float


@dataclass(frozen=True, slots=True)
class Failure:
    category: str


RequestOutcome = Union[Success, Failure]


@dataclass(frozen=True, slots=True)
class TestResult:
    successful: int
    failed: int
    errors: Mapping[str, int] = field(default_factory=dict)
    latencies_ms: tuple[float, ...] = ()
    total_time_ms: float = 0.0

    __test__ = False  # not a pytest test class

    @property
    def requests(self) -> int:
        return self.successful + self.failed

    @property
    def completed_cleanly(self) -> bool:
        return self.failed == 0

    @property
    def latency_sum_ms(self) -> float:
        return float(sum(self.latencies_ms))

    @property
    def avg_latency_ms(self) -> float | None:
        if self.successful == 0:
            return None
        return self.latency_sum_ms / self.successful

    @property
    def min_latency_ms(self) -> float | None:
        return min(self.latencies_ms) if self.latencies_ms else None

    @property
    def max_latency_ms(self) -> float | None:
        return max(self.latencies_ms) if self.latencies_ms else None

    def percentile(self, q: float) -> float | None:
        if not self.latencies_ms:
            return None
        return float(np.percentile(self.latencies_ms, q))

    @property
    def throughput_rps(self) -> float | None:
        if self.total_time_ms <= 0:
            return None
        return self.requests / (self.total_time_ms / 1000.0)
