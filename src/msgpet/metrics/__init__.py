from __future__ import annotations

from msgpet.metrics.aggregator import ResultAggregator
from msgpet.metrics.classifier import classify_error
from msgpet.metrics.models import Failure, RequestOutcome, Success, TestResult

__all__ = [
    "Failure",
    "RequestOutcome",
    "ResultAggregator",
    "Success",
    "TestResult",
    "classify_error",
]
