from __future__ import annotations

from msgpet.loadgen.client import TransportFailure, describe_error, exchange
from msgpet.loadgen.runner import run_multi_connection, run_single_connection, run_test

__all__ = [
    "TransportFailure",
    "describe_error",
    "exchange",
    "run_multi_connection",
    "run_single_connection",
    "run_test",
]
