from __future__ import annotations

from msgpet.errors import DialError
from msgpet.metrics import TestResult
from msgpet.report import format_abort, format_duration, format_report


def test_clean_run_report() -> None:
    result = TestResult(successful=4, failed=0, latencies_ms=(1.0, 2.0, 3.0, 4.0), total_time_ms=2000.0)
    text = format_report(result)
    assert "Sum of successful response times: 10.000ms" in text
    assert "Average successful response time: 2.500ms" in text
    assert "Successful tests: 4" in text
    assert "Server was able to successfully handle 4 requests in 2.000s (2.000000 clients/sec)" in text
    assert "Errors" not in text


def test_failed_run_report_lists_errors() -> None:
    result = TestResult(
        successful=0,
        failed=5,
        errors={"EOF": 3, "connection refused": 2},
        total_time_ms=10.0,
    )
    text = format_report(result)
    assert "Average successful response time: n/a" in text
    assert "p50=n/a" in text
    assert "Run completed with 5 failed of 5 requests" in text
    assert text.index("\tEOF -> 3") < text.index("\tconnection refused -> 2")


def test_abort_is_distinct_from_completion() -> None:
    text = format_abort(DialError("dial tcp h:1: connection refused"))
    assert text.startswith("Run aborted")
    assert "connection refused" in text


def test_format_duration() -> None:
    assert format_duration(None) == "n/a"
    assert format_duration(0.5) == "0.500ms"
    assert format_duration(1500.0) == "1.500s"


def test_report_shows_fastest_and_slowest() -> None:
    result = TestResult(successful=3, failed=0, latencies_ms=(5.0, 1.0, 9.0), total_time_ms=20.0)
    text = format_report(result)
    assert "Fastest: 1.000ms, slowest: 9.000ms" in text
    empty = format_report(TestResult(successful=0, failed=1, errors={"EOF": 1}))
    assert "Fastest: n/a, slowest: n/a" in empty
