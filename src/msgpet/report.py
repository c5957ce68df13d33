from __future__ import annotations

from msgpet.errors import DialError
from msgpet.metrics import TestResult

PERCENTILES = (50, 95, 99)


def format_duration(ms: float | None) -> str:
    if ms is None:
        return "n/a"
    if ms >= 1000.0:
        return f"{ms / 1000.0:.3f}s"
    return f"{ms:.3f}ms"


def format_report(result: TestResult) -> str:
    lines = [
        f"Sum of successful response times: {format_duration(result.latency_sum_ms)}",
        f"Average successful response time: {format_duration(result.avg_latency_ms)}",
    ]
    percentiles = ", ".join(
        f"p{q}={format_duration(result.percentile(q))}" for q in PERCENTILES
    )
    lines.append(f"Response time percentiles: {percentiles}")
    lines.append(
        f"Fastest: {format_duration(result.min_latency_ms)}, slowest: {format_duration(result.max_latency_ms)}"
    )
    lines.append(f"Successful tests: {result.successful}")
    lines.append(f"Failed tests: {result.failed}")
    lines.append("")
    if not result.completed_cleanly:
        lines.append(f"Run completed with {result.failed} failed of {result.requests} requests")
        lines.append("Errors (reason -> frequency):")
        for reason, count in sorted(result.errors.items(), key=lambda item: (-item[1], item[0])):
            lines.append(f"\t{reason} -> {count}")
    else:
        rate = result.throughput_rps
        rate_text = f"{rate:f} clients/sec" if rate is not None else "n/a clients/sec"
        lines.append(
            f"Server was able to successfully handle {result.requests} requests "
            f"in {format_duration(result.total_time_ms)} ({rate_text})"
        )
    return "\n".join(lines)


def format_abort(error: DialError) -> str:
    return f"Run aborted before completion: {error.description}"
