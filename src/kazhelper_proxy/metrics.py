from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

server_requests_total = Counter(
    "kazhelper_server_requests_total",
    "Total HTTP requests handled by server",
    labelnames=["path", "status"],
)

server_request_latency_seconds = Histogram(
    "kazhelper_server_request_latency_seconds",
    "HTTP request latency (seconds)",
    buckets=[0.05, 0.1, 0.3, 0.5, 1, 2, 5, 10, 15, 30],
    labelnames=["path"],
)

server_errors_total = Counter(
    "kazhelper_server_errors_total",
    "Total errors returned by server",
    labelnames=["type"],
)

provider_attempts_total = Counter(
    "kazhelper_provider_attempts_total",
    "Upstream provider attempts by outcome",
    labelnames=["provider", "outcome"],
)

provider_latency_seconds = Histogram(
    "kazhelper_provider_latency_seconds",
    "Upstream provider latency for attempts that reached the network",
    buckets=[0.1, 0.3, 0.5, 1, 2, 4, 6.5, 8.5, 15],
    labelnames=["provider"],
)

fallback_total = Counter(
    "kazhelper_fallback_total",
    "Requests that fell through to the secondary provider",
    labelnames=["from_provider"],
)


def maybe_start_metrics(*, enable: bool, bind: str, port: int) -> None:
    if not enable:
        return
    start_http_server(port, addr=bind)
