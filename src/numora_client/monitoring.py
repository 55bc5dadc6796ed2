"""
Request monitoring for Numora client.

Tracks per-endpoint latency and failures so a caller can tell which venue
feed is degraded (for example Orderly positions failing while Hyperliquid
keeps refreshing).
"""

import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, List


@dataclass(frozen=True)
class RequestMetrics:
    """Metrics for a single backend call."""
    endpoint: str
    method: str
    status_code: int
    duration_ms: float
    timestamp: float

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


@dataclass
class Statistics:
    """Totals across all backend calls."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_duration_ms: float = 0.0
    avg_duration_ms: float = 0.0
    max_duration_ms: float = 0.0

    def update(self, metrics: RequestMetrics) -> None:
        self.total_requests += 1
        self.total_duration_ms += metrics.duration_ms
        self.avg_duration_ms = self.total_duration_ms / self.total_requests
        self.max_duration_ms = max(self.max_duration_ms, metrics.duration_ms)

        if metrics.ok:
            self.successful_requests += 1
        else:
            self.failed_requests += 1


@dataclass(frozen=True)
class EndpointStats:
    """Health of one endpoint over its retained history."""
    endpoint: str
    count: int
    avg_duration_ms: float
    success_rate: float
    last_status: int
    consecutive_failures: int

    @property
    def degraded(self) -> bool:
        return self.consecutive_failures > 0


class PerformanceMonitor:
    """Monitors backend call performance per endpoint."""

    def __init__(self, max_history: int = 200):
        self._statistics = Statistics()
        self._history: Deque[RequestMetrics] = deque(maxlen=max_history)
        self._by_endpoint: Dict[str, Deque[RequestMetrics]] = defaultdict(lambda: deque(maxlen=max_history))

    def record_request(
        self,
        endpoint: str,
        method: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Record metrics for a completed call."""
        metrics = RequestMetrics(endpoint, method, status_code, duration_ms, time.time())
        self._statistics.update(metrics)
        self._history.append(metrics)
        self._by_endpoint[endpoint].append(metrics)

    @property
    def statistics(self) -> Statistics:
        return self._statistics

    def get_endpoint_stats(self, endpoint: str) -> EndpointStats:
        requests = list(self._by_endpoint.get(endpoint, ()))
        if not requests:
            return EndpointStats(endpoint, 0, 0.0, 0.0, 0, 0)

        consecutive_failures = 0
        for metrics in reversed(requests):
            if metrics.ok:
                break
            consecutive_failures += 1

        return EndpointStats(
            endpoint=endpoint,
            count=len(requests),
            avg_duration_ms=sum(r.duration_ms for r in requests) / len(requests),
            success_rate=sum(1 for r in requests if r.ok) / len(requests),
            last_status=requests[-1].status_code,
            consecutive_failures=consecutive_failures,
        )

    def degraded_endpoints(self) -> List[str]:
        """Endpoints whose most recent call failed."""
        return [
            endpoint for endpoint, requests in self._by_endpoint.items()
            if requests and not requests[-1].ok
        ]

    def get_error_rate(self, window_seconds: float = 60.0) -> float:
        """Share of failed calls in the recent time window."""
        cutoff = time.time() - window_seconds
        recent = [r for r in self._history if r.timestamp >= cutoff]
        if not recent:
            return 0.0
        return sum(1 for r in recent if not r.ok) / len(recent)
