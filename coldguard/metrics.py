"""
Metrics and observability for the cold email guard.

Counts permission decisions, usage records, draft sources and compose
URLs, and emits one structured log line per event.
"""

import json
import logging
import statistics
from collections import defaultdict, deque
from dataclasses import dataclass, asdict
from datetime import datetime, UTC
from pathlib import Path
from typing import Optional, Any


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class MetricEvent:
    """A single metric event."""
    timestamp: str
    event_type: str  # permission, usage, draft, compose
    user_id: Optional[str]
    data: dict[str, Any]


class MetricsCollector:
    """
    Collects counters and a bounded event history.

    Prompts and email bodies are never recorded, only their outcomes.
    """

    def __init__(
        self,
        metrics_file: Optional[Path] = None,
        enable_logging: bool = False,
        max_events: int = 1000,
    ):
        """
        Initialize metrics collector.

        Args:
            metrics_file: Optional file to append events to (JSONL format)
            enable_logging: Attach a stream handler to the metrics logger
            max_events: How many recent events and latency samples to keep in memory
        """
        self.metrics_file = metrics_file
        self.enable_logging = enable_logging

        self.logger = logging.getLogger("coldguard.metrics")
        if enable_logging and not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

        self._events: deque[MetricEvent] = deque(maxlen=max_events)
        self._counters: dict[str, int] = defaultdict(int)
        self._histograms: dict[str, deque[float]] = defaultdict(
            lambda: deque(maxlen=max_events)
        )

    def record_permission(
        self,
        user_id: str,
        allowed: bool,
        reason: Optional[str] = None,
        requested_credits: int = 0,
    ) -> None:
        """Record the outcome of a permission check."""
        self._record_event(
            "permission",
            user_id,
            {"allowed": allowed, "reason": reason, "requested_credits": requested_credits},
        )
        self._counters["permission_checks_total"] += 1
        if not allowed:
            self._counters["permission_denied_total"] += 1
            self._counters[f"permission_denied_{_slug(reason)}"] += 1

    def record_usage(self, user_id: str, credits_used: int) -> None:
        """Record a committed usage attempt."""
        self._record_event("usage", user_id, {"credits_used": credits_used})
        self._counters["usage_records_total"] += 1
        self._counters["credits_used_total"] += credits_used

    def record_draft(
        self,
        source: str,
        model: str,
        latency_ms: int,
        tokens_used: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        """Record a finished draft generation."""
        self._record_event(
            "draft",
            None,
            {
                "source": source,
                "model": model,
                "latency_ms": latency_ms,
                "tokens_used": tokens_used,
                "error": error,
            },
        )
        self._counters["drafts_total"] += 1
        self._counters[f"drafts_{source}"] += 1
        self._histograms["draft_latency_ms"].append(latency_ms)
        if tokens_used:
            self._counters["tokens_used_total"] += tokens_used

    def record_compose(self, provider: str, url_length: int) -> None:
        """Record a built compose URL."""
        self._record_event("compose", None, {"provider": provider, "url_length": url_length})
        self._counters[f"compose_urls_{provider}"] += 1

    def _record_event(
        self,
        event_type: str,
        user_id: Optional[str],
        data: dict,
    ) -> None:
        event = MetricEvent(
            timestamp=datetime.now(UTC).isoformat(),
            event_type=event_type,
            user_id=user_id,
            data=data,
        )
        self._events.append(event)

        if self.metrics_file:
            with open(self.metrics_file, "a") as f:
                f.write(json.dumps(asdict(event)) + "\n")

        self.logger.info(
            "%s: user_id=%s, data=%s", event_type.upper(), user_id, data
        )

    @property
    def counters(self) -> dict[str, int]:
        return dict(self._counters)

    @property
    def events(self) -> list[MetricEvent]:
        return list(self._events)

    def get_stats(self) -> dict:
        """
        Get aggregated statistics.

        Returns:
            Dictionary with counters and draft latency summary
        """
        latencies = self._histograms.get("draft_latency_ms", [])
        return {
            "counters": dict(self._counters),
            "draft_latency": {
                "avg_ms": statistics.mean(latencies) if latencies else 0,
                "p50_ms": statistics.median(latencies) if latencies else 0,
                "max_ms": max(latencies) if latencies else 0,
            },
            "total_events": len(self._events),
        }

    def reset(self) -> None:
        """Reset all metrics."""
        self._events.clear()
        self._counters.clear()
        self._histograms.clear()


def _slug(text: Optional[str]) -> str:
    if not text:
        return "unknown"
    return "_".join(text.lower().split())
