# src/tracking/stats_aggregator.py — v2
"""Usage statistics aggregation over persisted UsageRecords."""

from __future__ import annotations

from collections.abc import Iterable

from nexora_ai.tracking.models import TaskUsageStats, UsageRecord, UsageReport


def summarize_usage(records: Iterable[UsageRecord]) -> UsageReport:
    """Aggregate usage records into totals, per task kind and per model.

    Averages are running means over all records in each bucket.
    """
    report = UsageReport()
    by_kind: dict[str, TaskUsageStats] = {}
    by_model: dict[str, int] = {}

    for rec in records:
        kind = rec.task_kind.value
        bucket = by_kind.setdefault(kind, TaskUsageStats())
        _accumulate(report, rec)
        _accumulate(bucket, rec)
        if rec.model_used and rec.outcome == "inference":
            by_model[rec.model_used] = by_model.get(rec.model_used, 0) + 1

    report.by_task_kind = dict(sorted(by_kind.items()))
    report.by_model = by_model
    return report


def _accumulate(stats: TaskUsageStats, rec: UsageRecord) -> None:
    n = stats.requests
    stats.avg_latency_ms = (stats.avg_latency_ms * n + rec.latency_ms) / (n + 1)
    stats.requests = n + 1
    if rec.success:
        stats.successes += 1
    else:
        stats.failures += 1
    if rec.outcome == "cache_hit":
        stats.cache_hits += 1
    elif rec.outcome == "dedup_join":
        stats.dedup_joins += 1
    elif rec.outcome == "fallback":
        stats.fallbacks += 1
    stats.total_tokens += rec.tokens_used
    stats.total_cost = round(stats.total_cost + rec.estimated_cost, 6)
