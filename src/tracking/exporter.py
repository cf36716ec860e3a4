# src/tracking/exporter.py — v2
"""Usage data export to CSV and summary text."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from nexora_ai.tracking.models import UsageRecord, UsageReport

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "record_id", "created_at", "caller_id", "task_kind", "outcome",
    "tokens_used", "input_tokens", "output_tokens", "estimated_cost",
    "latency_ms", "model_used", "fingerprint", "success", "error_message",
]


def export_usage_csv(records: list[UsageRecord], path: Path) -> None:
    """Export raw usage records as CSV for spreadsheet/BI analysis.

    Args:
        records: Usage records.
        path: Output file path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for record in records:
            row = record.model_dump(mode="json")
            writer.writerow({k: row[k] for k in CSV_FIELDS})
    logger.info("Exported %d usage records to %s", len(records), path)


def format_usage_summary(report: UsageReport) -> str:
    """Generate a human-readable summary of a usage report."""
    lines: list[str] = [
        "=== AI Usage Summary ===",
        f"Requests     : {report.requests} "
        f"(ok: {report.successes}, failed: {report.failures})",
        f"Cache hits   : {report.cache_hits}",
        f"Dedup joins  : {report.dedup_joins}",
        f"Fallbacks    : {report.fallbacks}",
        f"Tokens       : {report.total_tokens:,}",
        f"Est. Cost    : ${report.total_cost:.4f}",
        f"Avg latency  : {report.avg_latency_ms:.0f}ms",
    ]

    if report.by_task_kind:
        lines.append("\n--- By Task Kind ---")
        for kind, ts in report.by_task_kind.items():
            lines.append(
                f"  {kind:16s} | {ts.requests:5d} req | "
                f"{ts.total_tokens:8,} tokens | "
                f"${ts.total_cost:.4f} | "
                f"avg {ts.avg_latency_ms:.0f}ms"
            )

    if report.by_model:
        lines.append("\n--- By Model ---")
        for model, calls in sorted(report.by_model.items()):
            lines.append(f"  {model:35s} | {calls:5d} calls")

    return "\n".join(lines)
