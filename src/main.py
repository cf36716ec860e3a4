# src/main.py — v2
"""CLI entry point: ask, usage, tasks commands.

Usage:
    nexora-ai ask --task KIND --prompt TEXT [--context JSON] [--token TOKEN]
    nexora-ai usage <usage_log.jsonl> [--csv OUT] [--json]
    nexora-ai tasks
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path

from nexora_ai.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="nexora-ai",
        description=f"nexora-ai v{__version__} - AI request orchestration",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- ask ---
    p_ask = subparsers.add_parser("ask", help="Send one AI request")
    p_ask.add_argument("--task", required=True, help="Task kind (see 'tasks')")
    p_ask.add_argument("--prompt", required=True, help="Prompt text")
    p_ask.add_argument(
        "--context", default=None,
        help="Task context as a JSON object",
    )
    p_ask.add_argument(
        "--cache-key", default=None,
        help="Explicit cache key (replaces prompt/context identity)",
    )
    p_ask.add_argument(
        "--token", default=None,
        help="Caller credential (checked against AUTH_TOKENS)",
    )
    p_ask.add_argument(
        "--caller", default=None,
        help="Run as this caller id without a configured token",
    )
    p_ask.set_defaults(func=_cmd_ask)

    # --- usage ---
    p_usage = subparsers.add_parser("usage", help="Summarize a usage log")
    p_usage.add_argument("path", type=Path, help="JSON Lines usage log")
    p_usage.add_argument(
        "--csv", type=Path, default=None, dest="csv_out",
        help="Also export raw records to this CSV file",
    )
    p_usage.add_argument(
        "--json", action="store_true", dest="as_json",
        help="Print the report as JSON",
    )
    p_usage.set_defaults(func=_cmd_usage)

    # --- tasks ---
    p_tasks = subparsers.add_parser("tasks", help="List task profiles")
    p_tasks.set_defaults(func=_cmd_tasks)

    return parser


async def _cmd_ask(args: argparse.Namespace) -> int:
    """Execute one request through a freshly built orchestrator."""
    from nexora_ai.api.facade import build_orchestrator
    from nexora_ai.api.models import AIRequestBody
    from nexora_ai.auth.identity import StaticTokenIdentityProvider
    from nexora_ai.config.settings import load_settings

    context = None
    if args.context:
        try:
            context = json.loads(args.context)
        except json.JSONDecodeError as e:
            logger.error("--context is not valid JSON: %s", e)
            return 2
        if not isinstance(context, dict):
            logger.error("--context must be a JSON object")
            return 2

    settings = load_settings()
    _setup_logging(
        args.verbose,
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    token = args.token
    identity_provider = None
    if args.caller and token is None:
        token = uuid.uuid4().hex
        identity_provider = StaticTokenIdentityProvider({token: args.caller})

    orchestrator = build_orchestrator(settings, identity_provider=identity_provider)
    body = AIRequestBody(
        task_kind=args.task,
        prompt=args.prompt,
        context=context,
        explicit_cache_key=args.cache_key,
    )
    response = await orchestrator.handle(body, token)
    print(response.model_dump_json(indent=2))
    return 0 if response.success else 1


async def _cmd_usage(args: argparse.Namespace) -> int:
    """Summarize a JSON Lines usage log."""
    from nexora_ai.tracking.exporter import export_usage_csv, format_usage_summary
    from nexora_ai.tracking.jsonl_store import load_records
    from nexora_ai.tracking.stats_aggregator import summarize_usage

    path: Path = args.path
    if not path.is_file():
        logger.error("Usage log not found: %s", path)
        return 1

    records = load_records(path)
    report = summarize_usage(records)
    if args.as_json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_usage_summary(report))

    if args.csv_out is not None:
        export_usage_csv(records, args.csv_out)
    return 0


async def _cmd_tasks(args: argparse.Namespace) -> int:
    """Print the task profile table."""
    from nexora_ai.config.tasks import TaskRegistry

    registry = TaskRegistry()
    print(f"{'task':16s} {'max_tokens':>10s} {'temp':>5s} {'deadline':>9s}  fallback")
    for kind in registry.kinds():
        p = registry.resolve(kind)
        print(
            f"{kind.value:16s} {p.max_output_tokens:10d} {p.temperature:5.1f} "
            f"{p.deadline_ms:7d}ms  {'yes' if p.fallback_text else 'no'}"
        )
    return 0


def _setup_logging(
    verbose: bool,
    level: str = "WARNING",
    log_format: str = "text",
    log_file: Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """Configure logging for CLI usage; -v always forces DEBUG."""
    from nexora_ai.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else level,
        log_format=log_format,
        log_file=log_file,
        rotation=rotation,
        retention=retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
