# tests/unit/test_unit_main.py — v2
"""Tests for main.py CLI."""

from __future__ import annotations

import json
import logging

import pytest

from nexora_ai.config.tasks import TaskKind
from nexora_ai.main import main
from nexora_ai.tracking.models import UsageRecord
from nexora_ai.version import __version__


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger("nexora_ai")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()


def _write_log(path):
    records = [
        UsageRecord(
            caller_id="u1", task_kind=TaskKind.CHAT, outcome="inference",
            tokens_used=300, estimated_cost=0.003, latency_ms=700,
            model_used="gpt-4o-mini", success=True,
        ),
        UsageRecord(
            caller_id="u1", task_kind=TaskKind.CHAT, outcome="cache_hit",
            latency_ms=5, success=True,
        ),
    ]
    path.write_text("".join(r.model_dump_json() + "\n" for r in records), encoding="utf-8")


class TestMain:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_tasks(self, capsys):
        assert main(["tasks"]) == 0
        out = capsys.readouterr().out
        for kind in TaskKind:
            assert kind.value in out

    def test_usage_summary(self, tmp_path, capsys):
        log = tmp_path / "usage.jsonl"
        _write_log(log)
        assert main(["usage", str(log)]) == 0
        out = capsys.readouterr().out
        assert "Requests     : 2" in out
        assert "Cache hits   : 1" in out

    def test_usage_json_and_csv(self, tmp_path, capsys):
        log = tmp_path / "usage.jsonl"
        _write_log(log)
        csv_out = tmp_path / "usage.csv"
        assert main(["usage", str(log), "--json", "--csv", str(csv_out)]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["requests"] == 2
        assert report["by_task_kind"]["chat"]["cache_hits"] == 1
        assert csv_out.exists()

    def test_usage_missing_file(self, tmp_path):
        assert main(["usage", str(tmp_path / "nope.jsonl")]) == 1

    def test_ask_invalid_context(self, capsys):
        assert main(["ask", "--task", "chat", "--prompt", "hi", "--context", "[1"]) == 2

    def test_ask_context_not_object(self):
        assert main(["ask", "--task", "chat", "--prompt", "hi", "--context", "[1]"]) == 2

    def test_ask_rejected_without_credential(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CACHE_BACKEND", "memory")
        monkeypatch.setenv("USAGE_BACKEND", "memory")
        monkeypatch.setenv("PROFILE_BACKEND", "memory")
        assert main(["ask", "--task", "chat", "--prompt", "hi"]) == 1
        resp = json.loads(capsys.readouterr().out)
        assert resp["success"] is False
        assert resp["error"] == "Missing credential"

    def test_ask_applies_log_settings(self, tmp_path, monkeypatch, capsys):
        log_file = tmp_path / "logs" / "nexora.log"
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CACHE_BACKEND", "memory")
        monkeypatch.setenv("USAGE_BACKEND", "memory")
        monkeypatch.setenv("PROFILE_BACKEND", "memory")
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        monkeypatch.setenv("LOG_FORMAT", "json")
        monkeypatch.setenv("LOG_FILE", str(log_file))

        assert main(["ask", "--task", "chat", "--prompt", "hi"]) == 1

        root = logging.getLogger("nexora_ai")
        assert root.level == logging.INFO
        for handler in root.handlers:
            handler.flush()
        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert any(e["message"].startswith("Request rejected") for e in entries)
