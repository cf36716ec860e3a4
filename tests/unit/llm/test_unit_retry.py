# tests/unit/llm/test_unit_retry.py — v1
"""Tests for llm/retry.py."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from nexora_ai.llm.retry import (
    LLMRetryExhausted,
    RetryConfig,
    _compute_delay,
    classify_error,
    with_retry,
)

FAST = {
    "rate_limit": RetryConfig(max_retries=2, base_delay_s=0.001, jitter=False),
    "server_error": RetryConfig(max_retries=1, base_delay_s=0.001, jitter=False),
}


class TestClassifyError:
    @pytest.mark.parametrize("message, expected", [
        ("Error 429: too many requests", "rate_limit"),
        ("rate limited", "rate_limit"),
        ("503 Service Unavailable", "server_error"),
        ("internal server error", "server_error"),
        ("could not decode JSON", "parse_error"),
        ("maximum context token limit exceeded", "token_limit"),
        ("something odd", "unknown"),
    ])
    def test_by_message(self, message, expected):
        assert classify_error(RuntimeError(message)) == expected

    def test_timeout_by_name(self):
        class APITimeoutError(Exception):
            pass

        assert classify_error(APITimeoutError("request")) == "timeout"


class TestComputeDelay:
    def test_exponential(self):
        config = RetryConfig(max_retries=3, base_delay_s=1.0, jitter=False)
        assert [_compute_delay(config, i) for i in range(3)] == [1.0, 2.0, 4.0]

    def test_jitter_bounds(self):
        config = RetryConfig(max_retries=3, base_delay_s=1.0)
        for _ in range(20):
            assert 0.5 <= _compute_delay(config, 0) <= 1.5


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        fn = AsyncMock(return_value="ok")
        assert await with_retry(fn, 1, label="t", retry_configs=FAST, x=2) == "ok"
        fn.assert_awaited_once_with(1, x=2)

    @pytest.mark.asyncio
    async def test_retries_transient(self):
        fn = AsyncMock(side_effect=[RuntimeError("429"), RuntimeError("429"), "ok"])
        assert await with_retry(fn, retry_configs=FAST) == "ok"
        assert fn.await_count == 3

    @pytest.mark.asyncio
    async def test_exhausted(self):
        fn = AsyncMock(side_effect=RuntimeError("500 server"))
        with pytest.raises(LLMRetryExhausted) as exc_info:
            await with_retry(fn, label="chat", retry_configs=FAST)
        assert exc_info.value.error_type == "server_error"
        assert exc_info.value.attempts == 2
        assert exc_info.value.label == "chat"

    @pytest.mark.asyncio
    async def test_non_retryable_fails_fast(self):
        fn = AsyncMock(side_effect=ValueError("bad input"))
        with pytest.raises(LLMRetryExhausted) as exc_info:
            await with_retry(fn, retry_configs=FAST)
        assert exc_info.value.attempts == 1
        assert exc_info.value.error_type == "unknown"

    @pytest.mark.asyncio
    async def test_empty_config_disables_retries(self):
        fn = AsyncMock(side_effect=RuntimeError("429"))
        with pytest.raises(LLMRetryExhausted):
            await with_retry(fn, retry_configs={})
        assert fn.await_count == 1
