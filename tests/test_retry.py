"""Tests for the retry combinator."""

import asyncio

import httpx
import pytest

from food_diary.services.retry import status_code_from_exception, with_retry
from tests.conftest import RecordingSleep


def test_with_retry_returns_first_success() -> None:
    sleep = RecordingSleep()
    calls = 0

    async def attempt() -> str:
        nonlocal calls
        calls += 1
        return "ok"

    result = asyncio.run(with_retry(attempt, sleep=sleep))

    assert result == "ok"
    assert calls == 1
    assert sleep.delays == []


def test_with_retry_backs_off_exponentially_then_succeeds() -> None:
    sleep = RecordingSleep()
    calls = 0

    async def attempt() -> int:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise RuntimeError("flaky")
        return calls

    result = asyncio.run(with_retry(attempt, sleep=sleep))

    assert result == 3
    assert sleep.delays == [1.0, 2.0]


def test_with_retry_gives_up_after_max_attempts() -> None:
    sleep = RecordingSleep()
    calls = 0

    async def attempt() -> None:
        nonlocal calls
        calls += 1
        raise ValueError(f"failure {calls}")

    with pytest.raises(ValueError, match="failure 5"):
        asyncio.run(with_retry(attempt, sleep=sleep))

    assert calls == 5
    assert sleep.delays == [1.0, 2.0, 4.0, 8.0]


def test_with_retry_custom_schedule() -> None:
    sleep = RecordingSleep()

    async def attempt() -> None:
        raise RuntimeError("down")

    with pytest.raises(RuntimeError):
        asyncio.run(
            with_retry(
                attempt,
                max_attempts=3,
                initial_delay_seconds=0.5,
                multiplier=3.0,
                sleep=sleep,
            )
        )

    assert sleep.delays == [0.5, 1.5]


def test_with_retry_rejects_zero_attempts() -> None:
    async def attempt() -> None:
        return None

    with pytest.raises(ValueError):
        asyncio.run(with_retry(attempt, max_attempts=0))


def test_status_code_from_exception() -> None:
    request = httpx.Request("POST", "https://example.test")
    response = httpx.Response(503, request=request)
    error = httpx.HTTPStatusError("boom", request=request, response=response)

    assert status_code_from_exception(error) == "503"
    assert status_code_from_exception(RuntimeError("x")) == "n/a"
