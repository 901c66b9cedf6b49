"""Tests for the provider ladder: ordering, skips, failures, timeouts and fallback."""

import asyncio
import logging
import time

import pytest

from contracts import GenerationMethod
from providers import AttemptOutcome, LadderWork, ProviderLadder, ResponseParseError


def _work(parse=str.strip):
    return LadderWork(label="test", system_prompt="sys", user_message="user", parse=parse)


def _strict_parse(text: str) -> str:
    if not text.startswith("OK"):
        raise ResponseParseError("not ok")
    return text


class TestLadderOrdering:
    """Providers are tried strictly in order."""

    async def test_first_available_provider_wins(self, fake_provider):
        first = fake_provider("first", replies="one")
        second = fake_provider("second", replies="two")
        ladder = ProviderLadder([first, second])

        result = await ladder.execute(_work(), lambda: "fallback")

        assert result.value == "one"
        assert result.provider == "first"
        assert result.method == GenerationMethod.REASONING_SERVICE_OUTPUT
        assert second.calls == []

    async def test_unavailable_provider_is_skipped(self, fake_provider):
        missing = fake_provider("missing", replies="never", available=False)
        present = fake_provider("present", replies="two")
        ladder = ProviderLadder([missing, present])

        result = await ladder.execute(_work(), lambda: "fallback")

        assert result.value == "two"
        assert missing.calls == []
        assert result.attempts[0].outcome == AttemptOutcome.SKIPPED
        assert result.attempts[1].outcome == AttemptOutcome.SUCCEEDED

    async def test_failing_provider_advances_ladder(self, fake_provider):
        broken = fake_provider("broken", error=RuntimeError("boom"))
        working = fake_provider("working", replies="OK fine")
        ladder = ProviderLadder([broken, working])

        result = await ladder.execute(_work(), lambda: "fallback")

        assert result.provider == "working"
        assert result.attempts[0].outcome == AttemptOutcome.FAILED
        assert "boom" in result.attempts[0].detail

    async def test_no_retries_within_provider(self, fake_provider):
        broken = fake_provider("broken", error=RuntimeError("boom"))
        ladder = ProviderLadder([broken])

        await ladder.execute(_work(), lambda: "fallback")

        assert len(broken.calls) == 1


class TestLadderFailures:
    """Malformed output, timeouts and exhaustion."""

    async def test_parse_failure_counts_as_provider_failure(self, fake_provider):
        garbled = fake_provider("garbled", replies="nonsense")
        good = fake_provider("good", replies="OK parsed")
        ladder = ProviderLadder([garbled, good])

        result = await ladder.execute(_work(_strict_parse), lambda: "fallback")

        assert result.value == "OK parsed"
        assert result.attempts[0].outcome == AttemptOutcome.FAILED
        assert "ResponseParseError" in result.attempts[0].detail

    async def test_timeout_counts_as_one_failure(self, fake_provider):
        slow = fake_provider("slow", replies="late", delay=0.5)
        fast = fake_provider("fast", replies="quick")
        ladder = ProviderLadder([slow, fast], timeout_seconds=0.05)

        result = await ladder.execute(_work(), lambda: "fallback")

        assert result.value == "quick"
        assert "timed out" in result.attempts[0].detail

    def test_abandoned_call_does_not_delay_shutdown(self, fake_provider):
        slow = fake_provider("slow", replies="late", delay=2.0)
        ladder = ProviderLadder([slow], timeout_seconds=0.1)

        started = time.monotonic()
        result = asyncio.run(ladder.execute(_work(), lambda: "fallback"))
        elapsed = time.monotonic() - started

        assert result.value == "fallback"
        assert len(slow.calls) == 1
        assert elapsed < 1.5

    async def test_all_failures_use_fallback(self, fake_provider, caplog):
        ladder = ProviderLadder([
            fake_provider("a", error=RuntimeError("down")),
            fake_provider("b", available=False),
        ])

        with caplog.at_level(logging.INFO, logger="providers.ladder"):
            result = await ladder.execute(_work(), lambda: "fallback")

        assert result.value == "fallback"
        assert result.method == GenerationMethod.DETERMINISTIC_FALLBACK
        assert result.provider is None
        assert result.used_fallback
        levels = {record.levelname for record in caplog.records}
        assert {"INFO", "WARNING"} <= levels

    async def test_empty_ladder_uses_fallback(self, empty_ladder):
        result = await empty_ladder.execute(_work(), lambda: 42)

        assert result.value == 42
        assert result.attempts == ()
        assert not empty_ladder.has_available_provider()

    async def test_fallback_is_not_called_on_success(self, fake_provider):
        calls = []
        ladder = ProviderLadder([fake_provider("ok", replies="fine")])

        await ladder.execute(_work(), lambda: calls.append(1))

        assert calls == []
