"""Ordered provider fallback with a deterministic last rung.

Every reasoning call in the pipeline goes through ProviderLadder.execute():
providers are tried strictly in order, unconfigured ones are skipped, and a
call that raises, times out, or returns output the caller cannot parse
counts as one failure. When every provider is skipped or fails, the
caller-supplied fallback produces the result. There are no retries within
a provider.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, Sequence, Tuple, TypeVar

from contracts import GenerationMethod
from .base import LLMProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Provider calls run here rather than on the loop's default executor, so a call
# abandoned after a timeout does not hold up asyncio.run() at shutdown.
_CALL_EXECUTOR = ThreadPoolExecutor(thread_name_prefix="provider-call")


class AttemptOutcome(str, Enum):
    SKIPPED = "skipped"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class LadderAttempt:
    provider: str
    outcome: AttemptOutcome
    detail: str = ""


@dataclass(frozen=True)
class LadderWork(Generic[T]):
    """One unit of reasoning work: the prompts plus how to parse the reply.

    parse() must raise (ideally ResponseParseError) when the reply is unusable.
    """
    label: str
    system_prompt: str
    user_message: str
    parse: Callable[[str], T]
    max_tokens: int = 4096


@dataclass(frozen=True)
class LadderResult(Generic[T]):
    value: T
    method: GenerationMethod
    provider: Optional[str] = None
    attempts: Tuple[LadderAttempt, ...] = ()

    @property
    def used_fallback(self) -> bool:
        return self.method == GenerationMethod.DETERMINISTIC_FALLBACK


class ProviderLadder:
    """Tries reasoning providers in order, then falls back to deterministic rules."""

    def __init__(self, providers: Sequence[LLMProvider], timeout_seconds: float = 60.0):
        """Initialize the ladder.

        Args:
            providers: Providers in priority order.
            timeout_seconds: Per-call timeout; one expiry counts as one failure.
        """
        self._providers: Tuple[LLMProvider, ...] = tuple(providers)
        self.timeout_seconds = timeout_seconds

    @property
    def providers(self) -> Tuple[LLMProvider, ...]:
        return self._providers

    def has_available_provider(self) -> bool:
        return any(provider.is_available() for provider in self._providers)

    async def execute(self, work: LadderWork[T], fallback: Callable[[], T]) -> LadderResult[T]:
        """Run work against each provider until one succeeds.

        Args:
            work: Prompts and parser for this call.
            fallback: Zero-argument callable producing the deterministic result.

        Returns:
            LadderResult tagged reasoning-service-output with the provider name,
            or deterministic-fallback when no provider succeeded.
        """
        attempts = []

        for provider in self._providers:
            if not provider.is_available():
                logger.info("%s: provider %s not configured, skipping", work.label, provider.name)
                attempts.append(LadderAttempt(provider.name, AttemptOutcome.SKIPPED, "not configured"))
                continue

            try:
                call = functools.partial(
                    provider.complete,
                    system_prompt=work.system_prompt,
                    user_message=work.user_message,
                    max_tokens=work.max_tokens,
                )
                response = await asyncio.wait_for(
                    asyncio.get_running_loop().run_in_executor(_CALL_EXECUTOR, call),
                    timeout=self.timeout_seconds,
                )
                value = work.parse(response.content)
            except asyncio.TimeoutError:
                detail = f"timed out after {self.timeout_seconds}s"
                logger.warning("%s: provider %s %s", work.label, provider.name, detail)
                attempts.append(LadderAttempt(provider.name, AttemptOutcome.FAILED, detail))
                continue
            except Exception as e:
                detail = f"{type(e).__name__}: {e}"
                logger.warning("%s: provider %s failed (%s)", work.label, provider.name, detail)
                attempts.append(LadderAttempt(provider.name, AttemptOutcome.FAILED, detail))
                continue

            logger.info("%s: provider %s succeeded", work.label, provider.name)
            attempts.append(LadderAttempt(provider.name, AttemptOutcome.SUCCEEDED))
            return LadderResult(
                value=value,
                method=GenerationMethod.REASONING_SERVICE_OUTPUT,
                provider=provider.name,
                attempts=tuple(attempts),
            )

        logger.warning("%s: no reasoning provider succeeded, using deterministic fallback", work.label)
        return LadderResult(
            value=fallback(),
            method=GenerationMethod.DETERMINISTIC_FALLBACK,
            provider=None,
            attempts=tuple(attempts),
        )
