"""
Forecast retry policy.

The match-day session retries forecast fetches that fail with a retryable
PitchCoverError. The calculation engine itself never retries.

    delay(attempt) = min(base · 2^attempt, cap) + uniform(0, jitter)
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from pitchcover.exceptions import DataFetchFailure, PitchCoverError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Backoff:
    base_delay: float = 1.0
    max_delay: float = 16.0
    jitter: float = 0.5

    def delay(self, attempt: int) -> float:
        capped = min(self.base_delay * (2 ** attempt), self.max_delay)
        return capped + (random.uniform(0, self.jitter) if self.jitter else 0.0)


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 2,
    backoff: Optional[Backoff] = None,
    retry_on: tuple[type[Exception], ...] = (DataFetchFailure,),
    operation_name: str = "fetch_forecast",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await `fn` until it succeeds or `max_retries` extra attempts are spent.

    Only exceptions in `retry_on` are retried, and a PitchCoverError that
    declares itself non-retryable is raised at once.
    """
    backoff = backoff or Backoff()
    attempt = 0
    while True:
        try:
            return await fn()
        except retry_on as exc:
            if isinstance(exc, PitchCoverError) and not exc.retryable:
                raise
            if attempt >= max_retries:
                logger.error(
                    "retry_exhausted",
                    operation=operation_name,
                    attempts=attempt + 1,
                    error=str(exc),
                )
                raise
            wait = backoff.delay(attempt)
            attempt += 1
            logger.warning(
                "retrying",
                operation=operation_name,
                attempt=attempt,
                max_retries=max_retries,
                delay=round(wait, 2),
                error=str(exc),
            )
            await sleep(wait)
