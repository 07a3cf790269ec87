"""Fixed-interval retry used for every Vault call."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Tuple, Type, TypeVar

from loguru import logger

__all__ = ["RetryPolicy", "RetryResult", "retry"]

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry a failed attempt and how long to wait in between.

    ``max_retries`` counts retries, not attempts: a policy with
    ``max_retries=1`` performs at most two attempts.
    """

    max_retries: int = 0
    interval: float = 1.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be 0 or greater")
        if self.interval < 0:
            raise ValueError("interval must be 0 or greater")

    @classmethod
    def from_milliseconds(cls, max_retries: int, interval_ms: int) -> "RetryPolicy":
        return cls(max_retries=max_retries, interval=interval_ms / 1000)


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    value: T
    retries: int


async def retry(
    attempt_factory: Callable[[int], Awaitable[T]],
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RetryResult[T]:
    """Run an async operation until it succeeds or the policy is exhausted.

    - attempt_factory: callable taking the current attempt number (0 based)
      and returning an awaitable
    - policy: retry count and the fixed delay between attempts
    - retry_on: exception types to retry on, anything else propagates at once
    - sleep: awaited with the delay before each retry

    The last exception is re-raised unchanged once the retries are used up.
    """

    attempt = 0
    while True:
        try:
            value = await attempt_factory(attempt)
        except retry_on as exc:
            if attempt >= policy.max_retries:
                raise
            logger.warning(
                "Attempt {} of {} failed: {}. Retrying in {}s",
                attempt + 1,
                policy.max_retries + 1,
                exc,
                policy.interval,
            )
            attempt += 1
            await sleep(policy.interval)
        else:
            return RetryResult(value=value, retries=attempt)
