from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from .config import ClientConfig
from .exceptions import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for transient :class:`ApiError` failures.

    ``max_retries`` counts additional attempts, so the default of 2 means at
    most three calls. The delay after attempt ``n`` (0-based) is
    ``base_delay_seconds * 2**n``. There is no jitter.
    """

    max_retries: int = 2
    base_delay_seconds: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay_seconds < 0:
            raise ValueError(f"base_delay_seconds must be >= 0, got {self.base_delay_seconds}")

    @classmethod
    def from_config(cls, config: ClientConfig, sleep: Callable[[float], None] | None = None) -> RetryPolicy:
        return cls(
            max_retries=config.retries,
            base_delay_seconds=config.retry_backoff_seconds,
            sleep=sleep or time.sleep,
        )

    def delay_for(self, attempt: int) -> float:
        return self.base_delay_seconds * (2**attempt)

    def call(self, fn: Callable[[], T], *, operation: str = "request") -> T:
        attempt = 0
        while True:
            try:
                return fn()
            except ApiError as exc:
                if not exc.retryable:
                    raise
                if attempt >= self.max_retries:
                    logger.error(
                        "api_retry_exhausted",
                        extra={"operation": operation, "attempts": attempt + 1, "error_kind": exc.kind.value},
                    )
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "api_retry_scheduled",
                    extra={
                        "operation": operation,
                        "attempt": attempt + 1,
                        "error_kind": exc.kind.value,
                        "delay_seconds": delay,
                    },
                )
                self.sleep(delay)
                attempt += 1
