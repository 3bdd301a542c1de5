import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.environment.config import Settings

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff policy for fallible async operations.

    The n-th retry waits ``base_delay * multiplier ** (n - 1)`` seconds. Once
    ``max_attempts`` calls have failed the last exception is re-raised.

    Attributes
    ----------
    max_attempts : int
        Total number of calls, first one included
    base_delay : float
        Delay in seconds before the first retry
    multiplier : float
        Growth factor of the delay between consecutive retries
    retry_on : tuple[type[BaseException], ...]
        Exception types that trigger a retry
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    retry_on: tuple[type[BaseException], ...] = (Exception,)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.multiplier < 1:
            raise ValueError("base_delay must be >= 0 and multiplier >= 1")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.rpc_retry_attempts,
            base_delay=settings.rpc_retry_base_delay,
            multiplier=settings.rpc_retry_multiplier,
        )

    def retrying(self, logger: logging.Logger | None = None) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(self.retry_on),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=self.multiplier),
            before_sleep=before_sleep_log(logger, logging.WARNING) if logger else None,
            reraise=True,
        )

    async def call(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        logger: logging.Logger | None = None,
        **kwargs: Any
    ) -> T:
        """
        Await ``operation(*args, **kwargs)`` under this policy.

        Parameters
        ----------
        operation : Callable[..., Awaitable[T]]
            Coroutine function to call
        logger : logging.Logger | None
            Logger receiving a warning before every retry

        Returns
        -------
        T
            Result of the first successful call
        """
        return await self.retrying(logger)(operation, *args, **kwargs)

    def wrap(self, operation: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        async def wrapped(*args: Any, **kwargs: Any) -> T:
            return await self.call(operation, *args, **kwargs)

        return wrapped
