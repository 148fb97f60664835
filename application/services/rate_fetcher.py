import asyncio
import logging
from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from domain.exceptions.currency import ProviderError, RetriesExhaustedError
from domain.interfaces.currency import ExchangeRateProvider

logger = logging.getLogger(__name__)


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderError) and exc.retryable


class RateFetcher:
    """Fetches a single rate from the provider, retrying transient failures.

    The wait before retry ``n`` (counting from 0) is
    ``min(base_delay * 2**n, max_delay)``; without ``max_delay`` it is uncapped.
    Non-retryable provider errors propagate after the first attempt, and
    cancelling the calling task stops the loop during a request or a backoff sleep.
    """

    def __init__(
        self,
        provider: ExchangeRateProvider,
        max_attempts: int = 5,
        base_delay: float = 0.5,
        max_delay: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.provider = provider
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._sleep = sleep

    def _wait(self) -> wait_exponential:
        if self.max_delay is None:
            return wait_exponential(multiplier=self.base_delay, exp_base=2)
        return wait_exponential(multiplier=self.base_delay, exp_base=2, max=self.max_delay)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait(),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
        )

    async def fetch_rate(self, base_currency: str, quote_currency: str) -> float:
        try:
            rate = await self._retrying()(self.provider.fetch_rate, base_currency, quote_currency)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(
                f"Fetching {base_currency}/{quote_currency} from {self.provider.name} "
                f"failed after {self.max_attempts} attempts: {last_error}"
            )
            raise RetriesExhaustedError(self.max_attempts, last_error) from last_error

        logger.info(f"Fetched {base_currency}/{quote_currency} = {rate} from {self.provider.name}")
        return rate
