# nosec B101

import asyncio
import logging

import pytest

from application.services import RateFetcher
from domain.exceptions.currency import (
    ClientRequestError,
    DataError,
    InvalidRequestError,
    NetworkError,
    RetriesExhaustedError,
)


def sleep_delays(sleep) -> list[float]:
    return [c.args[0] for c in sleep.await_args_list]


@pytest.mark.asyncio
async def test_fetch_rate_success_first_attempt(fetcher, provider, sleep):
    provider.fetch_rate.return_value = 0.9

    rate = await fetcher.fetch_rate('USD', 'EUR')

    assert rate == 0.9
    provider.fetch_rate.assert_awaited_once_with('USD', 'EUR')
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_rate_recovers_after_transient_failures(fetcher, provider, sleep):
    provider.fetch_rate.side_effect = [
        NetworkError('Request failed: ConnectError'),
        NetworkError('HTTP 502', status_code=502),
        1.1,
    ]

    rate = await fetcher.fetch_rate('USD', 'EUR')

    assert rate == 1.1
    assert provider.fetch_rate.await_count == 3
    assert sleep_delays(sleep) == [0.5, 1.0]


@pytest.mark.asyncio
async def test_fetch_rate_exhausts_retries(fetcher, provider, sleep):
    provider.fetch_rate.side_effect = NetworkError('HTTP 503', status_code=503)

    with pytest.raises(RetriesExhaustedError) as exc_info:
        await fetcher.fetch_rate('USD', 'EUR')

    assert exc_info.value.attempts == 5
    assert isinstance(exc_info.value.last_error, NetworkError)
    assert exc_info.value.last_error.status_code == 503
    assert provider.fetch_rate.await_count == 5
    assert sleep_delays(sleep) == [0.5, 1.0, 2.0, 4.0]


@pytest.mark.asyncio
@pytest.mark.parametrize('attempts', [1, 3, 7])
async def test_attempt_count_matches_configuration(provider, sleep, attempts):
    fetcher = RateFetcher(provider, max_attempts=attempts, sleep=sleep)
    provider.fetch_rate.side_effect = NetworkError('timeout')

    with pytest.raises(RetriesExhaustedError):
        await fetcher.fetch_rate('USD', 'EUR')

    assert provider.fetch_rate.await_count == attempts
    assert sleep.await_count == attempts - 1


@pytest.mark.asyncio
async def test_backoff_is_capped_by_max_delay(provider, sleep):
    fetcher = RateFetcher(provider, max_attempts=5, base_delay=0.5, max_delay=1.5, sleep=sleep)
    provider.fetch_rate.side_effect = NetworkError('timeout')

    with pytest.raises(RetriesExhaustedError):
        await fetcher.fetch_rate('USD', 'EUR')

    assert sleep_delays(sleep) == [0.5, 1.0, 1.5, 1.5]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    'error',
    [
        DataError('Rate for EUR not found in CurrencyAPI response'),
        DataError('CurrencyAPI returned malformed JSON'),
        ClientRequestError('CurrencyAPI HTTP error 401', status_code=401),
        InvalidRequestError("Cannot build a request for currency code 'U$D'"),
    ],
)
async def test_non_retryable_errors_fail_immediately(fetcher, provider, sleep, error):
    provider.fetch_rate.side_effect = error

    with pytest.raises(type(error)) as exc_info:
        await fetcher.fetch_rate('USD', 'EUR')

    assert exc_info.value is error
    assert not isinstance(exc_info.value, RetriesExhaustedError)
    provider.fetch_rate.assert_awaited_once()
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_retries_are_logged(fetcher, provider, caplog):
    provider.fetch_rate.side_effect = [NetworkError('timeout'), 0.9]

    with caplog.at_level(logging.WARNING, logger='application.services.rate_fetcher'):
        await fetcher.fetch_rate('USD', 'EUR')

    assert 'Retrying' in caplog.text


@pytest.mark.asyncio
async def test_cancellation_during_backoff_stops_retrying(provider):
    provider.fetch_rate.side_effect = NetworkError('timeout')
    fetcher = RateFetcher(provider, max_attempts=5, base_delay=60)

    task = asyncio.create_task(fetcher.fetch_rate('USD', 'EUR'))
    while provider.fetch_rate.await_count == 0:
        await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    await asyncio.sleep(0)
    assert provider.fetch_rate.await_count == 1


def test_max_attempts_must_be_positive(provider):
    with pytest.raises(ValueError):
        RateFetcher(provider, max_attempts=0)
