import json
from datetime import datetime

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.currency import CacheError
from domain.models.currency import ExchangeRate


class RedisRateStore:
    """Keeps the latest rate per directional pair under ``rate:{BASE}:{QUOTE}``.

    Keys carry no expiry; staleness is judged by the caller from ``observed_at``.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    def _make_rate_key(self, base_currency: str, quote_currency: str) -> str:
        return f"rate:{base_currency}:{quote_currency}"

    async def find_latest(self, base_currency: str, quote_currency: str) -> ExchangeRate | None:
        key = self._make_rate_key(base_currency, quote_currency)
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            raise CacheError(f"Redis read failed for {key}: {e}") from e

        if not data:
            return None

        try:
            rate_dict = json.loads(data)
            return ExchangeRate(
                base_currency=rate_dict["base_currency"],
                quote_currency=rate_dict["quote_currency"],
                rate=float(rate_dict["rate"]),
                observed_at=datetime.fromisoformat(rate_dict["observed_at"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise CacheError(f"Invalid json data under {key}: {e}") from e

    async def insert(self, entry: ExchangeRate) -> None:
        try:
            current = await self.find_latest(entry.base_currency, entry.quote_currency)
        except CacheError:
            # unreadable entries get overwritten
            current = None
        if current is not None and current.observed_at > entry.observed_at:
            return

        key = self._make_rate_key(entry.base_currency, entry.quote_currency)
        rate_dict = {
            "base_currency": entry.base_currency,
            "quote_currency": entry.quote_currency,
            "rate": entry.rate,
            "observed_at": entry.observed_at.isoformat(),
        }
        try:
            await self.redis.set(key, json.dumps(rate_dict))
        except RedisError as e:
            raise CacheError(f"Redis write failed for {key}: {e}") from e
