from collections.abc import Callable
from datetime import datetime

from application.utils.time import utc_now
from domain.interfaces.currency import RateStore
from domain.models.currency import ExchangeRate


class RateCache:
	"""Latest-known rate per directional pair, backed by a durable ``RateStore``.

	A miss is ``None``. Store malfunctions surface as ``CacheError``.
	"""

	def __init__(self, store: RateStore, clock: Callable[[], datetime] = utc_now):
		self._store = store
		self.clock = clock

	async def lookup(self, base_currency: str, quote_currency: str) -> ExchangeRate | None:
		return await self._store.find_latest(base_currency, quote_currency)

	async def store(self, base_currency: str, quote_currency: str, rate: float) -> ExchangeRate:
		if rate <= 0:
			raise ValueError(f'Exchange rate must be positive, got {rate}')

		entry = ExchangeRate(
			base_currency=base_currency,
			quote_currency=quote_currency,
			rate=rate,
			observed_at=self.clock(),
		)
		await self._store.insert(entry)
		return entry
