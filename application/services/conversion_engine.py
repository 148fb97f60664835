import logging
import math
from collections.abc import Callable
from datetime import datetime, timedelta

from application.services.rate_cache import RateCache
from application.services.rate_fetcher import RateFetcher
from application.utils.time import utc_now
from domain.exceptions.currency import (
	CacheError,
	InvalidAmount,
	InvalidCurrencyCode,
	NoCacheAvailable,
	ProviderError,
)
from domain.models.currency import ConversionResult, ExchangeRate

logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
	if not isinstance(code, str) or not code.strip():
		raise InvalidCurrencyCode(f'Currency code must be a non-empty string, got {code!r}')
	return code.strip().upper()


def validate_amount(amount: float) -> float:
	try:
		valid = amount >= 0 and math.isfinite(amount)
	except TypeError:
		valid = False
	if not valid:
		raise InvalidAmount(f'Amount must be a finite number >= 0, got {amount!r}')
	return float(amount)


class ConversionEngine:
	"""Resolves a rate for a pair and converts an amount with it.

	Each call runs the same procedure: a fresh cache entry is used as is;
	otherwise a rate is fetched and written back to the cache. When the fetch
	fails, any cached entry for the pair (however old) is used instead and the
	result is flagged ``is_stale``. With nothing cached the call fails with
	``NoCacheAvailable``, or with the fetch error itself when
	``surface_fetch_errors`` is set.

	Concurrent calls for the same pair are not merged.
	"""

	def __init__(
		self,
		cache: RateCache,
		fetcher: RateFetcher,
		cache_ttl: timedelta = timedelta(hours=1),
		surface_fetch_errors: bool = False,
		clock: Callable[[], datetime] = utc_now,
	):
		self.cache = cache
		self.fetcher = fetcher
		self.cache_ttl = cache_ttl
		self.surface_fetch_errors = surface_fetch_errors
		self.clock = clock

	async def convert(self, base_currency: str, quote_currency: str, amount: float) -> ConversionResult:
		base = normalize_code(base_currency)
		quote = normalize_code(quote_currency)
		amount = validate_amount(amount)

		cached = await self._lookup(base, quote)
		if cached is not None and cached.is_fresh(self.clock(), self.cache_ttl):
			logger.debug(f'Using cached rate {base}/{quote} = {cached.rate}')
			return self._compute(amount, cached)

		try:
			rate = await self.fetcher.fetch_rate(base, quote)
		except ProviderError as e:
			logger.warning(f'Rate fetch for {base}/{quote} failed: {e}')
			return await self._fallback(base, quote, amount, e)

		entry = await self._store(base, quote, rate)
		return self._compute(amount, entry)

	async def _lookup(self, base: str, quote: str) -> ExchangeRate | None:
		try:
			return await self.cache.lookup(base, quote)
		except CacheError:
			logger.exception(f'Rate cache lookup failed for {base}/{quote}')
			return None

	async def _store(self, base: str, quote: str, rate: float) -> ExchangeRate:
		try:
			return await self.cache.store(base, quote, rate)
		except CacheError:
			logger.exception(f'Could not cache rate {base}/{quote}; continuing with fetched rate')
			return ExchangeRate(
				base_currency=base,
				quote_currency=quote,
				rate=rate,
				observed_at=self.clock(),
			)

	async def _fallback(
		self, base: str, quote: str, amount: float, fetch_error: ProviderError
	) -> ConversionResult:
		stale = await self._lookup(base, quote)
		if stale is not None:
			logger.warning(
				f'Falling back to cached rate {base}/{quote} = {stale.rate} '
				f'observed at {stale.observed_at.isoformat()}'
			)
			# entry may be fresh if the first lookup failed
			is_stale = not stale.is_fresh(self.clock(), self.cache_ttl)
			return self._compute(amount, stale, is_stale=is_stale)

		if self.surface_fetch_errors:
			raise fetch_error
		raise NoCacheAvailable(
			f'No rate available for {base}/{quote}: fetch failed and nothing is cached'
		) from fetch_error

	@staticmethod
	def _compute(amount: float, entry: ExchangeRate, is_stale: bool = False) -> ConversionResult:
		return ConversionResult(
			converted_amount=amount * entry.rate,
			rate=entry.rate,
			observed_at=entry.observed_at,
			is_stale=is_stale,
		)
