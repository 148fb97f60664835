import logging
from datetime import timedelta

from redis.asyncio import Redis

from application.services import (
	ConversionEngine,
	ConversionService,
	CurrencyCatalog,
	RateCache,
	RateFetcher,
)
from config.settings import Settings, get_settings
from domain.interfaces.currency import RateStore
from infrastructure.cache.redis_cache import RedisRateStore
from infrastructure.credentials.api_key import SettingsAPIKeyProvider
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.currency import SQLConversionHistory, SQLRateStore
from infrastructure.providers import CurrencyAPIProvider

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	settings: Settings | None = None
	db: Database | None = None
	redis_client: Redis | None = None
	rate_store: RateStore | None = None
	history: SQLConversionHistory | None = None
	provider: CurrencyAPIProvider | None = None


deps = AppDependencies()


def init_dependencies(settings: Settings | None = None) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = settings or get_settings()
	deps.settings = settings

	deps.db = Database(settings.DATABASE_URL)
	deps.history = SQLConversionHistory(deps.db)

	if settings.RATE_CACHE_BACKEND == 'redis':
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		deps.rate_store = RedisRateStore(deps.redis_client)
	else:
		deps.rate_store = SQLRateStore(deps.db)

	deps.provider = CurrencyAPIProvider(
		SettingsAPIKeyProvider(settings),
		base_url=settings.CURRENCYAPI_BASE_URL,
		timeout=settings.NETWORK_TIMEOUT_SECONDS,
	)
	logger.info(f'Dependencies initialized (rate cache backend: {settings.RATE_CACHE_BACKEND})')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.redis_client:
		await deps.redis_client.aclose()
	if deps.db:
		await deps.db.close()
	if deps.provider:
		await deps.provider.close()

	logger.info('Cleanup complete')


def _require(value, name: str):
	if value is None:
		raise RuntimeError(f'{name} not initialized. Call init_dependencies() first.')
	return value


def get_rate_cache() -> RateCache:
	return RateCache(_require(deps.rate_store, 'Rate store'))


def get_rate_fetcher() -> RateFetcher:
	settings = _require(deps.settings, 'Settings')
	return RateFetcher(
		_require(deps.provider, 'Provider'),
		max_attempts=settings.FETCH_MAX_ATTEMPTS,
		base_delay=settings.BACKOFF_BASE_DELAY,
		max_delay=settings.BACKOFF_MAX_DELAY,
	)


def get_conversion_engine() -> ConversionEngine:
	settings = _require(deps.settings, 'Settings')
	return ConversionEngine(
		cache=get_rate_cache(),
		fetcher=get_rate_fetcher(),
		cache_ttl=timedelta(seconds=settings.CACHE_TTL_SECONDS),
		surface_fetch_errors=settings.SURFACE_FETCH_ERRORS,
	)


def get_conversion_service() -> ConversionService:
	return ConversionService(
		engine=get_conversion_engine(),
		history=_require(deps.history, 'Conversion history'),
	)


def get_currency_catalog() -> CurrencyCatalog:
	return CurrencyCatalog(_require(deps.provider, 'Provider'))
