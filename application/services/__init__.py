from .conversion_engine import ConversionEngine
from .conversion_service import ConversionService
from .currency_service import CurrencyCatalog
from .rate_cache import RateCache
from .rate_fetcher import RateFetcher
from .request_slot import LatestRequestSlot

__all__ = [
	'ConversionEngine',
	'ConversionService',
	'CurrencyCatalog',
	'LatestRequestSlot',
	'RateCache',
	'RateFetcher',
]
