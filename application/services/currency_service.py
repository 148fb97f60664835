import logging

from domain.interfaces.currency import ExchangeRateProvider

logger = logging.getLogger(__name__)


class CurrencyCatalog:
	def __init__(self, provider: ExchangeRateProvider):
		self.provider = provider

	async def list_supported_currencies(self) -> dict[str, str]:
		"""Map of currency code to display name, straight from the provider."""
		currencies = await self.provider.fetch_supported_currencies()
		logger.info(f'{self.provider.name} supports {len(currencies)} currencies')
		return {c.code: c.name or c.code for c in currencies}

	async def list_codes(self) -> list[str]:
		return sorted(await self.list_supported_currencies())
