from typing import Protocol

from domain.models.currency import ConversionRecord, ExchangeRate, SupportedCurrency


class RateStore(Protocol):
	async def find_latest(self, base_currency: str, quote_currency: str) -> ExchangeRate | None: ...

	async def insert(self, entry: ExchangeRate) -> None: ...


class ExchangeRateProvider(Protocol):
	@property
	def name(self) -> str: ...

	async def fetch_rate(self, base_currency: str, quote_currency: str) -> float: ...

	async def fetch_supported_currencies(self) -> list[SupportedCurrency]: ...


class APIKeyProvider(Protocol):
	def load_key(self) -> str | None: ...


class ConversionHistory(Protocol):
	async def add(self, record: ConversionRecord) -> None: ...

	async def list_recent(self, limit: int = 50) -> list[ConversionRecord]: ...
