import logging
from collections.abc import Callable
from datetime import datetime

from application.services.conversion_engine import ConversionEngine, normalize_code
from application.utils.time import utc_now
from domain.interfaces.currency import ConversionHistory
from domain.models.currency import ConversionRecord, ConversionResult

logger = logging.getLogger(__name__)


class ConversionService:
	def __init__(
		self,
		engine: ConversionEngine,
		history: ConversionHistory,
		clock: Callable[[], datetime] = utc_now,
	):
		self.engine = engine
		self.history = history
		self.clock = clock

	async def convert(self, base_currency: str, quote_currency: str, amount: float) -> ConversionResult:
		result = await self.engine.convert(base_currency, quote_currency, amount)

		record = ConversionRecord(
			base_currency=normalize_code(base_currency),
			quote_currency=normalize_code(quote_currency),
			requested_amount=float(amount),
			converted_amount=result.converted_amount,
			rate=result.rate,
			timestamp=self.clock(),
		)
		try:
			await self.history.add(record)
		except Exception:
			logger.exception(f'Failed to save conversion {record.base_currency}/{record.quote_currency}')

		return result

	async def recent_conversions(self, limit: int = 50) -> list[ConversionRecord]:
		return await self.history.list_recent(limit)
