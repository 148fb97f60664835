from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class ExchangeRate:
	base_currency: str
	quote_currency: str
	rate: float  # units of quote per one unit of base
	observed_at: datetime

	def age(self, now: datetime) -> timedelta:
		return now - self.observed_at

	def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
		return self.age(now) < ttl


@dataclass(frozen=True)
class ConversionResult:
	converted_amount: float
	rate: float
	observed_at: datetime
	is_stale: bool = False


@dataclass(frozen=True)
class ConversionRecord:
	base_currency: str
	quote_currency: str
	requested_amount: float
	converted_amount: float
	rate: float
	timestamp: datetime


@dataclass(frozen=True)
class SupportedCurrency:
	code: str
	name: str | None
