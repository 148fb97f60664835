from .requests import ConversionRequest
from .responses import (
	ConversionHistoryResponse,
	ConversionRecordResponse,
	ConversionResponse,
	ExchangeRateResponse,
	SupportedCurrenciesResponse,
)

__all__ = [
	'ConversionHistoryResponse',
	'ConversionRecordResponse',
	'ConversionRequest',
	'ConversionResponse',
	'ExchangeRateResponse',
	'SupportedCurrenciesResponse',
]
