from datetime import datetime

from pydantic import BaseModel, Field


class ConversionResponse(BaseModel):
	base_currency: str = Field(..., description='Source currency code')
	quote_currency: str = Field(..., description='Target currency code')
	amount: float = Field(..., description='Original amount requested')
	converted_amount: float = Field(..., description='Converted amount')
	rate: float = Field(..., description='Exchange rate used for conversion')
	observed_at: datetime = Field(..., description='When the rate was fetched')
	is_stale: bool = Field(..., description='Rate came from an expired cache entry')

	class ConfigDict:
		json_schema_extra = {
			'example': {
				'base_currency': 'USD',
				'quote_currency': 'EUR',
				'amount': 100.0,
				'converted_amount': 85.5,
				'rate': 0.855,
				'observed_at': '2025-09-27T10:30:00Z',
				'is_stale': False,
			}
		}


class ExchangeRateResponse(BaseModel):
	base_currency: str = Field(..., description='Source currency code')
	quote_currency: str = Field(..., description='Target currency code')
	rate: float = Field(..., description='Units of quote per one unit of base')
	observed_at: datetime = Field(..., description='When the rate was fetched')
	is_stale: bool = Field(..., description='Rate came from an expired cache entry')


class SupportedCurrenciesResponse(BaseModel):
	currencies: dict[str, str] = Field(description='Currency code to display name')

	class ConfigDict:
		json_schema_extra = {'examples': [{'currencies': {'USD': 'US Dollar', 'EUR': 'Euro'}}]}


class ConversionRecordResponse(BaseModel):
	base_currency: str
	quote_currency: str
	requested_amount: float
	converted_amount: float
	rate: float
	timestamp: datetime


class ConversionHistoryResponse(BaseModel):
	conversions: list[ConversionRecordResponse]
