from pydantic import BaseModel, Field


class ConversionRequest(BaseModel):
	base_currency: str = Field(..., max_length=10)
	quote_currency: str = Field(..., max_length=10)
	amount: float

	class ConfigDict:
		json_schema_extra = {
			'example': {'base_currency': 'USD', 'quote_currency': 'EUR', 'amount': 100.0}
		}
