from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import (
	get_conversion_engine,
	get_conversion_service,
	get_currency_catalog,
)
from api.schemas import (
	ConversionHistoryResponse,
	ConversionRecordResponse,
	ConversionResponse,
	ExchangeRateResponse,
	SupportedCurrenciesResponse,
)
from application.services import (
	ConversionEngine,
	ConversionService,
	CurrencyCatalog,
)
from application.services.conversion_engine import normalize_code

router = APIRouter(prefix='/api', tags=['currency'])

CurrencyCode = Annotated[str, Path(min_length=1, max_length=10)]


@router.get(
	'/convert/{base_currency}/{quote_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	base_currency: CurrencyCode,
	quote_currency: CurrencyCode,
	amount: Annotated[float, Path()],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = await service.convert(base_currency, quote_currency, amount)
	return ConversionResponse(
		base_currency=normalize_code(base_currency),
		quote_currency=normalize_code(quote_currency),
		amount=amount,
		converted_amount=result.converted_amount,
		rate=result.rate,
		observed_at=result.observed_at,
		is_stale=result.is_stale,
	)


@router.get(
	'/rate/{base_currency}/{quote_currency}',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get current exchange rate',
)
async def get_exchange_rate(
	base_currency: CurrencyCode,
	quote_currency: CurrencyCode,
	engine: Annotated[ConversionEngine, Depends(get_conversion_engine)],
) -> ExchangeRateResponse:
	# One unit through the engine so the rate gets the same cache/fallback treatment
	result = await engine.convert(base_currency, quote_currency, 1.0)
	return ExchangeRateResponse(
		base_currency=normalize_code(base_currency),
		quote_currency=normalize_code(quote_currency),
		rate=result.rate,
		observed_at=result.observed_at,
		is_stale=result.is_stale,
	)


@router.get(
	'/currencies',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List supported currencies',
)
async def get_supported_currencies(
	catalog: Annotated[CurrencyCatalog, Depends(get_currency_catalog)],
) -> SupportedCurrenciesResponse:
	currencies = await catalog.list_supported_currencies()
	return SupportedCurrenciesResponse(currencies=currencies)


@router.get(
	'/history',
	response_model=ConversionHistoryResponse,
	status_code=status.HTTP_200_OK,
	summary='Recent conversions',
)
async def get_conversion_history(
	service: Annotated[ConversionService, Depends(get_conversion_service)],
	limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> ConversionHistoryResponse:
	records = await service.recent_conversions(limit)
	return ConversionHistoryResponse(
		conversions=[
			ConversionRecordResponse(
				base_currency=r.base_currency,
				quote_currency=r.quote_currency,
				requested_amount=r.requested_amount,
				converted_amount=r.converted_amount,
				rate=r.rate,
				timestamp=r.timestamp,
			)
			for r in records
		]
	)
