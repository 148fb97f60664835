import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.currency import (
	InvalidAmount,
	InvalidCurrencyCode,
	InvalidRequestError,
	NoCacheAvailable,
	ProviderError,
)

logger = logging.getLogger(__name__)


def error_status(exc: Exception) -> int:
	if isinstance(exc, InvalidCurrencyCode | InvalidAmount | InvalidRequestError):
		return 400
	if isinstance(exc, NoCacheAvailable | ProviderError):
		return 503
	return 500


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidCurrencyCode)
	@app.exception_handler(InvalidAmount)
	@app.exception_handler(InvalidRequestError)
	async def invalid_input_handler(request: Request, exc: Exception):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(NoCacheAvailable)
	async def no_cache_handler(request: Request, exc: NoCacheAvailable):
		logger.error(f'No rate available: {exc}')
		return JSONResponse(status_code=503, content={'detail': str(exc)})

	@app.exception_handler(ProviderError)
	async def provider_error_handler(request: Request, exc: ProviderError):
		logger.error(f'Provider error: {exc}')
		return JSONResponse(
			status_code=503, content={'detail': 'Exchange rate service unavailable'}
		)
