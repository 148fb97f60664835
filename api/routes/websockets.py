import logging
from typing import Annotated

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from api.dependencies import get_conversion_service
from api.error_handlers import error_status
from api.schemas import ConversionRequest
from application.services import ConversionService, LatestRequestSlot
from domain.exceptions.currency import CurrencyException

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api', tags=['websockets'])


async def _convert_and_reply(
	websocket: WebSocket, service: ConversionService, request: ConversionRequest
) -> None:
	try:
		result = await service.convert(request.base_currency, request.quote_currency, request.amount)
	except CurrencyException as e:
		await websocket.send_json(
			{'type': 'error', 'status': error_status(e), 'detail': str(e)}
		)
		return

	await websocket.send_json(
		{
			'type': 'conversion',
			'base_currency': request.base_currency.strip().upper(),
			'quote_currency': request.quote_currency.strip().upper(),
			'amount': request.amount,
			'converted_amount': result.converted_amount,
			'rate': result.rate,
			'observed_at': result.observed_at.isoformat(),
			'is_stale': result.is_stale,
		}
	)


@router.websocket('/ws/convert')
async def websocket_convert_endpoint(
	websocket: WebSocket,
	service: Annotated[ConversionService, Depends(get_conversion_service)],
):
	"""
	Interactive conversion channel.

	Each message ``{"base_currency": "USD", "quote_currency": "EUR", "amount": 10}``
	starts a conversion. A newer message cancels a conversion that is still
	running, so the client only ever receives the answer to its latest request.
	"""
	await websocket.accept()
	slot = LatestRequestSlot()
	logger.info('Conversion websocket connected')

	try:
		while True:
			message = await websocket.receive_text()
			try:
				request = ConversionRequest.model_validate_json(message)
			except ValidationError as e:
				await websocket.send_json({'type': 'error', 'status': 422, 'detail': str(e)})
				continue
			slot.submit(_convert_and_reply(websocket, service, request))
	except WebSocketDisconnect:
		logger.info('Conversion websocket disconnected')
	finally:
		slot.cancel()
