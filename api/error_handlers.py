import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.rates import CurrencyNotFoundError, FeedError, InvalidCurrencyError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidCurrencyError)
	async def invalid_currency_handler(request: Request, exc: InvalidCurrencyError):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(CurrencyNotFoundError)
	async def currency_not_found_handler(request: Request, exc: CurrencyNotFoundError):
		return JSONResponse(status_code=404, content={'detail': str(exc)})

	@app.exception_handler(FeedError)
	async def feed_error_handler(request: Request, exc: FeedError):
		logger.error(f'Feed error on {request.url.path}: {exc}')
		return JSONResponse(status_code=500, content={'detail': 'Failed to fetch exchange rates'})

	@app.exception_handler(Exception)
	async def global_exception_handler(request: Request, exc: Exception):
		logger.error(f'Unhandled exception: {exc}', exc_info=True)
		return JSONResponse(status_code=500, content={'detail': 'Internal server error'})
