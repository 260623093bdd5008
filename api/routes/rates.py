import re
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_query_service
from api.schemas import CurrencyResponse, RateResponse
from application.services import RateQueryService
from config.settings import get_settings
from domain.exceptions.rates import CurrencyNotFoundError, InvalidCurrencyError

router = APIRouter(prefix='/api/rates', tags=['rates'])

CURRENCY_CODE_PATTERN = re.compile(r'^[A-Z]{3}$')
MIN_DAYS = 1
MAX_DAYS = 365


@router.get(
	'/currencies',
	response_model=list[CurrencyResponse],
	status_code=status.HTTP_200_OK,
	summary='List currencies quoted on the latest fixing',
)
async def get_all_currencies(
	service: Annotated[RateQueryService, Depends(get_query_service)],
) -> list[CurrencyResponse]:
	currencies = await service.all_currencies()
	return [CurrencyResponse.from_domain(c) for c in currencies]


@router.get(
	'/latest',
	response_model=list[RateResponse],
	status_code=status.HTTP_200_OK,
	summary='Get the latest published rates',
)
async def get_latest_rates(
	service: Annotated[RateQueryService, Depends(get_query_service)],
) -> list[RateResponse]:
	records = await service.latest_rates()
	return [RateResponse.from_domain(r) for r in records]


@router.get(
	'/{code}/history',
	response_model=list[RateResponse],
	status_code=status.HTTP_200_OK,
	summary='Get rate history for one currency',
)
async def get_currency_history(
	code: Annotated[str, Path(description='Three-letter currency code')],
	service: Annotated[RateQueryService, Depends(get_query_service)],
	days: Annotated[int, Query(ge=MIN_DAYS, le=MAX_DAYS)] = get_settings().DEFAULT_HISTORY_DAYS,
	aggregate: Annotated[Literal['week'] | None, Query()] = None,
) -> list[RateResponse]:
	code = code.upper()
	if not CURRENCY_CODE_PATTERN.match(code):
		raise InvalidCurrencyError('Invalid currency code format')

	records = await service.history(code, days, aggregate)
	if not records:
		raise CurrencyNotFoundError('Currency not found')

	return [RateResponse.from_domain(r) for r in records]
