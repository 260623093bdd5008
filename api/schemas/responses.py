import datetime as dt

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.models.rates import CurrencyMeta, RateRecord


class RateResponse(BaseModel):
	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
		json_schema_extra={
			'example': {
				'date': '2024-12-15',
				'currencyCode': 'EUR',
				'country': 'EMU',
				'currencyName': 'euro',
				'amount': 1,
				'rate': 25.5,
			}
		},
	)

	date: dt.date
	currency_code: str = Field(..., description='ISO 4217 currency code')
	country: str
	currency_name: str
	amount: int = Field(..., description='Number of currency units the rate is quoted for')
	rate: float = Field(..., description='CZK per amount units')

	@classmethod
	def from_domain(cls, record: RateRecord) -> 'RateResponse':
		return cls(
			date=record.date,
			currency_code=record.currency_code,
			country=record.country,
			currency_name=record.currency_name,
			amount=record.unit_amount,
			rate=float(record.rate),
		)


class CurrencyResponse(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	currency_code: str
	currency_name: str
	country: str
	amount: int

	@classmethod
	def from_domain(cls, meta: CurrencyMeta) -> 'CurrencyResponse':
		return cls(
			currency_code=meta.currency_code,
			currency_name=meta.currency_name,
			country=meta.country,
			amount=meta.unit_amount,
		)


class HealthResponse(BaseModel):
	status: str = 'ok'
