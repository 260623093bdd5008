from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class RateRecord:
	date: date
	currency_code: str
	country: str
	currency_name: str
	unit_amount: int  # rate is quoted per this many units of the currency
	rate: Decimal


@dataclass(frozen=True)
class ParsedRate:
	country: str
	currency_name: str
	unit_amount: int
	currency_code: str
	rate: Decimal


@dataclass(frozen=True)
class ParsedFeed:
	date: date  # publication date declared by the feed, not the request date
	rates: tuple[ParsedRate, ...]

	def records(self) -> list[RateRecord]:
		return [
			RateRecord(
				date=self.date,
				currency_code=r.currency_code,
				country=r.country,
				currency_name=r.currency_name,
				unit_amount=r.unit_amount,
				rate=r.rate,
			)
			for r in self.rates
		]


@dataclass(frozen=True)
class CurrencyMeta:
	currency_code: str
	currency_name: str
	country: str
	unit_amount: int
