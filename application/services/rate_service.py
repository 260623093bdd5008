import math
from collections.abc import Callable
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from application.services.ingestion_service import IngestionCoordinator
from domain.models.rates import CurrencyMeta, RateRecord
from infrastructure.persistence.repositories.rates import RateRepository

Aggregate = Literal['week']

RATE_PRECISION = Decimal('0.0001')


def week_key(day: date) -> str:
	"""Sunday-based week number within the calendar year, e.g. ``2024-W50``.

	Not an ISO 8601 week: week 1 is the (possibly partial) week holding
	January 1st and weeks roll over on Sunday.
	"""
	start_of_year = date(day.year, 1, 1)
	day_of_year = (day - start_of_year).days
	jan1_weekday = (start_of_year.weekday() + 1) % 7  # Sunday = 0
	week_number = math.ceil((day_of_year + jan1_weekday + 1) / 7)
	return f'{day.year}-W{week_number:02d}'


def aggregate_weekly(currency_code: str, records: list[RateRecord]) -> list[RateRecord]:
	"""Collapse daily records into one record per week.

	Each weekly record carries the latest date of its week and the mean rate
	rounded to four places. Country and currency name come from the first
	record overall and the unit amount from the first record of the week; both
	are assumed constant for a currency over the window.
	"""
	if not records:
		return []

	weeks: dict[str, list[RateRecord]] = {}
	for record in records:
		weeks.setdefault(week_key(record.date), []).append(record)

	first = records[0]
	aggregated = []
	for key in sorted(weeks):
		group = weeks[key]
		mean = sum((r.rate for r in group), Decimal(0)) / len(group)
		aggregated.append(
			RateRecord(
				date=max(r.date for r in group),
				currency_code=currency_code,
				country=first.country,
				currency_name=first.currency_name,
				unit_amount=group[0].unit_amount,
				rate=mean.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP),
			)
		)
	return aggregated


class RateQueryService:
	def __init__(
		self,
		store: RateRepository,
		coordinator: IngestionCoordinator,
		today: Callable[[], date] = date.today,
	):
		self.store = store
		self.coordinator = coordinator
		self.today = today

	async def latest_rates(self) -> list[RateRecord]:
		await self.coordinator.ensure_today()

		latest = await self.store.latest_date()
		if latest is None:
			return []
		return await self.store.records_for_date(latest)

	async def all_currencies(self) -> list[CurrencyMeta]:
		records = await self.latest_rates()
		return [
			CurrencyMeta(
				currency_code=r.currency_code,
				currency_name=r.currency_name,
				country=r.country,
				unit_amount=r.unit_amount,
			)
			for r in records
		]

	async def history(
		self, currency_code: str, days: int, aggregate: Aggregate | None = None
	) -> list[RateRecord]:
		await self.coordinator.ensure_history(days)

		since = self.today() - timedelta(days=days)
		records = await self.store.records_for_currency_since(currency_code, since)

		if aggregate == 'week':
			return aggregate_weekly(currency_code, records)
		return records
