import logging
from collections.abc import Sequence
from datetime import date

from redis.exceptions import RedisError
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite

from domain.exceptions.rates import CacheError
from domain.models.rates import RateRecord
from infrastructure.cache.redis_cache import RedisCacheService
from infrastructure.persistence.database import Database
from infrastructure.persistence.models.rates import RateDB

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
	'sqlite': sqlite.insert,
	'postgresql': postgresql.insert,
}


def _to_domain(row: RateDB) -> RateRecord:
	return RateRecord(
		date=date.fromisoformat(row.date),
		currency_code=row.currency_code,
		country=row.country,
		currency_name=row.currency_name,
		unit_amount=row.amount,
		rate=row.rate,
	)


def _to_row(record: RateRecord) -> dict:
	return {
		'date': record.date.isoformat(),
		'currency_code': record.currency_code,
		'country': record.country,
		'currency_name': record.currency_name,
		'amount': record.unit_amount,
		'rate': record.rate,
	}


class RateRepository:
	def __init__(self, database: Database, cache_service: RedisCacheService | None = None):
		self.db = database
		self.cache = cache_service

	async def has_date(self, day: date) -> bool:
		async with self.db.session() as session:
			stmt = select(RateDB.id).filter(RateDB.date == day.isoformat()).limit(1)
			result = await session.execute(stmt)
			return result.first() is not None

	async def latest_date(self) -> date | None:
		if self.cache is not None:
			try:
				cached = await self.cache.get_latest_date()
			except (CacheError, RedisError) as e:
				logger.warning(f'Cache read failed for latest date: {e}')
			else:
				if cached is not None:
					return cached

		async with self.db.session() as session:
			result = await session.execute(select(func.max(RateDB.date)))
			latest = result.scalar_one_or_none()

		if latest is None:
			return None

		latest_day = date.fromisoformat(latest)
		if self.cache is not None:
			try:
				await self.cache.set_latest_date(latest_day)
			except RedisError as e:
				logger.warning(f'Cache write failed for latest date: {e}')
		return latest_day

	async def records_for_date(self, day: date) -> list[RateRecord]:
		if self.cache is not None:
			try:
				cached = await self.cache.get_records(day)
			except (CacheError, RedisError) as e:
				logger.warning(f'Cache read failed for {day.isoformat()}: {e}')
			else:
				if cached is not None:
					return cached

		async with self.db.session() as session:
			stmt = (
				select(RateDB)
				.filter(RateDB.date == day.isoformat())
				.order_by(RateDB.currency_code)
			)
			result = await session.execute(stmt)
			records = [_to_domain(r) for r in result.scalars().all()]

		if records and self.cache is not None:
			try:
				await self.cache.set_records(day, records)
			except RedisError as e:
				logger.warning(f'Cache write failed for {day.isoformat()}: {e}')
		return records

	async def records_for_currency_since(self, currency_code: str, since: date) -> list[RateRecord]:
		async with self.db.session() as session:
			stmt = (
				select(RateDB)
				.filter(
					RateDB.currency_code == currency_code,
					RateDB.date >= since.isoformat(),
				)
				.order_by(RateDB.date)
			)
			result = await session.execute(stmt)
			return [_to_domain(r) for r in result.scalars().all()]

	async def insert_batch(self, records: Sequence[RateRecord]) -> int:
		"""Insert records, ignoring any whose (date, currency_code) already exists.

		Returns the number of rows actually inserted.
		"""
		if not records:
			return 0

		insert = _INSERT_BY_DIALECT.get(self.db.dialect_name)
		if insert is None:
			raise NotImplementedError(f'Unsupported database dialect: {self.db.dialect_name}')

		stmt = (
			insert(RateDB)
			.values([_to_row(r) for r in records])
			.on_conflict_do_nothing(index_elements=['date', 'currency_code'])
		)
		async with self.db.session() as session:
			result = await session.execute(stmt)
			inserted = result.rowcount

		if self.cache is not None:
			try:
				await self.cache.invalidate({r.date for r in records})
			except RedisError as e:
				logger.warning(f'Cache invalidation failed: {e}')
		return inserted
