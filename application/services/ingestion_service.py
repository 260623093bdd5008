import asyncio
import logging
from collections.abc import Callable
from datetime import date, timedelta

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from application.services.single_flight import SingleFlight
from domain.exceptions.rates import UpstreamError
from domain.models.rates import ParsedFeed
from infrastructure.persistence.repositories.rates import RateRepository
from infrastructure.providers.base import FeedFetcher

logger = logging.getLogger(__name__)

TODAY_KEY = 'today'
HISTORY_KEY = 'history'

# date.weekday(): Saturday and Sunday, the feed is not published
NON_PUBLISHING_WEEKDAYS = frozenset({5, 6})


def _is_transport_failure(exc: BaseException) -> bool:
	return isinstance(exc, UpstreamError) and exc.status_code is None


class IngestionCoordinator:
	def __init__(
		self,
		store: RateRepository,
		fetcher: FeedFetcher,
		*,
		fetch_delay: float = 0.1,
		fetch_attempts: int = 3,
		retry_backoff: float = 0.5,
		today: Callable[[], date] = date.today,
	):
		self.store = store
		self.fetcher = fetcher
		self.fetch_delay = fetch_delay
		self.fetch_attempts = fetch_attempts
		self.retry_backoff = retry_backoff
		self.today = today
		self.flights = SingleFlight()

	async def ensure_today(self) -> None:
		await self.flights.do(TODAY_KEY, self._ensure_today)

	async def ensure_history(self, days: int) -> None:
		await self.flights.do(HISTORY_KEY, lambda: self._ensure_history(days))

	async def _fetch(self, day: date | None = None) -> ParsedFeed:
		async for attempt in AsyncRetrying(
			stop=stop_after_attempt(self.fetch_attempts),
			wait=wait_exponential(multiplier=self.retry_backoff, max=10),
			retry=retry_if_exception(_is_transport_failure),
			reraise=True,
		):
			with attempt:
				return await self.fetcher.fetch(day)

	async def _ensure_today(self) -> None:
		today = self.today()
		if await self.store.has_date(today):
			return

		feed = await self._fetch()
		if not feed.rates:
			logger.info('Latest feed has no rates yet, nothing to store')
			return

		# The feed's own date wins over the wall clock
		inserted = await self.store.insert_batch(feed.records())
		logger.info(
			f'Fetched rates for {feed.date.isoformat()}: {len(feed.rates)} currencies, '
			f'{inserted} new'
		)

	async def _ensure_history(self, days: int) -> None:
		today = self.today()

		for offset in range(days + 1):
			day = today - timedelta(days=offset)
			if day.weekday() in NON_PUBLISHING_WEEKDAYS:
				continue

			if await self.store.has_date(day):
				continue

			try:
				feed = await self._fetch(day)
				if feed.rates:
					inserted = await self.store.insert_batch(feed.records())
					logger.info(
						f'Fetched historical rates for {feed.date.isoformat()}: '
						f'{len(feed.rates)} currencies, {inserted} new'
					)
			except Exception as e:
				logger.error(f'Failed to fetch rates for {day.isoformat()}: {e}')

			await asyncio.sleep(self.fetch_delay)
