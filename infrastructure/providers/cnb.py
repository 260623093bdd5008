from datetime import date

import httpx

from domain.exceptions.rates import UpstreamError
from domain.models.rates import ParsedFeed
from infrastructure.providers.feed_parser import parse_feed

CNB_DAILY_URL = (
	'https://www.cnb.cz/en/financial-markets/foreign-exchange-market/'
	'central-bank-exchange-rate-fixing/central-bank-exchange-rate-fixing/daily.txt'
)


def format_feed_date(day: date) -> str:
	return day.strftime('%d.%m.%Y')


class CNBFeedFetcher:
	def __init__(
		self,
		base_url: str = CNB_DAILY_URL,
		client: httpx.AsyncClient | None = None,
		timeout: int = 10,
	):
		self.base_url = base_url
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'cnb'

	async def fetch(self, day: date | None = None) -> ParsedFeed:
		params = {'date': format_feed_date(day)} if day is not None else None

		try:
			response = await self._client.get(self.base_url, params=params)
		except httpx.RequestError as e:
			raise UpstreamError(f'CNB request failed: {e.__class__.__name__}') from e

		if not response.is_success:
			raise UpstreamError(
				f'CNB API error: {response.status_code}', status_code=response.status_code
			)

		return parse_feed(response.text)

	async def close(self) -> None:
		await self._client.aclose()
