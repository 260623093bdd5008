from datetime import date
from typing import Protocol

from domain.models.rates import ParsedFeed


class FeedFetcher(Protocol):
	@property
	def name(self) -> str: ...

	async def fetch(self, day: date | None = None) -> ParsedFeed:
		"""Fetch the feed for ``day``, or the latest published feed when omitted."""
		...

	async def close(self) -> None: ...
