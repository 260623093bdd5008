import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class SingleFlight:
	"""Collapses concurrent calls for the same key into one in-flight task.

	The first caller for a key starts the operation; callers arriving while it
	is running await the same task and observe the same result or exception.
	The key is released once the task settles, whatever the outcome, so the
	next call starts a fresh attempt.
	"""

	def __init__(self):
		self._in_flight: dict[str, asyncio.Task] = {}

	def in_flight(self, key: str) -> bool:
		return key in self._in_flight

	async def do(self, key: str, operation: Callable[[], Awaitable[Any]]) -> Any:
		task = self._in_flight.get(key)
		if task is None:
			task = asyncio.ensure_future(self._run(key, operation))
			self._in_flight[key] = task

		# A cancelled waiter must not cancel the shared operation
		return await asyncio.shield(task)

	async def _run(self, key: str, operation: Callable[[], Awaitable[Any]]) -> Any:
		try:
			return await operation()
		finally:
			self._in_flight.pop(key, None)
