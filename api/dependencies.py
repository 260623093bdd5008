import logging
from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis

from application.services import IngestionCoordinator, RateQueryService
from config.settings import get_settings
from infrastructure.cache.redis_cache import RedisCacheService
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.rates import RateRepository
from infrastructure.providers import CNBFeedFetcher, FeedFetcher

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	db: Database | None = None
	redis_client: Redis | None = None
	redis_cache: RedisCacheService | None = None
	fetcher: FeedFetcher | None = None
	repository: RateRepository | None = None
	coordinator: IngestionCoordinator | None = None


deps = AppDependencies()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	deps.db = Database(settings.DATABASE_URL)

	if settings.REDIS_URL:
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		deps.redis_cache = RedisCacheService(
			deps.redis_client, records_ttl=timedelta(seconds=settings.RATES_CACHE_TTL_SECONDS)
		)
	else:
		logger.info('REDIS_URL not set, rate cache disabled')

	deps.fetcher = CNBFeedFetcher(base_url=settings.FEED_BASE_URL, timeout=settings.FEED_TIMEOUT)
	deps.repository = RateRepository(database=deps.db, cache_service=deps.redis_cache)
	# One coordinator per process so single-flight spans all requests
	deps.coordinator = IngestionCoordinator(
		store=deps.repository,
		fetcher=deps.fetcher,
		fetch_delay=settings.FEED_FETCH_DELAY_MS / 1000,
		fetch_attempts=settings.FEED_FETCH_ATTEMPTS,
	)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.redis_client:
		await deps.redis_client.aclose()
	if deps.db:
		await deps.db.close()
	if deps.fetcher:
		await deps.fetcher.close()

	logger.info('Cleanup complete')


def get_repository() -> RateRepository:
	if deps.repository is None:
		raise RuntimeError('Repository not initialized')
	return deps.repository


def get_coordinator() -> IngestionCoordinator:
	if deps.coordinator is None:
		raise RuntimeError('Ingestion coordinator not initialized')
	return deps.coordinator


async def get_query_service(
	repository: Annotated[RateRepository, Depends(get_repository)],
	coordinator: Annotated[IngestionCoordinator, Depends(get_coordinator)],
) -> RateQueryService:
	return RateQueryService(store=repository, coordinator=coordinator)
