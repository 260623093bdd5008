import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import cleanup_dependencies, deps, init_dependencies
from api.error_handlers import register_exception_handlers
from api.routes import rates
from api.schemas import HealthResponse
from config.logging_config import configure_logging
from config.settings import get_settings

settings = get_settings()

configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	logger.info('Starting CNB Rates API...')

	init_dependencies()

	if deps.db is None:
		raise RuntimeError('Database not initialized')
	await deps.db.create_tables()
	logger.info('Database tables created')

	logger.info('Application ready')

	yield

	logger.info('Shutting down...')
	await cleanup_dependencies()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_methods=['GET', 'POST', 'OPTIONS'],
	allow_headers=['Content-Type'],
)


@app.get('/health', response_model=HealthResponse, tags=['health'])
async def health() -> HealthResponse:
	return HealthResponse()


app.include_router(rates.router)
register_exception_handlers(app)
