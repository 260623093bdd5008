from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.providers.cnb import CNB_DAILY_URL


class Settings(BaseSettings):
	DATABASE_URL: str = 'sqlite+aiosqlite:///./data/cnb_rates.db'

	# Empty disables the read-through cache
	REDIS_URL: str = ''
	RATES_CACHE_TTL_SECONDS: int = 3600

	# Upstream feed
	FEED_BASE_URL: str = CNB_DAILY_URL
	FEED_TIMEOUT: int = 10
	FEED_FETCH_DELAY_MS: int = 100
	FEED_FETCH_ATTEMPTS: int = 3

	DEFAULT_HISTORY_DAYS: int = 30

	# Application
	APP_NAME: str = 'CNB Rates API'
	CORS_ORIGINS: str = 'http://localhost:5173,http://localhost:5100'
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	@property
	def cors_origins(self) -> list[str]:
		return [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]


@lru_cache
def get_settings() -> Settings:
	return Settings()
