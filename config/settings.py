from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	DATABASE_URL: str = 'sqlite+aiosqlite:///./currency_converter.db'

	REDIS_URL: str = 'redis://localhost:6379'

	CURRENCYAPI_API_KEY: str = ''
	CURRENCYAPI_BASE_URL: str = 'https://api.currencyapi.com'

	# Rate resolution
	CACHE_TTL_SECONDS: float = 3600
	NETWORK_TIMEOUT_SECONDS: float = 20
	FETCH_MAX_ATTEMPTS: int = 5
	BACKOFF_BASE_DELAY: float = 0.5
	BACKOFF_MAX_DELAY: float | None = None
	SURFACE_FETCH_ERRORS: bool = False
	RATE_CACHE_BACKEND: Literal['database', 'redis'] = 'database'

	# Application
	APP_NAME: str = 'Currency Converter API'
	DEBUG: bool = True
	LOG_LEVEL: str = 'INFO'
	LOG_DIRECTORY: str | None = None

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
