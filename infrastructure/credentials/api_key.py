from config.settings import Settings


class StaticAPIKeyProvider:
	def __init__(self, key: str | None):
		self._key = key

	def load_key(self) -> str | None:
		return self._key


class SettingsAPIKeyProvider:
	"""Reads the currencyapi.com key from application settings (env / .env)."""

	def __init__(self, settings: Settings):
		self._settings = settings

	def load_key(self) -> str | None:
		return self._settings.CURRENCYAPI_API_KEY or None
