class CurrencyException(Exception):
	pass


class InvalidCurrencyCode(CurrencyException):
	pass


class InvalidAmount(CurrencyException):
	pass


class ConfigurationError(CurrencyException):
	pass


class CacheError(CurrencyException):
	pass


class NoCacheAvailable(CurrencyException):
	pass


class ProviderError(CurrencyException):
	"""Failure while obtaining data from the remote pricing source."""

	retryable = False


class NetworkError(ProviderError):
	retryable = True

	def __init__(self, message: str, status_code: int | None = None):
		super().__init__(message)
		self.status_code = status_code


class ClientRequestError(ProviderError):
	def __init__(self, message: str, status_code: int):
		super().__init__(message)
		self.status_code = status_code


class DataError(ProviderError):
	pass


class InvalidRequestError(ProviderError):
	pass


class RetriesExhaustedError(ProviderError):
	def __init__(self, attempts: int, last_error: BaseException | None):
		super().__init__(f'Giving up after {attempts} attempts: {last_error}')
		self.attempts = attempts
		self.last_error = last_error
