import contextlib
import logging
import math

import httpx

from domain.exceptions.currency import (
    ClientRequestError,
    ConfigurationError,
    DataError,
    InvalidRequestError,
    NetworkError,
)
from domain.interfaces.currency import APIKeyProvider
from domain.models.currency import SupportedCurrency

logger = logging.getLogger(__name__)


class CurrencyAPIProvider:
    """currencyapi.com v3 client. One HTTP request per call, no retries."""

    BASE_URL = "https://api.currencyapi.com"

    def __init__(
        self,
        key_provider: APIKeyProvider,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 20,
    ):
        api_key = key_provider.load_key()
        if not api_key:
            raise ConfigurationError("CurrencyAPI key is missing or empty")

        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def name(self) -> str:
        return "currencyapi.com"

    async def _request(self, endpoint: str, params: dict | None = None) -> dict:
        url = f"{self.base_url}/v3/{endpoint}"
        query = {"apikey": self.api_key, **(params or {})}

        try:
            response = await self._client.get(url, params=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            msg = None
            with contextlib.suppress(Exception):
                msg = e.response.json().get("message")
            detail = f"CurrencyAPI HTTP error {status_code}: {msg or e.response.text[:200]}"
            if status_code >= 500:
                raise NetworkError(detail, status_code=status_code) from e
            raise ClientRequestError(detail, status_code=status_code) from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidRequestError(f"CurrencyAPI request could not be built: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"CurrencyAPI request failed: {e.__class__.__name__}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise DataError(f"CurrencyAPI returned malformed JSON: {e}") from e

        if not isinstance(data, dict):
            raise DataError("CurrencyAPI returned an unexpected payload")
        return data

    @staticmethod
    def _check_code(code: str) -> None:
        if not (code.isascii() and code.isalnum()):
            raise InvalidRequestError(f"Cannot build a request for currency code {code!r}")

    async def fetch_rate(self, base_currency: str, quote_currency: str) -> float:
        self._check_code(base_currency)
        self._check_code(quote_currency)

        logger.debug(f"Requesting {base_currency}/{quote_currency} from {self.name}")
        data = await self._request(
            "latest",
            {"base_currency": base_currency, "currencies": quote_currency},
        )

        try:
            rate_value = data["data"][quote_currency]["value"]
        except (KeyError, TypeError) as e:
            raise DataError(f"Rate for {quote_currency} not found in CurrencyAPI response") from e

        try:
            rate = float(rate_value)
        except (TypeError, ValueError) as e:
            raise DataError(f"Rate for {quote_currency} is not a number: {rate_value!r}") from e

        if not math.isfinite(rate) or rate <= 0:
            raise DataError(f"Rate for {quote_currency} must be positive, got {rate_value!r}")
        return rate

    async def fetch_supported_currencies(self) -> list[SupportedCurrency]:
        data = await self._request("currencies")
        currencies = data.get("data")
        if not isinstance(currencies, dict):
            raise DataError("Currency list missing from CurrencyAPI response")

        return [
            SupportedCurrency(
                code=info.get("code", code),
                name=info.get("name"),
            )
            for code, info in currencies.items()
            if isinstance(info, dict)
        ]

    async def close(self) -> None:
        await self._client.aclose()
