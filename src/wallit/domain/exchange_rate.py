"""Exchange rate cache backed by the exchange_rates table."""

from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

import requests

from wallit.config import DEFAULT_RATE_API_URL
from wallit.database.base import Database
from wallit.domain.entities import Currency, ExchangeRate
from wallit.domain.errors import ConflictError, ExchangeRateUnavailableError
from wallit.logging_setup import get_logger
from wallit.utils.amount_parser import round_half_up
from wallit.utils.date_parser import utc_now

logger = get_logger("wallit.exchange_rate")

CACHE_MAX_AGE = timedelta(hours=24)
IDENTITY_RATE = 100


class RateSourceError(RuntimeError):
    """Raised when the external rate source cannot provide a rate."""


class RateSource(Protocol):
    """Anything that can fetch a live rate."""

    name: str

    def fetch_rate(self, from_currency: Currency, to_currency: Currency) -> float:
        ...


class OpenErApiRateSource:
    """Rate source reading the open.er-api.com latest-rates endpoint.

    The endpoint answers one GET with ``{"rates": {"CLP": 950.5, ...}}``
    relative to the base currency in the URL.
    """

    name = "open.er-api.com"

    def __init__(
        self,
        url: str = DEFAULT_RATE_API_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_rate(self, from_currency: Currency, to_currency: Currency) -> float:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise RateSourceError(f"Exchange rate request failed: {e}") from e

        base = payload.get("base_code", Currency.USD.value) if isinstance(payload, dict) else None
        rates = payload.get("rates") if isinstance(payload, dict) else None
        if not isinstance(rates, dict):
            raise RateSourceError("Exchange rate response has no rates")
        if base != Currency(from_currency).value:
            raise RateSourceError(f"Exchange rate response is based on {base}, not {Currency(from_currency).value}")

        value = rates.get(Currency(to_currency).value)
        if not isinstance(value, (int, float)) or value <= 0:
            raise RateSourceError(f"{Currency(to_currency).value} rate not found in response")
        return float(value)


def cache_window_id(from_currency: Currency, to_currency: Currency, now: datetime) -> str:
    """Deterministic cache row ID for the UTC minute containing ``now``."""
    return f"{Currency(from_currency).value}-{Currency(to_currency).value}-{now:%Y%m%d%H%M}"


class ExchangeRateService:
    """Service returning USD->local rates with a 24h database cache.

    Rates are integers with two implied decimals (950.50 -> 95050).
    """

    def __init__(
        self,
        db: Database,
        source: Optional[RateSource] = None,
        clock: Callable[[], datetime] = utc_now,
        max_age: timedelta = CACHE_MAX_AGE,
    ):
        """Initialize exchange rate service.

        Args:
            db: Database instance
            source: Live rate source, defaults to OpenErApiRateSource
            clock: Returns the current aware UTC time
            max_age: Age below which a cached rate is returned without fetching
        """
        self.db = db
        self.source = source if source is not None else OpenErApiRateSource()
        self.clock = clock
        self.max_age = max_age

    def get_cached_rate(
        self, from_currency: Currency = Currency.USD, to_currency: Currency = Currency.CLP
    ) -> Optional[ExchangeRate]:
        """Latest cached rate of any age, or None."""
        return self.db.get_latest_exchange_rate(Currency(from_currency).value, Currency(to_currency).value)

    def get_rate(self, from_currency: Currency = Currency.USD, to_currency: Currency = Currency.CLP) -> int:
        """Return the current rate for a currency pair.

        A cached rate younger than ``max_age`` is returned directly. Otherwise
        the source is queried and the result cached under a per-minute ID;
        when a concurrent caller already cached that minute, its row wins.
        If the source fails, the newest cached rate is returned regardless of
        its age.

        Raises:
            ExchangeRateUnavailableError: If the source fails and nothing is cached
        """
        from_currency = Currency(from_currency)
        to_currency = Currency(to_currency)
        if from_currency == to_currency:
            return IDENTITY_RATE

        now = self.clock()
        cached = self.get_cached_rate(from_currency, to_currency)
        if cached is not None and now - cached.fetched_at < self.max_age:
            logger.debug("Using cached %s->%s rate %s", from_currency.value, to_currency.value, cached.rate)
            return cached.rate

        try:
            raw_rate = self.source.fetch_rate(from_currency, to_currency)
        except RateSourceError as e:
            if cached is not None:
                logger.warning("Rate fetch failed, using stale rate from %s: %s", cached.fetched_at, e)
                return cached.rate
            raise ExchangeRateUnavailableError(
                f"Could not fetch {from_currency.value}->{to_currency.value} exchange rate"
            ) from e

        rate = round_half_up(raw_rate * 100)
        rate_id = cache_window_id(from_currency, to_currency, now)
        try:
            self.db.insert_exchange_rate(
                rate_id=rate_id,
                from_currency=from_currency.value,
                to_currency=to_currency.value,
                rate=rate,
                source=self.source.name,
                fetched_at=now,
            )
        except ConflictError:
            existing = self.db.get_exchange_rate(rate_id)
            if existing is None:
                raise
            logger.info("Rate %s already cached by a concurrent request", rate_id)
            return existing.rate

        logger.info("Fetched %s->%s rate %s", from_currency.value, to_currency.value, rate)
        return rate
