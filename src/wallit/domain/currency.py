"""Currency normalization applied to movements at write time."""

from decimal import Decimal
from typing import Optional

from wallit.domain.entities import Currency, LOCAL_CURRENCY, NormalizedAmount
from wallit.domain.exchange_rate import ExchangeRateService
from wallit.utils.amount_parser import round_half_up


def needs_rate(input_currency: Currency, account_currency: Currency) -> bool:
    """Whether normalizing between these currencies requires a rate."""
    return Currency(input_currency) == Currency.USD or Currency(account_currency) == Currency.USD


def usd_to_local(amount_usd: int, rate: int) -> int:
    return round_half_up(Decimal(amount_usd) * rate / 100)


def local_to_usd(amount: int, rate: int) -> int:
    return round_half_up(Decimal(amount) * 100 / rate)


def normalize_amount(
    amount: int,
    input_currency: Currency,
    account_currency: Currency,
    rate: Optional[int] = None,
) -> NormalizedAmount:
    """Compute the stored amount slots for an amount entered in input_currency.

    - USD input: ``amount_usd`` is the input and the local slot holds its
      converted value.
    - Local input into a USD account: the local slot keeps the input and
      ``amount_usd`` holds its converted value.
    - Local input into a local account: no conversion, no rate recorded.

    Raises:
        ValueError: If a rate is required but missing or not positive
    """
    input_currency = Currency(input_currency)
    account_currency = Currency(account_currency)

    if not needs_rate(input_currency, account_currency):
        return NormalizedAmount(amount=amount)

    if rate is None or rate <= 0:
        raise ValueError("A positive exchange rate is required for USD amounts")

    if input_currency == Currency.USD:
        return NormalizedAmount(amount=usd_to_local(amount, rate), amount_usd=amount, exchange_rate=rate)
    return NormalizedAmount(amount=amount, amount_usd=local_to_usd(amount, rate), exchange_rate=rate)


def convert(amount: int, from_currency: Currency, to_currency: Currency, rate: int) -> int:
    """Convert an amount between the local currency and USD (display only)."""
    from_currency = Currency(from_currency)
    to_currency = Currency(to_currency)
    if from_currency == to_currency:
        return amount
    if from_currency == Currency.USD:
        return usd_to_local(amount, rate)
    return local_to_usd(amount, rate)


class CurrencyNormalizer:
    """Normalizes amounts, fetching a rate only when one is needed."""

    def __init__(self, rates: ExchangeRateService):
        self.rates = rates

    def current_rate(self) -> int:
        return self.rates.get_rate(Currency.USD, LOCAL_CURRENCY)

    def normalize(self, amount: int, input_currency: Currency, account_currency: Currency) -> NormalizedAmount:
        rate = None
        if needs_rate(input_currency, account_currency):
            rate = self.current_rate()
        return normalize_amount(amount, input_currency, account_currency, rate)

    def convert(self, amount: int, from_currency: Currency, to_currency: Currency) -> int:
        if Currency(from_currency) == Currency(to_currency):
            return amount
        return convert(amount, from_currency, to_currency, self.current_rate())
