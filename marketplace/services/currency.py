"""
Currency display conversion over a static exchange-rate table.

Conversions are memoized per (amount, from, to). Nothing here touches a
stored listing: callers receive new values and decide where to show them.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from functools import lru_cache
from typing import Dict, Optional, Union
from marketplace.models.listing import Currency
from marketplace.utils.exceptions import BadRequestError
import logging

logger = logging.getLogger(__name__)

SUPPORTED_CURRENCIES = [Currency.RON, Currency.EUR, Currency.USD, Currency.GBP]

EXCHANGE_RATES: Dict[Currency, Dict[Currency, Decimal]] = {
    Currency.RON: {Currency.EUR: Decimal("0.2"), Currency.USD: Decimal("0.22"), Currency.GBP: Decimal("0.17")},
    Currency.EUR: {Currency.RON: Decimal("5.0"), Currency.USD: Decimal("1.1"), Currency.GBP: Decimal("0.85")},
    Currency.USD: {Currency.RON: Decimal("4.5"), Currency.EUR: Decimal("0.91"), Currency.GBP: Decimal("0.77")},
    Currency.GBP: {Currency.RON: Decimal("5.9"), Currency.EUR: Decimal("1.18"), Currency.USD: Decimal("1.3")},
}

CURRENCY_SYMBOLS: Dict[Currency, str] = {
    Currency.RON: "lei",
    Currency.EUR: "€",
    Currency.USD: "$",
    Currency.GBP: "£",
}

_CENTS = Decimal("0.01")


def _to_amount(amount: Union[Decimal, float, int]) -> Decimal:
    value = Decimal(str(amount))
    if not value.is_finite():
        raise BadRequestError(f"Invalid amount '{amount}'")
    return value


def parse_currency(value: Union[str, Currency, None]) -> Optional[Currency]:
    """
    Turn a query value into a Currency.

    Raises:
        BadRequestError: For anything outside RON, EUR, USD and GBP
    """
    if value is None or value == "":
        return None
    if isinstance(value, Currency):
        return value
    try:
        return Currency(value.strip().upper())
    except ValueError:
        supported = ", ".join(c.value for c in SUPPORTED_CURRENCIES)
        raise BadRequestError(f"Unsupported currency '{value}'. Supported: {supported}")


def get_rate(from_currency: Currency, to_currency: Currency) -> Decimal:
    """Direct rate when the table has one, otherwise through RON."""
    if from_currency == to_currency:
        return Decimal("1")

    direct = EXCHANGE_RATES.get(from_currency, {}).get(to_currency)
    if direct is not None:
        return direct

    to_ron = EXCHANGE_RATES[from_currency][Currency.RON]
    from_ron = EXCHANGE_RATES[Currency.RON][to_currency]
    return to_ron * from_ron


@lru_cache(maxsize=1024)
def _convert_cached(amount: Decimal, from_currency: Currency, to_currency: Currency) -> Decimal:
    return (amount * get_rate(from_currency, to_currency)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def convert_price(
    amount: Union[Decimal, float, int],
    from_currency: Currency,
    to_currency: Currency
) -> Decimal:
    """
    Convert an amount for display.

    Args:
        amount: Stored price
        from_currency: Currency the price is stored in
        to_currency: Currency to display

    Returns:
        Converted amount rounded to cents; the same amount when currencies match
    """
    value = _to_amount(amount)
    if from_currency == to_currency:
        return value
    try:
        return _convert_cached(value, from_currency, to_currency)
    except InvalidOperation:
        raise BadRequestError(f"Amount {amount} is too large to convert")


def _group_thousands(integer_part: str) -> str:
    return f"{int(integer_part):,}".replace(",", ".")


def format_price(amount: Union[Decimal, float, int], currency: Currency) -> str:
    """
    Romanian style formatting: '.' groups thousands and ',' separates
    decimals. Amounts from 1000 up are shown without decimals.
    """
    value = _to_amount(amount)
    try:
        if abs(value) >= 1000:
            number = _group_thousands(str(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))
        else:
            rounded = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
            integer_part, _, decimals = f"{rounded:.2f}".partition(".")
            decimals = decimals.rstrip("0")
            number = _group_thousands(integer_part) + (f",{decimals}" if decimals else "")
    except InvalidOperation:
        raise BadRequestError(f"Amount {amount} is too large to format")

    symbol = CURRENCY_SYMBOLS[currency]
    if currency == Currency.RON:
        return f"{number} {symbol}"
    return f"{symbol}{number}"


def rates_table() -> Dict[str, Dict[str, float]]:
    return {
        source.value: {target.value: float(rate) for target, rate in targets.items()}
        for source, targets in EXCHANGE_RATES.items()
    }


def clear_conversion_cache() -> None:
    _convert_cached.cache_clear()


def conversion_cache_info():
    return _convert_cached.cache_info()
