"""
Currency conversion and price formatting.

Pure, synchronous helpers: every stored price is in EUR and is converted
with the latest rates from the rate cache at display time. Displayed
amounts are whole units (no cents/øre), rounded half away from zero.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Optional, Union

from voltstore.schemas.configuration import Language
from voltstore.schemas.rates import CurrencyCode, ExchangeRates

CURRENCY_SYMBOLS: Dict[CurrencyCode, str] = {
    CurrencyCode.EUR: "€",
    CurrencyCode.USD: "$",
    CurrencyCode.DKK: "DKK ",
    CurrencyCode.NOK: "NOK ",
    CurrencyCode.SEK: "SEK ",
}

# Thousands separator per locale ("en" groups like en-US, the Nordic
# locales like de-DE)
GROUPING_SEPARATORS: Dict[Language, str] = {
    Language.EN: ",",
    Language.DA: ".",
    Language.NO: ".",
    Language.SV: ".",
}

# Enough digits to round any finite float to whole units
QUANTIZE_PRECISION = 400

LANGUAGE_CURRENCIES: Dict[Language, CurrencyCode] = {
    Language.EN: CurrencyCode.EUR,
    Language.DA: CurrencyCode.DKK,
    Language.NO: CurrencyCode.NOK,
    Language.SV: CurrencyCode.SEK,
}


def _as_language(language: Union[Language, str, None]) -> Language:
    try:
        return Language(language)
    except ValueError:
        return Language.EN


def currency_for_language(language: Union[Language, str]) -> CurrencyCode:
    """Default display currency for a locale (English shows EUR)."""
    return LANGUAGE_CURRENCIES[_as_language(language)]


def convert(
    amount_eur: Optional[float],
    currency: Union[CurrencyCode, str],
    rates: ExchangeRates,
) -> float:
    """
    Convert a EUR amount into `currency`.

    None is treated as 0. A currency missing from the rates converts at
    1.0 (as if it were EUR).
    """
    return float(amount_eur or 0) * rates.rate_for(currency)


def _group_digits(value: int, separator: str) -> str:
    sign = "-" if value < 0 else ""
    return sign + f"{abs(value):,}".replace(",", separator)


def format_price(
    amount_eur: Optional[float],
    currency: Union[CurrencyCode, str],
    rates: ExchangeRates,
    language: Union[Language, str] = Language.EN,
) -> str:
    """
    Render a EUR amount in `currency` for display.

    Examples:
        >>> format_price(3300, "DKK", rates, "en")   # rates.DKK == 7.46
        'DKK 24,618'
        >>> format_price(3300, "DKK", rates, "da")
        'DKK 24.618'

    Raises:
        ValueError: when the converted amount is NaN or infinite
    """
    converted = convert(amount_eur, currency, rates)
    if not math.isfinite(converted):
        raise ValueError(f"Cannot format a non-finite amount: {converted}")

    with localcontext() as ctx:
        ctx.prec = QUANTIZE_PRECISION
        rounded = int(Decimal(repr(converted)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    try:
        symbol = CURRENCY_SYMBOLS[CurrencyCode(currency)]
    except ValueError:
        symbol = CURRENCY_SYMBOLS[CurrencyCode.EUR]

    separator = GROUPING_SEPARATORS[_as_language(language)]
    return f"{symbol}{_group_digits(rounded, separator)}"
