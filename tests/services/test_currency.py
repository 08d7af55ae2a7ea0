"""
Tests for currency conversion and price formatting.
"""

import pytest

from voltstore.schemas.configuration import Language
from voltstore.schemas.rates import CurrencyCode, ExchangeRates
from voltstore.services.currency import convert, currency_for_language, format_price
from voltstore.utils.constants import STABLE_RATES


@pytest.fixture
def rates():
    return ExchangeRates(**STABLE_RATES)


class TestConvert:

    def test_eur_is_identity(self, rates):
        assert convert(1234.5, CurrencyCode.EUR, rates) == 1234.5

    def test_multiplies_by_rate(self, rates):
        assert convert(100, "DKK", rates) == pytest.approx(746.0)

    def test_none_amount_is_zero(self, rates):
        assert convert(None, CurrencyCode.SEK, rates) == 0

    def test_unknown_currency_converts_at_one(self, rates):
        assert convert(250, "GBP", rates) == 250


class TestFormatPrice:

    def test_storefront_example_english(self, rates):
        assert format_price(3300, CurrencyCode.DKK, rates, Language.EN) == "DKK 24,618"

    def test_nordic_grouping(self, rates):
        assert format_price(3300, CurrencyCode.DKK, rates, Language.DA) == "DKK 24.618"
        assert format_price(3300, CurrencyCode.NOK, rates, Language.NO) == "NOK 37.554"
        assert format_price(3300, CurrencyCode.SEK, rates, Language.SV) == "SEK 37.059"

    def test_euro_and_dollar_symbols(self, rates):
        assert format_price(3300, CurrencyCode.EUR, rates) == "€3,300"
        assert format_price(1000, CurrencyCode.USD, rates) == "$1,080"

    def test_rounds_half_up(self):
        rates = ExchangeRates(DKK=2.5, NOK=1.0, SEK=1.0, USD=1.0)

        assert format_price(1, CurrencyCode.DKK, rates) == "DKK 3"
        assert format_price(0.49, CurrencyCode.EUR, rates) == "€0"

    def test_no_decimals_and_no_grouping_below_thousand(self, rates):
        assert format_price(999.4, CurrencyCode.EUR, rates) == "€999"

    def test_none_amount_formats_as_zero(self, rates):
        assert format_price(None, CurrencyCode.EUR, rates) == "€0"

    def test_unknown_currency_uses_euro_symbol(self, rates):
        assert format_price(1500, "GBP", rates) == "€1,500"

    def test_unknown_language_groups_like_english(self, rates):
        assert format_price(1500, CurrencyCode.EUR, rates, "fr") == "€1,500"

    def test_very_large_amounts_are_formatted(self, rates):
        assert format_price(1e30, CurrencyCode.EUR, rates) == "€1" + ",000" * 10
        assert format_price(1e308, CurrencyCode.EUR, rates) == "€100" + ",000" * 102

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_amount_is_rejected(self, rates, amount):
        with pytest.raises(ValueError):
            format_price(amount, CurrencyCode.EUR, rates)

    def test_conversion_overflow_is_rejected(self, rates):
        with pytest.raises(ValueError):
            format_price(1e308, CurrencyCode.DKK, rates)

    def test_tracks_the_rates_it_is_given(self):
        before = ExchangeRates(DKK=7.0, NOK=11.0, SEK=11.0, USD=1.0)
        after = ExchangeRates(DKK=8.0, NOK=11.0, SEK=11.0, USD=1.0)

        assert format_price(1000, CurrencyCode.DKK, before) == "DKK 7,000"
        assert format_price(1000, CurrencyCode.DKK, after) == "DKK 8,000"


@pytest.mark.parametrize("language, currency", [
    (Language.EN, CurrencyCode.EUR),
    (Language.DA, CurrencyCode.DKK),
    (Language.NO, CurrencyCode.NOK),
    (Language.SV, CurrencyCode.SEK),
    ("xx", CurrencyCode.EUR),
])
def test_currency_for_language(language, currency):
    assert currency_for_language(language) == currency


@pytest.mark.parametrize("language", list(Language))
def test_displayed_amount_matches_rounded_conversion(rates, language):
    expected = round(convert(12_345, CurrencyCode.USD, rates))

    formatted = format_price(12_345, CurrencyCode.USD, rates, language)

    assert int(formatted.lstrip("$").replace(",", "").replace(".", "")) == expected
