"""
Exchange-rate quote prompt.

The rate cache asks the generation service for "1 EUR in DKK, NOK, SEK,
USD" and expects a flat JSON object of positive numbers.
"""

from typing import Sequence

RATE_QUOTE_CURRENCIES = ("DKK", "NOK", "SEK", "USD")

RATE_QUOTE_SYSTEM_PROMPT = """You are a currency data service.
Answer with current mid-market exchange rates only.
Return only a JSON object of numbers. No markdown, no explanatory text."""


def build_rate_quote_prompt(currencies: Sequence[str] = RATE_QUOTE_CURRENCIES) -> str:
    """Prompt asking for the value of 1 EUR in each currency."""
    codes = ", ".join(currencies)
    example = ", ".join(f'"{code}": 0.0' for code in currencies)
    return (
        f"How much is 1 EUR in {codes}?\n"
        f"Return exactly this JSON shape with numeric values: {{{example}}}"
    )
