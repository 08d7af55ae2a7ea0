from voltstore.agents.rates.prompts import (
    RATE_QUOTE_CURRENCIES,
    RATE_QUOTE_SYSTEM_PROMPT,
    build_rate_quote_prompt,
)

__all__ = [
    "RATE_QUOTE_CURRENCIES",
    "RATE_QUOTE_SYSTEM_PROMPT",
    "build_rate_quote_prompt",
]
