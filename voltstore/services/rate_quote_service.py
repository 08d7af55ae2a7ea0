"""
Rate Quote Service - EUR exchange rates from the generation service.

One call returns a fresh {DKK, NOK, SEK, USD} quote. Failures are raised
as RateQuoteError with a kind the rate cache maps onto its states:

- RATE_LIMITED -> Suppressed
- BLOCKED -> Blocked (credential missing, rejected or reported unsafe)
- TRANSPORT / INVALID_RESPONSE -> state unchanged, transient error
"""

import json
import logging
import math
from enum import Enum
from typing import Any, Dict, Optional

from voltstore.agents.rates.prompts import (
    RATE_QUOTE_CURRENCIES,
    RATE_QUOTE_SYSTEM_PROMPT,
    build_rate_quote_prompt,
)
from voltstore.services.generation_client import (
    GenerationClient,
    GenerationError,
    GenerationErrorKind,
)
from voltstore.utils.constants import DEFAULT_USD_RATE
from voltstore.utils.llm_output import strip_code_fences

logger = logging.getLogger(__name__)

REQUIRED_CURRENCIES = ("DKK", "NOK", "SEK")


class RateQuoteErrorKind(str, Enum):
    RATE_LIMITED = "RATE_LIMITED"
    BLOCKED = "BLOCKED"
    TRANSPORT = "TRANSPORT"
    INVALID_RESPONSE = "INVALID_RESPONSE"


class RateQuoteError(Exception):
    def __init__(
        self,
        kind: RateQuoteErrorKind,
        message: str,
        retry_after_seconds: Optional[float] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.retry_after_seconds = retry_after_seconds


_GENERATION_ERROR_KINDS: Dict[GenerationErrorKind, RateQuoteErrorKind] = {
    GenerationErrorKind.MISSING_CREDENTIAL: RateQuoteErrorKind.BLOCKED,
    GenerationErrorKind.CREDENTIAL_REJECTED: RateQuoteErrorKind.BLOCKED,
    GenerationErrorKind.RATE_LIMITED: RateQuoteErrorKind.RATE_LIMITED,
    GenerationErrorKind.TRANSPORT: RateQuoteErrorKind.TRANSPORT,
}


def _positive_rate(data: Dict[str, Any], code: str) -> float:
    value = data.get(code)
    if isinstance(value, bool):
        raise RateQuoteError(RateQuoteErrorKind.INVALID_RESPONSE, f"{code} rate is not numeric")
    try:
        rate = float(value)
    except (TypeError, ValueError, OverflowError):
        raise RateQuoteError(RateQuoteErrorKind.INVALID_RESPONSE, f"{code} rate is missing or not numeric")
    if not math.isfinite(rate) or rate <= 0:
        raise RateQuoteError(RateQuoteErrorKind.INVALID_RESPONSE, f"{code} rate must be positive")
    return rate


def parse_rate_quote(content: str) -> Dict[str, float]:
    """
    Parse a rate quote. DKK, NOK and SEK are required; USD defaults to 1.08.

    Raises:
        RateQuoteError: INVALID_RESPONSE on any malformed payload
    """
    try:
        data = json.loads(strip_code_fences(content))
    except (ValueError, RecursionError):
        raise RateQuoteError(RateQuoteErrorKind.INVALID_RESPONSE, "Rate quote is not valid JSON")

    if not isinstance(data, dict):
        raise RateQuoteError(RateQuoteErrorKind.INVALID_RESPONSE, "Rate quote is not a JSON object")

    rates = {code: _positive_rate(data, code) for code in REQUIRED_CURRENCIES}
    rates["USD"] = _positive_rate(data, "USD") if data.get("USD") is not None else DEFAULT_USD_RATE
    return rates


class RateQuoteClient:
    """
    Fetches EUR exchange rates through the generation service.

    Args:
        generation_client: Shared GenerationClient
    """

    def __init__(self, generation_client: GenerationClient):
        self.generation_client = generation_client

    @property
    def credential(self) -> str:
        return self.generation_client.api_key

    async def fetch_rates(self) -> Dict[str, float]:
        """
        Request one quote for 1 EUR in DKK, NOK, SEK and USD.

        Returns:
            {"DKK": ..., "NOK": ..., "SEK": ..., "USD": ...}

        Raises:
            RateQuoteError: on any failure
        """
        try:
            content = await self.generation_client.generate(
                build_rate_quote_prompt(RATE_QUOTE_CURRENCIES),
                response_format="json",
                system_instruction=RATE_QUOTE_SYSTEM_PROMPT,
            )
        except GenerationError as e:
            raise RateQuoteError(
                _GENERATION_ERROR_KINDS[e.kind],
                e.message,
                retry_after_seconds=e.retry_after_seconds,
            ) from e

        rates = parse_rate_quote(content)
        logger.info("Rate quote received")
        return rates
