"""
Generation Client - Gemini text generation behind a narrow contract.

Both the AI recommendation client and the rate-quote client talk to the
generation service through this class:

    generate(prompt, response_format="json") -> raw response text

Architecture:
- API: Google Gen AI Python SDK (google-genai), async surface (client.aio)
- Model: Gemini 2.5 Flash (configurable via GEMINI_MODEL)
- Temperature: 0.1 (near-deterministic structured output)
- Timeout: every call is wrapped in asyncio.wait_for (default 15s)
- Retries: none. One call per invocation; callers decide what a failure means.

Upstream failures are normalized into GenerationError with a kind:
- MISSING_CREDENTIAL: no API key configured
- RATE_LIMITED: HTTP 429 (retry hint parsed from the error when present)
- CREDENTIAL_REJECTED: 401/403, or 400 complaining about the API key
  (includes keys reported as leaked)
- TRANSPORT: everything else (network, other status codes, timeout, empty text)
"""

import asyncio
import logging
import re
from enum import Enum
from typing import Optional

from google import genai
from google.genai import errors, types

logger = logging.getLogger(__name__)


class GenerationErrorKind(str, Enum):
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    RATE_LIMITED = "RATE_LIMITED"
    CREDENTIAL_REJECTED = "CREDENTIAL_REJECTED"
    TRANSPORT = "TRANSPORT"


class GenerationError(Exception):
    """Normalized failure of a generation call."""

    def __init__(
        self,
        kind: GenerationErrorKind,
        message: str,
        status_code: Optional[int] = None,
        retry_after_seconds: Optional[float] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.retry_after_seconds = retry_after_seconds


_RETRY_PATTERNS = [
    re.compile(r"retry in ([\d.]+)\s*s", re.IGNORECASE),
    re.compile(r"""['"]retryDelay['"]\s*:\s*['"]([\d.]+)s['"]"""),
]

_CREDENTIAL_HINTS = ("api key", "api_key", "leaked", "permission denied")


def extract_retry_after(text: str) -> Optional[float]:
    """Pull a retry delay in seconds out of an upstream error message."""
    for pattern in _RETRY_PATTERNS:
        match = pattern.search(text or "")
        if match:
            try:
                return float(match.group(1))
            except ValueError:
                continue
    return None


def classify_api_error(error: errors.APIError) -> GenerationError:
    """Map a google-genai APIError to a GenerationError."""
    code = getattr(error, "code", None)
    text = str(error)
    lowered = text.lower()

    if code == 429:
        return GenerationError(
            GenerationErrorKind.RATE_LIMITED,
            "Generation service rate limit reached (429)",
            status_code=code,
            retry_after_seconds=extract_retry_after(text),
        )

    if code in (401, 403) or (code == 400 and any(hint in lowered for hint in _CREDENTIAL_HINTS)):
        reason = "reported as leaked" if "leaked" in lowered else "rejected"
        return GenerationError(
            GenerationErrorKind.CREDENTIAL_REJECTED,
            f"Generation API key {reason} ({code})",
            status_code=code,
        )

    return GenerationError(
        GenerationErrorKind.TRANSPORT,
        f"Generation service error ({code})",
        status_code=code,
    )


class GenerationClient:
    """
    Thin async wrapper around the Gemini client.

    The underlying genai.Client is created lazily on first use, so building
    a GenerationClient never touches the network or fails on a missing key.

    Args:
        api_key: Gemini API key ("" means not configured)
        model: Model name
        timeout_seconds: Upper bound for one generate call
        temperature: Sampling temperature
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout_seconds: float = 15.0,
        temperature: float = 0.1,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self._client: Optional[genai.Client] = None

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> Optional[genai.Client]:
        """Lazy initialization of the Gemini client."""
        if self._client is not None:
            return self._client

        if not self.api_key:
            logger.warning(
                "GEMINI_API_KEY not configured. Generation calls will fail and "
                "callers will use their fallbacks."
            )
            return None

        self._client = genai.Client(api_key=self.api_key)
        logger.info("Gemini client initialized successfully")
        return self._client

    async def generate(
        self,
        prompt: str,
        response_format: str = "json",
        system_instruction: Optional[str] = None,
    ) -> str:
        """
        Issue exactly one generation request and return the raw text.

        Args:
            prompt: User prompt
            response_format: "json" requests application/json output, "text" plain text
            system_instruction: Optional system prompt

        Returns:
            Raw response text (may still be wrapped in Markdown fences)

        Raises:
            GenerationError: on any failure, including timeout
        """
        client = self._get_client()
        if client is None:
            raise GenerationError(
                GenerationErrorKind.MISSING_CREDENTIAL,
                "Generation API key is not configured",
            )

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            response_mime_type="application/json" if response_format == "json" else "text/plain",
        )

        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=config,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(f"Generation call timed out after {self.timeout_seconds}s")
            raise GenerationError(
                GenerationErrorKind.TRANSPORT,
                f"Generation service did not answer within {self.timeout_seconds:g}s",
            )
        except errors.APIError as e:
            generation_error = classify_api_error(e)
            logger.error(f"Generation call failed: kind={generation_error.kind.value}, code={e.code}")
            raise generation_error from e
        except Exception as e:
            logger.error(f"Generation call failed with transport error: {type(e).__name__}")
            raise GenerationError(
                GenerationErrorKind.TRANSPORT,
                f"Generation service unreachable: {type(e).__name__}",
            ) from e

        text = (response.text or "").strip()
        if not text:
            logger.error("Empty text in Gemini response")
            raise GenerationError(GenerationErrorKind.TRANSPORT, "Empty response from generation service")

        return text
