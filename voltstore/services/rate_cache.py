"""
Rate Cache - EUR exchange rates with TTL, rate-limit suppression and blocking.

The cache always has a usable rate set: persisted rates when present,
built-in constants otherwise. Refreshing is opportunistic and never blocks
readers.

States (derived, never stored directly):
- FRESH: now - rates.timestamp < cache_duration
- STALE: TTL expired, eligible for refresh
- SUPPRESSED: a refresh was rate-limited; now < suppress_until
- BLOCKED: the credential was missing, rejected or reported unsafe

Precedence: BLOCKED > SUPPRESSED > FRESH/STALE.

Transitions on refresh:
- success -> FRESH, rates replaced wholesale, suppression cleared
- rate limited -> SUPPRESSED until now + suppress_duration
- credential problem -> BLOCKED (persisted with a credential fingerprint,
  cleared automatically when the configured credential changes)
- other failure -> unchanged, error kept in memory as last_error

A forced refresh skips the FRESH and SUPPRESSED gates but never BLOCKED.
"""

import asyncio
import hashlib
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from voltstore.schemas.rates import (
    CurrencyCode,
    ExchangeRates,
    RateCacheState,
    RateStatusResponse,
    RefreshOutcome,
)
from voltstore.services.rate_quote_service import (
    RateQuoteClient,
    RateQuoteError,
    RateQuoteErrorKind,
)
from voltstore.services.storage import LocalStateStore
from voltstore.utils.constants import STABLE_RATES, STORAGE_KEYS

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DURATION_MS = 24 * 60 * 60 * 1000
DEFAULT_SUPPRESS_DURATION_MS = 4 * 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


def credential_fingerprint(credential: str) -> str:
    """Short non-reversible id of a credential, safe to persist and log."""
    return hashlib.sha256(credential.encode("utf-8")).hexdigest()[:16]


class RateCache:
    """
    Process-wide exchange-rate cache.

    Args:
        store: Durable key/value store
        quote_client: Rate-quote collaborator
        cache_duration_ms: TTL of a fetched rate set
        suppress_duration_ms: Back-off after a rate-limited refresh
        clock: Returns the current epoch-ms time (injectable for tests)
    """

    def __init__(
        self,
        store: LocalStateStore,
        quote_client: RateQuoteClient,
        cache_duration_ms: int = DEFAULT_CACHE_DURATION_MS,
        suppress_duration_ms: int = DEFAULT_SUPPRESS_DURATION_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.quote_client = quote_client
        self.cache_duration_ms = cache_duration_ms
        self.suppress_duration_ms = suppress_duration_ms
        self.clock = clock

        self._rates = self._load_rates()
        self._suppress_until = self._load_suppress_until()
        self._blocked_reason: Optional[str] = self._load_block()
        self._last_error: Optional[str] = None
        self._refresh_task: Optional[asyncio.Task] = None

        if not quote_client.credential:
            self._blocked_reason = "Rate quote API key is not configured"

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _load_rates(self) -> ExchangeRates:
        saved = self.store.get(STORAGE_KEYS['EXCHANGE_RATES'])
        if saved is not None:
            try:
                return ExchangeRates.model_validate(saved)
            except ValidationError as e:
                logger.warning(f"Ignoring invalid persisted exchange rates: {e.error_count()} errors")
        return ExchangeRates(**STABLE_RATES)

    def _load_suppress_until(self) -> Optional[int]:
        saved = self.store.get(STORAGE_KEYS['RATE_SUPPRESS_UNTIL'])
        if isinstance(saved, (int, float)) and not isinstance(saved, bool) and saved > 0:
            return int(saved)
        return None

    def _load_block(self) -> Optional[str]:
        record = self.store.get(STORAGE_KEYS['RATE_BLOCK'])
        if not isinstance(record, dict):
            return None

        credential = self.quote_client.credential
        if not credential:
            # Blocked anyway for this run, keep the record for when the key returns
            return None

        if record.get("fingerprint") == credential_fingerprint(credential):
            reason = str(record.get("reason") or "Rate quote credential was rejected")
            logger.error(f"Rate refresh blocked from previous run: {reason}")
            return reason

        logger.info("Configured credential changed since rate refresh was blocked, clearing block")
        self.store.delete(STORAGE_KEYS['RATE_BLOCK'])
        return None

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def current_rates(self) -> ExchangeRates:
        """Latest known rates. Never blocks, never raises."""
        return self._rates

    @property
    def blocked(self) -> bool:
        return self._blocked_reason is not None

    @property
    def suppress_until(self) -> Optional[int]:
        return self._suppress_until

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def state(self, now: Optional[int] = None) -> RateCacheState:
        now = self.clock() if now is None else now

        if self.blocked:
            return RateCacheState.BLOCKED
        if self._suppress_until is not None and now < self._suppress_until:
            return RateCacheState.SUPPRESSED
        if now - self._rates.timestamp < self.cache_duration_ms:
            return RateCacheState.FRESH
        return RateCacheState.STALE

    def status(self) -> RateStatusResponse:
        return RateStatusResponse(
            rates=self._rates,
            state=self.state(),
            suppress_until=self._suppress_until,
            blocked=self.blocked,
            blocked_reason=self._blocked_reason,
            last_error=self._last_error,
        )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def update_rates(self, partial: Mapping[str, Any]) -> ExchangeRates:
        """
        Merge a partial rate set into the current rates and re-stamp them.

        EUR stays 1.0 whatever is passed. Unknown keys are ignored.

        Raises:
            ValueError: if a provided rate is not a positive number
        """
        merged: Dict[str, Any] = self._rates.model_dump()
        for code in CurrencyCode:
            if code == CurrencyCode.EUR or partial.get(code.value) is None:
                continue
            merged[code.value] = partial[code.value]
        merged["EUR"] = 1.0
        merged["timestamp"] = self.clock()

        try:
            updated = ExchangeRates.model_validate(merged)
        except ValidationError as e:
            raise ValueError(f"Invalid exchange rates: {e.error_count()} errors") from e

        self._rates = updated
        self.store.set(STORAGE_KEYS['EXCHANGE_RATES'], updated.model_dump())
        logger.info("Exchange rates updated manually")
        return updated

    def _apply_refresh(self, quote: Mapping[str, float], now: int) -> None:
        self._rates = ExchangeRates(
            EUR=1.0,
            DKK=quote["DKK"],
            NOK=quote["NOK"],
            SEK=quote["SEK"],
            USD=quote["USD"],
            timestamp=now,
        )
        self._suppress_until = None
        self._last_error = None
        self.store.update({
            STORAGE_KEYS['EXCHANGE_RATES']: self._rates.model_dump(),
            STORAGE_KEYS['RATE_SUPPRESS_UNTIL']: None,
        })

    def _suppress(self, now: int) -> None:
        self._suppress_until = now + self.suppress_duration_ms
        self.store.set(STORAGE_KEYS['RATE_SUPPRESS_UNTIL'], self._suppress_until)

    def _block(self, reason: str) -> None:
        self._blocked_reason = reason
        credential = self.quote_client.credential
        if credential:
            self.store.set(STORAGE_KEYS['RATE_BLOCK'], {
                "fingerprint": credential_fingerprint(credential),
                "reason": reason,
            })

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh_now(self, force: bool = False) -> RefreshOutcome:
        """
        Refresh the rates if the current state allows it.

        Args:
            force: Manual refresh; bypasses FRESH and SUPPRESSED (not BLOCKED)

        Returns:
            RefreshOutcome describing whether a request was made and the new state
        """
        now = self.clock()
        current = self.state(now)

        if current == RateCacheState.BLOCKED:
            logger.warning(f"Rate refresh skipped: blocked ({self._blocked_reason})")
            return RefreshOutcome(attempted=False, state=current, error=self._blocked_reason)

        if not force and current in (RateCacheState.FRESH, RateCacheState.SUPPRESSED):
            logger.debug(f"Rate refresh skipped: state={current.value}")
            return RefreshOutcome(attempted=False, state=current)

        try:
            quote = await self.quote_client.fetch_rates()
        except RateQuoteError as e:
            return self._handle_failure(e, now)

        self._apply_refresh(quote, now)
        logger.info("Exchange rates refreshed")
        return RefreshOutcome(attempted=True, succeeded=True, state=self.state(now))

    def _handle_failure(self, error: RateQuoteError, now: int) -> RefreshOutcome:
        if error.kind == RateQuoteErrorKind.RATE_LIMITED:
            self._suppress(now)
            logger.warning(f"Rate quote rate-limited, suppressing refresh until {self._suppress_until}")
        elif error.kind == RateQuoteErrorKind.BLOCKED:
            self._block(error.message)
            logger.error(f"Rate refresh blocked: {error.message}. Replace the API key to resume.")
        else:
            self._last_error = error.message
            logger.warning(f"Rate refresh failed, keeping previous rates: {error.message}")

        return RefreshOutcome(
            attempted=True,
            succeeded=False,
            state=self.state(now),
            error=error.message,
        )

    def refresh(self, force: bool = False) -> None:
        """
        Fire-and-forget refresh on the running event loop.

        At most one refresh runs at a time; calls made while one is in
        flight are dropped. Without a running loop this is a no-op.
        """
        if self._refresh_task is not None and not self._refresh_task.done():
            logger.debug("Rate refresh already in flight")
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Rate refresh requested outside an event loop, ignoring")
            return

        self._refresh_task = loop.create_task(self.refresh_now(force=force))

    async def wait_for_refresh(self) -> None:
        """Await the in-flight background refresh, if any."""
        if self._refresh_task is not None:
            await self._refresh_task

    def schedule_startup_refresh(self, delay_seconds: float = 2.0) -> asyncio.Task:
        """
        Cold-start refresh after a short debounce delay.

        Returns the task so the application can cancel it on shutdown.
        """
        async def _delayed() -> None:
            await asyncio.sleep(delay_seconds)
            self.refresh(force=False)
            await self.wait_for_refresh()

        return asyncio.get_running_loop().create_task(_delayed())
