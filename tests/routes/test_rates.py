"""
Tests for the /rates and /preferences endpoints.

Uses a real RateCache and state store with a mocked rate quote client.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from voltstore.dependencies import get_rate_cache, get_state_store
from voltstore.main import app
from voltstore.services.rate_cache import RateCache
from voltstore.services.rate_quote_service import RateQuoteClient, RateQuoteError, RateQuoteErrorKind


@pytest.fixture
def rate_cache(state_store, quote_client):
    return RateCache(state_store, quote_client)


@pytest.fixture
def client(rate_cache, state_store):
    app.dependency_overrides[get_rate_cache] = lambda: rate_cache
    app.dependency_overrides[get_state_store] = lambda: state_store

    yield TestClient(app)

    app.dependency_overrides.clear()


class TestRates:

    def test_cold_start_status(self, client):
        data = client.get("/rates").json()

        assert data["state"] == "STALE"
        assert data["rates"]["DKK"] == 7.46
        assert data["blocked"] is False

    def test_manual_refresh(self, client, quote_client):
        data = client.post("/rates/refresh").json()

        assert data["outcome"]["attempted"] is True
        assert data["outcome"]["succeeded"] is True
        assert data["status"]["state"] == "FRESH"
        assert data["status"]["rates"]["DKK"] == 7.45
        quote_client.fetch_rates.assert_awaited_once()

    def test_manual_refresh_bypasses_suppression(self, client, quote_client):
        quote_client.fetch_rates = AsyncMock(side_effect=[
            RateQuoteError(RateQuoteErrorKind.RATE_LIMITED, "429"),
            {"DKK": 7.5, "NOK": 11.5, "SEK": 11.1, "USD": 1.1},
        ])

        first = client.post("/rates/refresh").json()
        second = client.post("/rates/refresh").json()

        assert first["status"]["state"] == "SUPPRESSED"
        assert second["status"]["state"] == "FRESH"

    def test_manual_refresh_when_blocked(self, client, quote_client):
        quote_client.fetch_rates = AsyncMock(
            side_effect=RateQuoteError(RateQuoteErrorKind.BLOCKED, "API key rejected")
        )

        client.post("/rates/refresh")
        data = client.post("/rates/refresh").json()

        assert data["outcome"]["attempted"] is False
        assert data["status"]["blocked"] is True
        assert quote_client.fetch_rates.await_count == 1

    def test_partial_update(self, client):
        response = client.patch("/rates", json={"SEK": 11.5})

        assert response.status_code == 200
        data = response.json()
        assert data["rates"]["SEK"] == 11.5
        assert data["rates"]["DKK"] == 7.46
        assert data["state"] == "FRESH"

    @pytest.mark.parametrize("body", [{"DKK": 0}, {"NOK": -1}])
    def test_non_positive_update_is_rejected(self, client, body):
        response = client.patch("/rates", json=body)

        assert response.status_code == 400
        assert client.get("/rates").json()["rates"]["DKK"] == 7.46

    def test_non_numeric_update_is_rejected(self, client):
        assert client.patch("/rates", json={"USD": "lots"}).status_code == 422

    @pytest.mark.parametrize("content", [
        '{"DKK": "inf"}',
        '{"DKK": Infinity}',
        '{"SEK": NaN}',
    ])
    def test_non_finite_update_is_rejected(self, client, content):
        response = client.patch(
            "/rates", content=content, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        rates = client.get("/rates").json()["rates"]
        assert rates["DKK"] == 7.46
        assert rates["SEK"] == 11.23

    def test_unparseable_quote_keeps_previous_rates(self, state_store):
        generation_client = MagicMock()
        generation_client.api_key = "test-gemini-api-key"
        generation_client.generate = AsyncMock(
            return_value='{"DKK": 1' + "0" * 400 + ', "NOK": 11.6, "SEK": 11.2}'
        )
        cache = RateCache(state_store, RateQuoteClient(generation_client))
        app.dependency_overrides[get_rate_cache] = lambda: cache
        app.dependency_overrides[get_state_store] = lambda: state_store
        try:
            response = TestClient(app).post("/rates/refresh")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"]["attempted"] is True
        assert data["outcome"]["succeeded"] is False
        assert data["status"]["state"] == "STALE"
        assert data["status"]["rates"]["DKK"] == 7.46

    def test_format_uses_current_rates(self, client):
        data = client.get("/rates/format", params={"amount_eur": 3300, "currency": "DKK", "language": "en"}).json()

        assert data["formatted"] == "DKK 24,618"
        assert data["converted"] == pytest.approx(24618)

    def test_format_defaults_to_active_language(self, client):
        client.put("/preferences/language", json={"language": "no"})

        data = client.get("/rates/format", params={"amount_eur": 1000}).json()

        assert data["currency"] == "NOK"
        assert data["formatted"] == "NOK 11.380"

    @pytest.mark.parametrize("amount", ["nan", "inf", "-inf"])
    def test_format_rejects_non_finite_amount(self, client, amount):
        response = client.get("/rates/format", params={"amount_eur": amount, "currency": "EUR"})

        assert response.status_code == 422

    def test_format_large_amount(self, client):
        response = client.get("/rates/format", params={"amount_eur": "1e30", "currency": "EUR"})

        assert response.status_code == 200
        assert response.json()["formatted"] == "€1" + ",000" * 10

    def test_format_rejects_amount_that_overflows_conversion(self, client):
        response = client.get("/rates/format", params={"amount_eur": "1e308", "currency": "DKK"})

        assert response.status_code == 400


class TestPreferences:

    def test_default_language(self, client):
        assert client.get("/preferences/language").json() == {"language": "en", "currency": "EUR"}

    def test_switch_language(self, client):
        response = client.put("/preferences/language", json={"language": "da"})

        assert response.json() == {"language": "da", "currency": "DKK"}
        assert client.get("/preferences/language").json()["language"] == "da"

    def test_unknown_language_is_rejected(self, client):
        assert client.put("/preferences/language", json={"language": "de"}).status_code == 422
