"""
Tests for the Gemini generation client.

Mocks genai.Client so no network call is made.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.genai import errors

from voltstore.services.generation_client import (
    GenerationClient,
    GenerationError,
    GenerationErrorKind,
    classify_api_error,
    extract_retry_after,
)


def _api_error(code: int, message: str, status: str = "ERROR", details=None) -> errors.APIError:
    error = {"code": code, "message": message, "status": status}
    if details is not None:
        error["details"] = details
    return errors.APIError(code, {"error": error})


@pytest.fixture
def mock_genai_client():
    """Patch genai.Client; yields the instance the client will use."""
    with patch("voltstore.services.generation_client.genai.Client") as client_cls:
        instance = MagicMock()
        instance.aio.models.generate_content = AsyncMock(
            return_value=MagicMock(text='{"ok": true}')
        )
        client_cls.return_value = instance
        yield instance


class TestExtractRetryAfter:

    def test_retry_in_seconds(self):
        assert extract_retry_after("Quota exceeded. Please retry in 41.2s.") == 41.2

    def test_retry_delay_field(self):
        assert extract_retry_after("{'@type': 'RetryInfo', 'retryDelay': '30s'}") == 30.0

    def test_no_hint(self):
        assert extract_retry_after("Resource exhausted") is None
        assert extract_retry_after("") is None


class TestClassifyApiError:

    def test_429_is_rate_limited_with_hint(self):
        result = classify_api_error(
            _api_error(429, "Quota exceeded. Please retry in 12.5s.", "RESOURCE_EXHAUSTED")
        )

        assert result.kind == GenerationErrorKind.RATE_LIMITED
        assert result.retry_after_seconds == 12.5

    @pytest.mark.parametrize("code", [401, 403])
    def test_auth_codes_are_credential_rejected(self, code):
        result = classify_api_error(_api_error(code, "Forbidden", "PERMISSION_DENIED"))

        assert result.kind == GenerationErrorKind.CREDENTIAL_REJECTED

    def test_400_about_api_key_is_credential_rejected(self):
        result = classify_api_error(
            _api_error(400, "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT")
        )

        assert result.kind == GenerationErrorKind.CREDENTIAL_REJECTED

    def test_leaked_key_is_credential_rejected(self):
        result = classify_api_error(
            _api_error(403, "Your API key was reported as leaked.", "PERMISSION_DENIED")
        )

        assert result.kind == GenerationErrorKind.CREDENTIAL_REJECTED
        assert "leaked" in result.message

    @pytest.mark.parametrize("code", [400, 500, 503])
    def test_other_errors_are_transport(self, code):
        result = classify_api_error(_api_error(code, "Something went wrong"))

        assert result.kind == GenerationErrorKind.TRANSPORT

    def test_message_never_contains_key_material(self):
        result = classify_api_error(_api_error(400, "API key AIzaSecret is invalid"))

        assert "AIzaSecret" not in result.message


class TestGenerate:

    @pytest.mark.asyncio
    async def test_missing_credential(self):
        client = GenerationClient(api_key="")

        with pytest.raises(GenerationError) as exc_info:
            await client.generate("prompt")

        assert exc_info.value.kind == GenerationErrorKind.MISSING_CREDENTIAL
        assert not client.has_credential

    @pytest.mark.asyncio
    async def test_returns_stripped_text(self, mock_genai_client):
        mock_genai_client.aio.models.generate_content.return_value = MagicMock(text='  {"a": 1}\n')
        client = GenerationClient(api_key="test-key", model="gemini-test")

        assert await client.generate("prompt", system_instruction="system") == '{"a": 1}'

        kwargs = mock_genai_client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "prompt"
        assert kwargs["config"].response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_underlying_client_created_once(self, mock_genai_client):
        with patch("voltstore.services.generation_client.genai.Client") as client_cls:
            client_cls.return_value = mock_genai_client
            client = GenerationClient(api_key="test-key")

            await client.generate("one")
            await client.generate("two")

            client_cls.assert_called_once_with(api_key="test-key")

    @pytest.mark.asyncio
    async def test_empty_text_is_transport(self, mock_genai_client):
        mock_genai_client.aio.models.generate_content.return_value = MagicMock(text=None)

        with pytest.raises(GenerationError) as exc_info:
            await GenerationClient(api_key="test-key").generate("prompt")

        assert exc_info.value.kind == GenerationErrorKind.TRANSPORT

    @pytest.mark.asyncio
    async def test_api_error_is_classified(self, mock_genai_client):
        mock_genai_client.aio.models.generate_content.side_effect = _api_error(
            429, "Please retry in 3s.", "RESOURCE_EXHAUSTED"
        )

        with pytest.raises(GenerationError) as exc_info:
            await GenerationClient(api_key="test-key").generate("prompt")

        assert exc_info.value.kind == GenerationErrorKind.RATE_LIMITED
        assert exc_info.value.retry_after_seconds == 3.0

    @pytest.mark.asyncio
    async def test_network_failure_is_transport(self, mock_genai_client):
        mock_genai_client.aio.models.generate_content.side_effect = ConnectionError("reset")

        with pytest.raises(GenerationError) as exc_info:
            await GenerationClient(api_key="test-key").generate("prompt")

        assert exc_info.value.kind == GenerationErrorKind.TRANSPORT

    @pytest.mark.asyncio
    async def test_timeout_is_transport(self, mock_genai_client):
        async def never_answers(**kwargs):
            await asyncio.sleep(10)

        mock_genai_client.aio.models.generate_content.side_effect = never_answers

        with pytest.raises(GenerationError) as exc_info:
            await GenerationClient(api_key="test-key", timeout_seconds=0.01).generate("prompt")

        assert exc_info.value.kind == GenerationErrorKind.TRANSPORT
        assert "did not answer" in exc_info.value.message
