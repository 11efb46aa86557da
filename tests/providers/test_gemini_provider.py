"""Tests for Google Gemini provider integration."""

import logging
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import pytest

from quizgen.error_classifier import ErrorCategory
from quizgen.providers import gemini_provider
from quizgen.providers.base import MAX_OUTPUT_TOKENS, TEMPERATURE, LLMProviderError
from quizgen.providers.gemini_provider import GeminiProvider


@pytest.fixture(autouse=True)
def reset_sdk_key(monkeypatch):
    """Start each test with an unconfigured SDK."""
    monkeypatch.setattr(gemini_provider, "_configured_api_key", None)


class TestGeminiProvider:
    """Test suite for GeminiProvider."""

    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    def test_initialization(
        self, mock_generative_model_class, mock_configure, mock_api_key
    ):
        """Test that provider initializes correctly."""
        mock_model = MagicMock()
        mock_generative_model_class.return_value = mock_model

        provider = GeminiProvider(api_key=mock_api_key)

        assert provider.model == "gemini-1.5-pro"
        assert provider.client is mock_model
        assert provider.get_provider_name() == "gemini"
        mock_configure.assert_called_once_with(api_key=mock_api_key)
        mock_generative_model_class.assert_called_once_with("gemini-1.5-pro")

    @pytest.mark.asyncio
    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    async def test_invoke_prepends_system_instruction(
        self, mock_generative_model_class, mock_configure, mock_api_key
    ):
        """Test that the system instruction is prepended to the prompt."""
        mock_response = MagicMock()
        mock_response.text = '{"quiz": []}'
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(return_value=mock_response)
        mock_generative_model_class.return_value = mock_model

        provider = GeminiProvider(api_key=mock_api_key, model="gemini-test")
        result = await provider.invoke("Make a quiz", "You are an educator")

        assert result == '{"quiz": []}'
        call_args = mock_model.generate_content_async.call_args
        assert call_args.args[0] == "You are an educator\n\nMake a quiz"
        generation_config = call_args.kwargs["generation_config"]
        assert generation_config.temperature == TEMPERATURE
        assert generation_config.max_output_tokens == MAX_OUTPUT_TOKENS

    @pytest.mark.asyncio
    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    async def test_invoke_empty_response(
        self, mock_generative_model_class, mock_configure, mock_api_key, caplog
    ):
        """Test that a response without text returns "" and logs a warning."""
        caplog.set_level(logging.WARNING, logger="quizgen.providers.gemini_provider")
        mock_response = MagicMock()
        mock_response.text = ""
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(return_value=mock_response)
        mock_generative_model_class.return_value = mock_model

        provider = GeminiProvider(api_key=mock_api_key)

        assert await provider.invoke("prompt", "system") == ""
        assert "empty response" in caplog.text

    @pytest.mark.asyncio
    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    async def test_invoke_blocked_response(
        self, mock_generative_model_class, mock_configure, mock_api_key
    ):
        """Test that a response with no text parts returns ""."""
        mock_response = MagicMock()
        type(mock_response).text = PropertyMock(
            side_effect=ValueError("The response has no parts")
        )
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(return_value=mock_response)
        mock_generative_model_class.return_value = mock_model

        provider = GeminiProvider(api_key=mock_api_key)

        assert await provider.invoke("prompt", "system") == ""

    @pytest.mark.asyncio
    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    async def test_invoke_invalid_key(
        self, mock_generative_model_class, mock_configure, mock_api_key
    ):
        """Test that Google's invalid key message is classified as auth."""
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(
            side_effect=Exception("400 API key not valid. Please pass a valid API key.")
        )
        mock_generative_model_class.return_value = mock_model

        provider = GeminiProvider(api_key=mock_api_key)

        with pytest.raises(LLMProviderError) as exc_info:
            await provider.invoke("prompt", "system")

        assert exc_info.value.classified_error.category == ErrorCategory.AUTHENTICATION
        assert exc_info.value.classified_error.provider == "gemini"

    @pytest.mark.asyncio
    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    async def test_invoke_resource_exhausted(
        self, mock_generative_model_class, mock_configure, mock_api_key
    ):
        """Test that quota exhaustion is classified as billing."""
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(
            side_effect=Exception("429 Resource has been exhausted (e.g. check quota).")
        )
        mock_generative_model_class.return_value = mock_model

        provider = GeminiProvider(api_key=mock_api_key)

        with pytest.raises(LLMProviderError) as exc_info:
            await provider.invoke("prompt", "system")

        assert exc_info.value.classified_error.category == ErrorCategory.BILLING_QUOTA


class TestSDKConfiguration:
    """Tests for the process-wide SDK credential."""

    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    def test_same_key_configures_once(
        self, mock_generative_model_class, mock_configure, mock_api_key
    ):
        """Test that building adapters per request does not reconfigure the SDK."""
        GeminiProvider(api_key=mock_api_key)
        GeminiProvider(api_key=mock_api_key)
        GeminiProvider(api_key=mock_api_key, model="gemini-1.5-flash")

        mock_configure.assert_called_once_with(api_key=mock_api_key)

    @patch("quizgen.providers.gemini_provider.genai.configure")
    @patch("quizgen.providers.gemini_provider.genai.GenerativeModel")
    def test_key_change_reconfigures_with_warning(
        self, mock_generative_model_class, mock_configure, caplog
    ):
        """Test that a different key reconfigures the SDK and logs a warning."""
        caplog.set_level(logging.WARNING, logger="quizgen.providers.gemini_provider")

        GeminiProvider(api_key="key-one")
        GeminiProvider(api_key="key-two")

        assert [c.kwargs["api_key"] for c in mock_configure.call_args_list] == [
            "key-one",
            "key-two",
        ]
        assert "Switching the process-wide Gemini API key" in caplog.text
