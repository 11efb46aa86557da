"""Google Gemini provider integration."""

import logging
from typing import Optional

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from .base import MAX_OUTPUT_TOKENS, TEMPERATURE, BaseLLMProvider

logger = logging.getLogger(__name__)

# The SDK keeps one process-wide credential; track which key it holds
_configured_api_key: Optional[str] = None


def _configure_sdk(api_key: str) -> None:
    """Point the SDK at ``api_key`` unless it already uses it."""
    global _configured_api_key
    if api_key == _configured_api_key:
        return
    if _configured_api_key is not None:
        logger.warning("Switching the process-wide Gemini API key")
    genai.configure(api_key=api_key)
    _configured_api_key = api_key


class GeminiProvider(BaseLLMProvider):
    """Google Gemini integration for quiz generation."""

    DEFAULT_MODEL = "gemini-1.5-pro"
    API_KEY_ENV = "GEMINI_API_KEY"

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        """
        Initialize Gemini provider.

        Args:
            api_key: Google AI Studio API key
            model: Model to use (default: gemini-1.5-pro)
        """
        super().__init__(api_key, model)
        _configure_sdk(api_key)
        self.client = genai.GenerativeModel(model)

    async def invoke(self, prompt: str, system_instruction: str) -> str:
        """
        Generate quiz JSON using the Gemini generate-content API.

        Gemini receives a single text blob, so the system instruction is
        prepended to the prompt.

        Args:
            prompt: The user prompt to send to the model
            system_instruction: Fixed system instruction for the model

        Returns:
            The generated text completion

        Raises:
            LLMProviderError: If the API call fails
        """
        full_prompt = f"{system_instruction}\n\n{prompt}"
        generation_config = GenerationConfig(
            temperature=TEMPERATURE,
            max_output_tokens=MAX_OUTPUT_TOKENS,
        )

        try:
            response = await self.client.generate_content_async(
                full_prompt,
                generation_config=generation_config,
            )
        except Exception as e:
            raise self._handle_api_error(e)

        try:
            text = response.text
        except ValueError:
            # No text parts, e.g. the candidate was blocked
            text = ""
        if not text:
            logger.warning("Gemini API returned empty response")
            return ""
        return text
