"""Anthropic Claude provider integration."""

import logging

import anthropic
from anthropic import AsyncAnthropic

from .base import MAX_OUTPUT_TOKENS, TEMPERATURE, BaseLLMProvider

logger = logging.getLogger(__name__)


class ClaudeProvider(BaseLLMProvider):
    """Anthropic Messages API integration for quiz generation."""

    DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
    API_KEY_ENV = "CLAUDE_API_KEY"

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        """
        Initialize Claude provider.

        Args:
            api_key: Anthropic API key
            model: Model to use (default: claude-3-5-sonnet-20241022)
        """
        super().__init__(api_key, model)
        self.client = AsyncAnthropic(api_key=api_key, max_retries=0)

    async def invoke(self, prompt: str, system_instruction: str) -> str:
        """
        Generate quiz JSON using the Messages API.

        The system instruction travels in the dedicated ``system`` field.

        Args:
            prompt: The user prompt to send to the model
            system_instruction: Fixed system instruction for the model

        Returns:
            The concatenated text blocks of the response

        Raises:
            LLMProviderError: If the API call fails
        """
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=MAX_OUTPUT_TOKENS,
                temperature=TEMPERATURE,
                system=system_instruction,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AnthropicError as e:
            raise self._handle_api_error(e)

        text = "".join(
            block.text
            for block in response.content or []
            if isinstance(getattr(block, "text", None), str)
        )
        if not text:
            logger.warning("Claude API returned empty response")
        return text
