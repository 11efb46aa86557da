"""OpenAI LLM provider integration."""

from typing import Optional

import openai
from openai import AsyncOpenAI

from .base import MAX_OUTPUT_TOKENS, TEMPERATURE, BaseLLMProvider


class OpenAIProvider(BaseLLMProvider):
    """OpenAI chat-completions integration for quiz generation."""

    DEFAULT_MODEL = "gpt-4-turbo-preview"
    API_KEY_ENV = "OPENAI_API_KEY"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        organization: Optional[str] = None,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model to use (default: gpt-4-turbo-preview)
            organization: Optional organization ID
        """
        super().__init__(api_key, model)
        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, max_retries=0
        )

    async def invoke(self, prompt: str, system_instruction: str) -> str:
        """
        Generate quiz JSON using the chat completions API.

        The system instruction and prompt are sent as separate messages and
        JSON mode is enabled, so the model answers with a JSON object.

        Args:
            prompt: The user prompt to send to the model
            system_instruction: Fixed system instruction for the model

        Returns:
            The generated text completion

        Raises:
            LLMProviderError: If the API call fails
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_OUTPUT_TOKENS,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise self._handle_api_error(e)

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
