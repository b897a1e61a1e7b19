"""
OpenAI Provider
LLM provider using OpenAI chat completions (gpt-4, gpt-4o, etc.)
"""
import os
from typing import Optional

from openai import OpenAI, OpenAIError

from core.domain.errors import GenerationFailure
from core.interfaces.llm_provider import ILLMProvider, LLMResponse


class OpenAIProvider(ILLMProvider):
    """LLM provider using the OpenAI API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4",
        timeout: int = 60,
        max_retries: int = 0
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Model name to use
            timeout: Request timeout in seconds
            max_retries: Retries performed by the client on transient errors
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self._client: Optional[OpenAI] = None

    @property
    def provider_name(self) -> str:
        """Name of the provider."""
        return "openai"

    @property
    def model(self) -> str:
        """Model being used."""
        return self._model

    @property
    def client(self) -> Optional[OpenAI]:
        """Lazy initialization of OpenAI client."""
        if self._client is None and self.api_key:
            self._client = OpenAI(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=self.max_retries
            )
        return self._client

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 1500,
        **kwargs
    ) -> LLMResponse:
        """Generate a chat completion.

        Raises:
            GenerationFailure: If the key is missing or the API call fails
        """
        if not self.client:
            raise GenerationFailure(
                "OpenAI client not initialized. Check OPENAI_API_KEY.",
                provider=self.provider_name
            )

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self.client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except OpenAIError as e:
            raise GenerationFailure(f"OpenAI API error: {e}", provider=self.provider_name) from e

        if not response.choices:
            raise GenerationFailure("OpenAI returned no choices", provider=self.provider_name)

        content = response.choices[0].message.content
        return LLMResponse(
            content=content.strip() if content else "",
            model=self._model,
            usage={
                "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
                "completion_tokens": response.usage.completion_tokens if response.usage else 0,
                "total_tokens": response.usage.total_tokens if response.usage else 0
            },
            finish_reason=response.choices[0].finish_reason
        )

    def is_available(self) -> bool:
        """True when an API key is configured."""
        return bool(self.api_key)
