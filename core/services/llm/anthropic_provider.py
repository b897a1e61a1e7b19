"""
Anthropic Provider
LLM provider using the Anthropic Messages API.
"""
import os
from typing import Optional

import anthropic

from core.domain.errors import GenerationFailure
from core.interfaces.llm_provider import ILLMProvider, LLMResponse


class AnthropicProvider(ILLMProvider):
    """LLM provider using Anthropic Claude models."""

    # Model aliases for convenience
    MODELS = {
        "claude-3-5-sonnet": "claude-3-5-sonnet-20241022",
        "claude-3-haiku": "claude-3-haiku-20240307",
        "sonnet": "claude-3-5-sonnet-20241022",
        "haiku": "claude-3-haiku-20240307",
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-3-5-sonnet",
        timeout: int = 60,
        max_retries: int = 0
    ):
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
            model: Model name or alias
            timeout: Request timeout in seconds
            max_retries: Retries performed by the client on transient errors
        """
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        self._model = self.MODELS.get(model, model)  # Resolve alias or use as-is
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: Optional[anthropic.Anthropic] = None

    @property
    def provider_name(self) -> str:
        """Name of the provider."""
        return "anthropic"

    @property
    def model(self) -> str:
        """Model being used."""
        return self._model

    @property
    def client(self) -> Optional[anthropic.Anthropic]:
        """Lazy initialization of Anthropic client."""
        if self._client is None and self._api_key:
            self._client = anthropic.Anthropic(
                api_key=self._api_key,
                timeout=self._timeout,
                max_retries=self._max_retries
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
        """Generate text completion using Claude.

        Raises:
            GenerationFailure: If the key is missing or the API call fails
        """
        if not self.client:
            raise GenerationFailure(
                "Anthropic client not initialized. Check ANTHROPIC_API_KEY.",
                provider=self.provider_name
            )

        try:
            response = self.client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system_prompt or "",
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature
            )
        except anthropic.APIError as e:
            raise GenerationFailure(f"Anthropic API error: {e}", provider=self.provider_name) from e

        # Extract content (may be multiple content blocks)
        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text

        usage = {
            "input_tokens": response.usage.input_tokens,
            "output_tokens": response.usage.output_tokens,
            "total_tokens": response.usage.input_tokens + response.usage.output_tokens
        }

        return LLMResponse(
            content=content.strip(),
            model=self._model,
            usage=usage,
            finish_reason=response.stop_reason
        )

    def is_available(self) -> bool:
        """True when an API key is configured."""
        return bool(self._api_key)
