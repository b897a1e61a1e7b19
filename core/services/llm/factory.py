"""
LLM Provider Factory
Creates LLM providers based on configuration.
"""
import os
from typing import Optional

from core.interfaces.llm_provider import ILLMProvider, LLMProvider
from .anthropic_provider import AnthropicProvider
from .ollama import OllamaProvider
from .openai_provider import OpenAIProvider

DEFAULT_MODELS = {
    LLMProvider.OPENAI: "gpt-4",
    LLMProvider.ANTHROPIC: "claude-3-5-sonnet",
    LLMProvider.OLLAMA: "llama3.2:3b",
}


def create_llm_provider(
    provider_type: str = "openai",
    endpoint: Optional[str] = None,
    model: Optional[str] = None,
    timeout: int = 60,
    max_retries: int = 0,
    api_key: Optional[str] = None
) -> ILLMProvider:
    """Create LLM provider based on configuration.

    Args:
        provider_type: 'openai', 'anthropic' (or 'claude'), or 'ollama'
        endpoint: API endpoint (used for Ollama)
        model: Model name (defaults based on provider)
        timeout: Request timeout in seconds
        max_retries: Retries on transient failure
        api_key: API key (used for OpenAI/Anthropic, defaults to env var)

    Returns:
        LLM provider instance

    Raises:
        ValueError: If the provider type is not supported
    """
    provider = provider_type.lower()
    if provider == "claude":
        provider = LLMProvider.ANTHROPIC.value

    if provider == LLMProvider.OLLAMA.value:
        return OllamaProvider(
            endpoint=endpoint or "http://localhost:11434",
            model=model or DEFAULT_MODELS[LLMProvider.OLLAMA],
            timeout=timeout,
            max_retries=max_retries
        )
    elif provider == LLMProvider.OPENAI.value:
        return OpenAIProvider(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            model=model or DEFAULT_MODELS[LLMProvider.OPENAI],
            timeout=timeout,
            max_retries=max_retries
        )
    elif provider == LLMProvider.ANTHROPIC.value:
        return AnthropicProvider(
            api_key=api_key or os.getenv("ANTHROPIC_API_KEY"),
            model=model or DEFAULT_MODELS[LLMProvider.ANTHROPIC],
            timeout=timeout,
            max_retries=max_retries
        )
    raise ValueError(
        f"Unsupported LLM provider type: {provider_type}. "
        "Supported providers: 'openai', 'anthropic', 'ollama'"
    )
