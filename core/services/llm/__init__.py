"""LLM providers and prompt construction."""
from .anthropic_provider import AnthropicProvider
from .factory import DEFAULT_MODELS, create_llm_provider
from .ollama import OllamaProvider
from .openai_provider import OpenAIProvider
from .prompt_builder import GherkinPromptBuilder, PromptContext, format_inventory, safe_truncate

__all__ = [
    'AnthropicProvider',
    'DEFAULT_MODELS',
    'OllamaProvider',
    'OpenAIProvider',
    'GherkinPromptBuilder',
    'PromptContext',
    'create_llm_provider',
    'format_inventory',
    'safe_truncate',
]
