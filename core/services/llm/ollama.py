"""
Ollama Provider
Local LLM provider using Ollama.
"""
from typing import Optional

import requests

from core.domain.errors import GenerationFailure
from core.interfaces.llm_provider import ILLMProvider, LLMResponse
from core.services.diagnostics import get_logger

logger = get_logger(__name__)


class OllamaProvider(ILLMProvider):
    """Local LLM provider using Ollama."""

    def __init__(
        self,
        endpoint: str = "http://localhost:11434",
        model: str = "llama3.2:3b",
        timeout: int = 60,
        max_retries: int = 0
    ):
        """Initialize Ollama provider.

        Args:
            endpoint: Ollama API endpoint
            model: Model name to use
            timeout: Request timeout in seconds
            max_retries: Additional attempts after a timeout or server error
        """
        self.endpoint = endpoint.rstrip('/')
        self._model = model
        self.timeout = timeout
        self.max_retries = max_retries

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 1500,
        **kwargs
    ) -> LLMResponse:
        """Generate text using the Ollama generate endpoint.

        Raises:
            GenerationFailure: When every attempt fails or Ollama is unreachable
        """
        url = f"{self.endpoint}/api/generate"

        payload = {
            "model": self._model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens
            }
        }
        if system_prompt:
            payload["system"] = system_prompt

        last_error = "no attempt made"
        for attempt in range(self.max_retries + 1):
            try:
                response = requests.post(
                    url,
                    json=payload,
                    timeout=self.timeout,
                    headers={"Content-Type": "application/json"}
                )
            except requests.exceptions.Timeout:
                last_error = f"request timed out after {self.timeout}s"
                logger.warning("ollama.timeout", attempt=attempt + 1, attempts=self.max_retries + 1)
                continue
            except requests.exceptions.ConnectionError as e:
                raise GenerationFailure(
                    f"Could not connect to Ollama at {self.endpoint}",
                    provider=self.provider_name
                ) from e
            except requests.exceptions.RequestException as e:
                raise GenerationFailure(
                    f"Ollama request failed: {e}",
                    provider=self.provider_name
                ) from e

            if response.status_code == 200:
                try:
                    result = response.json()
                except ValueError as e:
                    raise GenerationFailure(
                        "Ollama returned a response that is not JSON",
                        provider=self.provider_name
                    ) from e
                if not isinstance(result, dict):
                    raise GenerationFailure(
                        "Ollama returned an unexpected response body",
                        provider=self.provider_name
                    )
                return LLMResponse(
                    content=(result.get('response') or '').strip(),
                    model=self._model,
                    usage={
                        "prompt_tokens": result.get("prompt_eval_count", 0),
                        "completion_tokens": result.get("eval_count", 0),
                        "total_tokens": result.get("prompt_eval_count", 0) + result.get("eval_count", 0)
                    },
                    finish_reason=result.get("done_reason")
                )

            last_error = f"status {response.status_code}: {response.text}"
            logger.warning(
                "ollama.request_failed",
                attempt=attempt + 1,
                status_code=response.status_code
            )

        raise GenerationFailure(f"Ollama request failed: {last_error}", provider=self.provider_name)

    def is_available(self) -> bool:
        """Check if Ollama is running and the model has been pulled."""
        try:
            response = requests.get(f"{self.endpoint}/api/tags", timeout=5)
        except requests.exceptions.RequestException:
            logger.warning("ollama.unreachable", endpoint=self.endpoint)
            return False

        if response.status_code != 200:
            return False

        try:
            models = response.json().get('models', [])
        except (ValueError, AttributeError):
            return False
        model_base = self._model.split(':')[0]
        # Handle tag variations
        return any(m.get('name', '').startswith(model_base) for m in models)
