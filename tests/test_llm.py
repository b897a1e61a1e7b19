"""Tests for LLM providers."""
from types import SimpleNamespace

import pytest
import requests
from openai import OpenAIError

from core.domain.errors import GenerationFailure
from core.services.llm import (
    AnthropicProvider,
    OllamaProvider,
    OpenAIProvider,
    create_llm_provider,
)


class FakeHTTPResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


class TestFactory:

    def test_defaults_to_openai_gpt4(self):
        provider = create_llm_provider(api_key="sk-test")

        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4"
        assert provider.max_retries == 0

    def test_ollama(self):
        provider = create_llm_provider(
            provider_type="ollama",
            endpoint="http://localhost:11434/",
            model="llama3.2:3b"
        )

        assert isinstance(provider, OllamaProvider)
        assert provider.endpoint == "http://localhost:11434"
        assert provider.model == "llama3.2:3b"

    def test_claude_alias(self):
        provider = create_llm_provider(provider_type="claude", api_key="sk-ant", model="haiku")

        assert isinstance(provider, AnthropicProvider)
        assert provider.model == "claude-3-haiku-20240307"

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_llm_provider(provider_type="unsupported")


class TestOpenAIProvider:

    def _fake_client(self, create):
        return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))

    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        provider = OpenAIProvider(api_key=None)

        assert provider.is_available() is False
        with pytest.raises(GenerationFailure):
            provider.generate("prompt")

    def test_generate(self):
        captured = {}

        def create(**kwargs):
            captured.update(kwargs)
            return SimpleNamespace(
                choices=[SimpleNamespace(
                    message=SimpleNamespace(content="  Scenario: A  "),
                    finish_reason="stop"
                )],
                usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15)
            )

        provider = OpenAIProvider(api_key="sk-test")
        provider._client = self._fake_client(create)

        response = provider.generate("prompt", system_prompt="system", temperature=0.2, max_tokens=2000)

        assert response.content == "Scenario: A"
        assert response.usage["total_tokens"] == 15
        assert captured["temperature"] == 0.2
        assert captured["max_tokens"] == 2000
        assert captured["messages"][0] == {"role": "system", "content": "system"}

    def test_api_error_becomes_generation_failure(self):
        def create(**kwargs):
            raise OpenAIError("rate limited")

        provider = OpenAIProvider(api_key="sk-test")
        provider._client = self._fake_client(create)

        with pytest.raises(GenerationFailure, match="rate limited") as exc_info:
            provider.generate("prompt")
        assert exc_info.value.provider == "openai"


class TestAnthropicProvider:

    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        provider = AnthropicProvider(api_key=None)

        with pytest.raises(GenerationFailure):
            provider.generate("prompt")

    def test_generate_joins_text_blocks(self):
        def create(**kwargs):
            return SimpleNamespace(
                content=[SimpleNamespace(text="Scenario: A\n"), SimpleNamespace(text="  Given x")],
                usage=SimpleNamespace(input_tokens=7, output_tokens=3),
                stop_reason="end_turn"
            )

        provider = AnthropicProvider(api_key="sk-ant")
        provider._client = SimpleNamespace(messages=SimpleNamespace(create=create))

        response = provider.generate("prompt")

        assert response.content == "Scenario: A\n  Given x"
        assert response.usage["total_tokens"] == 10


class TestOllamaProvider:

    def test_generate(self, monkeypatch):
        payloads = []

        def fake_post(url, json=None, timeout=None, headers=None):
            payloads.append(json)
            return FakeHTTPResponse(200, {"response": " Scenario: A ", "prompt_eval_count": 4, "eval_count": 6})

        monkeypatch.setattr(requests, "post", fake_post)
        provider = OllamaProvider(model="llama3.2:3b")

        response = provider.generate("prompt", system_prompt="system", temperature=0.3, max_tokens=1500)

        assert response.content == "Scenario: A"
        assert response.usage["total_tokens"] == 10
        assert payloads[0]["system"] == "system"
        assert payloads[0]["options"]["num_predict"] == 1500

    def test_server_error_exhausts_retries(self, monkeypatch):
        attempts = []

        def fake_post(url, json=None, timeout=None, headers=None):
            attempts.append(1)
            return FakeHTTPResponse(500, text="model crashed")

        monkeypatch.setattr(requests, "post", fake_post)
        provider = OllamaProvider(max_retries=2)

        with pytest.raises(GenerationFailure, match="status 500"):
            provider.generate("prompt")
        assert len(attempts) == 3

    def test_no_retry_by_default(self, monkeypatch):
        attempts = []

        def fake_post(url, json=None, timeout=None, headers=None):
            attempts.append(1)
            raise requests.exceptions.Timeout()

        monkeypatch.setattr(requests, "post", fake_post)

        with pytest.raises(GenerationFailure, match="timed out"):
            OllamaProvider().generate("prompt")
        assert len(attempts) == 1

    def test_timeout_then_success(self, monkeypatch):
        results = [requests.exceptions.Timeout(), FakeHTTPResponse(200, {"response": "ok"})]

        def fake_post(url, json=None, timeout=None, headers=None):
            item = results.pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        monkeypatch.setattr(requests, "post", fake_post)

        assert OllamaProvider(max_retries=1).generate("prompt").content == "ok"

    def test_connection_error(self, monkeypatch):
        def fake_post(url, json=None, timeout=None, headers=None):
            raise requests.exceptions.ConnectionError()

        monkeypatch.setattr(requests, "post", fake_post)

        with pytest.raises(GenerationFailure, match="Could not connect"):
            OllamaProvider().generate("prompt")

    @pytest.mark.skip(reason="Requires Ollama running")
    def test_ollama_generate_live(self):
        provider = OllamaProvider()
        if not provider.is_available():
            pytest.skip("Ollama not available")
        assert provider.generate("Say hello", max_tokens=20).content


class TestOllamaErrorWrapping:

    class NotJsonResponse(FakeHTTPResponse):
        def json(self):
            raise ValueError("not json")

    def test_non_json_body(self, monkeypatch):
        monkeypatch.setattr(requests, "post", lambda *a, **kw: self.NotJsonResponse(200))

        with pytest.raises(GenerationFailure, match="not JSON") as exc_info:
            OllamaProvider().generate("prompt")
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert exc_info.value.provider == "ollama"

    def test_other_request_errors(self, monkeypatch):
        def fake_post(url, json=None, timeout=None, headers=None):
            raise requests.exceptions.ChunkedEncodingError("connection broken")

        monkeypatch.setattr(requests, "post", fake_post)

        with pytest.raises(GenerationFailure, match="connection broken") as exc_info:
            OllamaProvider().generate("prompt")
        assert isinstance(exc_info.value.__cause__, requests.exceptions.RequestException)

    def test_unexpected_body_shape(self, monkeypatch):
        monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeHTTPResponse(200, ["a", "b"]))

        with pytest.raises(GenerationFailure, match="unexpected"):
            OllamaProvider().generate("prompt")
