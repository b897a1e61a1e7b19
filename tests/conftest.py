"""Shared fixtures: scripted LLM provider and temporary knowledge bases."""
from pathlib import Path
from typing import List, Optional, Union

import pytest

from core.domain.errors import GenerationFailure
from core.interfaces.llm_provider import ILLMProvider, LLMResponse
from core.services.knowledge_base import KnowledgeBase
from infrastructure.storage import JsonKnowledgeBaseStore


class FakeProvider(ILLMProvider):
    """Returns scripted responses in order; exceptions in the script are raised."""

    def __init__(self, responses: List[Union[str, Exception]], model: str = "fake-model"):
        self.responses = list(responses)
        self._model = model
        self.calls = []

    @property
    def provider_name(self) -> str:
        return "fake"

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
        self.calls.append({
            "prompt": prompt,
            "system_prompt": system_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if not self.responses:
            raise GenerationFailure("no scripted response left", provider=self.provider_name)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return LLMResponse(content=item, model=self._model, usage={"total_tokens": 42})

    def is_available(self) -> bool:
        return True


@pytest.fixture
def kb_path(tmp_path) -> Path:
    return tmp_path / "support" / "ai" / "knowledgeBase.json"


@pytest.fixture
def knowledge_base(kb_path) -> KnowledgeBase:
    return KnowledgeBase(JsonKnowledgeBaseStore(kb_path))


@pytest.fixture
def steps_dir(tmp_path) -> Path:
    directory = tmp_path / "steps"
    directory.mkdir()
    return directory
