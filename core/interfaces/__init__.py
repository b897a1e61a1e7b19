"""
Interfaces for dependency inversion.

External collaborators (LLM providers, storage, file writers) are used
through these abstractions, not through concrete implementations.
"""
from .artifact_writer import IArtifactWriter
from .knowledge_base_store import IKnowledgeBaseStore, KnowledgeBaseSnapshot, Mutator
from .llm_provider import ILLMProvider, LLMProvider, LLMResponse

__all__ = [
    'IArtifactWriter',
    'IKnowledgeBaseStore',
    'KnowledgeBaseSnapshot',
    'Mutator',
    'ILLMProvider',
    'LLMProvider',
    'LLMResponse',
]
