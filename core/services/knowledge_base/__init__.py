"""Step definition knowledge base."""
from .knowledge_base import KnowledgeBase

__all__ = ['KnowledgeBase']
