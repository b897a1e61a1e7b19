"""Knowledge base persistence."""
from .atomic import content_version
from .json_knowledge_base_store import JsonKnowledgeBaseStore

__all__ = ['content_version', 'JsonKnowledgeBaseStore']
