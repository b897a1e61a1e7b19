"""
Generation Reconciler

Merges the step declarations of freshly generated step-definition code
back into the knowledge base. Patterns already known keep their existing
definition (first writer wins); the code itself is returned untouched.
"""
from typing import List, Optional

from core.domain.step import StepEntry
from core.services.diagnostics import get_logger
from core.services.knowledge_base import KnowledgeBase
from core.services.steps.step_grammar import StepDeclarationParser, call_text

logger = get_logger(__name__)


class GenerationReconciler:
    """Records new step patterns from generated code."""

    def __init__(self, knowledge_base: KnowledgeBase, parser: Optional[StepDeclarationParser] = None):
        self.knowledge_base = knowledge_base
        self.parser = parser or StepDeclarationParser()

    def collect_entries(self, step_code: str) -> List[StepEntry]:
        """Parse declarations and pair each with its full call text."""
        return [
            StepEntry(keyword=call.keyword, pattern=call.pattern, definition_text=call_text(step_code, call))
            for call in self.parser.parse(step_code)
        ]

    def merge(self, step_code: str) -> List[str]:
        """Insert every unknown pattern and save once.

        Returns:
            Patterns newly added to the knowledge base
        """
        entries = self.collect_entries(step_code)
        self.knowledge_base.load()
        for entry in entries:
            self.knowledge_base.insert(entry.pattern, entry.definition_text)
        inserted = self.knowledge_base.commit()
        logger.info(
            "reconciler.merged",
            declarations=len(entries),
            inserted=len(inserted),
            reused=len(entries) - len(inserted),
        )
        return inserted

    def reconcile(self, step_code: str) -> str:
        """Merge new patterns into the knowledge base and hand the code back."""
        self.merge(step_code)
        return step_code
