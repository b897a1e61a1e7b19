"""
Step definition knowledge base.

A persistent, insertion-only mapping from step pattern to the text that
implements it. Callers load it, insert any number of entries in memory and
save once per batch, so the persisted document is always a consistent
snapshot. Nothing ever removes or overwrites an entry: the first definition
stored for a pattern wins.
"""
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from core.interfaces.knowledge_base_store import IKnowledgeBaseStore
from core.services.diagnostics import get_logger

logger = get_logger(__name__)


class KnowledgeBase:
    """In-memory view of the knowledge base plus its pending inserts."""

    def __init__(self, store: IKnowledgeBaseStore):
        """Initialize knowledge base.

        Args:
            store: Persistence backend
        """
        self._store = store
        self._entries: Optional[Dict[str, str]] = None
        self._pending: Dict[str, str] = {}

    @property
    def store(self) -> IKnowledgeBaseStore:
        return self._store

    def load(self) -> Dict[str, str]:
        """Read the persisted mapping.

        Returns an empty mapping if nothing is persisted yet or the
        document cannot be parsed. Inserts not saved yet stay visible.
        """
        snapshot = self._store.read()
        entries = dict(snapshot.entries)
        for pattern, definition in self._pending.items():
            entries.setdefault(pattern, definition)
        self._entries = entries
        logger.debug("knowledge_base.loaded", entries=len(entries))
        return dict(entries)

    def insert(self, pattern: str, definition_text: str) -> bool:
        """Insert a definition unless the pattern is already known.

        Returns:
            True if an insertion occurred
        """
        entries = self._working_entries()
        if pattern in entries:
            return False
        entries[pattern] = definition_text
        self._pending[pattern] = definition_text
        logger.debug("knowledge_base.step_added", pattern=pattern)
        return True

    def save(self, mapping: Optional[Dict[str, str]] = None) -> List[str]:
        """Persist a complete mapping (the in-memory one by default).

        Since entries are never removed, the mapping is merged into the
        latest persisted document: patterns already stored keep their
        definition.

        Returns:
            Patterns that were newly persisted by this save
        """
        source = self._working_entries() if mapping is None else mapping
        return self._persist(source)

    def commit(self) -> List[str]:
        """Persist the inserts made since the last save.

        Returns:
            Patterns that were newly persisted
        """
        if not self._pending:
            return []
        return self._persist(dict(self._pending))

    def discard(self) -> None:
        """Forget unsaved inserts."""
        self._pending = {}
        self._entries = None

    @contextmanager
    def batch(self) -> Iterator['KnowledgeBase']:
        """Load, let the block insert, then save once.

        Nothing is saved if the block raises.
        """
        self.load()
        try:
            yield self
        except BaseException:
            self.discard()
            raise
        self.commit()

    def get(self, pattern: str) -> Optional[str]:
        return self._working_entries().get(pattern)

    def patterns(self) -> List[str]:
        """Known patterns in insertion order."""
        return list(self._working_entries())

    @property
    def pending_patterns(self) -> List[str]:
        return list(self._pending)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._working_entries()

    def __len__(self) -> int:
        return len(self._working_entries())

    def _working_entries(self) -> Dict[str, str]:
        if self._entries is None:
            self.load()
        return self._entries

    def _persist(self, source: Dict[str, str]) -> List[str]:
        applied: List[str] = []

        def merge(current: Dict[str, str]) -> Dict[str, str]:
            # May run again after a conflicting save, so start fresh each time
            applied.clear()
            merged = dict(current)
            for pattern, definition in source.items():
                if pattern not in merged:
                    merged[pattern] = definition
                    applied.append(pattern)
            return merged

        persisted = self._store.update(merge)
        self._pending = {
            pattern: definition
            for pattern, definition in self._pending.items()
            if pattern not in persisted
        }
        entries = dict(persisted)
        for pattern, definition in self._pending.items():
            entries[pattern] = definition
        self._entries = entries

        if applied:
            logger.info("knowledge_base.saved", inserted=len(applied), entries=len(persisted))
        else:
            logger.debug("knowledge_base.unchanged", entries=len(persisted))
        return list(applied)
