"""
Knowledge base storage interface.

The store owns the persisted pattern -> definition document. Callers get
an atomic read-modify-write through ``update`` without caring whether it
is backed by a file, a database or anything else.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

Mutator = Callable[[Dict[str, str]], Dict[str, str]]


@dataclass
class KnowledgeBaseSnapshot:
    """Entries read from the store and the version they were read at.

    ``version`` is None when no document exists yet.
    """
    entries: Dict[str, str] = field(default_factory=dict)
    version: Optional[str] = None


class IKnowledgeBaseStore(ABC):
    """Interface for knowledge base persistence."""

    @abstractmethod
    def read(self) -> KnowledgeBaseSnapshot:
        """Read the whole document.

        An absent or unreadable document yields an empty snapshot; this
        method never raises for either case.
        """
        pass

    @abstractmethod
    def write(self, entries: Dict[str, str], expected_version: Optional[str]) -> str:
        """Replace the whole document if it is still at ``expected_version``.

        Returns:
            The new version

        Raises:
            KnowledgeBaseConflict: If the document changed since that version
        """
        pass

    @abstractmethod
    def update(self, mutator: Mutator) -> Dict[str, str]:
        """Atomically apply ``mutator`` to the current entries.

        The mutator may be called more than once if a concurrent writer
        wins a race, so it must be a pure function of its input.

        Returns:
            The entries as persisted
        """
        pass
