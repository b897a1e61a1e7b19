"""
JSON file knowledge base store.

Stores the pattern -> definition mapping as one pretty-printed JSON
document. Saves are atomic (temp file + os.replace) and optimistic: a
write only lands if the document is still at the version it was read at,
otherwise ``update`` re-reads and re-applies the change.
"""
import json
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Union

from core.domain.errors import KnowledgeBaseConflict
from core.interfaces.knowledge_base_store import (
    IKnowledgeBaseStore,
    KnowledgeBaseSnapshot,
    Mutator,
)
from core.services.diagnostics import get_logger
from infrastructure.storage.atomic import content_version, discard, stage_text

logger = get_logger(__name__)


def _same_entries(left: Dict[str, str], right: Dict[str, str]) -> bool:
    """Equal content in the same insertion order."""
    return left == right and list(left) == list(right)


class JsonKnowledgeBaseStore(IKnowledgeBaseStore):
    """Knowledge base persisted as a single JSON document."""

    DEFAULT_MAX_ATTEMPTS = 3

    def __init__(self, path: Union[str, Path], max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        """Initialize store.

        Args:
            path: Location of the JSON document
            max_attempts: Save attempts before giving up on a contended document
        """
        self._path = Path(path)
        self._max_attempts = max(1, max_attempts)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> KnowledgeBaseSnapshot:
        """Read the whole document; absent or corrupt documents read as empty."""
        with self._lock:
            return self._read_unlocked()

    def write(self, entries: Dict[str, str], expected_version: Optional[str]) -> str:
        """Replace the document if it is still at ``expected_version``."""
        with self._lock:
            return self._write_unlocked(entries, expected_version)

    def update(self, mutator: Mutator) -> Dict[str, str]:
        """Read-modify-write with an optimistic version check.

        Nothing is written when the mutator leaves the entries unchanged.
        """
        with self._lock:
            for attempt in range(1, self._max_attempts + 1):
                snapshot = self._read_unlocked()
                updated = mutator(dict(snapshot.entries))
                if _same_entries(updated, snapshot.entries):
                    return snapshot.entries
                try:
                    self._write_unlocked(updated, snapshot.version)
                    return updated
                except KnowledgeBaseConflict:
                    logger.warning(
                        "knowledge_base.save_conflict",
                        path=str(self._path),
                        attempt=attempt,
                    )
        raise KnowledgeBaseConflict(
            f"Knowledge base {self._path} changed during {self._max_attempts} save attempts"
        )

    def _read_unlocked(self) -> KnowledgeBaseSnapshot:
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            return KnowledgeBaseSnapshot()
        except OSError as e:
            logger.warning("knowledge_base.unreadable", path=str(self._path), error=str(e))
            return KnowledgeBaseSnapshot()

        version = content_version(data)
        try:
            entries = self._decode(data)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            logger.warning(
                "knowledge_base.corrupt",
                path=str(self._path),
                error=str(e),
                action="treating as empty",
            )
            return KnowledgeBaseSnapshot(entries={}, version=version)
        return KnowledgeBaseSnapshot(entries=entries, version=version)

    def _write_unlocked(self, entries: Dict[str, str], expected_version: Optional[str]) -> str:
        payload = json.dumps(entries, indent=2, ensure_ascii=False)
        temp_name = stage_text(self._path, payload)
        try:
            current = self._current_version()
            if current != expected_version:
                raise KnowledgeBaseConflict(
                    f"Knowledge base {self._path} changed since it was read"
                )
            os.replace(temp_name, self._path)
        finally:
            discard(temp_name)
        return content_version(payload.encode("utf-8"))

    def _current_version(self) -> Optional[str]:
        try:
            return content_version(self._path.read_bytes())
        except FileNotFoundError:
            return None

    @staticmethod
    def _decode(data: bytes) -> Dict[str, str]:
        document = json.loads(data.decode("utf-8"))
        if not isinstance(document, dict):
            raise ValueError("knowledge base document is not a JSON object")
        for key, value in document.items():
            if not isinstance(value, str):
                raise ValueError(f"definition for {key!r} is not a string")
        return document
