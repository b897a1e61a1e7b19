"""
Step Extractor
Scans step-definition files and bootstraps the knowledge base with the
step patterns they already implement.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from core.domain.step import StepEntry, StepKeyword
from core.services.diagnostics import get_logger
from core.services.knowledge_base import KnowledgeBase
from core.services.steps.step_grammar import StepDeclarationParser

logger = get_logger(__name__)

DEFAULT_STEP_FILE_GLOB = "**/*.steps.ts"


@dataclass
class ExtractionResult:
    """Outcome of one extraction run."""
    files_scanned: int = 0
    declarations: List[Tuple[StepKeyword, str]] = field(default_factory=list)
    inserted: List[str] = field(default_factory=list)
    directory_missing: bool = False


class StepExtractor:
    """Extracts (keyword, pattern) pairs from step-definition sources."""

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        parser: Optional[StepDeclarationParser] = None,
        file_glob: str = DEFAULT_STEP_FILE_GLOB
    ):
        """Initialize extractor.

        Args:
            knowledge_base: Knowledge base that receives new patterns
            parser: Step declaration parser
            file_glob: Glob selecting step files below the directory
        """
        self.knowledge_base = knowledge_base
        self.parser = parser or StepDeclarationParser()
        self.file_glob = file_glob

    def find_step_files(self, steps_dir: Union[str, Path]) -> List[Path]:
        """Step files below ``steps_dir``, sorted for a stable scan order."""
        return sorted(p for p in Path(steps_dir).glob(self.file_glob) if p.is_file())

    def scan(self, steps_dir: Union[str, Path]) -> ExtractionResult:
        """Collect declarations without touching the knowledge base.

        The same pattern declared in several files is reported once, with
        the keyword of the first declaration found.
        """
        directory = Path(steps_dir)
        if not directory.is_dir():
            logger.warning("step_extractor.directory_missing", path=str(directory))
            return ExtractionResult(directory_missing=True)

        result = ExtractionResult()
        seen = set()
        for step_file in self.find_step_files(directory):
            result.files_scanned += 1
            try:
                source = step_file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("step_extractor.unreadable", path=str(step_file), error=str(e))
                continue
            pairs = self.parser.extract_pairs(source)
            if not pairs:
                logger.info("step_extractor.no_steps", path=str(step_file))
                continue
            logger.debug("step_extractor.file_scanned", path=str(step_file), declarations=len(pairs))
            for keyword, pattern in pairs:
                if pattern in seen:
                    continue
                seen.add(pattern)
                result.declarations.append((keyword, pattern))
        return result

    def extract(self, steps_dir: Union[str, Path]) -> ExtractionResult:
        """Scan ``steps_dir`` and store every unknown pattern as a stub entry.

        A missing directory is a no-op. The knowledge base is saved once
        at the end, and only if something new was found.
        """
        result = self.scan(steps_dir)
        if result.directory_missing:
            return result

        self.knowledge_base.load()
        for keyword, pattern in result.declarations:
            entry = StepEntry.stub(keyword, pattern)
            self.knowledge_base.insert(entry.pattern, entry.definition_text)
        result.inserted = self.knowledge_base.commit()

        if result.inserted:
            logger.info(
                "step_extractor.completed",
                files=result.files_scanned,
                inserted=len(result.inserted),
            )
        else:
            logger.info("step_extractor.no_new_steps", files=result.files_scanned)
        return result
