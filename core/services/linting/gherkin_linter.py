"""
Gherkin Linter
Validates committed feature files: tag naming and Scenario Outline
placeholder coverage. Violations are reported, never fixed.
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from core.domain.lint import LintReport, LintRule, LintViolation
from core.services.diagnostics import get_logger

logger = get_logger(__name__)

TAG_PATTERN = re.compile(r'^@[a-z][a-zA-Z0-9]*$')
# Any @word anywhere in the file is held to the tag convention
TAG_TOKEN = re.compile(r"@[A-Za-z0-9_]+")
PLACEHOLDER = re.compile(r'<([^<>\s][^<>]*)>')

OUTLINE_LINE = re.compile(r'^\s*Scenario (?:Outline|Template):')
EXAMPLES_LINE = re.compile(r'^\s*(?:Examples|Scenarios):')
# Any other block keyword closes the current outline
BLOCK_LINE = re.compile(r'^\s*(?:Feature|Rule|Background|Scenario|Example):')


@dataclass
class _Outline:
    """Placeholders used by one Scenario Outline and the columns its Examples provide."""
    line: int
    placeholders: Dict[str, int] = field(default_factory=dict)
    columns: Set[str] = field(default_factory=set)
    in_examples: bool = False
    awaiting_header: bool = False

    def use(self, text: str, line_no: int) -> None:
        for name in PLACEHOLDER.findall(text):
            self.placeholders.setdefault(name.strip(), line_no)


class GherkinLinter:
    """Lints .feature files for tag and placeholder conventions."""

    def __init__(self, file_glob: str = "**/*.feature"):
        self.file_glob = file_glob

    def lint_text(self, text: str, path: str = "<string>") -> List[LintViolation]:
        """Lint the contents of one feature file.

        Args:
            text: Feature file contents
            path: Path used in violation messages

        Returns:
            Violations in line order
        """
        violations: List[LintViolation] = []
        outline: Optional[_Outline] = None

        for line_no, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped:
                continue

            violations.extend(self._check_tags(stripped, path, line_no))
            if stripped.startswith('@') or stripped.startswith('#'):
                continue

            if OUTLINE_LINE.match(line):
                violations.extend(self._close(outline, path))
                outline = _Outline(line=line_no)
                outline.use(stripped, line_no)
                continue

            if BLOCK_LINE.match(line):
                violations.extend(self._close(outline, path))
                outline = None
                continue

            if outline is None:
                continue

            if EXAMPLES_LINE.match(line):
                outline.in_examples = True
                outline.awaiting_header = True
            elif outline.in_examples:
                if outline.awaiting_header and stripped.startswith('|'):
                    outline.columns.update(self._cells(stripped))
                    outline.awaiting_header = False
            else:
                outline.use(stripped, line_no)

        violations.extend(self._close(outline, path))
        return sorted(violations, key=lambda v: v.line)

    def lint_file(self, path: Union[str, Path]) -> List[LintViolation]:
        """Lint one file; an unreadable file is itself a violation."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("lint.unreadable", path=str(path), error=str(e))
            return [LintViolation(
                path=str(path),
                line=0,
                rule=LintRule.UNREADABLE_FILE,
                message=f"Could not read file: {e}"
            )]
        return self.lint_text(text, str(path))

    def lint_directory(self, features_dir: Union[str, Path]) -> LintReport:
        """Lint every feature file below ``features_dir``.

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        directory = Path(features_dir)
        if not directory.is_dir():
            raise FileNotFoundError(f"Features directory not found: {directory}")

        report = LintReport()
        for feature_file in sorted(p for p in directory.glob(self.file_glob) if p.is_file()):
            report.files_checked += 1
            report.extend(self.lint_file(feature_file))

        logger.info(
            "lint.completed",
            files=report.files_checked,
            violations=report.violation_count
        )
        return report

    @staticmethod
    def _check_tags(line: str, path: str, line_no: int) -> List[LintViolation]:
        """Check tag tokens on a line.

        A tag line (``@a @b``) is checked token by token up to a trailing
        comment; every ``@word`` elsewhere on any line is checked as well.
        """
        tokens: List[str] = []
        rest = line
        if line.startswith('@'):
            parts = line.split()
            for i, token in enumerate(parts):
                if token.startswith('#'):
                    rest = ' '.join(parts[i:])
                    break
                tokens.append(token)
            else:
                rest = ''
        tokens.extend(TAG_TOKEN.findall(rest))

        violations = []
        for token in tokens:
            if not TAG_PATTERN.match(token):
                violations.append(LintViolation(
                    path=path,
                    line=line_no,
                    rule=LintRule.TAG_CONVENTION,
                    message=f"Tag '{token}' is not lowerCamelCase"
                ))
        return violations

    @staticmethod
    def _cells(row: str) -> List[str]:
        cells = row.strip().strip('|').split('|')
        return [cell.strip() for cell in cells if cell.strip()]

    @staticmethod
    def _close(outline: Optional[_Outline], path: str) -> List[LintViolation]:
        """Report placeholders of a finished outline that no Examples column covers."""
        if outline is None:
            return []
        return [
            LintViolation(
                path=path,
                line=line_no,
                rule=LintRule.PLACEHOLDER_COVERAGE,
                message=f"Placeholder <{name}> has no matching Examples column"
            )
            for name, line_no in outline.placeholders.items()
            if name not in outline.columns
        ]
