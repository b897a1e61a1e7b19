"""
Lint result entities for committed feature files.
"""
from dataclasses import dataclass, field
from typing import List


class LintRule:
    """Identifiers of the checks a violation can come from."""
    TAG_CONVENTION = "tag-convention"
    PLACEHOLDER_COVERAGE = "placeholder-coverage"
    UNREADABLE_FILE = "unreadable-file"


@dataclass(frozen=True)
class LintViolation:
    """A single problem found in a feature file."""
    path: str
    line: int
    rule: str
    message: str

    def __str__(self) -> str:
        return f"[{self.path}:{self.line}] {self.message}"


@dataclass
class LintReport:
    """Aggregated result of linting a set of feature files."""
    files_checked: int = 0
    violations: List[LintViolation] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Boolean conversion for easy checking."""
        return self.ok

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @property
    def exit_code(self) -> int:
        """Process exit status: 1 when any violation was found."""
        return 0 if self.ok else 1

    def extend(self, violations: List[LintViolation]) -> None:
        """Add violations from one file."""
        self.violations.extend(violations)
