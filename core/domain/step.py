"""
Step definition domain entities.

A step pattern is the quoted template of a Given/When/Then declaration,
e.g. ``I click the "{string}" button``. Patterns are case-sensitive and
are the uniqueness key of the knowledge base.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StepKeyword(str, Enum):
    """Step keywords understood by the step tooling."""
    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"
    AND = "And"
    BUT = "But"

    @property
    def is_primary(self) -> bool:
        """Primary keywords carry their own step type."""
        return self in PRIMARY_KEYWORDS

    @property
    def is_connective(self) -> bool:
        """Connective keywords inherit the type of the step before them."""
        return self in CONNECTIVE_KEYWORDS


PRIMARY_KEYWORDS = (StepKeyword.GIVEN, StepKeyword.WHEN, StepKeyword.THEN)
CONNECTIVE_KEYWORDS = (StepKeyword.AND, StepKeyword.BUT)

# Keyword used for a connective step that has nothing before it to inherit from
DEFAULT_CONNECTIVE_KEYWORD = StepKeyword.WHEN

STUB_BODY = "async function () { /* Existing step logic */ }"


@dataclass(frozen=True)
class StepCall:
    """A ``Keyword(`` call opening found in step-definition source.

    Attributes:
        keyword: Keyword identifier as written in the source
        start: Offset of the keyword in the source
        end: Offset just past the closing parenthesis (and optional ``;``)
        line: 1-based line number of the keyword
        pattern: Decoded first string argument, None when absent
        at_line_start: True when only whitespace precedes the keyword on its line
    """
    keyword: StepKeyword
    start: int
    end: int
    line: int
    pattern: Optional[str] = None
    at_line_start: bool = False

    @property
    def is_declaration(self) -> bool:
        """A declaration is a primary keyword call with a string pattern."""
        return self.keyword.is_primary and self.pattern is not None


@dataclass(frozen=True)
class StepEntry:
    """A step pattern together with its implementation text.

    The keyword is informational only: a pattern is reused no matter
    which keyword first defined it.
    """
    keyword: StepKeyword
    pattern: str
    definition_text: str

    @classmethod
    def stub(cls, keyword: StepKeyword, pattern: str) -> 'StepEntry':
        """Create a placeholder entry for a step that already exists on disk."""
        return cls(
            keyword=keyword,
            pattern=pattern,
            definition_text=f"{keyword.value}({quote_pattern(pattern)}, {STUB_BODY});"
        )


def quote_pattern(pattern: str) -> str:
    """Render a pattern as a single-quoted JavaScript string literal."""
    escaped = pattern.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
