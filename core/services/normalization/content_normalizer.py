"""
Content Normalizer

Deterministic text transforms that turn raw generator output into the
project's Gherkin and step-definition dialect. Every function here is
pure; text already in canonical form comes back unchanged.

Feature text:
    1. strip code fences
    2. strip the generator's own "Feature:" heading (and its tag line)
    3. rewrite imperative step phrasing into declarative phrasing
    4. re-apply the caller-owned tag and title as the header

Step-definition code:
    1. strip code fences
    2. drop explanatory chatter lines
    3. resolve And/But to the keyword of the preceding step
    4. route page interactions through ``this.page``
"""
import re
from typing import List, Optional, Pattern, Sequence, Tuple

from core.domain.feature import FeatureArtifact, trim_blank_lines
from core.domain.step import DEFAULT_CONNECTIVE_KEYWORD, StepCall, StepKeyword
from core.services.steps.step_grammar import StepDeclarationParser

FENCE_LINE = re.compile(r'^[ \t]*```[\w+#.-]*[ \t]*(?:\n|$)', re.MULTILINE)
# A closing fence glued to the last line of code, e.g. "});```"
TRAILING_FENCE = re.compile(r'(?<=\S)[ \t]*```[ \t]*$', re.MULTILINE)

FEATURE_HEADING = re.compile(r'^\s*Feature:.*$')
TAG_LINE = re.compile(r'^\s*@\S+(?:\s+@\S+)*\s*$')

STEP_LINE = re.compile(r'^(\s*(?:Given|When|Then|And|But)\s+)(.*)$')

# Imperative phrasing -> declarative phrasing. Each rule is independent of
# the others: no replacement produces text another rule matches.
DECLARATIVE_SYNONYMS: Tuple[Tuple[str, str], ...] = (
    (r'\bI (?:go|navigate) to the (.+?) page\b', r'the \1 page is displayed'),
    (r'\bI am on the (.+?) page\b', r'the \1 page is displayed'),
    (r'\bI (?:open|visit) the (.+?) page\b', r'the \1 page is displayed'),
)

COMMENTARY_LINE = re.compile(
    r'^[ \t]*(?:Please note|This is a basic implementation)\b.*(?:\n|$)',
    re.MULTILINE | re.IGNORECASE
)

PAGE_IMPORT = re.compile(
    r"""^[ \t]*import\s*\{\s*page\s*\}\s*from\s*['"](?:playwright|@playwright/test)['"]\s*;?[ \t]*(?:\n|$)""",
    re.MULTILINE
)
AWAIT_PAGE = re.compile(r'\bawait\s+page\.')
EXPECT_PAGE = re.compile(r'\bexpect\(\s*page\b')


def strip_code_fences(text: str) -> str:
    """Remove fenced-code delimiters (```gherkin, ```typescript, ```)."""
    text = FENCE_LINE.sub('', text)
    return trim_blank_lines(TRAILING_FENCE.sub('', text))


def strip_feature_heading(text: str) -> str:
    """Remove "Feature:" heading lines and the tag lines directly above them."""
    kept: List[str] = []
    for line in text.split("\n"):
        if FEATURE_HEADING.match(line):
            while kept and TAG_LINE.match(kept[-1]):
                kept.pop()
            continue
        kept.append(line)
    return trim_blank_lines("\n".join(kept))


def compile_synonyms(rules: Sequence[Tuple[str, str]]) -> List[Tuple[Pattern, str]]:
    return [(re.compile(pattern), replacement) for pattern, replacement in rules]


def apply_declarative_synonyms(
    text: str,
    rules: Optional[Sequence[Tuple[Pattern, str]]] = None
) -> str:
    """Rewrite imperative step phrasing on Gherkin step lines."""
    if rules is None:
        rules = compile_synonyms(DECLARATIVE_SYNONYMS)
    lines = []
    for line in text.split("\n"):
        match = STEP_LINE.match(line)
        if match:
            step_text = match.group(2)
            for pattern, replacement in rules:
                step_text = pattern.sub(replacement, step_text)
            line = match.group(1) + step_text
        lines.append(line)
    return "\n".join(lines)


def strip_commentary(code: str) -> str:
    """Drop "Please note..." style explanation lines appended to code."""
    return trim_blank_lines(COMMENTARY_LINE.sub('', code))


def resolve_connective_keywords(
    code: str,
    parser: Optional[StepDeclarationParser] = None
) -> str:
    """Rewrite line-leading And/But calls to the keyword of the previous step.

    The keyword is that of the nearest primary (Given/When/Then) call
    earlier in the document; When if there is none.
    """
    parser = parser or StepDeclarationParser()
    replacements: List[Tuple[StepCall, StepKeyword]] = []
    last_primary: Optional[StepKeyword] = None
    for call in parser.iter_calls(code):
        if call.keyword.is_primary:
            last_primary = call.keyword
        elif call.at_line_start:
            replacements.append((call, last_primary or DEFAULT_CONNECTIVE_KEYWORD))

    if not replacements:
        return code

    pieces = []
    cursor = 0
    for call, keyword in replacements:
        pieces.append(code[cursor:call.start])
        pieces.append(keyword.value)
        cursor = call.start + len(call.keyword.value)
    pieces.append(code[cursor:])
    return "".join(pieces)


def route_page_through_context(code: str) -> str:
    """Use the per-scenario ``this.page`` instead of an imported ``page``."""
    code = PAGE_IMPORT.sub('', code)
    code = AWAIT_PAGE.sub('await this.page.', code)
    code = EXPECT_PAGE.sub('expect(this.page', code)
    return code


class ContentNormalizer:
    """Applies the normalization rules in their fixed order."""

    def __init__(
        self,
        parser: Optional[StepDeclarationParser] = None,
        synonyms: Sequence[Tuple[str, str]] = DECLARATIVE_SYNONYMS
    ):
        """Initialize normalizer.

        Args:
            parser: Step declaration parser used for keyword inheritance
            synonyms: (regex, replacement) rules for declarative phrasing
        """
        self.parser = parser or StepDeclarationParser()
        self._synonyms = compile_synonyms(synonyms)

    def normalize_feature(self, raw: str, title: str) -> FeatureArtifact:
        """Clean generated Gherkin and put the caller's tag and title on top.

        Args:
            raw: Generator output
            title: Caller-owned feature title

        Returns:
            Normalized feature artifact
        """
        body = strip_code_fences(raw)
        body = strip_feature_heading(body)
        body = apply_declarative_synonyms(body, self._synonyms)
        return FeatureArtifact.create(title, body)

    def normalize_step_definitions(self, raw: str) -> str:
        """Clean generated step-definition code."""
        code = strip_code_fences(raw)
        code = strip_commentary(code)
        code = resolve_connective_keywords(code, self.parser)
        code = route_page_through_context(code)
        return trim_blank_lines(code)
