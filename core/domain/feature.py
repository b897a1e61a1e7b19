"""
Feature artifact domain logic.
"""
import re
from dataclasses import dataclass

FEATURE_FILE_SUFFIX = ".feature"
STEPS_FILE_SUFFIX = ".steps.ts"


def to_lower_camel_case(title: str) -> str:
    """Derive a lower-camel-case tag from a feature title.

    Non-alphanumerics are stripped, each word is title-cased and the first
    character is lowercased: "User Login Flow" -> "userLoginFlow".

    Args:
        title: Feature title

    Returns:
        Tag text without the leading '@'

    Raises:
        ValueError: If the title has no alphanumeric characters
    """
    words = re.sub(r'[^A-Za-z0-9\s]', '', title).split()
    if not words:
        raise ValueError(f"Cannot derive a tag from title: {title!r}")
    camel = ''.join(word.capitalize() for word in words)
    return camel[0].lower() + camel[1:]


def feature_file_name(title: str) -> str:
    """File name for a feature: the title with whitespace removed."""
    name = re.sub(r'\s+', '', title.strip())
    # Characters that cannot appear in a file name
    name = re.sub(r'[:/\\<>"|?*]', '', name)
    if not name:
        raise ValueError(f"Cannot derive a file name from title: {title!r}")
    return f"{name}{FEATURE_FILE_SUFFIX}"


def trim_blank_lines(text: str) -> str:
    """Drop leading and trailing blank lines, keeping the indentation of the rest."""
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines).rstrip()


def steps_file_name(tag: str, suffix: str = STEPS_FILE_SUFFIX) -> str:
    """File name for the step definitions generated for a feature tag."""
    return f"{tag}{suffix}"


@dataclass(frozen=True)
class FeatureArtifact:
    """A generated feature file: caller-owned tag and title plus a body."""
    tag: str
    title: str
    body: str

    @classmethod
    def create(cls, title: str, body: str) -> 'FeatureArtifact':
        """Create an artifact whose tag is derived from the title."""
        title = title.strip()
        return cls(tag=to_lower_camel_case(title), title=title, body=trim_blank_lines(body))

    @property
    def header(self) -> str:
        """Tag line and Feature heading."""
        return f"@{self.tag}\nFeature: {self.title}"

    @property
    def text(self) -> str:
        """Full feature file content."""
        if not self.body:
            return self.header
        return f"{self.header}\n\n{self.body}"

    @property
    def file_name(self) -> str:
        return feature_file_name(self.title)
