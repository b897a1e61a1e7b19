"""Linting of committed feature files."""
from .gherkin_linter import GherkinLinter, TAG_PATTERN

__all__ = ['GherkinLinter', 'TAG_PATTERN']
