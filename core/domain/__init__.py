"""
Domain entities and value objects.
"""
from .errors import GenerationFailure, KnowledgeBaseConflict
from .feature import FeatureArtifact, feature_file_name, steps_file_name, to_lower_camel_case
from .lint import LintReport, LintRule, LintViolation
from .step import (
    CONNECTIVE_KEYWORDS,
    DEFAULT_CONNECTIVE_KEYWORD,
    PRIMARY_KEYWORDS,
    StepCall,
    StepEntry,
    StepKeyword,
)

__all__ = [
    'GenerationFailure',
    'KnowledgeBaseConflict',
    'FeatureArtifact',
    'feature_file_name',
    'steps_file_name',
    'to_lower_camel_case',
    'LintReport',
    'LintRule',
    'LintViolation',
    'CONNECTIVE_KEYWORDS',
    'DEFAULT_CONNECTIVE_KEYWORD',
    'PRIMARY_KEYWORDS',
    'StepCall',
    'StepEntry',
    'StepKeyword',
]
