"""Normalization of generated Gherkin and step-definition text."""
from .content_normalizer import (
    DECLARATIVE_SYNONYMS,
    ContentNormalizer,
    apply_declarative_synonyms,
    resolve_connective_keywords,
    route_page_through_context,
    strip_code_fences,
    strip_commentary,
    strip_feature_heading,
)

__all__ = [
    'DECLARATIVE_SYNONYMS',
    'ContentNormalizer',
    'apply_declarative_synonyms',
    'resolve_connective_keywords',
    'route_page_through_context',
    'strip_code_fences',
    'strip_commentary',
    'strip_feature_heading',
]
