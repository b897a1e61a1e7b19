"""Step declaration parsing and extraction."""
from .step_extractor import DEFAULT_STEP_FILE_GLOB, ExtractionResult, StepExtractor
from .step_grammar import StepDeclarationParser, call_text, find_call_end, read_string

__all__ = [
    'DEFAULT_STEP_FILE_GLOB',
    'ExtractionResult',
    'StepExtractor',
    'StepDeclarationParser',
    'call_text',
    'find_call_end',
    'read_string',
]
