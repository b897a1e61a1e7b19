"""
Application use cases.
"""
from .generate_feature import GenerateFeatureUseCase, GenerationResult

__all__ = ['GenerateFeatureUseCase', 'GenerationResult']
