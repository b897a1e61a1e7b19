"""
Artifact writer interface for generated feature and step files.
"""
from abc import ABC, abstractmethod
from typing import Tuple

from core.domain.feature import FeatureArtifact


class IArtifactWriter(ABC):
    """Persists the artifacts of one generation."""

    @abstractmethod
    def write(self, feature: FeatureArtifact, step_definitions: str) -> Tuple[str, str]:
        """Write the feature file and its step definitions together.

        Either both files are written or neither is.

        Args:
            feature: Normalized feature artifact
            step_definitions: Normalized step-definition source

        Returns:
            (feature_path, steps_path)
        """
        pass
