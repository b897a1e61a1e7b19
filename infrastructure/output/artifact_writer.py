"""
File artifact writer - persists a generated feature and its step definitions.
"""
import os
from pathlib import Path
from typing import Optional, Tuple, Union

from core.domain.feature import STEPS_FILE_SUFFIX, FeatureArtifact, steps_file_name
from core.interfaces.artifact_writer import IArtifactWriter
from core.services.diagnostics import get_logger
from infrastructure.storage.atomic import discard, stage_text

logger = get_logger(__name__)


class FileArtifactWriter(IArtifactWriter):
    """Writes ``<features_dir>/<Title>.feature`` and ``<steps_dir>/<tag>.steps.ts``."""

    def __init__(
        self,
        features_dir: Union[str, Path],
        steps_dir: Union[str, Path],
        steps_suffix: str = STEPS_FILE_SUFFIX
    ):
        """Initialize writer.

        Args:
            features_dir: Directory receiving feature files
            steps_dir: Directory receiving step-definition files
            steps_suffix: Suffix of step-definition file names
        """
        self.features_dir = Path(features_dir)
        self.steps_dir = Path(steps_dir)
        self.steps_suffix = steps_suffix

    def paths_for(self, feature: FeatureArtifact) -> Tuple[Path, Path]:
        """Destination paths for a feature artifact."""
        return (
            self.features_dir / feature.file_name,
            self.steps_dir / steps_file_name(feature.tag, self.steps_suffix),
        )

    def write(self, feature: FeatureArtifact, step_definitions: str) -> Tuple[str, str]:
        """Stage both files, then move them into place.

        If the second move fails the first destination is restored to its
        previous content (or removed when it did not exist).
        """
        feature_path, steps_path = self.paths_for(feature)

        feature_temp = stage_text(feature_path, feature.text + "\n")
        try:
            steps_temp = stage_text(steps_path, step_definitions.rstrip("\n") + "\n")
        except BaseException:
            discard(feature_temp)
            raise

        previous = self._read_previous(feature_path)
        try:
            os.replace(feature_temp, feature_path)
            try:
                os.replace(steps_temp, steps_path)
            except OSError:
                self._restore(feature_path, previous)
                raise
        finally:
            discard(feature_temp)
            discard(steps_temp)

        logger.info(
            "artifacts.written",
            feature_path=str(feature_path),
            steps_path=str(steps_path)
        )
        return str(feature_path), str(steps_path)

    @staticmethod
    def _read_previous(path: Path) -> Optional[bytes]:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    @staticmethod
    def _restore(path: Path, previous: Optional[bytes]) -> None:
        if previous is None:
            path.unlink()
        else:
            path.write_bytes(previous)
        logger.warning("artifacts.rolled_back", path=str(path))
