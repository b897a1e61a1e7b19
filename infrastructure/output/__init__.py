"""Generated artifact output."""
from .artifact_writer import FileArtifactWriter

__all__ = ['FileArtifactWriter']
