"""
Errors raised by the generation pipeline.

Recoverable conditions (a corrupt knowledge base document, a missing step
directory) are logged and never raised; lint violations are reported as
data. Only the conditions below abort an invocation.
"""


class GenerationFailure(Exception):
    """The generative service failed or returned an empty payload."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class KnowledgeBaseConflict(Exception):
    """The knowledge base document kept changing underneath a save."""
