"""
Generation context - the collaborators of one invocation, wired once.
"""
from dataclasses import dataclass
from typing import Optional

from core.config import AppConfig
from core.interfaces.artifact_writer import IArtifactWriter
from core.interfaces.llm_provider import ILLMProvider
from core.services.generation import GenerationReconciler
from core.services.knowledge_base import KnowledgeBase
from core.services.llm import create_llm_provider
from core.services.normalization import ContentNormalizer
from core.services.steps import StepDeclarationParser, StepExtractor
from infrastructure.output import FileArtifactWriter
from infrastructure.storage import JsonKnowledgeBaseStore


@dataclass
class GenerationContext:
    """Everything a generation run needs, passed explicitly."""
    config: AppConfig
    provider: ILLMProvider
    knowledge_base: KnowledgeBase
    extractor: StepExtractor
    normalizer: ContentNormalizer
    reconciler: GenerationReconciler
    writer: IArtifactWriter

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        provider: Optional[ILLMProvider] = None,
        writer: Optional[IArtifactWriter] = None
    ) -> 'GenerationContext':
        """Wire the default collaborators for ``config``.

        Args:
            config: Application configuration
            provider: LLM provider override (built from config.llm when None)
            writer: Artifact writer override

        Raises:
            ValueError: If the configured provider type is not supported
        """
        if provider is None:
            provider = create_llm_provider(
                provider_type=config.llm.provider,
                endpoint=config.llm.endpoint,
                model=config.llm.model,
                timeout=config.llm.timeout,
                max_retries=config.llm.max_retries,
                api_key=config.llm.api_key
            )

        parser = StepDeclarationParser()
        knowledge_base = KnowledgeBase(JsonKnowledgeBaseStore(config.paths.knowledge_base_path))
        return cls(
            config=config,
            provider=provider,
            knowledge_base=knowledge_base,
            extractor=StepExtractor(knowledge_base, parser=parser, file_glob=config.paths.step_file_glob),
            normalizer=ContentNormalizer(parser=parser),
            reconciler=GenerationReconciler(knowledge_base, parser=parser),
            writer=writer or FileArtifactWriter(config.paths.features_dir, config.paths.steps_dir)
        )
