"""
Use case: Generate a feature file and its step definitions from a title.
"""
import time
from dataclasses import dataclass, field
from typing import List, Optional

from core.application.context import GenerationContext
from core.domain.errors import GenerationFailure
from core.domain.feature import FeatureArtifact, to_lower_camel_case
from core.services.diagnostics import get_logger
from core.services.llm import GherkinPromptBuilder, PromptContext
from core.services.steps import ExtractionResult

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Artifacts produced by one generation."""
    feature: FeatureArtifact
    step_definitions: str
    feature_path: str
    steps_path: str
    new_patterns: List[str] = field(default_factory=list)


class GenerateFeatureUseCase:
    """Prompt, normalize, reconcile with the knowledge base, then write."""

    def __init__(self, context: GenerationContext):
        """Initialize use case with its wired collaborators.

        Args:
            context: Generation context for this invocation
        """
        self.ctx = context

    def bootstrap(self, steps_dir: Optional[str] = None) -> ExtractionResult:
        """Seed the knowledge base from the existing step files."""
        return self.ctx.extractor.extract(steps_dir or self.ctx.config.paths.steps_dir)

    def validate(self, title: str, scenario_count: int) -> str:
        """Check the request before any network call.

        Returns:
            The stripped title

        Raises:
            ValueError: On an empty title, a title without alphanumerics or
                whose tag would not start with a letter,
                or a scenario count outside the configured bounds
        """
        title = (title or "").strip()
        if not title:
            raise ValueError("Feature title must not be empty")
        tag = to_lower_camel_case(title)
        # Tags must start with a letter to pass the tag convention
        if not tag[0].isalpha():
            raise ValueError(f"Feature title must start with a letter, got {title!r} (tag @{tag})")

        bounds = self.ctx.config.generation
        if isinstance(scenario_count, bool) or not isinstance(scenario_count, int):
            raise ValueError(f"Scenario count must be an integer, got {scenario_count!r}")
        if not bounds.min_scenarios <= scenario_count <= bounds.max_scenarios:
            raise ValueError(
                f"Scenario count must be between {bounds.min_scenarios} "
                f"and {bounds.max_scenarios}, got {scenario_count}"
            )
        return title

    def execute(self, title: str, scenario_count: int = 2) -> GenerationResult:
        """Execute feature generation.

        Args:
            title: Feature title; also the source of the tag and file names
            scenario_count: Number of scenarios to request

        Returns:
            The written artifacts and the patterns newly added to the knowledge base

        Raises:
            ValueError: If the request is invalid
            GenerationFailure: If the generative service fails or returns nothing
            KnowledgeBaseConflict: If the knowledge base could not be saved
        """
        title = self.validate(title, scenario_count)
        generation = self.ctx.config.generation

        inventory = list(self.ctx.knowledge_base.load())
        builder = GherkinPromptBuilder(PromptContext(
            title=title,
            tag=to_lower_camel_case(title),
            scenario_count=scenario_count,
            existing_steps=inventory,
            max_inventory_steps=generation.max_inventory_steps
        ))
        system_prompt = builder.build_system_prompt()
        logger.info("generation.started", title=title, scenarios=scenario_count, known_steps=len(inventory))

        raw_feature = self._generate(
            "feature",
            builder.build_feature_prompt(),
            system_prompt,
            generation.feature_temperature,
            generation.feature_max_tokens
        )
        feature = self.ctx.normalizer.normalize_feature(raw_feature, title)

        raw_steps = self._generate(
            "step_definitions",
            builder.build_step_definitions_prompt(feature.text),
            system_prompt,
            generation.step_temperature,
            generation.step_max_tokens
        )
        step_definitions = self.ctx.normalizer.normalize_step_definitions(raw_steps)
        if not step_definitions:
            raise GenerationFailure(
                "Step definition response was empty after normalization",
                provider=self.ctx.provider.provider_name
            )

        new_patterns = self.ctx.reconciler.merge(step_definitions)
        feature_path, steps_path = self.ctx.writer.write(feature, step_definitions)

        logger.info(
            "generation.completed",
            tag=feature.tag,
            feature_path=feature_path,
            steps_path=steps_path,
            new_patterns=len(new_patterns)
        )
        return GenerationResult(
            feature=feature,
            step_definitions=step_definitions,
            feature_path=feature_path,
            steps_path=steps_path,
            new_patterns=new_patterns
        )

    def _generate(
        self,
        purpose: str,
        prompt: str,
        system_prompt: str,
        temperature: float,
        max_tokens: int
    ) -> str:
        """Call the provider once and return non-empty content."""
        provider = self.ctx.provider
        start = time.perf_counter()
        try:
            response = provider.generate(
                prompt,
                system_prompt=system_prompt,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except GenerationFailure as e:
            logger.log_generation(
                purpose=purpose,
                provider=provider.provider_name,
                model=provider.model,
                duration_ms=(time.perf_counter() - start) * 1000,
                success=False,
                error=str(e)
            )
            raise

        logger.log_generation(
            purpose=purpose,
            provider=provider.provider_name,
            model=response.model,
            duration_ms=(time.perf_counter() - start) * 1000,
            usage=response.usage
        )
        if not response.content or not response.content.strip():
            raise GenerationFailure(
                f"Empty {purpose} response from {provider.provider_name}",
                provider=provider.provider_name
            )
        return response.content
