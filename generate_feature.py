#!/usr/bin/env python3
"""
BDD Feature Generator CLI
Generates a Gherkin feature file and matching Playwright step definitions
from a feature title, reusing the steps the suite already implements.
"""
import argparse
import sys
from typing import List, Optional

from core.application.context import GenerationContext
from core.application.use_cases import GenerateFeatureUseCase
from core.config import AppConfig
from core.domain.errors import GenerationFailure, KnowledgeBaseConflict
from core.services.diagnostics import configure_logging


def _prompt_for(label: str, default: Optional[str] = None) -> str:
    suffix = f" [{default}]" if default else ""
    answer = input(f"{label}{suffix}: ").strip()
    return answer or (default or "")


def generate_feature(
    config: AppConfig,
    title: str,
    scenario_count: int,
    bootstrap: bool = False
) -> bool:
    """Run one generation and print the outcome.

    Returns:
        True if both files were written
    """
    print(f"\n{'='*60}")
    print(f"Feature Generation: {title}")
    print(f"Provider: {config.llm.provider} ({config.llm.model or 'default model'})")
    print(f"{'='*60}\n")

    try:
        context = GenerationContext.from_config(config)
    except ValueError as e:
        print(f"ERROR: {e}")
        return False

    use_case = GenerateFeatureUseCase(context)

    if bootstrap:
        print("Step 1: Extracting existing steps...")
        extraction = use_case.bootstrap()
        if extraction.directory_missing:
            print(f"  Steps directory not found: {config.paths.steps_dir} (skipped)")
        else:
            print(f"  Scanned {extraction.files_scanned} files, "
                  f"{len(extraction.declarations)} steps, {len(extraction.inserted)} new")

    print("Step 2: Generating feature and step definitions...")
    try:
        result = use_case.execute(title, scenario_count)
    except ValueError as e:
        print(f"ERROR: {e}")
        return False
    except GenerationFailure as e:
        print(f"ERROR: Generation failed: {e}")
        return False
    except KnowledgeBaseConflict as e:
        print(f"ERROR: Knowledge base could not be saved: {e}")
        return False

    print(f"  Tag: @{result.feature.tag}")
    print(f"  Feature file: {result.feature_path}")
    print(f"  Step definitions: {result.steps_path}")
    print(f"  New steps recorded: {len(result.new_patterns)}")
    for pattern in result.new_patterns:
        print(f"    + {pattern}")
    print("\nDone.")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate a Cucumber feature file and Playwright step definitions with an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python generate_feature.py "User Login Flow"
  python generate_feature.py "Checkout" --scenarios 4 --bootstrap
  python generate_feature.py "Search" --config bddgen.yaml
        """
    )

    parser.add_argument(
        'title',
        nargs='?',
        help='Feature title (prompted for when omitted)'
    )

    parser.add_argument(
        '--scenarios',
        type=int,
        default=None,
        help='Number of scenarios to generate (default: 2)'
    )

    parser.add_argument(
        '--bootstrap',
        action='store_true',
        help='Extract existing step definitions into the knowledge base first'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='YAML file overriding environment configuration'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        help='Logging level (default: LOG_LEVEL or INFO)'
    )

    args = parser.parse_args(argv)

    try:
        config = AppConfig.load(args.config)
    except (OSError, ValueError) as e:
        print(f"ERROR: Could not load configuration: {e}")
        return 2

    configure_logging(args.log_level or config.logging.level, config.logging.format)

    title = args.title or _prompt_for("Enter the feature title")
    scenario_count = args.scenarios
    if scenario_count is None:
        if args.title:
            scenario_count = config.generation.min_scenarios
        else:
            answer = _prompt_for(
                f"How many scenarios ({config.generation.min_scenarios}-{config.generation.max_scenarios})",
                str(config.generation.min_scenarios)
            )
            try:
                scenario_count = int(answer)
            except ValueError:
                print(f"ERROR: Scenario count must be a number, got {answer!r}")
                return 1

    success = generate_feature(config, title, scenario_count, bootstrap=args.bootstrap)
    return 0 if success else 1


if __name__ == '__main__':
    sys.exit(main())
