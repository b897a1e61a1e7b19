"""
Tests for the BDD feature generator.

Test modules:
- test_generate_feature: use case and command-line entry points
- test_linting: Gherkin linter
- test_llm: LLM providers and factory
- unit/: grammar, extraction, knowledge base, normalization, prompts,
  reconciliation, artifact writing, configuration and logging
"""
