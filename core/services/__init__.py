"""
Core services - step tooling, knowledge base, normalization, generation and linting.
"""
