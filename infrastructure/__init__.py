"""
Infrastructure layer - implementations of interfaces.

Contains:
- storage: JSON knowledge base store and atomic file writes
- output: Feature and step-definition file writer
"""
