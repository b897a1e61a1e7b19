"""Post-generation reconciliation with the step knowledge base."""
from .reconciler import GenerationReconciler

__all__ = ['GenerationReconciler']
