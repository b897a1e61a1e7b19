"""Application layer: invocation context and use cases."""
