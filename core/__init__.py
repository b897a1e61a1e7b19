"""Core layer: domain, interfaces, services, configuration and use cases."""
