"""Structured logging for pipeline events."""
from .logger import (
    ROOT_LOGGER_NAME,
    KeyValueFormatter,
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    'ROOT_LOGGER_NAME',
    'KeyValueFormatter',
    'StructuredFormatter',
    'StructuredLogger',
    'configure_logging',
    'get_logger',
]
