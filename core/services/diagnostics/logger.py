"""
Structured logging for pipeline events.

Provides JSON-formatted (or key=value text) logs with timestamps and
structured fields. Services log named events through StructuredLogger;
entry points call configure_logging() once.
"""
import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional, TextIO

ROOT_LOGGER_NAME = "bddgen"


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    EXCLUDED_ATTRS = {
        'name', 'msg', 'args', 'levelname', 'levelno',
        'pathname', 'filename', 'module', 'exc_info',
        'exc_text', 'stack_info', 'lineno', 'funcName',
        'created', 'msecs', 'relativeCreated', 'thread',
        'threadName', 'processName', 'process', 'message',
        'asctime', 'taskName'
    }

    def extra_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Collect the structured fields passed through ``extra``."""
        fields = {}
        for key, value in record.__dict__.items():
            if key in self.EXCLUDED_ATTRS:
                continue
            # Handle non-serializable objects
            try:
                json.dumps(value)
                fields[key] = value
            except (TypeError, ValueError):
                fields[key] = str(value)
        return fields

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted string
        """
        log_data = {
            "timestamp": datetime.now().isoformat(),
            "level": record.levelname,
            "event": record.getMessage(),
            "logger": record.name,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(self.extra_fields(record))
        return json.dumps(log_data)


class KeyValueFormatter(StructuredFormatter):
    """Human-readable formatter: ``LEVEL logger: event key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:
        fields = " ".join(
            f"{key}={value}" for key, value in self.extra_fields(record).items()
        )
        line = f"{record.levelname} {record.name}: {record.getMessage()}"
        if fields:
            line = f"{line} {fields}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    level: str = "INFO",
    log_format: str = "text",
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """Install a single handler on the package logger.

    Args:
        level: Logging level name
        log_format: 'json' for structured lines, anything else for key=value text
        stream: Output stream (stderr by default)

    Returns:
        The configured package logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers = []  # Clear existing handlers

    handler = logging.StreamHandler(stream or sys.stderr)
    if log_format.lower() == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(KeyValueFormatter())
    root.addHandler(handler)
    root.propagate = False
    return root


class StructuredLogger:
    """Structured logger wrapper with convenience methods."""

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        """Initialize structured logger.

        Args:
            name: Logger name, placed under the package logger
        """
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def info(self, event: str, **kwargs: Any) -> None:
        """Log info level message.

        Args:
            event: Event name/message
            **kwargs: Additional structured fields
        """
        self._logger.info(event, extra=kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        """Log warning level message.

        Args:
            event: Event name/message
            **kwargs: Additional structured fields
        """
        self._logger.warning(event, extra=kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        """Log error level message.

        Args:
            event: Event name/message
            **kwargs: Additional structured fields
        """
        self._logger.error(event, extra=kwargs)

    def debug(self, event: str, **kwargs: Any) -> None:
        """Log debug level message.

        Args:
            event: Event name/message
            **kwargs: Additional structured fields
        """
        self._logger.debug(event, extra=kwargs)

    def log_generation(
        self,
        purpose: str,
        provider: str,
        model: str,
        duration_ms: float,
        usage: Optional[Dict[str, int]] = None,
        success: bool = True,
        error: Optional[str] = None
    ) -> None:
        """Log an LLM generation request.

        Args:
            purpose: What was generated ('feature' or 'step_definitions')
            provider: LLM provider name
            model: Model name
            duration_ms: Request duration in milliseconds
            usage: Token usage reported by the provider
            success: Whether request succeeded
            error: Error message if failed
        """
        level = logging.INFO if success else logging.ERROR
        usage = usage or {}
        self._logger.log(
            level,
            "llm.generation",
            extra={
                "purpose": purpose,
                "provider": provider,
                "model": model,
                "duration_ms": round(duration_ms, 2),
                "total_tokens": usage.get("total_tokens", 0),
                "success": success,
                "error": error
            }
        )


def get_logger(name: str) -> StructuredLogger:
    """Return a StructuredLogger for a module name."""
    return StructuredLogger(name)
