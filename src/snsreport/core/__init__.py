"""snsreport core -- errors, logging, execution context and settings.

Architecture::

    errors.py      Structured error hierarchy (SnsReportError and subclasses)
    logging.py     structlog configuration and context helpers
    context.py     ExecutionContext (read-only run snapshot)
    settings.py    HandlerSettings (SNSREPORT_* env) + YAML config loading
"""

from snsreport.core.context import ExecutionContext
from snsreport.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidParameterTypeError,
    MissingRequiredParameterError,
    SnsReportError,
    TemplateFileNotFoundError,
    TemplateRenderError,
    TransportError,
    UnknownParameterError,
    ValidationError,
)
from snsreport.core.logging import configure_logging, get_logger

__all__ = [
    "ExecutionContext",
    "ErrorCategory",
    "ErrorContext",
    "SnsReportError",
    "ValidationError",
    "MissingRequiredParameterError",
    "InvalidParameterTypeError",
    "UnknownParameterError",
    "TemplateFileNotFoundError",
    "TemplateRenderError",
    "TransportError",
    "ConfigError",
    "configure_logging",
    "get_logger",
]
