"""
Structured error types for snsreport.

Every failure the report pipeline can produce is a subclass of
``SnsReportError``. Each error carries a category, a structured context and
an optional chained cause so the safe-mode boundary can log it as one
structured event instead of a bare traceback.

Manifesto:
    - **Typed Error Hierarchy:** One error type per pipeline stage
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                       SnsReportError                          │
        │               (category, context, cause)                      │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ValidationError            TemplateRenderError               │
        │  (VALIDATION)               (TEMPLATE)                        │
        │       │                                                       │
        │  MissingRequiredParameter   TransportError                    │
        │  InvalidParameterType       (NETWORK)                         │
        │  UnknownParameter                                             │
        │  TemplateFileNotFound       ConfigError                       │
        │                             (CONFIG)                          │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = MissingRequiredParameterError(["access_key", "topic_arn"])
    >>> error.missing
    ['access_key', 'topic_arn']
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>

    >>> try:
    ...     raise ConnectionError("DNS failure")
    ... except ConnectionError as e:
    ...     raise TransportError("Failed to publish", cause=e)
    Traceback (most recent call last):
    ...
    TransportError: Failed to publish

Guardrails:
    ❌ DON'T: Raise plain Exception from a pipeline stage
    ✅ DO: Use the subclass matching the failing stage

    ❌ DON'T: Put credentials in error context
    ✅ DO: Reference parameters by name only

Tags:
    error-handling, exception-hierarchy, error-context, snsreport

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        VALIDATION: Missing/invalid parameters, missing template file
        TEMPLATE: Template rendering failures
        NETWORK: Publish call failures
        CONFIG: Unreadable or malformed configuration input
        INTERNAL: Bugs, unexpected state
    """

    VALIDATION = "VALIDATION"
    TEMPLATE = "TEMPLATE"
    NETWORK = "NETWORK"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Typed fields for the metadata the report pipeline knows about, plus a
    free-form ``metadata`` dict. ``to_dict()`` serializes non-None fields.

    Examples:
        >>> ctx = ErrorContext(stage="validate", node_name="web-1")
        >>> ctx.to_dict()
        {'stage': 'validate', 'node_name': 'web-1'}

    Attributes:
        stage: Pipeline stage (resolve, validate, build, filter, publish)
        node_name: Node the run belongs to
        topic_arn: Destination topic, when known
        parameter: Configuration parameter involved
        metadata: Additional key-value pairs
    """

    stage: str | None = None
    node_name: str | None = None
    topic_arn: str | None = None
    parameter: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["stage", "node_name", "topic_arn", "parameter"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SnsReportError(Exception):
    """
    Base exception for all snsreport errors.

    All instances carry:
    - **category:** ErrorCategory for classification
    - **context:** ErrorContext with structured metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category``.

    Examples:
        >>> error = SnsReportError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = SnsReportError("Publish failed").with_context(stage="publish")
        >>> error.context.stage
        'publish'

        >>> SnsReportError("Test", category=ErrorCategory.CONFIG).to_dict()["category"]
        'CONFIG'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SnsReportError:
        """
        Add context to this error (fluent API).

        Usage:
            raise TransportError("Failed").with_context(
                stage="publish",
                topic_arn="arn:aws:sns:us-east-1:123456789012:ops",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(SnsReportError):
    """
    Structural configuration problem detected before any network call.

    Never worth retrying: the same configuration fails the same way.
    """

    default_category = ErrorCategory.VALIDATION


class MissingRequiredParameterError(ValidationError):
    """One or more required parameters are absent."""

    def __init__(self, missing: list[str], **kwargs: Any):
        self.missing = list(missing)
        super().__init__(
            f"Required parameter(s) missing: {', '.join(self.missing)}",
            **kwargs,
        )


class InvalidParameterTypeError(ValidationError):
    """A value of the wrong type was assigned to a known parameter."""

    def __init__(self, parameter: str, expected: str, actual: str, **kwargs: Any):
        self.parameter = parameter
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Option '{parameter}' must be a kind of {expected}, got {actual}",
            **kwargs,
        )
        self.context.parameter = parameter


class UnknownParameterError(ValidationError):
    """The parameter name is not part of the schema."""

    def __init__(self, parameter: str, **kwargs: Any):
        self.parameter = parameter
        super().__init__(f"Unknown configuration option: {parameter}", **kwargs)
        self.context.parameter = parameter


class TemplateFileNotFoundError(ValidationError):
    """The configured ``body_template`` does not exist."""

    def __init__(self, path: str, **kwargs: Any):
        self.path = path
        super().__init__(f"Template file not found: {path}.", **kwargs)
        self.context.parameter = "body_template"


# =============================================================================
# BUILD / PUBLISH ERRORS
# =============================================================================


class TemplateRenderError(SnsReportError):
    """The template engine failed while rendering a body."""

    default_category = ErrorCategory.TEMPLATE


class TransportError(SnsReportError):
    """The publish call to the notification service failed."""

    default_category = ErrorCategory.NETWORK


class ConfigError(SnsReportError):
    """A configuration or context input could not be read or parsed."""

    default_category = ErrorCategory.CONFIG


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error, INTERNAL for foreign exceptions."""
    if isinstance(error, SnsReportError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
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
    "categorize_error",
]
