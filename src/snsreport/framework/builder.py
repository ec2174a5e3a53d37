"""Notification subject/body construction.

Manifesto:
    The message is the product.  Subject and body are built once per run
    from the execution context and the resolved parameters, then handed
    to the transport untouched.

Tags:
    snsreport, framework, builder, message, template

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from snsreport.core.context import ExecutionContext
from snsreport.core.logging import get_logger
from snsreport.framework.params import ParameterStore
from snsreport.framework.templates import DEFAULT_BODY_TEMPLATE, Jinja2TemplateEngine, TemplateEngine

ENGINE_NAME = "Chef"

# SNS message limit: 256 KiB.
MAX_BODY_BYTES = 262144


@dataclass(frozen=True)
class NotificationMessage:
    """Subject and body of one notification."""

    subject: str
    body: str


def execution_mode(context: ExecutionContext) -> str:
    return "Solo" if context.solo else "Client"


def default_subject(context: ExecutionContext) -> str:
    """``"Chef Client success in web-1"`` style subject."""
    return f"{ENGINE_NAME} {execution_mode(context)} {context.status} in {context.node_name}"


def truncate_body(body: str, limit: int = MAX_BODY_BYTES) -> str:
    encoded = body.encode("utf-8")
    if len(encoded) <= limit:
        return body
    return encoded[:limit].decode("utf-8", "ignore")


class NotificationBuilder:
    """Builds a NotificationMessage from context and parameters."""

    def __init__(self, template_engine: TemplateEngine | None = None, *, logger: Any = None):
        self._engine = template_engine or Jinja2TemplateEngine()
        self._logger = logger or get_logger(__name__)

    def build_subject(self, context: ExecutionContext, store: ParameterStore) -> str:
        """Configured subject verbatim, or the default when unset or blank."""
        subject = store.get("subject")
        if subject is None or not subject.strip():
            return default_subject(context)
        return subject

    def build_body(self, context: ExecutionContext, store: ParameterStore) -> str:
        """
        Render the body.

        Raises:
            TemplateFileNotFoundError: configured template disappeared
            TemplateRenderError: the template failed to render
        """
        variables = context.to_template_vars()
        body_template = store.get("body_template")
        if body_template is not None:
            self._logger.debug("rendering_body_template", path=body_template)
            body = self._engine.render(body_template, variables)
        else:
            body = self._engine.render_string(DEFAULT_BODY_TEMPLATE, variables)
        return truncate_body(body)

    def build(self, context: ExecutionContext, store: ParameterStore) -> NotificationMessage:
        return NotificationMessage(
            subject=self.build_subject(context, store),
            body=self.build_body(context, store),
        )


__all__ = [
    "NotificationBuilder",
    "NotificationMessage",
    "default_subject",
    "execution_mode",
    "truncate_body",
]
