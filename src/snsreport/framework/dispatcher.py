"""
End-of-run report dispatcher.

Runs the report pipeline for one execution context::

    resolve → validate → build → filter → publish

Two entry points share the pipeline and differ only in failure policy:

- ``run_report_unsafe``: every error propagates, tagged with the stage
  that raised it.  Used for explicit validation and tests.
- ``run_report_safely``: every error is logged and swallowed, so a broken
  notification setup never fails the job it reports on.

Usage:
    dispatcher = Dispatcher({
        "access_key": "...",
        "secret_key": "...",
        "topic_arn": "arn:aws:sns:eu-west-1:123456789012:chef-runs",
    })
    dispatcher.run_report_safely(context)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from snsreport.core.context import ExecutionContext
from snsreport.core.errors import SnsReportError, TemplateRenderError, TransportError
from snsreport.core.logging import LogContext, get_logger
from snsreport.framework.builder import NotificationBuilder, NotificationMessage
from snsreport.framework.config import HandlerConfig, Validator
from snsreport.framework.filters import ActivityFilter
from snsreport.framework.params import ParameterStore
from snsreport.framework.probe import ConfigResolver, ProbeFactory
from snsreport.framework.templates import TemplateEngine
from snsreport.framework.transport import Credentials, SnsTransport, Transport


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one report run."""

    published: bool
    message: NotificationMessage
    message_id: str | None = None
    reason: str | None = None


class Dispatcher:
    """
    Orchestrates one SNS report per run.

    Implements ``Configurable`` by delegating to its ``HandlerConfig``.
    Each run resolves a fresh copy of the explicit parameters, so
    consecutive runs share no mutable state.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        probe_factory: ProbeFactory | None = None,
        template_engine: TemplateEngine | None = None,
        validator: Validator | None = None,
        activity_filter: ActivityFilter | None = None,
        logger: Any = None,
    ):
        self._logger = logger or get_logger(__name__)
        self._config = HandlerConfig(config, logger=self._logger)
        self._resolver = ConfigResolver(probe_factory, logger=self._logger)
        self._validator = validator or Validator(logger=self._logger)
        self._builder = NotificationBuilder(template_engine, logger=self._logger)
        self._filter = activity_filter or ActivityFilter()
        self._transport = transport or SnsTransport(logger=self._logger)
        self._resolved: ParameterStore | None = None
        self._last_message: NotificationMessage | None = None

    # ── Configurable ─────────────────────────────────────────────

    def configure(self, config: Mapping[str, Any]) -> list[str]:
        return self._config.configure(config)

    def get(self, name: str) -> Any:
        return self._config.get(name)

    def set(self, name: str, value: Any) -> None:
        self._config.set(name, value)

    # ── Inspection ───────────────────────────────────────────────

    @property
    def config(self) -> HandlerConfig:
        return self._config

    @property
    def resolved(self) -> ParameterStore | None:
        """Parameters of the most recent run after resolution."""
        return self._resolved

    @property
    def region(self) -> str | None:
        return self._resolved.get("region") if self._resolved is not None else None

    @property
    def last_message(self) -> NotificationMessage | None:
        return self._last_message

    # ── Pipeline stages ──────────────────────────────────────────

    def resolve(self, context: ExecutionContext) -> ParameterStore:
        self._resolved = self._resolver.resolve(self._config.snapshot(), context)
        return self._resolved

    def validate(self, store: ParameterStore) -> None:
        self._validator.check(store).raise_for_errors()

    def build(self, context: ExecutionContext, store: ParameterStore) -> NotificationMessage:
        try:
            message = self._builder.build(context, store)
        except SnsReportError:
            raise
        except Exception as e:
            raise TemplateRenderError(f"Cannot build notification: {e}", cause=e) from e
        self._last_message = message
        return message

    def publish(self, store: ParameterStore, message: NotificationMessage) -> str | None:
        topic_arn = store.get("topic_arn")
        try:
            return self._transport.publish(
                topic_arn,
                message.subject,
                message.body,
                Credentials.from_store(store),
            )
        except SnsReportError:
            raise
        except Exception as e:
            raise TransportError(f"Publish to {topic_arn} failed: {e}", cause=e) from e

    def _stage(self, stage: str, context: ExecutionContext, func, *args):
        try:
            return func(*args)
        except SnsReportError as e:
            e.with_context(stage=stage, node_name=context.node_name)
            raise

    # ── Entry points ─────────────────────────────────────────────

    def run_report_unsafe(self, context: ExecutionContext) -> DispatchResult:
        """Run the pipeline, propagating any error."""
        self._resolved = None
        self._last_message = None
        with LogContext(node=context.node_name):
            store = self._stage("resolve", context, self.resolve, context)
            self._stage("validate", context, self.validate, store)
            message = self._stage("build", context, self.build, context, store)

            allow_list = store.get("filter_opsworks_activity")
            if not self._filter.should_dispatch(context, allow_list):
                self._logger.info(
                    "report_filtered",
                    activity=context.attribute("opsworks.activity"),
                    allowed=allow_list,
                )
                return DispatchResult(published=False, message=message, reason="filtered")

            message_id = self._stage("publish", context, self.publish, store, message)
            self._logger.info("report_sent", topic_arn=store.get("topic_arn"), status=context.status)
            return DispatchResult(published=True, message=message, message_id=message_id)

    def run_report_safely(self, context: ExecutionContext) -> DispatchResult | None:
        """Run the pipeline, logging and swallowing any error."""
        try:
            return self.run_report_unsafe(context)
        except Exception as e:
            details = e.to_dict() if isinstance(e, SnsReportError) else {"message": str(e)}
            self._logger.error(
                "report_handler_failed",
                handler=type(self).__name__,
                error_type=type(e).__name__,
                error=details,
                exc_info=True,
            )
            return None


__all__ = ["DispatchResult", "Dispatcher"]
