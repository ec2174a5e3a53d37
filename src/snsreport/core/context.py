"""Execution context for a finished configuration run.

Manifesto:
    The handler never talks to the node directly.  Everything it needs
    (node name, outcome, timings, nested node attributes) arrives as one
    read-only snapshot, built once per run.

Tags:
    snsreport, core, context, run-status

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from snsreport.core.errors import ConfigError

_MISSING = object()


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def _parse_time(value: Any, name: str) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise ConfigError(f"Invalid {name} timestamp: {value!r}", cause=e) from e


@dataclass(frozen=True)
class ExecutionContext:
    """
    Read-only snapshot of a configuration run.

    ``attributes`` is the nested node attribute tree, e.g.
    ``{"opsworks": {"activity": "deploy"}, "ec2": {...}}``.  ``solo``
    marks a local/standalone run as opposed to a server-driven one.
    """

    node_name: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    success: bool = True
    start_time: datetime | None = None
    end_time: datetime | None = None
    solo: bool = False
    exception: str | None = None
    backtrace: tuple[str, ...] = ()
    run_list: tuple[str, ...] = ()
    environment: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "attributes", _freeze(self.attributes or {}))
        object.__setattr__(self, "backtrace", tuple(self.backtrace or ()))
        object.__setattr__(self, "run_list", tuple(self.run_list or ()))

    @property
    def elapsed_time(self) -> float:
        """Run duration in seconds, 0.0 when a bound is missing."""
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    @property
    def status(self) -> str:
        return "success" if self.success else "failure"

    def attribute(self, path: str, default: Any = None) -> Any:
        """
        Look up a nested attribute by dotted path.

        Returns ``default`` when any segment is missing or a non-mapping
        is traversed.
        """
        current: Any = self.attributes
        for segment in path.split("."):
            if not isinstance(current, Mapping):
                return default
            current = current.get(segment, _MISSING)
            if current is _MISSING:
                return default
        return current

    def has_attribute(self, path: str) -> bool:
        return self.attribute(path, _MISSING) is not _MISSING

    def to_template_vars(self) -> dict[str, Any]:
        """Variables exposed to body templates."""
        node = _thaw(self.attributes)
        node.setdefault("name", self.node_name)
        return {
            "node": node,
            "node_name": self.node_name,
            "success": self.success,
            "status": self.status,
            "elapsed_time": self.elapsed_time,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "exception": self.exception,
            "backtrace": list(self.backtrace),
            "run_list": list(self.run_list),
            "environment": self.environment,
            "context": self,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExecutionContext:
        """
        Build a context from a JSON-style mapping.

        Recognised keys: ``node_name`` (or ``name``), ``attributes``,
        ``success``, ``start_time``, ``end_time`` (ISO 8601), ``solo``,
        ``exception``, ``backtrace``, ``run_list``, ``environment``.
        """
        if not isinstance(data, Mapping):
            raise ConfigError("Execution context must be a mapping")
        node_name = data.get("node_name") or data.get("name")
        if not node_name or not isinstance(node_name, str):
            raise ConfigError("Execution context requires a 'node_name' string")
        attributes = data.get("attributes") or {}
        if not isinstance(attributes, Mapping):
            raise ConfigError("Execution context 'attributes' must be a mapping")
        return cls(
            node_name=node_name,
            attributes=attributes,
            success=bool(data.get("success", True)),
            start_time=_parse_time(data.get("start_time"), "start_time"),
            end_time=_parse_time(data.get("end_time"), "end_time"),
            solo=bool(data.get("solo", False)),
            exception=data.get("exception"),
            backtrace=tuple(data.get("backtrace") or ()),
            run_list=tuple(data.get("run_list") or ()),
            environment=data.get("environment"),
        )


__all__ = ["ExecutionContext"]
