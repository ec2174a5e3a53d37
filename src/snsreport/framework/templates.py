"""Body templates.

The default body is a Jinja2 template kept here as a string.  User bodies
are files rendered by the same engine with the same variables (see
``ExecutionContext.to_template_vars``).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound, Undefined

from snsreport.core.errors import TemplateFileNotFoundError, TemplateRenderError

DEFAULT_BODY_TEMPLATE = """\
Node Name: {{ node_name }}
{% if node.fqdn %}
Hostname: {{ node.fqdn }}
{% endif %}

Chef Run List: {{ run_list | join(", ") }}
Chef Environment: {{ environment or "_default" }}

{% if node.ec2 %}
Instance Id: {{ node.ec2.instance_id }}
Instance Public Hostname: {{ node.ec2.public_hostname }}
Instance Hostname: {{ node.ec2.hostname }}
Instance Public IPv4: {{ node.ec2.public_ipv4 }}
Instance Local IPv4: {{ node.ec2.local_ipv4 }}
Instance Availability Zone: {{ node.ec2.placement_availability_zone }}

{% endif %}
Chef Client Status: {{ status }}
Chef Client Elapsed Time: {{ elapsed_time }}
Chef Client Start Time: {{ start_time or "" }}
Chef Client End Time: {{ end_time or "" }}
{% if exception %}

Exception: {{ exception }}
Stacktrace:
{{ backtrace | join("\\n") }}
{% endif %}
"""


@runtime_checkable
class TemplateEngine(Protocol):
    """Renders a template file against a run context."""

    def render(self, path: str, context: Mapping[str, Any]) -> str:
        """Render the file at ``path`` with ``context`` variables."""
        ...

    def render_string(self, source: str, context: Mapping[str, Any]) -> str:
        """Render template ``source`` with ``context`` variables."""
        ...


class Jinja2TemplateEngine:
    """
    Jinja2-backed template engine.

    ``strict=True`` makes undefined variables an error instead of an
    empty string.
    """

    def __init__(self, *, strict: bool = False):
        self._undefined = StrictUndefined if strict else Undefined

    def _environment(self, search_path: str | None = None) -> Environment:
        return Environment(
            loader=FileSystemLoader(search_path) if search_path else None,
            undefined=self._undefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def render(self, path: str, context: Mapping[str, Any]) -> str:
        template_path = Path(path)
        env = self._environment(str(template_path.parent))
        try:
            template = env.get_template(template_path.name)
        except TemplateNotFound as e:
            raise TemplateFileNotFoundError(str(path), cause=e) from e
        except TemplateError as e:
            raise TemplateRenderError(f"Cannot parse template {path}: {e}", cause=e) from e
        try:
            return template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"Cannot render template {path}: {e}", cause=e) from e

    def render_string(self, source: str, context: Mapping[str, Any]) -> str:
        env = self._environment()
        try:
            return env.from_string(source).render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"Cannot render template: {e}", cause=e) from e


__all__ = ["DEFAULT_BODY_TEMPLATE", "Jinja2TemplateEngine", "TemplateEngine"]
