"""Environment probe and configuration resolution.

Manifesto:
    Most nodes already know their region and, on EC2 with an instance
    profile, their temporary credentials.  The resolver fills in what the
    operator left out from that host metadata, and never touches what the
    operator set explicitly.

Tags:
    snsreport, framework, config, probe, ec2, region

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from snsreport.core.context import ExecutionContext
from snsreport.core.logging import get_logger
from snsreport.framework.config import HandlerConfig
from snsreport.framework.params import ParameterStore

# Parameters the probe may supply, in resolution order.
PROBED_PARAMETERS: tuple[str, ...] = ("region", "access_key", "secret_key", "token")

_CREDENTIAL_KEYS = {
    "access_key": "AccessKeyId",
    "secret_key": "SecretAccessKey",
    "token": "Token",
}


@runtime_checkable
class EnvironmentProbe(Protocol):
    """Supplies auto-detected configuration values."""

    def resolve(self, field_name: str) -> str | None:
        """Value for ``field_name``, or None when unknown."""
        ...


class NodeAttributeProbe:
    """
    Reads EC2 metadata collected in the node attributes.

    - ``region``: ``ec2.placement_availability_zone`` without its zone letter
    - ``access_key``/``secret_key``/``token``: first role under
      ``ec2.iam.security-credentials``
    """

    def __init__(self, context: ExecutionContext):
        self._context = context

    def resolve(self, field_name: str) -> str | None:
        if field_name == "region":
            return self._region()
        if field_name in _CREDENTIAL_KEYS:
            return self._credential(_CREDENTIAL_KEYS[field_name])
        return None

    def _region(self) -> str | None:
        zone = self._context.attribute("ec2.placement_availability_zone")
        if not isinstance(zone, str) or not zone:
            return None
        # us-east-1a -> us-east-1
        if zone[-1].isalpha():
            zone = zone[:-1]
        return zone or None

    def _credential(self, key: str) -> str | None:
        roles = self._context.attribute("ec2.iam.security-credentials")
        if not isinstance(roles, Mapping) or not roles:
            return None
        credentials = next(iter(roles.values()))
        if not isinstance(credentials, Mapping):
            return None
        value = credentials.get(key)
        return value if isinstance(value, str) and value else None


ProbeFactory = Callable[[ExecutionContext], EnvironmentProbe]


class ConfigResolver:
    """Merges explicit configuration with probe-supplied values."""

    def __init__(self, probe_factory: ProbeFactory | None = None, *, logger: Any = None):
        self._probe_factory = probe_factory or NodeAttributeProbe
        self._logger = logger or get_logger(__name__)

    def resolve(
        self,
        explicit: ParameterStore | Mapping[str, Any],
        context: ExecutionContext,
    ) -> ParameterStore:
        """
        Return a new store with probe values filling unset parameters.

        The probe is asked once per unset name in ``PROBED_PARAMETERS``
        and never about explicitly set ones.  ``explicit`` is not modified.
        Unknown keys in a raw mapping are logged and ignored.
        """
        if isinstance(explicit, ParameterStore):
            resolved = explicit.copy()
        else:
            resolved = HandlerConfig(explicit, logger=self._logger).snapshot()

        probe: EnvironmentProbe | None = None
        filled: list[str] = []
        for name in PROBED_PARAMETERS:
            if resolved.has(name):
                continue
            if probe is None:
                probe = self._probe_factory(context)
            value = probe.resolve(name)
            if value is not None:
                resolved.set(name, value)
                filled.append(name)

        if filled:
            self._logger.debug("config_resolved_from_probe", parameters=filled)
        return resolved


__all__ = [
    "ConfigResolver",
    "EnvironmentProbe",
    "NodeAttributeProbe",
    "PROBED_PARAMETERS",
    "ProbeFactory",
]
