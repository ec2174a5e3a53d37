"""
Handler configuration holder and validator.

``HandlerConfig`` owns the explicit parameters a host passed in and is
the ``Configurable`` capability the Dispatcher delegates to.  Unknown keys
never raise: they are reported to the diagnostics logger and dropped.

``Validator`` performs the purely local checks that must pass before
anything touches the network: required parameters present and the body
template file existing.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from snsreport.core.logging import get_logger
from snsreport.framework.params import (
    PARAMETERS,
    REQUIRED_PARAMETERS,
    ParameterStore,
    ValidationResult,
)


@runtime_checkable
class Configurable(Protocol):
    """Capability: accepts handler parameters by name."""

    def configure(self, config: Mapping[str, Any]) -> list[str]:
        """Apply a mapping of parameters, returning the ignored keys."""
        ...

    def get(self, name: str) -> Any:
        """Current value of a parameter, or None."""
        ...

    def set(self, name: str, value: Any) -> None:
        """Assign a parameter, rejecting wrong types."""
        ...


class HandlerConfig:
    """
    Explicit handler parameters for one Dispatcher.

    Implements ``Configurable``.  Type errors on known keys propagate as
    ``InvalidParameterTypeError``; unknown keys go to the logger.
    """

    def __init__(self, config: Mapping[str, Any] | None = None, *, logger: Any = None):
        self._logger = logger or get_logger(__name__)
        self._store = ParameterStore()
        if config:
            self.configure(config)

    @property
    def store(self) -> ParameterStore:
        return self._store

    def configure(self, config: Mapping[str, Any]) -> list[str]:
        ignored: list[str] = []
        for key, value in config.items():
            name = str(key)
            if name not in PARAMETERS:
                self._logger.warning(
                    "unknown_config_option",
                    option=name,
                    message=f"{type(self).__name__}: configuration option not found: {name}.",
                )
                ignored.append(name)
                continue
            self._store.set(name, value)
        return ignored

    def get(self, name: str) -> Any:
        return self._store.get(name)

    def set(self, name: str, value: Any) -> None:
        self._store.set(name, value)

    def snapshot(self) -> ParameterStore:
        """Independent copy for a single run."""
        return self._store.copy()


class Validator:
    """Structural validation of a resolved configuration."""

    def __init__(
        self,
        *,
        logger: Any = None,
        file_exists: Callable[[str], bool] | None = None,
    ):
        self._logger = logger or get_logger(__name__)
        self._file_exists = file_exists or (lambda path: Path(path).is_file())

    def check(self, store: ParameterStore | Mapping[str, Any]) -> ValidationResult:
        """
        Check required parameters and the body template path.

        Accepts a ``ParameterStore`` or a raw mapping.  Raw mappings are
        also type-checked and unknown keys are listed, so one call can
        report every problem in a configuration file.
        """
        invalid: dict[str, str] = {}
        unknown: list[str] = []

        if isinstance(store, ParameterStore):
            values = store.to_dict()
        else:
            values = {}
            for key, value in store.items():
                param = PARAMETERS.get(key)
                if param is None:
                    unknown.append(str(key))
                    continue
                if value is None:
                    continue
                ok, actual = param.check(value)
                if ok:
                    values[key] = value
                else:
                    invalid[key] = actual

        missing = [name for name in REQUIRED_PARAMETERS if values.get(name) is None and name not in invalid]

        missing_template = None
        body_template = values.get("body_template")
        if body_template and not self._file_exists(body_template):
            missing_template = body_template

        result = ValidationResult(
            valid=not missing and not invalid and missing_template is None,
            missing_params=missing,
            invalid_params=invalid,
            unknown_params=unknown,
            missing_template=missing_template,
        )
        if result.has_errors:
            self._logger.debug("config_invalid", reason=result.get_error_message())
        return result


__all__ = ["Configurable", "HandlerConfig", "Validator"]
