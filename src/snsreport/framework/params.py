"""Parameter schema and typed storage for handler configuration.

Manifesto:
    The handler accepts a small, fixed set of named parameters.  Declaring
    them once, with their type and whether they are required, keeps
    assignment checks and validation consistent and self-documenting.

Tags:
    snsreport, framework, params, validation, schema

Doc-Types:
    api-reference
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from snsreport.core.errors import (
    InvalidParameterTypeError,
    MissingRequiredParameterError,
    TemplateFileNotFoundError,
    UnknownParameterError,
)


@dataclass(frozen=True)
class ParamDef:
    """Definition of a handler parameter."""

    name: str
    type: type
    description: str
    required: bool = False
    item_type: type | None = None

    @property
    def type_name(self) -> str:
        if self.item_type is not None:
            return f"{self.type.__name__}[{self.item_type.__name__}]"
        return self.type.__name__

    def check(self, value: Any) -> tuple[bool, str | None]:
        """
        Check a parameter value against the declared type.

        Sequence parameters accept lists and tuples whose items all match
        ``item_type``.  A bare string is not a sequence here.

        Returns:
            (is_valid, actual_type_name)
        """
        if self.item_type is None:
            if isinstance(value, self.type):
                return True, None
            return False, type(value).__name__

        if not isinstance(value, (list, tuple)):
            return False, type(value).__name__
        for item in value:
            if not isinstance(item, self.item_type):
                return False, f"{type(value).__name__} containing {type(item).__name__}"
        return True, None


PARAMETERS: dict[str, ParamDef] = {
    "access_key": ParamDef("access_key", str, "AWS access key ID", required=True),
    "secret_key": ParamDef("secret_key", str, "AWS secret access key", required=True),
    "region": ParamDef("region", str, "AWS region of the SNS topic"),
    "token": ParamDef("token", str, "AWS session token"),
    "topic_arn": ParamDef("topic_arn", str, "Destination SNS topic ARN", required=True),
    "subject": ParamDef("subject", str, "Fixed notification subject"),
    "body_template": ParamDef("body_template", str, "Path to a body template file"),
    "filter_opsworks_activity": ParamDef(
        "filter_opsworks_activity",
        list,
        "OpsWorks activities allowed to send notifications",
        item_type=str,
    ),
}

REQUIRED_PARAMETERS: tuple[str, ...] = tuple(
    name for name, param in PARAMETERS.items() if param.required
)


class ParameterStore:
    """
    Typed get/set storage for named handler parameters.

    ``None`` means absent: ``get`` returns it for unset names and
    ``set(name, None)`` clears the value.
    """

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        schema: Mapping[str, ParamDef] | None = None,
    ):
        self._schema = dict(schema or PARAMETERS)
        self._values: dict[str, Any] = {}
        for name, value in (values or {}).items():
            self.set(name, value)

    @property
    def schema(self) -> Mapping[str, ParamDef]:
        return self._schema

    def get(self, name: str) -> Any:
        if name not in self._schema:
            raise UnknownParameterError(name)
        return self._values.get(name)

    def set(self, name: str, value: Any) -> None:
        param = self._schema.get(name)
        if param is None:
            raise UnknownParameterError(name)
        if value is None:
            self._values.pop(name, None)
            return
        ok, actual = param.check(value)
        if not ok:
            raise InvalidParameterTypeError(name, param.type_name, actual)
        if param.item_type is not None:
            value = list(value)
        self._values[name] = value

    def has(self, name: str) -> bool:
        return name in self._values

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def to_dict(self) -> dict[str, Any]:
        """Present values only, copied."""
        return {
            name: list(value) if isinstance(value, list) else value
            for name, value in self._values.items()
        }

    def copy(self) -> "ParameterStore":
        return ParameterStore(self.to_dict(), self._schema)

    def __repr__(self) -> str:
        return f"ParameterStore({sorted(self._values)})"


@dataclass
class ValidationResult:
    """Result of configuration validation."""

    valid: bool
    missing_params: list[str] = field(default_factory=list)
    invalid_params: dict[str, str] = field(default_factory=dict)  # param_name -> actual type
    unknown_params: list[str] = field(default_factory=list)
    missing_template: str | None = None

    @property
    def has_errors(self) -> bool:
        return (
            not self.valid
            or bool(self.missing_params)
            or bool(self.invalid_params)
            or self.missing_template is not None
        )

    def get_error_message(self) -> str:
        """Get human-readable error message."""
        messages = []

        if self.missing_params:
            missing_list = ", ".join(self.missing_params)
            messages.append(f"Missing required parameters: {missing_list}")

        if self.invalid_params:
            for param, actual in self.invalid_params.items():
                messages.append(
                    f"Invalid parameter '{param}': expected {PARAMETERS[param].type_name}, got {actual}"
                )

        if self.missing_template is not None:
            messages.append(f"Template file not found: {self.missing_template}")

        return ". ".join(messages) if messages else "Validation passed"

    def raise_for_errors(self) -> None:
        """
        Raise the error matching the first class of violation found.

        Missing parameters win over a missing template so the caller sees
        every absent required name at once.
        """
        if self.missing_params:
            raise MissingRequiredParameterError(self.missing_params)
        if self.missing_template is not None:
            raise TemplateFileNotFoundError(self.missing_template)
        if self.invalid_params:
            name, actual = next(iter(self.invalid_params.items()))
            raise InvalidParameterTypeError(name, PARAMETERS[name].type_name, actual)


def describe_parameters() -> str:
    """Help text listing every recognised parameter."""
    lines = ["Required Parameters:"]
    for name in REQUIRED_PARAMETERS:
        param = PARAMETERS[name]
        lines.append(f"  {name} ({param.type_name}): {param.description}")
    lines.append("")
    lines.append("Optional Parameters:")
    for name, param in PARAMETERS.items():
        if not param.required:
            lines.append(f"  {name} ({param.type_name}): {param.description}")
    return "\n".join(lines)
