"""
Settings and configuration-file loading for snsreport.

Manifesto:
    Handler parameters come from three places: an explicit mapping passed
    by the host, a YAML file, and ``SNSREPORT_*`` environment variables.
    This module turns the last two into the same plain mapping the
    Dispatcher accepts, so the pipeline only ever sees one shape.

Resolution order (later wins)::

    SNSREPORT_* env vars / .env  →  YAML config file  →  explicit mapping

Tags:
    snsreport, configuration, settings, pydantic, yaml

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from snsreport.core.errors import ConfigError

# Settings fields that are handler parameters (the rest are ambient).
PARAMETER_FIELDS = (
    "access_key",
    "secret_key",
    "region",
    "token",
    "topic_arn",
    "subject",
    "body_template",
    "filter_opsworks_activity",
)


class HandlerSettings(BaseSettings):
    """snsreport environment configuration.

    All fields can be set via ``SNSREPORT_*`` environment variables (e.g.
    ``SNSREPORT_TOPIC_ARN``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SNSREPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Handler parameters ───────────────────────────────────────
    access_key: str | None = Field(default=None)
    secret_key: str | None = Field(default=None)
    region: str | None = Field(default=None)
    token: str | None = Field(default=None)
    topic_arn: str | None = Field(default=None)
    subject: str | None = Field(default=None)
    body_template: str | None = Field(default=None)
    filter_opsworks_activity: Annotated[list[str] | None, NoDecode] = Field(
        default=None,
        description="Comma-separated or JSON list of OpsWorks activities",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("filter_opsworks_activity", mode="before")
    @classmethod
    def _split_activities(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        value = value.strip()
        if not value:
            return None
        if value.startswith("["):
            return json.loads(value)
        return [item.strip() for item in value.split(",") if item.strip()]

    def parameters(self) -> dict[str, Any]:
        """Handler parameters that are set, as a plain mapping."""
        return {
            name: getattr(self, name)
            for name in PARAMETER_FIELDS
            if getattr(self, name) is not None
        }


def load_settings() -> HandlerSettings:
    """
    Read ``HandlerSettings`` from the environment.

    Raises:
        ConfigError: a ``SNSREPORT_*`` value could not be parsed
    """
    try:
        return HandlerSettings()
    except ValidationError as e:
        raise ConfigError(f"Invalid SNSREPORT_* environment settings: {e}", cause=e) from e


def load_config_file(path: str | Path) -> dict[str, Any]:
    """
    Read a YAML mapping of handler parameters.

    An empty file yields an empty mapping.

    Raises:
        ConfigError: file missing, unreadable, not YAML, or not a mapping
    """
    config_path = Path(path)
    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {config_path}", cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}", cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return dict(data)


def merged_config(
    file_values: Mapping[str, Any] | None = None,
    settings: HandlerSettings | None = None,
) -> dict[str, Any]:
    """Environment parameters overlaid by file values."""
    merged = (settings or load_settings()).parameters()
    merged.update(file_values or {})
    return merged


__all__ = [
    "HandlerSettings",
    "PARAMETER_FIELDS",
    "load_config_file",
    "load_settings",
    "merged_config",
]
