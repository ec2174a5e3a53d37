"""
snsreport framework - the report pipeline.

This module provides:
- Parameter schema and typed storage
- Configuration holder, validator and resolver
- Notification builder and activity filter
- SNS transport
- Dispatcher (safe / unsafe runs)
"""

from snsreport.framework.builder import NotificationBuilder, NotificationMessage
from snsreport.framework.config import Configurable, HandlerConfig, Validator
from snsreport.framework.dispatcher import DispatchResult, Dispatcher
from snsreport.framework.filters import ActivityFilter
from snsreport.framework.params import PARAMETERS, ParameterStore, ParamDef, ValidationResult
from snsreport.framework.probe import ConfigResolver, EnvironmentProbe, NodeAttributeProbe
from snsreport.framework.templates import Jinja2TemplateEngine, TemplateEngine
from snsreport.framework.transport import Credentials, SnsTransport, Transport

__all__ = [
    # Parameters
    "PARAMETERS",
    "ParamDef",
    "ParameterStore",
    "ValidationResult",
    # Configuration
    "Configurable",
    "HandlerConfig",
    "Validator",
    "ConfigResolver",
    "EnvironmentProbe",
    "NodeAttributeProbe",
    # Message
    "NotificationBuilder",
    "NotificationMessage",
    "Jinja2TemplateEngine",
    "TemplateEngine",
    "ActivityFilter",
    # Transport
    "Credentials",
    "SnsTransport",
    "Transport",
    # Dispatcher
    "Dispatcher",
    "DispatchResult",
]
