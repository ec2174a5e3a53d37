"""
Shared pytest fixtures and configuration for snsreport tests.

This module provides:
- structlog reset between tests (CLI tests reconfigure logging)
- Sample execution contexts and handler configuration
"""

from datetime import datetime
from typing import Any, Generator

import pytest
import structlog

from snsreport.core.context import ExecutionContext
from tests._support.fakes import RecordingTransport


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults so no test inherits another's output stream."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
def handler_config() -> dict[str, Any]:
    return {
        "access_key": "***AMAZON-KEY***",
        "secret_key": "***AMAZON-SECRET***",
        "topic_arn": "arn:aws:sns:***",
    }


@pytest.fixture
def run_context() -> ExecutionContext:
    """Successful Chef Client run on node ``test``."""
    return ExecutionContext(
        node_name="test",
        success=True,
        start_time=datetime(2026, 1, 15, 12, 0, 0),
        end_time=datetime(2026, 1, 15, 12, 0, 42),
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
