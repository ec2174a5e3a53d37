"""Tests for ActivityFilter."""

import pytest

from snsreport.core.context import ExecutionContext
from snsreport.framework.filters import ActivityFilter


def _context(activity=None) -> ExecutionContext:
    attributes = {"opsworks": {"activity": activity}} if activity is not None else {}
    return ExecutionContext(node_name="test", attributes=attributes)


class TestActivityFilter:
    @pytest.mark.parametrize("allow_list", [None, []])
    def test_no_allow_list_always_dispatches(self, allow_list):
        assert ActivityFilter().should_dispatch(_context(), allow_list) is True
        assert ActivityFilter().should_dispatch(_context("configure"), allow_list) is True

    def test_listed_activity_dispatches(self):
        assert ActivityFilter().should_dispatch(_context("deploy"), ["deploy", "setup"]) is True

    def test_unlisted_activity_is_filtered(self):
        assert ActivityFilter().should_dispatch(_context("configure"), ["deploy", "setup"]) is False

    def test_missing_attribute_is_filtered(self):
        assert ActivityFilter().should_dispatch(_context(), ["deploy", "setup"]) is False

    def test_missing_opsworks_leaf(self):
        context = ExecutionContext(node_name="test", attributes={"opsworks": {}})
        assert ActivityFilter().should_dispatch(context, ["deploy"]) is False

    def test_custom_attribute_path(self):
        context = ExecutionContext(node_name="test", attributes={"deploy": {"stage": "setup"}})
        assert ActivityFilter("deploy.stage").should_dispatch(context, ["setup"]) is True
