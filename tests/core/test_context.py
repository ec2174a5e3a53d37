"""Tests for ExecutionContext."""

from datetime import datetime

import pytest

from snsreport.core.context import ExecutionContext
from snsreport.core.errors import ConfigError


@pytest.fixture
def node_context() -> ExecutionContext:
    return ExecutionContext(
        node_name="web-1",
        attributes={
            "fqdn": "web-1.example.com",
            "opsworks": {"activity": "deploy"},
            "roles": ["web", "app"],
        },
    )


class TestAttributes:
    def test_dotted_lookup(self, node_context):
        assert node_context.attribute("opsworks.activity") == "deploy"
        assert node_context.attribute("fqdn") == "web-1.example.com"

    def test_missing_returns_default(self, node_context):
        assert node_context.attribute("ec2.instance_id") is None
        assert node_context.attribute("opsworks.stack", "none") == "none"

    def test_traversing_non_mapping(self, node_context):
        assert node_context.attribute("fqdn.length") is None

    def test_has_attribute(self, node_context):
        assert node_context.has_attribute("opsworks.activity")
        assert not node_context.has_attribute("opsworks.layers")

    def test_attributes_are_read_only(self, node_context):
        with pytest.raises(TypeError):
            node_context.attributes["fqdn"] = "other"
        assert node_context.attribute("roles") == ("web", "app")

    def test_caller_mapping_not_shared(self):
        source = {"opsworks": {"activity": "setup"}}
        context = ExecutionContext(node_name="n", attributes=source)
        source["opsworks"]["activity"] = "deploy"
        assert context.attribute("opsworks.activity") == "setup"


class TestTiming:
    def test_elapsed_time(self, run_context):
        assert run_context.elapsed_time == 42.0

    def test_elapsed_time_without_bounds(self):
        assert ExecutionContext(node_name="n", start_time=datetime(2026, 1, 1)).elapsed_time == 0.0

    @pytest.mark.parametrize("success, status", [(True, "success"), (False, "failure")])
    def test_status(self, success, status):
        assert ExecutionContext(node_name="n", success=success).status == status


class TestTemplateVars:
    def test_node_gets_name(self, node_context):
        variables = node_context.to_template_vars()
        assert variables["node"]["name"] == "web-1"
        assert variables["node"]["opsworks"] == {"activity": "deploy"}
        assert variables["node"]["roles"] == ["web", "app"]
        assert variables["node_name"] == "web-1"
        assert variables["context"] is node_context

    def test_name_attribute_not_overwritten(self):
        context = ExecutionContext(node_name="web-1", attributes={"name": "custom"})
        assert context.to_template_vars()["node"]["name"] == "custom"

    def test_run_outcome(self, run_context):
        variables = run_context.to_template_vars()
        assert variables["status"] == "success"
        assert variables["elapsed_time"] == 42.0
        assert variables["backtrace"] == []


class TestFromDict:
    def test_full_mapping(self):
        context = ExecutionContext.from_dict(
            {
                "node_name": "db-1",
                "attributes": {"opsworks": {"activity": "setup"}},
                "success": False,
                "start_time": "2026-01-15T12:00:00",
                "end_time": "2026-01-15T12:01:30",
                "solo": True,
                "exception": "RuntimeError: boom",
                "backtrace": ["a.rb:1"],
                "run_list": ["recipe[db]"],
                "environment": "production",
            }
        )
        assert context.node_name == "db-1"
        assert context.success is False
        assert context.solo is True
        assert context.elapsed_time == 90.0
        assert context.backtrace == ("a.rb:1",)
        assert context.run_list == ("recipe[db]",)
        assert context.environment == "production"

    def test_name_alias_and_defaults(self):
        context = ExecutionContext.from_dict({"name": "web-1"})
        assert context.node_name == "web-1"
        assert context.success is True
        assert context.start_time is None

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {},
            {"node_name": 42},
            {"node_name": "n", "attributes": ["a"]},
            {"node_name": "n", "start_time": "yesterday"},
        ],
    )
    def test_invalid_input(self, data):
        with pytest.raises(ConfigError):
            ExecutionContext.from_dict(data)
