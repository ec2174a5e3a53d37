"""Tests for NotificationBuilder and the Jinja2 template engine."""

from unittest.mock import MagicMock

import pytest

from snsreport.core.context import ExecutionContext
from snsreport.core.errors import TemplateFileNotFoundError, TemplateRenderError
from snsreport.framework.builder import (
    NotificationBuilder,
    NotificationMessage,
    default_subject,
    truncate_body,
)
from snsreport.framework.params import ParameterStore
from snsreport.framework.templates import Jinja2TemplateEngine, TemplateEngine


class TestSubject:
    def test_default_subject_chef_client(self, run_context, handler_config):
        subject = NotificationBuilder().build_subject(run_context, ParameterStore(handler_config))
        assert subject == "Chef Client success in test"

    def test_default_subject_chef_solo(self, handler_config):
        context = ExecutionContext(node_name="test", solo=True)
        subject = NotificationBuilder().build_subject(context, ParameterStore(handler_config))
        assert subject == "Chef Solo success in test"

    def test_default_subject_failure(self):
        context = ExecutionContext(node_name="test", success=False)
        assert default_subject(context) == "Chef Client failure in test"

    @pytest.mark.parametrize("solo", [True, False])
    @pytest.mark.parametrize("success", [True, False])
    def test_configured_subject_wins(self, handler_config, solo, success):
        handler_config["subject"] = "My Subject"
        context = ExecutionContext(node_name="test", solo=solo, success=success)
        subject = NotificationBuilder().build_subject(context, ParameterStore(handler_config))
        assert subject == "My Subject"

    def test_configured_subject_kept_verbatim(self, run_context, handler_config):
        handler_config["subject"] = "Deploy\nweb-1 " + "x" * 120
        message = NotificationBuilder().build(run_context, ParameterStore(handler_config))
        assert message.subject == handler_config["subject"]

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_subject_uses_default(self, run_context, handler_config, blank):
        handler_config["subject"] = blank
        message = NotificationBuilder().build(run_context, ParameterStore(handler_config))
        assert message.subject == "Chef Client success in test"


class TestBody:
    def test_default_body_contains_node_name(self, run_context, handler_config):
        body = NotificationBuilder().build_body(run_context, ParameterStore(handler_config))
        assert "Node Name: test" in body
        assert "Chef Client Status: success" in body
        assert "Chef Client Elapsed Time: 42.0" in body

    def test_default_body_with_ec2_and_exception(self, handler_config):
        context = ExecutionContext(
            node_name="web-1",
            attributes={
                "fqdn": "web-1.example.com",
                "ec2": {"instance_id": "i-0abc", "placement_availability_zone": "eu-west-1a"},
            },
            success=False,
            exception="RuntimeError: boom",
            backtrace=("recipe.rb:1", "recipe.rb:2"),
            run_list=("recipe[base]", "role[web]"),
        )
        body = NotificationBuilder().build_body(context, ParameterStore(handler_config))
        assert "Hostname: web-1.example.com" in body
        assert "Instance Id: i-0abc" in body
        assert "Chef Run List: recipe[base], role[web]" in body
        assert "Exception: RuntimeError: boom" in body
        assert "recipe.rb:1\nrecipe.rb:2" in body

    def test_default_body_without_ec2(self, run_context, handler_config):
        body = NotificationBuilder().build_body(run_context, ParameterStore(handler_config))
        assert "Instance Id" not in body
        assert "Exception" not in body

    def test_body_template_rendered_verbatim(self, run_context, handler_config, tmp_path):
        template = tmp_path / "existing-template.j2"
        template.write_text("My Template")
        handler_config["body_template"] = str(template)
        body = NotificationBuilder().build_body(run_context, ParameterStore(handler_config))
        assert body == "My Template"

    def test_body_template_variables(self, handler_config, tmp_path):
        template = tmp_path / "body.j2"
        template.write_text("{{ node.name }} ({{ node.opsworks.activity }}) {{ status }}\n")
        handler_config["body_template"] = str(template)
        context = ExecutionContext(node_name="web-1", attributes={"opsworks": {"activity": "deploy"}})
        body = NotificationBuilder().build_body(context, ParameterStore(handler_config))
        assert body == "web-1 (deploy) success\n"

    def test_template_engine_used_for_file(self, run_context, handler_config):
        engine = MagicMock(spec=TemplateEngine)
        engine.render.return_value = "rendered"
        handler_config["body_template"] = "/etc/snsreport/body.j2"
        body = NotificationBuilder(engine).build_body(run_context, ParameterStore(handler_config))
        assert body == "rendered"
        path, variables = engine.render.call_args.args
        assert path == "/etc/snsreport/body.j2"
        assert variables["node_name"] == "test"

    def test_render_error_propagates(self, run_context, handler_config, tmp_path):
        template = tmp_path / "broken.j2"
        template.write_text("{% if %}")
        handler_config["body_template"] = str(template)
        with pytest.raises(TemplateRenderError):
            NotificationBuilder().build_body(run_context, ParameterStore(handler_config))

    def test_strict_engine_rejects_undefined(self, run_context, handler_config, tmp_path):
        template = tmp_path / "undefined.j2"
        template.write_text("{{ missing_variable }}")
        handler_config["body_template"] = str(template)
        builder = NotificationBuilder(Jinja2TemplateEngine(strict=True))
        with pytest.raises(TemplateRenderError):
            builder.build_body(run_context, ParameterStore(handler_config))

    def test_template_removed_after_validation(self, run_context, handler_config, tmp_path):
        handler_config["body_template"] = str(tmp_path / "gone.j2")
        with pytest.raises(TemplateFileNotFoundError):
            NotificationBuilder().build_body(run_context, ParameterStore(handler_config))

    def test_truncate_body_respects_utf8(self):
        body = "é" * 10
        truncated = truncate_body(body, limit=5)
        assert truncated == "éé"
        assert truncate_body("short") == "short"


class TestBuild:
    def test_build_returns_message(self, run_context, handler_config):
        message = NotificationBuilder().build(run_context, ParameterStore(handler_config))
        assert isinstance(message, NotificationMessage)
        assert message.subject == "Chef Client success in test"
        assert message.body
