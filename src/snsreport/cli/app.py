"""
Root Typer application for the snsreport CLI.

Commands:

- ``validate``: resolve and validate a configuration
- ``preview``: build the notification without publishing
- ``send``: run the full report pipeline
"""

from __future__ import annotations

import json
from pathlib import Path

import typer

from snsreport.cli.utils import console, err_console, fail, load_context, load_parameters, output_parameters
from snsreport.core.errors import ConfigError, SnsReportError
from snsreport.core.logging import configure_logging
from snsreport.core.settings import load_settings
from snsreport.framework.config import Validator
from snsreport.framework.dispatcher import Dispatcher
from snsreport.framework.params import ValidationResult, describe_parameters
from snsreport.framework.probe import ConfigResolver

app = typer.Typer(
    name="snsreport",
    help="snsreport: Chef run reports over Amazon SNS.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

ConfigOption = typer.Option(None, "--config", "-c", help="YAML file with handler parameters.")
ContextOption = typer.Option(None, "--context", "-x", help="JSON file describing the run.")


def _version_callback(value: bool) -> None:
    if value:
        from snsreport import __version__

        typer.echo(f"snsreport {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
    log_format: str | None = typer.Option(None, "--log-format", help="json or console."),
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """snsreport CLI: validate, preview and send run reports."""
    try:
        settings = load_settings()
        fmt = (log_format or settings.log_format).lower()
        configure_logging(level=log_level or settings.log_level, json_format=fmt == "json")
    except ConfigError as e:
        fail(e.message)


@app.command("validate")
def validate(
    config: Path | None = ConfigOption,
    context: Path | None = ContextOption,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Resolve and validate handler parameters."""
    try:
        parameters = load_parameters(config)
        run = load_context(context)
    except ConfigError as e:
        fail(e.message)

    validator = Validator()
    raw = validator.check(parameters)
    for name in raw.unknown_params:
        err_console.print(f"[yellow]Warning:[/yellow] unknown option ignored: {name}")
    if raw.invalid_params:
        fail(ValidationResult(valid=False, invalid_params=raw.invalid_params).get_error_message())

    # Required fields are checked after the probe has filled what it can.
    known = {name: value for name, value in parameters.items() if name not in raw.unknown_params}
    resolved = ConfigResolver().resolve(known, run)
    result = validator.check(resolved)
    if result.has_errors:
        if result.missing_params:
            err_console.print(describe_parameters(), markup=False, highlight=False)
        fail(result.get_error_message())

    output_parameters(resolved.to_dict(), as_json=json_out, title="Resolved Configuration")
    if not json_out:
        console.print("[green]✓[/green] Configuration is valid")


@app.command("preview")
def preview(
    config: Path | None = ConfigOption,
    context: Path | None = ContextOption,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Build the notification and print it without publishing."""
    try:
        dispatcher = Dispatcher(load_parameters(config))
        run = load_context(context)
        store = dispatcher.resolve(run)
        dispatcher.validate(store)
        message = dispatcher.build(run, store)
    except SnsReportError as e:
        fail(e.message)

    if json_out:
        console.print_json(json.dumps({"subject": message.subject, "body": message.body}))
        return
    console.print(f"[bold]Subject:[/bold] {message.subject}")
    console.print()
    console.print(message.body, markup=False, highlight=False)


@app.command("send")
def send(
    config: Path | None = ConfigOption,
    context: Path | None = ContextOption,
    unsafe: bool = typer.Option(False, "--unsafe", help="Propagate errors instead of logging them."),
) -> None:
    """Run the report pipeline and publish to SNS."""
    try:
        dispatcher = Dispatcher(load_parameters(config))
        run = load_context(context)
    except SnsReportError as e:
        fail(e.message)

    if unsafe:
        try:
            result = dispatcher.run_report_unsafe(run)
        except SnsReportError as e:
            fail(e.message)
    else:
        result = dispatcher.run_report_safely(run)

    if result is None:
        err_console.print("[yellow]Report not sent; see log for details.[/yellow]")
    elif result.published:
        console.print(f"[green]✓[/green] Published {result.message_id or ''}".rstrip())
    else:
        console.print(f"[dim]Not published ({result.reason}).[/dim]")
