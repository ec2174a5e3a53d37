"""
CLI utility helpers: input loading and output formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from snsreport.core.context import ExecutionContext
from snsreport.core.errors import ConfigError
from snsreport.core.settings import load_config_file, load_settings, merged_config

console = Console()
err_console = Console(stderr=True)

_SECRET_PARAMETERS = {"secret_key", "token"}


# ── Input helpers ────────────────────────────────────────────────────────


def load_context(path: Path | None) -> ExecutionContext:
    """Read an ``ExecutionContext`` from a JSON file.

    Without a path, a minimal successful context for ``localhost`` is used.
    """
    if path is None:
        return ExecutionContext(node_name="localhost")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read context file: {path}", cause=e) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", cause=e) from e
    return ExecutionContext.from_dict(data)


def load_parameters(path: Path | None) -> dict[str, Any]:
    """Environment parameters overlaid by the YAML config file, if any."""
    file_values = load_config_file(path) if path is not None else {}
    return merged_config(file_values, load_settings())


def fail(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def redact(name: str, value: Any) -> Any:
    if name in _SECRET_PARAMETERS and value:
        return "****"
    if name == "access_key" and isinstance(value, str) and len(value) > 4:
        return f"{value[:4]}****"
    return value


def output_parameters(values: dict[str, Any], *, as_json: bool = False, title: str = "") -> None:
    """Render resolved parameters with secrets redacted."""
    safe = {name: redact(name, value) for name, value in values.items()}
    if as_json:
        console.print_json(json.dumps(safe, default=str))
        return

    table = Table(title=title or None)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value")
    for name, value in safe.items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(name, str(value))
    console.print(table)
