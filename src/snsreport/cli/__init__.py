"""
CLI layer for snsreport.

Provides a Typer application that drives the report Dispatcher from YAML
configuration and JSON run-context files.

Entry point::

    snsreport --help
"""

from snsreport.cli.app import app

__all__ = ["app"]
