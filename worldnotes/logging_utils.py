"""
logging_utils.py

A small collection of logging helpers used across worldnotes.

The service layer and the CLI report high-level progress through these
helpers so output stays consistent and centralized. No heavy logging
framework: output goes through Typer's echo, which plays well with the CLI
and with CliRunner in tests.
"""

import json
from typing import Any

import typer


def log_verbose(message: str, verbose: bool) -> None:
    """
    Print a high-level progress message when verbose mode is enabled.

    Parameters
    ----------
    message : str
        A short, plain-English description of what is happening
        (e.g., "Created note 4 in notebook 1.").

    verbose : bool
        Whether verbose mode is active. When False, this function does
        nothing.
    """
    if verbose:
        typer.echo(message)


def log_debug(label: str, payload: Any, debug: bool) -> None:
    """
    Print a labelled, pretty-printed payload when debug mode is enabled.

    Payloads that are not JSON serializable are printed with repr().
    """
    if not debug:
        return

    typer.echo(f"{label}:")
    try:
        typer.echo(json.dumps(payload, indent=2, default=str))
    except (TypeError, ValueError):
        typer.echo(repr(payload))
