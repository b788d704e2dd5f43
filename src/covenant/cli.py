# src/covenant/cli.py
"""Covenant Command Line Interface.

Entry point for the covenant CLI tool: inspect command contracts and check
contexts against them without running any command body.
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any, Literal

import typer
from pydantic import ValidationError

from covenant import __version__
from covenant.contracts.enums import UndeclaredPolicy
from covenant.core.config import CovenantSettings, load_settings
from covenant.core.logging import configure_logging, get_logger
from covenant.engine.command import Command
from covenant.engine.contract_engine import missing_property_message

__all__ = ["app"]

logger = get_logger(__name__)

app = typer.Typer(
    name="covenant",
    help="Covenant: property contracts for command objects.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"covenant version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Covenant: property contracts for command objects."""


def _load_command(target: str) -> type[Command]:
    """Import a Command subclass from a 'package.module:ClassName' reference.

    Raises:
        typer.Exit: If the reference is malformed, unimportable, or not a Command
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        typer.secho(f"Error: expected 'module:ClassName', got '{target}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        typer.secho(f"Error: cannot import module '{module_name}': {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from None

    obj: Any = module
    for part in attr.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            typer.secho(f"Error: '{attr}' not found in module '{module_name}'", fg=typer.colors.RED, err=True)
            raise typer.Exit(2)
    if not (isinstance(obj, type) and issubclass(obj, Command)):
        typer.secho(f"Error: '{target}' is not a Command subclass", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    return obj


def _load_settings_or_exit(settings: str | None) -> CovenantSettings:
    if settings is None:
        return CovenantSettings()
    settings_path = Path(settings).expanduser()
    try:
        return load_settings(settings_path)
    except FileNotFoundError:
        typer.secho(f"Error: settings file not found: {settings}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from None
    except ValidationError as e:
        typer.secho("Configuration errors:", fg=typer.colors.RED, err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.secho(f"  - {loc}: {error['msg']}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from None


@app.command()
def describe(
    target: str = typer.Argument(..., help="Command class as 'package.module:ClassName'."),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (human-readable) or 'json'.",
    ),
) -> None:
    """Show the contract declared by a command class."""
    command_cls = _load_command(target)
    rows = command_cls.property_table.describe()

    if output_format == "json":
        payload = {
            "command": f"{command_cls.__module__}.{command_cls.__qualname__}",
            "on_violation": command_cls.violation_handler is not None,
            "properties": rows,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"{command_cls.__qualname__} ({command_cls.__module__})")
    if not rows:
        typer.echo("  (no declared properties)")
    for row in rows:
        handler = ", on_violation" if row["on_violation"] else ""
        typer.echo(f"  {row['name']:<24} {row['presence']:<10} default={row['default']}{handler}")
    if command_cls.violation_handler is not None:
        typer.echo("  command-level on_violation handler registered")


@app.command()
def check(
    target: str = typer.Argument(..., help="Command class as 'package.module:ClassName'."),
    context: str = typer.Option(
        "{}",
        "--context",
        "-c",
        help="Context as a JSON object.",
    ),
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (human-readable) or 'json'.",
    ),
) -> None:
    """Check a context against a command's contract without running it.

    Exits 1 when an expected property is missing. Undeclared properties are
    reported according to the configured policy and fail the check only
    under 'reject'.
    """
    config = _load_settings_or_exit(settings)
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)
    command_cls = _load_command(target)

    try:
        values = json.loads(context)
    except json.JSONDecodeError as e:
        typer.secho(f"Error: --context is not valid JSON: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from None
    if not isinstance(values, dict):
        typer.secho("Error: --context must be a JSON object", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    report = command_cls.check(values)
    policy = config.contracts.undeclared
    undeclared = report.undeclared if policy is not UndeclaredPolicy.IGNORE else ()
    rejected = bool(undeclared) and policy is UndeclaredPolicy.REJECT
    logger.debug("Contract check complete", command=report.command, missing=list(report.missing))

    if output_format == "json":
        payload = {
            "command": report.command,
            "ok": report.ok and not rejected,
            "missing": list(report.missing),
            "undeclared": list(undeclared),
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        for name in report.missing:
            typer.secho(f"missing: {missing_property_message(name)}", fg=typer.colors.RED)
        for name in undeclared:
            color = typer.colors.RED if rejected else typer.colors.YELLOW
            typer.secho(f"undeclared: {name}", fg=color)
        if report.ok and not rejected:
            typer.secho(f"{report.command}: contract satisfied", fg=typer.colors.GREEN)

    if not report.ok or rejected:
        raise typer.Exit(1)
