"""Configuration commands."""

import json

import typer

from pomo_cli.commands.decorators import AppError, command_wrapper
from pomo_cli.services.config_service import get_config_service
from pomo_cli.utils.ui.console import get_console
from pomo_cli.utils.ui.formatters import format_output, format_success

console = get_console()
app = typer.Typer(help="Configuration management")


def _parse_value(raw: str):
    """Interpret ``true``, ``3``, ``1.5`` as JSON; anything else stays a string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("pretty", "--output", "-o", help="pretty, json or yaml"),
):
    """Show the current configuration."""
    config = get_config_service().config
    data = config.model_dump()
    if output != "pretty":
        format_output(data, output)
        return
    flat = {}
    for section, values in data.items():
        if isinstance(values, dict):
            for key, value in values.items():
                flat[f"{section}.{key}"] = value
        else:
            flat[section] = values
    format_output(flat)


@app.command("get")
@command_wrapper
def get_value(key: str = typer.Argument(..., help="Dotted key, e.g. timer.target_rounds")):
    """Print one configuration value."""
    try:
        value = get_config_service().get_value(key)
    except KeyError as e:
        raise AppError(str(e.args[0])) from e
    console.print(value)


@app.command("set")
@command_wrapper
def set_value(
    key: str = typer.Argument(..., help="Dotted key, e.g. timer.focus_duration"),
    value: str = typer.Argument(..., help="New value"),
):
    """Update one configuration value."""
    try:
        new_value = get_config_service().set_value(key, _parse_value(value))
    except KeyError as e:
        raise AppError(str(e.args[0])) from e
    format_success(f"{key} = {new_value}")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Restore the default configuration."""
    if not yes and not typer.confirm("Reset configuration to defaults?", default=False):
        console.print("Cancelled.")
        return
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
