"""CLI entry point for asyncbutton.

Provides commands:
  - demo: Launch the interactive Textual demo button
  - config: Show the effective button configuration
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from asyncbutton.config import ButtonConfig, load_config
from asyncbutton.exceptions import ConfigError

app = typer.Typer(
    help="asyncbutton - press-triggered async actions with a visible lifecycle",
    rich_markup_mode="rich",
)
console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="JSON file with button settings"),
]


def _resolve_config(
    config_path: Path | None,
    success_duration: float | None = None,
    error_duration: float | None = None,
    no_success: bool = False,
    no_error: bool = False,
) -> ButtonConfig:
    """Load the config file (if any) and apply command-line overrides."""
    try:
        config = load_config(config_path) if config_path is not None else ButtonConfig()
        changes: dict[str, object] = {}
        if success_duration is not None:
            changes["success_duration"] = success_duration
        if error_duration is not None:
            changes["error_duration"] = error_duration
        if no_success:
            changes["show_success"] = False
        if no_error:
            changes["show_error"] = False
        return config.replace(**changes) if changes else config
    except FileNotFoundError:
        console.print(f"[red]Config file not found:[/red] {config_path}")
        raise typer.Exit(code=1)
    except ConfigError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def demo(
    config_path: ConfigOption = None,
    delay: Annotated[
        float,
        typer.Option("--delay", help="Seconds the demo action takes"),
    ] = 1.0,
    fail: Annotated[
        bool,
        typer.Option("--fail", help="Make the demo action raise"),
    ] = False,
    success_duration: Annotated[
        float | None,
        typer.Option("--success-duration", help="Seconds the success state shows"),
    ] = None,
    error_duration: Annotated[
        float | None,
        typer.Option("--error-duration", help="Seconds the error state shows"),
    ] = None,
    no_success: Annotated[
        bool,
        typer.Option("--no-success", help="Skip the success state"),
    ] = False,
    no_error: Annotated[
        bool,
        typer.Option("--no-error", help="Skip the error state"),
    ] = False,
    log_dir: Annotated[
        str,
        typer.Option("--log-dir", help="Directory for JSON-lines logs"),
    ] = "logs",
) -> None:
    """Launch the interactive demo button."""
    from asyncbutton.tui import run_demo

    config = _resolve_config(
        config_path, success_duration, error_duration, no_success, no_error
    )
    run_demo(config=config, delay=delay, fail=fail, log_dir=log_dir)


@app.command(name="config")
def config_cmd(config_path: ConfigOption = None) -> None:
    """Show the effective button configuration."""
    config = _resolve_config(config_path)

    table = Table(title="Button Configuration")
    table.add_column("Setting", style="bold")
    table.add_column("Value", justify="right")
    for key, value in asdict(config).items():
        style = "dim" if getattr(ButtonConfig, key) == value else "cyan"
        table.add_row(key, f"[{style}]{value}[/{style}]")

    console.print(table)
    if config_path is not None:
        console.print(f"\n[bold]Source:[/bold] {config_path}")


if __name__ == "__main__":
    app()
