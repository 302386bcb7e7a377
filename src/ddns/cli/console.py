"""Shared console utilities for CLI commands."""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ddns.config import ConfigError, DdnsConfig, load_config

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{escape(msg)}[/red]", soft_wrap=True)


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(msg)}[/green]")


def dim(msg: str) -> None:
    """Print a dimmed message."""
    console.print(f"[dim]{msg}[/dim]")


def load_config_or_exit(path: Path | None) -> DdnsConfig:
    """Load configuration, printing the problem and exiting 1 on failure."""
    try:
        return load_config(path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except ConfigError as e:
        error(f"Error reading config: {e}")
        raise typer.Exit(1) from None
    except ValidationError as e:
        error("Config validation failed:")
        for err in e.errors():
            loc = ".".join(str(part) for part in err["loc"])
            console.print(f"  {loc}: {err['msg']}", markup=False, soft_wrap=True)
        raise typer.Exit(1) from None
