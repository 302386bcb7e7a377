"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from ddns.cli.console import console, error, load_config_or_exit, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: validate, paths"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: search ./ddns_config.json, $DDNS_HOME)",
            ),
        ] = None,
    ) -> None:
        """Inspect configuration."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from rich.table import Table

        if action == "validate":
            cfg = load_config_or_exit(path)

            table = Table(title="Configuration Summary")
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")
            table.add_row("Account", cfg.cf_mail)
            table.add_row("API key", str(cfg.cf_key))
            table.add_row("Timeout", f"{cfg.timeout}s")
            table.add_row("IP refresh", f"every {cfg.ip_refresh_interval}s")
            for domain in cfg.domains:
                table.add_row(
                    f"{domain.record_type} {domain.name}",
                    f"every {domain.update_interval}s (ttl {domain.ttl})",
                )
            console.print(table)
            success("Configuration is valid")

        elif action == "paths":
            from ddns.config.paths import get_all_paths

            for name, value in get_all_paths().items():
                console.print(f"{name}: {value}", markup=False, soft_wrap=True)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: validate, paths")
            raise typer.Exit(1)
