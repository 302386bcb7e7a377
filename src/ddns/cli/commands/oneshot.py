"""Oneshot command: update every record once and exit."""

from pathlib import Path
from typing import Annotated

import typer

from ddns.cli.console import console, error, load_config_or_exit
from ddns.cloudflare import CloudflareClient
from ddns.ip import PublicIpResolver
from ddns.jobs import run_oneshot
from ddns.logging import LOG_LEVELS, configure_logging


def register(app: typer.Typer) -> None:
    """Register the oneshot command."""

    @app.command()
    def oneshot(
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        loglevel: Annotated[
            str | None,
            typer.Option(
                "--loglevel",
                "-l",
                help=f"Log level ({', '.join(LOG_LEVELS)})",
            ),
        ] = None,
    ) -> None:
        """Update every configured record once."""
        cfg = load_config_or_exit(config)
        configure_logging(loglevel)

        console.print("Oneshot")
        resolver = PublicIpResolver(timeout=cfg.timeout)
        client = CloudflareClient.from_config(cfg)
        try:
            updated = run_oneshot(cfg, resolver, client)
        finally:
            client.close()
            resolver.close()

        if cfg.domains and updated == 0:
            error("No records were updated")
            raise typer.Exit(1)
        console.print(f"Done. {updated}/{len(cfg.domains)} record(s) updated.")
