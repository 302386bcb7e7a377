"""Run command: keep every configured record updated, forever."""

import logging
import signal
from pathlib import Path
from typing import Annotated

import typer

from ddns.cli.console import dim, load_config_or_exit
from ddns.cloudflare import CloudflareClient
from ddns.ip import PublicIpResolver
from ddns.jobs import register_jobs
from ddns.logging import LOG_LEVELS, configure_logging
from ddns.scheduling import Dispatcher

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register the run command."""

    @app.command()
    def run(
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
        log_file: Annotated[
            bool,
            typer.Option(
                "--log-file",
                help="Also write JSONL logs under $DDNS_HOME/logs",
            ),
        ] = False,
    ) -> None:
        """Start the updater and run until interrupted."""
        cfg = load_config_or_exit(config)
        configure_logging(loglevel, use_rich=True, log_to_file=log_file)

        resolver = PublicIpResolver(timeout=cfg.timeout)
        client = CloudflareClient.from_config(cfg)
        dispatcher = Dispatcher()
        register_jobs(dispatcher, cfg, resolver, client)

        dim(f"Scheduling {len(dispatcher.table)} job(s); Ctrl+C to stop")

        def _shutdown(signum: int, frame: object) -> None:
            logger.info(f"Received {signal.Signals(signum).name}, stopping")
            dispatcher.stop()

        previous = {
            sig: signal.signal(sig, _shutdown) for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            dispatcher.start()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
            client.close()
            resolver.close()
