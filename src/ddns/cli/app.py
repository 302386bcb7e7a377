"""Main CLI application."""

import typer

from ddns.cli.commands import config, oneshot, run

app = typer.Typer(
    name="ddns",
    help="ddns - keep Cloudflare DNS records pointed at this host",
    no_args_is_help=True,
)

run.register(app)
oneshot.register(app)
config.register(app)


if __name__ == "__main__":
    app()
