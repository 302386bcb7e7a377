"""CLI command modules."""

from ddns.cli.commands import config, oneshot, run

__all__ = ["config", "oneshot", "run"]
