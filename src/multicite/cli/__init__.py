# ABOUTME: CLI package for multicite, built on Click.
# ABOUTME: Defines the root command group, wires up logging, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from multicite.cli.commands import enrich_cmd, inspect_cmd, strip_cmd, style_cmd


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


@click.group()
@click.version_option(package_name="multicite")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """multicite - parallel-language metadata for citations."""
    _configure_logging(verbose)


cli.add_command(inspect_cmd.inspect)
cli.add_command(strip_cmd.strip)
cli.add_command(style_cmd.style_config)
cli.add_command(enrich_cmd.enrich)
