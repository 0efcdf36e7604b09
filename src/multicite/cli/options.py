# ABOUTME: Shared Click options for multicite CLI commands.
# ABOUTME: Provides reusable decorators for common flags like --prefs.

from pathlib import Path

import click

prefs_option = click.option(
    "--prefs",
    "prefs_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file of preference overrides (default: built-in preferences)",
)
