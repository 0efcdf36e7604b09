# ABOUTME: The `multicite strip` command for removing parallel-language lines from a free-text field.
# ABOUTME: Prints the file's remaining lines unchanged and in order.

from pathlib import Path

import click
from rich.console import Console

from multicite.metadata import strip_metadata

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def strip(path: Path) -> None:
    """Print PATH with every multicite line removed."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    stripped = strip_metadata(text)
    if stripped:
        click.echo(stripped)
