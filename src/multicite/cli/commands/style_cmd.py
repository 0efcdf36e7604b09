# ABOUTME: The `multicite style-config` command for reading a style's name-rendering directive.
# ABOUTME: Accepts a local CSL file or an http(s) URL and prints the resolved config as JSON.

import json
from pathlib import Path

import click
from rich.console import Console

from multicite.citation.style_config import (
    StyleConfigError,
    default_style_config,
    extract_style_config,
)
from multicite.styles.http import StyleClient, StyleFetchError, fetch_style

console = Console()


def _load_style(source: str) -> str:
    if source.startswith(("http://", "https://")):
        with StyleClient() as client:
            return fetch_style(source, client)
    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"Style not found: {source}")
    return path.read_text(encoding="utf-8")


@click.command("style-config")
@click.argument("style")
@click.option(
    "--default",
    "use_default",
    is_flag=True,
    help="Print the default config when the style has no directive.",
)
def style_config(style: str, use_default: bool) -> None:
    """Show the name-rendering config declared by STYLE (path or URL)."""
    try:
        xml = _load_style(style)
        config = extract_style_config(xml)
    except (StyleFetchError, StyleConfigError, OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    if config is None:
        if not use_default:
            console.print("[yellow]No name-rendering directive found in style.[/yellow]")
            return
        config = default_style_config()

    click.echo(json.dumps(config.to_dict(), indent=2))
