# ABOUTME: The `multicite inspect` command for viewing decoded parallel-language metadata.
# ABOUTME: Shows the fields and creators encoded in a free-text field saved to a file.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from multicite.metadata import FIELD_NAMES, FIELD_VARIANTS, CreatorVariant, parse_metadata

console = Console()

_VARIANT_LABELS = {
    "original": "Original",
    "romanized": "Romanized",
    "romanizedShort": "Short",
    "english": "English",
}


def _cell(value: str | None) -> str:
    return escape(value) if value else "[dim]-[/dim]"


def _option_flags(creator: CreatorVariant) -> str:
    flags = []
    if creator.options_original_spacing:
        flags.append("spacing")
    if creator.options_force_comma:
        flags.append("comma")
    return ", ".join(flags)


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(path: Path) -> None:
    """Show parallel-language metadata stored in a record's extra field."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    record = parse_metadata(text)
    if not record.has_data():
        console.print("[yellow]No parallel-language metadata found.[/yellow]")
        return

    language = escape(record.original_language) if record.original_language else "[dim]unknown[/dim]"
    console.print(f"Language: {language}")

    if record.fields:
        table = Table(title="Fields", pad_edge=False)
        table.add_column("Field", style="bold")
        for variant in FIELD_VARIANTS:
            table.add_column(_VARIANT_LABELS[variant])
        for field_name in FIELD_NAMES:
            variants = record.fields.get(field_name)
            if variants is None:
                continue
            table.add_row(
                field_name,
                *(_cell(variants.get(variant)) for variant in FIELD_VARIANTS),
            )
        console.print(table)

    creators = [(i, c) for i, c in enumerate(record.creators) if c is not None]
    if creators:
        table = Table(title="Creators", pad_edge=False)
        table.add_column("#", justify="right")
        table.add_column("Romanized")
        table.add_column("Original")
        table.add_column("Options", style="dim")
        for index, creator in creators:
            table.add_row(
                str(index),
                _cell(creator.romanized_name()),
                _cell(creator.original_name()),
                _option_flags(creator),
            )
        console.print(table)
