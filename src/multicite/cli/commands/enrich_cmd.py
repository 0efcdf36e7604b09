# ABOUTME: The `multicite enrich` command for running the enrichment callbacks on CSL-JSON.
# ABOUTME: Reads one item (or a list), applies names/fields/titles, and prints the enriched JSON.

import json
from pathlib import Path
from typing import Any, NoReturn

import click
from rich.console import Console

from multicite.citation.presets import preset_names, set_active_preset
from multicite.cli.options import prefs_option
from multicite.config import PREF_HARDCODED_TITLES, load_preferences
from multicite.pipeline import EnrichmentPipeline

console = Console()


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


@click.command()
@click.argument("item_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--extra",
    "extra_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the record's extra field (default: the item's own extra or note).",
)
@prefs_option
@click.option("--preset", default=None, help="Title preset to activate (e.g. chicago, apa).")
@click.option("--hardcoded-titles", is_flag=True, help="Rewrite titles using the active preset.")
def enrich(
    item_json: Path,
    extra_path: Path | None,
    prefs_path: Path | None,
    preset: str | None,
    hardcoded_titles: bool,
) -> None:
    """Enrich the CSL-JSON item(s) in ITEM_JSON and print the result."""
    try:
        data = json.loads(item_json.read_text(encoding="utf-8"))
        prefs = load_preferences(prefs_path)
        extra = extra_path.read_text(encoding="utf-8") if extra_path else None
    except (OSError, ValueError) as exc:
        _fail(str(exc))

    items: list[Any] = data if isinstance(data, list) else [data]
    if not items or not all(isinstance(item, dict) for item in items):
        _fail("ITEM_JSON must hold a CSL-JSON object or a list of them")

    if hardcoded_titles:
        prefs.set(PREF_HARDCODED_TITLES, True)
    if preset is not None and not set_active_preset(prefs, preset):
        _fail(f"Unknown preset {preset!r}. Available: {', '.join(preset_names(prefs))}")

    pipeline = EnrichmentPipeline(preferences=prefs)
    for csl_item in items:
        # Without --extra the item stands in for the host record (its extra or note field).
        host_item = {"extra": extra} if extra is not None else csl_item
        pipeline.enrich(host_item, csl_item)

    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
