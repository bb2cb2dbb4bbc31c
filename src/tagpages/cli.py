"""
CLI: ``tagpages`` - preview the tag pages a configuration would generate.

The command loads a record store from a JSON/YAML file, runs every
configuration entry in memory and prints the page identifiers per tag. It
never writes files.

    tagpages preview content.json --config tags.yaml
    tagpages preview content.yaml --json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tagpages import __version__
from tagpages.config import load_options, normalize_options
from tagpages.core.errors import TagPagesError
from tagpages.core.logging import configure_logging
from tagpages.core.settings import TagPagesSettings
from tagpages.plugin import TagPages, TagPagesResult

app = typer.Typer(
    name="tagpages",
    help="tag-pages: normalize record tags and build paginated tag pages.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tag-pages {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """tag-pages CLI."""


def _load_records(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise typer.BadParameter(f"{path} is not valid JSON/YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must hold a mapping of identifier -> record")
    return {str(key): value for key, value in data.items()}


def _rows(result: TagPagesResult) -> list[dict[str, Any]]:
    rows = []
    for entry in result.entries:
        for page in entry.built:
            rows.append(
                {
                    "entry": entry.index,
                    "metadata_key": entry.metadata_key,
                    "tag": page["tag"],
                    "num": page["pagination"]["num"],
                    "path": page["path"],
                    "records": len(page["pagination"]["files"]),
                }
            )
    return rows


@app.command("preview")
def preview(
    records: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON/YAML record store"),
    config: Path | None = typer.Option(  # noqa: UP007
        None, "--config", "-c", exists=True, dir_okay=False, help="JSON/YAML options file"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Show which tag pages would be generated for RECORDS."""
    settings = TagPagesSettings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs, service=settings.service)

    files = _load_records(records)
    try:
        options = load_options(config) if config else normalize_options(None)
        result = TagPages(options).run(files)
    except TagPagesError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {escape(e.message)}")
        raise typer.Exit(code=1) from e

    rows = _rows(result)

    if as_json:
        payload = {"pages": rows, "collisions": [c for e in result.entries for c in e.collisions]}
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    if not rows:
        console.print("[dim]No tagged records.[/dim]")
        return

    table = Table(title="Tag pages", show_lines=False, pad_edge=False)
    for column in ("entry", "tag", "num", "records", "path"):
        table.add_column(column, overflow="fold")
    for row in rows:
        table.add_row(str(row["entry"]), row["tag"], str(row["num"]), str(row["records"]), row["path"])
    console.print(table)


if __name__ == "__main__":
    app()
