#!/usr/bin/env python3
"""
Main CLI entry point for listnav
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.text import Text

from listnav import __version__
from listnav.config.settings import get_env_var, validate_all_env_vars
from listnav.config.ui_config import get_highlight_style, get_window_size
from listnav.core.highlight import Item, filter_items, split_highlights
from listnav.core.pagination import PageWindowState, Paginator
from listnav.exceptions import ConfigurationError, ItemsFileError

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="listnav",
    help="Searchable dropdown and paginator widgets for the terminal",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def load_items(path: Path) -> list[Item]:
    """Load a JSON array of objects; values are converted to strings."""
    try:
        raw = json.loads(path.read_text())
    except OSError as e:
        raise ItemsFileError(f"Cannot read items file: {e.strerror or e}", path=str(path)) from e
    except json.JSONDecodeError as e:
        raise ItemsFileError(f"Invalid JSON: {e.msg}", path=str(path), line=e.lineno) from e

    if not isinstance(raw, list):
        raise ItemsFileError("Items file must contain a JSON array", path=str(path))

    items = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ItemsFileError("Every item must be a JSON object", path=str(path), index=index)
        items.append({str(key): "" if value is None else str(value) for key, value in entry.items()})
    return items


def _load_or_exit(path: Path) -> list[Item]:
    try:
        return load_items(path)
    except ItemsFileError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def highlighted_text(value: str, style: str) -> Text:
    """Convert marker-annotated text into a styled Rich Text."""
    text = Text()
    for segment, highlighted in split_highlights(value):
        text.append(segment, style=style if highlighted else None)
    return text


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
):
    """
    listnav - list navigation widgets

    [bold]Examples:[/bold]

    Filter items with highlighted matches:
        [cyan]listnav filter projects.json "open src" --property name[/cyan]

    Show the page window:
        [cyan]listnav pages 42 10 --current 4[/cyan]

    Pick an item interactively:
        [cyan]listnav pick projects.json --property name --value id[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level_name = get_env_var("LISTNAV_LOG_LEVEL", validate=False) or "INFO"
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            level = logging.INFO

    for error in validate_all_env_vars():
        typer.echo(f"Warning: {error}", err=True)

    logging.getLogger("listnav").setLevel(level)


@app.command("filter")
def filter_command(
    file: Path = typer.Argument(..., help="JSON file with an array of items"),
    query: str = typer.Argument(..., help="Whitespace-separated search tokens"),
    bind_property: str = typer.Option("name", "--property", "-p", help="Field to match and display"),
    plain: bool = typer.Option(False, "--plain", help="Print raw highlight markers instead of styles"),
):
    """Filter items by QUERY and show the highlighted matches."""
    items = _load_or_exit(file)
    matches = filter_items(items, query, bind_property)

    if not matches:
        console.print("[yellow]No matches[/yellow]")
        return

    style = get_highlight_style()
    for item in matches:
        value = item[bind_property]
        if plain:
            typer.echo(value)
        else:
            console.print(highlighted_text(value, style))

    if not plain:
        console.print(f"[dim]{len(matches)} of {len(items)} items[/dim]")


@app.command()
def pages(
    total: int = typer.Argument(..., help="Total number of items"),
    limit: int = typer.Argument(..., help="Items per page"),
    current: int = typer.Option(0, "--current", "-c", help="Current page (0-based)"),
    window: Optional[int] = typer.Option(None, "--window", "-w", help="Max page buttons shown"),
    as_json: bool = typer.Option(False, "--json", help="Print the window as a JSON array"),
):
    """Show the window of page indices the paginator would display."""
    try:
        state = PageWindowState(
            total=total,
            limit=limit,
            window_size=window or get_window_size(),
            current_page=current,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    paginator = Paginator(
        total=state.total,
        limit=state.limit,
        window_size=state.window_size,
        current_page=state.current_page,
    )
    window_pages = paginator.initialize()

    if as_json:
        typer.echo(json.dumps(window_pages))
        return

    if not window_pages:
        console.print("[dim]No pages[/dim]")
        return

    labels = [
        f"[reverse] {page + 1} [/reverse]" if page == current else f" {page + 1} "
        for page in window_pages
    ]
    console.print("« " + " ".join(labels) + " »")
    console.print(f"[dim]Page {current + 1} of {paginator.page_count}[/dim]")


@app.command()
def pick(
    file: Path = typer.Argument(..., help="JSON file with an array of items"),
    bind_property: str = typer.Option("name", "--property", "-p", help="Field to match and display"),
    bind_value: Optional[str] = typer.Option(None, "--value", help="Field used to identify items"),
    preselect: Optional[str] = typer.Option(None, "--preselect", help="Value of --value to preselect"),
    label: str = typer.Option("Project", "--label", help="Caption above the search box"),
):
    """Pick an item interactively and print it as JSON."""
    from listnav.ui.demo_app import ListnavApp
    from listnav.ui.search_dropdown import DropdownConfig
    from listnav.utils.logging_utils import setup_tui_logging

    items = _load_or_exit(file)

    bind_item = None
    if preselect is not None:
        if not bind_value:
            console.print("[red]Error: --preselect requires --value[/red]")
            raise typer.Exit(1)
        bind_item = {bind_value: preselect}

    # Keep the level chosen by --verbose/--quiet/LISTNAV_LOG_LEVEL
    setup_tui_logging(__name__, level=logging.getLogger("listnav").getEffectiveLevel())

    try:
        config = DropdownConfig(
            items=items,
            bind_property=bind_property,
            bind_value=bind_value,
            bind_item=bind_item,
            label=label,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    selected = ListnavApp(config).run()
    if selected is None:
        typer.echo("Nothing selected", err=True)
        raise typer.Exit(1)

    typer.echo(json.dumps(selected))


@app.command()
def version():
    """Show listnav version"""
    typer.echo(f"listnav version {__version__}")


def run():
    """Entry point for the listnav CLI"""
    app()


if __name__ == "__main__":
    run()
