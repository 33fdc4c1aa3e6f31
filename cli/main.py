"""
Bible XML API - Main CLI Application

Command-line access to the translation catalog and verse resolver.
"""
import asyncio
import json
from enum import Enum
from typing import Any, Awaitable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_config
from core.errors import BibleError
from data import books
from data.schemas import Translation, Verse
from observability import get_logger, setup_observability
from services import BibleService, HealthStatus

T = TypeVar("T")

# Initialize app
app = typer.Typer(
    name="bible",
    help="Bible XML API - translation catalog and verse lookup",
    add_completion=False
)

console = Console()
logger = get_logger("bible.cli")


class OutputFormat(str, Enum):
    """Output format options."""
    JSON = "json"
    TABLE = "table"


def _service() -> BibleService:
    config = get_config()
    setup_observability(config.observability)
    try:
        return BibleService.from_config(config)
    except BibleError as e:
        console.print(f"[red]Configuration error: {e.message}[/red]")
        raise typer.Exit(2)


def _run(awaitable: Awaitable[T]) -> T:
    """Run a service call, turning core errors into a non-zero exit."""
    try:
        return asyncio.run(awaitable)
    except BibleError as e:
        logger.debug(
            "Command failed",
            error_code=e.error_code,
            error=e.message,
            context=e.context.to_dict() if e.context else None,
        )
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)


async def _require_translation(service: BibleService, translation_id: Optional[str]) -> Translation:
    translation = await service.resolve_translation(translation_id)
    if translation is None:
        console.print(f"[red]Error: translation '{translation_id or '(default)'}' not found[/red]")
        raise typer.Exit(1)
    return translation


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False))


def _display_verses(verses: List[Verse], title: str) -> None:
    table = Table(title=title)
    table.add_column("Reference", style="cyan", no_wrap=True)
    table.add_column("Text")

    for verse in verses:
        table.add_row(verse.reference, verse.text)

    console.print(table)


TranslationOption = typer.Option(
    None, "--translation", "-t", help="Translation identifier (defaults to the first available)"
)
FormatOption = typer.Option(OutputFormat.TABLE, "--output", "-o", help="Output format")


@app.command()
def translations(output: OutputFormat = FormatOption):
    """List the available translations."""
    service = _service()
    items = _run(service.list_translations())

    if output == OutputFormat.JSON:
        _print_json([t.to_dict() for t in items])
        return

    table = Table(title="Translations")
    table.add_column("Identifier", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Language")
    table.add_column("License")

    for translation in items:
        table.add_row(
            translation.identifier,
            translation.name,
            f"{translation.language} ({translation.language_code})",
            translation.license,
        )

    console.print(table)
    console.print(f"\n{len(items)} translation(s)")


@app.command(name="books")
def list_books(
    translation: Optional[str] = TranslationOption,
    output: OutputFormat = FormatOption,
):
    """List the books of a translation."""
    service = _service()

    async def _books():
        resolved = await _require_translation(service, translation)
        return resolved, await service.get_books(resolved.identifier)

    resolved, items = _run(_books())

    if output == OutputFormat.JSON:
        _print_json([b.to_dict() for b in items])
        return

    table = Table(title=f"Books - {resolved.name}")
    table.add_column("Code", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Chapters", justify="right")
    table.add_column("Testament")

    for book in items:
        table.add_row(book.book_id, book.name, str(book.chapters), book.testament.value)

    console.print(table)


@app.command()
def chapters(
    book: str = typer.Argument(..., help="Book code or name (e.g., JHN, 'John', '1 Sam')"),
    translation: Optional[str] = TranslationOption,
    output: OutputFormat = FormatOption,
):
    """List the chapters of a book."""
    service = _service()

    async def _chapters():
        resolved = await _require_translation(service, translation)
        return await service.get_chapters_for_book(resolved.identifier, book)

    items = _run(_chapters())
    if not items:
        console.print(f"[red]Error: unknown book '{book}'[/red]")
        raise typer.Exit(1)

    if output == OutputFormat.JSON:
        _print_json([c.to_dict() for c in items])
        return

    console.print(f"[bold]{items[0].book}[/bold]: {len(items)} chapter(s)")
    for item in items:
        if item.url:
            console.print(f"  {item.chapter}  {item.url}")
    if not any(item.url for item in items):
        console.print("  " + ", ".join(str(item.chapter) for item in items))


@app.command()
def verses(
    reference: str = typer.Argument(..., help="Reference (e.g., 'John 3:16-18' or JHN.3.16)"),
    translation: Optional[str] = TranslationOption,
    output: OutputFormat = FormatOption,
):
    """Look up verses by reference."""
    service = _service()

    async def _verses():
        resolved = await _require_translation(service, translation)
        return resolved, await service.get_verses(reference, resolved.identifier)

    resolved, items = _run(_verses())

    if output == OutputFormat.JSON:
        _print_json({"translation": resolved.to_dict(), "verses": [v.to_dict() for v in items]})
        return

    if not items:
        console.print(f"[yellow]No verses found for {reference}[/yellow]")
        return
    _display_verses(items, f"{reference} ({resolved.name})")


@app.command()
def random(
    translation: Optional[str] = TranslationOption,
    book_selection: str = typer.Option("ALL", "--books", "-b", help="OT, NT, ALL or a comma separated list"),
    output: OutputFormat = FormatOption,
):
    """Show a random verse."""
    service = _service()

    async def _random():
        resolved = await _require_translation(service, translation)
        return resolved, await service.get_random_verse(resolved.identifier, books.select_books(book_selection))

    resolved, verse = _run(_random())
    if verse is None:
        console.print(f"[red]Error: no books match '{book_selection}'[/red]")
        raise typer.Exit(1)

    if output == OutputFormat.JSON:
        _print_json({"translation": resolved.to_dict(), "random_verse": verse.to_dict()})
        return

    console.print(Panel.fit(verse.text, title=verse.reference, subtitle=resolved.name, border_style="blue"))


@app.command()
def daily(
    translation: Optional[str] = TranslationOption,
    output: OutputFormat = FormatOption,
):
    """Show the verse of the day."""
    service = _service()

    async def _daily():
        resolved = await _require_translation(service, translation)
        return resolved, await service.get_daily_verse(resolved.identifier)

    resolved, verse = _run(_daily())
    if verse is None:
        console.print("[red]Error: could not resolve the daily verse[/red]")
        raise typer.Exit(1)

    if output == OutputFormat.JSON:
        _print_json({"translation": resolved.to_dict(), "random_verse": verse.to_dict()})
        return

    console.print(Panel.fit(verse.text, title=f"Verse of the day: {verse.reference}", border_style="green"))


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to search for"),
    translation: Optional[str] = TranslationOption,
    book_selection: Optional[str] = typer.Option(None, "--books", "-b", help="OT, NT or a comma separated list"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum results (1-500)"),
    output: OutputFormat = FormatOption,
):
    """Search verse text within a translation."""
    service = _service()
    selected = books.select_books(book_selection) if book_selection else None

    async def _search():
        resolved = await _require_translation(service, translation)
        return resolved, await service.search_verses(resolved.identifier, query, selected, limit)

    resolved, items = _run(_search())

    if output == OutputFormat.JSON:
        _print_json({"translation": resolved.to_dict(), "query": query, "verses": [v.to_dict() for v in items]})
        return

    _display_verses(items, f"Search: '{query}' ({resolved.name})")
    console.print(f"\nFound {len(items)} verse(s)")


@app.command()
def health(output: OutputFormat = FormatOption):
    """Check that document storage is reachable."""
    service = _service()
    report = _run(service.check_health())

    if output == OutputFormat.JSON:
        _print_json(report.to_dict())
    else:
        style = {
            HealthStatus.HEALTHY: "green",
            HealthStatus.DEGRADED: "yellow",
            HealthStatus.UNHEALTHY: "red",
        }[report.status]

        table = Table(title="Storage Health")
        table.add_column("Check", style="cyan")
        table.add_column("Result")

        table.add_row("Status", f"[{style}]{report.status.value}[/{style}]")
        table.add_row("Backend", report.backend)
        table.add_row("Location", report.location)
        table.add_row("Message", report.message)
        table.add_row("Sample", ", ".join(report.sample_keys) or "-")
        table.add_row("Duration", f"{report.duration_ms:.1f} ms")

        console.print(table)

    if report.status == HealthStatus.UNHEALTHY:
        raise typer.Exit(1)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
