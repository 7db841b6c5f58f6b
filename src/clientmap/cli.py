"""Command-line interface for clientmap."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from clientmap.config.settings import AppConfig
    from clientmap.etl.pipeline import IngestionResult
    from clientmap.records import ClientRecord

app = typer.Typer(
    name="clientmap",
    help="Client export ingestion with fallback retrieval and offline snapshot.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]
SourceOption = Annotated[
    str | None,
    typer.Option(
        "--source",
        "-s",
        help="Source export URL or spreadsheet id (overrides config).",
    ),
]


def _load(config: Path | None, source: str | None = None) -> "AppConfig":
    from clientmap.config.loader import load_config
    from clientmap.config.settings import SourceConfig
    from clientmap.utils.logging import configure_logging

    app_config = load_config(config)
    if source:
        app_config = app_config.model_copy(update={"source": SourceConfig(reference=source)})
    configure_logging(app_config.logging.level, app_config.logging.json_output)
    return app_config


def _records_table(records: "list[ClientRecord] | tuple[ClientRecord, ...]", limit: int) -> Table:
    table = Table(title=f"Clients ({len(records)})")
    table.add_column("ID", style="cyan")
    table.add_column("Division")
    table.add_column("Name")
    table.add_column("City")
    table.add_column("Lat", justify="right")
    table.add_column("Lng", justify="right")

    for record in records[:limit]:
        table.add_row(
            record.id,
            record.division,
            record.name,
            record.city,
            f"{record.latitude:.5f}",
            f"{record.longitude:.5f}",
        )
    return table


def _print_outcome(result: "IngestionResult") -> None:
    table = Table(title="Ingestion Result")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Status", result.status.value)
    table.add_row("Records", str(len(result.records)))
    table.add_row("Strategy", result.strategy or "-")
    table.add_row("As of", result.as_of_label or "-")
    for attempt in result.attempts:
        outcome = "ok" if attempt.succeeded else f"failed ({attempt.error})"
        table.add_row(f"Attempt {attempt.strategy}", outcome)
    console.print(table)


@app.command()
def fetch(
    config: ConfigOption = None,
    source: SourceOption = None,
    show: Annotated[
        int,
        typer.Option("--show", "-n", help="Number of records to display."),
    ] = 10,
) -> None:
    """Fetch the export, update the snapshot, fall back to it when offline."""
    from clientmap.etl.pipeline import run_ingestion

    app_config = _load(config, source)
    result = run_ingestion(app_config)
    _print_outcome(result)

    if not result.ok:
        console.print(f"[red]Error: {result.failure}[/red]")
        if result.retryable:
            console.print("[blue]Retry: clientmap fetch[/blue]")
        raise typer.Exit(code=1)

    if result.offline:
        console.print(
            f"[yellow]⚠ Offline mode: showing data as of {result.as_of_label}[/yellow]"
        )
        if result.cause is not None:
            console.print(f"[dim]Reason: {result.cause}[/dim]")
        console.print("[blue]Retry: clientmap fetch[/blue]")

    if show > 0:
        console.print(_records_table(result.records, show))


@app.command()
def parse(
    path: Annotated[
        Path,
        typer.Argument(help="Local export file.", exists=True, dir_okay=False),
    ],
    config: ConfigOption = None,
    show: Annotated[
        int,
        typer.Option("--show", "-n", help="Number of records to display."),
    ] = 10,
) -> None:
    """Parse a local export file without network access or snapshot update."""
    from clientmap.ingestion.builder import RecordBuilder
    from clientmap.normalization.columns import resolve_columns
    from clientmap.parsing.delimited import parse_delimited

    app_config = _load(config)
    text = path.read_text(encoding="utf-8-sig")

    table = parse_delimited(text)
    mapping = resolve_columns(table.header)
    records = RecordBuilder(logo_overrides=app_config.branding.logo_overrides).build(table)

    console.print(f"[blue]Delimiter: {table.delimiter!r}[/blue]")
    console.print(f"[blue]Data rows: {len(table.data_rows)}[/blue]")
    if mapping.unresolved:
        console.print(f"[yellow]Unresolved fields: {', '.join(mapping.unresolved)}[/yellow]")

    if not records:
        console.print("[red]No record with valid coordinates found[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Records: {len(records)}[/green]")
    if show > 0:
        console.print(_records_table(records, show))


@app.command()
def snapshot(
    config: ConfigOption = None,
    clear: Annotated[
        bool,
        typer.Option("--clear", help="Delete the stored snapshot."),
    ] = False,
) -> None:
    """Show (or clear) the stored offline snapshot."""
    from clientmap.errors import CacheCorruptError
    from clientmap.etl.export import division_summary
    from clientmap.storage.snapshot import SnapshotStore

    app_config = _load(config)
    store = SnapshotStore(app_config.snapshot.directory, app_config.snapshot.key)

    if clear:
        removed = store.clear()
        console.print("[green]Snapshot cleared[/green]" if removed else "[dim]No snapshot[/dim]")
        return

    try:
        stored = store.load()
    except CacheCorruptError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if stored is None:
        console.print(f"[yellow]No snapshot at {store.path}[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"[blue]Snapshot: {store.path}[/blue]")
    console.print(f"[blue]As of: {stored.age_label}[/blue]")
    console.print(f"[blue]Records: {len(stored.records)}[/blue]")

    summary = division_summary(stored.records)
    table = Table(title="Clients per division")
    table.add_column("Division", style="cyan")
    table.add_column("Store")
    table.add_column("Clients", justify="right", style="green")
    for row in summary.itertuples(index=False):
        table.add_row(row.division or "-", row.store or "-", str(row.clients))
    console.print(table)


@app.command()
def export(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output path (.csv or .json)."),
    ],
    config: ConfigOption = None,
    source: SourceOption = None,
) -> None:
    """Run ingestion and write the resulting records to a file."""
    from clientmap.etl.export import write_records
    from clientmap.etl.pipeline import run_ingestion

    if output.suffix.lower() not in {".csv", ".json"}:
        console.print(f"[red]Error: Unsupported export format '{output.suffix}'[/red]")
        raise typer.Exit(code=1)

    app_config = _load(config, source)
    result = run_ingestion(app_config)

    if not result.ok:
        console.print(f"[red]Error: {result.failure}[/red]")
        raise typer.Exit(code=1)

    if result.offline:
        console.print(f"[yellow]⚠ Offline mode: data as of {result.as_of_label}[/yellow]")

    path = write_records(result.records, output)
    console.print(f"[green]Saved {len(result.records)} records to: {path}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from clientmap import __version__

    console.print(f"clientmap version {__version__}")


if __name__ == "__main__":
    app()
