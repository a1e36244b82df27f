"""
Features commands for ranking aligner tabular output.

The rank command parses the tabular output of one query genome searched
against one or more target genomes, ranks the hits of every query member
and writes the combined feature table in processing order.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from blastpaf.cli.utils import (
    QuietConsole,
    configure_logging,
    spinner_progress,
    validate_output_format_extension,
)
from blastpaf.core.collector import FeatureCollector
from blastpaf.core.exceptions import BlastpafError
from blastpaf.core.io_utils import summarize_features, write_dataframe
from blastpaf.models.config import SearchConfig

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="features",
    help="Parse and rank aligner tabular output into alignment features",
    no_args_is_help=True,
)

console = Console()


def _load_config(config: Path | None, no_shapes: bool, skip_malformed: bool) -> SearchConfig:
    search = SearchConfig.from_yaml(config) if config else SearchConfig()
    updates: dict[str, object] = {}
    if no_shapes:
        updates["with_shapes"] = False
    if skip_malformed:
        updates["on_error"] = "skip"
    if updates:
        search = search.model_copy(update={"parser": search.parser.model_copy(update=updates)})
    return search


def _print_error(error: BlastpafError) -> None:
    console.print(f"[red]Error: {escape(error.message)}[/red]")
    if error.suggestion:
        console.print(f"[dim]{escape(error.suggestion)}[/dim]")


@app.command(name="rank")
def rank(
    query_genome: str = typer.Option(
        ...,
        "--query-genome",
        "-q",
        help="Genome identifier of the query members",
    ),
    alignment: list[Path] = typer.Option(
        ...,
        "--alignment",
        "-a",
        help="Tabular output file (.tsv or .tsv.gz); repeat once per target genome",
        exists=True,
        dir_okay=False,
    ),
    hit_genome: list[str] = typer.Option(
        ...,
        "--hit-genome",
        "-t",
        help="Target genome identifier; repeat in the same order as --alignment",
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Output path for the ranked feature table",
    ),
    output_format: str = typer.Option(
        "csv",
        "--format",
        "-f",
        help="Output format: 'csv' or 'parquet'.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file (search and parser sections)",
        exists=True,
        dir_okay=False,
    ),
    no_shapes: bool = typer.Option(
        False,
        "--no-shapes",
        help="Do not expect qseq/sseq columns and leave cigar_line empty",
    ),
    skip_malformed: bool = typer.Option(
        False,
        "--skip-malformed",
        help="Skip malformed lines with a warning instead of aborting",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress progress output (for scripting)",
    ),
) -> None:
    """
    Rank the hits of every query member across target genome passes.

    Example:

        blastpaf features rank \\
            --query-genome 150 \\
            --alignment vs_151.tsv --hit-genome 151 \\
            --alignment vs_152.tsv.gz --hit-genome 152 \\
            --output features.csv
    """
    out = QuietConsole(console, quiet=quiet)
    configure_logging(verbose)

    output_format = output_format.lower()
    if output_format not in ("csv", "parquet"):
        console.print(
            f"[red]Error: Invalid format '{output_format}'. "
            f"Use 'csv' or 'parquet'.[/red]"
        )
        raise typer.Exit(code=1) from None

    if len(alignment) != len(hit_genome):
        console.print(
            f"[red]Error: {len(alignment)} --alignment file(s) but "
            f"{len(hit_genome)} --hit-genome value(s); give one genome per file.[/red]"
        )
        raise typer.Exit(code=1) from None

    output = validate_output_format_extension(output, output_format, out)

    try:
        search = _load_config(config, no_shapes, skip_malformed)
        collector = FeatureCollector(query_genome)
    except BlastpafError as e:
        _print_error(e)
        raise typer.Exit(code=1) from None

    logger.debug("Parser settings: %s", search.parser)
    out.print("\n[bold blue]Blastpaf Feature Ranking[/bold blue]\n")

    for path, genome_id in zip(alignment, hit_genome):
        try:
            with spinner_progress(f"Ranking hits against genome {genome_id}...", console, quiet):
                added = collector.process_file(path, genome_id, search.parser)
        except BlastpafError as e:
            _print_error(e)
            raise typer.Exit(code=1) from None
        out.print(f"  {genome_id}: {added:,} feature(s) from {path.name}")

    df = collector.to_dataframe()
    output.parent.mkdir(parents=True, exist_ok=True)
    write_dataframe(df, output, output_format)

    if df.is_empty():
        out.print("[yellow]No alignment features found.[/yellow]")
    else:
        table = Table(title="Features per hit genome")
        table.add_column("Hit genome")
        table.add_column("Features", justify="right")
        table.add_column("Queries", justify="right")
        table.add_column("Rank 1", justify="right")
        table.add_column("Mean %id", justify="right")
        for row in summarize_features(df).iter_rows(named=True):
            table.add_row(
                row["hgenome_db_id"],
                f"{row['features']:,}",
                f"{row['queries']:,}",
                f"{row['top_ranked']:,}",
                f"{row['mean_perc_ident']:.1f}",
            )
        out.print(table)

    out.print(f"\n[green]Wrote {len(df):,} feature(s) to {output}[/green]")


@app.command(name="outfmt")
def outfmt(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file (search and parser sections)",
        exists=True,
        dir_okay=False,
    ),
    no_shapes: bool = typer.Option(
        False,
        "--no-shapes",
        help="Leave out the qseq/sseq columns",
    ),
) -> None:
    """
    Print the aligner arguments matching the expected tabular layout.
    """
    try:
        search = _load_config(config, no_shapes, skip_malformed=False)
    except BlastpafError as e:
        _print_error(e)
        raise typer.Exit(code=1) from None

    typer.echo(
        f"-evalue {search.evalue_limit:g} -max_target_seqs {search.tophits} "
        f"-outfmt '{search.outfmt}'"
    )
