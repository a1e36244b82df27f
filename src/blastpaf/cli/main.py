"""
Main CLI entry point for blastpaf.

Provides subcommands for turning aligner tabular output into ranked
peptide alignment features:
- features rank: Parse, rank and collect features across target genomes
- features outfmt: Print the output format string for the aligner
"""

from __future__ import annotations

import typer
from rich import print as rprint

from blastpaf import __version__

app = typer.Typer(
    name="blastpaf",
    help="Ranked peptide alignment features from aligner tabular output",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"blastpaf version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Blastpaf: ranked peptide alignment features from aligner tabular output.

    Parses the tabular output of protein similarity searches, ranks the hits
    of every query member and rebuilds cigar lines from aligned subsequences.
    """


# Import subcommands
from blastpaf.cli import features

# Register subcommands
app.add_typer(features.app, name="features")


if __name__ == "__main__":
    app()
