"""
I/O utilities for feature collections.

Converts AlignmentFeature records into Polars DataFrames in the column
order of the peptide align feature table, and writes them as CSV or
Parquet.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Literal

import polars as pl

from blastpaf.core.constants import FEATURE_COLUMNS
from blastpaf.models.feature import AlignmentFeature

OutputFormat = Literal["csv", "parquet"]

FEATURE_SCHEMA: dict[str, pl.DataType] = {
    "qmember_id": pl.Utf8,
    "hmember_id": pl.Utf8,
    "qgenome_db_id": pl.Utf8,
    "hgenome_db_id": pl.Utf8,
    "qstart": pl.Int64,
    "qend": pl.Int64,
    "hstart": pl.Int64,
    "hend": pl.Int64,
    "score": pl.Float64,
    "evalue": pl.Float64,
    "hit_rank": pl.Int64,
    "identical_matches": pl.Int64,
    "perc_ident": pl.Float64,
    "align_length": pl.Int64,
    "positive_matches": pl.Int64,
    "perc_pos": pl.Float64,
    "cigar_line": pl.Utf8,
}


def features_to_dataframe(features: Iterable[AlignmentFeature]) -> pl.DataFrame:
    """
    Build a DataFrame with one row per feature, order preserved.

    Args:
        features: Features in output order

    Returns:
        DataFrame with FEATURE_COLUMNS; empty (with schema) for no features
    """
    rows = [feature.to_row() for feature in features]
    return pl.DataFrame(rows, schema=FEATURE_SCHEMA).select(list(FEATURE_COLUMNS))


def write_dataframe(
    df: pl.DataFrame,
    path: Path,
    output_format: OutputFormat = "csv",
) -> None:
    """
    Write DataFrame to file in specified format.

    For Parquet output, uses zstd compression.

    Args:
        df: Polars DataFrame to write.
        path: Output file path.
        output_format: Output format - 'csv' or 'parquet'.
    """
    if output_format == "parquet":
        df.write_parquet(path, compression="zstd")
    else:
        df.write_csv(path)


def summarize_features(df: pl.DataFrame) -> pl.DataFrame:
    """
    Per hit genome summary of a feature DataFrame.

    Returns:
        DataFrame with hgenome_db_id, features, queries, top_ranked and
        mean_perc_ident, in first-appearance order of the hit genomes
    """
    return df.group_by("hgenome_db_id", maintain_order=True).agg(
        pl.len().alias("features"),
        pl.col("qmember_id").n_unique().alias("queries"),
        (pl.col("hit_rank") == 1).sum().alias("top_ranked"),
        pl.col("perc_ident").mean().alias("mean_perc_ident"),
    )
