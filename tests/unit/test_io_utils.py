"""
Unit tests for feature DataFrame conversion and writing.
"""

from __future__ import annotations

import polars as pl

from blastpaf.core.constants import FEATURE_COLUMNS
from blastpaf.core.io_utils import (
    FEATURE_SCHEMA,
    features_to_dataframe,
    summarize_features,
    write_dataframe,
)


class TestFeaturesToDataFrame:
    """Tests for features_to_dataframe."""

    def test_empty_keeps_schema(self):
        df = features_to_dataframe([])
        assert df.is_empty()
        assert tuple(df.columns) == FEATURE_COLUMNS
        assert df.schema["hit_rank"] == pl.Int64

    def test_rows_in_input_order(self, make_feature):
        features = [
            make_feature(hmember_id="B", score=10).with_rank(2),
            make_feature(hmember_id="A", score=90, cigar_line="5M").with_rank(1),
        ]
        df = features_to_dataframe(features)

        assert tuple(df.columns) == FEATURE_COLUMNS
        assert df["hmember_id"].to_list() == ["B", "A"]
        assert df["cigar_line"].to_list() == [None, "5M"]

    def test_schema_dtypes(self, make_feature):
        df = features_to_dataframe([make_feature().with_rank(1)])
        for column, dtype in FEATURE_SCHEMA.items():
            assert df.schema[column] == dtype


class TestWriteDataFrame:
    """Tests for write_dataframe."""

    def test_csv(self, temp_dir, make_feature):
        path = temp_dir / "out.csv"
        write_dataframe(features_to_dataframe([make_feature().with_rank(1)]), path, "csv")

        df = pl.read_csv(path)
        assert df.columns == list(FEATURE_COLUMNS)
        assert len(df) == 1

    def test_parquet(self, temp_dir, make_feature):
        path = temp_dir / "out.parquet"
        write_dataframe(features_to_dataframe([make_feature().with_rank(1)]), path, "parquet")

        df = pl.read_parquet(path)
        assert df["qgenome_db_id"].to_list() == ["150"]


class TestSummarizeFeatures:
    """Tests for summarize_features."""

    def test_per_hit_genome(self, make_feature):
        features = [
            make_feature(hgenome_db_id="152", qmember_id="Q1", perc_ident=90).with_rank(1),
            make_feature(hgenome_db_id="152", qmember_id="Q1", perc_ident=80).with_rank(2),
            make_feature(hgenome_db_id="151", qmember_id="Q2", perc_ident=70).with_rank(1),
        ]
        summary = summarize_features(features_to_dataframe(features))

        assert summary["hgenome_db_id"].to_list() == ["152", "151"]
        assert summary["features"].to_list() == [2, 1]
        assert summary["queries"].to_list() == [1, 1]
        assert summary["top_ranked"].to_list() == [1, 1]
        assert summary["mean_perc_ident"].to_list() == [85.0, 70.0]
