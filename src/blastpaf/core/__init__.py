"""
Core algorithms for parsing and ranking aligner tabular output.

This module contains the tabular record parser, the per-query hit ranking,
the alignment shape encoder and the cross-genome feature collector.
"""

from blastpaf.core.collector import FeatureCollector, select_target_genomes
from blastpaf.core.parsers import TabularRecordParser, parse_blast_table
from blastpaf.core.ranking import rank_features, rank_group
from blastpaf.core.shape import alignment_shape, encode_aligned_sequence, merge_cigars

__all__ = [
    "FeatureCollector",
    "TabularRecordParser",
    "alignment_shape",
    "encode_aligned_sequence",
    "merge_cigars",
    "parse_blast_table",
    "rank_features",
    "rank_group",
    "select_target_genomes",
]
