"""
Constants used throughout the blastpaf package.

Centralizes the tabular column layout, aligner defaults and cigar symbols.
"""

from __future__ import annotations

# =============================================================================
# Tabular Output Layout
# =============================================================================

# Column order requested from the aligner (-outfmt 7 ...)
TABULAR_COLUMNS: tuple[str, ...] = (
    "qacc",
    "sacc",
    "evalue",
    "score",
    "nident",
    "pident",
    "qstart",
    "qend",
    "sstart",
    "send",
    "length",
    "positive",
    "ppos",
)

# Aligned subsequence columns appended when shape encoding is enabled
SHAPE_COLUMNS: tuple[str, ...] = ("qseq", "sseq")

NUM_COLUMNS = len(TABULAR_COLUMNS)
NUM_COLUMNS_WITH_SHAPES = NUM_COLUMNS + len(SHAPE_COLUMNS)

COMMENT_PREFIX = "#"

# =============================================================================
# Aligner Defaults
# =============================================================================

DEFAULT_EVALUE_LIMIT = 1e-5
DEFAULT_TOPHITS = 20

# =============================================================================
# Alignment Shape Symbols
# =============================================================================

GAP_SYMBOL = "-"

CIGAR_MATCH = "M"
CIGAR_DELETION = "D"
CIGAR_INSERTION = "I"

# =============================================================================
# Persistence Layout
# =============================================================================

# Column order of the peptide align feature table
FEATURE_COLUMNS: tuple[str, ...] = (
    "qmember_id",
    "hmember_id",
    "qgenome_db_id",
    "hgenome_db_id",
    "qstart",
    "qend",
    "hstart",
    "hend",
    "score",
    "evalue",
    "hit_rank",
    "identical_matches",
    "perc_ident",
    "align_length",
    "positive_matches",
    "perc_pos",
    "cigar_line",
)
