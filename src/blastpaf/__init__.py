"""
Blastpaf: ranked peptide alignment features from aligner tabular output.

Parses the tabular output of a protein similarity search, ranks the hits
of every query member and rebuilds cigar lines from the aligned
subsequences, producing records ready for bulk storage.
"""

__version__ = "0.1.0"
__author__ = "Blastpaf Team"

from blastpaf.core.collector import FeatureCollector
from blastpaf.core.parsers import TabularRecordParser, parse_blast_table
from blastpaf.models.config import ParserConfig, SearchConfig
from blastpaf.models.feature import AlignmentFeature

__all__ = [
    "AlignmentFeature",
    "FeatureCollector",
    "ParserConfig",
    "SearchConfig",
    "TabularRecordParser",
    "parse_blast_table",
    "__version__",
]
