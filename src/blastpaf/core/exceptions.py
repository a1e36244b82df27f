"""
Custom exceptions with actionable guidance.

Provides specific error types for common failure scenarios when parsing
and ranking aligner tabular output, each with helpful suggestions for
resolution.
"""

from __future__ import annotations


class BlastpafError(Exception):
    """Base exception for blastpaf errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class BlastTableError(BlastpafError):
    """Base class for aligner tabular output errors."""


class MalformedRecordError(BlastTableError):
    """Raised when a data line fails column-count or type validation."""

    def __init__(self, line_num: int, reason: str, line: str | None = None):
        message = f"Malformed alignment record at line {line_num}: {reason}"
        if line is not None:
            preview = line.strip()
            if len(preview) > 80:
                preview = preview[:77] + "..."
            message = f"{message}\n  {preview}"

        super().__init__(
            message=message,
            suggestion=(
                "Tabular output must use the column order:\n"
                "  qacc sacc evalue score nident pident qstart qend "
                "sstart send length positive ppos [qseq sseq]\n\n"
                "Check the -outfmt string passed to the aligner, or parse with "
                "on_error='skip' to drop malformed lines with a warning."
            ),
        )
        self.line_num = line_num
        self.reason = reason


class AlignmentShapeError(BlastpafError):
    """Base class for alignment shape (cigar line) errors."""


class InconsistentAlignmentShapeError(AlignmentShapeError):
    """Raised when the query and hit encodings cover different column counts."""

    def __init__(
        self,
        query_cigar: str,
        hit_cigar: str,
        query_columns: int,
        hit_columns: int,
        line_num: int | None = None,
        qmember_id: str | None = None,
        hmember_id: str | None = None,
    ):
        message = (
            f"Query cigar '{query_cigar}' ({query_columns} columns) and hit cigar "
            f"'{hit_cigar}' ({hit_columns} columns) describe different alignments"
        )
        if qmember_id is not None or hmember_id is not None:
            message = f"{message} for query {qmember_id} hit {hmember_id}"
        if line_num is not None:
            message = f"{message} at line {line_num}"

        super().__init__(
            message=message,
            suggestion=(
                "The aligned qseq and sseq columns must have equal length. "
                "Truncated or corrupted aligner output is the usual cause; "
                "re-run the search or disable shape encoding."
            ),
        )
        self.query_cigar = query_cigar
        self.hit_cigar = hit_cigar
        self.query_columns = query_columns
        self.hit_columns = hit_columns
        self.line_num = line_num
        self.qmember_id = qmember_id
        self.hmember_id = hmember_id


class ContextError(BlastpafError):
    """Base class for missing or inconsistent caller context."""


class MissingContextError(ContextError):
    """Raised when a required genome identifier is not supplied."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Required context '{name}' is missing or empty",
            suggestion=(
                f"Pass a non-empty {name}. Genome identifiers are recorded on every "
                "feature and are never defaulted."
            ),
        )
        self.name = name


class GenomeMismatchError(ContextError):
    """Raised when features for another query genome reach a collector."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            message=(
                f"Feature belongs to query genome '{actual}', "
                f"collector was created for '{expected}'"
            ),
            suggestion="Use one FeatureCollector per query genome.",
        )
        self.expected = expected
        self.actual = actual


class ConfigurationError(BlastpafError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            message=message,
            suggestion=suggestion or "Check the YAML configuration against `blastpaf features rank --help`.",
        )
