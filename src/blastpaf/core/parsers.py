"""
Parser for aligner tabular output.

Turns the comment-prefixed, whitespace-delimited output of a protein
search (-outfmt 7) into AlignmentFeature records grouped by query member.

Expected columns:
qacc sacc evalue score nident pident qstart qend sstart send length positive ppos [qseq sseq]
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from blastpaf.core.constants import (
    COMMENT_PREFIX,
    NUM_COLUMNS,
    NUM_COLUMNS_WITH_SHAPES,
)
from blastpaf.core.exceptions import (
    InconsistentAlignmentShapeError,
    MalformedRecordError,
    MissingContextError,
)
from blastpaf.core.ranking import rank_features
from blastpaf.core.shape import alignment_shape
from blastpaf.models.config import ParserConfig
from blastpaf.models.feature import AlignmentFeature


FeatureGroups = dict[str, list[AlignmentFeature]]


def _decode_line(raw: str | bytes, line_num: int) -> str:
    """Decode a raw line as UTF-8, reporting undecodable bytes as a malformed record."""
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedRecordError(
            line_num,
            f"invalid UTF-8 ({e.reason} at byte {e.start})",
            raw.decode("utf-8", errors="replace"),
        ) from e


def _require_id(value: str | int | None, name: str) -> str:
    if value is None:
        raise MissingContextError(name)
    text = str(value).strip()
    if not text:
        raise MissingContextError(name)
    return text


class TabularRecordParser:
    """
    Line-oriented parser for aligner tabular output of one genome pair.

    Every parsed record is tagged with the query and hit genome identifiers
    given at construction. Malformed lines either abort the batch or are
    skipped with a warning, depending on ParserConfig.on_error.

    Example:
        parser = TabularRecordParser("9606", "10090")
        groups = parser.parse(handle)
        for qmember_id, features in groups.items():
            print(qmember_id, len(features))
    """

    def __init__(
        self,
        query_genome_id: str | int,
        hit_genome_id: str | int,
        config: ParserConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the parser for one query genome / hit genome pass.

        Args:
            query_genome_id: Genome of the query members
            hit_genome_id: Genome the search database was built from
            config: Parser settings (defaults to ParserConfig())
            logger: Logger for diagnostics (defaults to the module logger)

        Raises:
            MissingContextError: If either genome identifier is missing or empty
        """
        self.query_genome_id = _require_id(query_genome_id, "query_genome_id")
        self.hit_genome_id = _require_id(hit_genome_id, "hit_genome_id")
        self.config = config or ParserConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.skipped = 0
        self.shape_failures = 0

    @property
    def expected_columns(self) -> tuple[int, ...]:
        """Accepted column counts for the current configuration."""
        if self.config.with_shapes:
            return (NUM_COLUMNS_WITH_SHAPES,)
        return (NUM_COLUMNS, NUM_COLUMNS_WITH_SHAPES)

    def parse_line(self, line: str, line_num: int = 1) -> AlignmentFeature:
        """
        Parse a single data line into an AlignmentFeature.

        Args:
            line: Whitespace-delimited data line
            line_num: Line number used in error messages

        Returns:
            Unranked AlignmentFeature

        Raises:
            MalformedRecordError: On wrong column count or invalid values
            InconsistentAlignmentShapeError: If qseq/sseq disagree and the
                error policy is "abort"
        """
        fields = line.split()
        if len(fields) not in self.expected_columns:
            expected = " or ".join(str(n) for n in self.expected_columns)
            raise MalformedRecordError(
                line_num, f"expected {expected} columns, got {len(fields)}", line
            )

        try:
            values = {
                "qmember_id": fields[0],
                "hmember_id": fields[1],
                "qgenome_db_id": self.query_genome_id,
                "hgenome_db_id": self.hit_genome_id,
                "evalue": float(fields[2]),
                "score": float(fields[3]),
                "identical_matches": int(fields[4]),
                "perc_ident": float(fields[5]),
                "qstart": int(fields[6]),
                "qend": int(fields[7]),
                "hstart": int(fields[8]),
                "hend": int(fields[9]),
                "align_length": int(fields[10]),
                "positive_matches": int(fields[11]),
                "perc_pos": float(fields[12]),
            }
        except ValueError as e:
            raise MalformedRecordError(line_num, f"non-numeric value ({e})", line) from e

        if self.config.with_shapes:
            qseq, sseq = fields[13], fields[14]
            try:
                values["cigar_line"] = alignment_shape(qseq, sseq, self.config.gap_symbol)
            except InconsistentAlignmentShapeError as e:
                if self.config.on_error == "abort":
                    raise InconsistentAlignmentShapeError(
                        e.query_cigar,
                        e.hit_cigar,
                        e.query_columns,
                        e.hit_columns,
                        line_num=line_num,
                        qmember_id=values["qmember_id"],
                        hmember_id=values["hmember_id"],
                    ) from e
                self.shape_failures += 1
                values["shape_error"] = e.message
                self.logger.warning("Line %d: no cigar line built: %s", line_num, e.message)

        try:
            return AlignmentFeature(**values)
        except ValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise MalformedRecordError(line_num, reasons, line) from e

    def parse(self, lines: Iterable[str | bytes]) -> FeatureGroups:
        """
        Parse a stream of lines into features grouped by query member.

        Args:
            lines: Text or UTF-8 byte lines (e.g. an open file handle)

        Returns:
            Mapping qmember_id -> features in input order. Empty when the
            stream holds no data lines.

        Raises:
            MalformedRecordError: On the first malformed line under "abort"
        """
        self.logger.debug(
            "Parsing tabular output for query genome %s against hit genome %s",
            self.query_genome_id,
            self.hit_genome_id,
        )
        features: FeatureGroups = {}
        self.skipped = 0
        self.shape_failures = 0

        for line_num, raw in enumerate(lines, start=1):
            try:
                line = _decode_line(raw, line_num)
                if line.startswith(COMMENT_PREFIX) or not line.strip():
                    continue
                feature = self.parse_line(line, line_num)
            except MalformedRecordError as e:
                if self.config.on_error == "abort":
                    raise
                self.skipped += 1
                self.logger.warning("Skipping line %d: %s", line_num, e.reason)
                continue

            self.logger.debug(
                "feature query %s %s hit %s %s %d %d %d %d %d %d %d",
                feature.qgenome_db_id,
                feature.qmember_id,
                feature.hgenome_db_id,
                feature.hmember_id,
                feature.qstart,
                feature.qend,
                feature.hstart,
                feature.hend,
                feature.align_length,
                feature.identical_matches,
                feature.positive_matches,
            )
            features.setdefault(feature.qmember_id, []).append(feature)

        if self.skipped:
            self.logger.warning(
                "Skipped %d malformed line(s) for hit genome %s",
                self.skipped,
                self.hit_genome_id,
            )
        self.logger.debug(
            "Parsed %d feature(s) for %d query member(s)",
            sum(len(group) for group in features.values()),
            len(features),
        )
        return features

    def parse_file(self, path: Path) -> FeatureGroups:
        """
        Parse a tabular output file (plain text or gzip compressed).

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not path.exists():
            msg = f"Alignment file not found: {path}"
            raise FileNotFoundError(msg)

        # Binary mode: decoding happens per line so a bad byte is one malformed record
        if path.suffix == ".gz":
            with gzip.open(path, "rb") as handle:
                return self.parse(handle)
        with path.open("rb") as handle:
            return self.parse(handle)


def parse_blast_table(
    lines: Iterable[str | bytes],
    query_genome_id: str | int,
    hit_genome_id: str | int,
    config: ParserConfig | None = None,
    logger: logging.Logger | None = None,
) -> FeatureGroups:
    """
    Parse tabular output and rank the hits of every query member.

    Args:
        lines: Text lines of aligner tabular output
        query_genome_id: Genome of the query members
        hit_genome_id: Genome searched against
        config: Parser settings
        logger: Logger for diagnostics

    Returns:
        Mapping qmember_id -> ranked features (best first)
    """
    parser = TabularRecordParser(query_genome_id, hit_genome_id, config, logger)
    return rank_features(parser.parse(lines), logger=logger)
