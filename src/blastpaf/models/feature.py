"""
Pydantic model for peptide alignment features.

An AlignmentFeature is one candidate alignment between a query member and
a hit member of a target genome, as reported by one line of aligner
tabular output. Records are immutable; the ranking step attaches the hit
rank by replacing each record with a ranked copy.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, Field, field_validator, model_validator

from blastpaf.core.constants import FEATURE_COLUMNS


class AlignmentFeature(BaseModel):
    """
    Single candidate alignment from aligner tabular output.

    Attributes:
        qmember_id: Query member identifier
        hmember_id: Hit member identifier
        qgenome_db_id: Genome the query member belongs to
        hgenome_db_id: Genome the hit member belongs to
        perc_ident: Percent identity (0-100)
        score: Raw alignment score
        evalue: Expectation value
        qstart: Start position in query
        qend: End position in query
        hstart: Start position in hit
        hend: End position in hit
        align_length: Alignment length in columns
        identical_matches: Number of identical residues
        positive_matches: Number of positive-scoring residue pairs
        perc_pos: Percent positive (0-100)
        cigar_line: Pairwise alignment shape, None when not requested
        hit_rank: Dense rank within the query group, None until ranked
        shape_error: Reason the cigar line could not be built (skip policy only)
    """

    qmember_id: str = Field(min_length=1, description="Query member ID")
    hmember_id: str = Field(min_length=1, description="Hit member ID")
    qgenome_db_id: str = Field(min_length=1, description="Query genome ID")
    hgenome_db_id: str = Field(min_length=1, description="Hit genome ID")
    perc_ident: float = Field(
        ge=0, le=100, allow_inf_nan=False, description="Percent identity (0-100, clamped)"
    )
    score: float = Field(allow_inf_nan=False, description="Raw alignment score")
    evalue: float = Field(ge=0, allow_inf_nan=False, description="Expectation value")
    qstart: int = Field(ge=1, description="Query start position")
    qend: int = Field(ge=1, description="Query end position")
    hstart: int = Field(ge=1, description="Hit start position")
    hend: int = Field(ge=1, description="Hit end position")
    align_length: int = Field(ge=0, description="Alignment length")
    identical_matches: int = Field(ge=0, description="Identical matches")
    positive_matches: int = Field(ge=0, description="Positive-scoring matches")
    perc_pos: float = Field(
        ge=0, le=100, allow_inf_nan=False, description="Percent positive (0-100, clamped)"
    )
    cigar_line: str | None = Field(default=None, description="Pairwise alignment shape")
    hit_rank: int | None = Field(default=None, ge=1, description="Dense rank within query")
    shape_error: str | None = Field(
        default=None,
        description="Why the cigar line is missing when shapes were requested",
    )

    @field_validator("perc_ident", "perc_pos", mode="before")
    @classmethod
    def clamp_percentage(cls, v: float) -> float:
        """
        Clamp percentages to the valid range [0, 100].

        Aligners occasionally report 100.01 and similar rounding artifacts.
        """
        if isinstance(v, (int, float)) and v == v:
            return max(0.0, min(100.0, float(v)))
        return v

    @model_validator(mode="after")
    def validate_query_positions(self) -> Self:
        """Ensure query end >= query start."""
        if self.qend < self.qstart:
            msg = f"qend ({self.qend}) must be >= qstart ({self.qstart})"
            raise ValueError(msg)
        return self

    model_config = {"frozen": True}

    @property
    def ranking_key(self) -> tuple[float, float, float, float]:
        """Sort key: score desc, evalue asc, perc_ident desc, perc_pos desc."""
        return (-self.score, self.evalue, -self.perc_ident, -self.perc_pos)

    def ties_with(self, other: AlignmentFeature) -> bool:
        """True when both features share score, evalue, perc_ident and perc_pos."""
        return (
            self.score == other.score
            and self.evalue == other.evalue
            and self.perc_ident == other.perc_ident
            and self.perc_pos == other.perc_pos
        )

    def with_rank(self, rank: int) -> AlignmentFeature:
        """Return a copy carrying the given hit rank."""
        if rank < 1:
            msg = f"hit_rank must be >= 1, got {rank}"
            raise ValueError(msg)
        return self.model_copy(update={"hit_rank": rank})

    def to_row(self) -> dict[str, Any]:
        """Values keyed by peptide align feature table column."""
        return {column: getattr(self, column) for column in FEATURE_COLUMNS}
