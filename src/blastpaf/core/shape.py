"""
Alignment shape encoding from aligned subsequences.

Converts the gapped query and hit subsequences reported by the aligner
(qseq/sseq columns) into run-length cigar strings. Each side is first
encoded on its own (M for residues, D for gaps), then the two encodings
are reconciled column by column into a single pairwise cigar line:

    query  M, hit M  ->  M  (aligned residues)
    query  M, hit D  ->  I  (residues in the query, gap in the hit)
    query  D, hit M  ->  D  (gap in the query)
    query  D, hit D  ->  column dropped

Counts of 1 are omitted, e.g. "AC-GT" encodes as "2MD2M".
"""

from __future__ import annotations

import re

from blastpaf.core.constants import (
    CIGAR_DELETION,
    CIGAR_INSERTION,
    CIGAR_MATCH,
    GAP_SYMBOL,
)
from blastpaf.core.exceptions import InconsistentAlignmentShapeError

_CIGAR_TOKEN = re.compile(r"(\d*)([MDI])")

_MERGE_TABLE: dict[tuple[str, str], str | None] = {
    (CIGAR_MATCH, CIGAR_MATCH): CIGAR_MATCH,
    (CIGAR_MATCH, CIGAR_DELETION): CIGAR_INSERTION,
    (CIGAR_DELETION, CIGAR_MATCH): CIGAR_DELETION,
    (CIGAR_DELETION, CIGAR_DELETION): None,
}


def _format_run(length: int, op: str) -> str:
    return f"{length}{op}" if length > 1 else op


def encode_aligned_sequence(seq: str, gap: str = GAP_SYMBOL) -> str:
    """
    Encode one gapped sequence as alternating M/D runs.

    Args:
        seq: Aligned sequence as reported by the aligner
        gap: Gap character

    Returns:
        Run-length string, empty for an empty sequence
    """
    tokens: list[str] = []
    current: str | None = None
    run = 0

    for char in seq:
        state = CIGAR_DELETION if char == gap else CIGAR_MATCH
        if state == current:
            run += 1
            continue
        if current is not None:
            tokens.append(_format_run(run, current))
        current = state
        run = 1

    if current is not None:
        tokens.append(_format_run(run, current))

    return "".join(tokens)


def expand_cigar(cigar: str) -> list[str]:
    """
    Expand a run-length cigar string into one operation per column.

    Accepts both "2MD2M" and "2M1D2M" spellings.

    Raises:
        ValueError: If the string contains anything but count/operation pairs
    """
    ops: list[str] = []
    pos = 0
    for match in _CIGAR_TOKEN.finditer(cigar):
        if match.start() != pos:
            break
        count = int(match.group(1)) if match.group(1) else 1
        ops.extend(match.group(2) * count)
        pos = match.end()

    if pos != len(cigar):
        msg = f"Invalid cigar string: {cigar!r}"
        raise ValueError(msg)

    return ops


def compact_cigar(ops: list[str]) -> str:
    """Collapse per-column operations back into a run-length string."""
    tokens: list[str] = []
    current: str | None = None
    run = 0
    for op in ops:
        if op == current:
            run += 1
            continue
        if current is not None:
            tokens.append(_format_run(run, current))
        current = op
        run = 1
    if current is not None:
        tokens.append(_format_run(run, current))
    return "".join(tokens)


def merge_cigars(query_cigar: str, hit_cigar: str) -> str:
    """
    Merge per-side encodings into one pairwise cigar line.

    Args:
        query_cigar: M/D encoding of the aligned query subsequence
        hit_cigar: M/D encoding of the aligned hit subsequence

    Returns:
        Combined M/I/D cigar line

    Raises:
        InconsistentAlignmentShapeError: If the encodings span a different
            number of alignment columns
    """
    query_ops = expand_cigar(query_cigar)
    hit_ops = expand_cigar(hit_cigar)

    if len(query_ops) != len(hit_ops):
        raise InconsistentAlignmentShapeError(
            query_cigar, hit_cigar, len(query_ops), len(hit_ops)
        )

    merged: list[str] = []
    for query_op, hit_op in zip(query_ops, hit_ops):
        op = _MERGE_TABLE.get((query_op, hit_op))
        if op is None:
            if (query_op, hit_op) in _MERGE_TABLE:
                continue
            msg = f"Unexpected cigar operations in per-side encoding: {query_op}/{hit_op}"
            raise ValueError(msg)
        merged.append(op)

    return compact_cigar(merged)


def alignment_shape(qseq: str, sseq: str, gap: str = GAP_SYMBOL) -> str:
    """
    Build the pairwise cigar line for two aligned subsequences.

    Example:
        >>> alignment_shape("AC-GT", "ACTGT")
        '2MD2M'
    """
    return merge_cigars(
        encode_aligned_sequence(qseq, gap),
        encode_aligned_sequence(sseq, gap),
    )
