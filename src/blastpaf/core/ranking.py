"""
Per-query hit ranking.

Hits of one query member are ordered by score (descending), e-value
(ascending), percent identity (descending) and percent positive
(descending), then given dense ranks: a hit shares the rank of the hit
immediately before it when all four values are exactly equal, otherwise
its rank is one higher.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from blastpaf.models.feature import AlignmentFeature


def sort_features(features: Iterable[AlignmentFeature]) -> list[AlignmentFeature]:
    """Stable sort, best hit first."""
    return sorted(features, key=lambda f: f.ranking_key)


def features_tie(first: AlignmentFeature | None, second: AlignmentFeature | None) -> bool:
    """Exact equality on score, evalue, perc_ident and perc_pos."""
    if first is None or second is None:
        return False
    return first.ties_with(second)


def rank_group(features: Iterable[AlignmentFeature]) -> list[AlignmentFeature]:
    """
    Sort one query group and assign dense hit ranks.

    Ties are only compared against the immediately preceding hit in sorted
    order; the first hit always gets rank 1.

    Args:
        features: Unranked features of a single query member

    Returns:
        New list of ranked features, best first
    """
    ranked: list[AlignmentFeature] = []
    rank = 1
    previous: AlignmentFeature | None = None

    for feature in sort_features(features):
        if previous is not None and not features_tie(previous, feature):
            rank += 1
        ranked.append(feature.with_rank(rank))
        previous = feature

    return ranked


def rank_features(
    groups: dict[str, list[AlignmentFeature]],
    logger: logging.Logger | None = None,
) -> dict[str, list[AlignmentFeature]]:
    """
    Rank every query group of a parsed batch.

    The mapping is updated in place: each group list is replaced by its
    ranked version while the key order is left untouched.

    Args:
        groups: Mapping qmember_id -> features, as returned by the parser
        logger: Logger for diagnostics

    Returns:
        The same mapping, with every feature carrying a hit_rank
    """
    log = logger or logging.getLogger(__name__)

    for qmember_id, features in groups.items():
        groups[qmember_id] = rank_group(features)

    if groups:
        log.debug(
            "Ranked %d query group(s), deepest rank %d",
            len(groups),
            max(((group[-1].hit_rank or 0) for group in groups.values() if group), default=0),
        )
    return groups
