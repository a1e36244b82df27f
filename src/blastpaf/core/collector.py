"""
Accumulation of ranked features across target genome passes.

One query genome is searched against several target genomes in turn.
FeatureCollector concatenates the ranked output of every pass in the order
the passes were run, so the final collection is reproducible regardless
of the scores involved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from blastpaf.core.exceptions import GenomeMismatchError, MissingContextError
from blastpaf.core.parsers import TabularRecordParser
from blastpaf.core.ranking import rank_features
from blastpaf.models.config import ParserConfig
from blastpaf.models.feature import AlignmentFeature

if TYPE_CHECKING:
    import polars as pl

logger = logging.getLogger(__name__)


class FeatureCollector:
    """
    Ordered, flat collection of ranked features for one query genome.

    Within a pass, query groups are flattened in mapping key order and each
    group keeps its ranked order.

    Example:
        collector = FeatureCollector("9606")
        for genome_id, path in targets:
            with path.open() as handle:
                collector.process(handle, genome_id)
        df = collector.to_dataframe()
    """

    def __init__(
        self,
        query_genome_id: str | int,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Args:
            query_genome_id: Genome whose members are the queries
            logger: Logger handed to every parser and ranking pass; when
                None each component uses its own module logger

        Raises:
            MissingContextError: If query_genome_id is missing or empty
        """
        text = "" if query_genome_id is None else str(query_genome_id).strip()
        if not text:
            raise MissingContextError("query_genome_id")
        self.query_genome_id = text
        self.logger = logger
        self._features: list[AlignmentFeature] = []
        self._genome_ids: list[str] = []

    def add(self, groups: dict[str, list[AlignmentFeature]]) -> int:
        """
        Append one ranked batch after everything collected so far.

        Args:
            groups: Mapping qmember_id -> ranked features

        Returns:
            Number of features added

        Raises:
            GenomeMismatchError: If a feature belongs to another query genome
            ValueError: If a feature has not been ranked
        """
        batch: list[AlignmentFeature] = []
        for features in groups.values():
            for feature in features:
                if feature.qgenome_db_id != self.query_genome_id:
                    raise GenomeMismatchError(self.query_genome_id, feature.qgenome_db_id)
                if feature.hit_rank is None:
                    msg = (
                        f"Feature {feature.qmember_id} -> {feature.hmember_id} "
                        "has no hit_rank; rank groups before collecting them"
                    )
                    raise ValueError(msg)
                batch.append(feature)

        for feature in batch:
            if feature.hgenome_db_id not in self._genome_ids:
                self._genome_ids.append(feature.hgenome_db_id)
        self._features.extend(batch)
        return len(batch)

    def process(
        self,
        lines: Iterable[str | bytes],
        hit_genome_id: str | int,
        config: ParserConfig | None = None,
    ) -> int:
        """
        Parse, rank and collect one target genome pass.

        Args:
            lines: Tabular output of the search against hit_genome_id
            hit_genome_id: Target genome of this pass
            config: Parser settings

        Returns:
            Number of features added (0 when the pass produced no hits)
        """
        parser = TabularRecordParser(
            self.query_genome_id, hit_genome_id, config, self.logger
        )
        added = self.add(rank_features(parser.parse(lines), logger=self.logger))
        (self.logger or logger).info(
            "Collected %d feature(s) for hit genome %s", added, parser.hit_genome_id
        )
        return added

    def process_file(
        self,
        path: Path,
        hit_genome_id: str | int,
        config: ParserConfig | None = None,
    ) -> int:
        """Like process(), reading a plain or gzip compressed tabular file."""
        parser = TabularRecordParser(
            self.query_genome_id, hit_genome_id, config, self.logger
        )
        added = self.add(rank_features(parser.parse_file(path), logger=self.logger))
        (self.logger or logger).info(
            "Collected %d feature(s) for hit genome %s from %s",
            added,
            parser.hit_genome_id,
            path,
        )
        return added

    @property
    def features(self) -> tuple[AlignmentFeature, ...]:
        """All collected features in output order."""
        return tuple(self._features)

    @property
    def genome_ids(self) -> tuple[str, ...]:
        """Hit genomes with at least one feature, in processing order."""
        return tuple(self._genome_ids)

    def by_hit_genome(self) -> dict[str, list[AlignmentFeature]]:
        """Features grouped by hit genome for routing to storage."""
        grouped: dict[str, list[AlignmentFeature]] = {g: [] for g in self._genome_ids}
        for feature in self._features:
            grouped[feature.hgenome_db_id].append(feature)
        return grouped

    def to_dataframe(self) -> pl.DataFrame:
        """Collected features as a polars DataFrame in output order."""
        from blastpaf.core.io_utils import features_to_dataframe

        return features_to_dataframe(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[AlignmentFeature]:
        return iter(self._features)


def select_target_genomes(
    species_set: Sequence[str | int],
    query_genome_id: str | int,
    reuse_genome_ids: Iterable[str | int] = (),
    target_genome_id: str | int | None = None,
) -> list[str]:
    """
    Choose which genomes a query genome must be searched against.

    When the query genome's results are being reused from a previous
    release, only the genomes that are not reused (fresh) need searching;
    a fresh query genome is searched against the whole species set. The
    query genome itself is never a target.

    Args:
        species_set: Genome identifiers of the species set, in order
        query_genome_id: Genome whose members are the queries
        reuse_genome_ids: Genomes whose results are carried over
        target_genome_id: Restrict the search to this one genome

    Returns:
        Target genome identifiers in species set order
    """
    query = str(query_genome_id)
    reused = {str(g) for g in reuse_genome_ids}
    genomes = [str(g) for g in species_set]

    if query in reused:
        genomes = [g for g in genomes if g not in reused]

    if target_genome_id is not None:
        genomes = [g for g in genomes if g == str(target_genome_id)]

    targets = [g for g in genomes if g != query]
    logger.debug("Found %d genome(s) to search query genome %s against", len(targets), query)
    return targets
