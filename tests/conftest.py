"""
Shared pytest fixtures for blastpaf tests.

Provides reusable tabular output lines, temporary files, and CLI runners
for unit testing.
"""

from __future__ import annotations

import gzip
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# =============================================================================
# Tabular Output Fixtures
# =============================================================================

OUTFMT7_HEADER = (
    "# BLASTP 2.14.0+\n"
    "# Query: 1001\n"
    "# Database: homo_sapiens_GRCh38.fasta\n"
    "# Fields: query acc., subject acc., evalue, score, identical, % identity, "
    "q. start, q. end, s. start, s. end, alignment length, positives, "
    "% positives, query seq, subject seq\n"
    "# 3 hits found\n"
)


def _blast_line(
    qacc: str = "Q1",
    sacc: str = "H1",
    evalue: Any = "1e-10",
    score: Any = 100,
    nident: Any = 40,
    pident: Any = 99.0,
    qstart: Any = 1,
    qend: Any = 5,
    sstart: Any = 1,
    send: Any = 5,
    length: Any = 5,
    positive: Any = 45,
    ppos: Any = 99.0,
    qseq: str | None = "AC-GT",
    sseq: str | None = "ACTGT",
) -> str:
    fields = [qacc, sacc, evalue, score, nident, pident, qstart, qend, sstart, send, length, positive, ppos]
    if qseq is not None:
        fields.append(qseq)
    if sseq is not None:
        fields.append(sseq)
    return "\t".join(str(f) for f in fields) + "\n"


@pytest.fixture
def make_blast_line() -> Callable[..., str]:
    """Factory for a single tabular line; keyword arguments override columns."""
    return _blast_line


@pytest.fixture
def valid_blast_line() -> str:
    """Single valid tabular line with aligned subsequences."""
    return _blast_line()


@pytest.fixture
def valid_feature_dict() -> dict[str, Any]:
    """Valid AlignmentFeature as dictionary."""
    return {
        "qmember_id": "Q1",
        "hmember_id": "H1",
        "qgenome_db_id": "150",
        "hgenome_db_id": "151",
        "perc_ident": 99.0,
        "score": 100.0,
        "evalue": 1e-10,
        "qstart": 1,
        "qend": 5,
        "hstart": 1,
        "hend": 5,
        "align_length": 5,
        "identical_matches": 40,
        "positive_matches": 45,
        "perc_pos": 99.0,
    }


@pytest.fixture
def make_feature(valid_feature_dict: dict[str, Any]) -> Callable[..., Any]:
    """Factory for AlignmentFeature instances with overridable fields."""
    from blastpaf.models.feature import AlignmentFeature

    def _make(**overrides: Any) -> AlignmentFeature:
        values = dict(valid_feature_dict)
        values.update(overrides)
        return AlignmentFeature(**values)

    return _make


@pytest.fixture
def ranked_scenario_lines() -> list[str]:
    """Two tied hits and one weaker hit for query Q1, after a comment header."""
    return [
        *OUTFMT7_HEADER.splitlines(keepends=True),
        _blast_line(sacc="H1", score=100, evalue="1e-10", pident=99, ppos=99),
        _blast_line(sacc="H2", score=100, evalue="1e-10", pident=99, ppos=99),
        _blast_line(sacc="H3", score=80, evalue="1e-5", pident=95, ppos=95),
    ]


@pytest.fixture
def comment_only_lines() -> list[str]:
    """Tabular output of a search that found nothing."""
    return [
        "# BLASTP 2.14.0+\n",
        "# Query: 1001\n",
        "# 0 hits found\n",
    ]


# =============================================================================
# Temporary Files
# =============================================================================


@pytest.fixture
def temp_dir() -> Path:
    """Temporary directory that is cleaned up after tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_blast_file(temp_dir: Path, ranked_scenario_lines: list[str]) -> Path:
    """Temporary tabular file for hit genome 151."""
    path = temp_dir / "vs_151.tsv"
    path.write_text("".join(ranked_scenario_lines))
    return path


@pytest.fixture
def temp_blast_file_gz(temp_dir: Path) -> Path:
    """Gzip compressed tabular file for hit genome 152."""
    path = temp_dir / "vs_152.tsv.gz"
    content = OUTFMT7_HEADER + _blast_line(qacc="Q2", sacc="H9", score=300, evalue="1e-80")
    with gzip.open(path, "wt") as handle:
        handle.write(content)
    return path


@pytest.fixture
def malformed_blast_file(temp_dir: Path) -> Path:
    """Tabular file with a non-numeric score on its second data line."""
    path = temp_dir / "malformed.tsv"
    path.write_text(
        _blast_line(sacc="H1")
        + _blast_line(sacc="H2", score="high")
        + "# Comment line\n"
    )
    return path


@pytest.fixture
def invalid_utf8_blast_file(temp_dir: Path) -> Path:
    """Tabular file whose second line holds bytes that are not valid UTF-8."""
    path = temp_dir / "invalid_utf8.tsv"
    path.write_bytes(
        _blast_line(sacc="H1").encode()
        + b"Q1\tH\xff\xfe2\t1e-5\n"
        + _blast_line(sacc="H3").encode()
    )
    return path


@pytest.fixture
def empty_blast_file(temp_dir: Path) -> Path:
    """Empty tabular file."""
    path = temp_dir / "empty.tsv"
    path.touch()
    return path


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Typer CLI runner for testing commands."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo the handler setup done by CLI commands so caplog sees records."""
    package_logger = logging.getLogger("blastpaf")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    package_logger.handlers = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
