"""
Pydantic configuration models for blastpaf.

These models define how aligner tabular output is parsed and which
parameters the external aligner is run with. Configuration can be loaded
from YAML files or assembled from CLI arguments.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from blastpaf.core.constants import (
    DEFAULT_EVALUE_LIMIT,
    DEFAULT_TOPHITS,
    GAP_SYMBOL,
    SHAPE_COLUMNS,
    TABULAR_COLUMNS,
)
from blastpaf.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ErrorPolicy = Literal["abort", "skip"]


class ParserConfig(BaseModel):
    """
    Configuration for the tabular record parser.

    Attributes:
        with_shapes: Build cigar lines from the qseq/sseq columns
        gap_symbol: Gap character used in aligned subsequences
        on_error: "abort" raises on the first malformed line,
            "skip" logs it and continues
    """

    with_shapes: bool = Field(
        default=True,
        description="Expect qseq/sseq columns and build cigar lines from them",
    )
    gap_symbol: str = Field(
        default=GAP_SYMBOL,
        min_length=1,
        max_length=1,
        description="Gap character in aligned subsequences",
    )
    on_error: ErrorPolicy = Field(
        default="abort",
        description="Malformed line policy: 'abort' the batch or 'skip' the line",
    )

    @field_validator("gap_symbol")
    @classmethod
    def reject_whitespace_gap(cls, v: str) -> str:
        """Whitespace is the column separator and cannot be a gap symbol."""
        if v.isspace():
            msg = "gap_symbol cannot be whitespace"
            raise ValueError(msg)
        return v

    model_config = {"frozen": True}


class SearchConfig(BaseModel):
    """
    Parameters for the external aligner run that produces the tabular input.

    Attributes:
        evalue_limit: E-value cutoff passed to the aligner
        tophits: Maximum target sequences per query
        parser: Parser settings; parser.with_shapes also controls whether
            qseq/sseq are requested in the output format
    """

    evalue_limit: float = Field(
        default=DEFAULT_EVALUE_LIMIT,
        gt=0,
        description="E-value threshold",
    )
    tophits: int = Field(
        default=DEFAULT_TOPHITS,
        ge=1,
        description="Maximum hits reported per query",
    )
    parser: ParserConfig = Field(default_factory=ParserConfig)

    @property
    def outfmt(self) -> str:
        """Output format specification for the aligner (-outfmt)."""
        columns = list(TABULAR_COLUMNS)
        if self.parser.with_shapes:
            columns.extend(SHAPE_COLUMNS)
        return "7 " + " ".join(columns)

    @classmethod
    def from_yaml(cls, path: Path) -> SearchConfig:
        """
        Load search configuration from a YAML file.

        Expected layout (all keys optional):

            search:
              evalue_limit: 1.0e-5
              tophits: 20
            parser:
              with_shapes: true
              gap_symbol: "-"
              on_error: abort

        Args:
            path: Path to YAML configuration file.

        Returns:
            SearchConfig populated from YAML values merged with defaults.

        Raises:
            FileNotFoundError: If YAML file does not exist.
            ConfigurationError: If the YAML is not a mapping or holds invalid values.
        """
        import yaml

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            msg = f"YAML config must be a mapping, got {type(raw).__name__}"
            raise ConfigurationError(msg)

        try:
            return cls(**_flatten_yaml_config(raw))
        except ValidationError as e:
            msg = f"Invalid configuration in {path}: {e.error_count()} error(s)\n{e}"
            raise ConfigurationError(msg) from e

    def to_yaml_str(self) -> str:
        """Serialize the configuration to the nested YAML layout."""
        import yaml

        data = {
            "search": {
                "evalue_limit": self.evalue_limit,
                "tophits": self.tophits,
            },
            "parser": self.parser.model_dump(),
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    model_config = {"frozen": True}


def _flatten_yaml_config(raw: dict[str, Any]) -> dict[str, Any]:
    """Map the nested YAML layout onto SearchConfig keyword arguments."""
    flat: dict[str, Any] = {}

    search = raw.get("search") or {}
    _map_if_present(search, "evalue_limit", flat, "evalue_limit")
    _map_if_present(search, "tophits", flat, "tophits")

    parser_raw = raw.get("parser") or {}
    parser_kwargs: dict[str, Any] = {}
    _map_if_present(parser_raw, "with_shapes", parser_kwargs, "with_shapes")
    _map_if_present(parser_raw, "gap_symbol", parser_kwargs, "gap_symbol")
    _map_if_present(parser_raw, "on_error", parser_kwargs, "on_error")
    if parser_kwargs:
        flat["parser"] = ParserConfig(**parser_kwargs)

    unknown = set(raw) - {"search", "parser"}
    if unknown:
        logger.warning("Ignoring unknown config sections: %s", ", ".join(sorted(unknown)))

    return flat


def _map_if_present(
    source: dict[str, Any],
    source_key: str,
    target: dict[str, Any],
    target_key: str,
) -> None:
    """Copy value from source dict to target dict if key exists."""
    if source_key in source and source[source_key] is not None:
        target[target_key] = source[source_key]
