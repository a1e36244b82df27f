"""
Unit tests for configuration models.

Tests defaults, the aligner output format string and YAML loading.
"""

from __future__ import annotations

import logging

import pytest
import yaml
from pydantic import ValidationError

from blastpaf.core.exceptions import ConfigurationError
from blastpaf.models.config import ParserConfig, SearchConfig


class TestParserConfig:
    """Tests for ParserConfig."""

    def test_defaults(self):
        config = ParserConfig()
        assert config.with_shapes is True
        assert config.gap_symbol == "-"
        assert config.on_error == "abort"

    @pytest.mark.parametrize("gap", ["", "--", " ", "\t"])
    def test_invalid_gap_symbol(self, gap):
        with pytest.raises(ValidationError):
            ParserConfig(gap_symbol=gap)

    def test_invalid_error_policy(self):
        with pytest.raises(ValidationError):
            ParserConfig(on_error="ignore")

    def test_frozen(self):
        config = ParserConfig()
        with pytest.raises(ValidationError):
            config.with_shapes = False


class TestSearchConfig:
    """Tests for SearchConfig."""

    def test_defaults(self):
        config = SearchConfig()
        assert config.evalue_limit == 1e-5
        assert config.tophits == 20

    def test_outfmt_with_shapes(self):
        assert SearchConfig().outfmt == (
            "7 qacc sacc evalue score nident pident qstart qend sstart send "
            "length positive ppos qseq sseq"
        )

    def test_outfmt_without_shapes(self):
        config = SearchConfig(parser=ParserConfig(with_shapes=False))
        assert config.outfmt.endswith("positive ppos")
        assert "qseq" not in config.outfmt

    @pytest.mark.parametrize("field, value", [("evalue_limit", 0), ("tophits", 0)])
    def test_rejects_non_positive(self, field, value):
        with pytest.raises(ValidationError):
            SearchConfig(**{field: value})


class TestYamlConfig:
    """Tests for loading configuration from YAML."""

    def test_from_yaml(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text(
            "search:\n"
            "  evalue_limit: 1.0e-10\n"
            "  tophits: 5\n"
            "parser:\n"
            "  with_shapes: false\n"
            "  on_error: skip\n"
        )
        config = SearchConfig.from_yaml(path)

        assert config.evalue_limit == 1e-10
        assert config.tophits == 5
        assert config.parser.with_shapes is False
        assert config.parser.on_error == "skip"
        assert config.parser.gap_symbol == "-"

    def test_empty_yaml_gives_defaults(self, temp_dir):
        path = temp_dir / "empty.yaml"
        path.write_text("")
        assert SearchConfig.from_yaml(path) == SearchConfig()

    def test_non_mapping_rejected(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            SearchConfig.from_yaml(path)

    def test_invalid_value_wrapped(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("search:\n  tophits: 0\n")
        with pytest.raises(ConfigurationError) as exc_info:
            SearchConfig.from_yaml(path)
        assert exc_info.value.suggestion

    def test_invalid_parser_value_wrapped(self, temp_dir):
        path = temp_dir / "bad_parser.yaml"
        path.write_text("parser:\n  on_error: explode\n")
        with pytest.raises(ConfigurationError):
            SearchConfig.from_yaml(path)

    def test_unknown_section_warns(self, temp_dir, caplog):
        path = temp_dir / "extra.yaml"
        path.write_text("output:\n  format: csv\n")
        with caplog.at_level(logging.WARNING):
            SearchConfig.from_yaml(path)
        assert "output" in caplog.text

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            SearchConfig.from_yaml(temp_dir / "missing.yaml")

    def test_yaml_str_reloads(self, temp_dir):
        config = SearchConfig(tophits=7, parser=ParserConfig(gap_symbol="."))
        data = yaml.safe_load(config.to_yaml_str())

        assert data["search"]["tophits"] == 7
        assert data["parser"]["gap_symbol"] == "."

        path = temp_dir / "saved.yaml"
        path.write_text(config.to_yaml_str())
        assert SearchConfig.from_yaml(path) == config
