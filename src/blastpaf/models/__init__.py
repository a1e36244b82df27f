"""
Pydantic data models for blastpaf.

Provides type-safe models for alignment features and configuration.
"""

from blastpaf.models.config import ParserConfig, SearchConfig
from blastpaf.models.feature import AlignmentFeature

__all__ = [
    "AlignmentFeature",
    "ParserConfig",
    "SearchConfig",
]
