"""
CLI commands for blastpaf.

Provides the command-line interface for parsing and ranking aligner
tabular output.
"""

__all__ = ["features", "main"]
