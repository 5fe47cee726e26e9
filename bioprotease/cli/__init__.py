"""
Command-line interface for bioprotease.

Usage patterns:
    bioprotease digest sequences.fasta --enzyme trypsin
    bioprotease sites MRAERVIKP
    bioprotease list-enzymes --detailed
"""

from .main import cli, main

__all__ = ["cli", "main"]
