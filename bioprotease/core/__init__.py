"""
Core data structures and utilities for bioprotease.

Modules:
    models: Pydantic-based data models for records, fragments and results
    sequence: Sequence normalization, validation and FASTA I/O
    window: Sentinel padding and P4..P4' window construction
"""

from .models import (
    CleavageSite,
    DigestionResult,
    Fragment,
    ProteinRecord,
)
from .sequence import (
    EXTENDED_AA,
    STANDARD_AA,
    SequenceError,
    SequenceValidator,
    clean_sequence,
    normalize_sequence,
    parse_fasta,
    sequence_hash,
    to_fasta,
)
from .window import (
    PAD_LENGTH,
    SENTINEL,
    WINDOW_SIZE,
    complete_window,
    iter_windows,
    pad_sequence,
    window_at,
    window_start,
)

__all__ = [
    # Models
    "ProteinRecord",
    "Fragment",
    "CleavageSite",
    "DigestionResult",
    # Sequence utilities
    "SequenceValidator",
    "SequenceError",
    "clean_sequence",
    "normalize_sequence",
    "parse_fasta",
    "to_fasta",
    "sequence_hash",
    "STANDARD_AA",
    "EXTENDED_AA",
    # Windows
    "SENTINEL",
    "PAD_LENGTH",
    "WINDOW_SIZE",
    "pad_sequence",
    "window_start",
    "window_at",
    "complete_window",
    "iter_windows",
]
