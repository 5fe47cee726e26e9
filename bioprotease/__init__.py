"""
bioprotease: in-silico proteolytic cleavage of protein sequences.

This package models the hydrolytic behaviour of proteolytic enzymes and
chemical cleavage reagents. Specificity is expressed as a rule over the
8-residue window P4..P4' surrounding each peptide bond, in the style of
ExPASy PeptideCutter. The models are deliberately simple: they do not take
kinetics, temperature, solvent accessibility or secondary/tertiary structure
into account, but any of these can be brought in through a user-defined
specificity function.

Key components:
    - core: Sequence handling, data models and window construction
    - specificity: Built-in enzyme table and custom rule types
    - digestion: The ``Protease`` engine and result caching
    - cli: Command-line interface

Basic usage:
    >>> from bioprotease import Protease
    >>> trypsin = Protease("trypsin")
    >>> trypsin.digest("MRAERVIKP")
    ['MR', 'AER', 'VIKP']
    >>> trypsin.cleavage_sites("MRAERVIKP")
    [2, 5]
    >>> trypsin.cut("MRAERVIKP", 2)
    ('MR', 'AERVIKP')

License: MIT
"""

__version__ = "0.1.0"

from .core.models import (
    CleavageSite,
    DigestionResult,
    Fragment,
    ProteinRecord,
)
from .core.sequence import SequenceError, parse_fasta, to_fasta
from .digestion import (
    InvalidPosition,
    InvalidPositionWarning,
    Protease,
    ProteaseConfig,
    ProteaseError,
)
from .specificity import (
    NamedSpecificity,
    PatternSpecificity,
    PredicateSpecificity,
    Specificity,
    SpecificityError,
    UnknownSpecificity,
    get_specificity,
    list_specificities,
    register_specificity,
)


def digest(sequence, specificity="trypsin", config=None) -> list[str]:
    """
    Digest a sequence completely with a one-off protease.

    This is a convenience wrapper; build a ``Protease`` once and reuse it
    when digesting many sequences.

    Args:
        sequence: Protein sequence (string, Seq, SeqRecord or ProteinRecord)
        specificity: Enzyme name, pattern(s), predicate or Specificity
        config: Optional ProteaseConfig

    Returns:
        Fragments in N- to C-terminal order

    Example:
        >>> from bioprotease import digest
        >>> digest("AARAGQTVRFSDAAA")
        ['AAR', 'AGQTVR', 'FSDAAA']
    """
    if config is None:
        config = ProteaseConfig(use_cache=False)
    return Protease(specificity, config=config).digest(sequence)


__all__ = [
    # Version
    "__version__",
    # Main function
    "digest",
    # Engine
    "Protease",
    "ProteaseConfig",
    "ProteaseError",
    "InvalidPosition",
    "InvalidPositionWarning",
    # Specificities
    "Specificity",
    "PatternSpecificity",
    "NamedSpecificity",
    "PredicateSpecificity",
    "SpecificityError",
    "UnknownSpecificity",
    "get_specificity",
    "list_specificities",
    "register_specificity",
    # Models
    "ProteinRecord",
    "Fragment",
    "CleavageSite",
    "DigestionResult",
    # Sequence utilities
    "SequenceError",
    "parse_fasta",
    "to_fasta",
]
