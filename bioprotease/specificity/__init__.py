"""
Protease specificity rules.

A specificity decides, from the 8-residue window P4..P4' around a peptide
bond, whether that bond is cleavable. Rules can be given by enzyme name
(built-in table), as a list of positional regular expressions, or as an
arbitrary predicate function; all of them expose the same
``evaluate(window)`` method.

Submodules:
    base: Abstract base class, errors and registry
    rules: Pattern, named and predicate implementations
    table: Built-in enzyme/reagent pattern table
"""

from .base import (
    Specificity,
    SpecificityError,
    UnknownSpecificity,
    get_specificity,
    list_specificities,
    register_specificity,
    unregister_specificity,
)
from .rules import (
    NamedSpecificity,
    PatternSpecificity,
    PredicateSpecificity,
    as_specificity,
    compile_patterns,
)
from .table import SPECIFICITY_TABLE, canonical_name

__all__ = [
    # Base
    "Specificity",
    "SpecificityError",
    "UnknownSpecificity",
    # Registry
    "register_specificity",
    "unregister_specificity",
    "get_specificity",
    "list_specificities",
    # Implementations
    "PatternSpecificity",
    "NamedSpecificity",
    "PredicateSpecificity",
    "as_specificity",
    "compile_patterns",
    # Table
    "SPECIFICITY_TABLE",
    "canonical_name",
]
