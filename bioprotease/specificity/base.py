"""
Abstract base class for protease specificities.

A specificity answers a single question: given the 8-residue window
P4..P4' around a peptide bond, is that bond cleavable? The digestion engine
only ever calls ``evaluate(window)``, which makes every representation of a
rule interchangeable (Strategy pattern):

1. Built-in enzymes looked up by name in a static pattern table
2. Caller-supplied lists of positional regular expressions
3. Arbitrary caller-supplied predicate functions
4. Registered ``Specificity`` subclasses, for rules that need more than
   a regular expression

Implementations must be total over any 8-symbol string, including windows
padded with sentinel symbols, and must not have side effects: the same
window always yields the same verdict, which is what makes caching safe.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, TypeVar

from .table import SPECIFICITY_TABLE, canonical_name

logger = logging.getLogger(__name__)

# Type variable for specificity subclasses
S = TypeVar("S", bound="Specificity")


class SpecificityError(Exception):
    """Raised when a specificity rule is malformed."""
    pass


class UnknownSpecificity(SpecificityError, KeyError):
    """Raised when a named specificity is not known."""

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0]) if self.args else ""


class Specificity(ABC):
    """
    Predicate over an 8-residue window.

    Subclasses implement ``evaluate``. Instances are immutable once built
    and may be shared between engines and threads.

    Example:
        @register_specificity
        class MyProtease(Specificity):
            name = "my_protease"
            kind = "custom"

            def evaluate(self, window: str) -> bool:
                return window[3] == "K" and window[4] != "P"
    """

    name: str = "specificity"
    kind: str = "custom"
    description: str = ""

    @abstractmethod
    def evaluate(self, window: str) -> bool:
        """
        Decide whether the bond between window[3] and window[4] is cleavable.

        Args:
            window: Exactly 8 uppercase symbols, P4..P4'

        Returns:
            True if the bond is cleavable
        """
        pass

    def __call__(self, window: str) -> bool:
        return self.evaluate(window)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    @property
    def cache_token(self) -> Optional[str]:
        """
        Stable identity of the rule across processes.

        None means the rule cannot be identified outside this process
        (arbitrary code), so its results must not be persisted.
        """
        return None

    def get_info(self) -> dict[str, Any]:
        """
        Get specificity information for documentation/logging.

        Returns:
            Dictionary with specificity metadata
        """
        return {
            "name": self.name,
            "kind": self.kind,
            "description": self.description,
        }


# Registry for specificity classes that are not plain table entries
_SPECIFICITY_REGISTRY: dict[str, type[Specificity]] = {}


def register_specificity(specificity_class: type[S]) -> type[S]:
    """
    Decorator to register a specificity class under its ``name``.

    Registered classes are built without arguments by ``get_specificity``
    and take precedence over built-in table entries of the same name.

    Usage:
        @register_specificity
        class MySpecificity(Specificity):
            name = "my_specificity"
            ...
    """
    key = canonical_name(specificity_class.name)
    if key in _SPECIFICITY_REGISTRY:
        logger.warning(f"Replacing registered specificity: {key}")
    _SPECIFICITY_REGISTRY[key] = specificity_class
    return specificity_class


def unregister_specificity(name: str) -> None:
    """Remove a registered specificity class (no-op if absent)."""
    _SPECIFICITY_REGISTRY.pop(canonical_name(name), None)


def list_specificities() -> list[str]:
    """
    List all available specificity names.

    Returns:
        Sorted names of built-in and registered specificities
    """
    return sorted(set(SPECIFICITY_TABLE) | set(_SPECIFICITY_REGISTRY))


def get_specificity(name: str) -> Specificity:
    """
    Get a specificity instance by name.

    Args:
        name: Specificity name (case-insensitive, spaces or underscores)

    Returns:
        Specificity instance

    Raises:
        UnknownSpecificity: If the name is neither registered nor built in
    """
    key = canonical_name(name)

    if key in _SPECIFICITY_REGISTRY:
        return _SPECIFICITY_REGISTRY[key]()

    from .rules import NamedSpecificity

    return NamedSpecificity(name)
