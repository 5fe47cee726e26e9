"""
Concrete specificity rules.

Three interchangeable implementations of ``Specificity``:

- ``PatternSpecificity``: a list of regular expressions that must all be
  found in the window (AND semantics). This is the generic custom rule.
- ``NamedSpecificity``: a ``PatternSpecificity`` whose patterns come from
  the built-in table.
- ``PredicateSpecificity``: an arbitrary function of the window, treated as
  a black box.

``as_specificity`` maps every accepted input form onto one of these once,
at engine construction, so the digestion engine never has to know which
kind of rule it holds.

Patterns are searched, not anchored: ``AGGAL[^P]`` matches any window that
contains that hexapeptide anywhere. Patterns written for the full window
(``.{3}[KR][^P].{3}``) pin each constraint to a fixed P-site.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Iterable
from typing import Any, Callable, Optional, Union

from .base import (
    Specificity,
    SpecificityError,
    UnknownSpecificity,
    get_specificity,
    list_specificities,
)
from .table import canonical_name, lookup_patterns

logger = logging.getLogger(__name__)

PatternLike = Union[str, re.Pattern]
SpecificityLike = Union[
    str,
    re.Pattern,
    Iterable[PatternLike],
    Callable[[str], Any],
    Specificity,
]


def compile_patterns(patterns: Union[PatternLike, Iterable[PatternLike]]) -> tuple[re.Pattern, ...]:
    """
    Compile one pattern or a collection of patterns.

    Raises:
        SpecificityError: If the collection is empty or a pattern is invalid
    """
    if isinstance(patterns, (str, re.Pattern)):
        patterns = [patterns]

    compiled = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            compiled.append(pattern)
        elif isinstance(pattern, str):
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise SpecificityError(f"Invalid pattern {pattern!r}: {e}") from e
        else:
            raise SpecificityError(
                f"Patterns must be strings or compiled regexes, got {type(pattern).__name__}"
            )

    if not compiled:
        raise SpecificityError("At least one pattern is required")

    return tuple(compiled)


class PatternSpecificity(Specificity):
    """
    Specificity defined by positional regular expressions.

    A window is cleavable when every pattern is found in it.

    Usage:
        >>> rule = PatternSpecificity([r".{3}[KR][^P].{3}"])
        >>> rule.evaluate("AAAKAAAA")
        True
        >>> rule.evaluate("AAAKPAAA")
        False
    """

    kind = "pattern"

    def __init__(
        self,
        patterns: Union[PatternLike, Iterable[PatternLike]],
        name: str = "custom",
        description: str = "",
    ):
        self._patterns = compile_patterns(patterns)
        self.name = name
        self.description = description
        logger.debug(f"Built {self.kind} specificity {name!r} with {len(self._patterns)} pattern(s)")

    @property
    def patterns(self) -> tuple[str, ...]:
        """Source text of the patterns."""
        return tuple(p.pattern for p in self._patterns)

    def evaluate(self, window: str) -> bool:
        for pattern in self._patterns:
            if pattern.search(window) is None:
                return False
        return True

    @property
    def cache_token(self) -> Optional[str]:
        digest = hashlib.md5(
            "\x1f".join(sorted(f"{p.pattern}/{p.flags}" for p in self._patterns)).encode()
        ).hexdigest()
        return f"{self.kind}:{digest}"

    def get_info(self) -> dict[str, Any]:
        info = super().get_info()
        info["patterns"] = list(self.patterns)
        return info


class NamedSpecificity(PatternSpecificity):
    """
    Built-in specificity looked up by enzyme or reagent name.

    Usage:
        >>> rule = NamedSpecificity("trypsin")
        >>> rule.evaluate("XAARAGQT")
        True

    Raises:
        UnknownSpecificity: At construction, if the name is not in the table
    """

    kind = "named"

    def __init__(self, name: str):
        patterns = lookup_patterns(name)
        if patterns is None:
            available = ", ".join(list_specificities())
            raise UnknownSpecificity(
                f"Specificity '{name}' not found. Available: {available}"
            )
        super().__init__(patterns, name=canonical_name(name))

    @property
    def cache_token(self) -> Optional[str]:
        return f"{self.kind}:{self.name}"


class PredicateSpecificity(Specificity):
    """
    Specificity defined by an arbitrary function of the window.

    The function receives exactly 8 symbols and its return value is
    interpreted as a boolean.

    Usage:
        >>> rule = PredicateSpecificity(lambda w: w == "MAELVIKP")
        >>> rule.evaluate("MAELVIKP")
        True
    """

    kind = "predicate"

    def __init__(
        self,
        func: Callable[[str], Any],
        name: Optional[str] = None,
        description: str = "",
    ):
        if not callable(func):
            raise SpecificityError(
                f"Predicate must be callable, got {type(func).__name__}"
            )
        self._func = func
        if name is None:
            func_name = getattr(func, "__name__", "")
            name = func_name if func_name.isidentifier() else "custom"
        self.name = name
        self.description = description or (func.__doc__ or "").strip()

    def evaluate(self, window: str) -> bool:
        return bool(self._func(window))


def as_specificity(rule: SpecificityLike) -> Specificity:
    """
    Coerce any supported rule description to a ``Specificity``.

    Accepted forms:
        - a ``Specificity`` instance (returned as is)
        - a name of a built-in or registered specificity
        - a compiled regular expression
        - any other iterable of pattern strings or compiled regexes (AND)
        - a callable taking the window and returning a truthy value

    Raises:
        UnknownSpecificity: If a name is not known
        SpecificityError: If the rule cannot be interpreted
    """
    if isinstance(rule, Specificity):
        return rule
    if isinstance(rule, str):
        return get_specificity(rule)
    if isinstance(rule, re.Pattern):
        return PatternSpecificity([rule])
    if callable(rule):
        return PredicateSpecificity(rule)
    if isinstance(rule, Iterable):
        return PatternSpecificity(list(rule))

    raise SpecificityError(f"Cannot build a specificity from {type(rule).__name__}")
