"""
Digestion engine.

``Protease`` combines a specificity rule with the window builder to answer
four questions about a sequence:

- ``cut(seq, i)``: does the enzyme cleave after residue ``i``, and if so,
  what are the two products?
- ``digest(seq)``: what fragments does a complete digestion yield?
- ``cleavage_sites(seq)``: which bonds are scissile?
- ``is_substrate(seq)``: is any bond scissile at all?

Bonds are numbered from 1, N- to C-terminal; bond ``i`` follows residue
``i``. All three scanning operations build the windows through the same
``core.window`` arithmetic, so they always agree on which bonds are
cleavable.

An engine holds no mutable state apart from its optional result cache, so
one instance can be shared between threads.
"""

from __future__ import annotations

import logging
import time
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import numpy as np

from ..core.models import CleavageSite, DigestionResult, Fragment, ProteinRecord
from ..core.sequence import (
    SequenceError,
    SequenceLike,
    SequenceValidator,
    normalize_sequence,
)
from ..core.window import (
    PAD_LENGTH,
    complete_window,
    extract_window,
    iter_windows,
    pad_sequence,
    split_at,
    window_at,
    window_start,
)
from ..specificity import Specificity, as_specificity, list_specificities
from ..specificity.rules import SpecificityLike
from .cache import ResultCache, build_cache

logger = logging.getLogger(__name__)

CACHE_BACKENDS = ("memory", "disk")


class ProteaseError(Exception):
    """Base exception for digestion errors."""
    pass


class InvalidPosition(ProteaseError, IndexError):
    """Raised by ``cut`` for an out-of-range bond in strict mode."""
    pass


class InvalidPositionWarning(UserWarning):
    """Issued by ``cut`` for an out-of-range bond in lenient mode."""
    pass


@dataclass
class ProteaseConfig:
    """
    Configuration for engine behavior.

    Allows customization of caching and input handling without modifying
    the engine.
    """
    # Caching
    use_cache: bool = True
    cache_backend: str = "memory"  # "memory" or "disk"
    cache_size: int = 1024  # LRU capacity of the memory backend
    cache_dir: Optional[Path] = None
    cache_ttl: Optional[int] = 86400 * 30  # 30 days, disk backend only

    # Input handling
    strict_positions: bool = False  # Raise instead of warn on bad cut positions
    validate_sequences: bool = False  # Reject non amino acid symbols
    max_length: Optional[int] = None  # Cap on sequence length

    def __post_init__(self):
        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"Unknown cache backend '{self.cache_backend}'. "
                f"Available: {', '.join(CACHE_BACKENDS)}"
            )
        if self.cache_size < 1:
            raise ValueError("cache_size must be at least 1")
        if self.max_length is not None and self.max_length < 1:
            raise ValueError("max_length must be positive")

        if self.use_cache and self.cache_backend == "disk":
            if self.cache_dir is None:
                self.cache_dir = Path.home() / ".cache" / "bioprotease"
            self.cache_dir = Path(self.cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)


class Protease:
    """
    A proteolytic enzyme (or chemical reagent) with a given specificity.

    The specificity can be any of:

    - an enzyme name, e.g. ``"trypsin"`` or ``"asp-n endopeptidase"``
      (see ``Protease.specificities()``)
    - a regular expression or a list of them; all must match the 8-residue
      window for the bond between its 4th and 5th residues to be cleaved
    - a function taking the 8-residue window and returning a truthy value
    - a ``Specificity`` instance

    Usage:
        >>> protease = Protease("trypsin")
        >>> protease.digest("MRAERVIKP")
        ['MR', 'AER', 'VIKP']
        >>> protease.cleavage_sites("MRAERVIKP")
        [2, 5]
        >>> protease.cut("MRAERVIKP", 2)
        ('MR', 'AERVIKP')

    Raises:
        UnknownSpecificity: If an enzyme name is not known
        SpecificityError: If the rule cannot be interpreted
    """

    def __init__(
        self,
        specificity: SpecificityLike,
        config: Optional[ProteaseConfig] = None,
        cache: Optional[ResultCache] = None,
    ):
        """
        Initialize the engine.

        Args:
            specificity: Rule description (see class docstring)
            config: Engine configuration (uses defaults if None)
            cache: Cache to use instead of the one built from config
        """
        self.config = config or ProteaseConfig()
        self._specificity = as_specificity(specificity)

        self._validator: Optional[SequenceValidator] = None
        if self.config.validate_sequences:
            self._validator = SequenceValidator(
                allow_ambiguous=True,
                max_length=self.config.max_length,
            )

        self._cache = cache if cache is not None else build_cache(
            self.config, self._specificity
        )
        logger.debug(f"Created {self!r} (cache={type(self._cache).__name__})")

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(specificity={self._specificity.name!r}, "
            f"kind={self._specificity.kind!r})"
        )

    @property
    def specificity(self) -> Specificity:
        """The engine's specificity rule."""
        return self._specificity

    @property
    def name(self) -> str:
        return self._specificity.name

    @property
    def cache(self) -> Optional[ResultCache]:
        return self._cache

    @staticmethod
    def specificities() -> list[str]:
        """Names of all built-in and registered specificities."""
        return list_specificities()

    # ------------------------------------------------------------------
    # Single-bond probing
    # ------------------------------------------------------------------

    def cut(self, sequence: SequenceLike, position: int) -> Optional[tuple[str, str]]:
        """
        Attempt to cleave after residue ``position``.

        Args:
            sequence: Substrate sequence
            position: 1-based bond position, ``1 <= position <= len(sequence)``

        Returns:
            The N- and C-terminal products if the bond is cleavable,
            otherwise None. An out-of-range position also returns None,
            after an ``InvalidPositionWarning``.

        Raises:
            InvalidPosition: For an out-of-range position when
                ``config.strict_positions`` is set
        """
        seq = self._prepare(sequence)

        if not self._valid_position(seq, position):
            message = f"Incorrect position {position!r} for a sequence of length {len(seq)}"
            if self.config.strict_positions:
                raise InvalidPosition(message)
            warnings.warn(message, InvalidPositionWarning, stacklevel=2)
            return None

        return self._cut(seq, position)

    def _cut(self, seq: str, position: int) -> Optional[tuple[str, str]]:
        if self._cleaves(window_at(seq, position)):
            return split_at(seq, position)
        return None

    @staticmethod
    def _valid_position(seq: str, position: Any) -> bool:
        return (
            isinstance(position, (int, np.integer))
            and not isinstance(position, bool)
            and 1 <= position <= len(seq)
        )

    # ------------------------------------------------------------------
    # Full scans
    # ------------------------------------------------------------------

    def digest(self, sequence: SequenceLike) -> list[str]:
        """
        Perform a complete digestion.

        Partial digests are not produced; see ``cut`` for single bonds.
        Joining the returned fragments gives back the (uppercased) input.

        Returns:
            Fragments in N- to C-terminal order
        """
        seq = self._prepare(sequence)
        return list(self._cached("digest", seq, lambda: self._scan_digest(seq)))

    def cleavage_sites(self, sequence: SequenceLike) -> list[int]:
        """
        Find all scissile bonds.

        Returns:
            Ascending 1-based bond positions
        """
        seq = self._prepare(sequence)
        return list(self._cached("cleavage_sites", seq, lambda: self._scan_sites(seq)))

    def is_substrate(self, sequence: SequenceLike) -> bool:
        """
        Whether the sequence has at least one scissile bond.

        Equivalent to ``bool(cleavage_sites(sequence))`` but stops at the
        first cleavable bond, so prefer it when only the answer matters.
        """
        seq = self._prepare(sequence)
        return self._cached("is_substrate", seq, lambda: self._scan_substrate(seq))

    def _scan_digest(self, seq: str) -> tuple[str, ...]:
        padded = pad_sequence(seq)
        products = []
        fragment_start = 0

        for position in range(1, len(seq) + 1):
            start = window_start(position)
            window = complete_window(extract_window(padded, start))
            if self._cleaves(window):
                # The bond follows P1, the 4th symbol of the window
                cut_point = start + 4
                products.append(padded[fragment_start:cut_point])
                fragment_start = cut_point

        products.append(padded[fragment_start:])
        products[0] = products[0][PAD_LENGTH:]

        logger.debug(f"{self.name}: {len(products)} fragment(s) from {len(seq)} residues")
        return tuple(products)

    def _scan_sites(self, seq: str) -> tuple[int, ...]:
        return tuple(
            position for position, window in iter_windows(seq)
            if self._cleaves(window)
        )

    def _scan_substrate(self, seq: str) -> bool:
        for position in range(1, len(seq) + 1):
            if self._cut(seq, position) is not None:
                return True
        return False

    # ------------------------------------------------------------------
    # Record-level API
    # ------------------------------------------------------------------

    def cleavage_mask(self, sequence: SequenceLike) -> np.ndarray:
        """
        Boolean array over bonds; element ``i - 1`` is bond ``i``.

        Returns:
            Array of length ``len(sequence)``
        """
        seq = self._prepare(sequence)
        mask = np.zeros(len(seq), dtype=bool)
        sites = self.cleavage_sites(seq)
        if sites:
            mask[np.asarray(sites) - 1] = True
        return mask

    def digest_record(
        self,
        protein: SequenceLike,
        sequence_id: Optional[str] = None,
    ) -> DigestionResult:
        """
        Digest a protein and return located fragments and sites.

        Args:
            protein: ProteinRecord, SeqRecord, Seq or string
            sequence_id: Identifier override (defaults to the record id)

        Returns:
            DigestionResult with fragments, sites and their windows
        """
        start_time = time.time()
        seq = self._prepare(protein)

        if sequence_id is None:
            sequence_id = getattr(protein, "id", None) or "sequence"

        sites = [
            CleavageSite(position=position, window=window_at(seq, position))
            for position in self.cleavage_sites(seq)
        ]

        fragments = []
        offset = 0
        for index, product in enumerate(self.digest(seq), start=1):
            if product:
                fragments.append(Fragment(
                    index=index,
                    start=offset,
                    end=offset + len(product),
                    sequence=product,
                ))
            offset += len(product)

        logger.debug(
            f"{self.name}: digested {sequence_id} into {len(fragments)} fragment(s) "
            f"in {time.time() - start_time:.4f}s"
        )

        return DigestionResult(
            sequence_id=sequence_id,
            sequence=seq,
            specificity=self.name,
            sites=sites,
            fragments=fragments,
        )

    def digest_many(self, proteins: list[ProteinRecord]) -> list[DigestionResult]:
        """Digest several records in order."""
        return [self.digest_record(protein) for protein in proteins]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def get_info(self) -> dict[str, Any]:
        """
        Get engine information for documentation/logging.

        Returns:
            Dictionary with specificity metadata and cache settings
        """
        info = self._specificity.get_info()
        info["cache"] = type(self._cache).__name__ if self._cache else None
        info["strict_positions"] = self.config.strict_positions
        return info

    def clear_cache(self):
        """Clear the result cache of this engine."""
        if self._cache:
            self._cache.clear()

    def close(self):
        """Close the result cache (releases the diskcache handle)."""
        if self._cache is not None:
            self._cache.close()

    def __enter__(self) -> "Protease":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _prepare(self, sequence: SequenceLike) -> str:
        seq = normalize_sequence(sequence)

        if self._validator is not None:
            return self._validator.check(seq)

        if self.config.max_length is not None and len(seq) > self.config.max_length:
            raise SequenceError(
                f"Sequence too long: {len(seq)} > {self.config.max_length}"
            )
        return seq

    def _cleaves(self, window: Optional[str]) -> bool:
        return window is not None and self._specificity.evaluate(window)

    def _cached(self, operation: str, seq: str, compute):
        if self._cache is None:
            return compute()
        return self._cache.get_or_compute(operation, seq, compute)
