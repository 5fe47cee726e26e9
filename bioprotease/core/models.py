"""
Core data models for bioprotease.

The digestion engine works on plain strings and returns plain Python values
(lists of fragments, lists of bond positions). The models here wrap those
values for record-level work: reporting, export and the command line.
All models use Pydantic for validation and serialization.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from pydantic import BaseModel, Field, field_validator


class ProteinRecord(BaseModel):
    """
    Protein sequence with an identifier.

    This is the primary input object for record-level digestion.
    """

    id: str = Field(..., description="Unique identifier (e.g., UniProt accession)")
    description: Optional[str] = Field(None, description="Free-text header description")
    sequence: str = Field(..., min_length=1)

    @property
    def sequence_length(self) -> int:
        """Length of the protein sequence."""
        return len(self.sequence)

    @field_validator("sequence")
    @classmethod
    def validate_sequence(cls, v: str) -> str:
        """Uppercase, drop whitespace and reject non-letter symbols."""
        v = "".join(v.split()).upper()
        invalid = {c for c in v if not ("A" <= c <= "Z")}

        if invalid:
            raise ValueError(f"Invalid amino acid characters: {sorted(invalid)}")
        if not v:
            raise ValueError("Sequence is empty")

        return v


class Fragment(BaseModel):
    """
    A digestion product located in its parent sequence.

    Coordinates follow Python slicing: ``start`` is the 0-based offset of the
    first residue and ``end`` is exclusive, so ``parent[start:end]`` is the
    fragment.
    """

    index: int = Field(..., ge=1, description="1-based order of the fragment")
    start: int = Field(..., ge=0, description="0-indexed start position (inclusive)")
    end: int = Field(..., ge=1, description="0-indexed end position (exclusive)")
    sequence: str = Field(..., min_length=1)

    @field_validator("end")
    @classmethod
    def end_after_start(cls, v: int, info) -> int:
        if "start" in info.data and v <= info.data["start"]:
            raise ValueError("end must be greater than start")
        return v

    @property
    def length(self) -> int:
        """Length of the fragment in residues."""
        return self.end - self.start


class CleavageSite(BaseModel):
    """A cleavable bond and the window that was matched for it."""

    position: int = Field(..., ge=1, description="1-based residue N-terminal to the bond")
    window: str = Field(..., min_length=8, max_length=8, description="P4..P4' context")

    @property
    def p1(self) -> str:
        """Residue on the N-terminal side of the scissile bond."""
        return self.window[3]

    @property
    def p1_prime(self) -> str:
        """Residue on the C-terminal side of the scissile bond."""
        return self.window[4]

    def __str__(self) -> str:
        return f"{self.window[:4]}|{self.window[4:]}"


class DigestionResult(BaseModel):
    """
    Complete digestion of one protein by one protease.

    For a non-empty sequence ``sites`` and ``fragments`` satisfy
    ``len(fragments) == len(sites) + 1``; an empty sequence has neither.
    """

    sequence_id: str
    sequence: str
    specificity: str = Field(..., description="Name of the specificity rule")
    sites: list[CleavageSite] = Field(default_factory=list)
    fragments: list[Fragment] = Field(default_factory=list)

    @property
    def positions(self) -> list[int]:
        """Bond positions of all cleavage sites."""
        return [site.position for site in self.sites]

    @property
    def n_fragments(self) -> int:
        return len(self.fragments)

    @property
    def is_substrate(self) -> bool:
        """Whether at least one bond was cleaved."""
        return len(self.sites) > 0

    def fragment_lengths(self) -> np.ndarray:
        """Fragment lengths as an integer array, in sequence order."""
        return np.array([f.length for f in self.fragments], dtype=int)

    def length_statistics(self) -> dict[str, float]:
        """
        Summary statistics of fragment lengths.

        Returns:
            Dictionary with count, min, max, mean and median length
        """
        lengths = self.fragment_lengths()
        if lengths.size == 0:
            return {"count": 0, "min": 0.0, "max": 0.0, "mean": 0.0, "median": 0.0}

        return {
            "count": int(lengths.size),
            "min": float(lengths.min()),
            "max": float(lengths.max()),
            "mean": float(lengths.mean()),
            "median": float(np.median(lengths)),
        }

    def fragments_in_range(self, min_length: int = 1, max_length: Optional[int] = None) -> list[Fragment]:
        """Fragments whose length lies within ``[min_length, max_length]``."""
        return [
            f for f in self.fragments
            if f.length >= min_length and (max_length is None or f.length <= max_length)
        ]
