"""
Sequence handling utilities for bioprotease.

This module provides the tools for getting protein sequences into the
digestion engine: normalization of the different input types (plain strings,
Biopython ``Seq``/``SeqRecord`` objects and ``ProteinRecord`` models),
validation against the amino acid alphabet, and FASTA parsing/writing.

The engine itself is lenient: any string is accepted and simply uppercased.
Strict validation is opt-in through ``SequenceValidator`` (or the
``validate_sequences`` switch of ``ProteaseConfig``).
"""

from __future__ import annotations

import hashlib
from io import StringIO
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from .models import Fragment, ProteinRecord


# Standard amino acid alphabet
STANDARD_AA = set("ACDEFGHIKLMNPQRSTVWY")

# Extended alphabet including ambiguous and non-standard codes
AMBIGUOUS_AA = set("BXZJUO")
EXTENDED_AA = STANDARD_AA | AMBIGUOUS_AA

SequenceLike = Union[str, Seq, SeqRecord, ProteinRecord]


class SequenceError(ValueError):
    """Exception raised for sequence-related errors."""
    pass


class SequenceValidator:
    """
    Validates protein sequences before digestion.

    Digestion itself never fails on unusual characters (they simply do not
    match any pattern), but for batch work it is usually better to reject
    malformed input up front than to report meaningless fragments.
    """

    MIN_LENGTH = 1
    MAX_LENGTH = 100000

    def __init__(
        self,
        allow_ambiguous: bool = True,
        min_length: int = MIN_LENGTH,
        max_length: Optional[int] = MAX_LENGTH,
    ):
        """
        Initialize validator with specific constraints.

        Args:
            allow_ambiguous: Allow ambiguous amino acid codes (B, X, Z, J, O, U)
            min_length: Minimum sequence length
            max_length: Maximum sequence length (None disables the cap)
        """
        self.allow_ambiguous = allow_ambiguous
        self.min_length = min_length
        self.max_length = max_length

        self.allowed_chars = set(STANDARD_AA)
        if allow_ambiguous:
            self.allowed_chars |= AMBIGUOUS_AA

    def validate(self, sequence: str) -> tuple[bool, list[str]]:
        """
        Validate a sequence and return status with error messages.

        Args:
            sequence: Protein sequence to validate

        Returns:
            Tuple of (is_valid, list_of_error_messages)
        """
        errors = []
        seq = clean_sequence(sequence)

        if len(seq) < self.min_length:
            errors.append(f"Sequence too short: {len(seq)} < {self.min_length}")

        if self.max_length is not None and len(seq) > self.max_length:
            errors.append(f"Sequence too long: {len(seq)} > {self.max_length}")

        invalid_chars = set(seq) - self.allowed_chars
        if invalid_chars:
            errors.append(f"Invalid characters: {sorted(invalid_chars)}")

        return len(errors) == 0, errors

    def check(self, sequence: str) -> str:
        """Return the cleaned sequence or raise ``SequenceError``."""
        is_valid, errors = self.validate(sequence)
        if not is_valid:
            raise SequenceError("; ".join(errors))
        return clean_sequence(sequence)


def clean_sequence(sequence: str) -> str:
    """Uppercase a sequence and drop whitespace."""
    return "".join(sequence.split()).upper()


def normalize_sequence(sequence: SequenceLike) -> str:
    """
    Convert any supported sequence object to an uppercase string.

    Only the case is changed: a string is otherwise passed through untouched,
    so the fragments produced from it concatenate back to the input.

    Raises:
        TypeError: If the object is not a supported sequence type
    """
    if isinstance(sequence, str):
        return sequence.upper()
    if isinstance(sequence, ProteinRecord):
        return sequence.sequence
    if isinstance(sequence, SeqRecord):
        return str(sequence.seq).upper()
    if isinstance(sequence, Seq):
        return str(sequence).upper()
    raise TypeError(
        f"Unsupported sequence type: {type(sequence).__name__}"
    )


def parse_fasta(
    source: Union[str, Path, StringIO],
    validate: bool = True,
    validator: Optional[SequenceValidator] = None,
) -> Iterator[ProteinRecord]:
    """
    Parse protein sequences from FASTA format.

    Args:
        source: File path, FASTA string, or StringIO object
        validate: Whether to validate sequences
        validator: Custom validator (uses default if None)

    Yields:
        ProteinRecord objects for each sequence

    Raises:
        SequenceError: If validation fails and validate=True
    """
    if validator is None:
        validator = SequenceValidator(allow_ambiguous=True)

    close_handle = False
    if isinstance(source, str) and (source.startswith(">") or "\n>" in source):
        handle = StringIO(source)
    elif isinstance(source, (str, Path)):
        handle = open(source, "r")
        close_handle = True
    else:
        handle = source

    try:
        for record in SeqIO.parse(handle, "fasta"):
            seq_str = str(record.seq)

            if validate:
                is_valid, errors = validator.validate(seq_str)
                if not is_valid:
                    raise SequenceError(
                        f"Sequence '{record.id}' failed validation: {'; '.join(errors)}"
                    )

            description = record.description
            if description.startswith(record.id):
                description = description[len(record.id):].strip()

            yield ProteinRecord(
                id=record.id,
                description=description or None,
                sequence=seq_str,
            )
    finally:
        if close_handle:
            handle.close()


def sequence_hash(sequence: str) -> str:
    """
    Generate a stable hash for a sequence.

    Used for persistent cache keys. Uses MD5 for speed (not cryptographic
    security).
    """
    return hashlib.md5(sequence.upper().encode()).hexdigest()


def to_fasta(
    records: Iterable[Union[ProteinRecord, Fragment]],
    line_length: int = 60,
    parent_id: Optional[str] = None,
) -> str:
    """
    Convert protein records or digestion fragments to a FASTA string.

    Fragments are named ``<parent_id>_<index>`` and annotated with their
    1-based residue range in the parent sequence.

    Args:
        records: ProteinRecord or Fragment objects
        line_length: Characters per line for sequence
        parent_id: Identifier prefix for fragments

    Returns:
        FASTA-formatted string
    """
    lines = []
    for record in records:
        if isinstance(record, Fragment):
            header = (
                f">{parent_id or 'fragment'}_{record.index} "
                f"{record.start + 1}-{record.end}"
            )
        else:
            header = f">{record.id}"
            if record.description:
                header += f" {record.description}"
        lines.append(header)

        seq = record.sequence
        for i in range(0, len(seq), line_length):
            lines.append(seq[i:i + line_length])

    return "\n".join(lines)
