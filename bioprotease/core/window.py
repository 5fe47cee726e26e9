"""
Sliding-window construction around peptide bonds.

Every bond is judged from an 8-residue context, P4 P3 P2 P1 | P1' P2' P3' P4',
with the scissile bond between the 4th and 5th symbols:

    .----.----.----.----. .-----.-----.-----.-----.
    | P4 | P3 | P2 | P1 |*| P1' | P2' | P3' | P4' |
    '----'----'----'----'^'-----'-----'-----'-----'
                         cleavage site

Bonds close to the N-terminus do not have four residues on their left, so the
sequence is padded on that side with ``PAD_LENGTH`` sentinel symbols. With a
padding of three, the window of bond ``p`` (1-based) starts at offset
``p - 1`` of the padded sequence and its 4th symbol is residue ``p``.

The C-terminal side is never padded in the sequence itself. Windows simply
get shorter towards the end; a window that still reaches past P1' is
completed with sentinels to 8 symbols, anything shorter is not analyzable
and the bond is treated as non-cleavable.

All functions here are pure and return new strings.
"""

from __future__ import annotations

from typing import Iterator, Optional

SENTINEL = "X"
PAD_LENGTH = 3
WINDOW_SIZE = 8

# P4..P1 plus P1'; a shorter window has no residue after the bond
MIN_WINDOW = 5


def pad_sequence(sequence: str, pad_length: int = PAD_LENGTH) -> str:
    """Prepend sentinel symbols to the N-terminal end of a sequence."""
    return SENTINEL * pad_length + sequence


def window_start(position: int, pad_length: int = PAD_LENGTH) -> int:
    """
    Map a 1-based bond position to the start of its window.

    The returned offset indexes the padded sequence.
    """
    return position - 1 + pad_length - 3


def window_position(start: int, pad_length: int = PAD_LENGTH) -> int:
    """Inverse of ``window_start``: bond position for a window offset."""
    return start + 1 - pad_length + 3


def extract_window(padded: str, start: int) -> str:
    """Raw (possibly truncated) window starting at ``start``."""
    return padded[start:start + WINDOW_SIZE]


def complete_window(raw: str) -> Optional[str]:
    """
    Bring a raw window to exactly ``WINDOW_SIZE`` symbols.

    Returns:
        The window right-padded with sentinels, or None when it is too short
        to carry a bond
    """
    if len(raw) < MIN_WINDOW:
        return None
    if len(raw) < WINDOW_SIZE:
        return raw + SENTINEL * (WINDOW_SIZE - len(raw))
    return raw


def window_at(sequence: str, position: int) -> Optional[str]:
    """
    Window centred on bond ``position`` of an unpadded sequence.

    Positions outside ``1..len(sequence)`` yield None, as do trailing bonds
    without a full P1' residue.
    """
    if position < 1 or position > len(sequence):
        return None

    # Offset of P4 in the unpadded sequence; negative near the N-terminus
    offset = window_start(position) - PAD_LENGTH
    left = SENTINEL * max(0, -offset)
    raw = left + sequence[max(0, offset):offset + WINDOW_SIZE]
    return complete_window(raw)


def iter_windows(sequence: str) -> Iterator[tuple[int, Optional[str]]]:
    """
    Yield ``(position, window)`` for every bond of a sequence.

    The window is None for bonds that cannot be analyzed. Each bond is
    visited once, in ascending order.
    """
    padded = pad_sequence(sequence)
    for position in range(1, len(sequence) + 1):
        yield position, complete_window(extract_window(padded, window_start(position)))


def split_at(sequence: str, position: int) -> tuple[str, str]:
    """Split an unpadded sequence after residue ``position``."""
    return sequence[:position], sequence[position:]
