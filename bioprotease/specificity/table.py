"""
Built-in enzyme and chemical reagent specificities.

Each entry maps a lowercase name to a list of regular expressions written for
8-residue windows (P4..P4', bond between the 4th and 5th symbol). A window is
cleavable when every expression in the list is found in it. Alternatives
inside one expression are joined with ``|``; exceptions to a rule are
expressed as additional negative-lookahead expressions (see trypsin).

The definitions follow ExPASy PeptideCutter. Sentinel symbols (``X``) fill
the window beyond the sequence ends, so a character class such as ``[^P]``
also accepts a sentinel.

This table is read-only: specificities copy the patterns they need.
"""

from __future__ import annotations

from types import MappingProxyType

_SPECIFICITY_TABLE = {
    "arg-c_proteinase": [r".{3}R.{4}"],
    "asp-n_endopeptidase": [r".{4}D.{3}"],
    "asp-n_endopeptidase_glu": [r".{4}[DE].{3}"],
    "bnps_skatole": [r".{3}W.{4}"],
    "caspase_1": [r"[FWYL].[HAT]D[^PEDQKR].{3}"],
    "caspase_2": [r"DVAD[^PEDQKR].{3}"],
    "caspase_3": [r"DMQD[^PEDQKR].{3}"],
    "caspase_4": [r"LEVD[^PEDQKR].{3}"],
    "caspase_5": [r"[LW]EHD.{4}"],
    "caspase_6": [r"VE[HI]D[^PEDQKR].{3}"],
    "caspase_7": [r"DEVD[^PEDQKR].{3}"],
    "caspase_8": [r"[IL]ETD[^PEDQKR].{3}"],
    "caspase_9": [r"LEHD.{4}"],
    "caspase_10": [r"IEAD.{4}"],
    "chymotrypsin": [r".{3}[FY][^P].{3}|.{3}W[^MP].{3}"],
    "chymotrypsin_low": [
        r".{3}[FLY][^P].{3}|.{3}W[^MP].{3}|.{3}M[^PY].{3}|.{3}H[^DMPW].{3}"
    ],
    "clostripain": [r".{3}R.{4}"],
    "cnbr": [r".{3}M.{4}"],
    "enterokinase": [r"[DN][DN][DN]K.{4}"],
    "factor_xa": [r"[AFGILTVM][DE]GR.{4}"],
    "formic_acid": [r".{3}D.{4}"],
    "glutamyl_endopeptidase": [r".{3}E.{4}"],
    "granzymeb": [r"IEPD.{4}"],
    "hydroxylamine": [r".{3}NG.{3}"],
    "hcl": [r".{8}"],
    "iodosobenzoic_acid": [r".{3}W.{4}"],
    "lysc": [r".{3}K.{4}"],
    "lysn": [r".{4}K.{3}"],
    "ntcb": [r".{4}C.{3}"],
    "pepsin_ph1.3": [
        r".[^HKR][^P][^R][FLWY][^P].{2}|.[^HKR][^P][FLWY].[^P].{2}"
    ],
    "pepsin": [r".[^HKR][^P][^R][FL][^P].{2}|.[^HKR][^P][FL].[^P].{2}"],
    "proline_endopeptidase": [r".{2}[HKR]P[^P].{3}"],
    "proteinase_k": [r".{3}[AFILTVWY].{4}"],
    "staphylococcal_peptidase_i": [r".{2}[^E]E.{4}"],
    "thermolysin": [r".{3}[^XDE][AFILMV][^P].{2}"],
    "thrombin": [r".{2}GRG.{3}|[AFGILTVM][AFGILTVWA]PR[^DE][^DE].{2}"],
    "trypsin": [
        r".{2}(?!CKD).{6}",
        r".{2}(?!DKD).{6}",
        r".{2}(?!CKH).{6}",
        r".{2}(?!CKY).{6}",
        r".{2}(?!RRH).{6}",
        r".{2}(?!RRR).{6}",
        r".{2}(?!CRK).{6}",
        r".{3}[KR][^P].{3}|.{2}WKP.{3}|.{2}MRP.{3}",
    ],
}

SPECIFICITY_TABLE = MappingProxyType(
    {name: tuple(patterns) for name, patterns in _SPECIFICITY_TABLE.items()}
)


def canonical_name(name: str) -> str:
    """
    Normalize a specificity name for table lookup.

    Names are case-insensitive and spaces are interchangeable with
    underscores, so ``"Asp-N endopeptidase"`` finds ``"asp-n_endopeptidase"``.
    """
    return "_".join(name.lower().split())


def lookup_patterns(name: str) -> tuple[str, ...] | None:
    """Patterns for a built-in specificity, or None if unknown."""
    return SPECIFICITY_TABLE.get(canonical_name(name))
