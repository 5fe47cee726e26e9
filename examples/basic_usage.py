#!/usr/bin/env python3
"""
bioprotease Example: Digesting Proteins In Silico

This script walks through the main ways of describing a protease
specificity and the questions the engine can answer about a substrate.

Run with: python examples/basic_usage.py
"""

import warnings

from bioprotease import (
    InvalidPositionWarning,
    Protease,
    ProteaseConfig,
    ProteinRecord,
    to_fasta,
)


# Human ubiquitin
UBIQUITIN = ProteinRecord(
    id="sp|P0CG48|UBC_HUMAN",
    description="Ubiquitin",
    sequence=(
        "MQIFVKTLTGKTITLEVEPSDTIENVKAKIQDKEGIPPDQQRLIFAGKQLEDGRTLSDYNIQKESTLHLVLRLRGG"
    ),
)


def print_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def named_enzymes():
    """
    Digest ubiquitin with a few built-in specificities.

    Trypsin cleaves after K/R unless followed by P, Lys-C after any K and
    cyanogen bromide after M. The number of fragments differs accordingly.
    """
    print_header("Built-in specificities")

    for name in ("trypsin", "lysc", "cnbr", "chymotrypsin"):
        protease = Protease(name)
        result = protease.digest_record(UBIQUITIN)
        stats = result.length_statistics()

        print(f"\n{name}:")
        print(f"  Sites: {result.positions}")
        print(f"  Fragments: {stats['count']} (mean length {stats['mean']:.1f})")


def single_bonds():
    """Probe individual bonds with cut()."""
    print_header("Single bonds")

    trypsin = Protease("trypsin")
    substrate = "AARAGQTVRFSDAAA"

    for position in (3, 4, 9):
        products = trypsin.cut(substrate, position)
        verdict = " + ".join(products) if products else "not cleaved"
        print(f"  bond {position}: {verdict}")

    # Out-of-range positions warn and return None unless strict_positions is set
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", InvalidPositionWarning)
        trypsin.cut(substrate, 99)
    print(f"  bond 99: {caught[0].message}")


def custom_rules():
    """
    Custom specificities: positional regular expressions and predicates.

    Patterns are searched in the 8-residue window; several patterns must
    all match. Predicates receive the window and may implement anything.
    """
    print_header("Custom rules")

    motif = Protease([r"AGGAL[^P]"])
    for sequence in ("AGGALH", "AGGALP"):
        print(f"  {sequence}: substrate={motif.is_substrate(sequence)}")

    exact = Protease(lambda window: window == "MAELVIKP")
    print(f"  exact window: {exact.digest('AAAAMAELVIKPYYYYYYY')}")

    def after_hydrophobic(window):
        """Cleave after a large hydrophobic residue not followed by proline."""
        return window[3] in "FLIVW" and window[4] != "P"

    custom = Protease(after_hydrophobic, config=ProteaseConfig(use_cache=False))
    print(f"  {custom.name}: {custom.cleavage_sites(UBIQUITIN)}")


def export_fragments():
    """Write tryptic fragments of ubiquitin in FASTA format."""
    print_header("FASTA export")

    result = Protease("trypsin").digest_record(UBIQUITIN)
    peptides = result.fragments_in_range(min_length=6, max_length=30)
    print(to_fasta(peptides, parent_id="UBC"))


def main():
    """Run all examples."""
    print("\n" + "=" * 70)
    print("  bioprotease Example: Digesting Proteins In Silico")
    print("=" * 70)

    print(f"\n{len(Protease.specificities())} built-in specificities available")

    named_enzymes()
    single_bonds()
    custom_rules()
    export_fragments()

    print("\n" + "=" * 70)
    print("  Example complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
