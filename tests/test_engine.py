"""
Unit tests for the digestion engine.

Covers the four operations (cut, digest, cleavage_sites, is_substrate),
their agreement with each other, position handling, input normalization
and the record-level API built on top of them.
"""

import warnings

import numpy as np
import pytest
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

import bioprotease
from bioprotease import (
    InvalidPosition,
    InvalidPositionWarning,
    Protease,
    ProteaseConfig,
    ProteaseError,
    ProteinRecord,
    SequenceError,
    UnknownSpecificity,
)


# =============================================================================
# Test sequences
# =============================================================================

SUBSTRATE = "AARAGQTVRFSDAAA"
SHORT_TRYPTIC = "MRAERVIKP"

# Human ubiquitin
UBIQUITIN = (
    "MQIFVKTLTGKTITLEVEPSDTIENVKAKIQDKEGIPPDQQRLIFAGKQLEDGRTLSDYNIQKESTLHLVLRLRGG"
)

PROPERTY_SEQUENCES = ["", "K", "KK", "MAMAM", SHORT_TRYPTIC, SUBSTRATE, UBIQUITIN]
PROPERTY_RULES = [
    "trypsin",
    "lysc",
    "cnbr",
    "chymotrypsin",
    "hcl",
    [r".{3}[DE].{4}"],
    lambda w: w[3] in "AG",
]


def uncached(rule, **kwargs):
    return Protease(rule, config=ProteaseConfig(use_cache=False, **kwargs))


@pytest.fixture
def trypsin():
    return Protease("trypsin")


class TestCut:
    """Tests for single-bond cleavage."""

    def test_cleavable_bond(self, trypsin):
        assert trypsin.cut(SUBSTRATE, 3) == ("AAR", "AGQTVRFSDAAA")
        assert trypsin.cut(SUBSTRATE, 9) == ("AARAGQTVR", "FSDAAA")

    def test_non_cleavable_bond(self, trypsin):
        assert trypsin.cut(SUBSTRATE, 4) is None
        assert trypsin.cut(SUBSTRATE, 1) is None

    def test_last_bond_never_cleavable(self):
        hcl = Protease("hcl")
        assert hcl.cut(SUBSTRATE, len(SUBSTRATE)) is None
        assert hcl.cut(SUBSTRATE, len(SUBSTRATE) - 1) == (SUBSTRATE[:-1], SUBSTRATE[-1])

    def test_invalid_position_warns(self):
        protease = Protease([r"AGGAL[^P]"])
        with pytest.warns(InvalidPositionWarning, match="Incorrect position -1"):
            assert protease.cut("AGGALH", -1) is None

    @pytest.mark.parametrize("position", [0, 7, 100])
    def test_out_of_range_positions(self, trypsin, position):
        with pytest.warns(InvalidPositionWarning):
            assert trypsin.cut("AGGALH", position) is None

    @pytest.mark.parametrize("position", ["3", 3.0, True, None])
    def test_non_integer_positions(self, trypsin, position):
        with pytest.warns(InvalidPositionWarning):
            assert trypsin.cut(SUBSTRATE, position) is None

    def test_numpy_integer_position(self, trypsin):
        assert trypsin.cut(SUBSTRATE, np.int64(3)) == ("AAR", "AGQTVRFSDAAA")

    def test_strict_mode_raises(self):
        protease = uncached("trypsin", strict_positions=True)
        with pytest.raises(InvalidPosition):
            protease.cut("AGGALH", 0)

    def test_invalid_position_hierarchy(self):
        protease = uncached("trypsin", strict_positions=True)
        with pytest.raises(IndexError):
            protease.cut("AGGALH", 7)
        with pytest.raises(ProteaseError):
            protease.cut("AGGALH", -1)

    def test_strict_mode_valid_position(self):
        protease = uncached("trypsin", strict_positions=True)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert protease.cut(SHORT_TRYPTIC, 2) == ("MR", "AERVIKP")


class TestDigest:
    """Tests for complete digestion."""

    def test_trypsin(self, trypsin):
        assert trypsin.digest(SUBSTRATE) == ["AAR", "AGQTVR", "FSDAAA"]
        assert trypsin.digest(SHORT_TRYPTIC) == ["MR", "AER", "VIKP"]

    def test_predicate_exact_window(self):
        protease = Protease(lambda w: w == "MAELVIKP")
        assert protease.digest("AAAAMAELVIKPYYYYYYY") == ["AAAAMAEL", "VIKPYYYYYYY"]

    def test_no_sites_returns_whole_sequence(self, trypsin):
        assert trypsin.digest("TESTKPTEST") == ["TESTKPTEST"]

    def test_empty_sequence(self, trypsin):
        assert trypsin.digest("") == [""]

    def test_single_residue(self, trypsin):
        assert trypsin.digest("K") == ["K"]

    def test_lysc(self):
        assert Protease("lysc").digest("AKAKA") == ["AK", "AK", "A"]

    def test_cnbr_at_n_terminus(self):
        """Bond 1 is reachable thanks to the N-terminal sentinels."""
        assert Protease("cnbr").digest("MAMAM") == ["M", "AM", "AM"]

    def test_trypsin_proline_exception(self, trypsin):
        assert trypsin.digest("AWKPAA") == ["AWK", "PAA"]

    def test_trypsin_blocked_context(self, trypsin):
        assert trypsin.digest("AACKDAA") == ["AACKDAA"]
        assert trypsin.digest("AACKEAA") == ["AACK", "EAA"]

    def test_lowercase_input(self, trypsin):
        assert trypsin.digest("mraervikp") == ["MR", "AER", "VIKP"]

    def test_x_residues_preserved(self, trypsin):
        """Real X residues are never mistaken for padding."""
        assert trypsin.digest("XXKAXX") == ["XXK", "AXX"]

    def test_every_bond_cleaved(self):
        assert Protease(lambda w: True).digest("AAAAAA") == ["A"] * 6

    def test_returns_fresh_lists(self, trypsin):
        first = trypsin.digest(SUBSTRATE)
        first.append("ZZZ")
        assert trypsin.digest(SUBSTRATE) == ["AAR", "AGQTVR", "FSDAAA"]


class TestCleavageSites:
    """Tests for scissile bond listing."""

    def test_trypsin(self, trypsin):
        assert trypsin.cleavage_sites(SUBSTRATE) == [3, 9]
        assert trypsin.cleavage_sites(SHORT_TRYPTIC) == [2, 5]

    def test_searched_pattern(self):
        protease = Protease([r"AGGAL[^P]"])
        assert protease.cleavage_sites("AGGALH") == [2, 3, 4]
        assert protease.cleavage_sites("AGGALP") == []

    def test_empty_sequence(self, trypsin):
        assert trypsin.cleavage_sites("") == []

    def test_each_bond_evaluated_once(self):
        windows = []

        def record(window):
            windows.append(window)
            return False

        uncached(record).cleavage_sites("AAAAAA")
        # Bonds 1..5 carry a window; the last bond has no P1'
        assert len(windows) == 5
        assert all(len(w) == 8 for w in windows)

    def test_cleavage_mask(self, trypsin):
        mask = trypsin.cleavage_mask(SHORT_TRYPTIC)
        assert mask.dtype == bool
        assert mask.tolist() == [False, True, False, False, True, False, False, False, False]

    def test_cleavage_mask_empty(self, trypsin):
        assert trypsin.cleavage_mask("").size == 0


class TestIsSubstrate:
    """Tests for the substrate check."""

    def test_searched_pattern(self):
        protease = Protease([r"AGGAL[^P]"])
        assert protease.is_substrate("AGGALH") is True
        assert protease.is_substrate("AGGALP") is False

    def test_empty_sequence(self, trypsin):
        assert trypsin.is_substrate("") is False

    def test_stops_at_first_site(self):
        windows = []

        def record(window):
            windows.append(window)
            return True

        assert uncached(record).is_substrate("AAAAAA")
        assert len(windows) == 1


class TestOperationAgreement:
    """The three scans and cut agree for every sequence and rule."""

    @pytest.mark.parametrize("rule", PROPERTY_RULES)
    @pytest.mark.parametrize("sequence", PROPERTY_SEQUENCES)
    def test_agreement(self, rule, sequence):
        protease = uncached(rule)
        fragments = protease.digest(sequence)
        sites = protease.cleavage_sites(sequence)

        # Fragments reassemble the input
        assert "".join(fragments) == sequence
        # One more fragment than sites
        assert len(fragments) == len(sites) + 1
        # Sites are exactly the bonds cut accepts
        cuttable = [
            i for i in range(1, len(sequence) + 1)
            if protease.cut(sequence, i) is not None
        ]
        assert sites == cuttable
        assert all(1 <= s < max(len(sequence), 1) for s in sites)
        assert protease.is_substrate(sequence) == bool(sites)

        # Fragment boundaries are the site positions
        boundaries = np.cumsum([len(f) for f in fragments])[:-1].tolist()
        assert boundaries == sites

    def test_hcl_cuts_all_but_last_bond(self):
        protease = uncached("hcl")
        assert protease.cleavage_sites(UBIQUITIN) == list(range(1, len(UBIQUITIN)))


class TestInputHandling:
    """Tests for sequence types, validation and configuration."""

    def test_seq_object(self, trypsin):
        assert trypsin.digest(Seq(SHORT_TRYPTIC)) == ["MR", "AER", "VIKP"]

    def test_seqrecord(self, trypsin):
        record = SeqRecord(Seq(SHORT_TRYPTIC), id="test")
        assert trypsin.cleavage_sites(record) == [2, 5]

    def test_protein_record(self, trypsin):
        record = ProteinRecord(id="test", sequence=SHORT_TRYPTIC.lower())
        assert trypsin.digest(record) == ["MR", "AER", "VIKP"]

    def test_unsupported_type(self, trypsin):
        with pytest.raises(TypeError):
            trypsin.digest(12345)

    def test_validation(self):
        protease = uncached("trypsin", validate_sequences=True)
        with pytest.raises(SequenceError, match="Invalid characters"):
            protease.digest("MRA1ERV")

    def test_max_length(self):
        protease = uncached("trypsin", max_length=5)
        assert protease.digest("MRAER") == ["MR", "AER"]
        with pytest.raises(SequenceError, match="too long"):
            protease.digest(SHORT_TRYPTIC)

    def test_unknown_enzyme(self):
        with pytest.raises(UnknownSpecificity):
            Protease("no_such_enzyme")

    def test_config_validation(self):
        with pytest.raises(ValueError, match="Unknown cache backend"):
            ProteaseConfig(cache_backend="redis")
        with pytest.raises(ValueError):
            ProteaseConfig(cache_size=0)
        with pytest.raises(ValueError):
            ProteaseConfig(max_length=0)


class TestEngineInfo:
    """Tests for engine metadata."""

    def test_specificities(self):
        names = Protease.specificities()
        assert "trypsin" in names
        assert len(names) >= 37

    def test_name_and_repr(self, trypsin):
        assert trypsin.name == "trypsin"
        assert "trypsin" in repr(trypsin)

    def test_get_info(self, trypsin):
        info = trypsin.get_info()
        assert info["kind"] == "named"
        assert info["cache"] == "MemoryResultCache"
        assert info["strict_positions"] is False

    def test_uncached_info(self):
        assert uncached("lysc").get_info()["cache"] is None


class TestDigestRecord:
    """Tests for the record-level API."""

    @pytest.fixture
    def result(self, trypsin):
        record = ProteinRecord(id="P1", sequence=SHORT_TRYPTIC)
        return trypsin.digest_record(record)

    def test_identity(self, result):
        assert result.sequence_id == "P1"
        assert result.sequence == SHORT_TRYPTIC
        assert result.specificity == "trypsin"

    def test_sites(self, result):
        assert result.positions == [2, 5]
        site = result.sites[0]
        assert site.window == "XXMRAERV"
        assert site.p1 == "R"
        assert site.p1_prime == "A"
        assert str(site) == "XXMR|AERV"
        assert result.is_substrate

    def test_fragments(self, result):
        assert [f.sequence for f in result.fragments] == ["MR", "AER", "VIKP"]
        assert [(f.start, f.end) for f in result.fragments] == [(0, 2), (2, 5), (5, 9)]
        assert [f.index for f in result.fragments] == [1, 2, 3]
        for fragment in result.fragments:
            assert SHORT_TRYPTIC[fragment.start:fragment.end] == fragment.sequence

    def test_length_statistics(self, result):
        stats = result.length_statistics()
        assert stats["count"] == 3
        assert stats["min"] == 2.0
        assert stats["max"] == 4.0
        assert stats["mean"] == pytest.approx(3.0)
        assert stats["median"] == pytest.approx(3.0)

    def test_seqrecord_id(self, trypsin):
        record = SeqRecord(Seq(SHORT_TRYPTIC), id="sp|P0|TEST")
        assert trypsin.digest_record(record).sequence_id == "sp|P0|TEST"

    def test_plain_string(self, trypsin):
        result = trypsin.digest_record(SUBSTRATE, sequence_id="substrate")
        assert result.sequence_id == "substrate"
        assert result.n_fragments == 3

    def test_empty_sequence(self, trypsin):
        result = trypsin.digest_record("")
        assert result.sequence_id == "sequence"
        assert result.fragments == []
        assert result.sites == []
        assert not result.is_substrate

    def test_digest_many(self, trypsin):
        records = [
            ProteinRecord(id="a", sequence=SHORT_TRYPTIC),
            ProteinRecord(id="b", sequence="TESTKPTEST"),
        ]
        results = trypsin.digest_many(records)
        assert [r.sequence_id for r in results] == ["a", "b"]
        assert [r.n_fragments for r in results] == [3, 1]


class TestConvenienceFunction:

    def test_digest(self):
        assert bioprotease.digest(SUBSTRATE) == ["AAR", "AGQTVR", "FSDAAA"]

    def test_digest_with_rule(self):
        assert bioprotease.digest("AKAKA", "lysc") == ["AK", "AK", "A"]
