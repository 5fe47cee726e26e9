"""
Unit tests for bioprotease data models.

These tests validate the record-level structures used for reporting and
export, ensuring proper validation, serialization and consistency of the
derived properties.
"""

import json

import numpy as np
import pytest

from bioprotease.core.models import (
    CleavageSite,
    DigestionResult,
    Fragment,
    ProteinRecord,
)


class TestProteinRecord:
    """Tests for the ProteinRecord input model."""

    def test_creation(self):
        record = ProteinRecord(id="P1", sequence="MRAERVIKP")
        assert record.id == "P1"
        assert record.description is None
        assert record.sequence_length == 9

    def test_sequence_cleaned(self):
        """Lowercase and whitespace are normalized on input."""
        record = ProteinRecord(id="P1", sequence="mrae rv\nikp")
        assert record.sequence == "MRAERVIKP"

    def test_invalid_characters(self):
        with pytest.raises(ValueError, match="Invalid amino acid characters"):
            ProteinRecord(id="P1", sequence="MRA3R")

    def test_empty_sequence(self):
        with pytest.raises(ValueError):
            ProteinRecord(id="P1", sequence="")
        with pytest.raises(ValueError):
            ProteinRecord(id="P1", sequence="   ")


class TestFragment:
    """Tests for located digestion products."""

    def test_creation(self):
        fragment = Fragment(index=2, start=2, end=5, sequence="AER")
        assert fragment.length == 3

    def test_end_must_exceed_start(self):
        with pytest.raises(ValueError, match="end must be greater than start"):
            Fragment(index=1, start=5, end=5, sequence="A")

    def test_index_is_one_based(self):
        with pytest.raises(ValueError):
            Fragment(index=0, start=0, end=1, sequence="A")


class TestCleavageSite:
    """Tests for scissile bond records."""

    def test_window_residues(self):
        site = CleavageSite(position=3, window="XAARAGQT")
        assert site.p1 == "R"
        assert site.p1_prime == "A"
        assert str(site) == "XAAR|AGQT"

    def test_window_length_enforced(self):
        with pytest.raises(ValueError):
            CleavageSite(position=3, window="XAARAG")

    def test_position_is_one_based(self):
        with pytest.raises(ValueError):
            CleavageSite(position=0, window="XXXMRAER")


class TestDigestionResult:
    """Tests for the aggregate digestion result."""

    @pytest.fixture
    def result(self):
        return DigestionResult(
            sequence_id="P1",
            sequence="AARAGQTVRFSDAAA",
            specificity="trypsin",
            sites=[
                CleavageSite(position=3, window="XAARAGQT"),
                CleavageSite(position=9, window="QTVRFSDA"),
            ],
            fragments=[
                Fragment(index=1, start=0, end=3, sequence="AAR"),
                Fragment(index=2, start=3, end=9, sequence="AGQTVR"),
                Fragment(index=3, start=9, end=15, sequence="FSDAAA"),
            ],
        )

    def test_properties(self, result):
        assert result.positions == [3, 9]
        assert result.n_fragments == 3
        assert result.is_substrate

    def test_fragment_lengths(self, result):
        lengths = result.fragment_lengths()
        assert isinstance(lengths, np.ndarray)
        assert lengths.tolist() == [3, 6, 6]
        assert lengths.sum() == len(result.sequence)

    def test_length_statistics(self, result):
        stats = result.length_statistics()
        assert stats["count"] == 3
        assert stats["min"] == 3.0
        assert stats["max"] == 6.0
        assert stats["mean"] == pytest.approx(5.0)
        assert stats["median"] == pytest.approx(6.0)

    def test_empty_statistics(self):
        result = DigestionResult(sequence_id="e", sequence="", specificity="trypsin")
        assert result.length_statistics()["count"] == 0
        assert not result.is_substrate

    def test_fragments_in_range(self, result):
        assert [f.sequence for f in result.fragments_in_range(min_length=4)] == ["AGQTVR", "FSDAAA"]
        assert [f.sequence for f in result.fragments_in_range(max_length=3)] == ["AAR"]

    def test_json_round_trip(self, result):
        data = json.loads(result.model_dump_json())
        assert data["sites"][0]["window"] == "XAARAGQT"
        assert DigestionResult.model_validate(data) == result
