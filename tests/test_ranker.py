"""
Unit tests for disease ranking.
"""
import pytest

from models import Disease, DiseaseSymptomAssociation
from triage.ranker import TOP_N, association_weight, rank_diseases


def _assoc(disease_id, symptom_id, frequency=None, severity=None):
    return DiseaseSymptomAssociation(
        disease_id=disease_id, symptom_id=symptom_id, frequency=frequency, severity=severity
    )


def _lookup(*ids):
    diseases = {i: Disease(id=i, name=i.title()) for i in ids}
    return diseases.get


class TestAssociationWeight:

    @pytest.mark.parametrize("frequency,severity,expected", [
        ("common", "severe", 0.9),
        ("occasional", "moderate", 0.6),
        ("rare", "mild", 0.4),
        ("COMMON", "Mild", 0.7),
        (None, None, 0.2),
        ("sometimes", "extreme", 0.2),
    ])
    def test_weights(self, frequency, severity, expected):
        weight = association_weight(_assoc("d", "s", frequency, severity))
        assert weight == pytest.approx(expected)


class TestRankDiseases:

    def test_malaria_scoring(self):
        associations = [
            _assoc("malaria", "fever", "common", "severe"),
            _assoc("malaria", "headache", "occasional", "moderate"),
            _assoc("malaria", "chills", "common", "mild"),
        ]

        ranked = rank_diseases(
            associations, ["fever", "headache", "chills"], 3, _lookup("malaria")
        )

        assert len(ranked) == 1
        assert ranked[0].score == pytest.approx(2.2)
        assert ranked[0].confidence == 0.7333
        assert ranked[0].matched_symptom_count == 3

    def test_confidence_capped_at_one(self):
        associations = [
            _assoc("a", "s1", "common", "severe"),
            _assoc("a", "s2", "common", "severe"),
        ]
        ranked = rank_diseases(associations, ["s1", "s2"], 1, _lookup("a"))

        assert ranked[0].confidence == 1.0
        assert ranked[0].score == pytest.approx(1.8)

    def test_zero_total_treated_as_one(self):
        ranked = rank_diseases([_assoc("a", "s1", "rare", "mild")], ["s1"], 0, _lookup("a"))
        assert ranked[0].confidence == 0.4

    def test_unmatched_associations_ignored(self):
        associations = [
            _assoc("a", "s1", "common", "severe"),
            _assoc("a", "s2", "common", "severe"),
        ]
        ranked = rank_diseases(associations, ["s1"], 1, _lookup("a"))

        assert ranked[0].matched_symptom_count == 1
        assert ranked[0].confidence == 0.9

    def test_unknown_disease_skipped(self):
        associations = [
            _assoc("ghost", "s1", "common", "severe"),
            _assoc("a", "s1", "rare", "mild"),
        ]
        ranked = rank_diseases(associations, ["s1"], 1, _lookup("a"))

        assert [r.disease.id for r in ranked] == ["a"]

    def test_ties_keep_first_encounter_order(self):
        associations = [
            _assoc("b", "s1", "common", "mild"),
            _assoc("a", "s1", "common", "mild"),
            _assoc("c", "s1", "common", "severe"),
        ]
        ranked = rank_diseases(associations, ["s1"], 1, _lookup("a", "b", "c"))

        assert [r.disease.id for r in ranked] == ["c", "b", "a"]

    def test_order_uses_unrounded_confidence(self):
        """Both round to 0.0002, but 0.7/3000 is larger than 0.6/3000"""
        associations = [
            _assoc("lower", "s1", "occasional", "moderate"),
            _assoc("higher", "s1", "common", "mild"),
        ]

        ranked = rank_diseases(associations, ["s1"], 3000, _lookup("lower", "higher"))

        assert [r.disease.id for r in ranked] == ["higher", "lower"]
        assert [r.confidence for r in ranked] == [0.0002, 0.0002]

    def test_equal_sums_in_different_order_stay_tied(self):
        associations = [
            _assoc("x", "s1", "common", "severe"),
            _assoc("x", "s2", "rare", "mild"),
            _assoc("x", "s3", "occasional", "moderate"),
            _assoc("y", "s3", "occasional", "moderate"),
            _assoc("y", "s2", "rare", "mild"),
            _assoc("y", "s1", "common", "severe"),
        ]

        ranked = rank_diseases(associations, ["s1", "s2", "s3"], 10, _lookup("x", "y"))

        assert [r.disease.id for r in ranked] == ["x", "y"]
        assert ranked[0].confidence == ranked[1].confidence == 0.19

    def test_capped_at_top_n(self):
        ids = [f"d{i}" for i in range(8)]
        associations = [_assoc(i, "s1", "common") for i in ids]

        ranked = rank_diseases(associations, ["s1"], 1, _lookup(*ids))

        assert len(ranked) == TOP_N == 5
        assert [r.disease.id for r in ranked] == ids[:5]

    def test_no_associations(self):
        assert rank_diseases([], ["s1"], 1, _lookup()) == []

    def test_bundled_catalog(self, catalog):
        matched = ["fever", "headache", "chills"]

        ranked = rank_diseases(catalog.associations_for(matched), matched, 3, catalog.disease)

        assert [(r.disease.id, r.confidence) for r in ranked] == [
            ("malaria", 0.7333),
            ("influenza", 0.7),
            ("dengue", 0.5667),
            ("typhoid", 0.5667),
            ("chikungunya", 0.4667),
        ]
        confidences = [r.confidence for r in ranked]
        assert confidences == sorted(confidences, reverse=True)
