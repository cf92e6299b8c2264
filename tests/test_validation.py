"""
Unit tests for symptom phrase validation.
"""
import pytest

from triage.validation import (
    EMPTY_ERROR,
    NOT_A_LIST_ERROR,
    NOT_TEXT_ERROR,
    POLICY_ERROR,
    TOO_LONG_ERROR,
    TOO_MANY_ERROR,
    validate_symptom_input,
)


class TestValidateSymptomInput:

    def test_valid_list(self):
        result = validate_symptom_input(["fever", "headache", "chills"])

        assert result.is_valid
        assert result.errors == []

    def test_exactly_ten_is_valid(self):
        assert validate_symptom_input([f"symptom {i}" for i in range(10)]).is_valid

    def test_eleven_is_rejected(self):
        result = validate_symptom_input([f"symptom {i}" for i in range(11)])

        assert not result.is_valid
        assert result.errors == [TOO_MANY_ERROR]
        assert TOO_MANY_ERROR == "Maximum 10 symptoms allowed per query"

    def test_empty_list(self):
        result = validate_symptom_input([])

        assert not result.is_valid
        assert result.errors == [EMPTY_ERROR]

    @pytest.mark.parametrize("value", [None, "fever", 42, {"fever": True}])
    def test_not_a_list(self, value):
        result = validate_symptom_input(value)

        assert not result.is_valid
        assert result.errors == [NOT_A_LIST_ERROR]

    def test_non_text_entry(self):
        result = validate_symptom_input(["fever", 3])

        assert result.errors == [NOT_TEXT_ERROR]

    def test_length_boundary(self):
        assert validate_symptom_input(["a" * 200]).is_valid

        result = validate_symptom_input(["a" * 201])
        assert result.errors == [TOO_LONG_ERROR]

    @pytest.mark.parametrize("phrase", [
        "where to buy DRUG online",
        "illegal pills",
        "suicide method",
        "Self Harm",
    ])
    def test_banned_content(self, phrase):
        result = validate_symptom_input(["fever", phrase])

        assert not result.is_valid
        assert result.errors == [POLICY_ERROR]

    def test_policy_error_reported_once(self):
        result = validate_symptom_input(["drug", "illegal"])

        assert result.errors.count(POLICY_ERROR) == 1

    def test_all_errors_reported_together(self):
        phrases = ["x" * 250, 7, "drug"] + ["cough"] * 9

        result = validate_symptom_input(phrases)

        assert result.errors == [TOO_MANY_ERROR, NOT_TEXT_ERROR, TOO_LONG_ERROR, POLICY_ERROR]
