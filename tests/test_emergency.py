"""
Unit tests for the emergency gate.
"""
import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError

from models import EmergencyKeyword
from triage.emergency import (
    DynamoDBEmergencyKeywordSource,
    StaticEmergencyKeywordSource,
    check_emergency,
    normalize_text,
)
from triage.messages import CRITICAL_EMERGENCY_RESPONSES, HIGH_RISK_RESPONSES


class TestStaticTiers:
    """Tests for the built-in critical and high-risk keyword lists"""

    def test_critical_english(self):
        result = check_emergency("I have severe chest pain since morning", "en")

        assert result.is_emergency
        assert result.severity == "critical"
        assert result.matched_keyword == "chest pain"
        assert result.response_text == CRITICAL_EMERGENCY_RESPONSES["en"]

    def test_high_risk_english(self):
        result = check_emergency("I have a severe headache", "en")

        assert result.is_emergency
        assert result.severity == "high"
        assert result.matched_keyword == "severe headache"
        assert result.response_text == HIGH_RISK_RESPONSES["en"]

    def test_critical_wins_over_high(self):
        result = check_emergency("severe headache and now a seizure", "en")

        assert result.severity == "critical"
        assert result.matched_keyword == "seizure"

    def test_case_insensitive(self):
        result = check_emergency("CHEST PAIN", "en")
        assert result.is_emergency

    def test_typographic_apostrophe(self):
        """Phones send curly apostrophes"""
        result = check_emergency("I can’t breathe", "en")

        assert result.is_emergency
        assert result.matched_keyword == "can't breathe"

    def test_hindi_keyword_uses_hindi_template(self):
        result = check_emergency("मुझे सीने में दर्द है", "hi")

        assert result.severity == "critical"
        assert result.matched_keyword == "सीने में दर्द"
        assert result.response_text == CRITICAL_EMERGENCY_RESPONSES["hi"]

    def test_keyword_from_another_language_still_matches(self):
        """An English keyword in a Hindi-detected message is still caught"""
        result = check_emergency("मुझे chest pain है", "hi")

        assert result.is_emergency
        assert result.matched_keyword == "chest pain"
        assert result.response_text == CRITICAL_EMERGENCY_RESPONSES["hi"]

    def test_language_without_list_falls_back_to_english(self):
        result = check_emergency("chest pain", "kn")

        assert result.is_emergency
        assert result.response_text == CRITICAL_EMERGENCY_RESPONSES["en"]

    def test_telugu_high_risk(self):
        result = check_emergency("నాకు తీవ్రమైన తలనొప్పి ఉంది", "te")

        assert result.severity == "high"
        assert result.response_text == HIGH_RISK_RESPONSES["te"]

    @pytest.mark.parametrize("text", ["fever, headache, chills", "", "   "])
    def test_no_match(self, text):
        result = check_emergency(text, "en")

        assert not result.is_emergency
        assert result.severity is None
        assert result.response_text is None


class TestDynamicSource:
    """Tests for the optional table-backed keyword source"""

    def test_dynamic_keyword_matches_after_static_miss(self):
        source = StaticEmergencyKeywordSource([
            EmergencyKeyword(keyword="blue lips", severity_level="critical"),
        ])

        result = check_emergency("my child has Blue Lips", "en", keyword_source=source)

        assert result.is_emergency
        assert result.severity == "critical"
        assert result.matched_keyword == "blue lips"
        assert result.response_text == CRITICAL_EMERGENCY_RESPONSES["en"]

    def test_localized_keyword_and_response(self):
        source = StaticEmergencyKeywordSource([
            EmergencyKeyword(
                keyword="blue lips",
                auto_response="Call 108 now",
                localized={
                    "keyword_hi": "नीले होंठ",
                    "auto_response_hi": "अभी 108 पर कॉल करें",
                },
            ),
        ])

        result = check_emergency("बच्चे के नीले होंठ हैं", "hi", keyword_source=source)

        assert result.matched_keyword == "नीले होंठ"
        assert result.response_text == "अभी 108 पर कॉल करें"

    def test_high_severity_uses_high_risk_template(self):
        source = StaticEmergencyKeywordSource([
            EmergencyKeyword(keyword="stiff neck", severity_level="HIGH"),
        ])

        result = check_emergency("fever with stiff neck", "en", keyword_source=source)

        assert result.severity == "high"
        assert result.response_text == HIGH_RISK_RESPONSES["en"]

    def test_source_failure_fails_open(self):
        source = MagicMock()
        source.keywords.side_effect = RuntimeError("table unavailable")

        result = check_emergency("fever and headache", "en", keyword_source=source)

        assert not result.is_emergency

    def test_source_not_consulted_on_static_hit(self):
        source = MagicMock()

        result = check_emergency("heart attack", "en", keyword_source=source)

        assert result.is_emergency
        source.keywords.assert_not_called()


class TestDynamoDBEmergencyKeywordSource:

    def test_rows_become_keywords(self):
        client = MagicMock()
        client.get_paginator.return_value.paginate.return_value = [
            {'Items': [
                {
                    'keyword': {'S': 'blue lips'},
                    'keyword_hi': {'S': 'नीले होंठ'},
                    'severity_level': {'S': 'high'},
                    'auto_response': {'S': 'Go to a clinic'},
                },
                {'severity_level': {'S': 'critical'}},
            ]},
        ]

        source = DynamoDBEmergencyKeywordSource('emergency_keywords', client=client)
        keywords = source.keywords()

        client.get_paginator.assert_called_once_with('scan')
        assert len(keywords) == 1
        assert keywords[0].keyword == 'blue lips'
        assert keywords[0].severity_level == 'high'
        assert keywords[0].localized == {'keyword_hi': 'नीले होंठ'}

    def test_client_error_propagates_and_gate_fails_open(self):
        client = MagicMock()
        client.get_paginator.return_value.paginate.side_effect = ClientError(
            {'Error': {'Code': 'ResourceNotFoundException', 'Message': 'missing'}}, 'Scan'
        )
        source = DynamoDBEmergencyKeywordSource('emergency_keywords', client=client)

        with pytest.raises(ClientError):
            source.keywords()

        assert not check_emergency("fever", "en", keyword_source=source).is_emergency


class TestNormalizeText:

    def test_collapses_whitespace_and_lowercases(self):
        assert normalize_text("  Chest\t  PAIN \n") == "chest pain"

    def test_none(self):
        assert normalize_text(None) == ""
