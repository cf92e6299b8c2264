"""
Unit tests for phrase extraction and symptom matching.
"""
import pytest

from models import Symptom
from triage.matcher import extract_symptoms, match_symptoms, split_phrases


class TestSplitPhrases:

    def test_comma_separated(self):
        assert split_phrases("fever, headache, chills") == ["fever", "headache", "chills"]

    def test_word_separators(self):
        assert split_phrases("fever and headache also cough with chills") == [
            "fever", "headache", "cough", "chills",
        ]

    def test_symbol_separators_without_spaces(self):
        assert split_phrases("fever&cough+chills") == ["fever", "cough", "chills"]

    def test_word_separator_needs_surrounding_space(self):
        """'and' inside a word is not a separator"""
        assert split_phrases("sandy stool") == ["sandy stool"]

    def test_word_separator_case_insensitive(self):
        assert split_phrases("Fever AND cough") == ["Fever", "cough"]

    def test_hindi_separator(self):
        assert split_phrases("बुखार और सिरदर्द") == ["बुखार", "सिरदर्द"]

    def test_telugu_separator(self):
        assert split_phrases("జ్వరం మరియు తలనొప్పి") == ["జ్వరం", "తలనొప్పి"]

    def test_tamil_separator(self):
        assert split_phrases("காய்ச்சல் மற்றும் தலைவலி") == ["காய்ச்சல்", "தலைவலி"]

    def test_short_and_long_phrases_dropped(self):
        text = "ok, fever, " + "x" * 101
        assert split_phrases(text) == ["fever"]

    def test_edge_punctuation_stripped(self):
        assert split_phrases("fever. headache!") == ["fever. headache"]
        assert split_phrases("(fever), 'chills'") == ["fever", "chills"]

    @pytest.mark.parametrize("text", ["", None, " , , "])
    def test_empty(self, text):
        assert split_phrases(text) == []

    def test_split_is_uncapped(self):
        text = ", ".join(f"symptom {i}" for i in range(15))
        assert len(split_phrases(text)) == 15

    def test_extract_caps_at_ten(self):
        text = ", ".join(f"symptom {i}" for i in range(15))
        phrases = extract_symptoms(text)

        assert len(phrases) == 10
        assert phrases[0] == "symptom 0"


class TestMatchSymptoms:

    def test_english(self, catalog):
        matched = match_symptoms(["fever", "headache", "chills"], "en", catalog.symptoms())
        assert [s.id for s in matched] == ["fever", "headache", "chills"]

    def test_phrase_containing_name(self, catalog):
        matched = match_symptoms(["high fever since two days"], "en", catalog.symptoms())
        assert [s.id for s in matched] == ["fever"]

    def test_name_containing_phrase(self, catalog):
        """A fragment of a catalog name still matches it"""
        matched = match_symptoms(["sore thr"], "en", catalog.symptoms())
        assert [s.id for s in matched] == ["sore_throat"]

    def test_catalog_order_and_no_duplicates(self, catalog):
        matched = match_symptoms(["chills", "fever", "FEVER"], "en", catalog.symptoms())
        assert [s.id for s in matched] == ["fever", "chills"]

    def test_hindi_names(self, catalog):
        matched = match_symptoms(["बुखार", "सिरदर्द"], "hi", catalog.symptoms())
        assert [s.id for s in matched] == ["fever", "headache"]

    def test_localized_name_only_when_language_has_one(self, catalog):
        """With an explicit language the localized name is used, not the English one"""
        assert match_symptoms(["fever"], "hi", catalog.symptoms()) == []

    def test_canonical_name_when_no_localization(self):
        symptoms = [Symptom(id="fever", name="fever", localized={"name_hi": "बुखार"})]
        assert [s.id for s in match_symptoms(["fever"], "kn", symptoms)] == ["fever"]

    def test_no_phrases(self, catalog):
        assert match_symptoms([], "en", catalog.symptoms()) == []
        assert match_symptoms([""], "en", catalog.symptoms()) == []

    def test_unknown_phrase(self, catalog):
        assert match_symptoms(["itchy elbow"], "en", catalog.symptoms()) == []

    def test_precomposed_nukta_matches_decomposed_catalog_name(self, catalog):
        """U+095C and U+0921 U+093C are the same letter once NFC-normalized"""
        precomposed = "\u091c\u094b\u095c\u094b\u0902 \u092e\u0947\u0902 \u0926\u0930\u094d\u0926"
        decomposed = "\u091c\u094b\u0921\u093c\u094b\u0902 \u092e\u0947\u0902 \u0926\u0930\u094d\u0926"

        for phrase in (precomposed, decomposed):
            matched = match_symptoms([phrase], "hi", catalog.symptoms())
            assert [s.id for s in matched] == ["joint_pain"]

    def test_catalog_name_normalized_too(self):
        """Catalog rows may hold the precomposed form and extra whitespace"""
        symptoms = [Symptom(id="joint_pain", name="joint pain",
                            localized={"name_hi": "\u091c\u094b\u095c\u094b\u0902  \u0926\u0930\u094d\u0926"})]

        matched = match_symptoms(["\u091c\u094b\u0921\u093c\u094b\u0902 \u0926\u0930\u094d\u0926"], "hi", symptoms)

        assert [s.id for s in matched] == ["joint_pain"]
