"""
Symptom extraction and catalog matching.
"""

import re
from typing import Iterable, List

from models import Symptom

from .localization import normalize_text, resolve_localized

MAX_PHRASES = 10
MIN_PHRASE_LENGTH = 3
MAX_PHRASE_LENGTH = 100

# Applied in this order. Symbols split regardless of surrounding spaces;
# words only when they stand alone, so "sandwich" or "without" stay whole.
SEPARATORS = (
    ",", "&", "+",
    "and", "also", "with",
    "और", "भी",
    "మరియు", "కూడా",
    "மற்றும்", "கூட",
)

_SYMBOL_SEPARATORS = frozenset(",&+")

_SEPARATOR_PATTERNS = tuple(
    re.compile(rf"\s*{re.escape(sep)}\s*")
    if sep in _SYMBOL_SEPARATORS else
    re.compile(rf"\s+{re.escape(sep)}\s+", re.IGNORECASE)
    for sep in SEPARATORS
)

_EDGE_PUNCTUATION = " \t\r\n.!?;:\"'()"


def split_phrases(text: str) -> List[str]:
    """
    Split free text into candidate phrases, trimmed and length-filtered,
    without the count cap (the input validator needs the true count).
    """
    if not text:
        return []

    pieces = [text]
    for pattern in _SEPARATOR_PATTERNS:
        pieces = [part for piece in pieces for part in pattern.split(piece)]

    phrases = []
    for piece in pieces:
        phrase = piece.strip(_EDGE_PUNCTUATION)
        if MIN_PHRASE_LENGTH <= len(phrase) <= MAX_PHRASE_LENGTH:
            phrases.append(phrase)
    return phrases


def extract_symptoms(text: str) -> List[str]:
    """Candidate symptom phrases from ``text``, at most ``MAX_PHRASES`` of them."""
    return split_phrases(text)[:MAX_PHRASES]


def _matches(phrase: str, name: str) -> bool:
    return name in phrase or phrase in name


def match_symptoms(phrases: Iterable[str], language: str, symptoms: Iterable[Symptom]) -> List[Symptom]:
    """
    Catalog symptoms matched by any phrase.

    A phrase matches when it contains the symptom's name in ``language``
    (canonical name if there is no localized one) or the name contains the
    phrase. Both sides go through ``normalize_text`` first. The result has
    no duplicates and follows catalog order.
    """
    normalized = [normalize_text(p) for p in phrases if p]
    normalized = [p for p in normalized if p]
    if not normalized:
        return []

    matched = []
    for symptom in symptoms:
        name = normalize_text(resolve_localized(symptom, "name", language))
        if not name:
            continue
        if any(_matches(phrase, name) for phrase in normalized):
            matched.append(symptom)
    return matched
