"""
Script/lexical language identification.

Two passes over the same fixed language order, first match wins:
native Unicode script range, then Romanized word lists. Nothing matched
means English.
"""

import re

from .localization import DEFAULT_LANGUAGE

# (language, script range or None, Romanized word list or None).
# Bengali and Assamese share a block, so Assamese is only ever reached lexically;
# Marathi is written in Devanagari and likewise has no range of its own.
_LANGUAGE_PATTERNS = (
    ("hi", r"[ऀ-ॿ]",
     r"\b(hain|hai|nahi|kyun|kaise|kya|bhai|didi|ghar|desh|bhasha|hindi|bukhar|dard)\b"),
    ("te", r"[ఀ-౿]",
     r"\b(nuvvu|memu|vallu|aame|okka|rendu|muddu|amma|nanna|telugu|andhra|jvaram|noppi)\b"),
    ("ta", r"[஀-௿]",
     r"\b(naan|neenga|avanga|ungal|tamil|chennai|madurai|coimbatore|kaichal|vali)\b"),
    ("bn", r"[ঀ-৿]",
     r"\b(ami|tumi|bangla|kolkata|dhaka|bhalo|jor|byatha)\b"),
    ("mr", None,
     r"\b(mala|tula|mumbai|maharashtra|marathi|pune|nagpur)\b"),
    ("kn", r"[ಀ-೿]",
     r"\b(naanu|neenu|avaru|namma|kannada|bangalore|mysore|hubli)\b"),
    ("gu", r"[઀-૿]",
     r"\b(mara|tara|gujarati|ahmedabad|surat|vadodara)\b"),
    ("ml", r"[ഀ-ൿ]",
     r"\b(njan|avar|njangal|malayalam|kerala|kochi|thiruvananthapuram)\b"),
    ("or", r"[଀-୿]",
     r"\b(tume|odia|orissa|bhubaneswar|cuttack)\b"),
    ("pa", r"[਀-੿]",
     r"\b(sada|tuhada|punjabi|chandigarh|amritsar|ludhiana)\b"),
    ("as", None,
     r"\b(moi|amar|tomar|assamese|guwahati|dibrugarh)\b"),
    ("ur", r"[؀-ۿ]",
     r"\b(aap|woh|hamara|tumhara|urdu|lahore|karachi|islamabad)\b"),
    ("sat", r"[᱐-᱿]",
     r"\b(bona|uni|santali|jamshedpur)\b"),
)

SCRIPT_PATTERNS = tuple(
    (language, re.compile(script))
    for language, script, _ in _LANGUAGE_PATTERNS
    if script
)

ROMANIZED_PATTERNS = tuple(
    (language, re.compile(words, re.IGNORECASE))
    for language, _, words in _LANGUAGE_PATTERNS
    if words
)


def identify(text: str) -> str:
    """
    Best-effort language code for ``text``.

    Mixed-script input resolves to the first language (in the fixed order)
    whose script appears anywhere in the text.
    """
    if not text:
        return DEFAULT_LANGUAGE

    for language, pattern in SCRIPT_PATTERNS:
        if pattern.search(text):
            return language

    for language, pattern in ROMANIZED_PATTERNS:
        if pattern.search(text):
            return language

    return DEFAULT_LANGUAGE
