"""
Localized-field resolution.

Catalog rows carry per-language variants as suffixed fields (``name_hi``,
``when_to_seek_help_te``, ``auto_response_bn``). Everything that needs a
localized attribute goes through :func:`resolve_localized` so the fallback
order is defined in one place:

    <field>_<language>  ->  <field>  (canonical, English)
"""

import re
import unicodedata
from typing import Any, Mapping, Optional

DEFAULT_LANGUAGE = "en"

# Fixed enumeration order. The language identifier walks it first-match-wins.
SUPPORTED_LANGUAGES = (
    "en", "hi", "te", "ta", "bn", "mr", "kn", "gu", "ml", "or", "pa", "as", "ur", "sat",
)

LANGUAGE_NAMES = {
    "en": "English",
    "hi": "Hindi",
    "te": "Telugu",
    "ta": "Tamil",
    "bn": "Bengali",
    "mr": "Marathi",
    "kn": "Kannada",
    "gu": "Gujarati",
    "ml": "Malayalam",
    "or": "Odia",
    "pa": "Punjabi",
    "as": "Assamese",
    "ur": "Urdu",
    "sat": "Santali",
}


def normalize_language(language: Optional[str]) -> str:
    """
    Map user/header style codes ("HI", "te-IN", "hi_trans") onto a supported
    code, or the default language.
    """
    if not language:
        return DEFAULT_LANGUAGE
    code = language.strip().lower().replace("_", "-").split("-")[0]
    return code if code in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """
    Comparison form for user text and catalog strings: NFC, typographic
    apostrophes folded, whitespace collapsed, lower-cased. Precomposed and
    decomposed Indic letters (nukta forms) compare equal afterwards.
    """
    text = unicodedata.normalize("NFC", text or "")
    text = text.replace("’", "'").replace("‘", "'")
    return _WHITESPACE.sub(" ", text).strip().lower()


def _lookup(entity: Any, key: str) -> Optional[str]:
    if isinstance(entity, Mapping):
        value = entity.get(key)
    else:
        value = (getattr(entity, "localized", None) or {}).get(key)
    return value or None


def resolve_localized(entity: Any, field: str, language: str) -> Optional[str]:
    """
    Return ``entity.<field>`` in ``language``, falling back to the canonical
    value. Works on raw catalog rows (mappings with flat ``<field>_<lang>``
    keys) and on catalog models that keep those keys in ``localized``.
    Empty strings count as missing.
    """
    if language and language != DEFAULT_LANGUAGE:
        value = _lookup(entity, f"{field}_{language}")
        if value:
            return value

    if isinstance(entity, Mapping):
        return entity.get(field) or None
    return getattr(entity, field, None) or None


def localized_text(table: Mapping[str, str], language: str) -> str:
    """Pick a message from a per-language table, English if the language is missing."""
    return table.get(language) or table[DEFAULT_LANGUAGE]


def split_localized_fields(record: Mapping[str, Any], fields) -> dict:
    """
    Collect ``<field>_<lang>`` keys of a flat record into a ``localized`` dict
    (used when catalog rows are turned into models).
    """
    localized = {}
    for field in fields:
        for language in SUPPORTED_LANGUAGES:
            key = f"{field}_{language}"
            value = record.get(key)
            if value:
                localized[key] = value
    return localized
