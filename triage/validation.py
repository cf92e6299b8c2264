"""
Structural checks on extracted symptom phrases.

Every rule is evaluated and all errors are reported together, so the user
gets one complete correction instead of a round trip per mistake.
"""

from typing import Any, List

from models import SymptomInputValidation

MAX_SYMPTOMS = 10
MAX_SYMPTOM_LENGTH = 200

# Case-insensitive substring match against each phrase
BANNED_CONTENT = ("drug", "illegal", "suicide method", "self harm")

NOT_A_LIST_ERROR = "Symptoms must be provided as an array"
EMPTY_ERROR = "At least one symptom must be provided"
TOO_MANY_ERROR = f"Maximum {MAX_SYMPTOMS} symptoms allowed per query"
NOT_TEXT_ERROR = "All symptoms must be text strings"
TOO_LONG_ERROR = f"Each symptom description must be under {MAX_SYMPTOM_LENGTH} characters"
POLICY_ERROR = (
    "Query contains inappropriate content. "
    "Please contact a healthcare professional directly."
)


def validate_symptom_input(phrases: Any) -> SymptomInputValidation:
    """
    Validate a sequence of symptom phrases.

    Each distinct error is reported once, in rule order: emptiness, count,
    type, length, banned content.
    """
    if not isinstance(phrases, (list, tuple)):
        return SymptomInputValidation(is_valid=False, errors=[NOT_A_LIST_ERROR])

    errors: List[str] = []

    if len(phrases) == 0:
        errors.append(EMPTY_ERROR)

    if len(phrases) > MAX_SYMPTOMS:
        errors.append(TOO_MANY_ERROR)

    if any(not isinstance(p, str) for p in phrases):
        errors.append(NOT_TEXT_ERROR)

    texts = [p for p in phrases if isinstance(p, str)]

    if any(len(p) > MAX_SYMPTOM_LENGTH for p in texts):
        errors.append(TOO_LONG_ERROR)

    for phrase in texts:
        lowered = phrase.lower()
        if any(banned in lowered for banned in BANNED_CONTENT):
            errors.append(POLICY_ERROR)
            break

    return SymptomInputValidation(is_valid=not errors, errors=errors)
