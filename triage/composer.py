"""
Advisory composition.

Builds every user-facing payload. Whatever the path (emergency, error,
rate limit, no match, result) the localized safety disclaimer is appended as
the last step, even when the text already carries similar wording.
"""

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import List, Sequence

from logging_config import get_logger, log_error
from models import (
    EmergencyCheck,
    EmergencyPayload,
    ErrorPayload,
    MatchedSymptomSummary,
    NoMatchPayload,
    RankedDisease,
    RateLimitedPayload,
    ResultPayload,
    SuggestedDisease,
    Symptom,
)

from .localization import LANGUAGE_NAMES, localized_text, resolve_localized
from .messages import (
    EMERGENCY_NUMBER,
    ERROR_MESSAGES,
    FALLBACK_ADVISORIES,
    NO_MATCH_MESSAGES,
    RATE_LIMITED_MESSAGES,
    SAFETY_DISCLAIMERS,
    VALIDATION_GUIDANCE,
)

logger = get_logger(__name__)

ADVISORY_WORD_LIMIT = 100
OPENING_DISCLAIMER = "This is for awareness only, not medical diagnosis."


def add_safety_disclaimer(text: str, language: str) -> str:
    disclaimer = localized_text(SAFETY_DISCLAIMERS, language)
    text = (text or "").rstrip()
    return f"{text}\n\n{disclaimer}" if text else disclaimer


def build_advisory_prompt(
    symptom_names: Sequence[str],
    disease_names: Sequence[str],
    language: str,
) -> str:
    language_name = LANGUAGE_NAMES.get(language, LANGUAGE_NAMES["en"])
    return (
        f"A user of a public health-awareness assistant reports these symptoms: "
        f"{', '.join(symptom_names)}.\n"
        f"Conditions commonly associated with them: {', '.join(disease_names)}.\n\n"
        f"Write brief general health guidance in {language_name}.\n"
        f"Rules:\n"
        f"- Keep it under {ADVISORY_WORD_LIMIT} words.\n"
        f"- Start with '{OPENING_DISCLAIMER}' (translated into {language_name}).\n"
        f"- Do not diagnose and do not name or recommend any medicine or dosage.\n"
        f"- Say when to see a doctor, and tell the user to call {EMERGENCY_NUMBER} "
        f"immediately if symptoms become severe.\n"
        f"- Plain text only, no markdown."
    )


class AdvisoryComposer:
    """
    Args:
        generator: Optional object with ``generate(prompt) -> str``
        timeout_seconds: Upper bound on the wait for the generator; past it
                         the fallback text is used and the call is abandoned
    """

    def __init__(self, generator=None, timeout_seconds: float = 8.0):
        self.generator = generator
        self.timeout_seconds = timeout_seconds
        self._executor = (
            ThreadPoolExecutor(max_workers=4, thread_name_prefix='advisory')
            if generator is not None else None
        )

    def narrative(self, symptom_names: Sequence[str], disease_names: Sequence[str],
                  language: str) -> str:
        """Generated advisory text, or the fixed fallback for ``language``. Never empty."""
        fallback = localized_text(FALLBACK_ADVISORIES, language)
        if self.generator is None:
            return fallback

        prompt = build_advisory_prompt(symptom_names, disease_names, language)
        try:
            future = self._executor.submit(self.generator.generate, prompt)
            text = future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            logger.warning(
                f"Advisory generation exceeded {self.timeout_seconds}s, using fallback text"
            )
            return fallback
        except Exception as e:
            log_error(logger, e, "Advisory generation failed, using fallback text",
                      {'language': language})
            return fallback

        text = (text or "").strip()
        return text or fallback

    def result(self, symptoms: List[Symptom], ranked: List[RankedDisease],
               language: str) -> ResultPayload:
        matched = [
            MatchedSymptomSummary(
                id=s.id,
                name=resolve_localized(s, 'name', language) or s.name,
                severity=s.severity_indicator,
            )
            for s in symptoms
        ]
        suggested = [
            SuggestedDisease(
                id=r.disease.id,
                name=resolve_localized(r.disease, 'name', language) or r.disease.name,
                confidence_score=r.confidence,
                severity_level=r.disease.severity_level,
                when_to_seek_help=resolve_localized(r.disease, 'when_to_seek_help', language),
            )
            for r in ranked
        ]
        text = self.narrative(
            [m.name for m in matched], [d.name for d in suggested], language
        )
        return ResultPayload(
            language=language,
            matched_symptoms=matched,
            suggested_diseases=suggested,
            advisory_text=add_safety_disclaimer(text, language),
        )

    def emergency(self, check: EmergencyCheck, language: str) -> EmergencyPayload:
        return EmergencyPayload(
            language=language,
            severity=check.severity or 'critical',
            message=add_safety_disclaimer(check.response_text, language),
            matched_keyword=check.matched_keyword,
        )

    def validation_error(self, errors: List[str], language: str) -> ErrorPayload:
        lines = list(errors) + [localized_text(VALIDATION_GUIDANCE, language)]
        return ErrorPayload(
            language=language,
            message=add_safety_disclaimer("\n".join(lines), language),
            errors=list(errors),
        )

    def error(self, language: str) -> ErrorPayload:
        return ErrorPayload(
            language=language,
            message=add_safety_disclaimer(localized_text(ERROR_MESSAGES, language), language),
        )

    def rate_limited(self, reset_time: datetime, language: str) -> RateLimitedPayload:
        template = localized_text(RATE_LIMITED_MESSAGES, language)
        text = template.format(reset_time=reset_time.strftime('%H:%M UTC'))
        return RateLimitedPayload(
            language=language,
            message=add_safety_disclaimer(text, language),
            reset_time=reset_time,
        )

    def no_match(self, language: str) -> NoMatchPayload:
        return NoMatchPayload(
            language=language,
            message=add_safety_disclaimer(localized_text(NO_MATCH_MESSAGES, language), language),
        )

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
