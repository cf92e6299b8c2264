"""
Triage engine: the single entry point that runs one message through the
pipeline.

    Start -> LanguageDetected -> EmergencyTriggered (terminal)
                              -> Validated -> RateChecked -> Matched -> Ranked -> Composed

Every collaborator is injected. Anything that escapes a step after language
detection is turned into a localized error payload; callers never see a raw
exception from ``triage``.
"""

from datetime import timedelta
from typing import Any, Optional, Sequence

from config_validator import TriageSettings
from logging_config import get_logger, get_request_logger, log_error, log_state_transition
from models import DiseaseInfo, TriageRecord

from .catalog import CatalogError, DynamoDBCatalog, InMemoryCatalog, SymptomCatalog
from .composer import AdvisoryComposer
from .emergency import DynamoDBEmergencyKeywordSource, check_emergency
from .generation import BedrockTextGenerator
from .language import identify
from .localization import DEFAULT_LANGUAGE, normalize_language, resolve_localized
from .matcher import MAX_PHRASES, match_symptoms, split_phrases
from .query_log import QueryLogger
from .ranker import rank_diseases
from .rate_limiter import DynamoDBRateLimitStore, InMemoryRateLimitStore, RateLimiter
from .validation import validate_symptom_input

logger = get_logger(__name__)

AUTO_LANGUAGE = "auto"


class TriageEngine:

    def __init__(
        self,
        catalog: SymptomCatalog,
        rate_limiter: RateLimiter,
        composer: Optional[AdvisoryComposer] = None,
        query_logger: Optional[QueryLogger] = None,
        keyword_source=None,
    ):
        self.catalog = catalog
        self.rate_limiter = rate_limiter
        self.composer = composer or AdvisoryComposer()
        self.query_logger = query_logger
        self.keyword_source = keyword_source

    @classmethod
    def from_settings(cls, settings: TriageSettings) -> "TriageEngine":
        """Assemble the engine and its AWS adapters from configuration."""
        if settings.catalog_source == "dynamodb":
            catalog = DynamoDBCatalog(
                symptoms_table=settings.symptoms_table_name,
                diseases_table=settings.diseases_table_name,
                associations_table=settings.disease_symptoms_table_name,
                region=settings.aws_region,
            )
        else:
            catalog = InMemoryCatalog.from_json(settings.catalog_path)

        if settings.rate_limit_table_name:
            store = DynamoDBRateLimitStore(
                settings.rate_limit_table_name,
                region=settings.aws_region,
                ttl_seconds=settings.rate_limit_window_seconds * 2,
            )
        else:
            store = InMemoryRateLimitStore(
                retention=timedelta(seconds=settings.rate_limit_window_seconds)
            )

        generator = None
        if settings.enable_ai_advisory:
            generator = BedrockTextGenerator(
                model_id=settings.bedrock_model_id,
                region=settings.bedrock_region,
                timeout_seconds=settings.generation_timeout_seconds,
            )

        keyword_source = None
        if settings.emergency_keywords_table_name:
            keyword_source = DynamoDBEmergencyKeywordSource(
                settings.emergency_keywords_table_name, region=settings.aws_region
            )

        return cls(
            catalog=catalog,
            rate_limiter=RateLimiter(
                store,
                window_seconds=settings.rate_limit_window_seconds,
                max_requests=settings.rate_limit_max_requests,
            ),
            composer=AdvisoryComposer(generator, settings.generation_timeout_seconds),
            query_logger=QueryLogger(settings.query_log_lambda_arn),
            keyword_source=keyword_source,
        )

    def resolve_language(self, raw_text: str, requested_language: Optional[str]) -> str:
        if not requested_language or requested_language.strip().lower() == AUTO_LANGUAGE:
            return identify(raw_text)
        return normalize_language(requested_language)

    def triage(self, raw_text: str, user_id: str, requested_language: str = AUTO_LANGUAGE):
        """
        Run one free-text message through the pipeline.

        Returns:
            One of the AdvisoryPayload models (emergency, error, rate_limited,
            no_match, result), always in the response language.
        """
        raw_text = raw_text or ""
        language = self.resolve_language(raw_text, requested_language)
        return self._run(raw_text, None, user_id, language)

    def check_symptoms(self, symptoms: Sequence[Any], user_id: str, language: str = DEFAULT_LANGUAGE):
        """
        Structured variant: the caller already split the symptoms. The
        emergency gate sees the entries joined; the validator sees the list
        exactly as given.
        """
        language = normalize_language(language)
        texts = []
        if isinstance(symptoms, (list, tuple)):
            texts = [s for s in symptoms if isinstance(s, str)]
        return self._run(", ".join(texts), symptoms, user_id, language)

    def _run(self, raw_text: str, given_phrases, user_id: str, language: str):
        request_logger = get_request_logger(__name__, user_id=user_id, language=language)
        record = TriageRecord(user_id=user_id, raw_text=raw_text, language=language)
        log_state_transition(request_logger, "LanguageDetected", {'language': language})

        try:
            return self._pipeline(raw_text, given_phrases, user_id, language, record, request_logger)
        except Exception as e:
            log_error(request_logger, e, "Triage pipeline failed, returning error advisory",
                      {'user_id': user_id})
            record.outcome = "error"
            self._log_query(record)
            return self.composer.error(language)

    def _pipeline(self, raw_text, given_phrases, user_id, language, record, request_logger):
        check = check_emergency(raw_text, language, self.keyword_source)
        if check.is_emergency:
            record.emergency_triggered = True
            record.outcome = "emergency"
            log_state_transition(request_logger, "EmergencyTriggered", {'severity': check.severity})
            if self.query_logger is not None:
                self.query_logger.log_safety_event(record, check)
            self._log_query(record)
            return self.composer.emergency(check, language)

        phrases = split_phrases(raw_text) if given_phrases is None else given_phrases
        validation = validate_symptom_input(phrases)
        if not validation.is_valid:
            request_logger.info(f"Symptom input rejected: {validation.errors}")
            record.outcome = "invalid"
            return self.composer.validation_error(validation.errors, language)

        phrases = [p.strip() for p in phrases][:MAX_PHRASES]
        record.phrases = phrases
        log_state_transition(request_logger, "Validated", {'phrase_count': len(phrases)})

        status = self.rate_limiter.check_limit(user_id)
        if not status.allowed:
            request_logger.info(f"Rate limit reached, resets at {status.reset_time.isoformat()}")
            record.outcome = "rate_limited"
            return self.composer.rate_limited(status.reset_time, language)
        self.rate_limiter.record_request(user_id)
        log_state_transition(request_logger, "RateChecked", {'remaining': status.remaining})

        try:
            catalog_symptoms = self.catalog.symptoms()
        except CatalogError as e:
            log_error(request_logger, e, "Catalog unavailable, treating as no match")
            catalog_symptoms = []

        matched = match_symptoms(phrases, language, catalog_symptoms)
        record.matched_symptom_ids = [s.id for s in matched]
        log_state_transition(request_logger, "Matched", {'matched': record.matched_symptom_ids})

        if not matched:
            record.outcome = "no_match"
            self._log_query(record)
            return self.composer.no_match(language)

        ranked = rank_diseases(
            self.catalog.associations_for(record.matched_symptom_ids),
            record.matched_symptom_ids,
            len(phrases),
            self.catalog.disease,
        )
        record.suggested_disease_ids = [r.disease.id for r in ranked]
        record.confidence_score = ranked[0].confidence if ranked else 0.0
        log_state_transition(request_logger, "Ranked", {'suggested': record.suggested_disease_ids})

        payload = self.composer.result(matched, ranked, language)
        log_state_transition(request_logger, "Composed")
        self._log_query(record)
        return payload

    def _log_query(self, record: TriageRecord) -> None:
        if self.query_logger is None:
            return
        try:
            self.query_logger.log(record)
        except Exception as e:
            log_error(logger, e, "Query log submission failed")

    def disease_info(self, disease_id: str, language: str = DEFAULT_LANGUAGE) -> Optional[DiseaseInfo]:
        """
        Localized disease details, or None for an unknown id.

        Raises:
            CatalogError: If the catalog cannot be read
        """
        language = normalize_language(language)
        disease = self.catalog.disease(disease_id)
        if disease is None:
            return None

        return DiseaseInfo(
            id=disease.id,
            name=resolve_localized(disease, 'name', language) or disease.name,
            description=resolve_localized(disease, 'description', language),
            prevention_tips=resolve_localized(disease, 'prevention_tips', language),
            when_to_seek_help=resolve_localized(disease, 'when_to_seek_help', language),
            emergency_signs=resolve_localized(disease, 'emergency_signs', language),
            severity_level=disease.severity_level,
            is_contagious=disease.is_contagious,
            language=language,
        )

    def shutdown(self) -> None:
        self.composer.shutdown()
        if self.query_logger is not None:
            self.query_logger.shutdown(wait=False)
