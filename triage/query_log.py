"""
Fire-and-forget query logging.

Records go to a Lambda (InvocationType='Event') from a small background pool
so the request thread never waits on it. Nothing here can affect the triage
result: every failure is logged and dropped.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from lambda_client import invoke_lambda_async
from logging_config import get_logger, log_error, log_safety_event
from models import EmergencyCheck, TriageRecord

logger = get_logger(__name__)


def record_payload(record: TriageRecord) -> Dict[str, Any]:
    """Shape of a ``symptom_query`` event as stored by the query-log consumer."""
    return {
        'event': 'symptom_query',
        'patient_id': record.user_id,
        'query_text': record.raw_text,
        'language': record.language,
        'symptom_phrases': record.phrases,
        'matched_symptoms': record.matched_symptom_ids,
        'suggested_diseases': record.suggested_disease_ids,
        'confidence_score': record.confidence_score,
        'emergency_triggered': record.emergency_triggered,
        'outcome': record.outcome,
        'timestamp': record.timestamp.isoformat(),
    }


class QueryLogger:

    def __init__(self, function_arn: Optional[str] = None, max_workers: int = 2, client=None):
        self.function_arn = function_arn
        self._client = client
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='query-log'
        )

    def log(self, record: TriageRecord) -> None:
        """Queue ``record`` for delivery. Never raises."""
        self._submit(record_payload(record))

    def log_safety_event(self, record: TriageRecord, check: EmergencyCheck) -> None:
        """Emergency-gate trigger: a WARNING log line plus a ``safety_event`` record."""
        log_safety_event(
            logger,
            severity=check.severity or 'unknown',
            keyword=check.matched_keyword,
            language=record.language,
            extra={'user_id': record.user_id},
        )
        self._submit({
            'event': 'safety_event',
            'patient_id': record.user_id,
            'event_type': 'emergency_detected',
            'severity': check.severity,
            'trigger_keyword': check.matched_keyword,
            'language': record.language,
            'timestamp': record.timestamp.isoformat(),
        })

    def _submit(self, payload: Dict[str, Any]) -> None:
        if not self.function_arn:
            logger.debug(f"Query log (no sink configured): {payload.get('event')}")
            return
        try:
            self._executor.submit(self._deliver, payload)
        except RuntimeError as e:
            # executor already shut down
            log_error(logger, e, "Query log dropped")

    def _deliver(self, payload: Dict[str, Any]) -> None:
        try:
            invoke_lambda_async(self.function_arn, payload, client=self._client)
        except Exception as e:
            log_error(logger, e, "Query log delivery failed",
                      {'event': payload.get('event')})

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
