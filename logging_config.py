"""
Logging setup for the triage service.

Production (ENVIRONMENT=production) writes one JSON object per line so the
output can be queried from CloudWatch Logs Insights; everything else gets a
plain console line. Symptom text is frequently non-Latin, so JSON output keeps
non-ASCII characters unescaped.

Structured fields travel on the record under ``extra_fields``. The helpers
below (AWS calls, engine states, emergency-gate triggers, request timing) all
go through ``_emit`` so their payload shape stays uniform.
"""

import logging
import sys
import json
import os
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import traceback

# Record attributes copied into the JSON line when a request logger set them
CONTEXT_KEYS = ('user_id', 'request_id', 'endpoint', 'language')

CONSOLE_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s] %(message)s'
CONSOLE_DATEFMT = '%H:%M:%S'


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'source': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        entry.update(getattr(record, 'extra_fields', None) or {})

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Console format for local runs; appends request context when present."""

    def __init__(self):
        super().__init__(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = ' '.join(
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) is not None
        )
        return f"{line} ({context})" if context else line


def setup_logging(
    log_level: Optional[str] = None,
    structured: Optional[bool] = None
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        log_level: Level name; falls back to LOG_LEVEL, then INFO.
        structured: JSON output; falls back to ENVIRONMENT == 'production'.
    """
    level_name = (log_level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)
    environment = os.getenv('ENVIRONMENT', 'development').lower()
    if structured is None:
        structured = environment == 'production'

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter() if structured else HumanReadableFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # boto request dumps at DEBUG drown out the triage states
    for noisy in ('botocore', 'boto3', 'urllib3'):
        logging.getLogger(noisy).setLevel(max(level, logging.INFO))

    root.info(
        f"Logging ready (level={level_name}, environment={environment}, "
        f"json={structured})"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """
    Attaches request context to every record. Keys given explicitly in a
    call's ``extra`` take precedence over the adapter's own.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs['extra'] = {**self.extra, **(kwargs.get('extra') or {})}
        return msg, kwargs


def get_request_logger(
    name: str,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
    endpoint: Optional[str] = None,
    language: Optional[str] = None
) -> LoggerAdapter:
    """
    Logger bound to one request. Unset context values are left off the record.

    Example:
        >>> log = get_request_logger(__name__, user_id="u-42", endpoint="/triage")
        >>> log.info("Processing triage request")
    """
    context = {
        'user_id': user_id,
        'request_id': request_id,
        'endpoint': endpoint,
        'language': language,
    }
    return LoggerAdapter(
        get_logger(name),
        {key: value for key, value in context.items() if value}
    )


def _emit(
    logger: logging.Logger,
    level: int,
    message: str,
    fields: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    exc_info: Any = None
) -> None:
    if extra:
        fields = {**fields, **extra}
    logger.log(level, message, exc_info=exc_info, extra={'extra_fields': fields})


def log_error(
    logger: logging.Logger,
    error: Exception,
    message: str,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log ``error`` at ERROR with its traceback.

    Example:
        >>> try:
        ...     catalog.symptoms()
        ... except CatalogError as e:
        ...     log_error(logger, e, "Catalog lookup failed", {"user_id": "u-42"})
    """
    _emit(
        logger,
        logging.ERROR,
        f"{message}: {error}",
        {'error_type': type(error).__name__, 'error_message': str(error)},
        extra,
        exc_info=error,
    )


def log_aws_service_call(
    logger: logging.Logger,
    service: str,
    operation: str,
    success: bool,
    duration_ms: Optional[float] = None,
    error: Optional[Exception] = None,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Record one boto3 call (dynamodb scan, bedrock invoke_model, lambda invoke).
    Failures are logged at ERROR with the exception attached.
    """
    fields: Dict[str, Any] = {
        'aws_service': service,
        'operation': operation,
        'success': success,
    }
    message = f"{service}.{operation} {'ok' if success else 'failed'}"
    if duration_ms is not None:
        fields['duration_ms'] = duration_ms
        message += f" in {duration_ms:.1f}ms"
    if error is not None:
        fields['error_type'] = type(error).__name__
        fields['error_message'] = str(error)

    _emit(
        logger,
        logging.INFO if success else logging.ERROR,
        message,
        fields,
        extra,
        exc_info=error,
    )


def log_state_transition(
    logger: logging.Logger,
    state: str,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """DEBUG trace of the engine pipeline (LanguageDetected, Validated, Ranked, ...)."""
    _emit(logger, logging.DEBUG, f"triage -> {state}",
          {'event': 'triage_state', 'state': state}, extra)


def log_safety_event(
    logger: logging.Logger,
    severity: str,
    keyword: Optional[str],
    language: str,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emergency-gate trigger. Logged at WARNING so production INFO configs keep it.
    """
    _emit(
        logger,
        logging.WARNING,
        f"Emergency gate triggered ({severity})",
        {
            'event': 'safety_event',
            'severity': severity,
            'keyword': keyword,
            'language': language,
        },
        extra,
    )


def log_request_start(
    logger: logging.Logger,
    endpoint: str,
    user_id: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    fields: Dict[str, Any] = {'event': 'request_start', 'endpoint': endpoint}
    if user_id:
        fields['user_id'] = user_id
    _emit(logger, logging.INFO, f"--> {endpoint}", fields, extra)


def log_request_end(
    logger: logging.Logger,
    endpoint: str,
    status_code: int,
    duration_ms: float,
    user_id: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
) -> None:
    """
    Request timing line. 4xx logs at WARNING and 5xx at ERROR.
    """
    fields: Dict[str, Any] = {
        'event': 'request_end',
        'endpoint': endpoint,
        'status_code': status_code,
        'duration_ms': duration_ms,
    }
    if user_id:
        fields['user_id'] = user_id

    if status_code >= 500:
        level = logging.ERROR
    elif status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO

    _emit(logger, level, f"<-- {endpoint} {status_code} ({duration_ms:.1f}ms)", fields, extra)


# Modules that log at import time need a handler before main.py runs setup
if not logging.getLogger().handlers:
    setup_logging()
