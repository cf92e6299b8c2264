# main.py
from fastapi import Depends, FastAPI, HTTPException, Request as FastAPIRequest
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import os
import time
import uuid

from models import AdvisoryPayload, DiseaseInfo, SymptomCheckerRequest, TriageRequest
from config_validator import TriageSettings, validate_all_configurations
from triage.catalog import CatalogError
from triage.engine import TriageEngine
from triage.localization import DEFAULT_LANGUAGE, LANGUAGE_NAMES, SUPPORTED_LANGUAGES

from logging_config import (
    setup_logging,
    get_logger,
    get_request_logger,
    log_error,
    log_request_start,
    log_request_end
)

load_dotenv()

setup_logging()
logger = get_logger(__name__)

app = FastAPI(title="Multilingual Symptom Triage API", version="1.0.0")

config_valid, config_results = validate_all_configurations()
for category, result in config_results.items():
    for error in result.errors:
        logger.error(f"Configuration error ({category}): {error}")
    for warning in result.warnings:
        logger.warning(f"Configuration warning ({category}): {warning}")
logger.info(f"Symptom Triage API starting up (configuration valid: {config_valid})")


def get_cors_origins():
    """
    Origins from the comma-separated ALLOWED_ORIGINS variable.

    Development falls back to ``["*"]`` when the variable is empty. Production
    must list its origins explicitly and may not use the wildcard.
    """
    environment = os.getenv("ENVIRONMENT", "development").lower()
    origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]

    problem = None
    if environment == "production":
        if not origins:
            problem = "ALLOWED_ORIGINS must be explicitly set in production environment"
        elif "*" in origins:
            problem = "Wildcard '*' is not allowed in ALLOWED_ORIGINS for production environment"
    if problem:
        logger.error(problem)
        raise ValueError(problem)

    origins = origins or ["*"]
    logger.info(f"CORS origins for {environment}: {origins}")
    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


_engine = None


def get_engine() -> TriageEngine:
    """Process-wide engine, built from the environment on first use."""
    global _engine
    if _engine is None:
        _engine = TriageEngine.from_settings(TriageSettings.from_env())
    return _engine


@app.middleware("http")
async def log_requests(request: FastAPIRequest, call_next):
    """Time each request and tag the response with an X-Request-ID header."""
    request_id = str(uuid.uuid4())
    context = {'request_id': request_id, 'method': request.method}
    path = request.url.path
    started = time.perf_counter()

    log_request_start(logger, endpoint=path, extra={
        **context, 'client_host': request.client.host if request.client else None
    })

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed_ms = (time.perf_counter() - started) * 1000
        log_error(logger, e, f"Unhandled error on {path}", extra={**context, 'duration_ms': elapsed_ms})
        response = JSONResponse(status_code=500, content={"detail": "Internal server error"})
    else:
        elapsed_ms = (time.perf_counter() - started) * 1000
        log_request_end(logger, endpoint=path, status_code=response.status_code,
                        duration_ms=elapsed_ms, extra=context)

    response.headers["X-Request-ID"] = request_id
    return response


@app.post("/triage", response_model=AdvisoryPayload)
def triage(req: TriageRequest, engine: TriageEngine = Depends(get_engine)):
    """Free-text symptom triage. Engine outcomes are payload types, always HTTP 200."""
    if not req.user_id:
        raise HTTPException(status_code=400, detail="user_id is required.")

    request_logger = get_request_logger(__name__, user_id=req.user_id, endpoint="/triage")
    request_logger.info("Processing triage request")

    payload = engine.triage(req.message, req.user_id, req.language)

    request_logger.info("Triage request completed", extra={
        'extra_fields': {'outcome': payload.type, 'language': payload.language}
    })
    return payload


@app.post("/symptom-checker", response_model=AdvisoryPayload)
def symptom_checker(req: SymptomCheckerRequest, engine: TriageEngine = Depends(get_engine)):
    """Structured variant: the client sends the symptom list directly."""
    if not req.user_id:
        raise HTTPException(status_code=400, detail="user_id is required.")

    request_logger = get_request_logger(__name__, user_id=req.user_id, endpoint="/symptom-checker")
    request_logger.info(f"Processing symptom check with {len(req.symptoms)} symptoms")

    payload = engine.check_symptoms(req.symptoms, req.user_id, req.language)

    request_logger.info("Symptom check completed", extra={
        'extra_fields': {'outcome': payload.type, 'language': payload.language}
    })
    return payload


@app.get("/diseases/{disease_id}", response_model=DiseaseInfo)
def disease_details(disease_id: str, language: str = DEFAULT_LANGUAGE,
                    engine: TriageEngine = Depends(get_engine)):
    try:
        info = engine.disease_info(disease_id, language)
    except CatalogError as e:
        log_error(logger, e, "Catalog unavailable for disease lookup", {'disease_id': disease_id})
        raise HTTPException(status_code=503, detail="Disease information is temporarily unavailable.")

    if info is None:
        raise HTTPException(status_code=404, detail=f"Disease '{disease_id}' not found.")
    return info


@app.get("/languages")
def languages():
    return {
        "default": DEFAULT_LANGUAGE,
        "languages": [
            {"code": code, "name": LANGUAGE_NAMES[code]} for code in SUPPORTED_LANGUAGES
        ],
    }


@app.get("/health")
def health():
    return {"status": "ok"}
