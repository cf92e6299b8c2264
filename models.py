# models.py
from enum import Enum
from pydantic import BaseModel, Field
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
import datetime


# ─────────────────────────────────────────
# CATALOG (reference data, loaded once)
# ─────────────────────────────────────────

class Frequency(str, Enum):
    COMMON = "common"
    OCCASIONAL = "occasional"
    RARE = "rare"


class AssociationSeverity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class Symptom(BaseModel):
    """
    Catalog symptom. `name` is the canonical (English) name; per-language
    variants live in `localized` under keys like "name_hi".
    """
    model_config = {"frozen": True}

    id: str
    name: str
    localized: Dict[str, str] = {}
    body_part: Optional[str] = None
    severity_indicator: int = 1


class Disease(BaseModel):
    model_config = {"frozen": True}

    id: str
    name: str
    description: Optional[str] = None
    prevention_tips: Optional[str] = None
    when_to_seek_help: Optional[str] = None
    emergency_signs: Optional[str] = None
    localized: Dict[str, str] = {}  # description_hi, when_to_seek_help_te, ...
    severity_level: int = 1
    is_contagious: bool = False


class DiseaseSymptomAssociation(BaseModel):
    model_config = {"frozen": True}

    disease_id: str
    symptom_id: str
    # Kept as plain strings: an unknown category scores no bonus
    frequency: Optional[str] = None
    severity: Optional[str] = None


class EmergencySeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"


class EmergencyKeyword(BaseModel):
    """
    Keyword from the dynamic (table-backed) source. `localized` holds
    keyword_<lang> / auto_response_<lang> variants.
    """
    model_config = {"frozen": True}

    keyword: str
    severity_level: str = EmergencySeverity.CRITICAL.value
    auto_response: Optional[str] = None
    localized: Dict[str, str] = {}


# ─────────────────────────────────────────
# ENGINE RESULTS
# ─────────────────────────────────────────

class EmergencyCheck(BaseModel):
    is_emergency: bool
    severity: Optional[str] = None
    matched_keyword: Optional[str] = None
    response_text: Optional[str] = None


class SymptomInputValidation(BaseModel):
    is_valid: bool
    errors: List[str] = []


class RateLimitStatus(BaseModel):
    allowed: bool
    remaining: int
    reset_time: datetime.datetime


class RankedDisease(BaseModel):
    disease: Disease
    score: float
    confidence: float
    matched_symptom_count: int


class TriageRecord(BaseModel):
    """
    Ephemeral summary of one triage request. Discarded once the advisory is
    composed; only ever handed to the query logger.
    """
    user_id: str
    raw_text: str
    language: str
    phrases: List[str] = []
    matched_symptom_ids: List[str] = []
    suggested_disease_ids: List[str] = []
    confidence_score: float = 0.0
    emergency_triggered: bool = False
    outcome: str = "result"
    timestamp: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )


# ─────────────────────────────────────────
# ADVISORY PAYLOADS (user-facing)
# ─────────────────────────────────────────

class MatchedSymptomSummary(BaseModel):
    id: str
    name: str
    severity: int


class SuggestedDisease(BaseModel):
    id: str
    name: str
    confidence_score: float
    severity_level: int
    when_to_seek_help: Optional[str] = None


class EmergencyPayload(BaseModel):
    type: Literal["emergency"] = "emergency"
    language: str
    severity: str
    message: str
    matched_keyword: Optional[str] = None


class ErrorPayload(BaseModel):
    type: Literal["error"] = "error"
    language: str
    message: str
    errors: List[str] = []


class RateLimitedPayload(BaseModel):
    type: Literal["rate_limited"] = "rate_limited"
    language: str
    message: str
    reset_time: datetime.datetime


class NoMatchPayload(BaseModel):
    type: Literal["no_match"] = "no_match"
    language: str
    message: str


class ResultPayload(BaseModel):
    type: Literal["result"] = "result"
    language: str
    matched_symptoms: List[MatchedSymptomSummary]
    suggested_diseases: List[SuggestedDisease]
    advisory_text: str


AdvisoryPayload = Annotated[
    Union[EmergencyPayload, ErrorPayload, RateLimitedPayload, NoMatchPayload, ResultPayload],
    Field(discriminator="type"),
]


class DiseaseInfo(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    prevention_tips: Optional[str] = None
    when_to_seek_help: Optional[str] = None
    emergency_signs: Optional[str] = None
    severity_level: int
    is_contagious: bool
    language: str


# ─────────────────────────────────────────
# HTTP REQUESTS
# ─────────────────────────────────────────

class TriageRequest(BaseModel):
    user_id: Optional[str] = None
    message: str
    language: str = "auto"


class SymptomCheckerRequest(BaseModel):
    """
    Structured variant: the client already sends the symptom list.
    Entries are not coerced so the input validator can reject non-text ones.
    """
    user_id: Optional[str] = None
    symptoms: List[Any]
    language: str = "en"
