"""
Emergency gate.

Runs before anything else touches the message. The static keyword tiers are
plain in-process data so that emergency detection keeps working when every
AWS collaborator is down; the optional table-backed source is consulted only
after both static tiers miss.
"""

import os
import time
from typing import Iterable, List, Optional, Sequence, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError

from logging_config import get_logger, log_error, log_aws_service_call
from models import EmergencyCheck, EmergencyKeyword, EmergencySeverity

from .localization import (
    DEFAULT_LANGUAGE,
    localized_text,
    normalize_text,
    resolve_localized,
    split_localized_fields,
)
from .catalog import scan_table
from .messages import CRITICAL_EMERGENCY_RESPONSES, HIGH_RISK_RESPONSES

logger = get_logger(__name__)


CRITICAL_KEYWORDS = {
    "en": [
        "chest pain", "heart attack", "can't breathe", "cannot breathe",
        "difficulty breathing", "shortness of breath", "choking", "severe bleeding",
        "heavy bleeding", "unconscious", "stroke", "seizure", "suicide", "overdose",
        "poisoning", "anaphylaxis", "severe allergic reaction", "severe burn",
        "broken bone", "head injury",
    ],
    "hi": [
        "सीने में दर्द", "दिल का दौरा", "सांस नहीं आ रही", "सांस लेने में कठिनाई",
        "गंभीर रक्तस्राव", "बेहोश", "लकवा", "दौरा", "आत्महत्या", "ओवरडोज", "जहर",
        "गंभीर जलन", "हड्डी टूटी", "सिर की चोट",
    ],
    "te": [
        "ఛాతీ నొప్పి", "గుండెపోటు", "ఊపిరి రాలేదు", "శ్వాస తీసుకోవడంలో ఇబ్బంది",
        "తీవ్రమైన రక్తస్రావం", "అపస్మారక", "పక్షవాతం", "మూర్ఛ", "ఆత్మహత్య",
        "అధిక మోతాదు", "విషం", "తీవ్రమైన కాలిన గాయం", "ఎముక విరిగింది", "తల గాయం",
    ],
    "ta": [
        "மார்பு வலி", "மாரடைப்பு", "மூச்சு வரவில்லை", "மூச்சு விடுவதில் சிரமம்",
        "கடுமையான இரத்தப்போக்கு", "மயக்கம்", "பக்கவாதம்", "வலிப்பு", "தற்கொலை",
        "அளவுக்கு அதிகமான மருந்து", "விஷம்", "கடுமையான தீக்காயம்", "எலும்பு முறிவு",
        "தலையில் காயம்",
    ],
    "bn": [
        "বুকে ব্যথা", "হার্ট অ্যাটাক", "শ্বাস নিতে পারছি না", "শ্বাস নিতে কষ্ট",
        "তীব্র রক্তক্ষরণ", "অজ্ঞান", "স্ট্রোক", "খিঁচুনি", "আত্মহত্যা", "অতিরিক্ত ডোজ",
        "বিষ", "তীব্র পোড়া", "হাড় ভাঙা", "মাথায় আঘাত",
    ],
    "mr": [
        "छातीत दुखणे", "हृदयविकाराचा झटका", "श्वास घेता येत नाही", "श्वास घेण्यात अडचण",
        "तीव्र रक्तस्राव", "बेशुद्ध", "पक्षाघात", "अपस्मार", "आत्महत्या", "जास्त डोस",
        "विष", "तीव्र भाजणे", "हाड मोडले", "डोक्याला दुखापत",
    ],
}

HIGH_RISK_KEYWORDS = {
    "en": [
        "severe abdominal pain", "blood in stool", "blood in urine", "severe headache",
        "high fever above 103", "persistent vomiting", "severe dehydration",
        "difficulty swallowing", "severe diarrhea", "loss of consciousness",
    ],
    "hi": [
        "गंभीर पेट दर्द", "मल में खून", "पेशाब में खून", "गंभीर सिरदर्द",
        "103 से ऊपर तेज बुखार", "लगातार उल्टी", "गंभीर निर्जलीकरण", "निगलने में कठिनाई",
        "गंभीर दस्त", "होश खोना",
    ],
    "te": [
        "తీవ్రమైన కడుపు నొప్పి", "మలంలో రక్తం", "మూత్రంలో రక్తం", "తీవ్రమైన తలనొప్పి",
        "103 కంటే ఎక్కువ జ్వరం", "నిరంతర వాంతులు", "తీవ్రమైన నిర్జలీకరణ",
        "మింగడంలో ఇబ్బంది", "తీవ్రమైన అతిసారం", "స్పృహ కోల్పోవడం",
    ],
}


def _tier_order(tier: dict, language: str) -> List[str]:
    """
    Languages to walk for one tier: the detected language (English when it
    has no list of its own) first, then every other list in table order.
    """
    first = language if language in tier else DEFAULT_LANGUAGE
    return [first] + [code for code in tier if code != first]


def _scan_tier(text: str, tier: dict, language: str) -> Optional[str]:
    for code in _tier_order(tier, language):
        for keyword in tier[code]:
            if keyword.lower() in text:
                return keyword
    return None


class StaticEmergencyKeywordSource:
    """In-memory keyword source; used for tests and local runs."""

    def __init__(self, keywords: Iterable[EmergencyKeyword] = ()):
        self._keywords = list(keywords)

    def keywords(self) -> List[EmergencyKeyword]:
        return list(self._keywords)


class DynamoDBEmergencyKeywordSource:
    """
    Reads the ``emergency_keywords`` table. Rows are flat: ``keyword``,
    ``keyword_<lang>``, ``severity_level``, ``auto_response``,
    ``auto_response_<lang>``.

    The table is scanned on every call; callers that need caching wrap it.
    """

    def __init__(self, table_name: str, region: Optional[str] = None,
                 timeout_seconds: float = 2.0, client=None):
        self.table_name = table_name
        self._client = client or boto3.client(
            'dynamodb',
            region_name=region or os.getenv('AWS_REGION', 'us-east-1'),
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={'max_attempts': 1},
            ),
        )

    def keywords(self) -> List[EmergencyKeyword]:
        start_time = time.time()
        try:
            rows = scan_table(self._client, self.table_name)
        except (ClientError, BotoCoreError) as e:
            log_aws_service_call(
                logger, service='dynamodb', operation='scan', success=False,
                duration_ms=(time.time() - start_time) * 1000, error=e,
                extra={'table_name': self.table_name},
            )
            raise

        log_aws_service_call(
            logger, service='dynamodb', operation='scan', success=True,
            duration_ms=(time.time() - start_time) * 1000,
            extra={'table_name': self.table_name, 'item_count': len(rows)},
        )

        keywords = []
        for row in rows:
            if not row.get('keyword'):
                continue
            keywords.append(EmergencyKeyword(
                keyword=row['keyword'],
                severity_level=str(row.get('severity_level') or EmergencySeverity.CRITICAL.value),
                auto_response=row.get('auto_response'),
                localized=split_localized_fields(row, ('keyword', 'auto_response')),
            ))
        return keywords


def _check_dynamic(text: str, language: str, keyword_source) -> Optional[EmergencyCheck]:
    for entry in keyword_source.keywords():
        keyword = resolve_localized(entry, 'keyword', language)
        if not keyword or normalize_text(keyword) not in text:
            continue

        severity = (entry.severity_level or EmergencySeverity.CRITICAL.value).lower()
        fallback_table = (
            HIGH_RISK_RESPONSES if severity == EmergencySeverity.HIGH.value
            else CRITICAL_EMERGENCY_RESPONSES
        )
        response_text = (
            resolve_localized(entry, 'auto_response', language)
            or localized_text(fallback_table, language)
        )
        return EmergencyCheck(
            is_emergency=True,
            severity=severity,
            matched_keyword=keyword,
            response_text=response_text,
        )
    return None


def check_emergency(text: str, language: str, keyword_source=None) -> EmergencyCheck:
    """
    Escalating keyword check: critical tier, then high-risk tier, then the
    optional dynamic source. First match wins.

    Args:
        text: Raw user text
        language: Detected language code; picks the list walked first and the
                  language of the response template
        keyword_source: Optional object with ``keywords() -> List[EmergencyKeyword]``

    Returns:
        EmergencyCheck; ``is_emergency`` is False when nothing matched or the
        dynamic source failed.
    """
    normalized = normalize_text(text)
    if not normalized:
        return EmergencyCheck(is_emergency=False)

    tiers: Sequence[Tuple[str, dict, dict]] = (
        (EmergencySeverity.CRITICAL.value, CRITICAL_KEYWORDS, CRITICAL_EMERGENCY_RESPONSES),
        (EmergencySeverity.HIGH.value, HIGH_RISK_KEYWORDS, HIGH_RISK_RESPONSES),
    )
    for severity, keywords, responses in tiers:
        matched = _scan_tier(normalized, keywords, language)
        if matched:
            return EmergencyCheck(
                is_emergency=True,
                severity=severity,
                matched_keyword=matched,
                response_text=localized_text(responses, language),
            )

    if keyword_source is None:
        return EmergencyCheck(is_emergency=False)

    try:
        dynamic = _check_dynamic(normalized, language, keyword_source)
    except Exception as e:
        log_error(logger, e, "Dynamic emergency keyword lookup failed, treating as no match")
        return EmergencyCheck(is_emergency=False)

    return dynamic or EmergencyCheck(is_emergency=False)
