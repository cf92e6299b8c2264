"""
Symptom/disease catalog readers.

The catalog is reference data: it is read once and treated as immutable for
the life of the process. Two sources share the same query surface:

- InMemoryCatalog: the JSON seed bundled in ``triage/data/catalog.json``
- DynamoDBCatalog: the ``symptoms``, ``diseases`` and ``disease_symptoms`` tables

Rows in both sources are flat, with localized variants as suffixed fields
(``name_hi``, ``when_to_seek_help_te``).
"""

import json
import os
import threading
import time
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError
from pydantic import ValidationError

from logging_config import get_logger, log_aws_service_call
from models import Disease, DiseaseSymptomAssociation, Symptom

from .localization import split_localized_fields

logger = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"

SYMPTOM_LOCALIZED_FIELDS = ("name",)
DISEASE_LOCALIZED_FIELDS = (
    "name", "description", "prevention_tips", "when_to_seek_help", "emergency_signs",
)

_deserializer = TypeDeserializer()


class CatalogError(Exception):
    """Raised when the catalog cannot be loaded or read."""
    pass


def decimal_to_native(obj):
    """Convert DynamoDB Decimals into native Python numbers."""
    if isinstance(obj, list):
        return [decimal_to_native(i) for i in obj]
    elif isinstance(obj, dict):
        return {k: decimal_to_native(v) for k, v in obj.items()}
    elif isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        else:
            return float(obj)
    else:
        return obj


def scan_table(client, table_name: str) -> List[Dict[str, Any]]:
    """
    Scan a whole table with the low-level client, following pagination.

    Returns:
        Items as plain dicts with native Python values
    """
    items = []
    paginator = client.get_paginator('scan')
    for page in paginator.paginate(TableName=table_name):
        for item in page.get('Items', []):
            parsed = {k: _deserializer.deserialize(v) for k, v in item.items()}
            items.append(decimal_to_native(parsed))
    return items


def symptom_from_row(row: Dict[str, Any]) -> Symptom:
    return Symptom(
        id=str(row['id']),
        name=row['name'],
        localized=split_localized_fields(row, SYMPTOM_LOCALIZED_FIELDS),
        body_part=row.get('body_part'),
        severity_indicator=int(row.get('severity_indicator') or 1),
    )


def disease_from_row(row: Dict[str, Any]) -> Disease:
    return Disease(
        id=str(row['id']),
        name=row['name'],
        description=row.get('description'),
        prevention_tips=row.get('prevention_tips'),
        when_to_seek_help=row.get('when_to_seek_help'),
        emergency_signs=row.get('emergency_signs'),
        localized=split_localized_fields(row, DISEASE_LOCALIZED_FIELDS),
        severity_level=int(row.get('severity_level') or 1),
        is_contagious=bool(row.get('is_contagious', False)),
    )


def association_from_row(row: Dict[str, Any]) -> DiseaseSymptomAssociation:
    return DiseaseSymptomAssociation(
        disease_id=str(row['disease_id']),
        symptom_id=str(row['symptom_id']),
        frequency=row.get('frequency'),
        severity=row.get('severity'),
    )


class SymptomCatalog:
    """
    Read-only query surface over loaded catalog records.

    Subclasses implement ``_load()`` returning the three row lists; loading
    happens once, on first use, under a lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._loaded = False
        self._symptoms: List[Symptom] = []
        self._diseases: Dict[str, Disease] = {}
        self._associations: List[DiseaseSymptomAssociation] = []

    def _load(self):
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            symptom_rows, disease_rows, association_rows = self._load()
            try:
                self._symptoms = [symptom_from_row(r) for r in symptom_rows]
                self._diseases = {d.id: d for d in (disease_from_row(r) for r in disease_rows)}
                self._associations = [association_from_row(r) for r in association_rows]
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                raise CatalogError(f"Malformed catalog record: {e}") from e
            self._loaded = True
            logger.info(
                f"Catalog loaded: {len(self._symptoms)} symptoms, "
                f"{len(self._diseases)} diseases, {len(self._associations)} associations"
            )

    def symptoms(self) -> List[Symptom]:
        self._ensure_loaded()
        return list(self._symptoms)

    def disease(self, disease_id: str) -> Optional[Disease]:
        self._ensure_loaded()
        return self._diseases.get(disease_id)

    def associations_for(self, symptom_ids: Iterable[str]) -> List[DiseaseSymptomAssociation]:
        """Associations touching any of ``symptom_ids``, in catalog order."""
        self._ensure_loaded()
        wanted = set(symptom_ids)
        return [a for a in self._associations if a.symptom_id in wanted]


class InMemoryCatalog(SymptomCatalog):

    def __init__(self, symptoms=(), diseases=(), associations=()):
        super().__init__()
        self._rows = (list(symptoms), list(diseases), list(associations))

    def _load(self):
        return self._rows

    @classmethod
    def from_json(cls, path=None) -> "InMemoryCatalog":
        """
        Load the catalog from a JSON document with ``symptoms``, ``diseases``
        and ``disease_symptoms`` arrays.
        """
        path = Path(path) if path else DEFAULT_CATALOG_PATH
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Could not read catalog file {path}: {e}") from e

        return cls(
            symptoms=data.get('symptoms', []),
            diseases=data.get('diseases', []),
            associations=data.get('disease_symptoms', []),
        )


class DynamoDBCatalog(SymptomCatalog):
    """Catalog backed by three DynamoDB tables, scanned once on first use."""

    def __init__(
        self,
        symptoms_table: str = 'symptoms',
        diseases_table: str = 'diseases',
        associations_table: str = 'disease_symptoms',
        region: Optional[str] = None,
        timeout_seconds: float = 5.0,
        client=None,
    ):
        super().__init__()
        self.tables = (symptoms_table, diseases_table, associations_table)
        self._client = client or boto3.client(
            'dynamodb',
            region_name=region or os.getenv('AWS_REGION', 'us-east-1'),
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={'max_attempts': 2},
            ),
        )

    def _load(self):
        rows = []
        for table_name in self.tables:
            start_time = time.time()
            try:
                items = scan_table(self._client, table_name)
            except (ClientError, BotoCoreError) as e:
                log_aws_service_call(
                    logger, service='dynamodb', operation='scan', success=False,
                    duration_ms=(time.time() - start_time) * 1000, error=e,
                    extra={'table_name': table_name},
                )
                raise CatalogError(f"Failed to scan {table_name}: {e}") from e

            log_aws_service_call(
                logger, service='dynamodb', operation='scan', success=True,
                duration_ms=(time.time() - start_time) * 1000,
                extra={'table_name': table_name, 'item_count': len(items)},
            )
            rows.append(items)
        return tuple(rows)
