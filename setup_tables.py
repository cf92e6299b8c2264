#!/usr/bin/env python3
"""
DynamoDB Table Setup Script

Creates the DynamoDB tables used by the triage service:
- rate_limits: one item per accepted request, expired through TTL
- symptoms / diseases / disease_symptoms: the symptom catalog
- emergency_keywords: extra emergency keywords managed outside the code

Table names come from the same environment variables the service reads.
All tables use PAY_PER_REQUEST billing mode. ``--seed`` loads the bundled
catalog JSON into the catalog tables.

Usage:
    python setup_tables.py              # create missing tables
    python setup_tables.py --seed       # create, then load the catalog
    python setup_tables.py --validate   # exit 1 if any table is missing
"""

import boto3
import sys
import os
import json
from decimal import Decimal
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from typing import List, Dict, Any, Optional

from config_validator import TriageSettings
from logging_config import setup_logging, get_logger, log_error
from triage.catalog import DEFAULT_CATALOG_PATH

setup_logging()
logger = get_logger(__name__)

BATCH_WRITE_LIMIT = 25
ACTIVE_POLL_SECONDS = 2
ACTIVE_MAX_POLLS = 30


def get_dynamodb_client(region: Optional[str] = None):
    return boto3.client('dynamodb', region_name=region or os.getenv('AWS_REGION', 'us-east-1'))


def table_definitions(settings: TriageSettings) -> List[Dict[str, Any]]:
    """
    Key schema for every table, keyed by the configured table names.
    Each entry: name, hash key, optional range key, optional TTL attribute.
    """
    return [
        {
            'name': settings.rate_limit_table_name or 'rate_limits',
            'hash_key': 'user_id',
            'range_key': 'requested_at',
            'ttl_attribute': 'expires_at',
        },
        {'name': settings.symptoms_table_name, 'hash_key': 'id'},
        {'name': settings.diseases_table_name, 'hash_key': 'id'},
        {
            'name': settings.disease_symptoms_table_name,
            'hash_key': 'disease_id',
            'range_key': 'symptom_id',
        },
        {
            'name': settings.emergency_keywords_table_name or 'emergency_keywords',
            'hash_key': 'keyword',
        },
    ]


def table_exists(client, table_name: str) -> bool:
    try:
        client.describe_table(TableName=table_name)
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceNotFoundException':
            return False
        raise
    return True


def _string_keys(hash_key: str, range_key: Optional[str]):
    keys = [(hash_key, 'HASH')] + ([(range_key, 'RANGE')] if range_key else [])
    key_schema = [{'AttributeName': name, 'KeyType': kind} for name, kind in keys]
    attributes = [{'AttributeName': name, 'AttributeType': 'S'} for name, _ in keys]
    return key_schema, attributes


def create_table(
    client,
    name: str,
    hash_key: str,
    range_key: Optional[str] = None,
    ttl_attribute: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create one table with string keys. When ``ttl_attribute`` is given, TTL
    is enabled once the table is active (DynamoDB rejects it before that).
    """
    key_schema, attributes = _string_keys(hash_key, range_key)
    logger.info(f"Creating table {name} (keys: {[k['AttributeName'] for k in key_schema]})")

    response = client.create_table(
        TableName=name,
        KeySchema=key_schema,
        AttributeDefinitions=attributes,
        BillingMode='PAY_PER_REQUEST',
        Tags=[
            {'Key': 'Application', 'Value': 'SymptomTriageAPI'},
            {'Key': 'Environment', 'Value': os.getenv('ENVIRONMENT', 'development')},
        ]
    )

    if ttl_attribute:
        wait_for_table_active(client, name)
        client.update_time_to_live(
            TableName=name,
            TimeToLiveSpecification={'Enabled': True, 'AttributeName': ttl_attribute}
        )
        logger.info(f"TTL enabled on {name}.{ttl_attribute}")

    return response


def wait_for_table_active(client, table_name: str, max_attempts: int = ACTIVE_MAX_POLLS):
    client.get_waiter('table_exists').wait(
        TableName=table_name,
        WaiterConfig={'Delay': ACTIVE_POLL_SECONDS, 'MaxAttempts': max_attempts}
    )


def missing_tables(client, settings: TriageSettings) -> List[str]:
    """Configured tables that do not exist in the target account/region."""
    names = [definition['name'] for definition in table_definitions(settings)]
    return [name for name in names if not table_exists(client, name)]


def setup_all_tables(settings: TriageSettings, client=None, skip_existing: bool = True) -> List[str]:
    """
    Create every configured table that does not exist yet and wait until the
    new ones are active.

    Returns:
        Names of the tables created
    """
    client = client or get_dynamodb_client(settings.aws_region)
    created, skipped = [], []

    for definition in table_definitions(settings):
        name = definition['name']
        if skip_existing and table_exists(client, name):
            skipped.append(name)
            continue
        try:
            create_table(client, **definition)
        except ClientError as e:
            if e.response['Error']['Code'] != 'ResourceInUseException':
                log_error(logger, e, f"Could not create table {name}")
                raise
            skipped.append(name)
        else:
            created.append(name)

    for name in created:
        wait_for_table_active(client, name)

    print(f"Region {settings.aws_region}: created {len(created)}, skipped {len(skipped)}")
    for name in created:
        print(f"  + {name}")
    for name in skipped:
        print(f"  = {name} (exists)")

    return created


def batch_put(client, table_name: str, rows: List[Dict[str, Any]]) -> int:
    """
    Write ``rows`` with batch_write_item, 25 at a time. Unprocessed items of a
    batch are resubmitted once; None attributes are dropped.

    Returns:
        Number of rows submitted
    """
    serializer = TypeSerializer()
    requests = [
        {'PutRequest': {'Item': {k: serializer.serialize(v) for k, v in row.items() if v is not None}}}
        for row in rows
    ]

    for start in range(0, len(requests), BATCH_WRITE_LIMIT):
        response = client.batch_write_item(
            RequestItems={table_name: requests[start:start + BATCH_WRITE_LIMIT]}
        )
        if response.get('UnprocessedItems'):
            client.batch_write_item(RequestItems=response['UnprocessedItems'])

    logger.info(f"Seeded {len(requests)} item(s) into {table_name}")
    return len(requests)


def seed_catalog_tables(settings: TriageSettings, client=None, path: Optional[str] = None) -> Dict[str, int]:
    """Load the catalog JSON into the symptoms, diseases and disease_symptoms tables."""
    client = client or get_dynamodb_client(settings.aws_region)
    with open(path or settings.catalog_path or DEFAULT_CATALOG_PATH, encoding='utf-8') as f:
        data = json.load(f, parse_float=Decimal)

    targets = {
        'symptoms': settings.symptoms_table_name,
        'diseases': settings.diseases_table_name,
        'disease_symptoms': settings.disease_symptoms_table_name,
    }
    return {
        table: batch_put(client, table, data.get(section, []))
        for section, table in targets.items()
    }


def main():
    import argparse
    from dotenv import load_dotenv

    load_dotenv()

    parser = argparse.ArgumentParser(description='Create DynamoDB tables for the Symptom Triage API')
    parser.add_argument('--region', default=None,
                        help='AWS region (default: AWS_REGION env var or us-east-1)')
    parser.add_argument('--force', action='store_true',
                        help='Call create_table even for tables that already exist')
    parser.add_argument('--validate', action='store_true',
                        help='Only report missing tables, create nothing')
    parser.add_argument('--seed', action='store_true',
                        help='Load the bundled catalog JSON into the catalog tables after setup')
    args = parser.parse_args()

    settings = TriageSettings.from_env()
    if args.region:
        settings.aws_region = args.region

    logger.info(
        f"Table setup: region={settings.aws_region} validate={args.validate} "
        f"force={args.force} seed={args.seed}"
    )

    try:
        client = get_dynamodb_client(settings.aws_region)

        if args.validate:
            missing = missing_tables(client, settings)
            if missing:
                print(f"Missing tables: {', '.join(missing)}")
                sys.exit(1)
            print("All required tables exist")
            sys.exit(0)

        setup_all_tables(settings, client=client, skip_existing=not args.force)
        if args.seed:
            seed_catalog_tables(settings, client=client)
    except ClientError as e:
        log_error(logger, e, "DynamoDB table setup failed")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
