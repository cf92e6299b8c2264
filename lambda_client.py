"""
AWS Lambda invocation helpers.

The triage service only pushes records out (query logs, safety events), so
the usual path is an ``Event`` invocation: Lambda queues the payload and
returns 202 without running the function inline.
"""

import os
import json
import time
from typing import Dict, Any, Literal, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError

from logging_config import get_logger, log_error, log_aws_service_call

logger = get_logger(__name__)

_lambda_client = None


class LambdaInvocationError(Exception):
    """Custom exception for Lambda invocation errors."""
    pass


def get_lambda_client(timeout_seconds: float = 3.0):
    """
    Shared boto3 Lambda client with bounded connect/read timeouts.

    The client is created once per process; boto3 clients are thread-safe.
    """
    global _lambda_client
    if _lambda_client is None:
        region = os.getenv('AWS_REGION', os.getenv('AWS_DEFAULT_REGION', 'us-east-1'))
        _lambda_client = boto3.client(
            'lambda',
            region_name=region,
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={'max_attempts': 1},
            ),
        )
    return _lambda_client


def invoke_lambda(
    function_arn: str,
    payload: Dict[str, Any],
    invocation_type: Literal['RequestResponse', 'Event'] = 'Event',
    client=None,
) -> Dict[str, Any]:
    """
    Invoke a Lambda function.

    Args:
        function_arn: ARN (or name) of the function
        payload: JSON-serializable payload; datetimes are sent as ISO strings
        invocation_type: 'Event' (default, fire-and-forget) or 'RequestResponse'
        client: Optional boto3 Lambda client

    Returns:
        {'status_code': int} for Event invocations,
        {'status_code': int, 'payload': dict} for RequestResponse

    Raises:
        LambdaInvocationError: If the invocation fails or the function errors
        ValueError: If function_arn is empty or invocation_type is unknown
    """
    if invocation_type not in ('RequestResponse', 'Event'):
        raise ValueError(
            f"Invalid invocation_type: {invocation_type}. "
            "Must be 'RequestResponse' or 'Event'"
        )
    if not function_arn:
        raise ValueError("function_arn must be provided")

    client = client or get_lambda_client()
    log_extra = {'function_arn': function_arn, 'invocation_type': invocation_type}

    start_time = time.time()
    try:
        response = client.invoke(
            FunctionName=function_arn,
            InvocationType=invocation_type,
            Payload=json.dumps(payload, ensure_ascii=False, default=str).encode('utf-8'),
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        log_error(logger, e, "AWS ClientError invoking Lambda",
                  extra={**log_extra, 'error_code': error_code})
        raise LambdaInvocationError(f"Failed to invoke Lambda function ({error_code}): {e}") from e
    except BotoCoreError as e:
        log_error(logger, e, "BotoCoreError invoking Lambda", extra=log_extra)
        raise LambdaInvocationError(f"AWS SDK error: {e}") from e

    duration_ms = (time.time() - start_time) * 1000
    status_code = response.get('StatusCode', 0)
    result: Dict[str, Any] = {'status_code': status_code}

    if invocation_type == 'RequestResponse':
        result['payload'] = _read_payload(response)
        function_error = response.get('FunctionError')
        if function_error:
            log_aws_service_call(
                logger, service='lambda', operation='invoke_function', success=False,
                duration_ms=duration_ms, extra={**log_extra, 'function_error': function_error},
            )
            message = result['payload'].get('errorMessage', 'Unknown error')
            raise LambdaInvocationError(f"Lambda function error ({function_error}): {message}")

    log_aws_service_call(
        logger, service='lambda', operation='invoke_function', success=True,
        duration_ms=duration_ms, extra={**log_extra, 'status_code': status_code},
    )
    return result


def _read_payload(response: Dict[str, Any]) -> Dict[str, Any]:
    stream: Optional[Any] = response.get('Payload')
    if not stream:
        return {}
    try:
        return json.loads(stream.read())
    except json.JSONDecodeError as e:
        raise LambdaInvocationError(f"Invalid JSON in Lambda response: {e}") from e


def invoke_lambda_async(function_arn: str, payload: Dict[str, Any], client=None) -> Dict[str, Any]:
    """Fire-and-forget invocation (InvocationType='Event')."""
    return invoke_lambda(function_arn, payload, invocation_type='Event', client=client)
