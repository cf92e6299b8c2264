"""
Per-user sliding-window rate limiting.

The limiter itself is stateless; counts live in an injected store so the
same logic runs against a process-local dict (tests, single instance) or a
DynamoDB table shared by every instance behind the load balancer.
"""

import os
import threading
import time
import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterator, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError

from logging_config import get_logger, log_error, log_aws_service_call
from models import RateLimitStatus

logger = get_logger(__name__)

DEFAULT_WINDOW_SECONDS = 3600
DEFAULT_MAX_REQUESTS = 20


class RateLimitStoreError(Exception):
    """Raised by a store when it cannot read or write counts."""
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RateLimitStore(ABC):
    """Counter store interface."""

    @abstractmethod
    def record(self, user_id: str, at: datetime) -> None:
        """Record one accepted request for ``user_id`` at ``at``."""

    @abstractmethod
    def count(self, user_id: str, window_start: datetime) -> int:
        """Number of recorded requests for ``user_id`` at or after ``window_start``."""

    @abstractmethod
    def reset(self, user_id: str) -> None:
        """Forget every recorded request for ``user_id``."""


class InMemoryRateLimitStore(RateLimitStore):
    """
    Thread-safe in-process store. Timestamps older than ``retention`` are
    pruned on write so the per-user lists stay bounded.
    """

    def __init__(self, retention: timedelta = timedelta(seconds=DEFAULT_WINDOW_SECONDS)):
        self._retention = retention
        self._requests: Dict[str, List[datetime]] = defaultdict(list)
        self._lock = threading.Lock()

    def record(self, user_id: str, at: datetime) -> None:
        with self._lock:
            cutoff = at - self._retention
            kept = [t for t in self._requests[user_id] if t >= cutoff]
            kept.append(at)
            self._requests[user_id] = kept

    def count(self, user_id: str, window_start: datetime) -> int:
        with self._lock:
            return sum(1 for t in self._requests.get(user_id, ()) if t >= window_start)

    def reset(self, user_id: str) -> None:
        with self._lock:
            self._requests.pop(user_id, None)


class DynamoDBRateLimitStore(RateLimitStore):
    """
    One item per accepted request.

    Schema:
    - Partition Key: user_id (S)
    - Sort Key: requested_at (S), ISO-8601 UTC timestamp plus a random suffix
    - expires_at (N): epoch seconds, used as the table TTL attribute
    """

    def __init__(
        self,
        table_name: str,
        region: Optional[str] = None,
        ttl_seconds: int = DEFAULT_WINDOW_SECONDS * 2,
        timeout_seconds: float = 2.0,
        client=None,
    ):
        self.table_name = table_name
        self.ttl_seconds = ttl_seconds
        self._client = client or boto3.client(
            'dynamodb',
            region_name=region or os.getenv('AWS_REGION', 'us-east-1'),
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={'max_attempts': 1},
            ),
        )

    @staticmethod
    def _sort_key(at: datetime) -> str:
        return at.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')

    def _call(self, operation: str, **kwargs):
        start_time = time.time()
        try:
            response = getattr(self._client, operation)(TableName=self.table_name, **kwargs)
        except (ClientError, BotoCoreError) as e:
            log_aws_service_call(
                logger, service='dynamodb', operation=operation, success=False,
                duration_ms=(time.time() - start_time) * 1000, error=e,
                extra={'table_name': self.table_name},
            )
            raise RateLimitStoreError(f"DynamoDB {operation} failed: {e}") from e

        logger.debug(
            f"dynamodb.{operation} on {self.table_name} "
            f"({(time.time() - start_time) * 1000:.2f}ms)"
        )
        return response

    def record(self, user_id: str, at: datetime) -> None:
        self._call(
            'put_item',
            Item={
                'user_id': {'S': user_id},
                'requested_at': {'S': f"{self._sort_key(at)}#{uuid.uuid4().hex[:8]}"},
                'expires_at': {'N': str(int(at.timestamp()) + self.ttl_seconds)},
            },
        )

    def _query_pages(self, **kwargs) -> Iterator[dict]:
        """Yield every page of a query, following LastEvaluatedKey."""
        while True:
            response = self._call('query', **kwargs)
            yield response
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return
            kwargs['ExclusiveStartKey'] = last_key

    def count(self, user_id: str, window_start: datetime) -> int:
        pages = self._query_pages(
            KeyConditionExpression='user_id = :uid AND requested_at >= :start',
            ExpressionAttributeValues={
                ':uid': {'S': user_id},
                ':start': {'S': self._sort_key(window_start)},
            },
            Select='COUNT',
        )
        return sum(page.get('Count', 0) for page in pages)

    def reset(self, user_id: str) -> None:
        pages = self._query_pages(
            KeyConditionExpression='user_id = :uid',
            ExpressionAttributeValues={':uid': {'S': user_id}},
            ProjectionExpression='user_id, requested_at',
        )
        # Every page is read before the first delete
        keys = [item for page in pages for item in page.get('Items', [])]
        for key in keys:
            self._call('delete_item', Key=key)


class RateLimiter:
    """
    Sliding-window limiter. Every check re-evaluates against "now", so the
    window start moves continuously rather than resetting on the hour.
    Store failures fail open.
    """

    def __init__(
        self,
        store: RateLimitStore,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.clock = clock

    def check_limit(
        self,
        user_id: str,
        window_seconds: Optional[int] = None,
        max_requests: Optional[int] = None,
    ) -> RateLimitStatus:
        window = timedelta(seconds=window_seconds or self.window_seconds)
        limit = max_requests or self.max_requests
        now = self.clock()

        try:
            count = self.store.count(user_id, now - window)
        except Exception as e:
            log_error(logger, e, "Rate limit store unavailable, allowing request",
                      {'user_id': user_id})
            return RateLimitStatus(allowed=True, remaining=limit, reset_time=now + window)

        return RateLimitStatus(
            allowed=count < limit,
            remaining=max(0, limit - count),
            reset_time=now + window,
        )

    def record_request(self, user_id: str) -> None:
        """Count an accepted request. A store failure only loses this one count."""
        try:
            self.store.record(user_id, self.clock())
        except Exception as e:
            log_error(logger, e, "Could not record request in rate limit store",
                      {'user_id': user_id})

    def reset(self, user_id: str) -> None:
        self.store.reset(user_id)
