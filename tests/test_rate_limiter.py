"""
Unit tests for the sliding-window rate limiter and its stores.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from conftest import FakeClock
from triage.rate_limiter import (
    DynamoDBRateLimitStore,
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitStoreError,
)


def _client_error(operation):
    return ClientError(
        {'Error': {'Code': 'ProvisionedThroughputExceededException', 'Message': 'slow down'}},
        operation,
    )


class TestRateLimiter:
    """Tests for the limiter against the in-memory store"""

    def test_twenty_requests_then_blocked(self, rate_limiter):
        for i in range(20):
            status = rate_limiter.check_limit("user-1")
            assert status.allowed
            assert status.remaining == 20 - i
            rate_limiter.record_request("user-1")

        status = rate_limiter.check_limit("user-1")
        assert not status.allowed
        assert status.remaining == 0

    def test_users_are_independent(self, rate_limiter):
        for _ in range(20):
            rate_limiter.record_request("user-1")

        assert not rate_limiter.check_limit("user-1").allowed
        assert rate_limiter.check_limit("user-2").allowed

    def test_window_slides(self, rate_limiter, clock):
        for _ in range(20):
            rate_limiter.record_request("user-1")
        assert not rate_limiter.check_limit("user-1").allowed

        clock.advance(3601)

        status = rate_limiter.check_limit("user-1")
        assert status.allowed
        assert status.remaining == 20

    def test_partial_window(self, rate_limiter, clock):
        for _ in range(10):
            rate_limiter.record_request("user-1")
        clock.advance(1800)
        for _ in range(10):
            rate_limiter.record_request("user-1")

        assert not rate_limiter.check_limit("user-1").allowed

        # first ten fall out of the window
        clock.advance(1801)
        status = rate_limiter.check_limit("user-1")
        assert status.allowed
        assert status.remaining == 10

    def test_reset_time_is_now_plus_window(self, rate_limiter, clock):
        status = rate_limiter.check_limit("user-1")
        assert status.reset_time == clock() + timedelta(seconds=3600)

    def test_check_does_not_count(self, rate_limiter):
        for _ in range(30):
            rate_limiter.check_limit("user-1")
        assert rate_limiter.check_limit("user-1").remaining == 20

    def test_per_call_overrides(self, rate_limiter):
        for _ in range(3):
            rate_limiter.record_request("user-1")

        assert not rate_limiter.check_limit("user-1", max_requests=3).allowed
        assert rate_limiter.check_limit("user-1").allowed

    def test_reset(self, rate_limiter):
        for _ in range(20):
            rate_limiter.record_request("user-1")

        rate_limiter.reset("user-1")

        assert rate_limiter.check_limit("user-1").remaining == 20

    def test_store_failure_fails_open(self, clock):
        store = MagicMock()
        store.count.side_effect = RateLimitStoreError("down")
        limiter = RateLimiter(store, window_seconds=3600, max_requests=20, clock=clock)

        status = limiter.check_limit("user-1")

        assert status.allowed
        assert status.remaining == 20

    def test_record_failure_is_swallowed(self, clock):
        store = MagicMock()
        store.record.side_effect = RateLimitStoreError("down")
        limiter = RateLimiter(store, clock=clock)

        limiter.record_request("user-1")

        store.record.assert_called_once_with("user-1", clock())


class TestInMemoryRateLimitStore:

    def test_prunes_old_entries_on_write(self):
        store = InMemoryRateLimitStore(retention=timedelta(seconds=60))
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)

        store.record("u", start)
        store.record("u", start + timedelta(seconds=120))

        assert store.count("u", start - timedelta(days=1)) == 1

    def test_unknown_user_counts_zero(self):
        assert InMemoryRateLimitStore().count("nobody", datetime.now(timezone.utc)) == 0


class TestDynamoDBRateLimitStore:

    def test_record_puts_item_with_ttl(self):
        client = MagicMock()
        store = DynamoDBRateLimitStore('rate_limits', ttl_seconds=7200, client=client)
        at = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

        store.record('user-1', at)

        kwargs = client.put_item.call_args.kwargs
        assert kwargs['TableName'] == 'rate_limits'
        item = kwargs['Item']
        assert item['user_id'] == {'S': 'user-1'}
        assert item['requested_at']['S'].startswith('2024-06-01T12:00:00.000000Z#')
        assert item['expires_at'] == {'N': str(int(at.timestamp()) + 7200)}

    def test_count_follows_pagination(self):
        client = MagicMock()
        client.query.side_effect = [
            {'Count': 3, 'LastEvaluatedKey': {'user_id': {'S': 'user-1'}}},
            {'Count': 2},
        ]
        store = DynamoDBRateLimitStore('rate_limits', client=client)

        total = store.count('user-1', datetime(2024, 6, 1, 11, 0, tzinfo=timezone.utc))

        assert total == 5
        assert client.query.call_count == 2
        first = client.query.call_args_list[0].kwargs
        assert first['Select'] == 'COUNT'
        assert first['ExpressionAttributeValues'][':start'] == {'S': '2024-06-01T11:00:00.000000Z'}
        assert 'ExclusiveStartKey' in client.query.call_args_list[1].kwargs

    def test_client_error_becomes_store_error(self):
        client = MagicMock()
        client.query.side_effect = _client_error('Query')
        store = DynamoDBRateLimitStore('rate_limits', client=client)

        with pytest.raises(RateLimitStoreError):
            store.count('user-1', datetime(2024, 6, 1, tzinfo=timezone.utc))

    def test_limiter_over_failing_table_fails_open(self):
        client = MagicMock()
        client.query.side_effect = _client_error('Query')
        client.put_item.side_effect = _client_error('PutItem')
        limiter = RateLimiter(DynamoDBRateLimitStore('rate_limits', client=client), clock=FakeClock())

        assert limiter.check_limit('user-1').allowed
        limiter.record_request('user-1')

    def test_reset_deletes_every_item(self):
        client = MagicMock()
        keys = [
            {'user_id': {'S': 'user-1'}, 'requested_at': {'S': 'a'}},
            {'user_id': {'S': 'user-1'}, 'requested_at': {'S': 'b'}},
        ]
        client.query.return_value = {'Items': keys}
        store = DynamoDBRateLimitStore('rate_limits', client=client)

        store.reset('user-1')

        assert [c.kwargs['Key'] for c in client.delete_item.call_args_list] == keys

    def test_reset_follows_pagination(self):
        client = MagicMock()
        first_page = [{'user_id': {'S': 'user-1'}, 'requested_at': {'S': 'a'}}]
        second_page = [{'user_id': {'S': 'user-1'}, 'requested_at': {'S': 'b'}}]
        client.query.side_effect = [
            {'Items': first_page, 'LastEvaluatedKey': first_page[0]},
            {'Items': second_page},
        ]
        store = DynamoDBRateLimitStore('rate_limits', client=client)

        store.reset('user-1')

        assert client.query.call_args_list[1].kwargs['ExclusiveStartKey'] == first_page[0]
        assert [c.kwargs['Key'] for c in client.delete_item.call_args_list] == first_page + second_page
