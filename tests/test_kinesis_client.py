from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import boto3
import pytest
from botocore.stub import Stubber

from kview.connectors.base import ShardIteratorType
from kview.connectors.kinesis import NO_RETRY_CONFIG, KinesisStreamClient
from kview.errors import ProtocolViolationError, StreamServiceError
from kview.settings import resolve_settings

def _shard(shard_id: str) -> dict:
    return {
        "ShardId": shard_id,
        "HashKeyRange": {"StartingHashKey": "0", "EndingHashKey": "340282366920938463463374607431768211455"},
        "SequenceNumberRange": {"StartingSequenceNumber": "49600000000000000000000000000000000000000000000000000000"},
    }

def _describe_response(shards: list) -> dict:
    return {
        "StreamDescription": {
            "StreamName": "orders",
            "StreamARN": "arn:aws:kinesis:us-east-1:123456789012:stream/orders",
            "StreamStatus": "ACTIVE",
            "Shards": shards,
            "HasMoreShards": False,
            "RetentionPeriodHours": 24,
            "StreamCreationTimestamp": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "EnhancedMonitoring": [],
        }
    }

@pytest.fixture
def stubbed():
    kinesis = boto3.client(
        "kinesis",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(kinesis) as stubber:
        yield KinesisStreamClient(kinesis), stubber
        stubber.assert_no_pending_responses()

@pytest.mark.asyncio
async def test_describe_stream_keeps_service_order(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "describe_stream",
        _describe_response([_shard("shardId-000000000002"), _shard("shardId-000000000001")]),
        {"StreamName": "orders"},
    )
    shards = await client.describe_stream("orders")
    assert [s.shard_id for s in shards] == ["shardId-000000000002", "shardId-000000000001"]

@pytest.mark.asyncio
async def test_describe_stream_not_found(stubbed):
    client, stubber = stubbed
    stubber.add_client_error(
        "describe_stream",
        service_error_code="ResourceNotFoundException",
        service_message="Stream orders not found",
    )
    with pytest.raises(StreamServiceError) as exc:
        await client.describe_stream("orders")
    assert exc.value.code == "ResourceNotFoundException"
    assert exc.value.operation == "DescribeStream"
    assert "Stream orders not found" in str(exc.value)

@pytest.mark.asyncio
async def test_get_shard_iterator_latest(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "get_shard_iterator",
        {"ShardIterator": "AAAAiterator"},
        {"StreamName": "orders", "ShardId": "shardId-000000000000", "ShardIteratorType": "LATEST"},
    )
    token = await client.get_shard_iterator("orders", "shardId-000000000000", ShardIteratorType.LATEST)
    assert token == "AAAAiterator"

@pytest.mark.asyncio
async def test_get_shard_iterator_missing_token(stubbed):
    client, stubber = stubbed
    stubber.add_response("get_shard_iterator", {})
    with pytest.raises(ProtocolViolationError) as exc:
        await client.get_shard_iterator("orders", "shardId-000000000000")
    assert exc.value.field == "ShardIterator"

@pytest.mark.asyncio
async def test_get_records(stubbed):
    client, stubber = stubbed
    arrived = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)
    stubber.add_response(
        "get_records",
        {
            "Records": [
                {"SequenceNumber": "1", "ApproximateArrivalTimestamp": arrived, "Data": b"one", "PartitionKey": "a"},
                {"SequenceNumber": "2", "ApproximateArrivalTimestamp": arrived, "Data": b"\xfftwo", "PartitionKey": "b"},
            ],
            "NextShardIterator": "next-1",
            "MillisBehindLatest": 0,
        },
        {"ShardIterator": "it-0"},
    )
    batch = await client.get_records("it-0")
    assert batch.next_iterator == "next-1"
    assert batch.millis_behind_latest == 0
    assert [r.data for r in batch.records] == [b"one", b"\xfftwo"]
    assert [r.partition_key for r in batch.records] == ["a", "b"]
    assert batch.records[1].text() == "�two"

@pytest.mark.asyncio
async def test_get_records_passes_limit(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "get_records",
        {"Records": [], "NextShardIterator": "next-1"},
        {"ShardIterator": "it-0", "Limit": 25},
    )
    batch = await client.get_records("it-0", limit=25)
    assert batch.records == []

@pytest.mark.asyncio
async def test_get_records_without_next_iterator(stubbed):
    client, stubber = stubbed
    stubber.add_response("get_records", {"Records": []}, {"ShardIterator": "it-0"})
    with pytest.raises(ProtocolViolationError) as exc:
        await client.get_records("it-0")
    assert exc.value.field == "NextShardIterator"

@pytest.mark.asyncio
async def test_get_records_throttled(stubbed):
    client, stubber = stubbed
    stubber.add_client_error(
        "get_records",
        service_error_code="ProvisionedThroughputExceededException",
        service_message="Rate exceeded for shard",
        http_status_code=400,
    )
    with pytest.raises(StreamServiceError) as exc:
        await client.get_records("it-0")
    assert exc.value.code == "ProvisionedThroughputExceededException"

def test_from_settings_builds_client_without_retries():
    settings = resolve_settings({
        "AWS_ACCESS_KEY_ID": "AKIA",
        "AWS_SECRET_ACCESS_KEY": "secret",
        "AWS_DEFAULT_REGION": "ap-southeast-2",
        "AWS_KINESIS_STREAM_NAME": "orders",
        "AWS_SESSION_TOKEN": "session",
        "AWS_ENDPOINT_URL": "http://localhost:4566",
    })
    with patch("kview.connectors.kinesis.boto3.client") as mock_client:
        mock_client.return_value = MagicMock()
        client = KinesisStreamClient.from_settings(settings)

    mock_client.assert_called_once_with(
        "kinesis",
        region_name="ap-southeast-2",
        aws_access_key_id="AKIA",
        aws_secret_access_key="secret",
        config=NO_RETRY_CONFIG,
        aws_session_token="session",
        endpoint_url="http://localhost:4566",
    )
    assert client.kinesis is mock_client.return_value
