import asyncio
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from kview.connectors.base import StreamClient, ShardIteratorType
from kview.errors import ProtocolViolationError, map_client_error
from kview.models import RecordBatch, ShardDescriptor, StreamRecord
from kview.settings import ViewerSettings
from kview.utils.logging import get_logger

logger = get_logger("KinesisStreamClient")

# One attempt per call; errors surface immediately.
NO_RETRY_CONFIG = Config(retries={"max_attempts": 1, "mode": "standard"})


class KinesisStreamClient(StreamClient):
    """
    AWS Kinesis Data Streams implementation of StreamClient.

    boto3 is synchronous; each call runs in a worker thread so the event loop
    only suspends at the network call and at the poll pause.
    """
    def __init__(self, kinesis: Any):
        self.kinesis = kinesis

    @classmethod
    def from_settings(cls, settings: ViewerSettings) -> "KinesisStreamClient":
        kwargs: Dict[str, Any] = {
            "region_name": settings.region,
            "aws_access_key_id": settings.access_key_id,
            "aws_secret_access_key": settings.secret_access_key.get_secret_value(),
            "config": NO_RETRY_CONFIG,
        }
        if settings.session_token:
            kwargs["aws_session_token"] = settings.session_token.get_secret_value()
        if settings.endpoint_url:
            kwargs["endpoint_url"] = settings.endpoint_url
            logger.info(f"Using custom endpoint: {settings.endpoint_url}")
        return cls(boto3.client("kinesis", **kwargs))

    async def _call(self, operation: str, fn: Callable[..., Dict[str, Any]], **kwargs: Any) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except (ClientError, BotoCoreError) as e:
            raise map_client_error(operation, e) from e

    async def describe_stream(self, stream_name: str) -> List[ShardDescriptor]:
        resp = await self._call("DescribeStream", self.kinesis.describe_stream, StreamName=stream_name)
        description = resp.get("StreamDescription")
        if description is None:
            raise ProtocolViolationError("DescribeStream", "StreamDescription")
        return [ShardDescriptor.from_response(shard) for shard in description.get("Shards") or []]

    async def get_shard_iterator(self,
                                 stream_name: str,
                                 shard_id: str,
                                 iterator_type: ShardIteratorType = ShardIteratorType.LATEST) -> str:
        resp = await self._call(
            "GetShardIterator",
            self.kinesis.get_shard_iterator,
            StreamName=stream_name,
            ShardId=shard_id,
            ShardIteratorType=iterator_type.value,
        )
        iterator = resp.get("ShardIterator")
        if not iterator:
            raise ProtocolViolationError("GetShardIterator", "ShardIterator")
        return iterator

    async def get_records(self, shard_iterator: str, limit: Optional[int] = None) -> RecordBatch:
        kwargs: Dict[str, Any] = {"ShardIterator": shard_iterator}
        if limit is not None:
            kwargs["Limit"] = limit
        resp = await self._call("GetRecords", self.kinesis.get_records, **kwargs)

        next_iterator = resp.get("NextShardIterator")
        if not next_iterator:
            # A closed shard ends with no next iterator. Tailing a single
            # open shard never expects that, so treat it as fatal.
            raise ProtocolViolationError("GetRecords", "NextShardIterator")

        return RecordBatch(
            records=[StreamRecord.from_response(r) for r in resp.get("Records", [])],
            next_iterator=next_iterator,
            millis_behind_latest=resp.get("MillisBehindLatest"),
        )

    async def close(self) -> None:
        self.kinesis.close()
