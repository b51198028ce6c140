import asyncio
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from kview.connectors.base import StreamClient, ShardIteratorType
from kview.errors import KviewError, StreamServiceError
from kview.models import RecordBatch, ShardDescriptor, StreamRecord
from kview.utils.logging import get_logger

logger = get_logger("MemoryStreamClient")

class MemoryStreamClient(StreamClient):
    """
    In-memory stand-in for the stream service, for tests and local runs.
    Not persistent across restarts.

    Iterator tokens are opaque and single use: presenting a token that was
    already exchanged raises ExpiredIteratorException.
    """
    def __init__(self):
        # Format: stream_name -> shard_id -> [StreamRecord, ...]
        self._streams: Dict[str, Dict[str, List[StreamRecord]]] = {}

        # Format: token -> (stream_name, shard_id, position)
        self._iterators: Dict[str, Tuple[str, str, int]] = {}

        # Format: operation -> [[calls_to_let_through, error], ...]
        self._failures: Dict[str, List[list]] = {}

        self._sequence = 0
        self._lock = asyncio.Lock()

        # Call log, in order: (operation, argument)
        self.calls: List[Tuple[str, str]] = []
        self.fetch_times: List[float] = []

    def create_stream(self, stream_name: str, shard_ids: Optional[List[str]] = None) -> None:
        """Create a stream. Shards are reported in exactly the given order."""
        if shard_ids is None:
            shard_ids = ["shardId-000000000000"]
        self._streams[stream_name] = {shard_id: [] for shard_id in shard_ids}
        logger.debug(f"Created stream {stream_name} with shards {shard_ids}")

    def put_record(self, stream_name: str, shard_id: str, data: bytes, partition_key: str = "pk") -> str:
        """Append a record to a shard and return its sequence number."""
        shard = self._shard("PutRecord", stream_name, shard_id)
        self._sequence += 1
        sequence_number = str(self._sequence)
        shard.append(StreamRecord(
            data=data,
            sequence_number=sequence_number,
            partition_key=partition_key,
            approximate_arrival_timestamp=datetime.now(timezone.utc),
        ))
        return sequence_number

    def inject_failure(self, operation: str, error: KviewError, after: int = 0) -> None:
        """Make `operation` raise `error` once `after` further calls have succeeded."""
        self._failures.setdefault(operation, []).append([after, error])

    def _raise_injected(self, operation: str) -> None:
        pending = self._failures.get(operation)
        if not pending:
            return
        if pending[0][0] > 0:
            pending[0][0] -= 1
            return
        raise pending.pop(0)[1]

    def _shard(self, operation: str, stream_name: str, shard_id: str) -> List[StreamRecord]:
        stream = self._streams.get(stream_name)
        if stream is None:
            raise StreamServiceError(operation, f"Stream {stream_name} not found",
                                     code="ResourceNotFoundException")
        if shard_id not in stream:
            raise StreamServiceError(operation, f"Shard {shard_id} not found",
                                     code="ResourceNotFoundException")
        return stream[shard_id]

    def _issue(self, stream_name: str, shard_id: str, position: int) -> str:
        token = uuid.uuid4().hex
        self._iterators[token] = (stream_name, shard_id, position)
        return token

    async def describe_stream(self, stream_name: str) -> List[ShardDescriptor]:
        self.calls.append(("DescribeStream", stream_name))
        self._raise_injected("DescribeStream")
        stream = self._streams.get(stream_name)
        if stream is None:
            raise StreamServiceError("DescribeStream", f"Stream {stream_name} not found",
                                     code="ResourceNotFoundException")
        return [ShardDescriptor(shard_id=shard_id) for shard_id in stream]

    async def get_shard_iterator(self,
                                 stream_name: str,
                                 shard_id: str,
                                 iterator_type: ShardIteratorType = ShardIteratorType.LATEST) -> str:
        self.calls.append(("GetShardIterator", f"{shard_id}:{iterator_type.value}"))
        self._raise_injected("GetShardIterator")
        async with self._lock:
            shard = self._shard("GetShardIterator", stream_name, shard_id)
            position = len(shard) if iterator_type == ShardIteratorType.LATEST else 0
            return self._issue(stream_name, shard_id, position)

    async def get_records(self, shard_iterator: str, limit: Optional[int] = None) -> RecordBatch:
        self.calls.append(("GetRecords", shard_iterator))
        self.fetch_times.append(time.monotonic())
        self._raise_injected("GetRecords")
        async with self._lock:
            entry = self._iterators.pop(shard_iterator, None)
            if entry is None:
                raise StreamServiceError("GetRecords", "Iterator has already been used or is unknown",
                                         code="ExpiredIteratorException")
            stream_name, shard_id, position = entry
            shard = self._shard("GetRecords", stream_name, shard_id)

            end = len(shard) if limit is None else min(len(shard), position + limit)
            batch = shard[position:end]
            return RecordBatch(
                records=list(batch),
                next_iterator=self._issue(stream_name, shard_id, end),
                millis_behind_latest=0 if end == len(shard) else 1,
            )
