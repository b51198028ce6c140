from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ShardDescriptor(BaseModel):
    """
    One partition of a stream, as reported by DescribeStream.
    Only shard_id is used for reading; the ranges are kept for display.
    """
    shard_id: str
    parent_shard_id: Optional[str] = None
    starting_hash_key: Optional[str] = None
    ending_hash_key: Optional[str] = None
    starting_sequence_number: Optional[str] = None

    @classmethod
    def from_response(cls, shard: Dict[str, Any]) -> "ShardDescriptor":
        hash_range = shard.get("HashKeyRange", {})
        sequence_range = shard.get("SequenceNumberRange", {})
        return cls(
            shard_id=shard["ShardId"],
            parent_shard_id=shard.get("ParentShardId"),
            starting_hash_key=hash_range.get("StartingHashKey"),
            ending_hash_key=hash_range.get("EndingHashKey"),
            starting_sequence_number=sequence_range.get("StartingSequenceNumber"),
        )


class StreamRecord(BaseModel):
    """
    A single record read from a shard. The payload is opaque bytes.
    """
    data: bytes
    sequence_number: Optional[str] = None
    partition_key: Optional[str] = None
    approximate_arrival_timestamp: Optional[datetime] = None

    @classmethod
    def from_response(cls, record: Dict[str, Any]) -> "StreamRecord":
        return cls(
            data=record.get("Data", b""),
            sequence_number=record.get("SequenceNumber"),
            partition_key=record.get("PartitionKey"),
            approximate_arrival_timestamp=record.get("ApproximateArrivalTimestamp"),
        )

    def text(self) -> str:
        """Payload as UTF-8; invalid byte sequences become U+FFFD."""
        return self.data.decode("utf-8", errors="replace")

    def to_display_dict(self) -> Dict[str, Any]:
        ts = self.approximate_arrival_timestamp
        return {
            "SequenceNumber": self.sequence_number,
            "PartitionKey": self.partition_key,
            "ApproximateArrivalTimestamp": ts.astimezone(timezone.utc).isoformat() if ts else None,
            "Data": self.text(),
        }


class RecordBatch(BaseModel):
    """
    Result of one GetRecords call: the records, in shard order, and the
    iterator to use for the next call.
    """
    records: List[StreamRecord] = Field(default_factory=list)
    next_iterator: str
    millis_behind_latest: Optional[int] = None
