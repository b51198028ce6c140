from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional
from kview.models import RecordBatch, ShardDescriptor


class ShardIteratorType(str, Enum):
    """Where a new shard iterator is positioned."""
    LATEST = "LATEST"
    TRIM_HORIZON = "TRIM_HORIZON"


class StreamClient(ABC):
    """
    Abstract interface for the remote log-stream service.

    Implementations raise StreamServiceError for transport/service failures
    and ProtocolViolationError when a response lacks a required field.
    """

    @abstractmethod
    async def describe_stream(self, stream_name: str) -> List[ShardDescriptor]:
        """Return the stream's shards in the order the service reports them."""
        pass

    @abstractmethod
    async def get_shard_iterator(self,
                                 stream_name: str,
                                 shard_id: str,
                                 iterator_type: ShardIteratorType = ShardIteratorType.LATEST) -> str:
        """Obtain a fresh iterator token for a shard."""
        pass

    @abstractmethod
    async def get_records(self, shard_iterator: str, limit: Optional[int] = None) -> RecordBatch:
        """
        Exchange an iterator token for a batch of records and the next token.
        The given token must not be used again afterwards.
        """
        pass

    async def close(self) -> None:
        pass
