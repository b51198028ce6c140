from kview.connectors.base import StreamClient
from kview.errors import NoShardsError
from kview.models import ShardDescriptor
from kview.utils.logging import get_logger

logger = get_logger("shards")


async def select_shard(client: StreamClient, stream_name: str) -> ShardDescriptor:
    """
    Describe the stream once and return the first shard the service lists.

    No other selection policy is applied: activity, hash ranges and shard id
    ordering are ignored.

    Raises:
        NoShardsError: if the stream has no shards.
        StreamServiceError: on any transport or service failure.
    """
    shards = await client.describe_stream(stream_name)
    if not shards:
        raise NoShardsError(stream_name)

    shard = shards[0]
    logger.info(f"Stream {stream_name} has {len(shards)} shard(s); reading {shard.shard_id}")
    return shard
