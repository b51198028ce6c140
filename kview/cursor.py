from kview.connectors.base import StreamClient, ShardIteratorType
from kview.utils.logging import get_logger

logger = get_logger("cursor")


async def get_initial_cursor(client: StreamClient, stream_name: str, shard_id: str) -> str:
    """
    Request the starting iterator for a shard, positioned at the tip.

    The returned token only ever yields records appended after this call.
    A response without a token raises ProtocolViolationError; transport
    errors raise StreamServiceError.
    """
    token = await client.get_shard_iterator(stream_name, shard_id, ShardIteratorType.LATEST)
    logger.debug(f"Obtained {ShardIteratorType.LATEST.value} iterator for {shard_id}")
    return token
