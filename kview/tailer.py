import asyncio
from typing import Awaitable, Callable, Optional
from kview.connectors.base import StreamClient
from kview.settings import DEFAULT_POLL_INTERVAL
from kview.sinks import RecordSink
from kview.utils.logging import get_logger

class ShardTailer:
    """
    Polls a single shard forever, starting from a bootstrapped iterator.

    Each iteration exchanges the held iterator for a batch of records and a
    replacement iterator, writes the records to the sink in order, swaps in
    the replacement and pauses for `poll_interval` seconds. The pause is
    unconditional, whatever the batch size.

    There is no internal stop condition. Any failure raised by the client
    (StreamServiceError, ProtocolViolationError) ends the loop and
    propagates; nothing is retried.
    """

    def __init__(self,
                 client: StreamClient,
                 sink: RecordSink,
                 shard_iterator: str,
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.client = client
        self.sink = sink
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._iterator: Optional[str] = shard_iterator
        self.iterations = 0
        self.records_emitted = 0
        self.logger = get_logger("ShardTailer")

    async def poll_once(self) -> int:
        """
        Run one Fetching step: consume the held iterator, emit the batch and
        store the replacement. Returns the number of records emitted.
        """
        # Take the token out of the slot before the call; it is never reused,
        # even if the call fails.
        iterator, self._iterator = self._iterator, None
        if iterator is None:
            raise RuntimeError("ShardTailer has no iterator; a previous fetch failed")

        batch = await self.client.get_records(iterator)

        for record in batch.records:
            await self.sink.write(record)

        self._iterator = batch.next_iterator
        self.iterations += 1
        self.records_emitted += len(batch.records)

        self.logger.debug(
            f"Fetched {len(batch.records)} record(s), "
            f"millis behind latest: {batch.millis_behind_latest}"
        )
        return len(batch.records)

    async def run(self) -> None:
        """Alternate between Fetching and Idle until an error or cancellation."""
        self.logger.info(f"Tailing shard, polling every {self.poll_interval}s")
        while True:
            await self.poll_once()
            await self._sleep(self.poll_interval)
