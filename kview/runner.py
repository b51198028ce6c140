import asyncio
from typing import Callable, Optional

from kview.connectors.base import StreamClient
from kview.cursor import get_initial_cursor
from kview.shards import select_shard
from kview.sinks import RecordSink
from kview.tailer import ShardTailer
from kview.utils.logging import get_logger

SEPARATOR = "========================================="

# Clear screen, then move the cursor to the top left.
CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"


class Runner:
    """
    Drives one viewer session: select the first shard, bootstrap a LATEST
    iterator and tail it until an error or cancellation.

    Diagnostics go through `console`; in quiet mode only record payloads are
    written, and protocol behaviour is identical.
    """

    def __init__(self,
                 client: StreamClient,
                 sink: RecordSink,
                 stream_name: str,
                 poll_interval: float,
                 quiet: bool = False,
                 console: Callable[[str], None] = print):
        self.client = client
        self.sink = sink
        self.stream_name = stream_name
        self.poll_interval = poll_interval
        self.quiet = quiet
        self.console = console
        self.tailer: Optional[ShardTailer] = None
        self.logger = get_logger("Runner")

    def run(self) -> None:
        """Run the session synchronously (blocks until an error)."""
        asyncio.run(self.run_async())

    async def run_async(self) -> None:
        try:
            shard = await select_shard(self.client, self.stream_name)
            self._say(f"Shard ID: {shard.shard_id}")

            iterator = await get_initial_cursor(self.client, self.stream_name, shard.shard_id)
            self._say(SEPARATOR)

            self.tailer = ShardTailer(
                self.client,
                self.sink,
                iterator,
                poll_interval=self.poll_interval,
            )
            await self.tailer.run()
        finally:
            await self.client.close()

    def _say(self, line: str) -> None:
        if not self.quiet:
            self.console(line)
