import asyncio
import logging
from kview.connectors.memory import MemoryStreamClient
from kview.runner import Runner
from kview.sinks import ConsoleSink
from kview.utils.logging import setup_logging

# Setup Logging
setup_logging(level=logging.INFO)

STREAM = "demo-stream"
SHARD = "shardId-000000000000"

async def produce(client: MemoryStreamClient, count: int) -> None:
    """Append one record every 0.3s while the viewer tails the shard."""
    for i in range(count):
        await asyncio.sleep(0.3)
        client.put_record(STREAM, SHARD, f"event {i}".encode())
    # Invalid UTF-8 is rendered with a replacement character
    client.put_record(STREAM, SHARD, b"raw \xff\xfe bytes")

async def main() -> None:
    client = MemoryStreamClient()
    client.create_stream(STREAM)

    # Backlog written before the viewer starts is skipped (LATEST)
    client.put_record(STREAM, SHARD, b"old event, never shown")

    runner = Runner(client, ConsoleSink(), STREAM, poll_interval=0.5)
    producer = asyncio.create_task(produce(client, 5))

    try:
        await asyncio.wait_for(runner.run_async(), timeout=3.0)
    except asyncio.TimeoutError:
        print("Stopped viewer.")
    await producer

    print(f"Polls: {runner.tailer.iterations}, records shown: {runner.tailer.records_emitted}")

if __name__ == "__main__":
    asyncio.run(main())
