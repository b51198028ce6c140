import json
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO
from kview.models import StreamRecord

class RecordSink(ABC):
    """Destination for records read from a shard, written one at a time in order."""

    @abstractmethod
    async def write(self, record: StreamRecord) -> None:
        pass


class ConsoleSink(RecordSink):
    """Writes each payload as one line of lossy UTF-8 text."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    async def write(self, record: StreamRecord) -> None:
        out = self.stream or sys.stdout
        out.write(f"{record.text()}\n")
        out.flush()


class JsonLinesSink(RecordSink):
    """Writes each record as a JSON object with its Kinesis metadata."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    async def write(self, record: StreamRecord) -> None:
        out = self.stream or sys.stdout
        out.write(json.dumps(record.to_display_dict(), ensure_ascii=False) + "\n")
        out.flush()


SINKS = {
    "text": ConsoleSink,
    "json": JsonLinesSink,
}
