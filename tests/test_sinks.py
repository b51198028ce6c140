import io
import json
import logging
import pytest
from kview.models import StreamRecord
from kview.sinks import ConsoleSink, JsonLinesSink
from kview.utils.logging import ConsoleFormatter, JSONFormatter, get_logger

@pytest.mark.asyncio
async def test_console_sink_one_line_per_record():
    out = io.StringIO()
    sink = ConsoleSink(out)
    for payload in (b"a", b"b\xc3", b"c"):
        await sink.write(StreamRecord(data=payload))
    assert out.getvalue() == "a\nb�\nc\n"

@pytest.mark.asyncio
async def test_json_sink():
    out = io.StringIO()
    await JsonLinesSink(out).write(StreamRecord(data=b"hi", sequence_number="9", partition_key="k"))
    assert json.loads(out.getvalue()) == {
        "SequenceNumber": "9",
        "PartitionKey": "k",
        "ApproximateArrivalTimestamp": None,
        "Data": "hi",
    }

def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord("kview.test", logging.INFO, __file__, 10, msg, None, None)

def test_json_formatter():
    data = json.loads(JSONFormatter().format(_record("hello")))
    assert data["level"] == "INFO"
    assert data["logger"] == "kview.test"
    assert data["message"] == "hello"
    assert data["timestamp"].endswith("Z")

def test_console_formatter():
    line = ConsoleFormatter().format(_record("hello"))
    assert line.endswith("[INFO] [kview.test] hello")

def test_logger_namespace():
    assert get_logger("ShardTailer").name == "kview.ShardTailer"
