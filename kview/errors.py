"""
Exceptions raised by the viewer.

Missing configuration and an empty shard list are expected conditions that
the CLI turns into a clean exit. Everything else is fatal: nothing is retried.
"""
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError


class KviewError(Exception):
    """Base error for the viewer."""

    pass


class MissingConfigError(KviewError):
    """One or more required environment variables are not set."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(", ".join(f"{key} is not set" for key in self.missing))


class InvalidConfigError(KviewError):
    """An optional setting is present but malformed."""

    pass


class NoShardsError(KviewError):
    """The stream exists but reports no shards, so there is nothing to read."""

    def __init__(self, stream_name: str):
        self.stream_name = stream_name
        super().__init__(f"No shards found for stream {stream_name}")


class ProtocolViolationError(KviewError):
    """A service response is missing a field the read protocol requires."""

    def __init__(self, operation: str, field: str):
        self.operation = operation
        self.field = field
        super().__init__(f"{operation} response is missing {field}")


class StreamServiceError(KviewError):
    """Transport or service failure (throttling, permissions, network...)."""

    def __init__(self, operation: str, message: str, code: Optional[str] = None):
        self.operation = operation
        self.code = code
        prefix = f"{operation} failed"
        if code:
            prefix = f"{prefix} [{code}]"
        super().__init__(f"{prefix}: {message}")


def map_client_error(operation: str, e: Exception) -> StreamServiceError:
    """Translate a botocore exception into a StreamServiceError."""
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        return StreamServiceError(operation, error.get("Message", str(e)), code=error.get("Code"))
    if isinstance(e, BotoCoreError):
        return StreamServiceError(operation, str(e), code=type(e).__name__)
    return StreamServiceError(operation, str(e))
