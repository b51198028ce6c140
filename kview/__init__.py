from kview.errors import (
    KviewError,
    MissingConfigError,
    InvalidConfigError,
    NoShardsError,
    ProtocolViolationError,
    StreamServiceError,
)
from kview.models import ShardDescriptor, StreamRecord, RecordBatch
from kview.settings import ViewerSettings, resolve_settings

__version__ = "0.1.0"

__all__ = [
    "KviewError",
    "MissingConfigError",
    "InvalidConfigError",
    "NoShardsError",
    "ProtocolViolationError",
    "StreamServiceError",
    "ShardDescriptor",
    "StreamRecord",
    "RecordBatch",
    "ViewerSettings",
    "resolve_settings",
]
