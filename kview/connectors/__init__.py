from kview.connectors.base import StreamClient, ShardIteratorType

__all__ = ["StreamClient", "ShardIteratorType"]
