"""
Module: storage
Description: Package initialization for the event store layer.

- base: EventStore interface
- memory: MemoryStore, in-process only
- file: FileStore, JSON file that survives restarts
- dynamodb: DynamoDBStore, DynamoDB table that survives restarts
"""

from .base import EventStore
from .dynamodb import DynamoDBStore
from .file import FileStore
from .memory import MemoryStore

__all__ = ["EventStore", "MemoryStore", "FileStore", "DynamoDBStore"]
