"""
Module: file.py
Description: JSON file-backed event store.

Keeps events in memory and rewrites the whole file after every
mutation, so the file always reflects the latest state and survives
process restarts.

File format: a JSON array of [event_id, event] pairs in insertion order.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from hookme.models.event import WebhookEvent
from hookme.storage.base import EventStore
from hookme.utils.logger import get_logger

logger = get_logger(__name__)


class FileStore(EventStore):
    """
    Durable store persisted to a single JSON file.

    Attributes:
        path: Location of the JSON file

    Example:
        >>> store = FileStore("caches.json")
        >>> store.set(event.id, event)
    """

    def __init__(self, path: Union[str, Path]):
        """
        Load existing entries from path if the file exists.

        Args:
            path: JSON file location; parent directories are created

        Raises:
            ValueError: If path is empty or the file is not a valid store file
        """
        if not path:
            raise ValueError("path must be a non-empty path")

        self.path = Path(path)
        self._events: Dict[str, WebhookEvent] = {}

        if self.path.exists():
            self._events = self._load()
            logger.debug(
                "File store loaded",
                path=str(self.path),
                entries=len(self._events)
            )
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, WebhookEvent]:
        raw = self.path.read_text(encoding="utf-8").strip()
        if not raw:
            return {}

        try:
            entries = json.loads(raw)
            return {
                event_id: WebhookEvent(**data)
                for event_id, data in entries
            }
        except (ValueError, TypeError) as e:
            logger.error(
                "Invalid file store contents",
                path=str(self.path),
                error=str(e)
            )
            raise ValueError(f"invalid store file: {self.path}") from e

    def _flush(self) -> None:
        entries = [[event_id, event.to_store()] for event_id, event in self._events.items()]
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(
                "Failed to write file store",
                path=str(self.path),
                error=str(e)
            )
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def set(self, event_id: str, event: WebhookEvent) -> None:
        self._events[event_id] = event
        self._flush()

    def get(self, event_id: str) -> Optional[WebhookEvent]:
        return self._events.get(event_id)

    def delete(self, event_id: str) -> None:
        if self._events.pop(event_id, None) is not None:
            self._flush()

    def has(self, event_id: str) -> bool:
        return event_id in self._events

    def get_all(self) -> Dict[str, WebhookEvent]:
        return dict(self._events)

    def clear(self) -> None:
        self._events.clear()
        self._flush()
