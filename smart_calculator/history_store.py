"""Persistent calculation history.

The controller talks to a HistoryStore through two operations:
- load(): read the saved list, newest first
- save(items): write the full list back

JsonHistoryStore keeps the list in a JSON file; InMemoryHistoryStore
keeps it in process (tests, --no-history sessions).
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Sequence

from .models import HistoryItem


logger = logging.getLogger(__name__)


class HistoryStore:
    """Base class for history persistence."""

    def load(self) -> List[HistoryItem]:
        raise NotImplementedError

    def save(self, items: Sequence[HistoryItem]) -> None:
        raise NotImplementedError


def decode_history(data) -> List[HistoryItem]:
    """Convert decoded JSON into history items.

    Raises:
        ValueError: If data is not a list of valid records.
    """
    if not isinstance(data, list):
        raise ValueError(f"History must be a JSON array, got {type(data).__name__}")

    try:
        return [HistoryItem.from_dict(record) for record in data]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed history record: {e}") from e


class JsonHistoryStore(HistoryStore):
    """History stored as a JSON array in a single file."""

    def __init__(self, path):
        """Initialize with the history file path.

        Args:
            path: Location of the JSON file. Parent directories are
                created on first save.
        """
        self.path = Path(path)

    def load(self) -> List[HistoryItem]:
        """Load saved history.

        Returns:
            Saved items, or an empty list when the file is absent,
            unreadable or corrupt.
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return decode_history(data)
        except (json.JSONDecodeError, UnicodeDecodeError, IOError, ValueError) as e:
            logger.warning("Ignoring unreadable history file %s: %s", self.path, e)
            return []

    def save(self, items: Sequence[HistoryItem]) -> None:
        """Write the full history list.

        Raises:
            IOError: If the file cannot be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.to_dict() for item in items]

        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=".history-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except (IOError, OSError) as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise IOError(f"Failed to write history file: {e}") from e

        logger.debug("Saved %d history item(s) to %s", len(payload), self.path)


class InMemoryHistoryStore(HistoryStore):
    """History kept in process memory, serialized the same way as on disk."""

    def __init__(self, items: Sequence[HistoryItem] = ()):
        self._data = [item.to_dict() for item in items]
        self.save_count = 0

    def load(self) -> List[HistoryItem]:
        return decode_history(copy.deepcopy(self._data))

    def save(self, items: Sequence[HistoryItem]) -> None:
        self._data = [item.to_dict() for item in items]
        self.save_count += 1
