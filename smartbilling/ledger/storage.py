"""Mini README: Key-value slot backends for the serialised ledger document.

Structure:
    * SlotStorage - abstract interface: read, write and delete a named slot.
    * JsonFileStorage - one ``<key>.json`` file per slot inside a directory.
    * MemoryStorage - dictionary-backed slots for tests and throwaway sessions.

Backends move raw text only. Decoding, validation and the fallback to the
default document are the store's job, so a backend never needs to know the
document shape.
"""

from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from ..errors import StorageError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class SlotStorage(ABC):
    """Interface for persisting text documents under named slots."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored text or ``None`` when the slot is empty."""

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """Replace the slot contents with ``payload``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Empty the slot. Deleting an empty slot is not an error."""


class JsonFileStorage(SlotStorage):
    """Store each slot as a JSON file, replacing it atomically on write."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        LOGGER.debug("File storage rooted at %s", self.directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as error:
            raise StorageError(f"Unable to read slot '{key}' from {path}") from error

    def write(self, key: str, payload: str) -> None:
        path = self.path_for(key)
        descriptor, temp_name = tempfile.mkstemp(
            prefix=f".{key}.", suffix=".tmp", dir=str(self.directory)
        )
        try:
            with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(temp_name, path)
        except OSError as error:
            Path(temp_name).unlink(missing_ok=True)
            raise StorageError(f"Unable to write slot '{key}' to {path}") from error
        LOGGER.debug("Wrote %s bytes to %s", len(payload), path)

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class MemoryStorage(SlotStorage):
    """Keep slots in a dictionary; contents vanish with the object."""

    def __init__(self, slots: Optional[Dict[str, str]] = None) -> None:
        self.slots: Dict[str, str] = dict(slots or {})

    def read(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def write(self, key: str, payload: str) -> None:
        self.slots[key] = payload

    def delete(self, key: str) -> None:
        self.slots.pop(key, None)
