"""Key-value slot stores that hold the serialized task collection."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path

from tasklist.io_utils import read_text, write_text_atomic

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class SlotStore(ABC):
    """Abstract durable key -> text store.  Subclasses implement get/set/delete."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value for *key*, or ``None`` if the slot is empty."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Overwrite the slot for *key* with *value*."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Empty the slot for *key*.  Deleting an empty slot is not an error."""
        ...


class MemorySlotStore(SlotStore):
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def delete(self, key: str) -> None:
        self._slots.pop(key, None)


class FileSlotStore(SlotStore):
    """One UTF-8 file per key under *root*, replaced atomically on every write."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid slot key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.is_file():
            return None
        return read_text(path)

    def set(self, key: str, value: str) -> None:
        write_text_atomic(self.path_for(key), value)

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
