"""String key-value storage abstractions."""

from dataclasses import dataclass
from typing import Protocol


class KeyValueStore(Protocol):
    """Generic persistent store of string values by string key."""

    def get(self, key: str) -> str | None:
        """Return the stored value if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""

    def keys(self) -> list[str]:
        """Return every stored key."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Process-local key-value store."""

    _entries: dict[str, str]

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self._entries = dict(entries or {})

    def get(self, key: str) -> str | None:
        """Return the stored value if present."""
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self._entries[key] = value

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        """Return a snapshot of stored keys."""
        return list(self._entries)
