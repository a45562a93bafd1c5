import json
from abc import ABC, abstractmethod
from typing import Any
from supabase import Client

from ..errors import StorageError
from ..utils.logger import logger

TABLE = "app_state"

class KeyValueStore(ABC):
    """String key -> string value persistence for favorites and settings."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SupabaseKeyValueStore(KeyValueStore):
    """Rows of app_state(key text primary key, value text)."""

    def __init__(self, sb: Client, table: str = TABLE) -> None:
        self._sb = sb
        self._table = table

    def get(self, key: str) -> str | None:
        res = self._sb.table(self._table).select("value").eq("key", key).limit(1).execute()
        rows = res.data or []
        return rows[0]["value"] if rows else None

    def set(self, key: str, value: str) -> None:
        self._sb.table(self._table).upsert({"key": key, "value": value}).execute()

    def delete(self, key: str) -> None:
        self._sb.table(self._table).delete().eq("key", key).execute()


def read_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """Missing key, storage failure or corrupt JSON all read as `default`."""
    try:
        raw = store.get(key)
    except Exception as e:
        logger.error(f"Error loading {key}: {e}")
        return default
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Corrupt value stored under {key}: {e}")
        return default

def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    try:
        store.set(key, json.dumps(value))
    except Exception as e:
        logger.error(f"Error saving {key}: {e}")
        raise StorageError(f"Failed to save {key}") from e

def delete_key(store: KeyValueStore, key: str) -> None:
    try:
        store.delete(key)
    except Exception as e:
        logger.error(f"Error deleting {key}: {e}")
        raise StorageError(f"Failed to delete {key}") from e
