from typing import Iterable
from pydantic import ValidationError

from ..errors import StorageError
from ..schemas import PriceRecord
from ..utils.logger import logger
from .kv_store import KeyValueStore, read_json, write_json, delete_key

FAVORITES_KEY = "bitcoin_favorites"
CLEARED_KEY = "favorites_cleared"

def load_favorites(store: KeyValueStore) -> list[PriceRecord]:
    rows = read_json(store, FAVORITES_KEY, [])
    if not isinstance(rows, list):
        logger.error(f"Ignoring non-list favorites payload: {type(rows).__name__}")
        return []
    out: list[PriceRecord] = []
    for row in rows:
        try:
            out.append(PriceRecord.model_validate(row))
        except ValidationError:
            logger.warning(f"Dropping unreadable favorite {row!r}")
    return out

def _save(store: KeyValueStore, favorites: Iterable[PriceRecord]) -> None:
    write_json(store, FAVORITES_KEY, [f.to_wire() for f in favorites])

def is_favorite(favorites: Iterable[PriceRecord], record_date: str) -> bool:
    return any(f.date == record_date for f in favorites)

def add_favorite(store: KeyValueStore, record: PriceRecord) -> tuple[list[PriceRecord], bool]:
    favorites = load_favorites(store)
    if is_favorite(favorites, record.date):
        return favorites, False
    favorites = [*favorites, record]
    _save(store, favorites)
    return favorites, True

def remove_favorite(store: KeyValueStore, record_date: str) -> tuple[list[PriceRecord], bool]:
    favorites = load_favorites(store)
    kept = [f for f in favorites if f.date != record_date]
    if len(kept) == len(favorites):
        return favorites, False
    _save(store, kept)
    return kept, True

def clear_favorites(store: KeyValueStore) -> None:
    _save(store, [])
    write_json(store, CLEARED_KEY, True)

def consume_cleared_flag(store: KeyValueStore) -> bool:
    """True once after clear_favorites(); the flag is removed on read."""
    if not read_json(store, CLEARED_KEY, False):
        return False
    try:
        delete_key(store, CLEARED_KEY)
    except StorageError:
        # flag stays set; the next read reports a reload again
        pass
    return True
