from pydantic import ValidationError

from ..schemas import SettingsUpdate, UserSettings
from ..utils.logger import logger
from .kv_store import KeyValueStore, read_json, write_json

SETTINGS_KEY = "bitcoin_tracker_settings"

class SettingsStore:
    """
    User settings with an explicit lifecycle: load() once at startup, read
    through .settings, change through update(), which persists every change.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._settings = UserSettings()
        self._loaded = False

    @property
    def settings(self) -> UserSettings:
        if not self._loaded:
            self.load()
        return self._settings

    def load(self) -> UserSettings:
        raw = read_json(self._store, SETTINGS_KEY, {})
        try:
            self._settings = UserSettings.model_validate(raw if isinstance(raw, dict) else {})
        except ValidationError as e:
            logger.error(f"Error loading settings, using defaults: {e}")
            self._settings = UserSettings()
        self._loaded = True
        return self._settings

    def update(self, changes: SettingsUpdate) -> UserSettings:
        """Apply the fields set in `changes` and persist; raises StorageError if the write fails."""
        patch = changes.model_dump(exclude_none=True)
        updated = self.settings.model_copy(update=patch)
        write_json(self._store, SETTINGS_KEY, updated.model_dump())
        self._settings = updated
        logger.info(f"Settings updated: {patch}")
        return updated
