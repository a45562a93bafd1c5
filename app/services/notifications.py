from collections import deque

from ..schemas import Notification
from ..utils.logger import logger
from ..repos.settings_repo import SettingsStore

MAX_KEPT = 50


class Notifier:
    """In-app notices, only delivered while price alerts are switched on."""

    def __init__(self, settings_store: SettingsStore, max_kept: int = MAX_KEPT) -> None:
        self._settings_store = settings_store
        self._recent: deque[Notification] = deque(maxlen=max_kept)

    @property
    def enabled(self) -> bool:
        return self._settings_store.settings.show_price_alerts

    def notify(self, title: str, body: str) -> bool:
        if not self.enabled:
            return False
        self._recent.appendleft(Notification(title=title, body=body))
        logger.info(f"Notification: {title} - {body}")
        return True

    def recent(self) -> list[Notification]:
        return list(self._recent)
