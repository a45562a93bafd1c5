from fastapi import APIRouter, Depends, HTTPException, status

from ..deps import get_notifier, get_settings_store
from ..errors import StorageError
from ..schemas import Notification, SettingsUpdate, UserSettings
from ..repos.settings_repo import SettingsStore
from ..services.notifications import Notifier
from ..theme import Theme, get_theme

router = APIRouter(tags=["settings"])

@router.get("/settings", response_model=UserSettings)
def read_settings(settings_store: SettingsStore = Depends(get_settings_store)):
    return settings_store.settings

@router.patch("/settings", response_model=UserSettings)
def update_settings(
    changes: SettingsUpdate,
    settings_store: SettingsStore = Depends(get_settings_store),
):
    try:
        return settings_store.update(changes)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to save settings. Please try again.",
        )

@router.get("/settings/theme", response_model=Theme)
def read_theme(settings_store: SettingsStore = Depends(get_settings_store)):
    return get_theme(settings_store.settings.dark_mode)

@router.get("/notifications", response_model=list[Notification])
def read_notifications(notifier: Notifier = Depends(get_notifier)):
    return notifier.recent()
