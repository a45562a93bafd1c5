import httpx
from fastapi import Request

from .db import get_store
from .repos.kv_store import KeyValueStore
from .repos.settings_repo import SettingsStore
from .services.notifications import Notifier


def get_kv_store() -> KeyValueStore:
    return get_store()

def get_settings_store(request: Request) -> SettingsStore:
    return request.app.state.settings_store

def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier

def get_http_client() -> httpx.Client | None:
    # None: each call opens its own client from settings
    return None
