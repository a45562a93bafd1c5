from supabase import create_client, Client
from .config import settings
from .repos.kv_store import KeyValueStore, MemoryKeyValueStore, SupabaseKeyValueStore

_sb: Client | None = None
_store: KeyValueStore | None = None

def get_supabase() -> Client:
    global _sb
    if _sb is None:
        if not (settings.supabase_url and settings.supabase_service_key):
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the supabase backend.")
        _sb = create_client(settings.supabase_url, settings.supabase_service_key)
    return _sb

def get_store() -> KeyValueStore:
    global _store
    if _store is None:
        if settings.storage_backend == "supabase":
            _store = SupabaseKeyValueStore(get_supabase())
        else:
            _store = MemoryKeyValueStore()
    return _store
