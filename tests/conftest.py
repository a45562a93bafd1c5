import httpx
import pytest
from fastapi.testclient import TestClient

from app.deps import get_http_client, get_kv_store, get_notifier, get_settings_store
from app.main import app
from app.repos.kv_store import MemoryKeyValueStore
from app.repos.settings_repo import SettingsStore
from app.schemas import PriceRecord
from app.services.notifications import Notifier


SAMPLE_ROWS = [
    {"Date": "01/05/2024", "Price": 44100.5, "Open": 43900, "High": 44500,
     "ChangePercentFromLastMonth": 2.5, "Volume": "500.00K"},
    {"Date": "2024-01-03", "Price": 42800, "Open": "42000", "High": None,
     "ChangePercentFromLastMonth": -1.2, "Volume": "420.10K"},
    {"Date": "01/10/2024", "Price": 46000, "Open": 45000, "High": 46500,
     "ChangePercentFromLastMonth": 4.0, "Volume": "610.00K"},
]


def make_record(date: str, price: float = 100.0, **extra) -> PriceRecord:
    return PriceRecord(date=date, price=price, **extra)


class FailingStore(MemoryKeyValueStore):
    """Every operation blows up, like an unreachable backend."""

    def get(self, key):
        raise ConnectionError("store unavailable")

    def set(self, key, value):
        raise ConnectionError("store unavailable")

    def delete(self, key):
        raise ConnectionError("store unavailable")


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def settings_store(store):
    s = SettingsStore(store)
    s.load()
    return s


@pytest.fixture
def notifier(settings_store):
    return Notifier(settings_store)


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr("app.clients.prices_api.time.sleep", delays.append)
    return delays


@pytest.fixture
def remote():
    """
    Stand-in for the remote price endpoint. Tests set `remote.rows`,
    `remote.post_failures` or `remote.get_status` before calling the API.
    """
    class Remote:
        rows = list(SAMPLE_ROWS)
        get_status = 200
        post_failures = 0
        requests: list = []

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if request.method == "GET":
                if self.get_status != 200:
                    return httpx.Response(self.get_status, text="upstream down")
                return httpx.Response(200, json=self.rows)
            if self.post_failures > 0:
                self.post_failures -= 1
                return httpx.Response(500, text="server error")
            return httpx.Response(201, content=request.content,
                                  headers={"Content-Type": "application/json"})

    r = Remote()
    r.requests = []
    r.client = httpx.Client(transport=httpx.MockTransport(r.handler))
    yield r
    r.client.close()


@pytest.fixture
def api(store, settings_store, notifier, remote):
    app.dependency_overrides[get_kv_store] = lambda: store
    app.dependency_overrides[get_settings_store] = lambda: settings_store
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_http_client] = lambda: remote.client
    yield TestClient(app)
    app.dependency_overrides.clear()
