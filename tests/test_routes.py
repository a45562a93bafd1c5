"""
HTTP surface tests: the FastAPI app with the remote endpoint and the
key-value store replaced through dependency overrides.
"""

import json
from datetime import date

from dateutil.relativedelta import relativedelta

from app.routers.prices import resolve_window
from conftest import FailingStore


class TestHealth:

    def test_health(self, api):
        assert api.get("/health").json() == {"status": "ok"}


class TestListPrices:

    def test_window_filters_and_sorts(self, api):
        r = api.get("/prices", params={"start": "2024-01-02", "end": "2024-01-06"})
        assert r.status_code == 200
        body = r.json()
        assert body["start"] == "2024-01-02"
        assert body["end"] == "2024-01-06"
        assert body["count"] == 2
        assert [p["Date"] for p in body["prices"]] == ["01/05/2024", "2024-01-03"]

    def test_wider_window_newest_first(self, api):
        body = api.get("/prices", params={"start": "2024-01-01", "end": "2024-01-31"}).json()
        assert [p["Date"] for p in body["prices"]] == ["01/10/2024", "01/05/2024", "2024-01-03"]

    def test_bad_upstream_row_keeps_newest_first(self, api, remote):
        remote.rows = [
            {"Date": "01/01/2024", "Price": 1},
            {"Date": "garbage", "Price": 2},
            {"Date": "01/05/2024", "Price": 3},
        ]
        body = api.get("/prices", params={"start": "2024-01-01", "end": "2024-01-31"}).json()
        assert [p["Date"] for p in body["prices"]] == ["01/05/2024", "01/01/2024"]

    def test_reversed_window_is_swapped(self, api):
        body = api.get("/prices", params={"start": "2024-01-06", "end": "2024-01-02"}).json()
        assert (body["start"], body["end"]) == ("2024-01-02", "2024-01-06")
        assert body["count"] == 2

    def test_marks_favorites(self, api):
        api.post("/favorites", json={"Date": "01/05/2024", "Price": 44100.5})
        body = api.get("/prices", params={"start": "2024-01-01", "end": "2024-01-31"}).json()
        flags = {p["Date"]: p["is_favorite"] for p in body["prices"]}
        assert flags == {"01/10/2024": False, "01/05/2024": True, "2024-01-03": False}

    def test_upstream_failure_is_502(self, api, remote):
        remote.get_status = 500
        r = api.get("/prices")
        assert r.status_code == 502
        assert "Failed to load bitcoin prices" in r.json()["detail"]


class TestResolveWindow:

    def test_defaults_to_last_30_days(self):
        start, end = resolve_window(None, None)
        assert end == date.today()
        assert start == end - relativedelta(days=30)

    def test_only_start(self):
        assert resolve_window(date(2024, 1, 1), None) == (date(2024, 1, 1), date(2024, 1, 31))

    def test_only_end(self):
        assert resolve_window(None, date(2024, 1, 31)) == (date(2024, 1, 1), date(2024, 1, 31))


class TestChart:

    def test_chart_series(self, api):
        body = api.get("/prices/chart", params={"start": "2024-01-01", "end": "2024-01-31"}).json()
        assert [p["label"] for p in body["points"]] == ["1/3", "1/5", "1/10"]
        assert body["latest_price"] == 46000
        assert body["previous_price"] == 44100.5

    def test_chart_uses_theme_colors(self, api):
        api.patch("/settings", json={"dark_mode": True})
        theme = api.get("/settings/theme").json()
        body = api.get("/prices/chart", params={"start": "2024-01-01", "end": "2024-01-31"}).json()
        assert body["change_color"] == theme["positive"]


class TestAddPrice:

    def test_created(self, api, remote, no_sleep):
        r = api.post("/prices", json={"Date": "01/11/2024", "Price": "47000", "Open": "", "Volume": "1K"})
        assert r.status_code == 201
        stored = r.json()
        assert stored["Date"] == "01/11/2024"
        assert stored["Price"] == 47000.0
        assert stored["Open"] == 0.0
        assert stored["id"]

        sent = json.loads(remote.requests[-1].content)
        assert sent["Price"] == 47000.0

    def test_notification_on_success(self, api, no_sleep):
        api.post("/prices", json={"Date": "01/11/2024", "Price": 1})
        titles = [n["title"] for n in api.get("/notifications").json()]
        assert titles == ["Price Added"]

    def test_missing_price_is_400(self, api, remote):
        r = api.post("/prices", json={"Date": "01/11/2024"})
        assert r.status_code == 400
        assert r.json()["detail"] == "Price is required"
        assert remote.requests == []

    def test_bad_date_is_400(self, api):
        r = api.post("/prices", json={"Date": "someday", "Price": 1})
        assert r.status_code == 400

    def test_retries_exhausted_is_502(self, api, remote, no_sleep):
        remote.post_failures = 3
        r = api.post("/prices", json={"Date": "01/11/2024", "Price": 1})
        assert r.status_code == 502
        assert "after 3 attempts" in r.json()["detail"]
        assert len(remote.requests) == 3
        assert api.get("/notifications").json() == []


class TestFavoritesRoutes:

    def test_add_list_remove(self, api):
        r = api.post("/favorites", json={"Date": "01/05/2024", "Price": 1})
        assert r.status_code == 201
        r = api.post("/favorites", json={"Date": "01/05/2024", "Price": 2})
        assert r.status_code == 200
        assert len(r.json()["favorites"]) == 1

        body = api.get("/favorites").json()
        assert [f["Date"] for f in body["favorites"]] == ["01/05/2024"]
        assert body["reload"] is False

        r = api.delete("/favorites/01/05/2024")
        assert r.status_code == 200
        assert r.json()["favorites"] == []

    def test_remove_unknown_is_404(self, api):
        assert api.delete("/favorites/2024-01-05").status_code == 404

    def test_clear_signals_reload_once(self, api, remote):
        api.post("/favorites", json={"Date": "01/05/2024", "Price": 1})
        assert api.delete("/favorites").status_code == 204

        first = api.get("/favorites").json()
        assert first == {"favorites": [], "reload": True}
        assert api.get("/favorites").json()["reload"] is False
        assert remote.requests == []

    def test_notifications_follow_alert_setting(self, api):
        api.patch("/settings", json={"show_price_alerts": False})
        api.post("/favorites", json={"Date": "01/05/2024", "Price": 1})
        assert api.get("/notifications").json() == []

    def test_storage_down(self, api, store):
        from app.deps import get_kv_store
        from app.main import app

        app.dependency_overrides[get_kv_store] = lambda: FailingStore()
        assert api.get("/favorites").json() == {"favorites": [], "reload": False}
        r = api.post("/favorites", json={"Date": "01/05/2024", "Price": 1})
        assert r.status_code == 503


class TestSettingsRoutes:

    def test_defaults(self, api):
        assert api.get("/settings").json() == {
            "show_price_alerts": True,
            "show_atm_distance": True,
            "dark_mode": False,
        }

    def test_patch_is_partial(self, api):
        body = api.patch("/settings", json={"show_atm_distance": False}).json()
        assert body == {"show_price_alerts": True, "show_atm_distance": False, "dark_mode": False}
        assert api.get("/settings").json()["show_atm_distance"] is False

    def test_unknown_field_rejected(self, api):
        assert api.patch("/settings", json={"theme": "neon"}).status_code == 422

    def test_theme_follows_dark_mode(self, api):
        light = api.get("/settings/theme").json()
        api.patch("/settings", json={"dark_mode": True})
        dark = api.get("/settings/theme").json()
        assert light["background"] != dark["background"]
        assert set(dark) == {
            "background", "card_background", "text", "secondary_text",
            "accent", "positive", "negative", "border",
        }
