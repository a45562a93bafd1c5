from fastapi import APIRouter, Depends, HTTPException, Query, status
from datetime import date
from dateutil.relativedelta import relativedelta
import httpx

from ..config import settings
from ..deps import get_http_client, get_kv_store, get_notifier, get_settings_store
from ..errors import PricesApiError
from ..schemas import ChartSeries, NewPriceForm, PriceListResponse, PriceRecord, PriceView
from ..clients.prices_api import fetch_prices, post_price
from ..repos.favorites_repo import load_favorites, is_favorite
from ..repos.kv_store import KeyValueStore
from ..repos.settings_repo import SettingsStore
from ..services.chart import build_chart
from ..services.notifications import Notifier
from ..services.price_filter import filter_by_range, sort_records
from ..services.price_form import form_to_record
from ..theme import get_theme

router = APIRouter(prefix="/prices", tags=["prices"])

LOAD_ERROR = "Failed to load bitcoin prices. Please try again later."

def resolve_window(start: date | None, end: date | None) -> tuple[date, date]:
    if end is None:
        end = date.today() if start is None else start + relativedelta(days=settings.default_window_days)
    if start is None:
        start = end - relativedelta(days=settings.default_window_days)
    if start > end:
        start, end = end, start
    return start, end

def _load_window(client: httpx.Client | None, start: date, end: date) -> list[PriceRecord]:
    try:
        records = fetch_prices(client)
    except PricesApiError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"{LOAD_ERROR} ({e})")
    return filter_by_range(sort_records(records), start, end)

@router.get("", response_model=PriceListResponse)
def list_prices(
    start: date | None = Query(None, description="First day of the window (inclusive)"),
    end: date | None = Query(None, description="Last day of the window (inclusive)"),
    client: httpx.Client | None = Depends(get_http_client),
    store: KeyValueStore = Depends(get_kv_store),
):
    """
    Price history for the window, newest first. Without bounds the window is
    the last `default_window_days` days up to today.
    """
    start, end = resolve_window(start, end)
    filtered = _load_window(client, start, end)
    favorites = load_favorites(store)
    prices = [
        PriceView(**r.model_dump(), is_favorite=is_favorite(favorites, r.date))
        for r in filtered
    ]
    return PriceListResponse(start=start, end=end, count=len(prices), prices=prices)

@router.get("/chart", response_model=ChartSeries)
def price_chart(
    start: date | None = None,
    end: date | None = None,
    client: httpx.Client | None = Depends(get_http_client),
    settings_store: SettingsStore = Depends(get_settings_store),
):
    start, end = resolve_window(start, end)
    filtered = _load_window(client, start, end)
    theme = get_theme(settings_store.settings.dark_mode)
    return build_chart(filtered, start, end, theme)

@router.post("", response_model=PriceRecord, status_code=status.HTTP_201_CREATED)
def add_price(
    form: NewPriceForm,
    client: httpx.Client | None = Depends(get_http_client),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        record = form_to_record(form)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        stored = post_price(record, client)
    except PricesApiError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    notifier.notify(
        "Price Added",
        f"New Bitcoin price for {stored.date} has been added successfully.",
    )
    return stored
