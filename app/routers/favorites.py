from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..deps import get_kv_store, get_notifier
from ..errors import StorageError
from ..schemas import FavoritesResponse, PriceRecord
from ..repos.favorites_repo import (
    add_favorite, clear_favorites, consume_cleared_flag, load_favorites, remove_favorite
)
from ..repos.kv_store import KeyValueStore
from ..services.notifications import Notifier

router = APIRouter(prefix="/favorites", tags=["favorites"])

@router.get("", response_model=FavoritesResponse)
def list_favorites(store: KeyValueStore = Depends(get_kv_store)):
    """
    Saved favorites. `reload` is true the first time this is read after the
    favorites were cleared, so a client holding a stale copy drops it.
    """
    reload = consume_cleared_flag(store)
    return FavoritesResponse(favorites=load_favorites(store), reload=reload)

@router.post("", response_model=FavoritesResponse, status_code=status.HTTP_201_CREATED)
def create_favorite(
    record: PriceRecord,
    response: Response,
    store: KeyValueStore = Depends(get_kv_store),
    notifier: Notifier = Depends(get_notifier),
):
    if not record.date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Date is required")
    try:
        favorites, added = add_favorite(store, record)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to add item to favorites. Please try again.",
        )
    if added:
        notifier.notify(
            "Added to Favorites!",
            f"Bitcoin price from {record.date} has been added to your favorites",
        )
    else:
        response.status_code = status.HTTP_200_OK
    return FavoritesResponse(favorites=favorites)

@router.delete("/{record_date:path}", response_model=FavoritesResponse)
def delete_favorite(
    record_date: str,
    store: KeyValueStore = Depends(get_kv_store),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        favorites, removed = remove_favorite(store, record_date)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to remove item from favorites. Please try again.",
        )
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{record_date} is not a favorite")
    notifier.notify(
        "Removed from Favorites",
        f"Bitcoin price from {record_date} has been removed from your favorites",
    )
    return FavoritesResponse(favorites=favorites)

@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_all_favorites(store: KeyValueStore = Depends(get_kv_store)):
    try:
        clear_favorites(store)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to clear favorites. Please try again.",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
