import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date
from typing import Any


def number_or_zero(value: Any) -> float:
    """Coerce form/remote input to a float, 0 when absent, unparsable or not finite."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class PriceRecord(BaseModel):
    """One historical observation, keyed on the remote wire names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | None = None
    date: str = Field(default="", alias="Date")
    price: float = Field(alias="Price", allow_inf_nan=False)
    open: float = Field(default=0.0, alias="Open")
    high: float = Field(default=0.0, alias="High")
    change_percent_from_last_month: float = Field(default=0.0, alias="ChangePercentFromLastMonth")
    volume: str = Field(default="0", alias="Volume")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        return None if v is None else str(v)

    @field_validator("date", mode="before")
    @classmethod
    def _date_as_text(cls, v):
        return "" if v is None else str(v).strip()

    @field_validator("open", "high", "change_percent_from_last_month", mode="before")
    @classmethod
    def _optional_number(cls, v):
        return number_or_zero(v)

    @field_validator("volume", mode="before")
    @classmethod
    def _volume_as_text(cls, v):
        return "0" if v is None or v == "" else str(v)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class NewPriceForm(BaseModel):
    """Raw add-price form: every field may arrive as text."""

    model_config = ConfigDict(populate_by_name=True)

    date: str | None = Field(default=None, alias="Date")
    price: str | float | None = Field(default=None, alias="Price")
    open: str | float | None = Field(default=None, alias="Open")
    high: str | float | None = Field(default=None, alias="High")
    change_percent_from_last_month: str | float | None = Field(
        default=None, alias="ChangePercentFromLastMonth"
    )
    volume: str | None = Field(default=None, alias="Volume")


class PriceView(PriceRecord):
    is_favorite: bool = False


class PriceListResponse(BaseModel):
    start: date
    end: date
    count: int
    prices: list[PriceView]


class ChartPoint(BaseModel):
    date: str
    label: str
    price: float


class ChartSeries(BaseModel):
    start: date
    end: date
    points: list[ChartPoint]
    latest_price: float = 0.0
    previous_price: float = 0.0
    change_percent: float = 0.0
    change_color: str


class FavoritesResponse(BaseModel):
    favorites: list[PriceRecord]
    reload: bool = Field(default=False)


class UserSettings(BaseModel):
    show_price_alerts: bool = True
    show_atm_distance: bool = True
    dark_mode: bool = False


class SettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    show_price_alerts: bool | None = None
    show_atm_distance: bool | None = None
    dark_mode: bool | None = None


class Notification(BaseModel):
    title: str
    body: str
