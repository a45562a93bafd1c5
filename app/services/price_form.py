import math
from datetime import date

from ..schemas import NewPriceForm, PriceRecord, number_or_zero
from .price_filter import format_date, parse_date


def form_to_record(form: NewPriceForm, today: date | None = None) -> PriceRecord:
    """
    Turn the add-price form into a record. Price is required; the other
    numbers fall back to 0 and the date to today. Raises ValueError.
    """
    raw_price = form.price
    if raw_price is None or str(raw_price).strip() == "":
        raise ValueError("Price is required")
    try:
        price = float(raw_price)
    except ValueError:
        raise ValueError(f"Price must be a number, got {raw_price!r}")
    if not math.isfinite(price):
        raise ValueError(f"Price must be a finite number, got {raw_price!r}")

    if form.date and form.date.strip():
        record_date = form.date.strip()
        parse_date(record_date)  # DateParseError is a ValueError
    else:
        record_date = format_date(today or date.today())

    return PriceRecord(
        date=record_date,
        price=price,
        open=number_or_zero(form.open),
        high=number_or_zero(form.high),
        change_percent_from_last_month=number_or_zero(form.change_percent_from_last_month),
        volume=form.volume or "0",
    )
