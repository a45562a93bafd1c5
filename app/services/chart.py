from datetime import date
from typing import Sequence

from ..schemas import ChartPoint, ChartSeries, PriceRecord
from ..theme import Theme, percentage_color
from .price_filter import chart_label, try_parse_date


def build_chart(records: Sequence[PriceRecord], start: date, end: date, theme: Theme) -> ChartSeries:
    """
    Chart series for a newest-first, already filtered list.
    Points run oldest -> newest; the change is newest vs. the one before it.
    """
    points = []
    for record in reversed(records):
        d = try_parse_date(record.date)
        if d is None:
            continue
        points.append(ChartPoint(date=record.date, label=chart_label(d), price=record.price))

    latest = points[-1].price if points else 0.0
    previous = points[-2].price if len(points) > 1 else 0.0
    change = ((latest - previous) / previous) * 100 if previous else 0.0

    return ChartSeries(
        start=start,
        end=end,
        points=points,
        latest_price=latest,
        previous_price=previous,
        change_percent=change,
        change_color=percentage_color(change, theme),
    )
