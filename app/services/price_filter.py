"""
Date normalization, chronological sorting and range filtering for price records.

Records carry their date as text in either MM/DD/YYYY or YYYY-MM-DD form and
both forms may coexist in one collection; everything here compares parsed
calendar dates, never the raw strings.
"""
from datetime import date, datetime, time
from operator import itemgetter
from typing import Iterable, Sequence

from dateutil.parser import isoparse

from ..errors import DateParseError
from ..schemas import PriceRecord
from ..utils.logger import logger

MIDDAY = time(12, 0)


def _from_segments(year: str, month: str, day: str) -> date:
    return date(int(year), int(month), int(day))


def parse_date(value: str | None) -> date:
    """
    Parse a record date into a calendar date by trying, in order:
    1) a direct ISO parse (YYYY-MM-DD, optionally with a time part),
    2) YEAR-MONTH-DAY segments,
    3) MONTH/DAY/YEAR segments.
    Raises DateParseError when none yields a valid date.
    """
    text = (value or "").strip()
    if not text:
        raise DateParseError(value)

    try:
        return isoparse(text).date()
    except (ValueError, OverflowError):
        pass

    # a trailing time part ("01/05/2024 10:00") does not change the day
    text = text.split()[0]

    if "-" in text:
        parts = text.split("-")
        if len(parts) == 3:
            try:
                return _from_segments(*parts)
            except ValueError:
                pass
    elif "/" in text:
        parts = text.split("/")
        if len(parts) == 3:
            month, day, year = parts
            try:
                return _from_segments(year, month, day)
            except ValueError:
                pass

    raise DateParseError(value)


def try_parse_date(value: str | None) -> date | None:
    try:
        return parse_date(value)
    except DateParseError as e:
        logger.warning(f"Skipping price record: {e}")
        return None


def format_date(d: date) -> str:
    return f"{d.month:02d}/{d.day:02d}/{d.year}"


def chart_label(d: date) -> str:
    return f"{d.month}/{d.day}"


def sort_records(records: Iterable[PriceRecord]) -> list[PriceRecord]:
    """
    Newest first, stable for records on the same day. Records whose date does
    not parse are logged and left out.
    """
    dated = []
    for record in records:
        d = try_parse_date(record.date)
        if d is not None:
            dated.append((d, record))
    dated.sort(key=itemgetter(0), reverse=True)
    return [record for _, record in dated]


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def normalize_window(start: date | datetime, end: date | datetime) -> tuple[datetime, datetime]:
    """Whole-day bounds: start 00:00:00 through end 23:59:59.999999, swapped if reversed."""
    s, e = _as_date(start), _as_date(end)
    if s > e:
        s, e = e, s
    return datetime.combine(s, time.min), datetime.combine(e, time.max)


def filter_by_range(
    records: Sequence[PriceRecord], start: date | datetime, end: date | datetime
) -> list[PriceRecord]:
    lo, hi = normalize_window(start, end)
    kept = []
    for record in records:
        if not record.date:
            logger.debug(f"Price record without date excluded: {record!r}")
            continue
        d = try_parse_date(record.date)
        if d is None:
            continue
        # pin to midday so the comparison is on the calendar day only
        if lo <= datetime.combine(d, MIDDAY) <= hi:
            kept.append(record)
    logger.debug(f"Range filter {lo.date()}..{hi.date()}: {len(records)} in, {len(kept)} out")
    return kept
