"""
Calendar window generation.

Produces the ordered dates the resolvers evaluate: the Monday-aligned week
around an anchor date, a single day, an arbitrary list, or month-based target
sets for batch edits. Every function is pure; callers inject "today".
"""

from datetime import date, datetime, timedelta
import re
from dateutil.relativedelta import relativedelta

from cabins.exceptions import InvalidSlotKey

DATE_KEY_FORMAT = '%Y-%m-%d'
DATE_KEY_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# Sunday = 0, matching the weekday keys of Cabin.default_pricing
WEEKDAY_KEYS = {
    'sun': 0,
    'mon': 1,
    'tue': 2,
    'wed': 3,
    'thu': 4,
    'fri': 5,
    'sat': 6,
}


def parse_date_key(value):
    """
    Convert a date-like value to a ``date``.

    Args:
        value: date, datetime, or canonical ``YYYY-MM-DD`` string

    Returns:
        date

    Raises:
        InvalidSlotKey: if the value is not a date or a well-formed key
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and DATE_KEY_PATTERN.match(value.strip()):
        try:
            return datetime.strptime(value.strip(), DATE_KEY_FORMAT).date()
        except ValueError:
            raise InvalidSlotKey(f"Malformed date key: {value!r}") from None
    raise InvalidSlotKey(f"Malformed date key: {value!r}")


def weekday_index(day):
    """Weekday number with Sunday = 0 (Python's weekday() has Monday = 0)."""
    return (day.weekday() + 1) % 7


def start_of_week(day):
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def clip_window(dates, not_before=None):
    """
    Parse an arbitrary list of dates and drop those before ``not_before``.

    Order is preserved; nothing is added.
    """
    parsed = [parse_date_key(d) for d in dates]
    if not_before is None:
        return parsed
    floor = parse_date_key(not_before)
    return [d for d in parsed if d >= floor]


def generate_window(anchor_date, length=7, not_before=None):
    """
    Generate the Monday-aligned evaluation window.

    Args:
        anchor_date: any date inside the wanted week
        length: number of consecutive days to produce (7 for a week view)
        not_before: optional floor, e.g. the cabin creation date

    Returns:
        list of dates, ascending, at most ``length`` long
    """
    if length < 0:
        raise ValueError(f"Window length cannot be negative: {length}")

    start = start_of_week(parse_date_key(anchor_date))
    window = [start + timedelta(days=offset) for offset in range(length)]
    return clip_window(window, not_before)


def single_day_window(day, not_before=None):
    """One-day window, empty when the day precedes the floor."""
    return clip_window([day], not_before)


def month_dates(year, month):
    """Every day of the given month, ascending."""
    try:
        first = date(int(year), int(month), 1)
    except (TypeError, ValueError):
        raise InvalidSlotKey(f"Invalid month: {year}-{month}") from None
    last = first + relativedelta(day=31)
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def parse_weekdays(weekdays):
    """
    Normalize a weekday selection to a set of Sunday = 0 indices.

    Accepts integers 0-6 or short names ``sun``..``sat``.
    """
    selected = set()
    for value in weekdays:
        if isinstance(value, bool):
            raise InvalidSlotKey(f"Invalid weekday: {value!r}")
        if isinstance(value, int):
            index = value
        elif isinstance(value, str) and value.strip().lower()[:3] in WEEKDAY_KEYS:
            index = WEEKDAY_KEYS[value.strip().lower()[:3]]
        elif isinstance(value, str) and value.strip().isdigit():
            index = int(value.strip())
        else:
            raise InvalidSlotKey(f"Invalid weekday: {value!r}")
        if not 0 <= index <= 6:
            raise InvalidSlotKey(f"Invalid weekday: {value!r}")
        selected.add(index)
    return selected


def weekday_dates_in_month(weekdays, today):
    """
    Days of the month containing ``today`` that fall on the selected weekdays.

    Past days of the month are included; the batch editor decides what to skip.
    """
    selected = parse_weekdays(weekdays)
    today = parse_date_key(today)
    return [
        d for d in month_dates(today.year, today.month)
        if weekday_index(d) in selected
    ]


def date_range(start, end, max_days=366):
    """
    Inclusive ascending dates from ``start`` to ``end``.

    Raises:
        InvalidSlotKey: end before start, or a range longer than ``max_days``
    """
    start, end = parse_date_key(start), parse_date_key(end)
    if end < start:
        raise InvalidSlotKey(f"End date {end.isoformat()} is before start date {start.isoformat()}")
    days = (end - start).days + 1
    if days > max_days:
        raise InvalidSlotKey(f"Date range too long: {days} days (max {max_days})")
    return [start + timedelta(days=offset) for offset in range(days)]
