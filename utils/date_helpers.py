from datetime import date, datetime, time
import calendar
from utils.constants import DATE_FORMAT, MONTH_NAMES

# ── Display date format options ───────────────────────────────────────────────

_STRFTIME_MAP = {
    "DD/MM/YYYY": "%d/%m/%Y",
    "MM/DD/YYYY": "%m/%d/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
}

_TKCAL_MAP = {
    "DD/MM/YYYY": "dd/mm/yyyy",
    "MM/DD/YYYY": "mm/dd/yyyy",
    "YYYY-MM-DD": "yyyy-mm-dd",
}


def today() -> date:
    return date.today()


def current_year_month() -> tuple[int, int]:
    d = date.today()
    return d.year, d.month


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def parse_datetime(value) -> datetime | None:
    """Parse an API timestamp into a naive local datetime.

    Accepts datetime/date objects, 'YYYY-MM-DD' and full ISO-8601 strings
    (with or without a 'Z' or offset suffix). Returns None when unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            d = parse_date(text)
            return datetime.combine(d, time.min) if d else None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def to_iso(value: datetime | date) -> str:
    """Serialize for the API: date-only values stay date-only."""
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return value.strftime(DATE_FORMAT)


def validate_month(month: int):
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}. Must be between 1 and 12.")


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """Closed window covering the whole calendar month.

    The end bound is the last representable instant of the month's last day,
    so anything stamped up to 23:59:59.999999 on that day is inside. An end
    bound of a whole-second 23:59:59 would drop sub-second stamps such as
    23:59:59.500; those count toward the month here.
    """
    validate_month(month)
    last_day = calendar.monthrange(year, month)[1]
    return (
        datetime(year, month, 1),
        datetime.combine(date(year, month, last_day), time.max),
    )


def period_bounds(start: date | datetime, end: date | datetime) -> tuple[datetime, datetime]:
    """Normalize period bounds to datetimes. A bare date end covers the whole day."""
    if not isinstance(start, datetime):
        start = datetime.combine(start, time.min)
    if not isinstance(end, datetime):
        end = datetime.combine(end, time.max)
    return start, end


def prev_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def friendly_month(year: int, month: int) -> str:
    """e.g. 'March 2024'."""
    validate_month(month)
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_display_date(value, fmt_key: str = "DD/MM/YYYY") -> str:
    """Convert a stored date/datetime (or ISO string) to the user-facing format."""
    if not value:
        return ""
    dt = parse_datetime(value)
    if dt is None:
        return str(value)
    return dt.strftime(_STRFTIME_MAP.get(fmt_key, "%d/%m/%Y"))


def tkcal_date_pattern(fmt_key: str) -> str:
    """Return the tkcalendar date_pattern string for the given format key."""
    return _TKCAL_MAP.get(fmt_key, "dd/mm/yyyy")


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%d/%m/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str)
