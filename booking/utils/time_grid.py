from datetime import date, datetime, time
from typing import List, Optional

from django.conf import settings

DISPLAY_FORMAT = "%I:%M %p"      # '10:00 AM'
INPUT_FORMATS = ("%I:%M %p", "%H:%M")  # what we accept in parse_timeslot


def timeslot_to_minutes(ts: str) -> int:
    """
    Minutes from midnight for a slot label like '1:15 PM'.
    12 AM maps to hour 0 and 12 PM stays at hour 12.
    """
    clock, _, period = ts.strip().partition(" ")
    hours, _, minutes = clock.partition(":")
    hours = int(hours)
    minutes = int(minutes or 0)
    period = period.upper()

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0
    return hours * 60 + minutes


def minutes_to_timeslot(minutes: int) -> str:
    """Inverse of timeslot_to_minutes: 780 -> '1:00 PM'."""
    hours, mins = divmod(minutes, 60)
    period = "AM" if hours < 12 else "PM"
    hours = hours % 12 or 12
    return f"{hours}:{mins:02d} {period}"


def slots() -> List[str]:
    """
    Bookable timeslots for a business day, in chronological order.
    Opening and closing come from settings; both ends are bookable.
    """
    step = settings.SALON_SLOT_MINUTES
    start = timeslot_to_minutes(settings.SALON_OPENING_TIME)
    end = timeslot_to_minutes(settings.SALON_CLOSING_TIME)
    return [minutes_to_timeslot(m) for m in range(start, end + 1, step)]


def is_valid_slot(label) -> bool:
    if not isinstance(label, str):
        return False
    return label in slots()


def format_html_time_to_timeslot(time_str: str) -> str:
    """
    Convert <input type="time"> value 'HH:MM' to display string 'h:MM AM/PM'.
    Values that already carry AM/PM are normalized; anything unparseable
    is returned as-is so the grid check can reject it.
    """
    if not time_str:
        return ""

    time_str = time_str.strip()

    # If it already has AM/PM, just normalize and return
    upper = time_str.upper()
    if "AM" in upper or "PM" in upper:
        try:
            t = datetime.strptime(upper, "%I:%M %p").time()
            return t.strftime(DISPLAY_FORMAT).lstrip("0")
        except ValueError:
            return time_str

    # Otherwise assume 'HH:MM' 24-hour from <input type="time">
    try:
        t = datetime.strptime(time_str, "%H:%M").time()
        return t.strftime(DISPLAY_FORMAT).lstrip("0")
    except ValueError:
        return time_str


def parse_timeslot(ts: str) -> time:
    """
    Convert timeslot strings like '10:00 AM' or '09:30' into a time object,
    so we can sort appointments by time.
    """
    if not ts:
        return time(0, 0)

    ts = ts.strip()
    for fmt in INPUT_FORMATS:
        try:
            return datetime.strptime(ts, fmt).time()
        except ValueError:
            continue

    return time(0, 0)


def parse_date(value) -> Optional[date]:
    """
    Parse a date string in 'YYYY-MM-DD' format into a date object.
    Returns None if parsing fails.
    """
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None
