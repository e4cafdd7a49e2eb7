import re

from django.conf import settings

DURATION_RE = re.compile(r"(\d+)\s*(minutes|minute|min|hours|hour|hrs|hr)", re.IGNORECASE)


def parse_duration_minutes(duration) -> int:
    """
    '45 min' -> 45, '2 hours' -> 120.

    Labels come from the fixed service catalog, so anything unparseable
    falls back to SALON_DEFAULT_DURATION_MINUTES instead of failing the booking.
    """
    match = DURATION_RE.search(duration) if isinstance(duration, str) else None
    if not match:
        return settings.SALON_DEFAULT_DURATION_MINUTES

    value = int(match.group(1))
    unit = match.group(2).lower()
    if unit.startswith("hour") or unit.startswith("hr"):
        return value * 60
    return value
