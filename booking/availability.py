"""
Slot availability for a single day.

Everything here is pure: callers load the day's active bookings and the
stylist count, and these functions do the interval arithmetic.
"""
from typing import Dict, Iterable, List, NamedTuple, Optional

from django.conf import settings

from .utils.durations import parse_duration_minutes
from .utils.time_grid import minutes_to_timeslot, slots, timeslot_to_minutes

STATUS_AVAILABLE = "available"
STATUS_FULLY_BOOKED = "fully_booked"
STATUS_DURATION_CONFLICT = "duration_conflict"

MINUTES_PER_DAY = 24 * 60


class Booking(NamedTuple):
    time: str
    duration: str


def occupies_slot(booking: Booking, timeslot: str) -> bool:
    """
    True if the booking overlaps the 15-minute slot starting at timeslot.

    The end is closed: a booking ending exactly when the slot starts still
    blocks it, so nobody is booked the instant the previous client leaves.
    """
    appt_start = timeslot_to_minutes(booking.time)
    appt_end = appt_start + parse_duration_minutes(booking.duration)

    slot_start = timeslot_to_minutes(timeslot)
    slot_end = slot_start + settings.SALON_SLOT_MINUTES

    return appt_start < slot_end and slot_start <= appt_end


def conflict_count(bookings: Iterable[Booking], timeslot: str) -> int:
    return sum(1 for b in bookings if occupies_slot(b, timeslot))


def can_book_at(
    start_slot: str,
    duration: str,
    bookings: List[Booking],
    capacity: int,
    grid: Optional[Iterable[str]] = None,
) -> bool:
    """
    Can a booking of `duration` start at start_slot without running into a
    fully booked sub-slot? Sub-slots past closing are not checked.
    """
    grid = set(grid if grid is not None else slots())
    step = settings.SALON_SLOT_MINUTES
    start = timeslot_to_minutes(start_slot)
    end = min(start + parse_duration_minutes(duration), MINUTES_PER_DAY)

    for current in range(start, end, step):
        label = minutes_to_timeslot(current)
        if label not in grid:
            continue
        if conflict_count(bookings, label) >= capacity:
            return False
    return True


def build_availability(bookings: List[Booking], duration: str, capacity: int) -> Dict:
    """
    Per-slot availability for one day.

    Returns {"detailedAvailability": {slot: {...}}, "availableSlots": [...]}
    where each slot carries availableArtists, totalArtists, canStartHere,
    status and the final `available` flag.
    """
    grid = slots()
    detailed = {}
    available_slots = []

    for timeslot in grid:
        conflicts = conflict_count(bookings, timeslot)
        available_artists = max(0, capacity - conflicts)
        is_available = available_artists > 0
        can_start = can_book_at(timeslot, duration, bookings, capacity, grid=grid)

        if not is_available:
            status = STATUS_FULLY_BOOKED
        elif not can_start:
            status = STATUS_DURATION_CONFLICT
        else:
            status = STATUS_AVAILABLE

        detailed[timeslot] = {
            "available": is_available and can_start,
            "availableArtists": available_artists,
            "totalArtists": capacity,
            "canStartHere": can_start,
            "status": status,
        }
        if is_available and can_start:
            available_slots.append(timeslot)

    return {
        "detailedAvailability": detailed,
        "availableSlots": available_slots,
    }
