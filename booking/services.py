import logging
from typing import Dict, List, Optional

from django.conf import settings
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from . import lifecycle
from .auth import Caller, can_manage, owns_appointment
from .availability import Booking, build_availability
from .exceptions import AuthenticationRequired, SlotUnavailable
from .models import Appointment, RescheduleEntry, SalonSettings, SchedulingIndexEntry
from .utils.time_grid import is_valid_slot, parse_date, parse_timeslot

logger = logging.getLogger(__name__)

DEFAULT_REQUESTED_DURATION = "30 min"


# ---------- Salon capacity ----------

def get_salon_capacity() -> int:
    return SalonSettings.load().number_of_stylists


def set_salon_capacity(number_of_stylists) -> SalonSettings:
    low, high = settings.SALON_MIN_STYLISTS, settings.SALON_MAX_STYLISTS
    if isinstance(number_of_stylists, bool) or not isinstance(number_of_stylists, int):
        raise ValidationError(
            "Number of stylists is required and must be a number",
            code="invalid_capacity",
        )
    if not low <= number_of_stylists <= high:
        raise ValidationError(
            f"Number of stylists must be between {low} and {high}",
            code="invalid_capacity",
        )

    salon = SalonSettings.load()
    salon.number_of_stylists = number_of_stylists
    salon.save(update_fields=["number_of_stylists", "updated_at"])
    logger.info("Salon capacity set to %s stylist(s)", number_of_stylists)
    return salon


# ---------- Availability ----------

def active_bookings_on(day) -> List[Booking]:
    """
    Everything holding a stylist on `day`.

    Confirmed appointments come from the scheduling index, with slot and
    duration read through to the appointment. Pending, rescheduled and
    confirmed-but-unindexed ones are read straight from the appointments table.
    """
    indexed = list(
        SchedulingIndexEntry.objects
        .filter(appointment__date=day, appointment__status=Appointment.STATUS_CONFIRMED)
        .values_list("appointment__timeslot", "appointment__service_duration")
    )
    others = list(
        Appointment.objects
        .filter(date=day)
        .filter(
            Q(status__in=[Appointment.STATUS_PENDING, Appointment.STATUS_RESCHEDULED])
            | Q(status=Appointment.STATUS_CONFIRMED, scheduling_entry__isnull=True)
        )
        .values_list("timeslot", "service_duration")
    )
    return [Booking(time=t, duration=d) for t, d in indexed + others]


def check_availability(day, duration: Optional[str] = None) -> Dict:
    parsed = parse_date(day)
    if parsed is None:
        raise ValidationError("Date is required for availability check", code="invalid_date")
    duration = duration or DEFAULT_REQUESTED_DURATION

    capacity = get_salon_capacity()
    result = build_availability(active_bookings_on(parsed), duration, capacity)

    return {
        "date": parsed.isoformat(),
        "duration": duration,
        "availableSlots": result["availableSlots"],
        "detailedAvailability": result["detailedAvailability"],
        "totalArtists": capacity,
        "message": f"Found {len(result['availableSlots'])} available time slots",
    }


# ---------- Booking guard ----------

def ensure_slot_free(day, timeslot, exclude_pk=None):
    """
    Re-check the exact date+time against the appointments table right before
    writing. Any other active appointment on that exact slot is a conflict,
    whatever the stylist count. Not duration-aware; the availability engine
    covers that.
    """
    qs = Appointment.objects.filter(
        date=day,
        timeslot=timeslot,
        status__in=Appointment.ACTIVE_STATUSES,
    )
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)

    if qs.exists():
        logger.info("Slot %s %s refused: already held by an active booking", day, timeslot)
        raise SlotUnavailable("The selected time slot is already booked")


# ---------- Appointments ----------

def create_appointment(data: Dict, caller: Optional[Caller] = None) -> Appointment:
    """
    Book a new appointment in pending state.
    `data` holds the flat fields produced by booking.forms.AppointmentForm.
    """
    appointment = Appointment(
        user_id=caller.id if caller else None,
        customer_name=data["customer_name"].strip(),
        customer_email=data["customer_email"].strip().lower(),
        customer_phone=data["customer_phone"].strip(),
        service_id=data["service_id"],
        service_name=data["service_name"],
        service_duration=data["service_duration"],
        service_price=data["service_price"],
        service_gender=data["service_gender"],
        date=data["date"],
        timeslot=data["timeslot"],
        status=Appointment.STATUS_PENDING,
    )
    appointment.full_clean()

    with transaction.atomic():
        ensure_slot_free(appointment.date, appointment.timeslot)
        appointment.save()

    logger.info(
        "Appointment %s booked for %s %s (%s)",
        appointment.pk, appointment.date, appointment.timeslot, appointment.service_id,
    )
    return appointment


def update_appointment_status(appointment_id, new_status, caller: Optional[Caller], strict=None) -> Appointment:
    """
    Staff can set any status. Owners may only cancel their own booking.
    """
    if caller is None:
        raise AuthenticationRequired("Authentication required")
    if new_status not in lifecycle.VALID_STATUSES:
        raise ValidationError(
            "Invalid status. Must be one of: " + ", ".join(lifecycle.VALID_STATUSES),
            code="invalid_status",
        )
    if strict is None:
        strict = settings.SALON_STRICT_TRANSITIONS

    with transaction.atomic():
        appointment = Appointment.objects.select_for_update().get(pk=appointment_id)
        if not caller.is_admin:
            if not owns_appointment(caller, appointment):
                raise PermissionDenied("Unauthorized to update this appointment")
            if new_status != Appointment.STATUS_CANCELLED:
                raise PermissionDenied("Only staff can change an appointment to " + new_status)
        lifecycle.transition(appointment, new_status, strict=strict)

    return appointment


def reschedule_appointment(
    appointment_id,
    new_date,
    new_time,
    caller: Optional[Caller],
    rescheduled_by: Optional[str] = None,
    reason: str = "",
) -> Appointment:
    if caller is None:
        raise AuthenticationRequired("Authentication required")

    parsed = parse_date(new_date)
    if parsed is None or not new_time:
        raise ValidationError("New date and time are required", code="required")
    if not is_valid_slot(new_time):
        raise ValidationError("Invalid time slot", code="invalid_timeslot")
    if parsed < timezone.localdate():
        raise ValidationError("Cannot reschedule to a past date", code="past_date")

    actor = RescheduleEntry.BY_ADMIN if caller.is_admin else RescheduleEntry.BY_USER
    if rescheduled_by == RescheduleEntry.BY_USER:
        # staff booking on a customer's behalf
        actor = RescheduleEntry.BY_USER

    with transaction.atomic():
        appointment = Appointment.objects.select_for_update().get(pk=appointment_id)
        if not can_manage(caller, appointment):
            raise PermissionDenied("Unauthorized to reschedule this appointment")
        if appointment.status in Appointment.TERMINAL_STATUSES:
            raise ValidationError(
                "Cannot reschedule completed or cancelled appointments",
                code="terminal_status",
            )
        ensure_slot_free(parsed, new_time, exclude_pk=appointment.pk)
        lifecycle.mark_rescheduled(appointment, parsed, new_time, actor, reason)

    return appointment


def delete_appointment(appointment_id, caller: Optional[Caller]):
    """Hard delete. Separate from setting status to cancelled."""
    if caller is None:
        raise AuthenticationRequired("Authentication required")

    appointment = Appointment.objects.get(pk=appointment_id)
    if not can_manage(caller, appointment):
        raise PermissionDenied("Unauthorized to delete this appointment")

    appointment.delete()
    logger.info("Appointment %s deleted by caller %s", appointment_id, caller.id)


def list_appointments(email=None, day=None, status=None, user_id=None, limit=None) -> List[Appointment]:
    qs = Appointment.objects.prefetch_related("reschedule_history")

    if email:
        qs = qs.filter(customer_email=email.strip().lower())
    if day:
        parsed = parse_date(day)
        if parsed is None:
            raise ValidationError("Invalid date", code="invalid_date")
        qs = qs.filter(date=parsed)
    if status:
        qs = qs.filter(status=status)
    if user_id:
        qs = qs.filter(user_id=user_id)

    # timeslot text does not sort chronologically, so sort in Python
    appointments = sorted(qs, key=lambda a: (a.date, parse_timeslot(a.timeslot), a.pk))
    return appointments[: limit or settings.APPOINTMENT_LIST_LIMIT]
