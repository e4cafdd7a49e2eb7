import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from .exceptions import InvalidTransition
from .models import Appointment, RescheduleEntry, SchedulingIndexEntry

logger = logging.getLogger(__name__)

VALID_STATUSES = [value for value, _ in Appointment.STATUS_CHOICES]

ALLOWED_TRANSITIONS = {
    Appointment.STATUS_PENDING: {
        Appointment.STATUS_CONFIRMED,
        Appointment.STATUS_CANCELLED,
        Appointment.STATUS_RESCHEDULED,
    },
    Appointment.STATUS_CONFIRMED: {
        Appointment.STATUS_COMPLETED,
        Appointment.STATUS_CANCELLED,
        Appointment.STATUS_RESCHEDULED,
    },
    Appointment.STATUS_RESCHEDULED: {
        Appointment.STATUS_CONFIRMED,
        Appointment.STATUS_COMPLETED,
        Appointment.STATUS_CANCELLED,
        Appointment.STATUS_RESCHEDULED,
    },
    Appointment.STATUS_COMPLETED: set(),
    Appointment.STATUS_CANCELLED: set(),
}


def can_transition(current: str, target: str) -> bool:
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, set())


def _index_appointment(appointment):
    # reuse an existing row, refreshed to the appointment's current slot
    SchedulingIndexEntry.objects.update_or_create(
        appointment=appointment,
        defaults={
            "appointment_date": appointment.date,
            "appointment_time": appointment.timeslot,
            "duration": appointment.service_duration,
        },
    )


def _unindex_appointment(appointment):
    SchedulingIndexEntry.objects.filter(appointment=appointment).delete()


def _best_effort(action, appointment):
    """
    Run an index side effect in its own savepoint. Failures are logged and
    dropped; the status change that triggered them stands.
    """
    try:
        with transaction.atomic():
            action(appointment)
    except Exception:
        logger.exception(
            "Scheduling index %s failed for appointment %s",
            action.__name__.strip("_"),
            appointment.pk,
        )


def sync_scheduling_index(appointment):
    if appointment.status == Appointment.STATUS_CONFIRMED:
        _best_effort(_index_appointment, appointment)
    elif appointment.status in Appointment.TERMINAL_STATUSES:
        _best_effort(_unindex_appointment, appointment)


def transition(appointment, new_status, strict=False):
    """
    Move an appointment to new_status and maintain the scheduling index.

    Any of the five statuses is accepted from any state unless strict is set,
    in which case ALLOWED_TRANSITIONS applies.
    """
    if new_status not in VALID_STATUSES:
        raise ValidationError(
            "Invalid status. Must be one of: " + ", ".join(VALID_STATUSES),
            code="invalid_status",
        )

    previous = appointment.status
    if strict and not can_transition(previous, new_status):
        raise InvalidTransition(f"Cannot change status from {previous} to {new_status}")

    appointment.status = new_status
    appointment.save(update_fields=["status", "updated_at"])
    logger.info("Appointment %s: %s -> %s", appointment.pk, previous, new_status)

    sync_scheduling_index(appointment)
    return appointment


def mark_rescheduled(appointment, new_date, new_time, rescheduled_by, reason=""):
    """
    Move the appointment to a new slot, record the move and set status to
    rescheduled. The scheduling index is left alone.
    """
    entry = RescheduleEntry(
        appointment=appointment,
        old_date=appointment.date,
        old_time=appointment.timeslot,
        new_date=new_date,
        new_time=new_time,
        rescheduled_by=rescheduled_by,
        reason=reason or "",
    )

    appointment.date = new_date
    appointment.timeslot = new_time
    appointment.status = Appointment.STATUS_RESCHEDULED
    appointment.save(update_fields=["date", "timeslot", "status", "updated_at"])
    entry.save()

    logger.info(
        "Appointment %s rescheduled by %s: %s %s -> %s %s",
        appointment.pk, rescheduled_by,
        entry.old_date, entry.old_time, new_date, new_time,
    )
    return appointment
