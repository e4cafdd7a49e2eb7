from typing import Dict, Optional

from django.core.paginator import Paginator
from django.db.models import Count, Q

from booking.models import Appointment
from booking.utils.time_grid import parse_date

# query param -> model field
SORT_FIELDS = {
    "createdAt": "created_at",
    "date": "date",
    "time": "timeslot",
    "name": "customer_name",
    "email": "customer_email",
    "status": "status",
}


def filtered_appointments(status: Optional[str] = None, search: Optional[str] = None, day=None):
    """
    Staff listing filters: exact status, case-insensitive search on
    customer name/email, and a single calendar day.
    """
    qs = Appointment.objects.prefetch_related("reschedule_history")

    if status:
        qs = qs.filter(status=status)

    if search:
        qs = qs.filter(
            Q(customer_name__icontains=search)
            | Q(customer_email__icontains=search)
        )

    if day:
        parsed = parse_date(day)
        if parsed is not None:
            qs = qs.filter(date=parsed)

    return qs


def paginate_appointments(qs, page: int = 1, limit: int = 10,
                          sort_by: str = "createdAt", sort_order: str = "desc") -> Dict:
    field = SORT_FIELDS.get(sort_by, "created_at")
    ordering = field if sort_order == "asc" else f"-{field}"
    qs = qs.order_by(ordering, "-id")

    paginator = Paginator(qs, max(1, limit))
    page_obj = paginator.get_page(page)

    return {
        "appointments": [a.as_dict() for a in page_obj.object_list],
        "pagination": {
            "currentPage": page_obj.number,
            "totalPages": paginator.num_pages,
            "totalAppointments": paginator.count,
            "hasNextPage": page_obj.has_next(),
            "hasPrevPage": page_obj.has_previous(),
            "limit": paginator.per_page,
        },
    }


def status_counts() -> Dict[str, int]:
    """Number of appointments per status, zero-filled."""
    counts = {value: 0 for value, _ in Appointment.STATUS_CHOICES}
    rows = Appointment.objects.values("status").annotate(count=Count("id"))
    for row in rows:
        counts[row["status"]] = row["count"]
    return counts
