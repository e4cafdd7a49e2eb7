import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from booking import services as booking_services
from booking.api import error_response, json_api, read_json, staff_required

from .services import filtered_appointments, paginate_appointments, status_counts

logger = logging.getLogger(__name__)


def _int_param(request, name, default):
    try:
        return int(request.GET.get(name) or default)
    except (TypeError, ValueError):
        return default


@json_api
@staff_required
@require_http_methods(["GET", "PUT"])
def appointments(request):
    # ---- Status change from the appointments table (Approve / Cancel / Complete etc.) ----
    if request.method == "PUT":
        payload = read_json(request)
        appt_id = payload.get("appointmentId")
        status = payload.get("status")
        if not appt_id or not status:
            return error_response("Appointment ID and status are required", 400)
        if not str(appt_id).isdigit():
            return error_response("Appointment ID must be numeric", 400)

        appt = booking_services.update_appointment_status(appt_id, status, request.caller)
        return JsonResponse({
            "message": "Appointment status updated successfully",
            "appointment": appt.as_dict(),
        })

    # ---- Listing with search filter ----
    qs = filtered_appointments(
        status=request.GET.get("status"),
        search=request.GET.get("search", "").strip(),
        day=request.GET.get("date"),
    )
    data = paginate_appointments(
        qs,
        page=_int_param(request, "page", 1),
        limit=_int_param(request, "limit", 10),
        sort_by=request.GET.get("sortBy") or "createdAt",
        sort_order=request.GET.get("sortOrder") or "desc",
    )
    data["statusCounts"] = status_counts()
    data["message"] = "Appointments retrieved successfully"
    return JsonResponse(data)


@json_api
@staff_required
@require_http_methods(["DELETE"])
def appointment_delete(request, appointment_id):
    booking_services.delete_appointment(appointment_id, request.caller)
    return JsonResponse({"message": "Appointment deleted successfully"})


@json_api
@staff_required
@require_http_methods(["GET", "PUT"])
def salon_settings(request):
    if request.method == "PUT":
        payload = read_json(request)
        salon = booking_services.set_salon_capacity(payload.get("numberOfStylists"))
        logger.info("Capacity changed by staff user %s", request.caller.id)
        return JsonResponse({
            "success": True,
            "message": "Salon settings updated successfully",
            "settings": {
                "numberOfStylists": salon.number_of_stylists,
                "updatedAt": salon.updated_at.isoformat(),
            },
        })

    return JsonResponse({
        "success": True,
        "settings": {"numberOfStylists": booking_services.get_salon_capacity()},
    })
