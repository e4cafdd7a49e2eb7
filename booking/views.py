from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from . import services
from .api import error_response, json_api, read_json
from .constants import SALON_SERVICES
from .exceptions import AuthenticationRequired
from .forms import AppointmentForm
from .models import Appointment


@json_api
@require_http_methods(["GET", "POST"])
def appointments(request):
    if request.method == "POST":
        return _create_appointment(request)

    if request.GET.get("checkAvailability") == "true":
        date = request.GET.get("date")
        if not date:
            return error_response("Date is required for availability check", 400)
        data = services.check_availability(date, request.GET.get("duration") or None)
        return JsonResponse(data)

    user_id = request.GET.get("userId")
    if user_id and not user_id.isdigit():
        return error_response("userId must be numeric", 400)

    found = services.list_appointments(
        email=request.GET.get("email"),
        day=request.GET.get("date"),
        status=request.GET.get("status"),
        user_id=user_id,
    )
    return JsonResponse({
        "appointments": [a.as_dict() for a in found],
        "count": len(found),
    })


def _create_appointment(request):
    payload = read_json(request)
    missing = [k for k in ("customerInfo", "serviceDetails", "appointmentDetails") if not payload.get(k)]
    if missing:
        return error_response(
            "Missing required fields: customerInfo, serviceDetails, appointmentDetails",
            400,
        )

    form = AppointmentForm.from_payload(payload)
    if not form.is_valid():
        details = [msg for messages in form.errors.values() for msg in messages]
        return error_response("Validation failed", 400, details)

    appointment = services.create_appointment(form.cleaned_data, caller=request.caller)
    return JsonResponse(
        {
            "message": "Appointment booked successfully",
            "appointment": appointment.as_dict(),
        },
        status=201,
    )


@json_api
@require_http_methods(["GET", "PUT", "DELETE"])
def appointment_detail(request, appointment_id):
    if request.method == "GET":
        appointment = Appointment.objects.get(pk=appointment_id)
        return JsonResponse({"appointment": appointment.as_dict()})

    if request.method == "DELETE":
        services.delete_appointment(appointment_id, request.caller)
        return JsonResponse({"message": "Appointment cancelled successfully"})

    payload = read_json(request)
    status = payload.get("status")
    if not status:
        return error_response("Status is required", 400)

    appointment = services.update_appointment_status(appointment_id, status, request.caller)
    return JsonResponse({
        "message": "Appointment updated successfully",
        "appointment": appointment.as_dict(),
    })


@json_api
@require_http_methods(["PUT"])
def reschedule(request, appointment_id):
    if request.caller is None:
        raise AuthenticationRequired("Authentication required")

    payload = read_json(request)
    appointment = services.reschedule_appointment(
        appointment_id,
        payload.get("newDate"),
        payload.get("newTime"),
        request.caller,
        rescheduled_by=payload.get("rescheduledBy"),
        reason=payload.get("reason") or "",
    )
    return JsonResponse({
        "message": "Appointment rescheduled successfully",
        "appointment": appointment.as_dict(),
    })


@json_api
@require_GET
def service_catalog(request):
    gender = request.GET.get("gender")
    if gender:
        if gender not in SALON_SERVICES:
            return error_response("Unknown gender category", 400)
        return JsonResponse({"services": {gender: SALON_SERVICES[gender]}})
    return JsonResponse({"services": SALON_SERVICES})
