from django import forms
from .models import Appointment
from .utils.time_grid import format_html_time_to_timeslot, is_valid_slot

class AppointmentForm(forms.ModelForm):
    """
    Validates a booking request before it reaches booking.services.
    Used by:
      - POST /api/appointments/ (customers and guests)
    The slot-taken check is not done here; create_appointment re-checks
    inside the write transaction.
    """

    class Meta:
        model = Appointment
        fields = [
            "customer_name", "customer_email", "customer_phone",
            "service_id", "service_name", "service_duration", "service_price", "service_gender",
            "date", "timeslot",
        ]

    @classmethod
    def from_payload(cls, payload):
        """
        Flatten the nested JSON body:
        {customerInfo: {...}, serviceDetails: {...}, appointmentDetails: {date, time}}
        """
        customer = payload.get("customerInfo") or {}
        service = payload.get("serviceDetails") or {}
        details = payload.get("appointmentDetails") or {}

        return cls(data={
            "customer_name": customer.get("name", ""),
            "customer_email": customer.get("email", ""),
            "customer_phone": customer.get("phone", ""),
            "service_id": service.get("id", ""),
            "service_name": service.get("name", ""),
            "service_duration": service.get("duration", ""),
            "service_price": service.get("price", ""),
            "service_gender": service.get("gender", ""),
            "date": details.get("date", ""),
            "timeslot": details.get("time", ""),
        })

    def clean_customer_email(self):
        return self.cleaned_data["customer_email"].strip().lower()

    def clean_timeslot(self):
        # accept '14:00' from <input type="time"> as well as '2:00 PM'
        timeslot = format_html_time_to_timeslot(self.cleaned_data.get("timeslot", ""))
        if not is_valid_slot(timeslot):
            raise forms.ValidationError("Please choose one of the available time slots.")
        return timeslot
