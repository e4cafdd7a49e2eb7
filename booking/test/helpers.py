from datetime import date

from django.contrib.auth import get_user_model

from booking.auth import Caller, ROLE_ADMIN, ROLE_USER
from booking.models import Appointment


def make_appointment(**overrides):
    fields = {
        "customer_name": "Existing Client",
        "customer_email": "a@test.com",
        "customer_phone": "1234567890",
        "service_id": "beard-styling",
        "service_name": "Beard Styling",
        "service_duration": "30 min",
        "service_price": "$45",
        "service_gender": Appointment.GENDER_MEN,
        "date": date(2024, 6, 1),
        "timeslot": "10:00 AM",
        "status": Appointment.STATUS_PENDING,
    }
    fields.update(overrides)
    return Appointment.objects.create(**fields)


def booking_payload(date_str="2024-06-01", time="10:00 AM", **customer):
    info = {"name": "New Client", "email": "b@test.com", "phone": "0987654321"}
    info.update(customer)
    return {
        "customerInfo": info,
        "serviceDetails": {
            "id": "haircut-men",
            "name": "Premium Haircut",
            "duration": "45 min",
            "price": "$65",
            "gender": "men",
        },
        "appointmentDetails": {"date": date_str, "time": time},
    }


def booking_data(**overrides):
    """Flat cleaned data, as AppointmentForm hands it to create_appointment."""
    data = {
        "customer_name": "New Client",
        "customer_email": "b@test.com",
        "customer_phone": "0987654321",
        "service_id": "haircut-men",
        "service_name": "Premium Haircut",
        "service_duration": "45 min",
        "service_price": "$65",
        "service_gender": "men",
        "date": date(2024, 6, 1),
        "timeslot": "10:00 AM",
    }
    data.update(overrides)
    return data


def make_user(username, staff=False, email=""):
    User = get_user_model()
    return User.objects.create_user(username, email=email, password="pass12345", is_staff=staff)


def admin_caller(pk=1):
    return Caller(id=pk, email="staff@salon.test", role=ROLE_ADMIN)


def customer_caller(pk=2, email="a@test.com"):
    return Caller(id=pk, email=email, role=ROLE_USER)
