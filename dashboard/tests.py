from datetime import date
from django.contrib.auth import get_user_model
from django.test import Client, TestCase
from django.urls import reverse
from booking import services
from booking.models import Appointment, SalonSettings, SchedulingIndexEntry
from booking.test.helpers import make_appointment

# Create your tests here.
class DashboardAccessSmokeTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.staff = User.objects.create_user("staff", password="pass12345", is_staff=True)
        self.user = User.objects.create_user("user", password="pass12345", is_staff=False)
        self.protected_urls = [
            reverse("dashboard:appointments"),
            reverse("dashboard:salon_settings"),
        ]

    def test_protected_pages_require_login(self):
        for url in self.protected_urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 403)

    def test_non_staff_is_rejected(self):
        self.client.login(username="user", password="pass12345")
        for url in self.protected_urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 403)
            self.assertIn("Admin privileges", response.json()["error"])

    def test_staff_can_access(self):
        self.client.login(username="staff", password="pass12345")
        for url in self.protected_urls:
            response = self.client.get(url)
            self.assertEqual(response.status_code, 200)


class DashboardAppointmentsTests(TestCase):
    def setUp(self):
        User = get_user_model()
        User.objects.create_user("staff", password="pass12345", is_staff=True)
        self.client.login(username="staff", password="pass12345")
        self.url = reverse("dashboard:appointments")

    def test_listing_paginates(self):
        for i in range(12):
            make_appointment(customer_name=f"Client {i}", timeslot="9:00 AM", date=date(2024, 6, i + 1))

        body = self.client.get(self.url, {"page": 2, "limit": 5}).json()
        print("\n[TEST] page 2 pagination:", body["pagination"])

        self.assertEqual(len(body["appointments"]), 5)
        self.assertEqual(body["pagination"]["currentPage"], 2)
        self.assertEqual(body["pagination"]["totalPages"], 3)
        self.assertEqual(body["pagination"]["totalAppointments"], 12)
        self.assertTrue(body["pagination"]["hasNextPage"])
        self.assertTrue(body["pagination"]["hasPrevPage"])

    def test_search_status_and_date_filters(self):
        make_appointment(customer_name="Maria Lopez", customer_email="maria@test.com")
        make_appointment(customer_name="John Smith", customer_email="john@test.com",
                         status=Appointment.STATUS_CONFIRMED)
        make_appointment(customer_name="Ann Other", customer_email="ann@MARIA.com",
                         date=date(2024, 6, 2))

        names = lambda body: sorted(a["customer"]["name"] for a in body["appointments"])

        self.assertEqual(names(self.client.get(self.url, {"search": "maria"}).json()),
                         ["Ann Other", "Maria Lopez"])
        self.assertEqual(names(self.client.get(self.url, {"status": "confirmed"}).json()),
                         ["John Smith"])
        self.assertEqual(names(self.client.get(self.url, {"date": "2024-06-02"}).json()),
                         ["Ann Other"])

    def test_sorting(self):
        make_appointment(customer_name="Bea", date=date(2024, 6, 3))
        make_appointment(customer_name="Abe", date=date(2024, 6, 1))

        body = self.client.get(self.url, {"sortBy": "date", "sortOrder": "asc"}).json()
        self.assertEqual([a["customer"]["name"] for a in body["appointments"]], ["Abe", "Bea"])

    def test_status_update_maintains_the_index(self):
        appt = make_appointment()

        response = self.client.put(
            self.url, {"appointmentId": appt.pk, "status": "confirmed"}, content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["appointment"]["appointment"]["status"], "confirmed")
        self.assertTrue(SchedulingIndexEntry.objects.filter(appointment=appt).exists())

        self.client.put(
            self.url, {"appointmentId": appt.pk, "status": "cancelled"}, content_type="application/json",
        )
        self.assertFalse(SchedulingIndexEntry.objects.exists())

    def test_status_update_validation(self):
        appt = make_appointment()

        missing = self.client.put(self.url, {"appointmentId": appt.pk}, content_type="application/json")
        self.assertEqual(missing.status_code, 400)

        bad = self.client.put(
            self.url, {"appointmentId": appt.pk, "status": "archived"}, content_type="application/json",
        )
        self.assertEqual(bad.status_code, 400)
        self.assertIn("Invalid status", bad.json()["error"])

        gone = self.client.put(
            self.url, {"appointmentId": 9999, "status": "confirmed"}, content_type="application/json",
        )
        self.assertEqual(gone.status_code, 404)

    def test_hard_delete_is_separate_from_cancel(self):
        appt = make_appointment()
        response = self.client.delete(reverse("dashboard:appointment_delete", args=[appt.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Appointment.objects.filter(pk=appt.pk).exists())
        self.assertEqual(
            self.client.delete(reverse("dashboard:appointment_delete", args=[appt.pk])).status_code,
            404,
        )


class SalonSettingsTests(TestCase):
    def setUp(self):
        User = get_user_model()
        User.objects.create_user("staff", password="pass12345", is_staff=True)
        self.client.login(username="staff", password="pass12345")
        self.url = reverse("dashboard:salon_settings")

    def test_default_capacity_is_created_on_first_read(self):
        self.assertFalse(SalonSettings.objects.exists())
        self.assertEqual(services.get_salon_capacity(), 1)
        self.assertEqual(SalonSettings.objects.count(), 1)

    def test_capacity_bounds(self):
        print("\n[TEST] capacity 0 and 51 are refused, 5 sticks")
        for bad in (0, 51, "5", None, True):
            response = self.client.put(self.url, {"numberOfStylists": bad}, content_type="application/json")
            self.assertEqual(response.status_code, 400, bad)

        response = self.client.put(self.url, {"numberOfStylists": 5}, content_type="application/json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["settings"]["numberOfStylists"], 5)

        self.assertEqual(services.get_salon_capacity(), 5)
        self.assertEqual(self.client.get(self.url).json()["settings"]["numberOfStylists"], 5)
        self.assertEqual(SalonSettings.objects.count(), 1)

    def test_staff_updates_pass_csrf_checks(self):
        client = Client(enforce_csrf_checks=True)
        client.login(username="staff", password="pass12345")
        appt = make_appointment()

        response = client.put(self.url, {"numberOfStylists": 3}, content_type="application/json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(services.get_salon_capacity(), 3)

        response = client.put(
            reverse("dashboard:appointments"),
            {"appointmentId": appt.pk, "status": "confirmed"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(client.delete(reverse("dashboard:appointment_delete", args=[appt.pk])).status_code, 200)
