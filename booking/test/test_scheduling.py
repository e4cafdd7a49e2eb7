from datetime import date
from unittest import mock
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from booking import services
from booking.availability import (
    STATUS_AVAILABLE, STATUS_DURATION_CONFLICT, STATUS_FULLY_BOOKED,
    Booking, build_availability, can_book_at, occupies_slot,
)
from booking.models import Appointment, SchedulingIndexEntry
from booking.utils.durations import parse_duration_minutes
from booking.utils.time_grid import (
    format_html_time_to_timeslot, is_valid_slot, minutes_to_timeslot, slots, timeslot_to_minutes,
)
from .helpers import admin_caller, make_appointment


class TimeGridTests(SimpleTestCase):
    def test_default_grid_runs_nine_to_five_every_15_minutes(self):
        grid = slots()
        print("\n[TEST] grid:", grid[0], "...", grid[-1], f"({len(grid)} slots)")

        self.assertEqual(grid[0], "9:00 AM")
        self.assertEqual(grid[1], "9:15 AM")
        self.assertEqual(grid[-1], "5:00 PM")
        self.assertEqual(len(grid), 33)
        self.assertIn("12:00 PM", grid)
        self.assertIn("12:45 PM", grid)

    def test_slot_membership(self):
        self.assertTrue(is_valid_slot("10:15 AM"))
        self.assertFalse(is_valid_slot("10:10 AM"))
        self.assertFalse(is_valid_slot("8:45 AM"))
        self.assertFalse(is_valid_slot("10:00"))
        self.assertFalse(is_valid_slot(None))

    @override_settings(SALON_OPENING_TIME="10:00 AM", SALON_CLOSING_TIME="11:00 AM")
    def test_grid_follows_settings(self):
        self.assertEqual(slots(), ["10:00 AM", "10:15 AM", "10:30 AM", "10:45 AM", "11:00 AM"])

    def test_minutes_conversion_handles_noon_and_midnight(self):
        self.assertEqual(timeslot_to_minutes("12:00 AM"), 0)
        self.assertEqual(timeslot_to_minutes("12:30 PM"), 750)
        self.assertEqual(timeslot_to_minutes("1:00 PM"), 780)
        self.assertEqual(minutes_to_timeslot(0), "12:00 AM")
        self.assertEqual(minutes_to_timeslot(720), "12:00 PM")
        self.assertEqual(minutes_to_timeslot(555), "9:15 AM")

    def test_html_time_input_is_normalized(self):
        self.assertEqual(format_html_time_to_timeslot("14:00"), "2:00 PM")
        self.assertEqual(format_html_time_to_timeslot("09:30 am"), "9:30 AM")
        self.assertEqual(format_html_time_to_timeslot("nonsense"), "nonsense")


class DurationParserTests(SimpleTestCase):
    def test_minutes_and_hours(self):
        self.assertEqual(parse_duration_minutes("45 min"), 45)
        self.assertEqual(parse_duration_minutes("2 hours"), 120)
        self.assertEqual(parse_duration_minutes("1 hr"), 60)
        self.assertEqual(parse_duration_minutes("90 Minutes"), 90)
        self.assertEqual(parse_duration_minutes("3HRS"), 180)

    def test_garbage_falls_back_to_default(self):
        self.assertEqual(parse_duration_minutes("garbage"), 30)
        self.assertEqual(parse_duration_minutes(""), 30)
        self.assertEqual(parse_duration_minutes(None), 30)


class OverlapTests(SimpleTestCase):
    def test_booking_occupies_the_slots_it_covers(self):
        booking = Booking("10:00 AM", "30 min")
        self.assertTrue(occupies_slot(booking, "10:00 AM"))
        self.assertTrue(occupies_slot(booking, "10:15 AM"))
        self.assertFalse(occupies_slot(booking, "9:45 AM"))
        self.assertFalse(occupies_slot(booking, "10:45 AM"))

    def test_end_boundary_is_inclusive(self):
        print("\n[TEST] a 10:00 AM / 30 min booking still blocks 10:30 AM")
        self.assertTrue(occupies_slot(Booking("10:00 AM", "30 min"), "10:30 AM"))

    def test_slot_ending_at_booking_start_is_free(self):
        # slot 9:45 ends at 10:00; start side is open
        self.assertFalse(occupies_slot(Booking("10:00 AM", "15 min"), "9:45 AM"))


class AvailabilityEngineTests(SimpleTestCase):
    def test_no_bookings_means_everything_is_open(self):
        result = build_availability([], "45 min", capacity=3)
        detailed = result["detailedAvailability"]

        self.assertEqual(result["availableSlots"], slots())
        for slot in slots():
            self.assertEqual(detailed[slot]["availableArtists"], 3)
            self.assertEqual(detailed[slot]["status"], STATUS_AVAILABLE)
            self.assertTrue(detailed[slot]["available"])

    def test_counts_stay_within_zero_and_capacity(self):
        bookings = [Booking("10:00 AM", "60 min")] * 4
        detailed = build_availability(bookings, "30 min", capacity=2)["detailedAvailability"]

        for info in detailed.values():
            self.assertGreaterEqual(info["availableArtists"], 0)
            self.assertLessEqual(info["availableArtists"], 2)
        self.assertEqual(detailed["10:30 AM"]["availableArtists"], 0)

    def test_duration_conflict_when_a_later_sub_slot_is_full(self):
        bookings = [Booking("11:00 AM", "30 min")]
        detailed = build_availability(bookings, "60 min", capacity=1)["detailedAvailability"]

        print("\n[TEST] 10:15 AM for 60 min runs into 11:00 AM:", detailed["10:15 AM"])
        self.assertEqual(detailed["10:15 AM"]["status"], STATUS_DURATION_CONFLICT)
        self.assertFalse(detailed["10:15 AM"]["available"])
        self.assertTrue(detailed["10:15 AM"]["availableArtists"] > 0)
        self.assertEqual(detailed["11:00 AM"]["status"], STATUS_FULLY_BOOKED)
        # the whole hour 9:00-10:00 ends before 11:00
        self.assertEqual(detailed["9:00 AM"]["status"], STATUS_AVAILABLE)

    def test_sub_slots_past_closing_are_not_checked(self):
        print("\n[TEST] a 2 hour booking may start at 4:30 PM and run past closing")
        self.assertTrue(can_book_at("4:30 PM", "2 hours", [], capacity=1))

        detailed = build_availability([], "2 hours", capacity=1)["detailedAvailability"]
        self.assertEqual(detailed["5:00 PM"]["status"], STATUS_AVAILABLE)


class CheckAvailabilityTests(TestCase):
    def test_fully_booked_slot_end_to_end(self):
        print("\n[TEST] capacity 2, two active bookings at 1:00 PM")
        services.set_salon_capacity(2)
        make_appointment(date=date(2024, 7, 1), timeslot="1:00 PM", status=Appointment.STATUS_PENDING)
        make_appointment(date=date(2024, 7, 1), timeslot="1:00 PM", status=Appointment.STATUS_RESCHEDULED,
                         customer_email="c@test.com")

        result = services.check_availability("2024-07-01", "30 min")
        slot = result["detailedAvailability"]["1:00 PM"]
        print("  - 1:00 PM:", slot)

        self.assertEqual(slot["status"], STATUS_FULLY_BOOKED)
        self.assertFalse(slot["available"])
        self.assertEqual(result["totalArtists"], 2)
        self.assertNotIn("1:00 PM", result["availableSlots"])

    def test_confirmed_bookings_are_read_from_the_index(self):
        appt = make_appointment(date=date(2024, 7, 2), timeslot="2:00 PM")
        services.update_appointment_status(appt.pk, Appointment.STATUS_CONFIRMED, admin_caller())

        result = services.check_availability("2024-07-02", "30 min")
        self.assertEqual(result["detailedAvailability"]["2:00 PM"]["status"], STATUS_FULLY_BOOKED)

    def test_cancelled_and_completed_do_not_hold_capacity(self):
        make_appointment(date=date(2024, 7, 3), timeslot="9:00 AM", status=Appointment.STATUS_CANCELLED)
        make_appointment(date=date(2024, 7, 3), timeslot="9:30 AM", status=Appointment.STATUS_COMPLETED)

        result = services.check_availability(date(2024, 7, 3), "30 min")
        self.assertEqual(result["availableSlots"], slots())

    def test_rescheduled_confirmed_booking_counts_at_its_new_slot(self):
        appt = make_appointment(date=date(2024, 7, 4), timeslot="9:00 AM", customer_email="a@test.com")
        services.update_appointment_status(appt.pk, Appointment.STATUS_CONFIRMED, admin_caller())
        Appointment.objects.filter(pk=appt.pk).update(
            status=Appointment.STATUS_RESCHEDULED, timeslot="3:00 PM",
        )

        detailed = services.check_availability("2024-07-04", "15 min")["detailedAvailability"]
        self.assertEqual(detailed["9:00 AM"]["status"], STATUS_AVAILABLE)
        self.assertEqual(detailed["3:00 PM"]["status"], STATUS_FULLY_BOOKED)

    def test_confirmed_booking_without_index_entry_still_holds_its_slot(self):
        print("\n[TEST] index write failed on confirm, 11:00 AM stays taken")
        appt = make_appointment(date=date(2024, 7, 6), timeslot="11:00 AM")

        with mock.patch.object(
            SchedulingIndexEntry.objects, "update_or_create", side_effect=DatabaseError("index down"),
        ):
            with self.assertLogs("booking.lifecycle", level="ERROR"):
                services.update_appointment_status(appt.pk, Appointment.STATUS_CONFIRMED, admin_caller())

        self.assertFalse(SchedulingIndexEntry.objects.exists())
        result = services.check_availability("2024-07-06", "30 min")
        self.assertEqual(result["detailedAvailability"]["11:00 AM"]["status"], STATUS_FULLY_BOOKED)
        self.assertNotIn("11:00 AM", result["availableSlots"])

    def test_stale_index_entry_counts_at_the_appointment_slot(self):
        appt = make_appointment(date=date(2024, 7, 7), timeslot="1:00 PM")
        services.update_appointment_status(appt.pk, Appointment.STATUS_CONFIRMED, admin_caller())
        SchedulingIndexEntry.objects.filter(appointment=appt).update(
            appointment_date=date(2024, 7, 8), appointment_time="9:00 AM", duration="15 min",
        )

        detailed = services.check_availability("2024-07-07", "15 min")["detailedAvailability"]
        self.assertEqual(detailed["1:00 PM"]["status"], STATUS_FULLY_BOOKED)
        self.assertEqual(detailed["9:00 AM"]["status"], STATUS_AVAILABLE)
        other_day = services.check_availability("2024-07-08", "15 min")
        self.assertEqual(other_day["availableSlots"], slots())

    def test_api_reports_availability(self):
        make_appointment(date=date(2024, 7, 5), timeslot="10:00 AM")

        response = self.client.get("/api/appointments/", {
            "checkAvailability": "true", "date": "2024-07-05", "duration": "30 min",
        })
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["date"], "2024-07-05")
        self.assertEqual(body["duration"], "30 min")
        self.assertEqual(body["detailedAvailability"]["10:15 AM"]["status"], STATUS_FULLY_BOOKED)
        self.assertIn("available time slots", body["message"])

    def test_api_requires_a_date(self):
        response = self.client.get("/api/appointments/", {"checkAvailability": "true"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Date is required", response.json()["error"])
