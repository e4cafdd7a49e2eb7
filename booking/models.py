from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models

from .utils.time_grid import is_valid_slot


def validate_timeslot(value):
	if not is_valid_slot(value):
		raise ValidationError(
			"%(value)s is not a valid time slot.",
			code="invalid_timeslot",
			params={"value": value},
		)


# Create your models here.
class Appointment(models.Model):
	STATUS_PENDING     = "pending"
	STATUS_CONFIRMED   = "confirmed"
	STATUS_COMPLETED   = "completed"
	STATUS_CANCELLED   = "cancelled"
	STATUS_RESCHEDULED = "rescheduled"

	STATUS_CHOICES = [
		(STATUS_PENDING, "Pending"),
		(STATUS_CONFIRMED, "Confirmed"),
		(STATUS_COMPLETED, "Completed"),
		(STATUS_CANCELLED, "Cancelled"),
		(STATUS_RESCHEDULED, "Rescheduled"),
	]

	# statuses that still hold a stylist
	ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_RESCHEDULED)
	TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)

	GENDER_MEN   = "men"
	GENDER_WOMEN = "women"
	GENDER_CHOICES = [
		(GENDER_MEN, "Men"),
		(GENDER_WOMEN, "Women"),
	]

	# null for guest bookings
	user = models.ForeignKey(
		settings.AUTH_USER_MODEL,
		null=True,
		blank=True,
		on_delete=models.SET_NULL,
		related_name="appointments",
	)

	customer_name = models.CharField(
		max_length=100,
		validators=[MinLengthValidator(2, "Name must be at least 2 characters long")],
	)
	customer_email = models.EmailField()
	customer_phone = models.CharField(
		max_length=15,
		validators=[MinLengthValidator(10, "Phone number must be at least 10 characters")],
	)

	service_id = models.CharField(max_length=60)
	service_name = models.CharField(max_length=120)
	service_duration = models.CharField(max_length=40)
	service_price = models.CharField(max_length=40)
	service_gender = models.CharField(max_length=5, choices=GENDER_CHOICES)

	date = models.DateField()
	timeslot = models.CharField(max_length=10, validators=[validate_timeslot])
	status = models.CharField(
		max_length=11,
		choices=STATUS_CHOICES,
		default=STATUS_PENDING,
	)

	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		indexes = [
			models.Index(fields=["customer_email"], name="booking_appt_email_idx"),
			models.Index(fields=["status"], name="booking_appt_status_idx"),
			# not unique: the booking guard decides what counts as a collision
			models.Index(fields=["date", "timeslot"], name="booking_appt_date_time_idx"),
		]
		ordering = ["date", "timeslot", "customer_name"]

	def __str__(self):
		return f"{self.customer_name} - {self.date} {self.timeslot} ({self.status})"

	@property
	def is_active(self):
		return self.status in self.ACTIVE_STATUSES

	def as_dict(self):
		return {
			"id": self.pk,
			"customer": {
				"name": self.customer_name,
				"email": self.customer_email,
				"phone": self.customer_phone,
			},
			"service": {
				"id": self.service_id,
				"name": self.service_name,
				"duration": self.service_duration,
				"price": self.service_price,
				"gender": self.service_gender,
			},
			"appointment": {
				"date": self.date.isoformat(),
				"time": self.timeslot,
				"status": self.status,
			},
			"rescheduleHistory": [entry.as_dict() for entry in self.reschedule_history.all()],
			"createdAt": self.created_at.isoformat() if self.created_at else None,
		}


class RescheduleEntry(models.Model):
	"""One row per reschedule. Append-only: rows are never edited or removed."""

	BY_USER  = "user"
	BY_ADMIN = "admin"
	BY_CHOICES = [
		(BY_USER, "Customer"),
		(BY_ADMIN, "Admin"),
	]

	appointment = models.ForeignKey(
		Appointment,
		on_delete=models.CASCADE,
		related_name="reschedule_history",
	)
	old_date = models.DateField()
	old_time = models.CharField(max_length=10)
	new_date = models.DateField()
	new_time = models.CharField(max_length=10)
	rescheduled_by = models.CharField(max_length=5, choices=BY_CHOICES)
	rescheduled_at = models.DateTimeField(auto_now_add=True)
	reason = models.TextField(blank=True)

	class Meta:
		ordering = ["rescheduled_at", "id"]
		verbose_name_plural = "reschedule entries"

	def __str__(self):
		return f"{self.old_date} {self.old_time} -> {self.new_date} {self.new_time}"

	def as_dict(self):
		return {
			"oldDate": self.old_date.isoformat(),
			"oldTime": self.old_time,
			"newDate": self.new_date.isoformat(),
			"newTime": self.new_time,
			"rescheduledBy": self.rescheduled_by,
			"rescheduledAt": self.rescheduled_at.isoformat() if self.rescheduled_at else None,
			"reason": self.reason or None,
		}


class SchedulingIndexEntry(models.Model):
	"""
	Projection of a confirmed appointment used by the availability engine.
	Written only by booking.lifecycle; the Appointment row is authoritative.
	"""

	appointment = models.OneToOneField(
		Appointment,
		on_delete=models.CASCADE,
		related_name="scheduling_entry",
	)
	appointment_date = models.DateField(db_index=True)
	appointment_time = models.CharField(max_length=10, validators=[validate_timeslot])
	duration = models.CharField(max_length=40)

	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		indexes = [
			models.Index(fields=["appointment_date", "appointment_time"], name="booking_sched_date_time_idx"),
		]
		verbose_name_plural = "scheduling index entries"

	def __str__(self):
		return f"#{self.appointment_id} {self.appointment_date} {self.appointment_time} ({self.duration})"


class SalonSettings(models.Model):
	"""Singleton row holding the stylist pool size."""

	number_of_stylists = models.PositiveSmallIntegerField(
		default=1,
		validators=[
			MinValueValidator(1, "Number of stylists must be at least 1"),
			MaxValueValidator(50, "Number of stylists cannot exceed 50"),
		],
	)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		verbose_name_plural = "salon settings"

	def __str__(self):
		return f"{self.number_of_stylists} stylist(s)"

	@classmethod
	def load(cls):
		settings_row, _ = cls.objects.get_or_create(pk=1, defaults={"number_of_stylists": 1})
		return settings_row
