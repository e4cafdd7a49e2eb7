from django.contrib import admin
from .models import Appointment, RescheduleEntry, SalonSettings, SchedulingIndexEntry


class RescheduleEntryInline(admin.TabularInline):
    model = RescheduleEntry
    extra = 0
    can_delete = False
    readonly_fields = ("old_date", "old_time", "new_date", "new_time", "rescheduled_by", "rescheduled_at", "reason")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    # table columns
    list_display = ("id", "date", "timeslot", "customer_name", "customer_phone", "customer_email", "service_name", "status", "created_at")
    list_display_links = ("id", "customer_name")

    # right sidebar filters
    list_filter = ("status", "date", "service_gender")

    # top search bar
    search_fields = ("customer_name", "customer_phone", "customer_email")

    # date drilldown nav
    date_hierarchy = "date"

    # pagination
    list_per_page = 25

    # status and slot changes go through the API so history and the
    # scheduling index stay in sync
    readonly_fields = ("date", "timeslot", "status", "created_at", "updated_at")

    fieldsets = (
        ("Customer", {"fields": ("user", "customer_name", "customer_phone", "customer_email")}),
        ("Service",  {"fields": ("service_id", "service_name", "service_duration", "service_price", "service_gender")}),
        ("Booking",  {"fields": ("date", "timeslot", "status")}),
        ("Meta",     {"fields": ("created_at", "updated_at")}),
    )
    inlines = [RescheduleEntryInline]

    def has_add_permission(self, request):
        return False


@admin.register(SchedulingIndexEntry)
class SchedulingIndexEntryAdmin(admin.ModelAdmin):
    list_display = ("appointment", "appointment_date", "appointment_time", "duration", "updated_at")
    list_filter = ("appointment_date",)

    # derived rows: maintained by booking.lifecycle only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(SalonSettings)
class SalonSettingsAdmin(admin.ModelAdmin):
    list_display = ("number_of_stylists", "updated_at")

    def has_add_permission(self, request):
        return not SalonSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
