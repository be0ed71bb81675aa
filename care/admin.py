"""
Django admin registrations for the care models.

Superusers can inspect bookings, appointments and clinical records via
the ``/admin/`` URL.  Lifecycle status fields are read-only here; status
changes go through the API so transition rows stay complete.
"""

from django.contrib import admin

from .models import (
    Appointment,
    AppointmentTransition,
    AuditEvent,
    Booking,
    BookingTransition,
    MedicalHistory,
    MedicalRecord,
    Notification,
    Prescription,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'role', 'department', 'is_active', 'is_superuser')
    list_filter = ('role', 'department')
    search_fields = ('email', 'name')
    exclude = ('password',)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'looking_for', 'priority', 'preferred_date', 'status', 'created_at')
    list_filter = ('status', 'looking_for', 'priority')
    search_fields = ('patient__email', 'patient__name', 'symptoms')
    readonly_fields = ('status',)


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'booking', 'patient', 'doctor', 'date', 'time', 'status')
    list_filter = ('status', 'date')
    search_fields = ('patient__email', 'doctor__email', 'reason')
    readonly_fields = ('status', 'booking')


@admin.register(BookingTransition)
class BookingTransitionAdmin(admin.ModelAdmin):
    list_display = ('booking', 'from_status', 'to_status', 'operator', 'timestamp')
    list_filter = ('to_status',)


@admin.register(AppointmentTransition)
class AppointmentTransitionAdmin(admin.ModelAdmin):
    list_display = ('appointment', 'from_status', 'to_status', 'operator', 'timestamp')
    list_filter = ('to_status',)


@admin.register(MedicalHistory)
class MedicalHistoryAdmin(admin.ModelAdmin):
    list_display = ('patient', 'doctor', 'last_updated')
    search_fields = ('patient__email', 'patient__name')


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment', 'created_at')
    search_fields = ('patient__email', 'diagnosis')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment', 'date', 'is_active')
    list_filter = ('is_active',)


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'title', 'type', 'is_read', 'created_at')
    list_filter = ('type', 'is_read')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
