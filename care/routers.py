"""
URL mappings for the clinic backend API.

Paths follow the front-end client's endpoint table.  Trailing slashes
are deliberately omitted; ``/api/bookings`` is kept as an alias of the
patient booking routes for older clients.
"""
from django.urls import include, path

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view, register_patient_view
from .views import admin, doctor, health, notifications, patient, triage

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz),

    # Authentication
    path('api/auth/register/patient', register_patient_view),
    path('api/auth/login', login_view),
    path('api/auth/refresh', jwt_refresh_view),
    path('api/auth/logout', jwt_logout_view),

    # Admin
    path('api/admin/register', admin.register_admin),
    path('api/admin/staff', admin.register_staff),
    path('api/admin/staff/<str:role>', admin.staff_by_role),
    path('api/admin/dashboard-stats', admin.stats),
    path('api/admin/appointments', admin.appointments),
    path('api/admin/patients', admin.patients),

    # Patient
    path('api/patient/bookings', patient.bookings),
    path('api/patient/bookings/<int:pk>/cancel', patient.cancel_booking),
    path('api/bookings', patient.bookings),
    path('api/bookings/<int:pk>/cancel', patient.cancel_booking),
    path('api/patient/appointments', patient.appointments),
    path('api/patient/doctors', patient.doctors),
    path('api/patient/medical-history', patient.medical_history),
    path('api/patient/prescriptions', patient.prescriptions),
    path('api/patient/dashboard', patient.dashboard),

    # Triage
    path('api/triage/bookings', triage.unassigned_bookings),
    path('api/triage/doctors', triage.available_doctors),
    path('api/triage/process/<int:booking_id>', triage.process_triage),
    path('api/triage/medical-history/<int:patient_id>', triage.update_medical_history),
    path('api/triage/patients', triage.patients),

    # Doctor
    path('api/doctor/appointments', doctor.appointments),
    path('api/doctor/appointments/<int:pk>/status', doctor.update_appointment_status),
    path('api/doctor/patients', doctor.patients),
    path('api/doctor/patients/<int:pk>', doctor.patient_details),
    path('api/doctor/patients/<int:pk>/medical-records', doctor.patient_medical_records),
    path('api/doctor/prescriptions', doctor.prescriptions),
    path('api/doctor/medical-records', doctor.create_medical_record),
    path('api/doctor/medical-records/<int:pk>', doctor.medical_record_detail),

    # Notifications
    path('api/notifications', notifications.notifications),
    path('api/notifications/<int:pk>/read', notifications.notification_read),
]
