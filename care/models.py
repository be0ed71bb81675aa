"""
Database models for the clinic backend.

These models capture the care lifecycle of the clinic: users in one of
four roles, patient bookings awaiting triage, the appointments triage
produces from them and the clinical records (medical history, medical
records and prescriptions) written afterwards.  Field names follow the
JSON shapes returned to the mobile client where that keeps the
serialisers trivial.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user model carrying a role and role specific profile fields.

    Patients, doctors, triage staff and administrators share one table.
    The ``email`` is unique and doubles as the login name; ``username`` is
    kept equal to it so Django's auth backends work unchanged.
    """
    ROLE_PATIENT = 'patient'
    ROLE_DOCTOR = 'doctor'
    ROLE_TRIAGE = 'triage'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        (ROLE_PATIENT, 'Patient'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_TRIAGE, 'Triage'),
        (ROLE_ADMIN, 'Administrator'),
    ]
    STAFF_ROLES = (ROLE_ADMIN, ROLE_DOCTOR, ROLE_TRIAGE)

    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT, db_index=True)
    about = models.TextField(blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    phone_number = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    profile_picture = models.CharField(max_length=512, blank=True)
    # Patient specific
    blood_group = models.CharField(max_length=8, blank=True)
    emergency_contact_name = models.CharField(max_length=255, blank=True)
    emergency_contact_number = models.CharField(max_length=32, blank=True)
    # Doctor specific
    specialization = models.CharField(max_length=64, blank=True)
    department = models.CharField(max_length=128, blank=True, db_index=True)
    hospital = models.CharField(max_length=255, blank=True)
    qualifications = models.CharField(max_length=255, blank=True)
    license_number = models.CharField(max_length=64, blank=True)
    experience_years = models.PositiveIntegerField(null=True, blank=True)
    rating = models.FloatField(null=True, blank=True)
    # Admin/triage specific
    position = models.CharField(max_length=128, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Booking(models.Model):
    """A patient's unscheduled care request awaiting triage."""
    SPECIALTY_CHOICES = [
        ('general', 'General practice'),
        ('cardiologist', 'Cardiologist'),
        ('dermatologist', 'Dermatologist'),
        ('neurologist', 'Neurologist'),
        ('pediatrician', 'Pediatrician'),
        ('orthopedist', 'Orthopedist'),
        ('gynecologist', 'Gynecologist'),
        ('psychiatrist', 'Psychiatrist'),
        ('ophthalmologist', 'Ophthalmologist'),
        ('ent', 'Ear, nose and throat'),
        ('dentist', 'Dentist'),
    ]
    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('emergency', 'Emergency'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_ASSIGNED = 'assigned'
    STATUS_CANCELLED = 'cancelled'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ASSIGNED, 'Assigned'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='bookings')
    looking_for = models.CharField(max_length=32, choices=SPECIALTY_CHOICES)
    symptoms = models.TextField(blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    preferred_date = models.DateField(null=True, blank=True)
    preferred_time = models.CharField(max_length=5, blank=True)
    # Pending bookings are the triage work list; index the status
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['status', 'created_at'], name='booking_status_created_idx'),
            models.Index(fields=['patient', 'created_at'], name='booking_patient_created_idx'),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.looking_for} ({self.status})"


class Appointment(models.Model):
    """A scheduled encounter produced by triage from a pending booking."""
    STATUS_SCHEDULED = 'scheduled'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_NO_SHOW = 'no-show'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No show'),
    ]

    # One appointment per booking; the unique key backs up the triage claim
    booking = models.OneToOneField(Booking, on_delete=models.PROTECT, related_name='appointment')
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='patient_appointments')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='doctor_appointments')
    date = models.DateField()
    time = models.CharField(max_length=5)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    reason = models.TextField(blank=True)
    priority = models.CharField(max_length=10, choices=Booking.PRIORITY_CHOICES, default='medium')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['doctor', 'date'], name='appt_doctor_date_idx'),
            models.Index(fields=['patient', 'date'], name='appt_patient_date_idx'),
            models.Index(fields=['doctor', 'patient', 'status'], name='appt_doctor_patient_idx'),
        ]

    def __str__(self) -> str:
        return f"Appointment #{self.pk} {self.date} {self.time} ({self.status})"


class MedicalHistory(models.Model):
    """Single continuously updated clinical summary per patient.

    Triage creates or overwrites ``triage_data`` and ``doctor`` on every
    assignment; triage and doctors amend the list fields afterwards.
    Encounter level notes live in :class:`MedicalRecord` instead.
    """
    patient = models.OneToOneField(User, on_delete=models.CASCADE, related_name='medical_history')
    doctor = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='assigned_histories'
    )
    # {vitals, triageId, triageDate, priority, notes}
    triage_data = models.JSONField(default=dict, blank=True)
    allergies = models.JSONField(default=list, blank=True)
    chronic_conditions = models.JSONField(default=list, blank=True)
    # [{name, date, notes}]
    surgeries = models.JSONField(default=list, blank=True)
    family_history = models.TextField(blank=True)
    # [{vaccine, date, notes}]
    immunizations = models.JSONField(default=list, blank=True)
    last_updated = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"MedicalHistory(p={self.patient_id})"


class MedicalRecord(models.Model):
    """Append-only encounter note written by a doctor."""
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='medical_records')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='authored_records')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='medical_records'
    )
    diagnosis = models.TextField(blank=True)
    treatment = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=['patient', 'doctor', 'created_at'], name='record_patient_doctor_idx')]

    def __str__(self) -> str:
        return f"MedicalRecord #{self.pk} p={self.patient_id} d={self.doctor_id}"


class Prescription(models.Model):
    appointment = models.ForeignKey(Appointment, on_delete=models.PROTECT, related_name='prescriptions')
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='prescriptions')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='issued_prescriptions')
    # [{name, dosage, frequency, duration, instructions}]
    medications = models.JSONField(default=list)
    diagnosis = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    date = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        indexes = [models.Index(fields=['patient', 'date'], name='rx_patient_date_idx')]

    def __str__(self) -> str:
        return f"Prescription #{self.pk} p={self.patient_id} d={self.doctor_id}"


class BookingTransition(models.Model):
    """Records a status transition for a booking."""
    booking = models.ForeignKey(Booking, related_name='transitions', on_delete=models.CASCADE)
    from_status = models.CharField(max_length=10, null=True, blank=True)
    to_status = models.CharField(max_length=10)
    operator = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='booking_transitions'
    )
    timestamp = models.DateTimeField(auto_now_add=True)
    reason = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.booking_id}: {self.from_status} → {self.to_status}"


class AppointmentTransition(models.Model):
    """Records a status transition for an appointment."""
    appointment = models.ForeignKey(Appointment, related_name='transitions', on_delete=models.CASCADE)
    from_status = models.CharField(max_length=10, null=True, blank=True)
    to_status = models.CharField(max_length=10)
    operator = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointment_transitions'
    )
    timestamp = models.DateTimeField(auto_now_add=True)
    reason = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.appointment_id}: {self.from_status} → {self.to_status}"


class Notification(models.Model):
    TYPE_CHOICES = [
        ('appointment', 'appointment'),
        ('prescription', 'prescription'),
        ('system', 'system'),
        ('alert', 'alert'),
    ]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=16, choices=TYPE_CHOICES, default='system')
    # e.g. 'appointment:12'
    related_entity = models.CharField(max_length=64, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['user', 'is_read', 'created_at'], name='notify_user_read_idx')]

    def __str__(self) -> str:
        return f"notify u={self.user_id} {self.title}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
