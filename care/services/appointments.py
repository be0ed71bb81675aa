import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from care.exceptions import InvalidTransition
from care.lifecycle import (
    APPOINTMENT_TRANSITIONS,
    BOOKING_TRANSITIONS,
    LINKING_APPOINTMENT_STATUSES,
    can_transition,
    ensure_appointment_transition,
    is_terminal,
)
from care.models import Appointment, AppointmentTransition, Booking, BookingTransition, MedicalHistory, User
from care.services.audit import log_action
from care.services.notifications import notify

logger = logging.getLogger(__name__)


def update_status(doctor: User, appointment_id: int, new_status: str, *, reason: str = '') -> Appointment:
    """Move the doctor's own scheduled appointment to a terminal status.

    The row is locked for the duration of the change.  Completing an
    appointment also completes the booking it was created from.
    """
    with transaction.atomic():
        appt = (
            Appointment.objects.select_for_update()
            .filter(id=appointment_id, doctor=doctor)
            .first()
        )
        if appt is None:
            raise NotFound('Appointment not found')
        old_status = appt.status
        if is_terminal(APPOINTMENT_TRANSITIONS, old_status):
            raise InvalidTransition(f'Appointment is already {old_status}')
        ensure_appointment_transition(old_status, new_status)
        appt.status = new_status
        appt.save(update_fields=['status', 'updated_at'])
        AppointmentTransition.objects.create(
            appointment=appt,
            from_status=old_status,
            to_status=new_status,
            operator=doctor,
            reason=reason or 'status update',
        )

        if new_status == Appointment.STATUS_COMPLETED:
            booking = Booking.objects.select_for_update().get(id=appt.booking_id)
            if can_transition(BOOKING_TRANSITIONS, booking.status, Booking.STATUS_COMPLETED):
                BookingTransition.objects.create(
                    booking=booking,
                    from_status=booking.status,
                    to_status=Booking.STATUS_COMPLETED,
                    operator=doctor,
                    reason=f'appointment {appt.id} completed',
                )
                booking.status = Booking.STATUS_COMPLETED
                booking.save(update_fields=['status', 'updated_at'])

        log_action(user=doctor, action='appointment_status', object_type='appointment', object_id=appt.id,
                   detail={'from': old_status, 'to': new_status})
        notify(appt.patient, 'Appointment updated',
               f'Your appointment on {appt.date} at {appt.time} is now {new_status}.',
               ntype='appointment', related=f'appointment:{appt.id}')

    logger.info('appointment %s moved %s -> %s by doctor %s', appt.id, old_status, new_status, doctor.id)
    return appt


def doctor_appointments(doctor: User, *, status: Optional[str] = None, date=None):
    qs = Appointment.objects.filter(doctor=doctor).select_related('patient')
    if status:
        qs = qs.filter(status=status)
    if date:
        qs = qs.filter(date=date)
    return qs.order_by('date', 'time', 'id')


def patient_appointments(patient: User, *, status: Optional[str] = None, upcoming: bool = False):
    qs = Appointment.objects.filter(patient=patient).select_related('doctor')
    if status:
        qs = qs.filter(status=status)
    if upcoming:
        qs = qs.filter(status=Appointment.STATUS_SCHEDULED, date__gte=timezone.localdate())
    return qs.order_by('date', 'time', 'id')


def appointments_by_status(status: Optional[str] = None):
    qs = Appointment.objects.select_related('patient', 'doctor')
    if status:
        qs = qs.filter(status=status)
    return qs.order_by('date', 'time', 'id')


def doctor_patients(doctor: User):
    """Distinct patients the doctor may access: a scheduled or completed appointment links them."""
    return User.objects.filter(
        patient_appointments__doctor=doctor,
        patient_appointments__status__in=LINKING_APPOINTMENT_STATUSES,
    ).distinct().order_by('name', 'id')


def patient_doctors(patient: User):
    """Doctors linked to the patient through appointments or their medical history."""
    ids = set(Appointment.objects.filter(patient=patient).values_list('doctor_id', flat=True))
    ids.update(d for d in MedicalHistory.objects.filter(patient=patient).values_list('doctor_id', flat=True) if d)
    return User.objects.filter(id__in=ids, role=User.ROLE_DOCTOR).order_by('name', 'id')
