"""
Triage assignment: turns a pending booking into an appointment.

The whole assignment runs in one transaction.  The booking is claimed
first with a conditional update guarded on ``status='pending'``; only
the caller whose update touched the row goes on to write the medical
history and the appointment.  A concurrent or repeated call sees zero
updated rows and fails with :class:`BookingAlreadyProcessed`, and any
failure after the claim rolls the claim back with everything else.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import OperationalError, transaction
from django.utils import timezone

from care.exceptions import BookingAlreadyProcessed, InvalidDoctor
from care.models import Appointment, Booking, BookingTransition, MedicalHistory, User
from care.services.audit import log_action
from care.services.notifications import notify

logger = logging.getLogger(__name__)

DEFAULT_APPOINTMENT_TIME = '09:00'


@dataclass
class TriageOutcome:
    appointment: Appointment
    medical_history: MedicalHistory


def available_doctors(*, department: Optional[str] = None):
    qs = User.objects.filter(role=User.ROLE_DOCTOR, is_active=True)
    if department:
        qs = qs.filter(department__iexact=department)
    return qs.order_by('name', 'id')


def process_triage(triage_user: User, booking_id: int, *, doctor_id: int, vitals: Optional[dict] = None,
                   priority: Optional[str] = None, notes: str = '') -> TriageOutcome:
    doctor = User.objects.filter(id=doctor_id, role=User.ROLE_DOCTOR, is_active=True).first()
    if doctor is None:
        raise InvalidDoctor()

    with transaction.atomic():
        now = timezone.now()
        try:
            claimed = Booking.objects.filter(id=booking_id, status=Booking.STATUS_PENDING).update(
                status=Booking.STATUS_ASSIGNED, updated_at=now,
            )
        except OperationalError:
            # SQLite refuses the write while a concurrent claim holds the lock
            logger.info('triage %s hit a locked claim on booking %s', triage_user.id, booking_id)
            raise BookingAlreadyProcessed()
        if not claimed:
            logger.info('triage %s lost claim on booking %s', triage_user.id, booking_id)
            raise BookingAlreadyProcessed()
        booking = Booking.objects.select_related('patient').get(id=booking_id)
        effective_priority = priority or booking.priority

        history, _ = MedicalHistory.objects.update_or_create(
            patient=booking.patient,
            defaults={
                'doctor': doctor,
                'triage_data': {
                    'vitals': vitals or {},
                    'triageId': triage_user.id,
                    'triageDate': now.isoformat(),
                    'priority': effective_priority,
                    'notes': notes or '',
                },
            },
        )

        appointment = Appointment.objects.create(
            booking=booking,
            patient=booking.patient,
            doctor=doctor,
            date=booking.preferred_date or timezone.localdate(),
            time=booking.preferred_time or DEFAULT_APPOINTMENT_TIME,
            status=Appointment.STATUS_SCHEDULED,
            reason=booking.symptoms or booking.get_looking_for_display(),
            priority=effective_priority,
            notes=notes or '',
        )

        BookingTransition.objects.create(
            booking=booking,
            from_status=Booking.STATUS_PENDING,
            to_status=Booking.STATUS_ASSIGNED,
            operator=triage_user,
            reason=f'assigned to doctor {doctor.id}',
        )
        log_action(user=triage_user, action='triage_assign', object_type='booking', object_id=booking.id,
                   detail={'appointmentId': appointment.id, 'doctorId': doctor.id})

        related = f'appointment:{appointment.id}'
        notify(booking.patient, 'Appointment scheduled',
               f'You have been booked with {doctor.name} on {appointment.date} at {appointment.time}.',
               ntype='appointment', related=related)
        notify(doctor, 'New patient assigned',
               f'{booking.patient.name} was assigned to you for {appointment.date} at {appointment.time}.',
               ntype='appointment', related=related)

    logger.info('booking %s assigned to doctor %s as appointment %s', booking.id, doctor.id, appointment.id)
    return TriageOutcome(appointment=appointment, medical_history=history)


def patients(*, department: Optional[str] = None):
    qs = User.objects.filter(role=User.ROLE_PATIENT)
    if department:
        # patients have no department; filter on the doctors they were assigned to
        qs = qs.filter(patient_appointments__doctor__department__iexact=department).distinct()
    return qs.order_by('name', 'id')
