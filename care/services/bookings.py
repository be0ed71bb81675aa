"""
Booking operations: creation and cancellation by the owning patient.

Cancellation is a conditional update filtered on the ``pending``
status, so a booking that triage has already claimed can never be
cancelled underneath it.
"""
import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from care.models import Booking, BookingTransition, User
from care.services.audit import log_action

logger = logging.getLogger(__name__)


@transaction.atomic
def create_booking(patient: User, *, looking_for: str, preferred_date, preferred_time: str,
                   priority: Optional[str] = None, symptoms: str = '', notes: str = '') -> Booking:
    booking = Booking.objects.create(
        patient=patient,
        looking_for=looking_for,
        symptoms=symptoms or '',
        priority=priority or 'medium',
        preferred_date=preferred_date,
        preferred_time=preferred_time,
        notes=notes or '',
        status=Booking.STATUS_PENDING,
    )
    BookingTransition.objects.create(
        booking=booking, from_status=None, to_status=Booking.STATUS_PENDING, operator=patient, reason='created',
    )
    log_action(user=patient, action='booking_create', object_type='booking', object_id=booking.id,
               detail={'lookingFor': looking_for})
    return booking


@transaction.atomic
def cancel_booking(patient: User, booking_id: int) -> Booking:
    """Cancel the patient's own pending booking.

    Raises ``NotFound`` when no pending booking with that id belongs to
    the patient, which covers both unknown ids and already processed
    bookings.
    """
    updated = Booking.objects.filter(
        id=booking_id, patient=patient, status=Booking.STATUS_PENDING,
    ).update(status=Booking.STATUS_CANCELLED, updated_at=timezone.now())
    if not updated:
        logger.info('cancel refused for booking %s by patient %s', booking_id, patient.id)
        raise NotFound('Booking not found or already processed')
    booking = Booking.objects.get(id=booking_id)
    BookingTransition.objects.create(
        booking=booking,
        from_status=Booking.STATUS_PENDING,
        to_status=Booking.STATUS_CANCELLED,
        operator=patient,
        reason='cancelled by patient',
    )
    log_action(user=patient, action='booking_cancel', object_type='booking', object_id=booking.id)
    return booking


def patient_bookings(patient: User, *, status: Optional[str] = None):
    qs = Booking.objects.filter(patient=patient)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by('-created_at', '-id')


def pending_bookings():
    """Triage work list, oldest first."""
    return Booking.objects.filter(status=Booking.STATUS_PENDING).select_related('patient').order_by('created_at', 'id')
