"""
Status transition tables for bookings and appointments.

Bookings move ``pending -> assigned -> completed`` or ``pending ->
cancelled``; appointments move from ``scheduled`` to one of the three
terminal outcomes.  Nothing ever returns to ``pending`` or
``scheduled``.  Booking writes are conditional updates filtered on
``pending``; appointment writes call :func:`ensure_appointment_transition`
before saving a new status.
"""
from __future__ import annotations

from .exceptions import InvalidTransition
from .models import Appointment, Booking

BOOKING_TRANSITIONS: dict[str, tuple[str, ...]] = {
    Booking.STATUS_PENDING: (Booking.STATUS_ASSIGNED, Booking.STATUS_CANCELLED),
    Booking.STATUS_ASSIGNED: (Booking.STATUS_COMPLETED,),
    Booking.STATUS_CANCELLED: (),
    Booking.STATUS_COMPLETED: (),
}

APPOINTMENT_TRANSITIONS: dict[str, tuple[str, ...]] = {
    Appointment.STATUS_SCHEDULED: (
        Appointment.STATUS_COMPLETED,
        Appointment.STATUS_CANCELLED,
        Appointment.STATUS_NO_SHOW,
    ),
    Appointment.STATUS_COMPLETED: (),
    Appointment.STATUS_CANCELLED: (),
    Appointment.STATUS_NO_SHOW: (),
}

# Statuses a doctor may request through the status endpoint
DOCTOR_TARGET_STATUSES = APPOINTMENT_TRANSITIONS[Appointment.STATUS_SCHEDULED]

# Appointment statuses that link a doctor to a patient's records
LINKING_APPOINTMENT_STATUSES = (Appointment.STATUS_SCHEDULED, Appointment.STATUS_COMPLETED)


def can_transition(table: dict[str, tuple[str, ...]], current: str, new: str) -> bool:
    """Return True if ``table`` allows moving from ``current`` to ``new``."""
    return new in table.get(current, ())


def is_terminal(table: dict[str, tuple[str, ...]], status: str) -> bool:
    return not table.get(status, ())


def ensure_appointment_transition(current: str, new: str) -> None:
    if not can_transition(APPOINTMENT_TRANSITIONS, current, new):
        raise InvalidTransition(f'Cannot move appointment from {current} to {new}')
