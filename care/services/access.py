from typing import Optional

from care.exceptions import NotLinkedToPatient
from care.lifecycle import LINKING_APPOINTMENT_STATUSES
from care.models import Appointment, User


def doctor_can_access_patient(doctor: User, patient_id: int) -> bool:
    """True if the doctor has, or had, a scheduled or completed appointment with the patient."""
    if getattr(doctor, 'role', '') != User.ROLE_DOCTOR:
        return False
    return Appointment.objects.filter(
        doctor=doctor, patient_id=patient_id, status__in=LINKING_APPOINTMENT_STATUSES,
    ).exists()


def ensure_doctor_can_access_patient(doctor: User, patient_id: int, message: Optional[str] = None) -> None:
    if not doctor_can_access_patient(doctor, patient_id):
        raise NotLinkedToPatient(message)
