"""
Medical history and medical records.

``MedicalHistory`` is one row per patient that triage creates on first
assignment and everybody amends afterwards.  ``MedicalRecord`` rows are
per encounter notes authored by a doctor; only the author may change or
delete them.
"""
import logging
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import NotFound

from care.exceptions import NotLinkedToPatient
from care.models import Appointment, MedicalHistory, MedicalRecord, User
from care.services.access import ensure_doctor_can_access_patient

logger = logging.getLogger(__name__)

# request key -> model field
HISTORY_FIELDS = {
    'allergies': 'allergies',
    'chronicConditions': 'chronic_conditions',
    'surgeries': 'surgeries',
    'familyHistory': 'family_history',
    'immunizations': 'immunizations',
}


def _jsonable(value):
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value


def update_medical_history(patient_id: int, changes: dict) -> MedicalHistory:
    """Amend list/text fields of an existing history; triage must have created it."""
    with transaction.atomic():
        history = MedicalHistory.objects.select_for_update().filter(patient_id=patient_id).first()
        if history is None:
            raise NotFound('Medical history not found - process triage first')
        fields = []
        for key, field in HISTORY_FIELDS.items():
            if key in changes and changes[key] is not None:
                setattr(history, field, _jsonable(changes[key]))
                fields.append(field)
        history.save(update_fields=fields + ['last_updated'])
    logger.info('medical history of patient %s updated: %s', patient_id, ','.join(fields) or '-')
    return history


def history_for(patient_id: int) -> Optional[MedicalHistory]:
    return MedicalHistory.objects.filter(patient_id=patient_id).select_related('doctor').first()


def create_record(doctor: User, *, patient_id: int, appointment_id: Optional[int] = None,
                  diagnosis: str = '', treatment: str = '', notes: str = '') -> MedicalRecord:
    ensure_doctor_can_access_patient(doctor, patient_id, 'Not authorized to access this patient\'s records')
    appointment = None
    if appointment_id:
        appointment = Appointment.objects.filter(id=appointment_id, doctor=doctor, patient_id=patient_id).first()
        if appointment is None:
            raise NotLinkedToPatient('Appointment does not link this doctor and patient')
    record = MedicalRecord.objects.create(
        patient_id=patient_id,
        doctor=doctor,
        appointment=appointment,
        diagnosis=diagnosis or '',
        treatment=treatment or '',
        notes=notes or '',
    )
    return record


def records_for(doctor: User, patient_id: int):
    ensure_doctor_can_access_patient(doctor, patient_id, 'Not authorized to access this patient\'s records')
    return MedicalRecord.objects.filter(patient_id=patient_id, doctor=doctor).order_by('-created_at', '-id')


def own_record(doctor: User, record_id: int) -> MedicalRecord:
    record = MedicalRecord.objects.filter(id=record_id, doctor=doctor).first()
    if record is None:
        raise NotFound('Medical record not found or not authorized')
    return record


def update_record(doctor: User, record_id: int, changes: dict) -> MedicalRecord:
    record = own_record(doctor, record_id)
    fields = [f for f in ('diagnosis', 'treatment', 'notes') if f in changes]
    for f in fields:
        setattr(record, f, changes[f])
    record.save(update_fields=fields + ['updated_at'])
    return record


def delete_record(doctor: User, record_id: int) -> int:
    record = own_record(doctor, record_id)
    patient_id = record.patient_id
    record.delete()
    return patient_id
