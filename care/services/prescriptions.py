import logging

from django.db import transaction

from care.exceptions import NotLinkedToPatient
from care.models import Appointment, Prescription, User
from care.services.audit import log_action
from care.services.notifications import notify

logger = logging.getLogger(__name__)


@transaction.atomic
def issue_prescription(doctor: User, *, patient_id: int, appointment_id: int, medications: list,
                       diagnosis: str = '', notes: str = '') -> Prescription:
    """Issue a prescription against the doctor's scheduled appointment with the patient."""
    appointment = (
        Appointment.objects.select_related('patient')
        .filter(id=appointment_id, patient_id=patient_id, doctor=doctor, status=Appointment.STATUS_SCHEDULED)
        .first()
    )
    if appointment is None:
        raise NotLinkedToPatient('No active appointment with this patient')

    prescription = Prescription.objects.create(
        appointment=appointment,
        patient=appointment.patient,
        doctor=doctor,
        medications=[dict(m) for m in medications],
        diagnosis=diagnosis or '',
        notes=notes or '',
    )
    log_action(user=doctor, action='prescription_issue', object_type='prescription', object_id=prescription.id,
               detail={'appointmentId': appointment.id, 'items': len(prescription.medications)})
    notify(appointment.patient, 'New prescription',
           f'{doctor.name} issued a prescription with {len(prescription.medications)} item(s).',
           ntype='prescription', related=f'prescription:{prescription.id}')
    logger.info('prescription %s issued for appointment %s', prescription.id, appointment.id)
    return prescription


def patient_prescriptions(patient: User):
    return Prescription.objects.filter(patient=patient).select_related('doctor').order_by('-date', '-id')
