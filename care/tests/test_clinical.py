import pytest

from care.models import Appointment, MedicalHistory, MedicalRecord, Prescription
from care.services.access import doctor_can_access_patient

pytestmark = pytest.mark.django_db

MEDS = [{'name': 'Aspirin', 'dosage': '75mg', 'frequency': 'daily', 'duration': '30 days'}]


def _prescribe(client, appt, patient_id=None, medications=MEDS):
    return client.post('/api/doctor/prescriptions', {
        'appointmentId': appt.id,
        'patientId': patient_id or appt.patient_id,
        'medications': medications,
        'diagnosis': 'angina',
    }, format='json')


# ---------------------------------------------------------------------
# Access predicate
# ---------------------------------------------------------------------
@pytest.mark.parametrize('status,allowed', [
    ('scheduled', True),
    ('completed', True),
    ('cancelled', False),
    ('no-show', False),
])
def test_access_follows_appointment_status(doctor, patient, make_appointment, status, allowed):
    make_appointment(doctor, patient, status=status)
    assert doctor_can_access_patient(doctor, patient.id) is allowed


def test_no_access_without_appointment(doctor, other_doctor, patient, make_appointment):
    make_appointment(other_doctor, patient)
    assert doctor_can_access_patient(doctor, patient.id) is False


def test_non_doctor_never_has_access(triage_user, patient):
    assert doctor_can_access_patient(triage_user, patient.id) is False


# ---------------------------------------------------------------------
# Prescriptions
# ---------------------------------------------------------------------
def test_issue_prescription(client_for, doctor, patient, make_appointment):
    appt = make_appointment(doctor, patient)
    r = _prescribe(client_for(doctor), appt)
    assert r.status_code == 201
    data = r.data['data']
    assert data['appointmentId'] == appt.id
    assert data['isActive'] is True
    assert data['medications'][0]['name'] == 'Aspirin'
    assert patient.notifications.filter(type='prescription').count() == 1


@pytest.mark.parametrize('status', ['completed', 'cancelled', 'no-show'])
def test_prescription_needs_scheduled_appointment(client_for, doctor, patient, make_appointment, status):
    appt = make_appointment(doctor, patient, status=status)
    r = _prescribe(client_for(doctor), appt)
    assert r.status_code == 403
    assert r.data == {'success': False, 'message': 'No active appointment with this patient'}
    assert not Prescription.objects.exists()


def test_prescription_for_other_doctors_appointment(client_for, doctor, other_doctor, patient, make_appointment):
    appt = make_appointment(other_doctor, patient)
    assert _prescribe(client_for(doctor), appt).status_code == 403


def test_prescription_patient_must_match(client_for, doctor, patient, other_patient, make_appointment):
    appt = make_appointment(doctor, patient)
    assert _prescribe(client_for(doctor), appt, patient_id=other_patient.id).status_code == 403


def test_prescription_needs_medications(client_for, doctor, patient, make_appointment):
    appt = make_appointment(doctor, patient)
    r = _prescribe(client_for(doctor), appt, medications=[])
    assert r.status_code == 400
    assert 'medications' in r.data['errors']


def test_patient_lists_own_prescriptions(client_for, doctor, patient, other_patient, make_appointment):
    c = client_for(doctor)
    for _ in range(3):
        _prescribe(c, make_appointment(doctor, patient))
    _prescribe(c, make_appointment(doctor, other_patient))
    r = client_for(patient).get('/api/patient/prescriptions', {'limit': 2})
    assert r.status_code == 200
    assert r.data['count'] == 2
    assert r.data['pagination'] == {'next': {'page': 2, 'limit': 2}}
    assert r.data['data'][0]['doctor']['id'] == doctor.id


# ---------------------------------------------------------------------
# Patient details and medical records
# ---------------------------------------------------------------------
def test_patient_details_need_link(client_for, doctor, patient):
    r = client_for(doctor).get(f'/api/doctor/patients/{patient.id}')
    assert r.status_code == 403


def test_patient_details(client_for, doctor, patient, make_appointment):
    make_appointment(doctor, patient)
    MedicalHistory.objects.create(patient=patient, doctor=doctor, allergies=['latex'])
    r = client_for(doctor).get(f'/api/doctor/patients/{patient.id}')
    assert r.status_code == 200
    assert r.data['data']['patient']['email'] == patient.email
    assert r.data['data']['medicalHistory']['allergies'] == ['latex']
    assert r.data['data']['prescriptions'] == []


def test_medical_record_lifecycle(client_for, doctor, patient, make_appointment):
    appt = make_appointment(doctor, patient)
    c = client_for(doctor)

    r = c.get(f'/api/doctor/patients/{patient.id}/medical-records')
    assert r.status_code == 404

    r = c.post('/api/doctor/medical-records', {
        'patientId': patient.id, 'appointmentId': appt.id, 'diagnosis': 'angina', 'treatment': 'rest',
        'notes': 'review in two weeks',
    }, format='json')
    assert r.status_code == 201
    record_id = r.data['data']['id']
    assert r.data['data']['diagnosis'] == 'angina'

    r = c.get(f'/api/doctor/patients/{patient.id}/medical-records')
    assert r.data['count'] == 1

    r = c.get(f'/api/doctor/medical-records/{record_id}')
    assert r.data['data']['patient']['id'] == patient.id

    r = c.put(f'/api/doctor/medical-records/{record_id}', {'treatment': 'beta blockers'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['treatment'] == 'beta blockers'
    assert r.data['data']['diagnosis'] == 'angina'

    r = c.put(f'/api/doctor/medical-records/{record_id}', {'notes': ''}, format='json')
    assert r.status_code == 200
    record = MedicalRecord.objects.get(id=record_id)
    assert record.notes == ''
    assert record.diagnosis == 'angina'

    r = c.delete(f'/api/doctor/medical-records/{record_id}')
    assert r.status_code == 200
    assert r.data['data'] == {'patientId': patient.id}
    assert not MedicalRecord.objects.exists()


def test_medical_record_needs_link(client_for, doctor, patient, make_appointment):
    make_appointment(doctor, patient, status=Appointment.STATUS_CANCELLED)
    r = client_for(doctor).post('/api/doctor/medical-records', {'patientId': patient.id, 'diagnosis': 'x'},
                                format='json')
    assert r.status_code == 403


def test_only_author_sees_record(client_for, doctor, other_doctor, patient, make_appointment):
    make_appointment(doctor, patient)
    record = MedicalRecord.objects.create(patient=patient, doctor=doctor, diagnosis='angina')
    c = client_for(other_doctor)
    assert c.get(f'/api/doctor/medical-records/{record.id}').status_code == 404
    assert c.delete(f'/api/doctor/medical-records/{record.id}').status_code == 404
    assert MedicalRecord.objects.filter(id=record.id).exists()


# ---------------------------------------------------------------------
# Patient views of their record
# ---------------------------------------------------------------------
def test_patient_medical_history(client_for, doctor, patient):
    c = client_for(patient)
    assert c.get('/api/patient/medical-history').status_code == 404
    MedicalHistory.objects.create(patient=patient, doctor=doctor, chronic_conditions=['asthma'])
    r = c.get('/api/patient/medical-history')
    assert r.status_code == 200
    assert r.data['data']['chronicConditions'] == ['asthma']
    assert r.data['data']['doctor']['id'] == doctor.id


def test_patient_doctors_and_dashboard(client_for, doctor, other_doctor, patient, make_appointment, booking):
    make_appointment(doctor, patient)
    MedicalHistory.objects.create(patient=patient, doctor=other_doctor, allergies=['nuts'])
    c = client_for(patient)

    r = c.get('/api/patient/doctors')
    assert sorted(d['id'] for d in r.data['data']) == sorted([doctor.id, other_doctor.id])

    r = c.get('/api/patient/dashboard')
    assert r.status_code == 200
    data = r.data['data']
    assert [b['id'] for b in data['pendingBookings']] == [booking.id]
    assert data['allergies'] == ['nuts']
    assert data['conditions'] == []
