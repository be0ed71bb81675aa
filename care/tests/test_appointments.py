import datetime

import pytest
from django.utils import timezone

from care.models import Appointment, AppointmentTransition, Booking

pytestmark = pytest.mark.django_db


def _status(client, appt_id, status, **extra):
    return client.put(f'/api/doctor/appointments/{appt_id}/status', dict(status=status, **extra), format='json')


def test_complete_appointment_completes_booking(client_for, doctor, patient, make_appointment):
    appt = make_appointment(doctor, patient)
    r = _status(client_for(doctor), appt.id, 'completed', reason='seen')
    assert r.status_code == 200
    assert r.data['data']['status'] == 'completed'
    appt.refresh_from_db()
    assert appt.status == Appointment.STATUS_COMPLETED
    assert appt.booking.status == Booking.STATUS_COMPLETED
    t = AppointmentTransition.objects.get(appointment=appt)
    assert (t.from_status, t.to_status, t.operator, t.reason) == ('scheduled', 'completed', doctor, 'seen')


@pytest.mark.parametrize('status', ['cancelled', 'no-show'])
def test_other_outcomes_leave_booking_assigned(client_for, doctor, patient, make_appointment, status):
    appt = make_appointment(doctor, patient)
    r = _status(client_for(doctor), appt.id, status)
    assert r.status_code == 200
    appt.refresh_from_db()
    assert appt.status == status
    assert appt.booking.status == Booking.STATUS_ASSIGNED


@pytest.mark.parametrize('terminal', ['completed', 'cancelled', 'no-show'])
def test_terminal_states_refuse_changes(client_for, doctor, patient, make_appointment, terminal):
    appt = make_appointment(doctor, patient, status=terminal)
    for target in ('completed', 'cancelled', 'no-show'):
        r = _status(client_for(doctor), appt.id, target)
        assert r.status_code == 409
        assert r.data['success'] is False
        assert r.data['message'] == f'Appointment is already {terminal}'
    appt.refresh_from_db()
    assert appt.status == terminal
    assert not AppointmentTransition.objects.exists()


@pytest.mark.parametrize('value', ['scheduled', 'pending', 'done', ''])
def test_invalid_status_value(client_for, doctor, patient, make_appointment, value):
    appt = make_appointment(doctor, patient)
    r = _status(client_for(doctor), appt.id, value)
    assert r.status_code == 400
    assert r.data['success'] is False
    appt.refresh_from_db()
    assert appt.status == Appointment.STATUS_SCHEDULED


def test_only_assigned_doctor_may_update(client_for, doctor, other_doctor, patient, make_appointment):
    appt = make_appointment(doctor, patient)
    r = _status(client_for(other_doctor), appt.id, 'completed')
    assert r.status_code == 404
    assert r.data == {'success': False, 'message': 'Appointment not found'}
    appt.refresh_from_db()
    assert appt.status == Appointment.STATUS_SCHEDULED


def test_patient_cannot_use_doctor_route(client_for, doctor, patient, make_appointment):
    appt = make_appointment(doctor, patient)
    assert _status(client_for(patient), appt.id, 'completed').status_code == 403


def test_doctor_appointment_filters(client_for, doctor, other_doctor, patient, other_patient, make_appointment):
    a1 = make_appointment(doctor, patient, date=datetime.date(2025, 6, 1))
    a2 = make_appointment(doctor, other_patient, status='completed', date=datetime.date(2025, 6, 2))
    make_appointment(other_doctor, patient)
    c = client_for(doctor)

    r = c.get('/api/doctor/appointments')
    assert [a['id'] for a in r.data['data']] == [a1.id, a2.id]
    assert r.data['data'][0]['patient']['id'] == patient.id

    r = c.get('/api/doctor/appointments', {'status': 'completed'})
    assert [a['id'] for a in r.data['data']] == [a2.id]

    r = c.get('/api/doctor/appointments', {'date': '2025-06-01'})
    assert [a['id'] for a in r.data['data']] == [a1.id]


def test_doctor_patients_are_unique(client_for, doctor, patient, other_patient, make_appointment):
    make_appointment(doctor, patient)
    make_appointment(doctor, patient, status='completed')
    make_appointment(doctor, other_patient)
    r = client_for(doctor).get('/api/doctor/patients')
    assert r.data['count'] == 2
    assert sorted(p['id'] for p in r.data['data']) == sorted([patient.id, other_patient.id])


@pytest.mark.parametrize('status', ['cancelled', 'no-show'])
def test_doctor_patients_skip_unlinked_appointments(client_for, doctor, patient, other_patient, make_appointment,
                                                    status):
    make_appointment(doctor, patient)
    make_appointment(doctor, other_patient, status=status)
    r = client_for(doctor).get('/api/doctor/patients')
    assert r.data['count'] == 1
    assert [p['id'] for p in r.data['data']] == [patient.id]


def test_patient_upcoming_appointments(client_for, doctor, patient, make_appointment):
    today = timezone.localdate()
    future = make_appointment(doctor, patient, date=today + datetime.timedelta(days=3))
    make_appointment(doctor, patient, date=today - datetime.timedelta(days=3))
    make_appointment(doctor, patient, status='cancelled', date=today + datetime.timedelta(days=5))
    c = client_for(patient)

    r = c.get('/api/patient/appointments')
    assert r.data['count'] == 3

    r = c.get('/api/patient/appointments', {'upcoming': 'true'})
    assert [a['id'] for a in r.data['data']] == [future.id]
    assert r.data['data'][0]['doctor']['id'] == doctor.id
