import pytest

from care.models import Booking, User

pytestmark = pytest.mark.django_db


def test_dashboard_stats(client_for, admin_user, triage_user, doctor, other_doctor, patient, other_patient,
                         make_appointment, booking):
    make_appointment(doctor, patient)
    make_appointment(doctor, patient, status='completed')
    make_appointment(other_doctor, other_patient, status='cancelled')
    make_appointment(other_doctor, other_patient, status='no-show')
    r = client_for(admin_user).get('/api/admin/dashboard-stats')
    assert r.status_code == 200
    assert r.data['data'] == {
        'patients': 2,
        'doctors': 2,
        'triageStaff': 1,
        'appointments': 4,
        'upcomingAppointments': 1,
        'completedAppointments': 1,
        'cancelledAppointments': 1,
        'noShowAppointments': 1,
        'pendingBookings': 1,
    }


def test_stats_are_admin_only(client_for, doctor):
    assert client_for(doctor).get('/api/admin/dashboard-stats').status_code == 403


def test_register_staff(client_for, admin_user):
    r = client_for(admin_user).post('/api/admin/staff', {
        'name': 'Dr Who', 'email': 'WHO@clinic.test', 'password': 'Tardis-1963!', 'role': 'doctor',
        'specialization': 'neurologist', 'department': 'neurology', 'experienceYears': 12,
    }, format='json')
    assert r.status_code == 201
    data = r.data['data']
    assert data['email'] == 'who@clinic.test'
    assert data['role'] == 'doctor'
    assert data['experienceYears'] == 12
    assert 'password' not in data
    assert User.objects.get(email='who@clinic.test').check_password('Tardis-1963!')


def test_register_staff_rejects_patient_role_and_duplicates(client_for, admin_user, doctor):
    c = client_for(admin_user)
    body = {'name': 'Someone', 'email': 'new@clinic.test', 'password': 'Tardis-1963!', 'role': 'patient'}
    assert c.post('/api/admin/staff', body, format='json').status_code == 400

    body.update(role='triage', email=doctor.email)
    r = c.post('/api/admin/staff', body, format='json')
    assert r.status_code == 400
    assert r.data['message'] == 'User already exists'


def test_weak_staff_password(client_for, admin_user):
    r = client_for(admin_user).post('/api/admin/staff', {
        'name': 'Someone', 'email': 'weak@clinic.test', 'password': '12345678', 'role': 'triage',
    }, format='json')
    assert r.status_code == 400
    assert 'password' in r.data['errors']
    assert not User.objects.filter(email='weak@clinic.test').exists()


def test_staff_by_role_paginates(client_for, admin_user, make_user):
    for i in range(12):
        make_user(f'triage{i:02d}@clinic.test', User.ROLE_TRIAGE)
    c = client_for(admin_user)

    r = c.get('/api/admin/staff/triage')
    assert r.data['count'] == 10
    assert r.data['pagination'] == {'next': {'page': 2, 'limit': 10}}

    r = c.get('/api/admin/staff/triage', {'page': 2})
    assert r.data['count'] == 2
    assert r.data['pagination'] == {'prev': {'page': 1, 'limit': 10}}

    r = c.get('/api/admin/staff/triage', {'limit': 500})
    assert r.data['count'] == 12
    assert r.data['pagination'] == {}


def test_staff_by_unknown_role(client_for, admin_user):
    r = client_for(admin_user).get('/api/admin/staff/patient')
    assert r.status_code == 400
    assert r.data['message'] == 'Invalid staff category'


def test_admin_appointments_by_status(client_for, admin_user, doctor, patient, make_appointment):
    make_appointment(doctor, patient)
    done = make_appointment(doctor, patient, status='completed')
    c = client_for(admin_user)

    r = c.get('/api/admin/appointments', {'status': 'completed'})
    assert [a['id'] for a in r.data['data']] == [done.id]
    assert r.data['data'][0]['doctor']['id'] == doctor.id
    assert r.data['data'][0]['patient']['id'] == patient.id

    r = c.get('/api/admin/appointments', {'status': 'lost'})
    assert r.status_code == 400
    assert r.data['message'] == 'Invalid appointment status'


def test_admin_patient_search(client_for, admin_user, patient, other_patient, doctor):
    c = client_for(admin_user)
    r = c.get('/api/admin/patients')
    assert r.data['count'] == 2
    r = c.get('/api/admin/patients', {'search': 'olive'})
    assert [p['id'] for p in r.data['data']] == [other_patient.id]
    r = c.get('/api/admin/patients', {'search': 'pat@clinic'})
    assert [p['id'] for p in r.data['data']] == [patient.id]


def test_booking_counts_only_pending(client_for, admin_user, patient):
    Booking.objects.create(patient=patient, looking_for='ent')
    Booking.objects.create(patient=patient, looking_for='ent', status=Booking.STATUS_CANCELLED)
    r = client_for(admin_user).get('/api/admin/dashboard-stats')
    assert r.data['data']['pendingBookings'] == 1
