import pytest
from rest_framework.test import APIClient

from care.models import AuditEvent, User

from .conftest import PASSWORD

pytestmark = pytest.mark.django_db


def login(client, email, password=PASSWORD):
    return client.post('/api/auth/login', {'email': email, 'password': password}, format='json')


def test_login_returns_jwt_with_role(patient):
    r = login(APIClient(), patient.email)
    assert r.status_code == 200
    assert r.data['success'] is True
    assert r.data['role'] == 'patient'
    assert r.data['userId'] == patient.id
    assert r.data['token'] and r.data['refresh']
    assert AuditEvent.objects.filter(user=patient, action='login').exists()


def test_login_is_case_insensitive_on_email(patient):
    assert login(APIClient(), patient.email.upper()).status_code == 200


def test_login_with_wrong_password(patient):
    r = login(APIClient(), patient.email, 'not-the-password')
    assert r.status_code == 400
    assert r.data == {'success': False, 'message': 'Invalid credentials'}


def test_no_role_escalation_through_login(patient):
    client = APIClient()
    r = client.post('/api/auth/login', {'email': patient.email, 'password': PASSWORD, 'role': 'admin'},
                    format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'patient'
    patient.refresh_from_db()
    assert patient.role == 'patient'


def test_token_grants_role_routes(patient):
    client = APIClient()
    token = login(client, patient.email).data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    assert client.get('/api/patient/bookings').status_code == 200
    assert client.get('/api/triage/bookings').status_code == 403


def test_stale_role_claim_is_rejected(patient):
    client = APIClient()
    token = login(client, patient.email).data['token']
    User.objects.filter(id=patient.id).update(role=User.ROLE_ADMIN)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    r = client.get('/api/admin/dashboard-stats')
    assert r.status_code == 401
    assert r.data['success'] is False


def test_garbage_token(db):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer not.a.jwt')
    assert client.get('/api/notifications').status_code == 401


def test_refresh_and_logout(patient):
    client = APIClient()
    tokens = login(client, patient.email).data

    r = client.post('/api/auth/refresh', {'refresh': tokens['refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['token']
    refresh = r.data['refresh']

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
    r = client.post('/api/auth/logout', {'refresh': refresh}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1

    client.credentials()
    r = client.post('/api/auth/refresh', {'refresh': refresh}, format='json')
    assert r.status_code == 401
    assert r.data['success'] is False


def test_register_patient(db):
    client = APIClient()
    r = client.post('/api/auth/register/patient', {
        'name': 'New Patient', 'email': 'New@Clinic.test', 'password': 'Sunny-Meadow-42',
        'gender': 'female', 'bloodGroup': 'O+',
    }, format='json')
    assert r.status_code == 201
    assert r.data['role'] == 'patient'
    assert r.data['token']
    user = User.objects.get(email='new@clinic.test')
    assert user.role == User.ROLE_PATIENT
    assert user.blood_group == 'O+'
    assert user.check_password('Sunny-Meadow-42')

    r = client.post('/api/auth/register/patient', {
        'name': 'Again', 'email': 'new@clinic.test', 'password': 'Sunny-Meadow-42',
    }, format='json')
    assert r.status_code == 400
    assert r.data['message'] == 'User already exists'


def test_register_patient_validation(db):
    r = APIClient().post('/api/auth/register/patient', {'name': 'X', 'email': 'bad', 'password': 'short'},
                         format='json')
    assert r.status_code == 400
    assert set(r.data['errors']) == {'name', 'email', 'password'}


def test_register_patient_cannot_choose_role(db):
    r = APIClient().post('/api/auth/register/patient', {
        'name': 'Sneaky', 'email': 'sneaky@clinic.test', 'password': 'Sunny-Meadow-42', 'role': 'admin',
    }, format='json')
    assert r.status_code == 201
    assert User.objects.get(email='sneaky@clinic.test').role == User.ROLE_PATIENT


def test_admin_bootstrap_closes_after_first(db):
    client = APIClient()
    body = {'name': 'First Admin', 'email': 'root@clinic.test', 'password': 'Sunny-Meadow-42'}
    r = client.post('/api/admin/register', body, format='json')
    assert r.status_code == 201
    assert r.data['data']['role'] == 'admin'

    body['email'] = 'second@clinic.test'
    r = client.post('/api/admin/register', body, format='json')
    assert r.status_code == 403
    assert not User.objects.filter(email='second@clinic.test').exists()


def test_login_is_throttled(patient):
    client = APIClient()
    for _ in range(10):
        login(client, patient.email, 'wrong-password')
    r = login(client, patient.email)
    assert r.status_code == 429
    assert r.data['success'] is False


def test_healthz(db):
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'success': True, 'data': {'db': True}}


def test_metrics_endpoint(db):
    r = APIClient().get('/metrics')
    assert r.status_code == 200
    assert b'django_http_requests' in r.content
