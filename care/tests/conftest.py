import datetime

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from care.models import Appointment, Booking, User

PASSWORD = 'Cl1nic-Pass-2025'


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(email, role, name=None, **extra):
        return User.objects.create_user(
            username=email, email=email, password=PASSWORD, name=name or email.split('@')[0].title(),
            role=role, **extra,
        )
    return _make


@pytest.fixture
def patient(make_user):
    return make_user('pat@clinic.test', User.ROLE_PATIENT, name='Pat Patient')


@pytest.fixture
def other_patient(make_user):
    return make_user('other@clinic.test', User.ROLE_PATIENT, name='Olive Other')


@pytest.fixture
def doctor(make_user):
    return make_user('doc@clinic.test', User.ROLE_DOCTOR, name='Dana Doctor',
                     specialization='cardiologist', department='cardiology')


@pytest.fixture
def other_doctor(make_user):
    return make_user('doc2@clinic.test', User.ROLE_DOCTOR, name='Drew Doctor',
                     specialization='dermatologist', department='dermatology')


@pytest.fixture
def triage_user(make_user):
    return make_user('triage@clinic.test', User.ROLE_TRIAGE, name='Tia Triage')


@pytest.fixture
def admin_user(make_user):
    return make_user('admin@clinic.test', User.ROLE_ADMIN, name='Ada Admin')


@pytest.fixture
def client_for():
    def _client(user=None):
        c = APIClient()
        if user is not None:
            c.force_authenticate(user=user)
        return c
    return _client


@pytest.fixture
def booking(patient):
    return Booking.objects.create(
        patient=patient,
        looking_for='cardiologist',
        symptoms='chest pain',
        priority='medium',
        preferred_date=datetime.date(2025, 6, 1),
        preferred_time='09:00',
    )


@pytest.fixture
def make_appointment(db):
    """Appointment between ``doctor`` and ``patient`` with its own assigned booking."""
    def _make(doctor, patient, status=Appointment.STATUS_SCHEDULED, date=None):
        b = Booking.objects.create(
            patient=patient, looking_for='general', status=Booking.STATUS_ASSIGNED,
            preferred_date=date or datetime.date(2025, 6, 1), preferred_time='10:00',
        )
        return Appointment.objects.create(
            booking=b, patient=patient, doctor=doctor, date=b.preferred_date, time='10:00', status=status,
        )
    return _make
