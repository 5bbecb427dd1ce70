import pytest
from datetime import date

from django.core.cache import cache
from rest_framework.test import APIClient

from dental.models import Patient, Procedure, Role, User

PASSWORD = 'Sorriso#2024'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # throttle counters live in the default cache
    cache.clear()
    yield
    cache.clear()


def make_user(email, role, name=None):
    return User.objects.create_user(email=email, password=PASSWORD, name=name or email.split('@')[0], role=role)


@pytest.fixture
def admin(db):
    return make_user('admin@clinic.test', Role.ADMIN, 'Alice Admin')


@pytest.fixture
def dentist(db):
    return make_user('dentist@clinic.test', Role.DENTIST, 'Dr. Bruno')


@pytest.fixture
def other_dentist(db):
    return make_user('dentist2@clinic.test', Role.DENTIST, 'Dr. Carla')


@pytest.fixture
def secretary(db):
    return make_user('secretary@clinic.test', Role.SECRETARY, 'Sofia Secretary')


@pytest.fixture
def patient(db):
    return Patient.objects.create(
        name='Paulo Paciente', national_id='12345678901', phone='11999990000', birth_date=date(1990, 5, 17),
    )


@pytest.fixture
def procedure(db):
    return Procedure.objects.create(category='Restorative', name='Composite restoration', price='250.00')


@pytest.fixture
def client_for():
    """Return a factory building an APIClient authenticated as ``user``."""
    def _make(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client
    return _make
