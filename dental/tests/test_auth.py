import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from dental.models import AuditEvent, Role, User
from dental.tests.conftest import PASSWORD, make_user

pytestmark = pytest.mark.django_db


def login(client, email, password=PASSWORD):
    return client.post(reverse('login_view'), {'email': email, 'password': password}, format='json')


def test_login_returns_token_and_user(dentist):
    r = login(APIClient(), 'dentist@clinic.test')
    assert r.status_code == 200
    assert r.data['token'] and r.data['refresh']
    assert r.data['user']['email'] == 'dentist@clinic.test'
    assert r.data['user']['role'] == Role.DENTIST
    assert 'password' not in r.data['user']
    assert AuditEvent.objects.filter(action='login', user=dentist, detail__result='ok').exists()


def test_login_email_is_case_insensitive(dentist):
    r = login(APIClient(), 'Dentist@Clinic.TEST')
    assert r.status_code == 200


def test_login_with_wrong_password_is_rejected(dentist):
    r = login(APIClient(), 'dentist@clinic.test', 'wrong-password')
    assert r.status_code == 401
    assert r.data == {'error': 'Invalid credentials'}
    assert AuditEvent.objects.filter(action='login', detail__result='fail').count() == 1


def test_login_unknown_email_is_rejected(db):
    r = login(APIClient(), 'nobody@clinic.test')
    assert r.status_code == 401
    assert r.data['error'] == 'Invalid credentials'


def test_inactive_user_cannot_login(dentist):
    dentist.is_active = False
    dentist.save()
    assert login(APIClient(), 'dentist@clinic.test').status_code == 401


def test_login_requires_fields(db):
    r = APIClient().post(reverse('login_view'), {'email': 'not-an-email'}, format='json')
    assert r.status_code == 400
    assert 'error' in r.data
    assert set(r.data['details']) == {'email', 'password'}


def test_bearer_token_round_trip(secretary):
    client = APIClient()
    token = login(client, 'secretary@clinic.test').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    r = client.get(reverse('me_view'))
    assert r.status_code == 200
    assert r.data['id'] == secretary.id
    assert r.data['role'] == Role.SECRETARY


def test_missing_token_is_unauthenticated(db):
    r = APIClient().get(reverse('me_view'))
    assert r.status_code == 401
    assert 'error' in r.data


def test_garbage_token_is_unauthenticated(db):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer not.a.jwt')
    assert client.get(reverse('patients')).status_code == 401


def test_token_with_stale_role_is_rejected(secretary):
    client = APIClient()
    token = login(client, 'secretary@clinic.test').data['token']
    User.objects.filter(id=secretary.id).update(role=Role.ADMIN)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    assert client.get(reverse('me_view')).status_code == 401


def test_refresh_issues_new_access_token(dentist):
    client = APIClient()
    refresh = login(client, 'dentist@clinic.test').data['refresh']
    r = client.post(reverse('refresh_view'), {'refresh': refresh}, format='json')
    assert r.status_code == 200
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
    assert client.get(reverse('me_view')).data['id'] == dentist.id


def test_refresh_with_invalid_token(db):
    r = APIClient().post(reverse('refresh_view'), {'refresh': 'bogus'}, format='json')
    assert r.status_code == 401


def test_login_is_throttled(dentist):
    client = APIClient()
    for _ in range(10):
        assert login(client, 'dentist@clinic.test', 'wrong-password').status_code == 401
    assert login(client, 'dentist@clinic.test', 'wrong-password').status_code == 429


class TestRegister:
    payload = {'name': 'First Person', 'email': 'first@clinic.test', 'password': PASSWORD, 'role': 'SECRETARY'}

    def test_first_user_becomes_admin(self, db):
        r = APIClient().post(reverse('register_view'), self.payload, format='json')
        assert r.status_code == 201
        assert r.data['user']['role'] == Role.ADMIN
        assert r.data['token']

    def test_anonymous_registration_closed_once_users_exist(self, admin):
        r = APIClient().post(reverse('register_view'), self.payload, format='json')
        assert r.status_code == 401
        assert not User.objects.filter(email='first@clinic.test').exists()

    def test_open_registration_setting(self, admin, settings):
        settings.ALLOW_OPEN_REGISTRATION = True
        r = APIClient().post(reverse('register_view'), self.payload, format='json')
        assert r.status_code == 201
        assert r.data['user']['role'] == Role.SECRETARY

    def test_admin_can_register(self, admin, client_for):
        payload = dict(self.payload, role='DENTIST')
        r = client_for(admin).post(reverse('register_view'), payload, format='json')
        assert r.status_code == 201
        assert r.data['user']['role'] == Role.DENTIST

    def test_non_admin_cannot_register(self, secretary, client_for):
        r = client_for(secretary).post(reverse('register_view'), self.payload, format='json')
        assert r.status_code == 400

    def test_duplicate_email_conflicts(self, admin, client_for):
        payload = dict(self.payload, email='ADMIN@clinic.test')
        r = client_for(admin).post(reverse('register_view'), payload, format='json')
        assert r.status_code == 400
        assert r.data['error'] == 'Email is already in use'

    def test_common_password_rejected(self, admin, client_for):
        payload = dict(self.payload, password='password')
        r = client_for(admin).post(reverse('register_view'), payload, format='json')
        assert r.status_code == 400
