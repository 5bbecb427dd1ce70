import pytest
from django.urls import reverse
from django.utils import timezone

from dental.models import Appointment, AuditEvent, FinancialTransaction, MedicalRecord, Role, User
from dental.tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db


def test_any_role_lists_users_without_hashes(admin, dentist, secretary, client_for):
    r = client_for(dentist).get(reverse('users'))
    assert r.status_code == 200
    assert [u['name'] for u in r.data] == ['Alice Admin', 'Dr. Bruno', 'Sofia Secretary']
    assert all('password' not in u for u in r.data)

    dentists = client_for(secretary).get(reverse('users'), {'role': 'DENTIST'})
    assert [u['id'] for u in dentists.data] == [dentist.id]


def test_admin_creates_user(admin, client_for):
    body = {'name': 'New Dentist', 'email': 'New@Clinic.test', 'password': PASSWORD, 'role': 'DENTIST'}
    r = client_for(admin).post(reverse('users'), body, format='json')
    assert r.status_code == 201
    assert r.data['email'] == 'new@clinic.test'
    user = User.objects.get(email='new@clinic.test')
    assert user.check_password(PASSWORD)
    assert user.password != PASSWORD
    assert AuditEvent.objects.filter(action='user_create', object_id=user.id, user=admin).exists()


def test_non_admin_cannot_create(secretary, client_for):
    body = {'name': 'Someone', 'email': 's@clinic.test', 'password': PASSWORD, 'role': 'ADMIN'}
    assert client_for(secretary).post(reverse('users'), body, format='json').status_code == 403


def test_duplicate_email_conflict(admin, dentist, client_for):
    body = {'name': 'Copy', 'email': 'dentist@clinic.test', 'password': PASSWORD, 'role': 'DENTIST'}
    r = client_for(admin).post(reverse('users'), body, format='json')
    assert r.status_code == 400
    assert r.data['error'] == 'Email is already in use'


def test_update_user(admin, dentist, secretary, client_for):
    url = reverse('user_detail', args=[dentist.id])
    client = client_for(admin)
    r = client.put(url, {'name': 'Dr. Bruno Silva', 'password': 'Novasenha#99'}, format='json')
    assert r.status_code == 200
    dentist.refresh_from_db()
    assert dentist.name == 'Dr. Bruno Silva'
    assert dentist.check_password('Novasenha#99')

    clash = client.put(url, {'email': secretary.email}, format='json')
    assert clash.status_code == 400
    same = client.put(url, {'email': dentist.email}, format='json')
    assert same.status_code == 200


def test_get_missing_user(admin, client_for):
    assert client_for(admin).get(reverse('user_detail', args=[999])).status_code == 404
    assert client_for(admin).delete(reverse('user_detail', args=[999])).status_code == 404


def test_delete_free_user(admin, secretary, client_for):
    r = client_for(admin).delete(reverse('user_detail', args=[secretary.id]))
    assert r.status_code == 204
    assert not User.objects.filter(id=secretary.id).exists()
    assert AuditEvent.objects.filter(action='user_delete', object_id=secretary.id).exists()


def test_delete_blocked_by_appointment_every_time(admin, dentist, patient, client_for):
    Appointment.objects.create(patient=patient, dentist=dentist, date=timezone.now())
    url = reverse('user_detail', args=[dentist.id])
    for _ in range(2):
        r = client_for(admin).delete(url)
        assert r.status_code == 400
        assert r.data['error'] == 'Cannot delete a user with appointments or medical records'
    assert User.objects.filter(id=dentist.id).exists()


def test_delete_blocked_by_medical_record(admin, dentist, patient, client_for):
    MedicalRecord.objects.create(patient=patient, dentist=dentist, description='Initial evaluation done')
    assert client_for(admin).delete(reverse('user_detail', args=[dentist.id])).status_code == 400


def test_delete_blocked_by_ledger_entry(admin, secretary, client_for):
    FinancialTransaction.objects.create(type='EXPENSE', category='RENT', amount='10', description='x',
                                        created_by=secretary)
    r = client_for(admin).delete(reverse('user_detail', args=[secretary.id]))
    assert r.status_code == 400
    assert User.objects.filter(id=secretary.id).exists()


def test_non_admin_cannot_view_detail(dentist, secretary, client_for):
    assert client_for(dentist).get(reverse('user_detail', args=[secretary.id])).status_code == 403


def test_role_must_be_known(admin, client_for):
    body = {'name': 'Someone', 'email': 'x@clinic.test', 'password': PASSWORD, 'role': Role.ADMIN + 'X'}
    assert client_for(admin).post(reverse('users'), body, format='json').status_code == 400
