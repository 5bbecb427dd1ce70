from decimal import Decimal

import pytest
from django.urls import reverse

from dental.models import FinancialTransaction as Txn

pytestmark = pytest.mark.django_db


def entry(owner, type='INCOME', category='CONSULTATION', amount='100.00', status='PAID',
          date='2024-03-10T12:00:00Z', **extra):
    return Txn.objects.create(type=type, category=category, amount=Decimal(amount), status=status,
                              date=date, description='entry', created_by=owner, **extra)


def test_create_defaults(dentist, patient, client_for):
    body = {'type': 'INCOME', 'category': 'CONSULTATION', 'amount': '180.50',
            'description': 'Evaluation', 'patientId': patient.id}
    r = client_for(dentist).post(reverse('transactions'), body, format='json')
    assert r.status_code == 201
    assert r.data['status'] == 'PENDING'
    assert r.data['createdById'] == dentist.id
    assert r.data['patient'] == {'id': patient.id, 'name': patient.name}
    assert r.data['amount'] == Decimal('180.50')
    assert r.data['date']


@pytest.mark.parametrize('body', [
    {'type': 'INCOME', 'category': 'RENT', 'amount': '10', 'description': 'x'},
    {'type': 'EXPENSE', 'category': 'CLEANING', 'amount': '10', 'description': 'x'},
    {'type': 'INCOME', 'category': 'CONSULTATION', 'amount': '0', 'description': 'x'},
    {'type': 'INCOME', 'category': 'CONSULTATION', 'amount': '-5', 'description': 'x'},
    {'type': 'TRANSFER', 'category': 'OTHER', 'amount': '10', 'description': 'x'},
])
def test_create_rejects_bad_input(secretary, client_for, body):
    r = client_for(secretary).post(reverse('transactions'), body, format='json')
    assert r.status_code == 400
    assert not Txn.objects.exists()


def test_create_with_unknown_patient(secretary, client_for):
    body = {'type': 'INCOME', 'category': 'OTHER', 'amount': '10', 'description': 'x', 'patientId': 999}
    assert client_for(secretary).post(reverse('transactions'), body, format='json').status_code == 404


def test_dentist_sees_only_own_entries(dentist, other_dentist, admin, client_for):
    mine = entry(dentist)
    entry(other_dentist)
    entry(admin, type='EXPENSE', category='RENT')

    r = client_for(dentist).get(reverse('transactions'))
    assert [t['id'] for t in r.data] == [mine.id]
    assert len(client_for(admin).get(reverse('transactions')).data) == 3


def test_list_filters_and_order(secretary, patient, client_for):
    a = entry(secretary, date='2024-01-05T10:00:00Z', patient=patient)
    b = entry(secretary, date='2024-01-31T23:00:00Z', status='PENDING')
    entry(secretary, date='2024-02-01T10:00:00Z', type='EXPENSE', category='SUPPLIES')
    client = client_for(secretary)

    r = client.get(reverse('transactions'), {'startDate': '2024-01-01', 'endDate': '2024-01-31'})
    assert [t['id'] for t in r.data] == [b.id, a.id]

    assert [t['id'] for t in client.get(reverse('transactions'), {'status': 'PENDING'}).data] == [b.id]
    assert [t['id'] for t in client.get(reverse('transactions'), {'patientId': patient.id}).data] == [a.id]
    assert len(client.get(reverse('transactions'), {'type': 'EXPENSE'}).data) == 1
    assert client.get(reverse('transactions'), {'startDate': 'yesterday'}).status_code == 400


def test_summary_math(secretary, client_for):
    entry(secretary, amount='500.00')
    entry(secretary, amount='250.25')
    entry(secretary, type='EXPENSE', category='RENT', amount='300.00')
    entry(secretary, amount='120.00', status='PENDING')
    entry(secretary, type='EXPENSE', category='SUPPLIES', amount='50.00', status='PENDING')
    entry(secretary, amount='999.00', status='CANCELED')
    entry(secretary, amount='400.00', date='2023-12-31T12:00:00Z')

    r = client_for(secretary).get(reverse('transaction_summary'), {'startDate': '2024-01-01'})
    assert r.status_code == 200
    s = r.data
    assert s['income'] == Decimal('750.25')
    assert s['expenses'] == Decimal('300.00')
    assert s['balance'] == s['income'] - s['expenses']
    assert s['pendingIncome'] == Decimal('120.00')
    assert s['totalTransactions'] == 3
    assert s['pendingTransactions'] == 1


def test_summary_empty(secretary, client_for):
    s = client_for(secretary).get(reverse('transaction_summary')).data
    assert s['income'] == 0 and s['expenses'] == 0 and s['balance'] == 0
    assert s['totalTransactions'] == 0


def test_summary_is_scoped_for_dentists(dentist, other_dentist, client_for):
    entry(dentist, amount='100.00')
    entry(other_dentist, amount='900.00')
    s = client_for(dentist).get(reverse('transaction_summary')).data
    assert s['income'] == Decimal('100.00')
    assert s['totalTransactions'] == 1


def test_dentist_cannot_touch_foreign_entry(dentist, other_dentist, client_for):
    foreign = entry(other_dentist)
    url = reverse('transaction_detail', args=[foreign.id])
    client = client_for(dentist)
    assert client.get(url).status_code == 400
    assert client.put(url, {'status': 'CANCELED'}, format='json').status_code == 400
    r = client.delete(url)
    assert r.status_code == 400
    assert r.data['error'] == 'You can only access transactions you created'
    foreign.refresh_from_db()
    assert foreign.status == 'PAID'


def test_owner_updates_and_deletes(dentist, client_for):
    own = entry(dentist, status='PENDING')
    url = reverse('transaction_detail', args=[own.id])
    client = client_for(dentist)
    r = client.put(url, {'status': 'PAID', 'amount': '120.00'}, format='json')
    assert r.status_code == 200
    assert r.data['status'] == 'PAID' and r.data['amount'] == Decimal('120.00')
    assert client.delete(url).status_code == 204
    assert client.get(url).status_code == 404


def test_update_rechecks_category(secretary, client_for):
    own = entry(secretary)
    r = client_for(secretary).put(reverse('transaction_detail', args=[own.id]), {'category': 'RENT'}, format='json')
    assert r.status_code == 400


def test_admin_manages_any_entry(admin, dentist, client_for):
    txn = entry(dentist)
    url = reverse('transaction_detail', args=[txn.id])
    assert client_for(admin).put(url, {'status': 'CANCELED'}, format='json').status_code == 200
    assert client_for(admin).delete(url).status_code == 204
