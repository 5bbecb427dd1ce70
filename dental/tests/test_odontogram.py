from decimal import Decimal

import pytest
from django.urls import reverse

from dental.exceptions import NotFoundError, ValidationError
from dental.models import AuditEvent, FinancialTransaction, Patient, Tooth, ToothHistory
from dental.policies import AccessContext
from dental.services import odontogram

pytestmark = pytest.mark.django_db


def put_tooth(client, patient, **body):
    return client.put(reverse('update_tooth', args=[patient.id]), body, format='json')


def test_first_update_records_null_previous_status(dentist, patient, client_for):
    r = put_tooth(client_for(dentist), patient, number=16, status='CAVITY', notes='Occlusal caries')
    assert r.status_code == 200
    assert r.data['number'] == 16 and r.data['status'] == 'CAVITY'

    history = ToothHistory.objects.get(patient=patient, tooth_number=16)
    assert history.previous_status is None
    assert history.new_status == 'CAVITY'
    assert history.dentist_id == dentist.id
    assert history.transaction_id is None
    assert not FinancialTransaction.objects.exists()
    assert AuditEvent.objects.filter(action='tooth_update', user=dentist).count() == 1


def test_second_update_captures_previous_status(dentist, patient, client_for):
    client = client_for(dentist)
    put_tooth(client, patient, number=16, status='CAVITY')
    put_tooth(client, patient, number=16, status='RESTORED')

    assert Tooth.objects.filter(patient=patient, number=16).count() == 1
    assert Tooth.objects.get(patient=patient, number=16).status == 'RESTORED'
    latest = ToothHistory.objects.filter(patient=patient, tooth_number=16).order_by('-id').first()
    assert (latest.previous_status, latest.new_status) == ('CAVITY', 'RESTORED')


def test_procedure_with_amount_books_pending_income(dentist, patient, procedure, client_for):
    r = put_tooth(client_for(dentist), patient, number=21, status='RESTORED',
                  procedureId=procedure.id, amount='250.00')
    assert r.status_code == 200
    assert r.data['lastProcedureId'] == procedure.id
    assert r.data['lastProcedure']['name'] == 'Composite restoration'

    txn = FinancialTransaction.objects.get()
    assert txn.type == 'INCOME' and txn.category == 'PROCEDURE' and txn.status == 'PENDING'
    assert txn.amount == Decimal('250.00')
    assert txn.description == 'Composite restoration - Tooth 21'
    assert txn.patient_id == patient.id
    assert txn.created_by_id == dentist.id

    history = ToothHistory.objects.get()
    assert history.transaction_id == txn.id
    assert history.procedure_id == procedure.id
    assert history.amount == Decimal('250.00')


def test_procedure_without_amount_books_nothing(dentist, patient, procedure, client_for):
    put_tooth(client_for(dentist), patient, number=21, status='RESTORED', procedureId=procedure.id)
    put_tooth(client_for(dentist), patient, number=22, status='RESTORED', procedureId=procedure.id, amount=0)
    assert not FinancialTransaction.objects.exists()
    assert ToothHistory.objects.count() == 2


def test_unknown_procedure_still_bills(dentist, patient, client_for):
    r = put_tooth(client_for(dentist), patient, number=36, status='CANAL', procedureId=9999, amount='700')
    assert r.status_code == 200
    txn = FinancialTransaction.objects.get()
    assert txn.description == 'Procedure - Tooth 36'
    assert txn.status == 'PENDING'
    history = ToothHistory.objects.get()
    assert history.procedure_id is None
    assert history.transaction_id == txn.id


def test_failure_rolls_back_ledger_entry(dentist, patient, procedure, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError('disk full')

    monkeypatch.setattr(ToothHistory.objects, 'create', boom)
    ctx = AccessContext.from_user(dentist)
    with pytest.raises(RuntimeError):
        odontogram.update_tooth(ctx, patient.id, number=11, status='RESTORED',
                                procedure_id=procedure.id, amount=Decimal('100'))
    assert not FinancialTransaction.objects.exists()
    assert not Tooth.objects.exists()
    assert not AuditEvent.objects.filter(action='tooth_update').exists()


@pytest.mark.parametrize('number', [10, 19, 29, 50, 0])
def test_invalid_tooth_number(dentist, patient, client_for, number):
    r = put_tooth(client_for(dentist), patient, number=number, status='HEALTHY')
    assert r.status_code == 400
    assert not ToothHistory.objects.exists()


def test_invalid_status_via_service(dentist, patient):
    with pytest.raises(ValidationError):
        odontogram.update_tooth(AccessContext.from_user(dentist), patient.id, number=11, status='BROKEN')


def test_unknown_patient(dentist, client_for):
    ghost = Patient(id=4242)
    r = put_tooth(client_for(dentist), ghost, number=11, status='HEALTHY')
    assert r.status_code == 404
    with pytest.raises(NotFoundError):
        odontogram.get_patient_odontogram(4242)


def test_only_dentists_update_teeth(secretary, admin, patient, client_for):
    assert put_tooth(client_for(secretary), patient, number=11, status='HEALTHY').status_code == 403
    assert put_tooth(client_for(admin), patient, number=11, status='HEALTHY').status_code == 403


def test_chart_ordered_by_number(dentist, secretary, patient, client_for):
    client = client_for(dentist)
    for number in (48, 11, 26):
        put_tooth(client, patient, number=number, status='CAVITY')
    r = client_for(secretary).get(reverse('patient_odontogram', args=[patient.id]))
    assert r.status_code == 200
    assert [t['number'] for t in r.data] == [11, 26, 48]


def test_history_newest_first(dentist, patient, procedure, client_for):
    client = client_for(dentist)
    put_tooth(client, patient, number=46, status='CAVITY')
    put_tooth(client, patient, number=46, status='RESTORED', procedureId=procedure.id, amount='250')
    put_tooth(client, patient, number=46, status='MISSING')
    put_tooth(client, patient, number=45, status='CAVITY')

    r = client.get(reverse('tooth_history', args=[patient.id, 46]))
    assert r.status_code == 200
    assert [h['newStatus'] for h in r.data] == ['MISSING', 'RESTORED', 'CAVITY']
    assert [h['previousStatus'] for h in r.data] == ['RESTORED', 'CAVITY', None]
    restored = r.data[1]
    assert restored['procedure']['id'] == procedure.id
    assert restored['dentist'] == {'id': dentist.id, 'name': dentist.name}
    assert restored['transaction']['status'] == 'PENDING'


def test_history_invalid_tooth_number(dentist, patient, client_for):
    r = client_for(dentist).get(reverse('tooth_history', args=[patient.id, 99]))
    assert r.status_code == 400


def test_update_locks_patient_row(dentist, patient, monkeypatch):
    locked = []
    original = Patient.objects.select_for_update

    def recording_select_for_update(*args, **kwargs):
        locked.append(True)
        return original(*args, **kwargs)

    monkeypatch.setattr(Patient.objects, 'select_for_update', recording_select_for_update)
    ctx = AccessContext.from_user(dentist)
    odontogram.update_tooth(ctx, patient.id, number=17, status='CAVITY')
    odontogram.update_tooth(ctx, patient.id, number=17, status='RESTORED')

    assert len(locked) == 2
    history = ToothHistory.objects.filter(patient=patient, tooth_number=17).order_by('id')
    assert [(h.previous_status, h.new_status) for h in history] == [(None, 'CAVITY'), ('CAVITY', 'RESTORED')]
