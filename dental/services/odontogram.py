"""
Per-tooth chart (odontogram) for a patient.

A tooth update is one unit of work: the optional ledger entry for the
procedure, the history row and the upserted tooth are written together
or not at all.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction

from dental.exceptions import NotFoundError, ValidationError
from dental.models import TOOTH_NUMBERS, FinancialTransaction, Patient, Procedure, Tooth, ToothHistory
from dental.policies import AccessContext
from dental.services.audit import log_action

logger = logging.getLogger(__name__)


def _procedure_ref(p: Optional[Procedure]) -> Optional[dict]:
    if p is None:
        return None
    return {'id': p.id, 'name': p.name, 'category': p.category, 'price': p.price}


def format_tooth(t: Tooth) -> dict:
    return {
        'id': t.id,
        'patientId': t.patient_id,
        'number': t.number,
        'status': t.status,
        'notes': t.notes or None,
        'lastProcedureId': t.last_procedure_id,
        'lastProcedure': _procedure_ref(t.last_procedure),
        'updatedAt': t.updated_at.isoformat() if t.updated_at else None,
    }


def format_history(h: ToothHistory) -> dict:
    txn = h.transaction
    return {
        'id': h.id,
        'patientId': h.patient_id,
        'toothNumber': h.tooth_number,
        'previousStatus': h.previous_status,
        'newStatus': h.new_status,
        'notes': h.notes or None,
        'procedureId': h.procedure_id,
        'procedure': _procedure_ref(h.procedure),
        'amount': h.amount,
        'dentist': {'id': h.dentist.id, 'name': h.dentist.name},
        'transactionId': h.transaction_id,
        'transaction': None if txn is None else {
            'id': txn.id, 'amount': txn.amount, 'status': txn.status, 'description': txn.description,
        },
        'createdAt': h.created_at.isoformat() if h.created_at else None,
    }


def _check_tooth_number(number: int) -> None:
    if number not in TOOTH_NUMBERS:
        raise ValidationError(f'Invalid tooth number: {number}')


def _require_patient(patient_id: int) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if not patient:
        raise NotFoundError('Patient not found')
    return patient


def get_patient_odontogram(patient_id: int):
    _require_patient(patient_id)
    return Tooth.objects.select_related('last_procedure').filter(patient_id=patient_id).order_by('number')


@transaction.atomic
def update_tooth(ctx: AccessContext, patient_id: int, *, number: int, status: str,
                 notes: str = '', procedure_id: Optional[int] = None,
                 amount: Optional[Decimal] = None) -> Tooth:
    """Change one tooth's status, recording history and billing the procedure.

    When both ``procedure_id`` and a positive ``amount`` are given a
    PENDING income entry is booked against the patient.  An unknown
    procedure still bills the amount; the entry falls back to a generic
    description and the procedure reference is left empty.
    """
    # lock the patient row so concurrent updates of a not-yet-charted tooth serialize
    patient = Patient.objects.select_for_update().filter(id=patient_id).first()
    if not patient:
        raise NotFoundError('Patient not found')
    _check_tooth_number(number)
    if status not in Tooth.Status.values:
        raise ValidationError(f'Invalid tooth status: {status}')

    current = Tooth.objects.select_for_update().filter(patient=patient, number=number).first()
    previous_status = current.status if current else None

    procedure = Procedure.objects.filter(id=procedure_id).first() if procedure_id else None
    txn = None
    if procedure_id and amount is not None and amount > 0:
        label = procedure.name if procedure else 'Procedure'
        txn = FinancialTransaction.objects.create(
            type=FinancialTransaction.Type.INCOME,
            category='PROCEDURE',
            amount=amount,
            description=f'{label} - Tooth {number}',
            status=FinancialTransaction.Status.PENDING,
            patient=patient,
            created_by_id=ctx.user_id,
        )

    ToothHistory.objects.create(
        patient=patient,
        tooth_number=number,
        previous_status=previous_status,
        new_status=status,
        notes=notes or '',
        procedure=procedure,
        amount=amount,
        dentist_id=ctx.user_id,
        transaction=txn,
    )

    tooth, _ = Tooth.objects.update_or_create(
        patient=patient, number=number,
        defaults={'status': status, 'notes': notes or '', 'last_procedure': procedure},
    )
    log_action(user_id=ctx.user_id, action='tooth_update', object_type='tooth', object_id=tooth.id,
               detail={'patientId': patient.id, 'number': number, 'from': previous_status, 'to': status,
                       'transactionId': txn.id if txn else None})
    logger.info('tooth %s of patient %s: %s -> %s', number, patient.id, previous_status, status)
    return tooth


def get_tooth_history(patient_id: int, number: int):
    _require_patient(patient_id)
    _check_tooth_number(number)
    return (
        ToothHistory.objects
        .select_related('procedure', 'dentist', 'transaction')
        .filter(patient_id=patient_id, tooth_number=number)
        .order_by('-created_at', '-id')
    )
