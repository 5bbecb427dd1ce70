"""
Financial ledger.

Dentists only ever see and touch entries they created; the other roles
see the whole ledger.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from django.db.models import Count, Q, Sum
from django.utils import timezone

from dental.exceptions import NotFoundError, ValidationError
from dental.models import Appointment, FinancialTransaction, Patient
from dental.policies import AccessContext, ensure_can_modify_transaction, scope_transactions

logger = logging.getLogger(__name__)

Txn = FinancialTransaction


def format_transaction(t: FinancialTransaction) -> dict:
    return {
        'id': t.id,
        'type': t.type,
        'category': t.category,
        'amount': t.amount,
        'description': t.description,
        'date': t.date.isoformat(),
        'status': t.status,
        'patientId': t.patient_id,
        'appointmentId': t.appointment_id,
        'createdById': t.created_by_id,
        'patient': {'id': t.patient.id, 'name': t.patient.name} if t.patient_id else None,
        'appointment': {'id': t.appointment.id, 'date': t.appointment.date.isoformat()} if t.appointment_id else None,
        'createdBy': {'id': t.created_by.id, 'name': t.created_by.name},
        'createdAt': t.created_at.isoformat() if t.created_at else None,
    }


def _bound(value, *, end: bool):
    """Date filters are inclusive; a bare date covers the whole day."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        dt = datetime.combine(value, time.max if end else time.min)
        return timezone.make_aware(dt)
    return value


def _date_range(qs, start, end):
    start, end = _bound(start, end=False), _bound(end, end=True)
    if start is not None:
        qs = qs.filter(date__gte=start)
    if end is not None:
        qs = qs.filter(date__lte=end)
    return qs


def _check_category(txn_type: str, category: str) -> None:
    if category not in Txn.categories_for(txn_type):
        raise ValidationError(f'Category {category} is not valid for {txn_type} transactions')


def _resolve_links(fields: dict) -> dict:
    if fields.get('patient_id') is not None and not Patient.objects.filter(id=fields['patient_id']).exists():
        raise NotFoundError('Patient not found')
    if fields.get('appointment_id') is not None and not Appointment.objects.filter(id=fields['appointment_id']).exists():
        raise NotFoundError('Appointment not found')
    return fields


def _base():
    return Txn.objects.select_related('patient', 'appointment', 'created_by')


def list_transactions(ctx: AccessContext, *, type=None, category=None, status=None,
                      patient_id=None, start_date=None, end_date=None):
    qs = scope_transactions(_base(), ctx)
    if type:
        qs = qs.filter(type=type)
    if category:
        qs = qs.filter(category=category)
    if status:
        qs = qs.filter(status=status)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    qs = _date_range(qs, start_date, end_date)
    return qs.order_by('-date', '-id')


def get_transaction(ctx: AccessContext, txn_id: int) -> FinancialTransaction:
    txn = _base().filter(id=txn_id).first()
    if not txn:
        raise NotFoundError('Transaction not found')
    ensure_can_modify_transaction(ctx, txn)
    return txn


def create_transaction(ctx: AccessContext, *, type: str, category: str, amount: Decimal,
                       description: str, date=None, status: Optional[str] = None,
                       patient_id=None, appointment_id=None) -> FinancialTransaction:
    _check_category(type, category)
    _resolve_links({'patient_id': patient_id, 'appointment_id': appointment_id})
    txn = Txn.objects.create(
        type=type, category=category, amount=amount, description=description,
        date=date or timezone.now(), status=status or Txn.Status.PENDING,
        patient_id=patient_id, appointment_id=appointment_id, created_by_id=ctx.user_id,
    )
    logger.info('transaction %s (%s %s) created by user %s', txn.id, type, amount, ctx.user_id)
    return _base().get(id=txn.id)


def update_transaction(ctx: AccessContext, txn_id: int, **fields) -> FinancialTransaction:
    txn = get_transaction(ctx, txn_id)
    if 'type' in fields or 'category' in fields:
        _check_category(fields.get('type', txn.type), fields.get('category', txn.category))
    _resolve_links(fields)
    for name, value in fields.items():
        setattr(txn, name, value)
    if fields:
        txn.save()
    return _base().get(id=txn.id)


def delete_transaction(ctx: AccessContext, txn_id: int) -> None:
    txn = get_transaction(ctx, txn_id)
    txn.delete()
    logger.info('transaction %s deleted by user %s', txn_id, ctx.user_id)


def financial_summary(ctx: AccessContext, *, start_date=None, end_date=None) -> dict:
    """Totals over PAID entries plus the PENDING income still to collect."""
    qs = _date_range(scope_transactions(Txn.objects.all(), ctx), start_date, end_date)
    paid = Q(status=Txn.Status.PAID)
    pending_income = Q(status=Txn.Status.PENDING, type=Txn.Type.INCOME)
    agg = qs.aggregate(
        income=Sum('amount', filter=paid & Q(type=Txn.Type.INCOME)),
        expenses=Sum('amount', filter=paid & Q(type=Txn.Type.EXPENSE)),
        paid_count=Count('id', filter=paid),
        pending=Sum('amount', filter=pending_income),
        pending_count=Count('id', filter=pending_income),
    )
    income = agg['income'] or Decimal('0')
    expenses = agg['expenses'] or Decimal('0')
    return {
        'income': income,
        'expenses': expenses,
        'balance': income - expenses,
        'pendingIncome': agg['pending'] or Decimal('0'),
        'totalTransactions': agg['paid_count'],
        'pendingTransactions': agg['pending_count'],
    }
