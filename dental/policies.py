"""
Row-level access rules.

Route-level gates live in :mod:`dental.permissions`; the rules here
decide which rows an authenticated caller may see or change.  Every
service that scopes by role receives an :class:`AccessContext` built
once per request instead of inspecting ``request.user`` itself.
"""
from __future__ import annotations

from dataclasses import dataclass

from django.db.models import QuerySet

from .exceptions import AuthorizationError
from .models import Appointment, FinancialTransaction, Role


@dataclass(frozen=True)
class AccessContext:
    user_id: int
    role: str

    @classmethod
    def from_user(cls, user) -> "AccessContext":
        return cls(user_id=user.id, role=user.role)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_dentist(self) -> bool:
        return self.role == Role.DENTIST


def sees_only_own(ctx: AccessContext) -> bool:
    """Dentists are confined to their own appointments and ledger entries."""
    return ctx.is_dentist


def scope_appointments(qs: QuerySet, ctx: AccessContext) -> QuerySet:
    if sees_only_own(ctx):
        return qs.filter(dentist_id=ctx.user_id)
    return qs


def scope_transactions(qs: QuerySet, ctx: AccessContext) -> QuerySet:
    if sees_only_own(ctx):
        return qs.filter(created_by_id=ctx.user_id)
    return qs


def ensure_can_update_appointment(ctx: AccessContext, appointment: Appointment) -> None:
    if sees_only_own(ctx) and appointment.dentist_id != ctx.user_id:
        raise AuthorizationError('You can only update your own appointments')


def ensure_can_modify_transaction(ctx: AccessContext, txn: FinancialTransaction) -> None:
    if sees_only_own(ctx) and txn.created_by_id != ctx.user_id:
        raise AuthorizationError('You can only access transactions you created')
